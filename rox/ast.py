"""Abstract Syntax Tree (AST) definitions for the Rox language.

Expressions and statements are two closed sets of node classes. A
consumer of the tree subclasses `ExprVisitor` and/or `StmtVisitor`, which
declare one abstract method per node class, and walks the tree with
`accept`. Because every visit method is abstract, a consumer that forgets
a node kind cannot be instantiated.

Nodes are frozen: the parser builds the tree once and nothing changes it
afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, Tuple, TypeVar, Union

from .tokens import Token
from .values import Value

T = TypeVar('T')


# Expressions

@dataclass(frozen=True)
class Literal:
    value: Value


@dataclass(frozen=True)
class Unary:
    operator: Token
    operand: 'Expr'


@dataclass(frozen=True)
class Binary:
    left: 'Expr'
    operator: Token
    right: 'Expr'


@dataclass(frozen=True)
class Grouping:
    expression: 'Expr'


@dataclass(frozen=True)
class Variable:
    name: Token


@dataclass(frozen=True)
class Assign:
    name: Token
    value: 'Expr'


Expr = Union[Literal, Unary, Binary, Grouping, Variable, Assign]


# Statements

@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expr


@dataclass(frozen=True)
class PrintStatement:
    expression: Expr


@dataclass(frozen=True)
class VarDeclaration:
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block:
    statements: Tuple['Stmt', ...]


Stmt = Union[ExpressionStatement, PrintStatement, VarDeclaration, Block]


class ExprVisitor(ABC, Generic[T]):
    @abstractmethod
    def visit_literal(self, expr: Literal) -> T: ...

    @abstractmethod
    def visit_unary(self, expr: Unary) -> T: ...

    @abstractmethod
    def visit_binary(self, expr: Binary) -> T: ...

    @abstractmethod
    def visit_grouping(self, expr: Grouping) -> T: ...

    @abstractmethod
    def visit_variable(self, expr: Variable) -> T: ...

    @abstractmethod
    def visit_assign(self, expr: Assign) -> T: ...


class StmtVisitor(ABC, Generic[T]):
    @abstractmethod
    def visit_expression_statement(self, stmt: ExpressionStatement) -> T: ...

    @abstractmethod
    def visit_print_statement(self, stmt: PrintStatement) -> T: ...

    @abstractmethod
    def visit_var_declaration(self, stmt: VarDeclaration) -> T: ...

    @abstractmethod
    def visit_block(self, stmt: Block) -> T: ...


_DISPATCH: Dict[type, str] = {
    Literal: 'visit_literal',
    Unary: 'visit_unary',
    Binary: 'visit_binary',
    Grouping: 'visit_grouping',
    Variable: 'visit_variable',
    Assign: 'visit_assign',
    ExpressionStatement: 'visit_expression_statement',
    PrintStatement: 'visit_print_statement',
    VarDeclaration: 'visit_var_declaration',
    Block: 'visit_block',
}


def accept(node: Union[Expr, Stmt], visitor):
    """Call the visitor method matching the exact class of `node`."""
    try:
        method = _DISPATCH[type(node)]
    except KeyError:
        raise TypeError(f"accept: unexpected node type {type(node).__name__}") from None
    return getattr(visitor, method)(node)


def left_spine(expr: Binary) -> Tuple[Expr, List[Tuple[Token, Expr]]]:
    """Flatten a left-leaning chain of binary nodes.

    ``1 - 2 - 3`` parses as ``((1 - 2) - 3)``; this returns the innermost
    left operand ``1`` and the steps ``[(-, 2), (-, 3)]`` in evaluation
    order. Long chains can then be walked without recursion.
    """
    steps: List[Tuple[Token, Expr]] = []
    node: Expr = expr
    while isinstance(node, Binary):
        steps.append((node.operator, node.right))
        node = node.left
    steps.reverse()
    return node, steps
