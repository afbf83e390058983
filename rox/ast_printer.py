"""Render Rox syntax trees as parenthesized prefix expressions.

``-123 * (45.67)`` prints as ``(* (- 123) (group 45.67))``. The output is
used by ``--print-ast`` and to compare trees built by different parsers.
"""

from __future__ import annotations

from typing import Iterable, List

from .ast import (
    Assign, Binary, Block, ExpressionStatement, ExprVisitor, Grouping,
    Literal, PrintStatement, Stmt, StmtVisitor, Unary, VarDeclaration,
    Variable, accept, left_spine,
)
from .values import stringify


class AstPrinter(ExprVisitor[str], StmtVisitor[str]):

    def print(self, node) -> str:
        return accept(node, self)

    def print_program(self, statements: Iterable[Stmt]) -> List[str]:
        return [self.print(stmt) for stmt in statements]

    def visit_literal(self, expr: Literal) -> str:
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return stringify(expr.value)

    def visit_unary(self, expr: Unary) -> str:
        return self.parenthesize(expr.operator.lexeme, expr.operand)

    def visit_binary(self, expr: Binary) -> str:
        first, steps = left_spine(expr)
        text = self.print(first)
        for operator, right in steps:
            text = f"({operator.lexeme} {text} {self.print(right)})"
        return text

    def visit_grouping(self, expr: Grouping) -> str:
        return self.parenthesize('group', expr.expression)

    def visit_variable(self, expr: Variable) -> str:
        return expr.name.lexeme

    def visit_assign(self, expr: Assign) -> str:
        return self.parenthesize(f"= {expr.name.lexeme}", expr.value)

    def visit_expression_statement(self, stmt: ExpressionStatement) -> str:
        return self.parenthesize(';', stmt.expression)

    def visit_print_statement(self, stmt: PrintStatement) -> str:
        return self.parenthesize('print', stmt.expression)

    def visit_var_declaration(self, stmt: VarDeclaration) -> str:
        if stmt.initializer is None:
            return f"(var {stmt.name.lexeme})"
        return self.parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)

    def visit_block(self, stmt: Block) -> str:
        return self.parenthesize('block', *stmt.statements)

    def parenthesize(self, name: str, *nodes) -> str:
        parts = [name]
        parts.extend(self.print(node) for node in nodes)
        return '(' + ' '.join(parts) + ')'
