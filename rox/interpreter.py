"""Tree-walking interpreter for the Rox language.

`Interpreter` executes statements produced by the parser against a chain
of `Environment` scopes. The same environment reference threads through
every statement of a run; blocks push a fresh scope and restore the
previous one on the way out, including when an error unwinds through
them.

Runtime errors are not collected: the first one aborts the run and
propagates to the caller as a `RoxRuntimeError`.

Debug tracing follows the ``-v`` count of the command line:

* level 1 traces each top-level statement,
* level 2 adds declarations, assignments and scope changes,
* level 3 adds the result of every expression.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import IO, Iterable, Iterator, List, Optional

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStatement, ExprVisitor, Grouping,
    Literal, PrintStatement, Stmt, StmtVisitor, Unary, VarDeclaration,
    Variable, accept, left_spine,
)
from .ast_printer import AstPrinter
from .environment import Environment
from .errors import RoxRuntimeError, RoxTypeError
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType
from .values import Value, is_truthy, stringify, type_name, values_equal


class Interpreter(ExprVisitor[Value], StmtVisitor[None]):
    """Core interpreter that executes Rox ASTs."""
    def __init__(self, environment: Optional[Environment] = None, out: Optional[IO[str]] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.globals = environment if environment is not None else Environment()
        self.environment = self.globals
        # None means "whatever sys.stdout is when print runs"
        self.out = out
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self.printer = AstPrinter()

    def debug(self, level: int, msg: str) -> None:
        if self.debug_level >= level and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: Iterable[Stmt]) -> None:
        for stmt in statements:
            if self.debug_level >= 1:
                self.debug(1, f"exec {self.printer.print(stmt)}")
            try:
                self.execute(stmt)
            except RecursionError:
                raise RoxRuntimeError('Expression nesting too deep') from None

    def execute(self, stmt: Stmt) -> None:
        accept(stmt, self)

    def evaluate(self, expr: Expr) -> Value:
        value = accept(expr, self)
        if self.debug_level >= 3:
            self.debug(3, f"eval {self.printer.print(expr)} -> {stringify(value)}")
        return value

    @contextmanager
    def scope(self) -> Iterator[Environment]:
        """Run the body in a new scope nested in the current one."""
        previous = self.environment
        self.environment = Environment(enclosing=previous)
        if self.debug_level >= 2:
            self.debug(2, f"push scope depth={self.environment.depth}")
        try:
            yield self.environment
        finally:
            self.environment = previous
            if self.debug_level >= 2:
                self.debug(2, f"pop scope depth={previous.depth}")

    # Statements

    def visit_expression_statement(self, stmt: ExpressionStatement) -> None:
        self.evaluate(stmt.expression)

    def visit_print_statement(self, stmt: PrintStatement) -> None:
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.out)

    def visit_var_declaration(self, stmt: VarDeclaration) -> None:
        value = self.evaluate(stmt.initializer) if stmt.initializer is not None else None
        self.environment.define(stmt.name.lexeme, value)
        if self.debug_level >= 2:
            self.debug(2, f"declare {stmt.name.lexeme}: {type_name(value)} = {stringify(value)}")

    def visit_block(self, stmt: Block) -> None:
        with self.scope():
            for inner in stmt.statements:
                self.execute(inner)

    # Expressions

    def visit_literal(self, expr: Literal) -> Value:
        return expr.value

    def visit_grouping(self, expr: Grouping) -> Value:
        return self.evaluate(expr.expression)

    def visit_variable(self, expr: Variable) -> Value:
        return self.environment.get(expr.name.lexeme)

    def visit_assign(self, expr: Assign) -> Value:
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name.lexeme, value)
        if self.debug_level >= 2:
            self.debug(2, f"assign {expr.name.lexeme} = {stringify(value)}")
        return value

    def visit_unary(self, expr: Unary) -> Value:
        operand = self.evaluate(expr.operand)
        op = expr.operator.type
        if op == TokenType.MINUS:
            if not is_number(operand):
                raise RoxTypeError(f"Operand of unary '-' must be a Number, got {type_name(operand)}")
            return -operand
        if op == TokenType.BANG:
            return not is_truthy(operand)
        raise RoxTypeError(f"Unsupported unary operator '{expr.operator.lexeme}'")

    def visit_binary(self, expr: Binary) -> Value:
        # a + b + c + ... nests to the left; fold it in a loop
        first, steps = left_spine(expr)
        left = self.evaluate(first)
        for operator, operand in steps:
            right = self.evaluate(operand)
            left = self.apply_binary(operator, left, right)
        return left

    def apply_binary(self, operator: Token, left: Value, right: Value) -> Value:
        op = operator.type

        if op == TokenType.EQUAL_EQUAL:
            return values_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not values_equal(left, right)

        if op == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise RoxTypeError(
                f"Operands of '+' must be two Numbers or two Strings, got {type_name(left)} and {type_name(right)}")

        check_number_operands(operator, left, right)
        if op == TokenType.MINUS:
            return left - right
        if op == TokenType.STAR:
            return left * right
        if op == TokenType.SLASH:
            return divide(left, right)
        if op == TokenType.GREATER:
            return left > right
        if op == TokenType.GREATER_EQUAL:
            return left >= right
        if op == TokenType.LESS:
            return left < right
        if op == TokenType.LESS_EQUAL:
            return left <= right
        raise RoxTypeError(f"Unsupported binary operator '{operator.lexeme}'")


def is_number(value: Value) -> bool:
    return isinstance(value, float)


def check_number_operands(operator: Token, left: Value, right: Value) -> None:
    if not is_number(left):
        raise RoxTypeError(f"Left operand of '{operator.lexeme}' must be a Number, got {type_name(left)}")
    if not is_number(right):
        raise RoxTypeError(f"Right operand of '{operator.lexeme}' must be a Number, got {type_name(right)}")


def divide(left: float, right: float) -> float:
    """IEEE 754 division: x/0 gives a signed infinity and 0/0 gives NaN."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        negative = (left < 0) != (math.copysign(1.0, right) < 0)
        return float('-inf') if negative else float('inf')
    return left / right


def interpret(statements: Iterable[Stmt], environment: Optional[Environment] = None) -> None:
    """Execute statements against `environment` (a fresh global scope if omitted)."""
    Interpreter(environment).interpret(statements)


def run_source(source: str, interpreter: Interpreter) -> List[Stmt]:
    """Scan, parse and execute one source buffer.

    Raises ScanFailed or ParseFailed before anything runs if the source is
    malformed, or the first RoxRuntimeError raised while executing.
    """
    tokens = scan(source)
    if interpreter.debug_level >= 1:
        interpreter.debug(1, f"scanned {len(tokens)} tokens")
    statements = parse(tokens)
    if interpreter.debug_level >= 1:
        interpreter.debug(1, f"parsed {len(statements)} statements")
    interpreter.interpret(statements)
    return statements
