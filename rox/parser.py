"""Recursive-descent parser for the Rox language.

Each grammar rule below is one ``parse_*`` method. Precedence climbs from
``assignment`` (lowest) to ``primary`` (highest)::

    program     -> declaration* EOF
    declaration -> varDecl | statement
    varDecl     -> "var" IDENT ( "=" expression )? ";"
    statement   -> "print" expression ";" | block | expression ";"
    block       -> "{" declaration* "}"
    expression  -> assignment
    assignment  -> IDENT "=" assignment | equality
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil" | IDENT
                 | "(" expression ")"

A declaration that fails to parse is recorded and the parser skips ahead
to the next statement boundary (see `synchronize`), so one call reports
every independent syntax error in the program.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStatement, Grouping, Literal,
    PrintStatement, Stmt, Unary, VarDeclaration, Variable,
)
from .errors import ParseError, ParseFailed
from .tokens import Token, TokenType

# Tokens that start a new statement; synchronize stops in front of them.
STATEMENT_STARTS = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError('token list must end with an EOF token')
        self.tokens = tokens
        self.pos = 0
        self.errors: List[ParseError] = []

    def parse_program(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        if self.errors:
            raise ParseFailed(self.errors)
        return statements

    # Statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.VAR):
                return self.parse_var_declaration()
            return self.parse_statement()
        except ParseError as e:
            self.errors.append(e)
            self.synchronize()
            return None
        except RecursionError:
            self.errors.append(ParseError(self.peek(), 'Expression nesting too deep'))
            self.synchronize()
            return None

    def parse_var_declaration(self) -> VarDeclaration:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDeclaration(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            value = self.parse_expression()
            self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
            return PrintStatement(value)
        if self.match(TokenType.LEFT_BRACE):
            return Block(tuple(self.parse_block()))
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expr)

    def parse_block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_equality()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise ParseError(equals, 'Invalid assignment target')
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            operand = self.parse_unary()
            return Unary(operator, operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER):
            return Literal(float(self.previous().lexeme))
        if self.match(TokenType.STRING):
            return Literal(self.previous().lexeme)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError(self.peek(), 'Expected expression')

    # Error recovery

    def synchronize(self) -> None:
        """Discard tokens up to the next likely statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # Helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        return self.peek().type == token_type

    def match(self, *token_types: TokenType) -> bool:
        if self.peek().type in token_types:
            self.advance()
            return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise ParseError(self.peek(), message)


def parse(tokens: List[Token]) -> List[Stmt]:
    """Parse a token list into statements, raising ParseFailed on any error."""
    return Parser(tokens).parse_program()
