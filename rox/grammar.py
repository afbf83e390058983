"""Reference grammar for the Rox language.

A declarative Lark grammar for the same language the hand-written
`rox.parser` accepts, with a transformer that builds the very same AST
classes. `python -m rox --grammar` runs programs through it, and tests
parse programs with both front ends and compare the trees. It does not
attempt error recovery; the first syntax error ends the parse.

Reserved words that Rox has no statement for yet (`class`, `fun`, `and`,
...) are still not identifiers, the same as in the scanner.

`parse_program` is the public entry point.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Assign, Binary, Block, ExpressionStatement, Grouping, Literal,
    PrintStatement, Stmt, Unary, VarDeclaration, Variable,
)
from .errors import ParseError, ParseFailed
from .tokens import FIXED_LEXEMES, Token, TokenType


ROX_GRAMMAR = r"""
    start: declaration*

    ?declaration: var_decl
                | statement

    var_decl: "var" IDENT ("=" expression)? ";"

    ?statement: print_stmt
              | block
              | expr_stmt

    print_stmt: "print" expression ";"
    block: "{" declaration* "}"
    expr_stmt: expression ";"

    // Expressions, lowest precedence first
    ?expression: assignment
    ?assignment: IDENT "=" assignment -> assign
               | equality
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: BANG unary -> unary_op
          | MINUS unary -> unary_op
          | primary
    ?primary: NUMBER -> number
            | STRING -> string
            | "true" -> true
            | "false" -> false
            | "nil" -> nil
            | IDENT -> variable
            | "(" expression ")" -> grouping

    BANG_EQUAL: "!="
    EQUAL_EQUAL: "=="
    GREATER_EQUAL: ">="
    GREATER: ">"
    LESS_EQUAL: "<="
    LESS: "<"
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    BANG: "!"

    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/
    // reserved words with no rule of their own must not lex as names
    IDENT: /(?!(?:and|class|else|for|fun|if|or|return|super|this|while)(?![A-Za-z0-9_]))[A-Za-z_][A-Za-z0-9_]*/

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT
    %ignore /[ \t\r\n]+/
"""


ROX_PARSER = Lark(
    ROX_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
)


def to_token(token: LarkToken) -> Token:
    """Convert a Lark token to a Rox token (Lark counts lines from 1)."""
    lexeme = str(token)
    if token.type == 'IDENT':
        token_type = TokenType.IDENTIFIER
    elif token.type == 'NUMBER':
        token_type = TokenType.NUMBER
    elif token.type == 'STRING':
        token_type = TokenType.STRING
        lexeme = lexeme[1:-1]
    else:
        token_type = FIXED_LEXEMES[lexeme]
    line = token.line - 1 if token.line is not None else 0
    return Token(token_type, lexeme, line)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def start(self, items) -> List[Stmt]:
        return list(items)

    def var_decl(self, items):
        name = to_token(items[0])
        initializer = items[1] if len(items) > 1 else None
        return VarDeclaration(name, initializer)

    def print_stmt(self, items):
        return PrintStatement(items[0])

    def block(self, items):
        return Block(tuple(items))

    def expr_stmt(self, items):
        return ExpressionStatement(items[0])

    # Expressions
    def assign(self, items):
        return Assign(to_token(items[0]), items[1])

    def binary(self, items):
        # items: operand (operator operand)*, folded to the left
        left = items[0]
        for i in range(1, len(items), 2):
            left = Binary(left, to_token(items[i]), items[i + 1])
        return left

    equality = comparison = term = factor = binary

    def unary_op(self, items):
        return Unary(to_token(items[0]), items[1])

    def number(self, items):
        return Literal(float(items[0]))

    def string(self, items):
        return Literal(str(items[0])[1:-1])

    def true(self, items):
        return Literal(True)

    def false(self, items):
        return Literal(False)

    def nil(self, items):
        return Literal(None)

    def variable(self, items):
        return Variable(to_token(items[0]))

    def grouping(self, items):
        return Grouping(items[0])


def parse_program(source: str) -> List[Stmt]:
    """Parse Rox source code with the reference grammar.

    Syntax errors are reported as a ParseFailed holding a single
    ParseError.
    """
    try:
        tree = ROX_PARSER.parse(source)
    except UnexpectedToken as e:
        if e.token.type == '$END':
            token = Token(TokenType.EOF, '', source.count('\n'))
        else:
            token = to_token(e.token)
        raise ParseFailed([ParseError(token, 'Unexpected token')]) from e
    except UnexpectedCharacters as e:
        token = Token(TokenType.IDENTIFIER, source[e.pos_in_stream], e.line - 1)
        raise ParseFailed([ParseError(token, 'Unexpected character')]) from e
    except UnexpectedInput as e:
        token = Token(TokenType.EOF, '', source.count('\n'))
        raise ParseFailed([ParseError(token, 'Unexpected end of input')]) from e
    try:
        return ASTTransformer().transform(tree)
    except (RecursionError, VisitError) as e:
        if isinstance(e, VisitError) and not isinstance(e.orig_exc, RecursionError):
            raise
        token = Token(TokenType.EOF, '', source.count('\n'))
        raise ParseFailed([ParseError(token, 'Expression nesting too deep')]) from None
