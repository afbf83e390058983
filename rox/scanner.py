"""Scanner for the Rox language.

Turns a source buffer into a list of tokens. The scanner never stops at
the first bad character: it records the error, skips the character and
carries on, so a single pass reports every lexical problem in the buffer.
"""

from __future__ import annotations

from typing import List, Optional

from .errors import LexError, RoxError, ScanFailed, UnterminatedString
from .tokens import EQUAL_SUFFIXED, KEYWORDS, SINGLE_CHAR, Token, TokenType


def is_digit(c: Optional[str]) -> bool:
    return c is not None and '0' <= c <= '9'


def is_alpha(c: Optional[str]) -> bool:
    return c is not None and ('a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_')


def is_alnum(c: Optional[str]) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.errors: List[RoxError] = []
        self.start = 0
        self.current = 0
        self.line = 0

    def scan_tokens(self) -> List[Token]:
        """Scan the whole buffer.

        Raises ScanFailed carrying every lexical error if there was at
        least one; otherwise returns the tokens terminated by EOF.
        """
        while not self.is_at_end():
            self.start = self.current
            try:
                self.scan_token()
            except LexError as e:
                self.errors.append(e)
        if self.errors:
            raise ScanFailed(self.errors)
        self.tokens.append(Token(TokenType.EOF, '', self.line))
        return self.tokens

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHAR:
            self.add_token(SINGLE_CHAR[c])
        elif c in EQUAL_SUFFIXED:
            alone, paired = EQUAL_SUFFIXED[c]
            self.add_token(paired if self.match('=') else alone)
        elif c == '/':
            if self.match('/'):
                # comment runs to end of line
                while self.peek() is not None and self.peek() != '\n':
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif c in (' ', '\r', '\t'):
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.scan_string()
        elif is_digit(c):
            self.scan_number()
        elif is_alpha(c):
            self.scan_identifier()
        else:
            raise LexError('Unexpected character', self.line)

    def scan_string(self) -> None:
        while self.peek() is not None and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            raise UnterminatedString(self.line)
        self.advance()  # closing quote
        # the lexeme of a string token excludes its quotes
        self.tokens.append(Token(TokenType.STRING, self.source[self.start + 1:self.current - 1], self.line))

    def scan_number(self) -> None:
        while is_digit(self.peek()):
            self.advance()
        # a trailing '.' belongs to the number only when a digit follows it
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        self.add_token(TokenType.NUMBER)

    def scan_identifier(self) -> None:
        while is_alnum(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    # Helpers

    def add_token(self, token_type: TokenType) -> None:
        self.tokens.append(Token(token_type, self.source[self.start:self.current], self.line))

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> Optional[str]:
        if self.is_at_end():
            return None
        return self.source[self.current]

    def peek_next(self) -> Optional[str]:
        if self.current + 1 >= len(self.source):
            return None
        return self.source[self.current + 1]


def scan(source: str) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF."""
    return Scanner(source).scan_tokens()
