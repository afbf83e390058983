from typing import Iterable, List, Optional

from rox.tokens import Token, TokenType


class RoxError(Exception):
    """Base class for every error a Rox program can produce.

    `str()` of an error is its diagnostic line. Errors that know their
    source line render as ``[line N] CategoryError: message``, the others
    as ``CategoryError: message``.
    """
    category = 'Rox'

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        super().__init__(self.render())

    def render(self) -> str:
        text = f"{self.category}Error: {self.message}"
        if self.line is not None:
            return f"[line {self.line}] {text}"
        return text

    def __str__(self) -> str:
        return self.render()


class LexError(RoxError):
    category = 'Syntax'


class UnterminatedString(LexError):
    def __init__(self, line: int):
        super().__init__('Unterminated string.', line)


class ParseError(RoxError):
    category = 'Parse'

    def __init__(self, token: Token, message: str):
        self.token = token
        self.reason = message
        if token.type == TokenType.EOF:
            where = 'at end'
        else:
            where = f"at '{token.lexeme}'"
        super().__init__(f"{message} {where}", token.line)


class RoxRuntimeError(RoxError):
    """Raised by the interpreter; halts the current run."""
    category = 'Runtime'


class RoxTypeError(RoxRuntimeError):
    category = 'Type'


class UndefinedVariable(RoxRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined variable '{name}'")


class ErrorGroup(Exception):
    """Every error collected by a phase that keeps going after the first."""
    def __init__(self, errors: Iterable[RoxError]):
        self.errors: List[RoxError] = list(errors)
        super().__init__('\n'.join(str(e) for e in self.errors))

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


class ScanFailed(ErrorGroup):
    pass


class ParseFailed(ErrorGroup):
    pass
