# Rox language package
# This package provides the scanner, parser and tree-walking interpreter for the Rox language.
from .scanner import scan
from .parser import parse
from .interpreter import Interpreter, interpret, run_source
from .environment import Environment
from .errors import (
    RoxError, LexError, UnterminatedString, ParseError, RoxRuntimeError,
    RoxTypeError, UndefinedVariable, ErrorGroup, ScanFailed, ParseFailed,
)

__all__ = [
    'scan',
    'parse',
    'interpret',
    'run_source',
    'Interpreter',
    'Environment',
    'RoxError',
    'LexError',
    'UnterminatedString',
    'ParseError',
    'RoxRuntimeError',
    'RoxTypeError',
    'UndefinedVariable',
    'ErrorGroup',
    'ScanFailed',
    'ParseFailed',
]
