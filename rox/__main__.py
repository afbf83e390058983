"""CLI entry point for the Rox interpreter.

Usage:
    python -m rox [-v|-vv|-vvv] [--grammar] [program_file]
    python -m rox [-v...] [--grammar] --print-ast <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --print-ast   Parse the given file and print its syntax tree instead of running it
  --grammar     Parse with the Lark reference grammar instead of the
                hand-written parser (stops at the first syntax error)

Without a program file an interactive prompt starts. Each line is run on
its own against a shared global scope; errors are reported and the prompt
continues. Type ``exit`` or ``quit`` (or send end of input) to leave.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import builtins
import sys
from pathlib import Path

from .ast_printer import AstPrinter
from .errors import ErrorGroup, RoxError
from .grammar import parse_program as parse_with_grammar
from .interpreter import Interpreter, run_source
from .parser import parse
from .scanner import scan

# Status for a program that fails to scan, parse or run.
EXIT_PROGRAM_ERROR = 65
EXIT_WORDS = {'exit', 'exit()', 'quit', 'quit()'}


def report(error: Exception) -> None:
    if isinstance(error, ErrorGroup):
        for e in error.errors:
            print(str(e), file=sys.stderr)
    else:
        print(str(error), file=sys.stderr)


def read_source(program_file: Path) -> str:
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def execute_source(source: str, interpreter: Interpreter, use_grammar: bool = False) -> None:
    if use_grammar:
        interpreter.interpret(parse_with_grammar(source))
    else:
        run_source(source, interpreter)


def print_ast(source: str, use_grammar: bool = False) -> None:
    try:
        statements = parse_with_grammar(source) if use_grammar else parse(scan(source))
    except ErrorGroup as e:
        report(e)
        sys.exit(EXIT_PROGRAM_ERROR)
    for line in AstPrinter().print_program(statements):
        print(line)


def run_file(source: str, interpreter: Interpreter, use_grammar: bool = False) -> None:
    try:
        execute_source(source, interpreter, use_grammar)
    except (ErrorGroup, RoxError) as e:
        report(e)
        sys.exit(EXIT_PROGRAM_ERROR)


def run_prompt(interpreter: Interpreter, use_grammar: bool = False) -> None:
    while True:
        try:
            line = builtins.input('> ')
        except EOFError:
            break
        if line.strip() in EXIT_WORDS:
            break
        try:
            execute_source(line, interpreter, use_grammar)
        except (ErrorGroup, RoxError) as e:
            # errors never carry over to the next line
            report(e)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog='rox', description="Rox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--print-ast', action='store_true', help='print the syntax tree instead of running the program')
    parser.add_argument('--grammar', action='store_true', help='parse with the Lark reference grammar')
    parser.add_argument('program', nargs='?', help='Rox program file to execute; starts a prompt if omitted')
    args = parser.parse_args(argv)

    if args.print_ast:
        if not args.program:
            parser.error('--print-ast requires a program file')
        print_ast(read_source(Path(args.program)), args.grammar)
        return

    interpreter = Interpreter(debug_level=args.v)
    try:
        if args.program:
            run_file(read_source(Path(args.program)), interpreter, args.grammar)
        else:
            run_prompt(interpreter, args.grammar)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
