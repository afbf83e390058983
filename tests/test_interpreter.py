import io
import math

import pytest

from rox.ast import Block, ExpressionStatement, Literal, PrintStatement
from rox.environment import Environment
from rox.errors import RoxRuntimeError, RoxTypeError, UndefinedVariable
from rox.interpreter import Interpreter, interpret, run_source
from rox.parser import parse
from rox.scanner import scan


def evaluate(source):
    """Evaluate a single expression and return its value."""
    [stmt] = parse(scan(source + ';'))
    return Interpreter().evaluate(stmt.expression)


@pytest.mark.parametrize("source,expected", [
    ("1 + 2 * 3", 7.0),
    ("(1 + 2) * 3", 9.0),
    ("8 - 4 - 2", 2.0),
    ("8 / 4 / 2", 1.0),
    ("-3 - -4", 1.0),
    ("10 / 4", 2.5),
    ('"foo" + "bar"', "foobar"),
    ("1 < 2", True),
    ("2 <= 2", True),
    ("1 > 2", False),
    ("2 >= 3", False),
    ("!nil", True),
    ("!false", True),
    ("!true", False),
    ("!0", False),
    ('!""', False),
    ("1 == 1", True),
    ('"a" == "a"', True),
    ("nil == nil", True),
    ("nil == false", False),
    ("true == 1", False),
    ('1 == "1"', False),
    ("0 == false", False),
    ("1 != 2", True),
    ('"a" != nil', True),
])
def test_expressions(source, expected):
    assert evaluate(source) == expected
    assert type(evaluate(source)) is type(expected)


def test_division_by_zero_follows_ieee():
    assert evaluate("1 / 0") == math.inf
    assert evaluate("-1 / 0") == -math.inf
    assert math.isnan(evaluate("0 / 0"))


def test_nan_is_not_equal_to_itself():
    assert evaluate("0/0 == 0/0") is False


@pytest.mark.parametrize("source", [
    '1 + "a"',
    '"a" + 1',
    "nil + nil",
    "true + true",
    '-"a"',
    "-nil",
    '"a" - "b"',
    "2 * nil",
    "true / 1",
    '1 < "2"',
    "nil >= 0",
])
def test_type_errors(source):
    with pytest.raises(RoxTypeError):
        evaluate(source)


def test_type_error_names_offending_side():
    with pytest.raises(RoxTypeError) as left:
        evaluate('"a" * 2')
    assert "Left operand of '*'" in left.value.message
    with pytest.raises(RoxTypeError) as right:
        evaluate('2 * "a"')
    assert "Right operand of '*'" in right.value.message
    assert str(right.value).startswith("TypeError: ")


def test_print_renders_values(run):
    assert run('print 7; print 2.5; print nil; print true; print false; print "s";') == [
        "7", "2.5", "nil", "true", "false", "s",
    ]


def test_print_renders_special_numbers(run):
    assert run("print 1/0; print -1/0; print 0/0; print -0; print 1000000;") == [
        "inf", "-inf", "NaN", "-0", "1000000",
    ]


def test_print_renders_small_and_inexact_fractions_in_full(run):
    assert run("print 0.0000001; print 0.1 + 0.2; print -0.00000015;") == [
        "0.0000001", "0.30000000000000004", "-0.00000015",
    ]


def test_lexical_scoping(run):
    source = "var x = 1; { var x = 2; print x; } print x;"
    assert run(source) == ["2", "1"]


def test_assignment_reaches_enclosing_scope(run):
    source = "var x = 1; { x = 2; { x = x + 1; } } print x;"
    assert run(source) == ["3"]


def test_assignment_is_an_expression(run):
    assert run("var a; var b; a = b = 5; print a; print b; print a = 6;") == ["5", "5", "6"]


def test_var_without_initializer_is_nil(run):
    assert run("var a; print a;") == ["nil"]


def test_redeclaration_overwrites(run):
    assert run('var a = 1; var a = "two"; print a;') == ["two"]


def test_block_variable_is_gone_after_block(capsys):
    interp = Interpreter()
    with pytest.raises(UndefinedVariable) as excinfo:
        run_source("{ var inner = 1; } print inner;", interp)
    assert excinfo.value.name == "inner"


def test_undefined_read():
    with pytest.raises(UndefinedVariable) as excinfo:
        run_source("print y;", Interpreter())
    assert excinfo.value.name == "y"


def test_undefined_write_does_not_declare():
    interp = Interpreter()
    with pytest.raises(UndefinedVariable) as excinfo:
        run_source("x = 1;", interp)
    assert excinfo.value.name == "x"
    assert interp.globals.values == {}


def test_runtime_error_halts_remaining_statements(capsys):
    with pytest.raises(RoxRuntimeError):
        run_source('print "before"; print -"x"; print "after";', Interpreter())
    assert capsys.readouterr().out.splitlines() == ["before"]


def test_scope_restored_after_error_in_block():
    interp = Interpreter()
    with pytest.raises(RoxTypeError):
        run_source("var a = 1; { var a = 2; a + nil; }", interp)
    assert interp.environment is interp.globals
    assert interp.globals.get("a") == 1.0


def test_globals_persist_between_runs(capsys):
    interp = Interpreter()
    run_source("var count = 1;", interp)
    run_source("count = count + 1;", interp)
    run_source("print count;", interp)
    assert capsys.readouterr().out.strip() == "2"


def test_interpret_with_explicit_environment(capsys):
    env = Environment()
    env.define("greeting", "hello")
    interpret(parse(scan("greeting = greeting + \" world\"; print greeting;")), env)
    assert env.get("greeting") == "hello world"
    assert capsys.readouterr().out == "hello world\n"


def test_interpret_hand_built_tree(capsys):
    statements = [Block((PrintStatement(Literal("inside")),)), ExpressionStatement(Literal(1.0))]
    interpret(statements)
    assert capsys.readouterr().out == "inside\n"


def test_output_stream():
    out = io.StringIO()
    run_source('print "captured";', Interpreter(out=out))
    assert out.getvalue() == "captured\n"


def test_empty_program_does_nothing(run):
    assert run("") == []


def test_unknown_node_is_rejected():
    with pytest.raises(TypeError):
        Interpreter().execute(object())


def test_debug_trace(tmp_path):
    trace = tmp_path / "debug.txt"
    interp = Interpreter(out=io.StringIO(), debug_level=3, debug_file=str(trace))
    run_source("var a = 1; { a = a + 1; }", interp)
    interp.close()
    text = trace.read_text(encoding="utf-8")
    assert "exec (var a 1)" in text
    assert "declare a: Number = 1" in text
    assert "push scope depth=1" in text
    assert "assign a = 2" in text
    assert "pop scope depth=0" in text
    assert "eval (+ a 1) -> 2" in text


def test_no_trace_file_without_debug(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Interpreter().close()
    assert not (tmp_path / "debug.txt").exists()


def test_no_trace_work_without_debug(monkeypatch):
    interp = Interpreter(out=io.StringIO())
    calls = []
    monkeypatch.setattr(interp, "debug", lambda level, msg: calls.append(msg))
    run_source("var a = 1; { var b = a; a = b + 1; }", interp)
    assert calls == []


def test_long_operator_chain(run):
    assert run("print " + " + ".join(["1"] * 1000) + ";") == ["1000"]
    assert run('var s = "";\ns = s' + ' + "ab"' * 500 + ';\nprint s == "' + "ab" * 500 + '";') == ["true"]


def test_long_chain_evaluates_left_to_right(capsys):
    interp = Interpreter()
    with pytest.raises(UndefinedVariable, match="'late'"):
        run_source("var x = 0;\nprint " + " - ".join(["1"] * 700) + " + late + (x = 1);", interp)
    assert interp.globals.get("x") == 0.0


def test_deeply_nested_expression_is_a_runtime_error():
    interp = Interpreter(out=io.StringIO())
    with pytest.raises(RoxRuntimeError, match="Expression nesting too deep"):
        run_source("var a = 1; { var a = 2; print " + "-" * 600 + "a; }", interp)
    assert interp.environment is interp.globals
    assert interp.globals.get("a") == 1.0
