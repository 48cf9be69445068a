"""
Tests for built-in functions and the output sink
"""
import io

import pytest

from loxlang.exceptions import ArityError, NativeFunctionError
from loxlang.interpreter import Interpreter
from loxlang.natives import NativeFunction

from .utils import output_lines, run_source


def test_clock_returns_seconds(capsys):
    run_source("var t = clock();\nprint t > 0;")
    assert output_lines(capsys) == ["true"]


def test_print_and_println_natives(capsys):
    """
    Test that the print native writes without a newline and println with one.
    """
    run_source('(print)("a");\nvar p = print;\np("b");\nprintln("c");\nprintln(1);\nprintln(nil);')
    assert capsys.readouterr().out == "abc\n1\nnil\n"


def test_print_call_at_statement_start_is_the_statement(capsys):
    run_source('print("a");\nprint("b");')
    assert capsys.readouterr().out == "a\nb\n"


def test_print_native_as_a_value(capsys):
    run_source('var p = print;\np("x");\nprintln("");\nprint p;')
    assert output_lines(capsys) == ["x", "<native fn print>"]


def test_native_arity_is_checked():
    with pytest.raises(ArityError) as exc:
        run_source("clock(1);")
    assert "Expected 0 arguments but got 1" in str(exc.value)


def test_output_goes_to_the_configured_sink(capsys):
    sink = io.StringIO()
    run_source('print "to sink";\nprintln(2.5);', Interpreter(out=sink))
    assert sink.getvalue() == "to sink\n2.5\n"
    assert capsys.readouterr().out == ""


def test_native_failure_is_wrapped():
    def broken(_interpreter, _arguments):
        raise ValueError("bad input")

    native = NativeFunction("broken", 0, broken)
    with pytest.raises(NativeFunctionError) as exc:
        native.call(Interpreter(), [])
    assert "broken" in str(exc.value)
    assert "bad input" in str(exc.value)


def test_stringify():
    assert Interpreter.stringify(3.0) == "3"
    assert Interpreter.stringify(0.5) == "0.5"
    assert Interpreter.stringify(None) == "nil"
    assert Interpreter.stringify(True) == "true"
    assert Interpreter.stringify("s") == "s"
