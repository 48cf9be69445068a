"""
Tests for conditionals, loops, break and return
"""
import pytest

from loxlang.exceptions import (
    MisplacedBreakError,
    MisplacedReturnError,
    RedefinedVariableError,
    UndefinedVariableError,
)
from loxlang.interpreter import Interpreter

from .utils import output_lines, parse_source, run_source


def test_if_else(capsys):
    run_source('if (1 > 2) print "a"; else print "b";\nif (nil) print "c";')
    assert output_lines(capsys) == ["b"]


def test_dangling_else_binds_to_nearest_if(capsys):
    run_source('if (true) if (false) print "inner"; else print "else";')
    assert output_lines(capsys) == ["else"]


def test_block_scope(capsys):
    run_source("var a = 1;\n{ var a = 2; print a; }\nprint a;")
    assert output_lines(capsys) == ["2", "1"]


def test_while_loop(capsys):
    run_source("var i = 0;\nwhile (i < 3) { print i; i = i + 1; }")
    assert output_lines(capsys) == ["0", "1", "2"]


def test_for_loop(capsys):
    run_source("for (var i = 0; i < 3; i = i + 1) print i;")
    assert output_lines(capsys) == ["0", "1", "2"]


def test_for_loop_variable_is_scoped_to_loop():
    with pytest.raises(UndefinedVariableError):
        run_source("for (var i = 0; i < 1; i = i + 1) {}\nprint i;")


def test_break_skips_increment(capsys):
    """
    Test that break leaves a for loop before the increment runs.
    """
    run_source(
        "var last = 0;\n"
        "for (var i = 0; i < 10; i = i + 1) { last = i; if (i == 2) break; }\n"
        "print last;\n"
    )
    assert output_lines(capsys) == ["2"]


def test_break_only_leaves_innermost_loop(capsys):
    run_source(
        "for (var i = 0; i < 2; i = i + 1) {\n"
        "    for (var j = 0; j < 5; j = j + 1) { if (j == 1) break; print i + j; }\n"
        "}\n"
    )
    assert output_lines(capsys) == ["0", "1"]


def test_while_else_runs_when_condition_fails(capsys):
    run_source('var i = 0;\nwhile (i < 2) i = i + 1; else print "done";\nprint i;')
    assert output_lines(capsys) == ["done", "2"]


def test_while_else_skipped_on_break(capsys):
    run_source('while (true) break; else print "never";\nprint "after";')
    assert output_lines(capsys) == ["after"]


def test_break_in_while_else_leaves_enclosing_loop(capsys):
    """
    Test that a break inside a while's else branch ends the enclosing loop.
    """
    run_source(
        "var n = 0;\n"
        "loop {\n"
        "    while (false) {} else break;\n"
        "    n = n + 1;\n"
        "}\n"
        "print n;\n"
    )
    assert output_lines(capsys) == ["0"]


def test_loop_until_break(capsys):
    run_source("var n = 0;\nloop { n = n + 1; if (n == 4) break; }\nprint n;")
    assert output_lines(capsys) == ["4"]


def test_return_from_inside_loop(capsys):
    run_source(
        "fun find() { for (var i = 0; ; i = i + 1) { if (i == 3) return i; } }\n"
        "print find();\n"
        "fun spin() { loop { while (true) { return \"out\"; } } }\n"
        "print spin();\n"
    )
    assert output_lines(capsys) == ["3", "out"]


def test_unresolved_break_at_top_level():
    """
    Test that the interpreter itself rejects a break that escapes to the top.
    """
    statements, errors = parse_source("break;")
    assert errors == []
    with pytest.raises(MisplacedBreakError):
        Interpreter().interpret(statements)


def test_unresolved_return_at_top_level():
    statements, _ = parse_source("return 1;")
    with pytest.raises(MisplacedReturnError):
        Interpreter().interpret(statements)


def test_unresolved_break_escaping_a_function():
    statements, _ = parse_source("fun f() { break; }\nwhile (true) { f(); }")
    with pytest.raises(MisplacedBreakError) as exc:
        Interpreter().interpret(statements)
    assert exc.value.line == 1


def test_runtime_error_keeps_earlier_output(capsys):
    with pytest.raises(UndefinedVariableError) as exc:
        run_source("print 1;\nprint nope;\nprint 2;")
    assert output_lines(capsys) == ["1"]
    assert exc.value.varname == "nope"
    assert exc.value.line == 2


def test_assignment_to_undefined_global():
    with pytest.raises(UndefinedVariableError):
        run_source("nope = 1;")


def test_redefining_a_global_fails():
    with pytest.raises(RedefinedVariableError):
        run_source("var a = 1;\nvar a = 2;")


def test_uninitialized_variable_is_nil(capsys):
    run_source("var a;\nprint a;")
    assert output_lines(capsys) == ["nil"]
