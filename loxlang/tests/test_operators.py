"""
Tests for arithmetic, comparison, equality and logical operators
"""
import pytest

from loxlang.exceptions import BadOperandError, DivisionByZeroError

from .utils import output_lines, run_source


def test_arithmetic(capsys):
    """
    Test numeric operators and integral number printing.
    """
    run_source("print 1 + 2 * 3;\nprint (1 + 2) * 3;\nprint 7 / 2;\nprint -4 - 1;")
    assert output_lines(capsys) == ["7", "9", "3.5", "-5"]


def test_string_concatenation(capsys):
    run_source('print "foo" + "bar";\nprint "a" + 1;\nprint "n=" + 2.5;')
    assert output_lines(capsys) == ["foobar", "a1", "n=2.5"]


def test_number_plus_string_is_an_error():
    with pytest.raises(BadOperandError):
        run_source('print 1 + "a";')


def test_string_subtraction_removes_first_occurrence(capsys):
    """
    Test that subtracting strings removes the first match only.
    """
    run_source('print "hello" - "l";\nprint "abc" - "x";')
    assert output_lines(capsys) == ["helo", "abc"]


def test_division_by_zero():
    with pytest.raises(DivisionByZeroError) as exc:
        run_source("print 1 / 0;")
    assert exc.value.line == 1


def test_comparison_requires_numbers():
    with pytest.raises(BadOperandError) as exc:
        run_source('print "a" < "b";')
    assert "Operands must be numbers" in str(exc.value)


def test_unary_minus_requires_number():
    with pytest.raises(BadOperandError) as exc:
        run_source('print -"a";')
    assert "Operand must be a number" in str(exc.value)


def test_comparisons(capsys):
    run_source("print 1 < 2;\nprint 2 <= 2;\nprint 3 > 4;\nprint 4 >= 5;")
    assert output_lines(capsys) == ["true", "true", "false", "false"]


def test_equality_across_kinds(capsys):
    """
    Test that values of different kinds are never equal.
    """
    run_source(
        'print 1 == 1;\n'
        'print "1" == 1;\n'
        'print nil == nil;\n'
        'print nil == false;\n'
        'print true != false;\n'
        'print 0 == false;\n'
    )
    assert output_lines(capsys) == ["true", "false", "true", "false", "true", "false"]


def test_truthiness(capsys):
    run_source('print !nil;\nprint !0;\nprint !"";\nprint !false;')
    assert output_lines(capsys) == ["true", "false", "false", "true"]


def test_logical_operators_return_deciding_operand(capsys):
    run_source('print nil or "yes";\nprint "first" or "second";\nprint nil and 1;\nprint 1 and 2;')
    assert output_lines(capsys) == ["yes", "first", "nil", "2"]


def test_logical_operators_short_circuit(capsys):
    run_source(
        'fun boom() { print "evaluated"; return true; }\n'
        'print false and boom();\n'
        'print true or boom();\n'
    )
    assert output_lines(capsys) == ["false", "true"]


def test_ternary(capsys):
    run_source('print true ? 1 : 2;\nprint nil ? 1 : false ? 2 : 3;')
    assert output_lines(capsys) == ["1", "3"]


def test_comma_discards_left_value(capsys):
    run_source("var a = 0;\nvar b = (a = 5, a + 1);\nprint a;\nprint b;")
    assert output_lines(capsys) == ["5", "6"]
