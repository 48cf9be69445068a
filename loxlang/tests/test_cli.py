"""
Tests for the lox command line runner and REPL
"""
import builtins

import lox


def write_script(tmp_path, source: str):
    path = tmp_path / "script.lox"
    path.write_text(source, encoding="utf-8")
    return str(path)


def feed_input(monkeypatch, lines):
    """
    Replace input() with one that returns ``lines`` and then signals EOF.
    """
    pending = iter(lines)

    def fake_input(_prompt=""):
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)


def test_run_script(tmp_path, capsys):
    """
    Test that a valid script runs and exits cleanly.
    """
    script = write_script(tmp_path, 'print "hello";\nprint 1 + 1;\n')
    assert lox.main(["lox", script]) == lox.EX_OK
    assert capsys.readouterr().out.splitlines() == ["hello", "2"]


def test_parse_errors_exit_65(tmp_path, capsys):
    script = write_script(tmp_path, "print 1;\nvar = 2;\nprint (;\n")
    assert lox.main(["lox", script]) == lox.EX_DATAERR
    err = capsys.readouterr().err
    assert err.count("ParseError:") == 2


def test_resolver_errors_prevent_running(tmp_path, capsys):
    """
    Test that a program with resolver errors produces no output at all.
    """
    script = write_script(tmp_path, 'print "before";\nreturn 1;\n')
    assert lox.main(["lox", script]) == lox.EX_DATAERR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "ResolverError: Can't return from top-level code on line 2" in captured.err


def test_scan_error_exit_65(tmp_path, capsys):
    script = write_script(tmp_path, "var a = #;\n")
    assert lox.main(["lox", script]) == lox.EX_DATAERR
    assert "ScanError:" in capsys.readouterr().err


def test_runtime_error_exit_70(tmp_path, capsys):
    script = write_script(tmp_path, "print 1;\nprint x;\n")
    assert lox.main(["lox", script]) == lox.EX_SOFTWARE
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["1"]
    assert "UndefinedVariableError: Undefined variable 'x' on line 2" in captured.err


def test_missing_script(tmp_path, capsys):
    assert lox.main(["lox", str(tmp_path / "absent.lox")]) == lox.EX_USAGE
    assert "Could not read" in capsys.readouterr().err


def test_help(capsys):
    assert lox.main(["lox", "--help"]) == lox.EX_OK
    assert "Usage:" in capsys.readouterr().out


def test_too_many_arguments(capsys):
    assert lox.main(["lox", "a.lox", "b.lox"]) == lox.EX_USAGE
    assert "Usage:" in capsys.readouterr().out


def test_debug_dump(tmp_path, capsys, monkeypatch):
    """
    Test that LOXDEBUG prints the token stream and AST before running.
    """
    monkeypatch.setenv("LOXDEBUG", "1")
    script = write_script(tmp_path, "print 1;\n")
    assert lox.main(["lox", script]) == lox.EX_OK
    out = capsys.readouterr().out
    assert "Tokens:" in out
    assert "AST:" in out
    assert "Print(" in out


def test_repl_keeps_state_and_buffers_incomplete_input(monkeypatch, capsys):
    feed_input(
        monkeypatch,
        [
            "var a = 1;",
            "fun f() {",
            "  return a + 1;",
            "}",
            "print f();",
            "print nope;",
            'print "still here";',
            "exit",
        ],
    )
    assert lox.main(["lox"]) == lox.EX_OK
    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert "2" in lines
    assert "still here" in lines
    assert "UndefinedVariableError" in captured.err


def test_repl_stops_on_eof(monkeypatch, capsys):
    feed_input(monkeypatch, ['print "once";'])
    assert lox.main(["lox"]) == lox.EX_OK
    assert "once" in capsys.readouterr().out.splitlines()


def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "debug")
    assert lox._get_log_level() == 10
    monkeypatch.setenv("LOGLEVEL", "nonsense")
    assert lox._get_log_level() == 30
    monkeypatch.delenv("LOGLEVEL")
    assert lox._get_log_level() == 30
