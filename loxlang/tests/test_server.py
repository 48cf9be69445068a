"""
Tests for the language server helpers
"""
import pytest

pytest.importorskip("pygls")
pytest.importorskip("lsprotocol")

from lsprotocol.types import DiagnosticSeverity, SymbolKind  # noqa: E402

from loxlang.server import (  # noqa: E402
    LoxLanguageServer,
    _to_document_symbol,
    collect_diagnostics,
    collect_symbols,
)

SOURCE = (
    "var greeting = \"hi\";\n"
    "fun add(a, b) { return a + b; }\n"
    "class Point < Base {\n"
    "    init(x) { this.x = x; }\n"
    "    static priv origin() { return Point(0); }\n"
    "}\n"
)


def test_collect_symbols():
    """
    Test that top-level declarations are indexed with their details.
    """
    symbols = collect_symbols("file:///a.lox", SOURCE)
    assert [(s.name, s.kind, s.line) for s in symbols] == [
        ("greeting", SymbolKind.Variable, 0),
        ("add", SymbolKind.Function, 1),
        ("Point", SymbolKind.Class, 2),
    ]
    assert symbols[1].detail == "fun add(a, b)"
    assert symbols[2].detail == "class Point < Base"
    assert [c.name for c in symbols[2].children] == ["init", "origin"]
    assert symbols[2].children[1].detail == "priv static origin()"


def test_symbols_skip_unparseable_declarations():
    symbols = collect_symbols("file:///b.lox", "var = 1;\nfun ok() {}\n")
    assert [s.name for s in symbols] == ["ok"]


def test_symbols_of_unscannable_file():
    assert collect_symbols("file:///c.lox", 'print "open') == []


def test_document_symbol_children():
    symbols = collect_symbols("file:///a.lox", SOURCE)
    doc_symbol = _to_document_symbol(symbols[2])
    assert doc_symbol.name == "Point"
    assert [child.name for child in doc_symbol.children] == ["init", "origin"]
    assert _to_document_symbol(symbols[0]).children is None


def test_clean_source_has_no_diagnostics():
    assert collect_diagnostics("var a = 1;\nprint a;\n") == []


def test_parse_errors_become_diagnostics():
    diagnostics = collect_diagnostics("print 1;\nvar = 2;\nprint (;\n")
    assert len(diagnostics) == 2
    assert all(d.severity == DiagnosticSeverity.Error for d in diagnostics)
    assert diagnostics[1].range.start.line == 2


def test_resolver_errors_and_warnings_become_diagnostics():
    diagnostics = collect_diagnostics("return 1;\n{ var unused = 1; }\n")
    severities = [d.severity for d in diagnostics]
    assert severities == [DiagnosticSeverity.Error, DiagnosticSeverity.Warning]
    assert diagnostics[1].range.start.line == 1
    assert "never used" in diagnostics[1].message


def test_scan_error_diagnostic():
    diagnostics = collect_diagnostics("var a = 1;\nvar b = @;\n")
    assert len(diagnostics) == 1
    assert diagnostics[0].range.start.line == 1
    assert diagnostics[0].range.end.character == len("var b = @;")


def test_index_prefers_same_document():
    server = LoxLanguageServer()
    server.indexed_workspace = True
    server.update_index("file:///one.lox", "fun shared() {}\n")
    server.update_index("file:///two.lox", "\nfun shared() {}\n")
    assert server.lookup("file:///two.lox", "shared").uri == "file:///two.lox"
    assert server.lookup("file:///one.lox", "shared").line == 0
    assert server.lookup("file:///one.lox", "missing") is None
