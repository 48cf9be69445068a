"""
Lox Language Server entry point.

This server provides basic language features for Lox source files using
`pygls`. It reuses the Lox lexer, parser and resolver to build a simple
symbol index supporting definition lookup, hover information and document
symbols, and to publish syntax and scope errors as diagnostics.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    DefinitionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    Location,
    MarkupContent,
    MarkupKind,
    Position,
    PublishDiagnosticsParams,
    Range,
    SymbolKind,
)
from pygls.lsp.server import LanguageServer

from loxlang import __version__
from loxlang.exceptions import ScanError
from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.nodes import Class, Function, Var
from loxlang.parser import Parser
from loxlang.resolver import Resolver

logger = logging.getLogger(__name__)


@dataclass
class LoxSymbol:
    """Represents a top-level symbol in a Lox file."""

    name: str
    kind: SymbolKind
    uri: str
    line: int
    detail: str
    children: List["LoxSymbol"] = field(default_factory=list)


def _function_detail(fn: Function) -> str:
    params = ", ".join(param.lexeme for param in fn.params)
    qualifiers = []
    if not fn.is_public:
        qualifiers.append("priv")
    if fn.is_static:
        qualifiers.append("static")
    prefix = " ".join(qualifiers)
    return f"{prefix + ' ' if prefix else ''}{fn.name.lexeme}({params})"


def collect_symbols(uri: str, text: str) -> List[LoxSymbol]:
    """Parse ``text`` and extract its top-level declarations.

    Declarations that fail to parse are skipped; a file that cannot be
    tokenized has no symbols.
    """
    try:
        tokens = tokenize(text)
    except ScanError:
        return []

    statements, _ = Parser(tokens).parse()
    symbols: List[LoxSymbol] = []
    for stmt in statements:
        match stmt:
            case Function(name=name):
                symbols.append(
                    LoxSymbol(name.lexeme, SymbolKind.Function, uri, name.line - 1, f"fun {_function_detail(stmt)}")
                )
            case Var(name=name):
                symbols.append(
                    LoxSymbol(name.lexeme, SymbolKind.Variable, uri, name.line - 1, f"var {name.lexeme}")
                )
            case Class(name=name, superclass=superclass, methods=methods):
                detail = f"class {name.lexeme}"
                if superclass is not None:
                    detail += f" < {superclass.name.lexeme}"
                children = [
                    LoxSymbol(
                        method.name.lexeme,
                        SymbolKind.Method,
                        uri,
                        method.name.line - 1,
                        _function_detail(method),
                    )
                    for method in methods
                ]
                symbols.append(LoxSymbol(name.lexeme, SymbolKind.Class, uri, name.line - 1, detail, children))
    return symbols


def _line_range(lines: List[str], line: Optional[int]) -> Range:
    """Range covering the whole of 1-based ``line``."""
    index = max((line or 1) - 1, 0)
    width = len(lines[index]) if index < len(lines) else 0
    return Range(Position(index, 0), Position(index, width))


def collect_diagnostics(text: str) -> List[Diagnostic]:
    """Scan, parse and resolve ``text`` and report every problem found.

    The program is never run. Resolver checks only happen when the source
    parses cleanly.
    """
    lines = text.splitlines()
    try:
        tokens = tokenize(text)
    except ScanError as e:
        return [
            Diagnostic(
                range=_line_range(lines, e.line),
                message=str(e),
                severity=DiagnosticSeverity.Error,
                source="lox",
            )
        ]

    statements, parse_errors = Parser(tokens).parse()
    diagnostics = [
        Diagnostic(
            range=_line_range(lines, err.line),
            message=str(err),
            severity=DiagnosticSeverity.Error,
            source="lox",
        )
        for err in parse_errors
    ]
    if parse_errors:
        return diagnostics

    resolver = Resolver(Interpreter())
    for err in resolver.resolve(statements):
        diagnostics.append(
            Diagnostic(
                range=_line_range(lines, err.line),
                message=str(err),
                severity=DiagnosticSeverity.Error,
                source="lox",
            )
        )
    for warning in resolver.warnings:
        diagnostics.append(
            Diagnostic(
                range=_line_range(lines, warning.line),
                message=str(warning),
                severity=DiagnosticSeverity.Warning,
                source="lox",
            )
        )
    return diagnostics


def _to_document_symbol(sym: LoxSymbol) -> DocumentSymbol:
    rng = Range(Position(sym.line, 0), Position(sym.line, len(sym.name)))
    return DocumentSymbol(
        name=sym.name,
        kind=sym.kind,
        range=rng,
        selection_range=rng,
        detail=sym.detail,
        children=[_to_document_symbol(child) for child in sym.children] or None,
    )


class LoxLanguageServer(LanguageServer):
    """Language server for Lox source files."""

    def __init__(self) -> None:
        super().__init__("lox-ls", f"v{__version__}")
        self.symbols_by_uri: Dict[str, List[LoxSymbol]] = {}
        self.global_symbols: Dict[str, List[LoxSymbol]] = {}
        self.indexed_workspace = False

    def _index_workspace(self) -> None:
        """Parse all `.lox` files under the current workspace."""
        root = self.workspace.root_path
        if not root:
            self.indexed_workspace = True
            return
        for path in Path(root).rglob("*.lox"):
            uri = path.as_uri()
            if uri in self.symbols_by_uri:
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning("Failed to index %s: %s", path, e)
                continue
            self.update_index(uri, text)
        self.indexed_workspace = True

    def update_index(self, uri: str, text: str) -> None:
        """Parse ``text`` and update the symbol index for ``uri``."""
        self.symbols_by_uri[uri] = collect_symbols(uri, text)
        self._rebuild_global_index()

    def _rebuild_global_index(self) -> None:
        self.global_symbols.clear()
        for syms in self.symbols_by_uri.values():
            for sym in syms:
                self.global_symbols.setdefault(sym.name, []).append(sym)

    def lookup(self, uri: str, word: str) -> Optional[LoxSymbol]:
        """Find ``word``, preferring a declaration in the same document."""
        if not self.indexed_workspace:
            self._index_workspace()
        matches = self.global_symbols.get(word)
        if not matches:
            return None
        for sym in matches:
            if sym.uri == uri:
                return sym
        return matches[0]

    def refresh(self, uri: str, text: str) -> None:
        """Re-index ``uri`` and publish its diagnostics."""
        self.update_index(uri, text)
        self.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=uri, diagnostics=collect_diagnostics(text))
        )


lang_server = LoxLanguageServer()


@lang_server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LoxLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Index and check a document when it is opened."""
    ls.refresh(params.text_document.uri, params.text_document.text)


@lang_server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LoxLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """Re-index and re-check a document when it changes."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    ls.refresh(doc.uri, doc.source)


@lang_server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: LoxLanguageServer, params: DefinitionParams):
    """Return the definition location for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.lookup(doc.uri, word)
    if sym is None:
        return None
    rng = Range(Position(sym.line, 0), Position(sym.line, len(sym.name)))
    return Location(uri=sym.uri, range=rng)


@lang_server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LoxLanguageServer, params: HoverParams) -> Optional[Hover]:
    """Return hover information for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.lookup(doc.uri, word)
    if sym is None:
        return None
    contents = MarkupContent(kind=MarkupKind.PlainText, value=sym.detail)
    return Hover(contents=contents)


@lang_server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbols(ls: LoxLanguageServer, params: DocumentSymbolParams):
    """Return top-level symbols for the given document."""
    symbols = ls.symbols_by_uri.get(params.text_document.uri, [])
    return [_to_document_symbol(sym) for sym in symbols]


def main() -> None:
    """Start the language server."""
    lang_server.start_io()


if __name__ == "__main__":
    main()
