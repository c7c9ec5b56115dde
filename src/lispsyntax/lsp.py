"""Minimal LSP server for S-expression sources, diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lispsyntax import __version__
from lispsyntax.errors import ReaderError, TranslationError
from lispsyntax.transpiler import transpile

server = LanguageServer(
    "lispsyntax-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _range(exc: TranslationError) -> Range:
    """Convert an error span (1-based, end-exclusive) to an LSP range."""
    if exc.span is None:
        return Range(start=Position(line=0, character=0), end=Position(line=0, character=1))
    start, end = exc.span.start, exc.span.end
    # zero-width spans still get one character underlined
    end_char = end.column if end == start else end.column - 1
    return Range(
        start=Position(line=start.line - 1, character=start.column - 1),
        end=Position(line=end.line - 1, character=end_char),
    )


def _diagnostic(exc: TranslationError) -> Diagnostic:
    if isinstance(exc, ReaderError):
        severity = DiagnosticSeverity.Error
    else:
        severity = DiagnosticSeverity.Warning
    return Diagnostic(
        range=_range(exc),
        message=exc.message,
        severity=severity,
        source="lispsyntax",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Translate the document and publish its first error, if any."""
    doc = ls.workspace.get_text_document(uri)
    filename = uri.rsplit("/", 1)[-1]
    diagnostics: list[Diagnostic] = []

    try:
        transpile(doc.source, filename)
    except TranslationError as exc:
        diagnostics.append(_diagnostic(exc))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
