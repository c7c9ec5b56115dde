"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from lispsyntax.errors import TranslationError
from lispsyntax.lsp import _range, _validate
from lispsyntax.tokens import Position, Span


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.clj") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="clojure", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# Reader errors → Error severity
# ---------------------------------------------------------------------------


class TestReaderErrors:
    def test_invalid_token(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(f 1x)")
        _validate(ls, "file:///test.clj")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "1x" in d.message
        assert d.source == "lispsyntax"
        # 1x is at column 4 (1-based) → character 3 (0-based)
        assert d.range.start.line == 0
        assert d.range.start.character == 3
        assert d.range.end.character == 5

    def test_unclosed_paren(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(defn f [x]\n  (g x)")
        _validate(ls, "file:///test.clj")

        d = published[0].diagnostics[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "missing closing )" in d.message
        assert d.range.start.line == 0
        assert d.range.start.character == 0


# ---------------------------------------------------------------------------
# Form errors → Warning severity
# ---------------------------------------------------------------------------


class TestFormErrors:
    def test_bad_if(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(def x 1)\n(if x)")
        _validate(ls, "file:///test.clj")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Warning
        assert "if should have 3 to 4 forms" in d.message
        assert d.range.start.line == 1


# ---------------------------------------------------------------------------
# Clean document → empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(ns-free code)\n\n(defn f [x] (* x x))\n")
        _validate(ls, "file:///test.clj")

        assert len(published) == 1
        assert published[0].diagnostics == []

    def test_uri_is_reported(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(a)", uri="file:///other.clj")
        _validate(ls, "file:///other.clj")

        assert published[0].uri == "file:///other.clj"


# ---------------------------------------------------------------------------
# Position conversion (1-based → 0-based)
# ---------------------------------------------------------------------------


class TestPositionConversion:
    def test_error_on_second_line(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(a)\n  )")
        _validate(ls, "file:///test.clj")

        d = published[0].diagnostics[0]
        # Error is on line 2 (1-based) → LSP line 1 (0-based)
        assert d.range.start.line == 1
        assert d.range.start.character == 2

    def test_no_span(self) -> None:
        r = _range(TranslationError("boom", None))
        assert (r.start.line, r.start.character) == (0, 0)
        assert (r.end.line, r.end.character) == (0, 1)

    def test_zero_width_span_widened(self) -> None:
        pos = Position(2, 3, 7)
        r = _range(TranslationError("boom", Span(pos, pos)))
        assert (r.start.line, r.start.character) == (1, 2)
        assert (r.end.line, r.end.character) == (1, 3)
