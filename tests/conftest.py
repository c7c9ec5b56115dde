"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lispsyntax.forms import Form
from lispsyntax.hostast import Node
from lispsyntax.lexer import tokenize
from lispsyntax.parser import parse
from lispsyntax.tokens import Token, TokenType
from lispsyntax.transpiler import transpile


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        return [t for t in tokenize(source) if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def read():
    """Return a helper that parses source holding exactly one form."""

    def _read(source: str) -> Form:
        forms = parse(source)
        assert len(forms) == 1, f"Expected one form, got {len(forms)}"
        return forms[0]

    return _read


@pytest.fixture
def clj():
    """Return a helper that transpiles source holding exactly one top-level form."""

    def _clj(source: str) -> Node:
        nodes = transpile(source)
        assert len(nodes) == 1, f"Expected one node, got {len(nodes)}"
        return nodes[0]

    return _clj


@pytest.fixture
def types():
    """Return a helper listing the token types of source (excluding EOF)."""

    def _types(source: str) -> list[TokenType]:
        return [t.type for t in tokenize(source) if t.type != TokenType.EOF]

    return _types
