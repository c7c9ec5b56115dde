"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Delimiters
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    HASH_LBRACE = auto()  # #{

    # Atoms
    SYMBOL = auto()
    KEYWORD = auto()  # value is the name without the leading colon
    STRING = auto()  # value is the decoded contents
    CHARACTER = auto()  # value is the decoded character
    NUMBER = auto()  # value is the raw numeric text

    # Quote family
    QUOTE = auto()  # '
    QUASIQUOTE = auto()  # `
    UNQUOTE = auto()  # ~
    UNQUOTE_SPLICING = auto()  # ~@

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with decoded value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


OPENERS: dict[TokenType, str] = {
    TokenType.LPAREN: "(",
    TokenType.LBRACKET: "[",
    TokenType.LBRACE: "{",
    TokenType.HASH_LBRACE: "#{",
}

CLOSERS: dict[TokenType, str] = {
    TokenType.RPAREN: ")",
    TokenType.RBRACKET: "]",
    TokenType.RBRACE: "}",
}

# Closing character expected for each opener
MATCHING: dict[TokenType, TokenType] = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.HASH_LBRACE: TokenType.RBRACE,
}

QUOTE_FORMS: dict[TokenType, str] = {
    TokenType.QUOTE: "quote",
    TokenType.QUASIQUOTE: "quasiquote",
    TokenType.UNQUOTE: "unquote",
    TokenType.UNQUOTE_SPLICING: "unquote-splicing",
}

# Characters that end an atom
_TERMINATORS = frozenset("()[]{}\";`~,")


def is_whitespace(ch: str) -> bool:
    """Return True if ch separates tokens (commas count as whitespace)."""
    return ch.isspace() or ch == ","


def is_atom_char(ch: str) -> bool:
    """Return True if ch can continue a symbol, keyword, or number."""
    return bool(ch) and not ch.isspace() and ch not in _TERMINATORS


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch in "0123456789abcdefABCDEF"
