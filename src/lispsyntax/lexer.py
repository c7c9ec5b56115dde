"""Lexer: converts source text into a lazy token stream."""

from __future__ import annotations

import re
from collections.abc import Iterator

from lispsyntax.codec import STRING_ESCAPES, read_char_name, read_number
from lispsyntax.errors import InvalidTokenError, UnclosedError
from lispsyntax.tokens import (
    Position,
    Span,
    Token,
    TokenType,
    is_atom_char,
    is_hex_digit,
    is_whitespace,
)

_SINGLE: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "'": TokenType.QUOTE,
    "`": TokenType.QUASIQUOTE,
}

_OPERATOR_RE = re.compile(r"[-+*/\\<>=!&|%^~÷.:$≤≥≠]+")
_SEGMENT = r"[^\s\d:./\\#'()\[\]{}\";`~,][^\s:./\\()\[\]{}\";`~,]*"
_PATH_RE = re.compile(rf"(?:::)?{_SEGMENT}(?:(?:\.|/|::){_SEGMENT})*")
_KEYWORD_RE = re.compile(rf"{_SEGMENT}(?:(?:\.|/){_SEGMENT})*")


def is_symbol_text(text: str) -> bool:
    """Return True if text is a legal symbol spelling."""
    return bool(_OPERATOR_RE.fullmatch(text) or _PATH_RE.fullmatch(text))


class Lexer:
    """Tokenize source text, yielding Token objects on demand."""

    def __init__(self, source: str, filename: str = "input.clj") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1

    def __iter__(self) -> Iterator[Token]:
        while True:
            self._skip_ignored()
            if self._pos >= len(self._source):
                pos = self._current_pos()
                yield Token(TokenType.EOF, "", "", Span(pos, pos))
                return
            yield self._lex_token()

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _make(self, tt: TokenType, value: str, start: Position) -> Token:
        end = self._current_pos()
        raw = self._source[start.offset : end.offset]
        return Token(tt, value, raw, Span(start, end))

    def _invalid(self, start: Position, reason: str = "") -> InvalidTokenError:
        end = self._current_pos()
        raw = self._source[start.offset : end.offset]
        return InvalidTokenError(raw, Span(start, end), self._source, reason)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _skip_ignored(self) -> None:
        """Skip whitespace, commas and ; comments."""
        while self._pos < len(self._source):
            ch = self._peek()
            if is_whitespace(ch):
                self._advance()
            elif ch == ";":
                while self._pos < len(self._source) and self._peek() != "\n":
                    self._advance()
            else:
                return

    def _lex_token(self) -> Token:
        start = self._current_pos()
        ch = self._peek()

        if ch in _SINGLE:
            self._advance()
            return self._make(_SINGLE[ch], ch, start)

        if ch == "~":
            self._advance()
            if self._peek() == "@":
                self._advance()
                return self._make(TokenType.UNQUOTE_SPLICING, "~@", start)
            return self._make(TokenType.UNQUOTE, "~", start)

        if ch == "#":
            self._advance()
            if self._peek() == "{":
                self._advance()
                return self._make(TokenType.HASH_LBRACE, "#{", start)
            if self._peek() == "#":
                self._advance()
                return self._lex_number(start, "##")
            self._read_atom_text()
            raise self._invalid(start, "unsupported dispatch macro")

        if ch == '"':
            return self._lex_string(start)

        if ch == "\\":
            return self._lex_character(start)

        if ch == ":":
            return self._lex_keyword(start)

        if ch.isdigit() or (ch in "+-" and self._peek(1).isdigit()):
            return self._lex_number(start)

        return self._lex_symbol(start)

    def _read_atom_text(self) -> str:
        chars = []
        while self._pos < len(self._source) and is_atom_char(self._peek()):
            chars.append(self._advance())
        return "".join(chars)

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def _lex_symbol(self, start: Position) -> Token:
        text = self._read_atom_text()
        if not is_symbol_text(text):
            raise self._invalid(start)
        return self._make(TokenType.SYMBOL, text, start)

    def _lex_keyword(self, start: Position) -> Token:
        text = self._read_atom_text()
        # ":" alone and "::"-prefixed atoms are symbols (ranges, type ascription)
        if text == ":" or text.startswith("::"):
            if not is_symbol_text(text):
                raise self._invalid(start)
            return self._make(TokenType.SYMBOL, text, start)
        name = text[1:]
        if not (_KEYWORD_RE.fullmatch(name) or _OPERATOR_RE.fullmatch(name)):
            raise self._invalid(start)
        return self._make(TokenType.KEYWORD, name, start)

    def _lex_number(self, start: Position, prefix: str = "") -> Token:
        text = prefix + self._read_atom_text()
        try:
            read_number(text)
        except ValueError as exc:
            raise self._invalid(start, str(exc)) from None
        return self._make(TokenType.NUMBER, text, start)

    def _lex_character(self, start: Position) -> Token:
        self._advance()  # consume backslash
        if self._pos >= len(self._source):
            raise self._invalid(start, "unexpected end of input after '\\'")

        # First character is taken as-is, so \( and \; are characters
        chars = [self._advance()]
        while self._pos < len(self._source) and self._peek().isalnum():
            chars.append(self._advance())
        try:
            value = read_char_name("".join(chars))
        except ValueError as exc:
            raise self._invalid(start, str(exc)) from None
        return self._make(TokenType.CHARACTER, value, start)

    def _lex_string(self, start: Position) -> Token:
        self._advance()  # consume opening quote
        chars: list[str] = []
        while True:
            if self._pos >= len(self._source):
                raise UnclosedError('"', Span(start, self._current_pos()), self._source)
            ch = self._peek()
            if ch == '"':
                self._advance()
                return self._make(TokenType.STRING, "".join(chars), start)
            if ch == "\\":
                chars.append(self._lex_string_escape())
            else:
                chars.append(self._advance())

    def _lex_string_escape(self) -> str:
        start = self._current_pos()
        self._advance()  # consume backslash

        if self._pos >= len(self._source):
            raise UnclosedError('"', Span(start, self._current_pos()), self._source)

        ch = self._advance()
        if ch in STRING_ESCAPES:
            return STRING_ESCAPES[ch]

        if ch == "u":
            digits = []
            for _ in range(4):
                if not is_hex_digit(self._peek()):
                    raise self._invalid(start, "expected 4 hex digits after \\u")
                digits.append(self._advance())
            return chr(int("".join(digits), 16))

        raise self._invalid(start, f"invalid string escape sequence '\\{ch}'")


def tokenize(source: str, filename: str = "input.clj") -> Iterator[Token]:
    """Convenience function: lazily tokenize source text."""
    return iter(Lexer(source, filename))
