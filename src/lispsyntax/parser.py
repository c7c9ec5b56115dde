"""Parser: converts a token stream into surface forms."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from lispsyntax.codec import read_number
from lispsyntax.errors import ExtraError, InvalidFormCountError, MismatchedError, UnclosedError
from lispsyntax.forms import Atom, AtomKind, Compound, Form, FormTag
from lispsyntax.lexer import tokenize
from lispsyntax.tokens import (
    CLOSERS,
    MATCHING,
    OPENERS,
    QUOTE_FORMS,
    Span,
    Token,
    TokenType,
)

_LITERAL_SYMBOLS: dict[str, Atom] = {
    "nil": Atom(AtomKind.NIL, None),
    "true": Atom(AtomKind.BOOLEAN, True),
    "false": Atom(AtomKind.BOOLEAN, False),
}


class Parser:
    """Recursive descent parser over a lazily consumed token stream.

    Iterating the parser yields one top-level form at a time, so a
    structural error stops the read before the rest of the input is
    tokenized.
    """

    def __init__(self, tokens: Iterable[Token], source: str = "") -> None:
        self._tokens = iter(tokens)
        self._source = source
        self._current = next(self._tokens)

    def __iter__(self) -> Iterator[Form]:
        while not self._at(TokenType.EOF):
            yield self._parse_form()

    def parse(self) -> list[Form]:
        return list(self)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _at(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _advance(self) -> Token:
        tok = self._current
        if tok.type != TokenType.EOF:
            self._current = next(self._tokens)
        return tok

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def _parse_form(self) -> Form:
        tok = self._current

        if tok.type in OPENERS:
            return self._parse_compound()

        if tok.type in CLOSERS:
            raise ExtraError(CLOSERS[tok.type], tok.span, self._source)

        if tok.type in QUOTE_FORMS:
            return self._parse_quoted()

        self._advance()
        return self._atom(tok)

    def _parse_compound(self) -> Compound:
        open_tok = self._advance()
        closer = MATCHING[open_tok.type]
        elements: list[Form] = []

        while True:
            tok = self._current
            if tok.type == TokenType.EOF:
                raise UnclosedError(CLOSERS[closer], open_tok.span, self._source)
            if tok.type in CLOSERS:
                if tok.type != closer:
                    raise MismatchedError(
                        CLOSERS[closer], CLOSERS[tok.type], tok.span, self._source
                    )
                break
            elements.append(self._parse_form())

        close_tok = self._advance()
        span = Span(open_tok.span.start, close_tok.span.end)
        return Compound(_tag_for(open_tok.type, len(elements)), tuple(elements), span)

    def _parse_quoted(self) -> Compound:
        marker = self._advance()
        name = QUOTE_FORMS[marker.type]
        if self._at(TokenType.EOF, *CLOSERS):
            raise InvalidFormCountError(
                name, marker.raw, "1", "0", marker.span, self._source
            )
        inner = self._parse_form()
        head = Atom(AtomKind.SYMBOL, name, marker.span)
        end = inner.span.end if inner.span is not None else marker.span.end
        return Compound(FormTag.LIST, (head, inner), Span(marker.span.start, end))

    def _atom(self, tok: Token) -> Atom:
        match tok.type:
            case TokenType.SYMBOL:
                literal = _LITERAL_SYMBOLS.get(tok.value)
                if literal is not None:
                    return Atom(literal.kind, literal.value, tok.span)
                return Atom(AtomKind.SYMBOL, tok.value, tok.span)
            case TokenType.KEYWORD:
                return Atom(AtomKind.KEYWORD, tok.value, tok.span)
            case TokenType.STRING:
                return Atom(AtomKind.STRING, tok.value, tok.span)
            case TokenType.CHARACTER:
                return Atom(AtomKind.CHARACTER, tok.value, tok.span)
            case TokenType.NUMBER:
                return Atom(AtomKind.NUMBER, read_number(tok.value), tok.span)
        raise AssertionError(f"unexpected token {tok.type}")


def _tag_for(opener: TokenType, count: int) -> FormTag:
    if opener == TokenType.LPAREN:
        return FormTag.LIST
    if opener == TokenType.LBRACKET:
        return FormTag.VECTOR
    if opener == TokenType.HASH_LBRACE:
        return FormTag.SET
    # Braces hold key/value pairs unless the count is odd
    return FormTag.MAP if count % 2 == 0 else FormTag.SET


def read_forms(source: str, filename: str = "input.clj") -> Iterator[Form]:
    """Lazily read top-level forms from source text."""
    return iter(Parser(tokenize(source, filename), source))


def parse(source: str, filename: str = "input.clj") -> list[Form]:
    """Convenience function: parse source text and return all top-level forms."""
    return Parser(tokenize(source, filename), source).parse()
