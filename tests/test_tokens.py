"""Test token classification, positions, and lazy tokenizing."""

import pytest

from lispsyntax.errors import InvalidTokenError
from lispsyntax.lexer import is_symbol_text, tokenize
from lispsyntax.tokens import TokenType


class TestDelimiters:
    def test_all_delimiters(self, types):
        assert types("()[]{}#{") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.HASH_LBRACE,
        ]

    def test_delimiters_end_symbols(self, lex):
        tokens = lex("(foo)")
        assert [t.value for t in tokens] == ["(", "foo", ")"]

    def test_eof_always_last(self):
        tokens = list(tokenize("a"))
        assert tokens[-1].type == TokenType.EOF
        assert list(tokenize(""))[0].type == TokenType.EOF


class TestDiscarded:
    def test_whitespace_and_commas(self, lex):
        tokens = lex("a,  b,\n\tc")
        assert [t.value for t in tokens] == ["a", "b", "c"]

    def test_line_comment(self, lex):
        tokens = lex("a ; ignore (this\nb")
        assert [t.value for t in tokens] == ["a", "b"]

    def test_comment_at_end(self, lex):
        assert lex("; only a comment") == []


class TestQuoteMarkers:
    def test_quote_family(self, types):
        assert types("'a `b ~c ~@d") == [
            TokenType.QUOTE,
            TokenType.SYMBOL,
            TokenType.QUASIQUOTE,
            TokenType.SYMBOL,
            TokenType.UNQUOTE,
            TokenType.SYMBOL,
            TokenType.UNQUOTE_SPLICING,
            TokenType.SYMBOL,
        ]

    def test_prime_inside_symbol(self, lex):
        tokens = lex("x'")
        assert len(tokens) == 1
        assert tokens[0].value == "x'"


class TestSymbols:
    @pytest.mark.parametrize(
        "text",
        ["foo", "foo-bar?", "set!", "*out*", "->vec", "a.b.c", "str/join", "x::Int", "@time"],
    )
    def test_symbol(self, lex, text):
        tokens = lex(text)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.SYMBOL
        assert tokens[0].value == text

    @pytest.mark.parametrize("text", ["+", "-", "<=", "==", "=>", "//", ".", "::", ":"])
    def test_operator(self, lex, text):
        tokens = lex(text)
        assert tokens[0].type == TokenType.SYMBOL
        assert tokens[0].value == text

    def test_type_prefix_is_symbol(self, lex):
        tokens = lex("::Int")
        assert tokens[0].type == TokenType.SYMBOL
        assert tokens[0].value == "::Int"

    def test_minus_before_letter_is_symbol(self, lex):
        tokens = lex("-x")
        assert tokens[0].type == TokenType.SYMBOL

    @pytest.mark.parametrize("text", ["a..b", "Foo.", "a/", "a:", "#foo"])
    def test_invalid_symbol(self, text):
        with pytest.raises(InvalidTokenError) as exc_info:
            list(tokenize(text))
        assert exc_info.value.token == text

    def test_is_symbol_text(self):
        assert is_symbol_text("a.b")
        assert not is_symbol_text("1a")


class TestKeywords:
    def test_keyword(self, lex):
        tokens = lex(":foo")
        assert tokens[0].type == TokenType.KEYWORD
        assert tokens[0].value == "foo"
        assert tokens[0].raw == ":foo"

    def test_keyword_with_dashes(self, lex):
        assert lex(":foo-bar")[0].value == "foo-bar"

    def test_nothing_keyword(self, lex):
        assert lex(":nothing")[0].value == "nothing"


class TestNumbers:
    @pytest.mark.parametrize("text", ["42", "-7", "+3", "0xff", "1/2", "1.5", "1.5e3", "2e10", "2r101", "7N", "##Inf", "##-Inf", "##NaN"])
    def test_number(self, lex, text):
        tokens = lex(text)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == text

    @pytest.mark.parametrize("text", ["1abc", "1/0", "0xg", "99r1", "1.2.3", "##Foo", "##"])
    def test_invalid_number(self, text):
        with pytest.raises(InvalidTokenError):
            list(tokenize(text))


class TestPositions:
    def test_first_token(self, lex):
        tokens = lex("(a")
        assert tokens[0].span.start.line == 1
        assert tokens[0].span.start.column == 1
        assert tokens[1].span.start.column == 2

    def test_second_line(self, lex):
        tokens = lex("(a\n  b)")
        b = tokens[2]
        assert b.value == "b"
        assert b.span.start.line == 2
        assert b.span.start.column == 3
        assert b.span.start.offset == 5

    def test_span_end(self, lex):
        tokens = lex("hello")
        assert tokens[0].span.end.column == 6


class TestLaziness:
    def test_error_only_when_reached(self):
        stream = tokenize("a #bad")
        assert next(stream).value == "a"
        with pytest.raises(InvalidTokenError):
            next(stream)
