"""Test string and character literal escapes in both directions."""

import pytest

from lispsyntax.codec import format_char, format_string, read_char_name
from lispsyntax.errors import InvalidTokenError, UnclosedError
from lispsyntax.lexer import tokenize
from lispsyntax.tokens import TokenType


class TestStringLexing:
    def test_plain(self, lex):
        tokens = lex('"hello world"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"
        assert tokens[0].raw == '"hello world"'

    def test_empty(self, lex):
        assert lex('""')[0].value == ""

    @pytest.mark.parametrize(
        "text, expected",
        [
            (r'"a\nb"', "a\nb"),
            (r'"a\tb"', "a\tb"),
            (r'"say \"hi\""', 'say "hi"'),
            (r'"back\\slash"', "back\\slash"),
            (r'"\u0041BC"', "ABC"),
        ],
    )
    def test_escape(self, lex, text, expected):
        assert lex(text)[0].value == expected

    def test_delimiters_inside_string(self, lex):
        tokens = lex('"(not [a] form)"')
        assert len(tokens) == 1
        assert tokens[0].value == "(not [a] form)"

    def test_multiline(self, lex):
        tokens = lex('"a\nb" c')
        assert tokens[0].value == "a\nb"
        assert tokens[1].span.start.line == 2

    def test_unterminated(self):
        with pytest.raises(UnclosedError) as exc_info:
            list(tokenize('(print "abc'))
        assert exc_info.value.char == '"'
        assert exc_info.value.span.start.column == 8

    def test_invalid_escape(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            list(tokenize(r'"a\qb"'))
        assert "invalid string escape" in exc_info.value.message

    def test_short_unicode_escape(self):
        with pytest.raises(InvalidTokenError):
            list(tokenize(r'"\u12"'))


class TestCharacterLexing:
    @pytest.mark.parametrize(
        "text, expected",
        [
            (r"\a", "a"),
            (r"\newline", "\n"),
            (r"\space", " "),
            (r"\tab", "\t"),
            (r"\u0041", "A"),
            (r"\(", "("),
            (r"\;", ";"),
        ],
    )
    def test_character(self, lex, text, expected):
        tokens = lex(text)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.CHARACTER
        assert tokens[0].value == expected

    def test_character_before_closer(self, lex):
        tokens = lex(r"(f \a)")
        assert [t.type for t in tokens] == [
            TokenType.LPAREN,
            TokenType.SYMBOL,
            TokenType.CHARACTER,
            TokenType.RPAREN,
        ]

    def test_unknown_name(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            list(tokenize(r"\foo"))
        assert exc_info.value.token == r"\foo"

    def test_backslash_at_end(self):
        with pytest.raises(InvalidTokenError):
            list(tokenize("\\"))


class TestFormatting:
    def test_format_string_escapes(self):
        assert format_string('a"b\\c\n') == r'"a\"b\\c\n"'

    def test_format_string_control_char(self):
        assert format_string("\x01") == r'"\u0001"'

    def test_format_string_keeps_unicode(self):
        assert format_string("héllo") == '"héllo"'

    def test_format_named_char(self):
        assert format_char("\n") == r"\newline"
        assert format_char(" ") == r"\space"

    def test_format_plain_char(self):
        assert format_char("x") == r"\x"

    def test_read_char_name(self):
        assert read_char_name("return") == "\r"
        with pytest.raises(ValueError):
            read_char_name("uZZZZ")
