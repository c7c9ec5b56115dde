"""Test reader error detection and positions."""

import pytest

from lispsyntax.errors import (
    ExtraError,
    InvalidFormCountError,
    InvalidTokenError,
    MismatchedError,
    ReaderError,
    UnclosedError,
)
from lispsyntax.parser import parse


class TestDelimiterErrors:
    def test_extra_closer(self):
        with pytest.raises(ExtraError) as exc_info:
            parse("(a) )")
        err = exc_info.value
        assert err.char == ")"
        assert err.position.column == 5
        assert err.message == "extra ) found"

    def test_extra_brace(self):
        with pytest.raises(ExtraError) as exc_info:
            parse("}")
        assert exc_info.value.char == "}"

    def test_mismatched(self):
        with pytest.raises(MismatchedError) as exc_info:
            parse("(a [b)]")
        err = exc_info.value
        assert err.expected == "]"
        assert err.found == ")"
        assert err.position.line == 1
        assert err.position.column == 6

    def test_mismatched_set(self):
        with pytest.raises(MismatchedError) as exc_info:
            parse("#{1 2]")
        assert exc_info.value.expected == "}"
        assert exc_info.value.found == "]"

    def test_unclosed_reports_opener(self):
        with pytest.raises(UnclosedError) as exc_info:
            parse("(a\n  (b c)")
        err = exc_info.value
        assert err.char == ")"
        assert err.position.line == 1
        assert err.position.column == 1

    def test_unclosed_inner(self):
        with pytest.raises(UnclosedError) as exc_info:
            parse("(a [b")
        assert exc_info.value.char == "]"
        assert exc_info.value.position.column == 4

    def test_unclosed_set(self):
        with pytest.raises(UnclosedError) as exc_info:
            parse("#{1")
        assert exc_info.value.char == "}"


class TestQuoteErrors:
    @pytest.mark.parametrize("text", ["'", "(a ')", "`", "[~]"])
    def test_marker_without_form(self, text):
        with pytest.raises(InvalidFormCountError) as exc_info:
            parse(text)
        assert exc_info.value.expected == "1"
        assert exc_info.value.found == "0"

    def test_marker_kind(self):
        with pytest.raises(InvalidFormCountError) as exc_info:
            parse("~@")
        assert exc_info.value.kind == "unquote-splicing"


class TestTokenErrors:
    def test_invalid_token_inside_form(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            parse("(f 1x)")
        assert exc_info.value.token == "1x"
        assert exc_info.value.position.column == 4

    def test_dispatch_macro(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            parse("#(inc %)")
        assert "unsupported dispatch macro" in exc_info.value.message

    def test_all_are_reader_errors(self):
        for text in ["(", ")", "(]", "#x", '"abc']:
            with pytest.raises(ReaderError):
                parse(text)
