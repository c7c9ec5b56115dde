"""Error types with positions and formatted source context."""

from __future__ import annotations

from typing import Any

from lispsyntax.tokens import Position, Span


class TranslationError(Exception):
    """Base class for every error raised while translating in either direction.

    ``span`` is None for errors raised on host AST nodes, which carry no
    source positions.
    """

    def __init__(self, message: str, span: Span | None, source: str = "") -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.diagnostic())

    @property
    def position(self) -> Position | None:
        return self.span.start if self.span is not None else None

    def _where(self) -> str:
        pos = self.position
        if pos is None:
            return ""
        return f" at line {pos.line}:{pos.column}"

    def diagnostic(self) -> str:
        """Single-line description: kind, position, and offending text."""
        return f"{type(self).__name__}{self._where()}, {self.message}"

    def format(self, filename: str = "input.clj") -> str:
        if self.span is None or not self.source:
            return f"error: {self.diagnostic()}\n  --> {filename}"

        lines = self.source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.diagnostic()}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


# ---------------------------------------------------------------------------
# Reader errors
# ---------------------------------------------------------------------------


class ReaderError(TranslationError):
    """Raised by the lexer and parser on malformed source text."""


class ExtraError(ReaderError):
    """A closing delimiter with no matching opener."""

    def __init__(self, char: str, span: Span, source: str = "") -> None:
        self.char = char
        super().__init__(f"extra {char} found", span, source)


class MismatchedError(ReaderError):
    """A closing delimiter that does not match the open one."""

    def __init__(self, expected: str, found: str, span: Span, source: str = "") -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"found mismatch, expected {expected}, found {found} instead", span, source
        )


class UnclosedError(ReaderError):
    """End of input reached while a delimiter is still open."""

    def __init__(self, char: str, span: Span, source: str = "") -> None:
        self.char = char
        super().__init__(f"missing closing {char} from form starting here", span, source)


class InvalidTokenError(ReaderError):
    """Token text that matches no lexical class."""

    def __init__(self, token: str, span: Span, source: str = "", reason: str = "") -> None:
        self.token = token
        message = f"invalid token found: {token}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, span, source)


# ---------------------------------------------------------------------------
# Form errors
# ---------------------------------------------------------------------------


class FormError(TranslationError):
    """Raised by the transducers on a form or node they cannot translate."""


class InvalidFormStructureError(FormError):
    """A recognized form whose shape violates a structural precondition."""

    def __init__(
        self,
        kind: str,
        form: Any,
        message: str,
        span: Span | None = None,
        source: str = "",
    ) -> None:
        self.kind = kind
        self.form = form
        super().__init__(f"in {kind} expression, {message}: {_show(form)}", span, source)


class InvalidFormCountError(FormError):
    """A recognized form with the wrong number of sub-forms."""

    def __init__(
        self,
        kind: str,
        form: Any,
        expected: str,
        found: str,
        span: Span | None = None,
        source: str = "",
    ) -> None:
        self.kind = kind
        self.form = form
        self.expected = expected
        self.found = found
        super().__init__(
            f"{kind} should have {expected} forms, found {found} instead: {_show(form)}",
            span,
            source,
        )


class WrappedException(FormError):
    """An unexpected lower-level exception surfaced with positional context."""

    def __init__(self, error: BaseException, message: str, span: Span | None, source: str = "") -> None:
        self.error = error
        super().__init__(f"{message}: {type(error).__name__}: {error}", span, source)


def _show(form: Any) -> str:
    """Short text for a form or node in an error message."""
    from lispsyntax.forms import Atom, Compound
    from lispsyntax.render import render

    if isinstance(form, (Atom, Compound)):
        text = render(form)
    else:
        text = repr(form)
    if len(text) > 60:
        text = text[:57] + "..."
    return text
