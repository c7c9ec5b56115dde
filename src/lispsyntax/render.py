"""Renderer: converts a surface form tree to flat S-expression text."""

from __future__ import annotations

from lispsyntax.codec import format_char, format_number, format_string
from lispsyntax.forms import Atom, AtomKind, Compound, Form, FormTag

_BRACKETS: dict[FormTag, tuple[str, str]] = {
    FormTag.LIST: ("(", ")"),
    FormTag.VECTOR: ("[", "]"),
    FormTag.MAP: ("{", "}"),
    FormTag.SET: ("#{", "}"),
}


def render(form: Form) -> str:
    """Render a form, joining elements with single spaces."""
    if isinstance(form, Compound):
        return _render_compound(form)
    return _render_atom(form)


def render_all(forms: list[Form], blank_lines: int = 0) -> str:
    """Render top-level forms one per line."""
    sep = "\n" * (blank_lines + 1)
    return sep.join(render(f) for f in forms)


def _render_compound(form: Compound) -> str:
    open_, close = _BRACKETS[form.tag]
    return open_ + " ".join(render(e) for e in form.elements) + close


def _render_atom(atom: Atom) -> str:
    match atom.kind:
        case AtomKind.SYMBOL:
            return str(atom.value)
        case AtomKind.KEYWORD:
            return f":{atom.value}"
        case AtomKind.STRING:
            return format_string(str(atom.value))
        case AtomKind.CHARACTER:
            return format_char(str(atom.value))
        case AtomKind.NUMBER:
            return format_number(atom.value)  # type: ignore[arg-type]
        case AtomKind.NIL:
            return "nil"
        case AtomKind.BOOLEAN:
            return "true" if atom.value else "false"
    raise ValueError(f"unknown atom kind {atom.kind}")
