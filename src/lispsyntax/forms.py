"""Surface form tree produced by the parser and consumed by the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from lispsyntax.tokens import Span


class AtomKind(Enum):
    SYMBOL = auto()
    KEYWORD = auto()  # value is the name without the leading colon
    STRING = auto()
    CHARACTER = auto()  # value is a one-character str
    NUMBER = auto()  # int, float, Fraction, or UInt
    NIL = auto()
    BOOLEAN = auto()


class FormTag(Enum):
    LIST = auto()  # ( )
    VECTOR = auto()  # [ ]
    MAP = auto()  # { } with an even element count
    SET = auto()  # #{ }, or { } with an odd element count


@dataclass(frozen=True, slots=True)
class Atom:
    """A leaf form. Spans are ignored when comparing forms."""

    kind: AtomKind
    value: object
    span: Span | None = field(default=None, compare=False)

    def is_symbol(self, name: str | None = None) -> bool:
        return self.kind is AtomKind.SYMBOL and (name is None or self.value == name)


@dataclass(frozen=True, slots=True)
class Compound:
    """A delimited sequence of forms."""

    tag: FormTag
    elements: tuple[Form, ...]
    span: Span | None = field(default=None, compare=False)

    @property
    def head(self) -> str | None:
        """Leading symbol name of a list, the unit of dispatch."""
        if self.tag is FormTag.LIST and self.elements:
            first = self.elements[0]
            if isinstance(first, Atom) and first.kind is AtomKind.SYMBOL:
                return str(first.value)
        return None


Form = Atom | Compound


def sym(name: str) -> Atom:
    return Atom(AtomKind.SYMBOL, name)


def keyword(name: str) -> Atom:
    return Atom(AtomKind.KEYWORD, name)


def lst(*elements: Form) -> Compound:
    return Compound(FormTag.LIST, elements)


def vect(*elements: Form) -> Compound:
    return Compound(FormTag.VECTOR, elements)


NIL = Atom(AtomKind.NIL, None)
