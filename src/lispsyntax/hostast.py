"""Host language AST node types.

The host is a Julia-like expression language.  Nodes form a closed set of
frozen dataclasses; ``Node`` is their union.  Nodes carry no source
positions, and each node owns its children.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from lispsyntax.values import Char, UInt

LiteralValue = None | bool | int | float | str | Char | UInt | Fraction

# Identifier used by the host for "no value"
NOTHING = "nothing"


@dataclass(frozen=True, slots=True)
class Literal:
    """A constant: nothing (None), bool, number, string, or character."""

    value: LiteralValue


@dataclass(frozen=True, slots=True)
class Identifier:
    name: str


@dataclass(frozen=True, slots=True)
class Quote:
    """Quoted expression. Quoting an Identifier gives a keyword."""

    value: Node


@dataclass(frozen=True, slots=True)
class Interpolate:
    """Interpolation inside a quoted expression."""

    value: Node


@dataclass(frozen=True, slots=True)
class Call:
    callee: Node
    args: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Comparison:
    """Infix comparison chain: operand, operator, operand, ..."""

    operands: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class If:
    condition: Node
    then: Node
    otherwise: Node | None = None


@dataclass(frozen=True, slots=True)
class Block:
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Let:
    """Bindings are Assignment nodes, or bare Identifiers rebinding a name."""

    bindings: tuple[Node, ...]
    body: Node


@dataclass(frozen=True, slots=True)
class FunctionDef:
    """A ``function`` definition; anonymous when name is None."""

    name: Node | None
    params: tuple[Node, ...]
    body: Node


@dataclass(frozen=True, slots=True)
class Lambda:
    """Arrow function; params is a tuple or a single bare Identifier."""

    params: tuple[Node, ...] | Node
    body: Node


@dataclass(frozen=True, slots=True)
class Assignment:
    target: Node
    value: Node


@dataclass(frozen=True, slots=True)
class Import:
    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Using:
    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Export:
    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Ref:
    """Subscript: collection[indices...]."""

    collection: Node
    indices: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Range:
    """start:stop or start:step:stop; ``end`` as the last part is open-ended."""

    parts: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class DotAccess:
    base: Node
    field: str


@dataclass(frozen=True, slots=True)
class TypeAscription:
    operands: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Curly:
    """Parameterized type application: T{P...}."""

    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class MacroCall:
    """Macro application. name includes the leading '@'."""

    name: str
    args: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Module:
    name: Node
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class And:
    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Or:
    args: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Vect:
    items: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Tuple:
    items: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class RawExpr:
    """Unevaluated expression read as a macro argument."""

    head: str
    args: tuple[Node, ...] = ()


Node = (
    Literal
    | Identifier
    | Quote
    | Interpolate
    | Call
    | Comparison
    | If
    | Block
    | Let
    | FunctionDef
    | Lambda
    | Assignment
    | Import
    | Using
    | Export
    | Ref
    | Range
    | DotAccess
    | TypeAscription
    | Curly
    | MacroCall
    | Module
    | And
    | Or
    | Vect
    | Tuple
    | RawExpr
)


def keyword(name: str) -> Quote:
    """Keyword literal, a quoted identifier."""
    return Quote(Identifier(name))


def dict_literal(pairs: list[tuple[Node, Node]]) -> Call:
    return Call(Identifier("Dict"), tuple(Call(Identifier("=>"), (k, v)) for k, v in pairs))


def set_literal(items: tuple[Node, ...]) -> Call:
    return Call(Identifier("Set"), (Vect(items),))


def dict_pairs(node: Node) -> list[tuple[Node, Node]] | None:
    """Key/value pairs of a ``Dict(k => v, ...)`` call, or None if it is not one."""
    if not (isinstance(node, Call) and node.callee == Identifier("Dict")):
        return None
    pairs: list[tuple[Node, Node]] = []
    for arg in node.args:
        if not (
            isinstance(arg, Call) and arg.callee == Identifier("=>") and len(arg.args) == 2
        ):
            return None
        pairs.append((arg.args[0], arg.args[1]))
    return pairs


def set_items(node: Node) -> tuple[Node, ...] | None:
    """Items of a ``Set([...])`` call, or None if it is not one."""
    if (
        isinstance(node, Call)
        and node.callee == Identifier("Set")
        and len(node.args) == 1
        and isinstance(node.args[0], Vect)
    ):
        return node.args[0].items
    return None
