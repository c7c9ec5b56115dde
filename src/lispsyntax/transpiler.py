"""Forward transducer: surface forms to host AST nodes."""

from __future__ import annotations

import re
from collections.abc import Callable

from lispsyntax.codec import escape_symbol, is_operator
from lispsyntax.errors import (
    InvalidFormCountError,
    InvalidFormStructureError,
    WrappedException,
)
from lispsyntax.forms import Atom, AtomKind, Compound, Form, FormTag
from lispsyntax.hostast import (
    And,
    Assignment,
    Block,
    Call,
    Curly,
    DotAccess,
    Export,
    FunctionDef,
    Identifier,
    If,
    Import,
    Interpolate,
    Lambda,
    Let,
    Literal,
    MacroCall,
    Module,
    Node,
    Or,
    Quote,
    Range,
    RawExpr,
    Ref,
    Tuple,
    TypeAscription,
    Using,
    Vect,
    dict_literal,
    keyword,
    set_literal,
)
from lispsyntax.parser import read_forms
from lispsyntax.values import Char

_PATH_SEP = re.compile(r"[./]")


class Transpiler:
    """Translate surface forms into host AST nodes.

    ``source`` is only used to give errors their source context.
    """

    def __init__(self, source: str = "") -> None:
        self._source = source

    def to_ast(self, form: Form, top_level: bool = False) -> Node:
        if isinstance(form, Atom):
            return self._atom(form)

        match form.tag:
            case FormTag.VECTOR:
                return Vect(self._all(form.elements))
            case FormTag.MAP:
                return dict_literal(self._pairs(form, self.to_ast))
            case FormTag.SET:
                return set_literal(self._all(form.elements))
        return self._list(form, top_level)

    def top_level(self, form: Form) -> Node:
        """Translate one top-level form, positioning unexpected failures at it."""
        try:
            return self.to_ast(form, top_level=True)
        except RecursionError as exc:
            raise WrappedException(exc, "form nested too deeply", form.span, self._source) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _all(self, forms: tuple[Form, ...]) -> tuple[Node, ...]:
        return tuple(self.to_ast(f) for f in forms)

    def _body(self, forms: tuple[Form, ...]) -> Node:
        """Collapse a sequence of body forms the way ``do`` does."""
        if not forms:
            return Literal(None)
        if len(forms) == 1:
            return self.to_ast(forms[0])
        return Block(self._all(forms))

    def _pairs(
        self, form: Compound, read: Callable[[Form], Node], kind: str = "map"
    ) -> list[tuple[Node, Node]]:
        elements = form.elements
        if len(elements) % 2:
            raise self._count(kind, form, "an even number of", len(elements))
        return [(read(elements[i]), read(elements[i + 1])) for i in range(0, len(elements), 2)]

    def _structure(self, kind: str, form: Form, message: str) -> InvalidFormStructureError:
        return InvalidFormStructureError(kind, form, message, form.span, self._source)

    def _count(self, kind: str, form: Form, expected: str, found: int) -> InvalidFormCountError:
        return InvalidFormCountError(kind, form, expected, str(found), form.span, self._source)

    def _check_count(self, kind: str, form: Compound, low: int, high: int | None = None) -> None:
        n = len(form.elements)
        if high is None:
            if n < low:
                raise self._count(kind, form, f"at least {low}", n)
        elif not low <= n <= high:
            expected = str(low) if low == high else f"{low} to {high}"
            raise self._count(kind, form, expected, n)

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def _atom(self, atom: Atom) -> Node:
        match atom.kind:
            case AtomKind.SYMBOL:
                return self._symbol(str(atom.value), atom)
            case AtomKind.KEYWORD:
                return keyword(escape_symbol(str(atom.value)))
            case AtomKind.CHARACTER:
                return Literal(Char(str(atom.value)))
            case AtomKind.NIL:
                return Literal(None)
            case AtomKind.STRING | AtomKind.NUMBER | AtomKind.BOOLEAN:
                return Literal(atom.value)  # type: ignore[arg-type]
        raise self._structure("atom", atom, "unknown atom kind")

    def _symbol(self, name: str, atom: Atom) -> Node:
        if is_operator(name):
            return Identifier(name)
        if "::" in name:
            parts = name.split("::")
            if parts[0] == "":
                parts = parts[1:]
            return TypeAscription(tuple(self._path(p, atom) for p in parts))
        return self._path(name, atom)

    def _path(self, name: str, atom: Atom) -> Node:
        """``a.b/c`` -> nested DotAccess; a plain name -> Identifier."""
        segments = _PATH_SEP.split(name)
        if not all(segments):
            raise self._structure("symbol", atom, "empty name segment")
        node: Node = Identifier(escape_symbol(segments[0]))
        for seg in segments[1:]:
            node = DotAccess(node, escape_symbol(seg))
        return node

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _list(self, form: Compound, top_level: bool) -> Node:
        elements = form.elements
        if not elements:
            return Tuple(())

        head = form.head
        if head is not None:
            special = _SPECIAL_FORMS.get(head)
            if special is not None:
                return special(self, form, top_level)
            if head.startswith("@") and len(head) > 1:
                return self._macro_call(form)

        first = elements[0]
        if isinstance(first, Compound) or first.is_symbol():
            return Call(self.to_ast(first), self._all(elements[1:]))
        raise self._structure("call", form, "head of a call must be a symbol or a form")

    def _do(self, form: Compound, top_level: bool) -> Node:
        # (do) is nil rather than an empty block
        return self._body(form.elements[1:])

    def _if(self, form: Compound, top_level: bool) -> Node:
        self._check_count("if", form, 3, 4)
        args = self._all(form.elements[1:])
        return If(*args)

    def _quote(self, form: Compound, top_level: bool) -> Node:
        self._check_count(str(form.head), form, 2, 2)
        return Quote(self.to_ast(form.elements[1]))

    def _unquote(self, form: Compound, top_level: bool) -> Node:
        self._check_count("unquote", form, 2, 2)
        return Interpolate(self.to_ast(form.elements[1]))

    def _unquote_splicing(self, form: Compound, top_level: bool) -> Node:
        raise self._structure("unquote-splicing", form, "splicing unquote is not supported")

    def _tuple(self, form: Compound, top_level: bool) -> Node:
        return Tuple(self._all(form.elements[1:]))

    def _let(self, form: Compound, top_level: bool) -> Node:
        self._check_count("let", form, 2)
        bindings = form.elements[1]
        if not (isinstance(bindings, Compound) and bindings.tag is FormTag.VECTOR):
            raise self._structure("let", bindings, "bindings must be a vector")
        pairs = self._pairs(bindings, self.to_ast, "let bindings")
        return Let(
            tuple(Assignment(k, v) for k, v in pairs),
            self._body(form.elements[2:]),
        )

    def _params(self, form: Form, kind: str) -> tuple[Node, ...]:
        if not (isinstance(form, Compound) and form.tag is FormTag.VECTOR):
            raise self._structure(kind, form, "expected a parameter vector")
        return self._all(form.elements)

    def _fn(self, form: Compound, top_level: bool) -> Node:
        self._check_count("fn", form, 2)
        elements = form.elements
        if isinstance(elements[1], Compound) and elements[1].tag is FormTag.VECTOR:
            return Lambda(self._params(elements[1], "fn"), self._body(elements[2:]))
        self._check_count("fn", form, 3)
        return FunctionDef(
            self.to_ast(elements[1]),
            self._params(elements[2], "fn"),
            self._body(elements[3:]),
        )

    def _defn(self, form: Compound, top_level: bool) -> Node:
        self._check_count("defn", form, 3)
        elements = form.elements
        return FunctionDef(
            self.to_ast(elements[1]),
            self._params(elements[2], "defn"),
            self._body(elements[3:]),
        )

    def _def(self, form: Compound, top_level: bool) -> Node:
        self._check_count("def", form, 3, 3)
        if not top_level:
            raise self._structure("def", form, "definitions are only allowed at top level")
        return Assignment(self.to_ast(form.elements[1]), self.to_ast(form.elements[2]))

    def _aget(self, form: Compound, top_level: bool) -> Node:
        self._check_count("aget", form, 2)
        return Ref(self.to_ast(form.elements[1]), self._all(form.elements[2:]))

    def _range(self, form: Compound, top_level: bool) -> Node:
        self._check_count("range", form, 2, 4)
        parts = self._all(form.elements[1:])
        if len(parts) == 1:
            # (: a) is open-ended
            parts = (parts[0], Identifier("end"))
        return Range(parts)

    def _module(self, form: Compound, top_level: bool) -> Node:
        self._check_count("module", form, 2)
        body = tuple(self.to_ast(f, top_level=True) for f in form.elements[2:])
        return Module(self.to_ast(form.elements[1]), body)

    def _declaration(self, form: Compound, top_level: bool) -> Node:
        head = str(form.head)
        self._check_count(head, form, 2)
        args = self._all(form.elements[1:])
        return _DECLARATIONS[head](args)

    def _dot(self, form: Compound, top_level: bool) -> Node:
        self._check_count(".", form, 3, 3)
        base, field = form.elements[1], form.elements[2]
        if not (isinstance(field, Atom) and field.is_symbol()):
            raise self._structure(".", field, "field must be a symbol")
        segments = _PATH_SEP.split(str(field.value))
        if not all(segments):
            raise self._structure(".", field, "empty field name")
        node = self.to_ast(base)
        for seg in segments:
            node = DotAccess(node, escape_symbol(seg))
        return node

    def _ascription(self, form: Compound, top_level: bool) -> Node:
        self._check_count("::", form, 2)
        return TypeAscription(self._all(form.elements[1:]))

    def _curly(self, form: Compound, top_level: bool) -> Node:
        self._check_count("curly", form, 2)
        return Curly(self._all(form.elements[1:]))

    def _and(self, form: Compound, top_level: bool) -> Node:
        return And(self._all(form.elements[1:]))

    def _or(self, form: Compound, top_level: bool) -> Node:
        return Or(self._all(form.elements[1:]))

    # ------------------------------------------------------------------
    # Macro calls and quoted mode
    # ------------------------------------------------------------------

    def _macro_call(self, form: Compound) -> Node:
        name = escape_symbol(str(form.head))
        return MacroCall(name, tuple(self._quoted(f) for f in form.elements[1:]))

    def _quoted(self, form: Form) -> Node:
        """Read a macro argument: quotes are unwrapped, lists stay unevaluated."""
        if isinstance(form, Atom):
            if form.kind is AtomKind.KEYWORD:
                return Identifier(escape_symbol(str(form.value)))
            return self._atom(form)

        match form.tag:
            case FormTag.VECTOR:
                return Vect(tuple(self._quoted(f) for f in form.elements))
            case FormTag.MAP:
                return dict_literal(self._pairs(form, self._quoted))
            case FormTag.SET:
                return set_literal(tuple(self._quoted(f) for f in form.elements))

        if not form.elements:
            return Tuple(())
        head = form.head
        if head == "quote":
            self._check_count("quote", form, 2, 2)
            return self.to_ast(form.elements[1])
        if head == "tuple":
            return Tuple(tuple(self._quoted(f) for f in form.elements[1:]))
        if head is None:
            # a non-symbol head stays in the parts of a call expression
            return RawExpr("call", tuple(self._quoted(f) for f in form.elements))
        return RawExpr(escape_symbol(head), tuple(self._quoted(f) for f in form.elements[1:]))


_DECLARATIONS: dict[str, Callable[[tuple[Node, ...]], Node]] = {
    "import": Import,
    "use": Using,
    "export": Export,
}

_SPECIAL_FORMS: dict[str, Callable[[Transpiler, Compound, bool], Node]] = {
    "do": Transpiler._do,
    "if": Transpiler._if,
    "quote": Transpiler._quote,
    "quasiquote": Transpiler._quote,
    "unquote": Transpiler._unquote,
    "unquote-splicing": Transpiler._unquote_splicing,
    "tuple": Transpiler._tuple,
    "let": Transpiler._let,
    "fn": Transpiler._fn,
    "defn": Transpiler._defn,
    "def": Transpiler._def,
    "aget": Transpiler._aget,
    ":": Transpiler._range,
    "module": Transpiler._module,
    "import": Transpiler._declaration,
    "use": Transpiler._declaration,
    "export": Transpiler._declaration,
    ".": Transpiler._dot,
    "::": Transpiler._ascription,
    "curly": Transpiler._curly,
    "and": Transpiler._and,
    "or": Transpiler._or,
}


def to_ast(form: Form, top_level: bool = False) -> Node:
    """Convenience function: translate one surface form."""
    return Transpiler().to_ast(form, top_level)


def transpile(source: str, filename: str = "input.clj") -> list[Node]:
    """Read every top-level form in source and translate it, in order."""
    transpiler = Transpiler(source)
    return [transpiler.top_level(form) for form in read_forms(source, filename)]
