"""Backward transducer: host AST nodes to surface forms and text."""

from __future__ import annotations

from fractions import Fraction

from lispsyntax.codec import unescape_symbol
from lispsyntax.errors import InvalidFormCountError, InvalidFormStructureError
from lispsyntax.forms import NIL, Atom, AtomKind, Compound, Form, FormTag, keyword, lst, sym, vect
from lispsyntax.hostast import (
    NOTHING,
    And,
    Assignment,
    Block,
    Call,
    Comparison,
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
    dict_pairs,
    set_items,
)
from lispsyntax.render import render
from lispsyntax.values import Char, UInt


def detranspile(node: Node, top_level: bool = False) -> str:
    """Render a host AST node as surface text."""
    return render(to_form(node, top_level))


def to_form(node: Node, top_level: bool = False) -> Form:
    """Translate a host AST node into a surface form.

    Only the root sees ``top_level``; children are translated as nested
    forms, except the body of a module.
    """
    match node:
        case Literal(value=value):
            return literal_form(value)
        case Identifier(name=name):
            return _symbol(name)
        case Quote(value=Identifier(name=name)):
            # the sentinel keyword keeps its name instead of becoming :nil
            return keyword(name if name == NOTHING else unescape_symbol(name))
        case Quote(value=value):
            return lst(sym("quote"), to_form(value))
        case Interpolate(value=value):
            return lst(sym("unquote"), to_form(value))

        case Call(callee=Identifier(name="//"), args=(Literal(value=num), Literal(value=den))) if (
            _is_int(num) and _is_int(den) and den != 0
        ):
            return Atom(AtomKind.NUMBER, Fraction(num, den))

        case Tuple(items=()):
            return lst()
        case Block(body=()):
            # an empty block reads better as nil than as (do)
            return NIL
        case Block(body=(only,)):
            return to_form(only)
        case Block(body=body):
            return lst(sym("do"), *_forms(body))
        case If(condition=cond, then=then, otherwise=None):
            return lst(sym("if"), to_form(cond), to_form(then))
        case If(condition=cond, then=then, otherwise=otherwise):
            return lst(sym("if"), to_form(cond), to_form(then), to_form(otherwise))

        case Comparison(operands=(left, op, right)):
            return lst(to_form(op), to_form(left), to_form(right))
        case Comparison(operands=operands):
            raise InvalidFormCountError("comparison", node, "3", str(len(operands)))

        case Let(bindings=bindings, body=body):
            return lst(sym("let"), vect(*_let_bindings(bindings)), to_form(body))
        case FunctionDef(name=None, params=params, body=body):
            return lst(sym("fn"), vect(*_forms(params)), *_spliced_body(body))
        case FunctionDef(name=name, params=params, body=body):
            return lst(
                sym("defn" if top_level else "fn"),
                to_form(name),
                vect(*_forms(params)),
                *_spliced_body(body),
            )
        case Lambda(params=params, body=body):
            if isinstance(params, tuple):
                param_forms = _forms(params)
            else:
                param_forms = (to_form(params),)
            return lst(sym("fn"), vect(*param_forms), to_form(body))
        case Assignment(target=target, value=value):
            if not top_level:
                raise InvalidFormStructureError(
                    "assignment", node, "only top-level assignments become definitions"
                )
            return lst(sym("def"), to_form(target), to_form(value))

        case Ref(collection=coll, indices=indices):
            return lst(sym("aget"), to_form(coll), *_forms(indices))
        case Range(parts=(start, Identifier(name="end"))):
            return lst(sym(":"), to_form(start))
        case Range(parts=parts):
            if not 2 <= len(parts) <= 3:
                raise InvalidFormCountError("range", node, "2 to 3", str(len(parts)))
            return lst(sym(":"), *_forms(parts))

        case Module(name=name, body=body):
            return lst(
                sym("module"), to_form(name), *(to_form(n, top_level=True) for n in body)
            )
        case Import(args=args):
            return lst(sym("import"), *_forms(args))
        case Using(args=args):
            return lst(sym("use"), *_forms(args))
        case Export(args=args):
            return lst(sym("export"), *_forms(args))

        case DotAccess(base=base, field=field):
            return _dot_access(base, field)
        case TypeAscription(operands=operands):
            return _type_ascription(operands)
        case Curly(args=args):
            return lst(sym("curly"), *_forms(args))
        case And(args=args):
            return lst(sym("and"), *_forms(args))
        case Or(args=args):
            return lst(sym("or"), *_forms(args))

        case Vect(items=items):
            return vect(*_forms(items))
        case Tuple(items=items):
            return lst(sym("tuple"), *_forms(items))
        case MacroCall(name=name, args=args):
            return lst(_symbol(name), *(quoted_form(a) for a in args))
        case RawExpr(head=head, args=args):
            return lst(_symbol(head), *_forms(args))

        case Call(callee=callee, args=args):
            if (pairs := dict_pairs(node)) is not None:
                return Compound(FormTag.MAP, tuple(f for kv in pairs for f in _forms(kv)))
            if (items := set_items(node)) is not None:
                return Compound(FormTag.SET, _forms(items))
            return lst(to_form(callee), *_forms(args))

    raise InvalidFormStructureError(
        type(node).__name__, node, "no surface form for this node"
    )


# ---------------------------------------------------------------------------
# Atoms
# ---------------------------------------------------------------------------


def literal_form(value: object) -> Atom:
    """Atom for a literal value."""
    if value is None:
        return NIL
    if isinstance(value, bool):
        return Atom(AtomKind.BOOLEAN, value)
    if isinstance(value, Char):
        return Atom(AtomKind.CHARACTER, value.value)
    if isinstance(value, str):
        return Atom(AtomKind.STRING, value)
    if isinstance(value, (int, float, Fraction, UInt)):
        return Atom(AtomKind.NUMBER, value)
    raise InvalidFormStructureError("literal", value, "unsupported literal value")


def _symbol(name: str) -> Atom:
    if name == NOTHING:
        return NIL
    return sym(unescape_symbol(name))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _forms(nodes: tuple[Node, ...]) -> tuple[Form, ...]:
    return tuple(to_form(n) for n in nodes)


# ---------------------------------------------------------------------------
# Compound helpers
# ---------------------------------------------------------------------------


def _let_bindings(bindings: tuple[Node, ...]) -> list[Form]:
    out: list[Form] = []
    for binding in bindings:
        match binding:
            case Assignment(target=target, value=value):
                out.extend((to_form(target), to_form(value)))
            case Identifier():
                # `let x` rebinds x to itself
                out.extend((to_form(binding), to_form(binding)))
            case _:
                raise InvalidFormStructureError("let", binding, "binding must be an assignment")
    return out


def _spliced_body(body: Node) -> tuple[Form, ...]:
    """Body forms of a definition; a (do ...) body is spliced in."""
    form = to_form(body)
    if isinstance(form, Compound) and form.head == "do":
        return form.elements[1:]
    return (form,)


def _dot_access(base: Node, field: str) -> Form:
    name = unescape_symbol(field)
    base_form = to_form(base)
    if isinstance(base_form, Atom) and base_form.is_symbol() and "::" not in str(base_form.value):
        return sym(f"{base_form.value}.{name}")
    # (. (f x) a) plus .b -> (. (f x) a.b)
    if (
        isinstance(base_form, Compound)
        and base_form.head == "."
        and len(base_form.elements) == 3
        and isinstance(last := base_form.elements[-1], Atom)
        and last.is_symbol()
    ):
        return lst(*base_form.elements[:-1], sym(f"{last.value}.{name}"))
    return lst(sym("."), base_form, sym(name))


def _type_ascription(operands: tuple[Node, ...]) -> Form:
    if operands and all(isinstance(op, Identifier) for op in operands):
        names = [unescape_symbol(op.name) for op in operands]  # type: ignore[union-attr]
        text = "::".join(names)
        return sym(text if len(names) > 1 else f"::{text}")
    if len(operands) == 2 and isinstance(operands[1], Identifier):
        left = to_form(operands[0])
        if isinstance(left, Atom) and left.is_symbol() and "::" not in str(left.value):
            return sym(f"{left.value}::{unescape_symbol(operands[1].name)}")
    return lst(sym("::"), *_forms(operands))


# ---------------------------------------------------------------------------
# Quoted mode (macro arguments)
# ---------------------------------------------------------------------------


def quoted_form(node: Node) -> Form:
    """Translate a macro argument.

    Quotes are unwrapped one level; collections recurse; any other
    expression is written out as its host head followed by its parts.
    """
    match node:
        case Quote(value=value):
            return to_form(value)
        case Literal() | Identifier():
            return to_form(node)
        case Vect(items=items):
            return vect(*(quoted_form(i) for i in items))
        case Tuple(items=items):
            return lst(sym("tuple"), *(quoted_form(i) for i in items))
        case Call():
            if (pairs := dict_pairs(node)) is not None:
                return Compound(
                    FormTag.MAP, tuple(quoted_form(n) for kv in pairs for n in kv)
                )
            if (items := set_items(node)) is not None:
                return Compound(FormTag.SET, tuple(quoted_form(i) for i in items))
    head, parts = expr_parts(node)
    return lst(_symbol(head), *(quoted_form(p) for p in parts))


def expr_parts(node: Node) -> tuple[str, tuple[Node, ...]]:
    """Host expression head and ordered parts of a compound node."""
    match node:
        case Call(callee=callee, args=args):
            return "call", (callee, *args)
        case Comparison(operands=operands):
            return "comparison", operands
        case If(condition=cond, then=then, otherwise=otherwise):
            return "if", (cond, then) if otherwise is None else (cond, then, otherwise)
        case Block(body=body):
            return "block", body
        case Let(bindings=bindings, body=body):
            return "let", (body, *bindings)
        case FunctionDef(name=name, params=params, body=body):
            signature = Tuple(params) if name is None else Call(name, params)
            return "function", (signature, body)
        case Lambda(params=params, body=body):
            return "->", (Tuple(params) if isinstance(params, tuple) else params, body)
        case Assignment(target=target, value=value):
            return "=", (target, value)
        case Import(args=args):
            return "import", args
        case Using(args=args):
            return "using", args
        case Export(args=args):
            return "export", args
        case Ref(collection=coll, indices=indices):
            return "ref", (coll, *indices)
        case Range(parts=parts):
            return ":", parts
        case Module(name=name, body=body):
            return "module", (name, Block(body))
        case DotAccess(base=base, field=field):
            return ".", (base, Quote(Identifier(field)))
        case TypeAscription(operands=operands):
            return "::", operands
        case Curly(args=args):
            return "curly", args
        case MacroCall(name=name, args=args):
            return "macrocall", (Identifier(name), *args)
        case And(args=args):
            return "&&", args
        case Or(args=args):
            return "||", args
        case Interpolate(value=value):
            return "$", (value,)
        case RawExpr(head=head, args=args):
            return head, args
        case Vect(items=items):
            return "vect", items
        case Tuple(items=items):
            return "tuple", items
        case Quote(value=value):
            return "quote", (value,)
    raise InvalidFormStructureError(type(node).__name__, node, "not a compound expression")
