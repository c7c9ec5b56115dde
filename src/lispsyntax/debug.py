"""--debug host AST dump to stderr."""

from __future__ import annotations

import sys
from dataclasses import fields
from typing import TextIO

from lispsyntax.hostast import DotAccess, Identifier, Literal, MacroCall, Node, RawExpr


def dump_ast(nodes: list[Node], *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable host AST tree to *file*."""
    for node in nodes:
        _dump_node(node, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    match node:
        case Literal(value=value):
            f.write(f"{_indent(depth)}Literal({value!r})\n")
        case Identifier(name=name):
            f.write(f"{_indent(depth)}Identifier {name}\n")
        case DotAccess(base=base, field=field):
            f.write(f"{_indent(depth)}DotAccess .{field}\n")
            _dump_node(base, depth + 1, f)
        case MacroCall(name=name, args=args):
            f.write(f"{_indent(depth)}MacroCall {name}\n")
            _dump_children(args, depth + 1, f)
        case RawExpr(head=head, args=args):
            f.write(f"{_indent(depth)}RawExpr {head}\n")
            _dump_children(args, depth + 1, f)
        case _:
            f.write(f"{_indent(depth)}{type(node).__name__}\n")
            for fld in fields(node):
                value = getattr(node, fld.name)
                if value is None:
                    continue
                f.write(f"{_indent(depth + 1)}{fld.name}:\n")
                if isinstance(value, tuple):
                    _dump_children(value, depth + 2, f)
                else:
                    _dump_node(value, depth + 2, f)


def _dump_children(children: tuple[Node, ...], depth: int, f: TextIO) -> None:
    for child in children:
        _dump_node(child, depth, f)
