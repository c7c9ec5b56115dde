"""Bidirectional translator between Clojure-style S-expressions and a host AST."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lispsyntax.hostast import Node

__version__ = "0.1.0"


def transpile(source: str, filename: str = "input.clj") -> list[Node]:
    """Read S-expression source and translate each top-level form to a host AST node."""
    from lispsyntax.transpiler import transpile as _transpile

    return _transpile(source, filename)


def detranspile(node: Node, top_level: bool = False) -> str:
    """Render a host AST node as S-expression text."""
    from lispsyntax.detranspiler import detranspile as _detranspile

    return _detranspile(node, top_level)
