"""S-expression emitter — renders an AST as `(op child...)` text.

Leaves print with C `%g` formatting; `^` prints as `expt` and `%` as `mod`.
"""

from __future__ import annotations

from .ast import OP_NAMES, Binary, Node, Number, Unary


def format_number(value: float) -> str:
    return "%g" % value


def format_result(value: float) -> str:
    """Format a final result with 15 significant digits."""
    return "%.15g" % value


def to_sexpr(node: Node) -> str:
    """Render an expression tree as an s-expression."""
    parts: list[str] = []
    # Items are either literal text or nodes still to be rendered.
    work: list[Node | str] = [node]
    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Number):
            parts.append(format_number(item.value))
        elif isinstance(item, Unary):
            work.extend([")", item.child, "(" + OP_NAMES[item.op] + " "])
        elif isinstance(item, Binary):
            work.extend(
                [")", item.right, " ", item.left, "(" + OP_NAMES[item.op] + " "]
            )
        else:
            raise TypeError("cannot emit " + type(item).__name__)
    return "".join(parts)
