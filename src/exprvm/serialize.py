"""Serialization of AST nodes to JSON-compatible dicts."""

from __future__ import annotations

import json

from .ast import Binary, Node, Number, Unary

INDENT = 2


def _leaf(node: Node) -> dict[str, object]:
    if isinstance(node, Number):
        return {
            "type": "number",
            "value": node.value,
            "start": node.start,
            "end": node.end,
        }
    if isinstance(node, Unary):
        return {"type": "unary", "op": node.op, "start": node.start, "end": node.end}
    if isinstance(node, Binary):
        return {"type": "binary", "op": node.op, "start": node.start, "end": node.end}
    raise TypeError("cannot serialize " + type(node).__name__)


def to_dict(node: Node | None) -> dict[str, object] | None:
    """Convert a node to a dict of its type, source operator and span."""
    if node is None:
        return None
    root = _leaf(node)
    # Each entry is a node plus the dict its fields are written into.
    work: list[tuple[Node, dict[str, object]]] = [(node, root)]
    while work:
        current, d = work.pop()
        if isinstance(current, Unary):
            d["child"] = _leaf(current.child)
            work.append((current.child, d["child"]))
        elif isinstance(current, Binary):
            d["left"] = _leaf(current.left)
            d["right"] = _leaf(current.right)
            work.append((current.left, d["left"]))
            work.append((current.right, d["right"]))
    return root


def to_json(node: Node | None) -> str:
    """Serialize a node to JSON laid out like json.dumps(..., indent=2).

    Nesting is walked with a work stack; scalars go through json.dumps.
    """
    parts: list[str] = []
    work: list[tuple[object, int] | str] = [(to_dict(node), 0)]
    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        obj, level = item
        if not isinstance(obj, dict):
            parts.append(json.dumps(obj))
            continue
        pad = " " * (INDENT * (level + 1))
        pad_close = " " * (INDENT * level)
        pieces: list[tuple[object, int] | str] = []
        sep = "{\n"
        for key, value in obj.items():
            pieces.append(sep + pad + json.dumps(key) + ": ")
            pieces.append((value, level + 1))
            sep = ",\n"
        pieces.append("\n" + pad_close + "}")
        work.extend(reversed(pieces))
    return "".join(parts)
