"""Expression AST — parse-time node definitions."""

from __future__ import annotations

from dataclasses import dataclass


# ============================================================
# NODES
# ============================================================


@dataclass(frozen=True)
class Node:
    """Base for all nodes. Spans are half-open source offsets [start, end)."""

    start: int
    end: int


@dataclass(frozen=True)
class Number(Node):
    """Numeric literal."""

    value: float


@dataclass(frozen=True)
class Unary(Node):
    """op child, op is '+' or '-'."""

    op: str
    child: Node


@dataclass(frozen=True)
class Binary(Node):
    """left op right, op is one of + - * / % ^."""

    op: str
    left: Node
    right: Node


# Printed operator names shared by the s-expression and JSON printers.
OP_NAMES: dict[str, str] = {
    "+": "+",
    "-": "-",
    "*": "*",
    "/": "/",
    "%": "mod",
    "^": "expt",
}
