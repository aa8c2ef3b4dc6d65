"""Tree-walking evaluator."""

from __future__ import annotations

from .arith import apply_binary, apply_unary
from .ast import Binary, Node, Number, Unary
from .errors import ExprError


def evaluate(node: Node) -> float:
    """Evaluate an expression tree directly. Left operands finish before right.

    The walk keeps its own work stack, so a long flat chain such as
    1+1+...+1 costs no interpreter recursion.
    """
    values: list[float] = []
    work: list[tuple[Node, bool]] = [(node, False)]
    while work:
        current, expanded = work.pop()
        if isinstance(current, Number):
            values.append(current.value)
        elif isinstance(current, Unary):
            if expanded:
                values.append(apply_unary(current.op, values.pop()))
            else:
                work.append((current, True))
                work.append((current.child, False))
        elif isinstance(current, Binary):
            if expanded:
                rhs = values.pop()
                lhs = values.pop()
                values.append(apply_binary(current.op, lhs, rhs, current.start))
            else:
                # Right is pushed first so the left subtree runs to completion first.
                work.append((current, True))
                work.append((current.right, False))
                work.append((current.left, False))
        else:
            raise ExprError("unknown node " + type(current).__name__, current.start)
    return values.pop()
