"""Diagnostics shared by every pipeline stage."""

from __future__ import annotations


class ExprError(Exception):
    """Base error for tokenizing, parsing, evaluating, and running expressions."""

    kind: str = "error"

    def __init__(self, msg: str, offset: int | None = None):
        if offset is None:
            super().__init__(msg)
        else:
            super().__init__(msg + " at offset " + str(offset))
        self.msg: str = msg
        self.offset: int | None = offset


class OracleMismatch(ExprError):
    """The tree-walking evaluator and the VM disagreed on a result."""

    kind = "oracle mismatch"
