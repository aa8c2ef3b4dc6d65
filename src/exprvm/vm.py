"""Stack virtual machine — executes a compiled chunk against a bounded stack."""

from __future__ import annotations

import logging
from typing import Callable

from .arith import apply_binary
from .compile import BINARY_OPS, Chunk, Instruction, Op
from .errors import ExprError

log = logging.getLogger(__name__)

STACK_MAX: int = 255


class VMError(ExprError):
    """Fatal fault while executing bytecode."""

    kind = "vm error"


class StackOverflow(VMError):
    kind = "stack overflow"


class StackUnderflow(VMError):
    kind = "stack underflow"


class UnknownOpcode(VMError):
    kind = "unknown opcode"


# Opcode -> source operator, so the VM shares the evaluator's arithmetic.
_BINARY_SYMBOLS: dict[int, str] = {op: sym for sym, op in BINARY_OPS.items()}


class VM:
    """Fetch-decode-execute loop over a fixed-capacity operand stack."""

    def __init__(self, stack_max: int = STACK_MAX):
        if stack_max < 1:
            raise ValueError("stack_max must be positive")
        self.stack_max: int = stack_max
        self.stack: list[float] = []
        self.chunk: Chunk = Chunk()
        self.ip: int = 0
        self._handlers: dict[int, Callable[[Instruction], None]] = {
            Op.CONSTANT: self._op_constant,
            Op.NEGATE: self._op_negate,
        }
        for op in _BINARY_SYMBOLS:
            self._handlers[op] = self._op_binary

    # ── Stack ────────────────────────────────────────────────

    def push(self, value: float) -> None:
        if len(self.stack) >= self.stack_max:
            raise StackOverflow(
                "more than "
                + str(self.stack_max)
                + " pending operands at instruction "
                + str(self.ip)
            )
        self.stack.append(value)

    def pop(self) -> float:
        if not self.stack:
            raise StackUnderflow("pop from empty stack at instruction " + str(self.ip))
        return self.stack.pop()

    # ── Handlers ─────────────────────────────────────────────

    def _op_constant(self, ins: Instruction) -> None:
        if not 0 <= ins.arg < len(self.chunk.constants):
            raise VMError(
                "constant index "
                + str(ins.arg)
                + " out of range at instruction "
                + str(self.ip)
            )
        self.push(self.chunk.constants[ins.arg])

    def _op_negate(self, ins: Instruction) -> None:
        self.push(-self.pop())

    def _op_binary(self, ins: Instruction) -> None:
        rhs = self.pop()
        lhs = self.pop()
        self.push(apply_binary(_BINARY_SYMBOLS[ins.op], lhs, rhs))

    # ── Loop ─────────────────────────────────────────────────

    def run(self, chunk: Chunk) -> float:
        """Execute chunk from instruction 0 and return the value popped by HALT."""
        self.chunk = chunk
        self.stack = []
        self.ip = 0
        trace = log.isEnabledFor(logging.DEBUG)
        code = chunk.code
        while True:
            if self.ip >= len(code):
                raise VMError("instruction pointer out of range: " + str(self.ip))
            ins = code[self.ip]
            if trace:
                log.debug("%04d %r stack=%r", self.ip, ins, self.stack)
            if ins.op == Op.HALT:
                return self.pop()
            handler = self._handlers.get(ins.op)
            if handler is None:
                raise UnknownOpcode(
                    "opcode " + str(ins.op) + " at instruction " + str(self.ip)
                )
            handler(ins)
            self.ip += 1


def run(chunk: Chunk, stack_max: int = STACK_MAX) -> float:
    """Run a chunk on a fresh VM."""
    return VM(stack_max).run(chunk)
