"""Bytecode compiler — lowers an expression tree into a linear chunk."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .ast import Binary, Node, Number, Unary
from .emit import format_number
from .errors import ExprError


class Op(IntEnum):
    CONSTANT = 0
    NEGATE = 1
    ADD = 2
    SUBTRACT = 3
    MULTIPLY = 4
    DIVIDE = 5
    MODULO = 6
    POWER = 7
    HALT = 8


BINARY_OPS: dict[str, Op] = {
    "+": Op.ADD,
    "-": Op.SUBTRACT,
    "*": Op.MULTIPLY,
    "/": Op.DIVIDE,
    "%": Op.MODULO,
    "^": Op.POWER,
}


@dataclass(frozen=True)
class Instruction:
    """An opcode and its constant-pool index (0 when unused)."""

    op: int
    arg: int = 0


@dataclass
class Chunk:
    """Compiled program: instructions plus an append-only constant pool."""

    code: list[Instruction] = field(default_factory=list)
    constants: list[float] = field(default_factory=list)

    def add_constant(self, value: float) -> int:
        self.constants.append(value)
        return len(self.constants) - 1

    def write(self, op: int, arg: int = 0) -> None:
        self.code.append(Instruction(op, arg))


def compile_node(node: Node, chunk: Chunk) -> None:
    """Append post-order code for node to chunk. Never emits HALT."""
    work: list[tuple[Node, bool]] = [(node, False)]
    while work:
        current, expanded = work.pop()
        if isinstance(current, Number):
            chunk.write(Op.CONSTANT, chunk.add_constant(current.value))
        elif isinstance(current, Unary):
            if expanded:
                if current.op == "-":
                    chunk.write(Op.NEGATE)
            else:
                work.append((current, True))
                work.append((current.child, False))
        elif isinstance(current, Binary):
            if expanded:
                chunk.write(BINARY_OPS[current.op])
            else:
                work.append((current, True))
                work.append((current.right, False))
                work.append((current.left, False))
        else:
            raise ExprError("unknown node " + type(current).__name__, current.start)


def compile_chunk(node: Node) -> Chunk:
    """Compile a whole expression and terminate it with HALT."""
    chunk = Chunk()
    compile_node(node, chunk)
    chunk.write(Op.HALT)
    return chunk


def _op_name(op: int) -> str:
    try:
        return Op(op).name
    except ValueError:
        return "UNKNOWN(" + str(op) + ")"


def disassemble(chunk: Chunk) -> str:
    """Render one line per instruction: index, opcode, and constant operand."""
    lines: list[str] = []
    for i, ins in enumerate(chunk.code):
        line = f"{i:04d} {_op_name(ins.op)}"
        if ins.op == Op.CONSTANT:
            line += f" {ins.arg}"
            if 0 <= ins.arg < len(chunk.constants):
                line += " (" + format_number(chunk.constants[ins.arg]) + ")"
        lines.append(line)
    return "\n".join(lines)
