"""Expression evaluator with a tree-walking oracle and a bytecode VM — public API."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .ast import Node
from .compile import Chunk, compile_chunk as compile_chunk, disassemble as disassemble
from .emit import to_sexpr as to_sexpr
from .errors import ExprError as ExprError, OracleMismatch
from .evaluate import evaluate as evaluate
from .parse import ParseError as ParseError, parse_tokens
from .serialize import to_json as to_json
from .tokens import LexError as LexError, tokenize as tokenize
from .vm import STACK_MAX, VMError as VMError, run as run

log = logging.getLogger(__name__)


@dataclass
class Result:
    """Outcome of one expression through both execution paths."""

    node: Node
    chunk: Chunk
    tree_value: float
    vm_value: float

    @property
    def value(self) -> float:
        return self.vm_value


def parse(source: str) -> Node | None:
    """Parse expression source into an AST. Returns None for an empty expression."""
    return parse_tokens(tokenize(source))


def _agree(a: float, b: float) -> bool:
    if math.isnan(a) and math.isnan(b):
        return True
    return a == b


def calculate(source: str, stack_max: int = STACK_MAX) -> Result | None:
    """Evaluate source on both paths and check that they agree."""
    tokens = tokenize(source)
    log.debug("tokenized %d tokens", len(tokens))
    node = parse_tokens(tokens)
    if node is None:
        log.debug("empty expression")
        return None
    tree_value = evaluate(node)
    chunk = compile_chunk(node)
    log.debug(
        "compiled %d instructions, %d constants",
        len(chunk.code),
        len(chunk.constants),
    )
    vm_value = run(chunk, stack_max)
    log.debug("tree=%r vm=%r", tree_value, vm_value)
    if not _agree(tree_value, vm_value):
        raise OracleMismatch(
            "evaluator returned " + repr(tree_value) + ", vm returned " + repr(vm_value)
        )
    return Result(node, chunk, tree_value, vm_value)
