"""IEEE-754 double arithmetic shared by the evaluator and the VM."""

from __future__ import annotations

import math

from .errors import ExprError


class ArithmeticFault(ExprError):
    """Arithmetic error raised while computing a result."""

    kind = "arithmetic error"


class DivisionByZero(ArithmeticFault):
    kind = "division by zero"


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and math.fmod(x, 2.0) != 0.0


def power(base: float, exp: float) -> float:
    """Real exponentiation with C pow results instead of Python exceptions."""
    try:
        return math.pow(base, exp)
    except OverflowError:
        if base < 0.0 and _is_odd_integer(exp):
            return -math.inf
        return math.inf
    except ValueError:
        # Pole error: zero to a negative power.
        if base == 0.0:
            if _is_odd_integer(exp):
                return math.copysign(math.inf, base)
            return math.inf
        # Domain error: negative base, non-integer exponent.
        return math.nan


def remainder(lhs: float, rhs: float) -> float:
    """fmod remainder, sign follows the dividend."""
    try:
        return math.fmod(lhs, rhs)
    except ValueError:
        return math.nan


def apply_unary(op: str, value: float) -> float:
    if op == "-":
        return -value
    if op == "+":
        return value
    raise ArithmeticFault("unknown unary operator '" + op + "'")


def apply_binary(op: str, lhs: float, rhs: float, offset: int | None = None) -> float:
    """Combine two operands; '/' and '%' reject a zero divisor."""
    if op == "+":
        return lhs + rhs
    if op == "-":
        return lhs - rhs
    if op == "*":
        return lhs * rhs
    if op == "/":
        if rhs == 0.0:
            raise DivisionByZero("division by zero", offset)
        return lhs / rhs
    if op == "%":
        if rhs == 0.0:
            raise DivisionByZero("modulo by zero", offset)
        return remainder(lhs, rhs)
    if op == "^":
        return power(lhs, rhs)
    raise ArithmeticFault("unknown binary operator '" + op + "'", offset)
