"""Expression tokenizer — lexes source into a flat token list."""

from __future__ import annotations

import math

from .errors import ExprError


# Token kind constants
TK_NUMBER = "Number"
TK_PLUS = "Plus"
TK_MINUS = "Minus"
TK_STAR = "Star"
TK_SLASH = "Slash"
TK_PERCENT = "Percent"
TK_CARET = "Caret"
TK_LPAREN = "LParen"
TK_RPAREN = "RParen"
TK_EOF = "EndOfFile"

SINGLE_OPS: dict[str, str] = {
    "+": TK_PLUS,
    "-": TK_MINUS,
    "*": TK_STAR,
    "/": TK_SLASH,
    "%": TK_PERCENT,
    "^": TK_CARET,
    "(": TK_LPAREN,
    ")": TK_RPAREN,
}

WHITESPACE: str = " \t\n\v\f\r"


class LexError(ExprError):
    """Error during tokenization."""

    kind = "lex error"


class InvalidNumber(LexError):
    """A numeric run that is malformed or out of range."""

    kind = "invalid number"


class UnknownCharacter(LexError):
    """A character that cannot start any token."""

    kind = "unknown character"

    def __init__(self, char: str, offset: int):
        super().__init__("unknown character " + repr(char), offset)
        self.char: str = char


class Token:
    """A token with kind, payload, and inclusive source offsets.

    payload is the float value for numbers, the matched character for
    operators and parens, and "" for the end-of-file sentinel.
    """

    def __init__(self, type_: str, payload: float | str, start: int, end: int):
        self.type: str = type_
        self.payload: float | str = payload
        self.start: int = start
        self.end: int = end

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.payload)
            + ", "
            + str(self.start)
            + ", "
            + str(self.end)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _ends_operand(tokens: list[Token]) -> bool:
    """True when the last token closes an operand, making '-' binary."""
    return len(tokens) > 0 and (
        tokens[-1].type == TK_NUMBER or tokens[-1].type == TK_RPAREN
    )


def _scan_number(source: str, pos: int) -> int:
    """Return the end (exclusive) of the numeric run starting at pos.

    Signs are part of the run only as a leading '-' or right after an
    exponent marker.
    """
    length = len(source)
    if source[pos] == "-":
        pos += 1
    while pos < length:
        c = source[pos]
        if _is_digit(c) or c == "." or c == "e" or c == "E":
            pos += 1
        elif (c == "+" or c == "-") and (
            source[pos - 1] == "e" or source[pos - 1] == "E"
        ):
            pos += 1
        else:
            break
    return pos


def _mantissa_is_zero(raw: str) -> bool:
    for c in raw:
        if c == "e" or c == "E":
            break
        if c >= "1" and c <= "9":
            return False
    return True


def _parse_number(raw: str, start: int) -> float:
    """Convert a numeric run, rejecting malformed and out-of-range literals."""
    if raw == "":
        raise InvalidNumber("empty number literal", start)
    try:
        value = float(raw)
    except ValueError:
        raise InvalidNumber("invalid number literal '" + raw + "'", start) from None
    if math.isinf(value):
        raise InvalidNumber("number out of range '" + raw + "'", start)
    if value == 0.0 and not _mantissa_is_zero(raw):
        raise InvalidNumber("number out of range '" + raw + "'", start)
    return value


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    length = len(source)

    while pos < length:
        c = source[pos]

        if c in WHITESPACE:
            pos += 1
            continue

        # Number, optionally with a leading sign in operand position
        if _is_digit(c) or (
            c == "-"
            and pos + 1 < length
            and _is_digit(source[pos + 1])
            and not _ends_operand(tokens)
        ):
            end = _scan_number(source, pos)
            value = _parse_number(source[pos:end], pos)
            tokens.append(Token(TK_NUMBER, value, pos, end - 1))
            pos = end
            continue

        if c in SINGLE_OPS:
            tokens.append(Token(SINGLE_OPS[c], c, pos, pos))
            pos += 1
            continue

        raise UnknownCharacter(c, pos)

    tokens.append(Token(TK_EOF, "", length, length))
    return tokens
