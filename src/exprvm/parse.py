"""Expression parser — precedence climbing over binding powers.

Each binary operator has a left and a right binding power. The loop in
`parse_expression` keeps extending the left-hand side while the next
operator binds tighter than the caller's threshold; equal powers make an
operator left-associative, a lower right power makes it right-associative.
"""

from __future__ import annotations

from .ast import Binary, Node, Number, Unary
from .errors import ExprError
from .tokens import (
    TK_CARET,
    TK_EOF,
    TK_LPAREN,
    TK_MINUS,
    TK_NUMBER,
    TK_PERCENT,
    TK_PLUS,
    TK_RPAREN,
    TK_SLASH,
    TK_STAR,
    Token,
)

LEFT_BP: dict[str, int] = {
    TK_PLUS: 1,
    TK_MINUS: 1,
    TK_STAR: 2,
    TK_SLASH: 2,
    TK_PERCENT: 2,
    TK_CARET: 4,
}

RIGHT_BP: dict[str, int] = {
    TK_PLUS: 1,
    TK_MINUS: 1,
    TK_STAR: 2,
    TK_SLASH: 2,
    TK_PERCENT: 2,
    TK_CARET: 3,
}

# Exceeds every left binding power: a prefix operator takes one primary.
PREFIX_BP: int = 10


class ParseError(ExprError):
    """Parse error with offset info."""

    kind = "syntax error"


class InvalidPrefixToken(ParseError):
    kind = "invalid prefix token"


class ExpectedOperand(ParseError):
    kind = "expected operand"


class ExpectedCloseParen(ParseError):
    kind = "expected close paren"


class UnexpectedEof(ParseError):
    kind = "unexpected end of input"


class UnexpectedToken(ParseError):
    kind = "unexpected token"


def _describe(tok: Token) -> str:
    if tok.type == TK_EOF:
        return "end of input"
    if tok.type == TK_NUMBER:
        return "number " + repr(tok.payload)
    return "'" + str(tok.payload) + "'"


class Parser:
    """Pratt parser producing a single expression tree."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    # ── Top Level ────────────────────────────────────────────

    def parse(self) -> Node | None:
        """Parse the whole token list. Returns None for an empty expression."""
        if self.at_type(TK_EOF):
            return None
        node = self.parse_expression(0)
        tok = self.current()
        if tok.type != TK_EOF:
            raise UnexpectedToken("unexpected " + _describe(tok), tok.start)
        return node

    # ── Expressions ──────────────────────────────────────────

    def parse_expression(self, min_bp: int) -> Node:
        tok = self.current()
        if tok.type == TK_EOF:
            raise UnexpectedEof("unexpected end of input", tok.start)
        lhs = self.parse_prefix(self.advance())
        while True:
            op = self.current()
            left_bp = LEFT_BP.get(op.type, 0)
            if left_bp <= min_bp:
                break
            self.advance()
            rhs = self.parse_operand(RIGHT_BP[op.type], op)
            lhs = Binary(lhs.start, rhs.end, str(op.payload), lhs, rhs)
        return lhs

    def parse_operand(self, min_bp: int, after: Token) -> Node:
        """Parse the operand required after a prefix or binary operator."""
        tok = self.current()
        if tok.type == TK_EOF:
            raise ExpectedOperand(
                "expected operand after '" + str(after.payload) + "'", tok.start
            )
        return self.parse_expression(min_bp)

    def parse_prefix(self, tok: Token) -> Node:
        if tok.type == TK_NUMBER:
            return Number(tok.start, tok.end + 1, float(tok.payload))
        if tok.type == TK_MINUS or tok.type == TK_PLUS:
            child = self.parse_operand(PREFIX_BP, tok)
            return Unary(tok.start, child.end, str(tok.payload), child)
        if tok.type == TK_LPAREN:
            inner = self.parse_expression(0)
            close = self.current()
            if close.type != TK_RPAREN:
                raise ExpectedCloseParen(
                    "expected ')', got " + _describe(close), close.start
                )
            self.advance()
            return inner
        raise InvalidPrefixToken(
            "expected expression, got " + _describe(tok), tok.start
        )


def parse_tokens(tokens: list[Token]) -> Node | None:
    """Parse a token list into an AST, or None if it holds no expression."""
    return Parser(tokens).parse()
