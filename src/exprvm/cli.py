"""exprvm CLI — evaluate one expression on both execution paths."""

from __future__ import annotations

import logging
import sys

from . import calculate
from .compile import disassemble
from .emit import format_number, format_result, to_sexpr
from .errors import ExprError
from .serialize import to_json
from .tokens import TK_EOF, TK_NUMBER, Token, tokenize
from .vm import STACK_MAX


USAGE: str = """\
exprvm [OPTIONS] [EXPR]

Evaluate an arithmetic expression with a tree-walking evaluator and a
bytecode VM, and print the result.

Options:
  -e, --eval EXPR      Expression to evaluate (else the first argument)
  -a, --ast FORMAT     Print the AST first: sexpr or json
  -t, --tokens         Print the token stream first
  -b, --bytecode       Print the compiled bytecode first
  --stack-size N       VM operand stack capacity (default 255)
  -v, --verbose        Log pipeline stages to stderr
  -h, --help           Show this help message
"""

AST_FORMATS: list[str] = ["sexpr", "json"]


def _looks_like_expr(arg: str) -> bool:
    """Dashes followed by a digit, '.', '(' or '+' start a negated expression."""
    rest = arg.lstrip("-")
    return rest != "" and (rest[0].isdigit() or rest[0] in ".(+")


def _format_token(tok: Token) -> str:
    if tok.type == TK_NUMBER:
        payload = format_number(float(tok.payload))
    else:
        payload = str(tok.payload)
    return tok.type + " " + payload + " " + str(tok.start) + ".." + str(tok.end)


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    source: str | None = None
    ast_format = ""
    show_tokens = False
    show_bytecode = False
    verbose = False
    stack_max = STACK_MAX
    i = 0
    while i < len(args):
        arg = args[i]
        value: str | None = None
        if arg.startswith("--") and "=" in arg:
            arg, value = arg.split("=", 1)
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg in ("--eval", "-e", "--ast", "-a", "--stack-size"):
            if value is None:
                if i + 1 >= len(args):
                    print("exprvm: " + arg + " requires a value", file=sys.stderr)
                    return 2
                value = args[i + 1]
                i += 1
            i += 1
            if arg == "--eval" or arg == "-e":
                source = value
            elif arg == "--ast" or arg == "-a":
                if value not in AST_FORMATS:
                    print(
                        "exprvm: unknown AST format '" + value + "' (sexpr, json)",
                        file=sys.stderr,
                    )
                    return 2
                ast_format = value
            else:
                try:
                    stack_max = int(value)
                except ValueError:
                    stack_max = 0
                if stack_max < 1:
                    print(
                        "exprvm: --stack-size must be a positive integer",
                        file=sys.stderr,
                    )
                    return 2
        elif arg == "--tokens" or arg == "-t":
            show_tokens = True
            i += 1
        elif arg == "--bytecode" or arg == "-b":
            show_bytecode = True
            i += 1
        elif arg == "--verbose" or arg == "-v":
            verbose = True
            i += 1
        elif arg.startswith("-") and not _looks_like_expr(arg):
            print("exprvm: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif source is None:
            source = arg
            i += 1
        else:
            print("exprvm: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    if source is None:
        print("exprvm: empty expression", file=sys.stderr)
        return 0

    try:
        result = calculate(source, stack_max)
    except ExprError as e:
        print("exprvm: " + e.kind + ": " + str(e), file=sys.stderr)
        return 1
    except RecursionError:
        print("exprvm: expression nested too deeply", file=sys.stderr)
        return 1
    except MemoryError:
        print("exprvm: out of memory", file=sys.stderr)
        return 1
    if result is None:
        print("exprvm: empty expression", file=sys.stderr)
        return 0

    if show_tokens:
        for tok in tokenize(source):
            if tok.type != TK_EOF:
                print(_format_token(tok))
    if ast_format == "sexpr":
        print(to_sexpr(result.node))
    elif ast_format == "json":
        print(to_json(result.node))
    if show_bytecode:
        print(disassemble(result.chunk))
    print(format_result(result.value))
    return 0


if __name__ == "__main__":
    sys.exit(main())
