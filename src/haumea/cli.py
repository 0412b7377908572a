"""Haumea CLI — parse, check, print and run .hau files."""

from __future__ import annotations

import logging
import math
import re
import sys

from .ast import (
    BinaryOp,
    CallStmt,
    ChangeStmt,
    DoStmt,
    Expr,
    IfStmt,
    Program,
    ReturnStmt,
    SetStmt,
    Stmt,
    UnaryOp,
)
from .parse import parse
from .check import check as check_program
from .emit import to_source
from .errors import HaumeaRuntimeError, LexError, ParseError
from .runtime import DEFAULT_ENTRY, DEFAULT_MAX_DEPTH, Interpreter
from .values import Value, VFloat, VInt


USAGE: str = """\
haumea [OPTIONS] FILE [ARG ...]

Run a Haumea (.hau) program by calling its entry function with ARGs.

Options:
  --entry NAME       Entry function (default: main)
  --max-depth N      Call-depth limit (default: 200); the host stack is sized
                     from N and the deepest statement nesting in FILE
  --check            Report static diagnostics and exit
  --emit             Pretty-print the parsed program and exit
  --log-level LEVEL  ERROR, WARNING, INFO or DEBUG (default: WARNING)
  --help             Show this help message
"""

LOG_LEVELS: dict[str, int] = {
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_INT_ARG = re.compile(r"-?[0-9]+")
_FLOAT_ARG = re.compile(r"-?[0-9]+\.[0-9]+")

# Python frames used per Haumea call on top of its body nesting, with
# headroom for the CLI itself.
_FRAMES_PER_CALL = 8
_FRAME_HEADROOM = 200


def _parse_arg(text: str) -> Value | None:
    if _INT_ARG.fullmatch(text):
        return VInt(int(text))
    if _FLOAT_ARG.fullmatch(text):
        value = float(text)
        if math.isinf(value):
            return None
        return VFloat(value)
    return None


def _expr_nesting(expr: Expr) -> int:
    if isinstance(expr, UnaryOp):
        return 1 + _expr_nesting(expr.operand)
    if isinstance(expr, BinaryOp):
        return 1 + max(_expr_nesting(expr.left), _expr_nesting(expr.right))
    return 1


def _stmt_nesting(st: Stmt) -> int:
    if isinstance(st, DoStmt):
        return 1 + max((_stmt_nesting(s) for s in st.body), default=0)
    if isinstance(st, IfStmt):
        branches = [_expr_nesting(st.cond), _stmt_nesting(st.then_body)]
        if st.else_body is not None:
            branches.append(_stmt_nesting(st.else_body))
        return 1 + max(branches)
    if isinstance(st, CallStmt):
        return 1 + max((_expr_nesting(a) for a in st.args), default=0)
    if isinstance(st, (ReturnStmt, SetStmt)):
        return 1 + _expr_nesting(st.value)
    if isinstance(st, ChangeStmt):
        return 1 + _expr_nesting(st.delta)
    return 1


def frames_per_call(program: Program) -> int:
    """Upper bound on host frames one Haumea call of ``program`` uses."""
    deepest = max((_stmt_nesting(d.body) for d in program.decls), default=0)
    return _FRAMES_PER_CALL + deepest


def _usage_error(msg: str) -> int:
    print("haumea: " + msg, file=sys.stderr)
    return 2


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    entry = DEFAULT_ENTRY
    max_depth = DEFAULT_MAX_DEPTH
    log_level = "WARNING"
    check_only = False
    emit_only = False
    call_args: list[Value] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if filepath != "":
            # Everything after FILE is an argument to the entry function.
            value = _parse_arg(arg)
            if value is None:
                return _usage_error(
                    "argument '" + arg + "' is not a number in range"
                )
            call_args.append(value)
            i += 1
        elif arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--check":
            check_only = True
            i += 1
        elif arg == "--emit":
            emit_only = True
            i += 1
        elif arg in ("--entry", "--max-depth", "--log-level"):
            if i + 1 >= len(args):
                return _usage_error("flag '" + arg + "' needs a value")
            value_text = args[i + 1]
            if arg == "--entry":
                entry = value_text
            elif arg == "--max-depth":
                if not _INT_ARG.fullmatch(value_text) or int(value_text) < 1:
                    return _usage_error("--max-depth must be a positive integer")
                max_depth = int(value_text)
            else:
                if value_text.upper() not in LOG_LEVELS:
                    return _usage_error("unknown log level '" + value_text + "'")
                log_level = value_text.upper()
            i += 2
        elif arg.startswith("-"):
            return _usage_error("unknown flag '" + arg + "'")
        else:
            filepath = arg
            i += 1
    if filepath == "":
        return _usage_error("missing file argument")

    logging.basicConfig(stream=sys.stderr, level=LOG_LEVELS[log_level])

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("haumea: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("haumea: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("haumea: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    try:
        program = parse(source)
    except (LexError, ParseError) as e:
        print("haumea: parse error: " + str(e), file=sys.stderr)
        return 1

    if emit_only:
        sys.stdout.write(to_source(program))
        return 0

    if check_only:
        diagnostics = check_program(program)
        for d in diagnostics:
            kind = "error" if d.fatal else "note"
            print("haumea: " + kind + ": " + str(d), file=sys.stderr)
        return 1 if any(d.fatal for d in diagnostics) else 0

    needed = max_depth * frames_per_call(program) + _FRAME_HEADROOM
    if sys.getrecursionlimit() < needed:
        sys.setrecursionlimit(needed)

    try:
        result = Interpreter(program, max_depth=max_depth).call(entry, call_args)
    except HaumeaRuntimeError as e:
        print("haumea: runtime error: " + str(e), file=sys.stderr)
        return 1

    if result is not None:
        print(result.to_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
