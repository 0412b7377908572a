"""Haumea parser, checker and evaluator — public API."""

from __future__ import annotations

from typing import Sequence

from .ast import Program
from .check import CheckError, check as check_program
from .emit import to_source
from .errors import (
    ArithmeticOverflowError as ArithmeticOverflowError,
    ArityError as ArityError,
    DivisionByZeroError as DivisionByZeroError,
    HaumeaError as HaumeaError,
    HaumeaNameError as HaumeaNameError,
    HaumeaRuntimeError as HaumeaRuntimeError,
    LexError as LexError,
    ParseError as ParseError,
    StackOverflowError as StackOverflowError,
    UndefinedFunctionError as UndefinedFunctionError,
)
from .parse import parse as parse
from .runtime import DEFAULT_ENTRY, DEFAULT_MAX_DEPTH, Interpreter as Interpreter
from .runtime import run as run_program
from .values import Value, VFloat as VFloat, VInt as VInt


def check(source: str) -> list[CheckError]:
    """Parse and check Haumea source. Returns list of errors (empty = ok)."""
    return check_program(parse(source))


def emit(program: Program) -> str:
    """Emit a `Program` AST to Haumea textual syntax."""
    return to_source(program)


def run(
    source: str,
    entry: str = DEFAULT_ENTRY,
    args: Sequence[int | float | Value] = (),
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Value | None:
    """Parse ``source`` and return the result of calling ``entry``."""
    return run_program(parse(source), entry=entry, args=args, max_depth=max_depth)
