"""Haumea diagnostics — every error the front-end and evaluator raise."""

from __future__ import annotations


class HaumeaError(Exception):
    """Base error for lexing, parsing and evaluation."""

    def __init__(self, msg: str, line: int = 0, col: int = 0):
        if line == 0:
            super().__init__(msg)
        else:
            super().__init__(msg + " at line " + str(line) + " col " + str(col))
        self.msg: str = msg
        self.line: int = line
        self.col: int = col


class LexError(HaumeaError):
    """Unrecognized character in the source."""

    def __init__(self, msg: str, char: str, line: int, col: int):
        super().__init__(msg, line, col)
        self.char: str = char


class ParseError(HaumeaError):
    """Token stream deviates from the grammar."""

    def __init__(self, expected: str, found: str, line: int, col: int):
        super().__init__("expected " + expected + ", got " + found, line, col)
        self.expected: str = expected
        self.found: str = found


class HaumeaRuntimeError(HaumeaError):
    """Fault raised while evaluating a program."""

    def __init__(self, msg: str, name: str = "", line: int = 0, col: int = 0):
        super().__init__(msg, line, col)
        self.name: str = name


class UndefinedFunctionError(HaumeaRuntimeError):
    pass


class ArityError(HaumeaRuntimeError):
    def __init__(self, name: str, expected: int, got: int, line: int = 0, col: int = 0):
        super().__init__(
            f"function '{name}' takes {expected} argument(s), got {got}",
            name,
            line,
            col,
        )
        self.expected: int = expected
        self.got: int = got


class HaumeaNameError(HaumeaRuntimeError):
    """Unbound identifier."""


class DivisionByZeroError(HaumeaRuntimeError):
    pass


class ArithmeticOverflowError(HaumeaRuntimeError):
    pass


class StackOverflowError(HaumeaRuntimeError):
    """Call depth limit or host stack exhausted."""
