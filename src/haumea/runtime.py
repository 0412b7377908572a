"""Haumea runtime — tree-walking evaluator for a parsed Program.

Programs run single-threaded on the host call stack: every Haumea call is
a nested Python call, with one fresh scope per call whose parent is the
global scope. A ``return`` unwinds to the enclosing call through an
internal signal; every other error propagates to the host.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from .ast import (
    BinaryOp,
    CallStmt,
    ChangeStmt,
    DoStmt,
    Expr,
    FloatLit,
    FnDecl,
    IfStmt,
    IntLit,
    Pos,
    Program,
    ReturnStmt,
    SetStmt,
    Stmt,
    UnaryOp,
    Var,
)
from .env import Scope
from .errors import (
    ArithmeticOverflowError,
    ArityError,
    DivisionByZeroError,
    HaumeaRuntimeError,
    StackOverflowError,
    UndefinedFunctionError,
)
from .values import Value, VFloat, VInt, from_bool, from_python

logger = logging.getLogger(__name__)

DEFAULT_ENTRY = "main"
DEFAULT_MAX_DEPTH = 200


# ============================================================
# Control flow signals (internal)
# ============================================================


class _Signal(Exception):
    pass


@dataclass
class _Return(_Signal):
    value: Value


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    """Evaluates calls against one Program's flat function table."""

    def __init__(self, program: Program, *, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.program = program
        self.functions: dict[str, FnDecl] = program.functions()
        self.globals = Scope()
        self.max_depth = max_depth
        self._depth = 0

    # ---- Entry point -------------------------------------------------------

    def call(
        self, name: str, args: Sequence[int | float | Value] = ()
    ) -> Value | None:
        """Invoke ``name`` with host arguments and return its result.

        Returns None when the function finishes without a ``return``.
        """
        values = [from_python(a) for a in args]
        decl = self._resolve(name, len(values), None)
        self._depth = 0
        try:
            return self._invoke(decl, values, None)
        except RecursionError as e:
            raise StackOverflowError(
                f"host stack exhausted while running '{name}'", name
            ) from e

    # ---- Functions ---------------------------------------------------------

    def _resolve(self, name: str, argc: int, pos: Pos | None) -> FnDecl:
        line, col = (pos.line, pos.col) if pos is not None else (0, 0)
        decl = self.functions.get(name)
        if decl is None:
            raise UndefinedFunctionError(
                f"undefined function '{name}'", name, line, col
            )
        if len(decl.params) != argc:
            raise ArityError(name, len(decl.params), argc, line, col)
        return decl

    def _invoke(self, decl: FnDecl, args: list[Value], pos: Pos | None) -> Value | None:
        if self._depth >= self.max_depth:
            line, col = (pos.line, pos.col) if pos is not None else (0, 0)
            raise StackOverflowError(
                f"call depth limit of {self.max_depth} exceeded calling '{decl.name}'",
                decl.name,
                line,
                col,
            )
        scope = self.globals.child()
        for param, value in zip(decl.params, args):
            scope.define(param, value)
        self._depth += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "call %s(%s) depth=%d",
                decl.name,
                ", ".join(v.to_string() for v in args),
                self._depth,
            )
        try:
            self._exec(decl.body, scope)
        except _Return as r:
            logger.debug("return %s from %s", r.value.to_string(), decl.name)
            return r.value
        finally:
            self._depth -= 1
        logger.debug("%s finished without a return value", decl.name)
        return None

    # ---- Statements --------------------------------------------------------

    def _exec(self, st: Stmt, scope: Scope) -> None:
        if isinstance(st, DoStmt):
            for sub in st.body:
                self._exec(sub, scope)
            return

        if isinstance(st, ReturnStmt):
            raise _Return(self._eval(st.value, scope))

        if isinstance(st, IfStmt):
            cond = self._eval(st.cond, scope)
            if cond.is_truthy():
                self._exec(st.then_body, scope)
            elif st.else_body is not None:
                self._exec(st.else_body, scope)
            return

        if isinstance(st, CallStmt):
            decl = self._resolve(st.name, len(st.args), st.pos)
            args = [self._eval(a, scope) for a in st.args]
            # Result discarded: calls are statements, not expressions.
            self._invoke(decl, args, st.pos)
            return

        if isinstance(st, SetStmt):
            val = self._eval(st.value, scope)
            if scope.is_bound(st.name):
                scope.assign(st.name, val, st.pos)
            else:
                scope.define(st.name, val)
            return

        if isinstance(st, ChangeStmt):
            delta = self._eval(st.delta, scope)
            cur = scope.lookup(st.name, st.pos)
            scope.assign(st.name, _arith("+", cur, delta, st.pos), st.pos)
            return

        raise HaumeaRuntimeError("unsupported statement", "", st.pos.line, st.pos.col)

    # ---- Expressions -------------------------------------------------------

    def _eval(self, expr: Expr, scope: Scope) -> Value:
        if isinstance(expr, IntLit):
            return VInt(expr.value)
        if isinstance(expr, FloatLit):
            return VFloat(expr.value)
        if isinstance(expr, Var):
            return scope.lookup(expr.name, expr.pos)
        if isinstance(expr, UnaryOp):
            operand = self._eval(expr.operand, scope)
            if expr.op == "not":
                return from_bool(not operand.is_truthy())
            if isinstance(operand, VInt):
                return VInt(-operand.value)
            return _finite(-operand.to_python(), expr.pos)
        if isinstance(expr, BinaryOp):
            # Both sides always run; 'and'/'or' do not short-circuit.
            left = self._eval(expr.left, scope)
            right = self._eval(expr.right, scope)
            return _arith(expr.op, left, right, expr.pos)
        raise HaumeaRuntimeError(
            "unsupported expression", "", expr.pos.line, expr.pos.col
        )


def _finite(r: float, pos: Pos) -> VFloat:
    if math.isinf(r) or math.isnan(r):
        raise ArithmeticOverflowError(
            "result too large for a float", "", pos.line, pos.col
        )
    return VFloat(r)


def _arith(op: str, left: Value, right: Value, pos: Pos) -> Value:
    if op == "and":
        return from_bool(left.is_truthy() and right.is_truthy())
    if op == "or":
        return from_bool(left.is_truthy() or right.is_truthy())
    a = left.to_python()
    b = right.to_python()
    if op == "/":
        if b == 0:
            raise DivisionByZeroError("division by zero", "", pos.line, pos.col)
        try:
            return _finite(a / b, pos)
        except OverflowError:
            raise ArithmeticOverflowError(
                "quotient too large for a float", "", pos.line, pos.col
            ) from None
    if isinstance(left, VInt) and isinstance(right, VInt):
        if op == "+":
            return VInt(left.value + right.value)
        if op == "-":
            return VInt(left.value - right.value)
        if op == "*":
            return VInt(left.value * right.value)
    else:
        try:
            fa = float(a)
            fb = float(b)
        except OverflowError:
            raise ArithmeticOverflowError(
                "integer too large to convert to float", "", pos.line, pos.col
            ) from None
        if op == "+":
            return _finite(fa + fb, pos)
        if op == "-":
            return _finite(fa - fb, pos)
        if op == "*":
            return _finite(fa * fb, pos)
    raise HaumeaRuntimeError(f"unknown operator '{op}'", "", pos.line, pos.col)


def run(
    program: Program,
    *,
    entry: str = DEFAULT_ENTRY,
    args: Sequence[int | float | Value] = (),
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Value | None:
    """Run ``entry`` from a parsed program and return its result."""
    return Interpreter(program, max_depth=max_depth).call(entry, args)
