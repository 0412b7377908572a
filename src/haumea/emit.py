"""Haumea emitter — converts a Program back into Haumea textual syntax.

Output re-parses to an equal AST for anything the parser produces. The
parser binds a trailing ``else`` to the innermost open ``if``, so an AST
whose then-branch is an else-less ``if`` followed by an else cannot come
from source; the emitter does not try to preserve that shape.
"""

from __future__ import annotations

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
    Program,
    ReturnStmt,
    SetStmt,
    Stmt,
    UnaryOp,
    Var,
)


def to_source(program: Program) -> str:
    """Render a `Program` back into Haumea source text."""
    return _Emitter().emit_program(program)


def expr_to_source(expr: Expr) -> str:
    """Render a single expression with minimal parentheses."""
    return _Emitter().render_expr(expr)


class _Emitter:
    _INDENT: str = "    "

    # Expression precedence (higher binds tighter)
    _PREC_ADD: int = 1
    _PREC_MUL: int = 2
    _PREC_UNARY: int = 3
    _PREC_PRIMARY: int = 4

    _BIN_PREC: dict[str, int] = {
        "+": _PREC_ADD,
        "-": _PREC_ADD,
        "or": _PREC_ADD,
        "*": _PREC_MUL,
        "/": _PREC_MUL,
        "and": _PREC_MUL,
    }

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent_level: int = 0

    # ── Public ──────────────────────────────────────────────

    def emit_program(self, program: Program) -> str:
        self._lines = []
        self._indent_level = 0
        first = True
        for decl in program.decls:
            if not first:
                self._lines.append("")
            first = False
            self._emit_fn_decl(decl)
        text = "\n".join(self._lines)
        if text == "":
            return ""
        return text + "\n"

    def render_expr(self, expr: Expr) -> str:
        return self._render_expr(expr, self._PREC_ADD)

    # ── Lines ───────────────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(self._INDENT * self._indent_level + line)

    def _emit_nested(self, stmt: Stmt) -> None:
        self._indent_level += 1
        self._emit_stmt(stmt)
        self._indent_level -= 1

    # ── Decls ───────────────────────────────────────────────

    def _emit_fn_decl(self, decl: FnDecl) -> None:
        header = "to " + decl.name
        if decl.params:
            header += " with (" + ", ".join(decl.params) + ")"
        if isinstance(decl.body, DoStmt):
            self._emit_do(decl.body, header + " ")
            return
        self._emit_line(header)
        self._emit_nested(decl.body)

    # ── Stmts ───────────────────────────────────────────────

    def _emit_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, ReturnStmt):
            self._emit_line("return " + self.render_expr(stmt.value))
            return
        if isinstance(stmt, SetStmt):
            self._emit_line(f"set {stmt.name} to {self.render_expr(stmt.value)}")
            return
        if isinstance(stmt, ChangeStmt):
            self._emit_line(f"change {stmt.name} by {self.render_expr(stmt.delta)}")
            return
        if isinstance(stmt, CallStmt):
            args = ", ".join(self.render_expr(a) for a in stmt.args)
            self._emit_line(f"{stmt.name}({args})")
            return
        if isinstance(stmt, DoStmt):
            self._emit_do(stmt, "")
            return
        if isinstance(stmt, IfStmt):
            self._emit_if(stmt, "")
            return
        raise TypeError("unhandled stmt type")

    def _emit_do(self, stmt: DoStmt, prefix: str) -> None:
        self._emit_line(prefix + "do")
        self._indent_level += 1
        for sub in stmt.body:
            self._emit_stmt(sub)
        self._indent_level -= 1
        self._emit_line("end")

    def _emit_if(self, stmt: IfStmt, prefix: str) -> None:
        self._emit_line(prefix + "if " + self.render_expr(stmt.cond) + " then")
        self._emit_nested(stmt.then_body)
        else_body = stmt.else_body
        if else_body is None:
            return
        if isinstance(else_body, IfStmt):
            self._emit_if(else_body, "else ")
            return
        self._emit_line("else")
        self._emit_nested(else_body)

    # ── Exprs ───────────────────────────────────────────────

    def _expr_prec(self, expr: Expr) -> int:
        if isinstance(expr, BinaryOp):
            if expr.op not in self._BIN_PREC:
                raise ValueError(f"unknown binary operator: {expr.op}")
            return self._BIN_PREC[expr.op]
        if isinstance(expr, UnaryOp):
            return self._PREC_UNARY
        return self._PREC_PRIMARY

    def _render_expr(self, expr: Expr, parent_prec: int, side: str = "") -> str:
        prec = self._expr_prec(expr)
        text = self._render_expr_inner(expr)
        # Left-associative: an equal-precedence right operand needs parens.
        if prec < parent_prec or (prec == parent_prec and side == "right"):
            return f"({text})"
        return text

    def _render_expr_inner(self, expr: Expr) -> str:
        if isinstance(expr, IntLit):
            return expr.raw
        if isinstance(expr, FloatLit):
            return expr.raw
        if isinstance(expr, Var):
            return expr.name
        if isinstance(expr, UnaryOp):
            operand = self._render_expr(expr.operand, self._PREC_UNARY)
            if expr.op == "not" or operand.startswith("-"):
                return f"{expr.op} {operand}"
            return f"{expr.op}{operand}"
        if isinstance(expr, BinaryOp):
            op_prec = self._BIN_PREC[expr.op]
            left = self._render_expr(expr.left, op_prec, "left")
            right = self._render_expr(expr.right, op_prec, "right")
            return f"{left} {expr.op} {right}"
        raise TypeError("unhandled expr type")
