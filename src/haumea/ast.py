"""Haumea AST — parse-time node definitions.

Nodes are built once by the parser and never mutated afterwards. Source
positions do not take part in equality, so two parses of equivalent text
compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# POSITION
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Expr:
    """Base for all expressions."""

    pos: Pos = field(compare=False)


@dataclass(frozen=True)
class IntLit(Expr):
    """Integer literal."""

    value: int
    raw: str


@dataclass(frozen=True)
class FloatLit(Expr):
    """Float literal."""

    value: float
    raw: str


@dataclass(frozen=True)
class Var(Expr):
    """Identifier reference."""

    name: str


@dataclass(frozen=True)
class UnaryOp(Expr):
    """'-' or 'not' applied to an operand."""

    op: str
    operand: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    """left op right, op in + - or * / and."""

    op: str
    left: Expr
    right: Expr


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Stmt:
    """Base for all statements."""

    pos: Pos = field(compare=False)


@dataclass(frozen=True)
class ReturnStmt(Stmt):
    """return expr."""

    value: Expr


@dataclass(frozen=True)
class IfStmt(Stmt):
    """if cond then stmt [else stmt]."""

    cond: Expr
    then_body: Stmt
    else_body: Stmt | None


@dataclass(frozen=True)
class DoStmt(Stmt):
    """do stmt* end."""

    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class CallStmt(Stmt):
    """name(args) as a statement; calls never appear inside expressions."""

    name: str
    args: tuple[Expr, ...]


@dataclass(frozen=True)
class SetStmt(Stmt):
    """set name to expr."""

    name: str
    value: Expr


@dataclass(frozen=True)
class ChangeStmt(Stmt):
    """change name by expr."""

    name: str
    delta: Expr


# ============================================================
# DECLARATIONS
# ============================================================


@dataclass(frozen=True)
class FnDecl:
    """to name [with (params)] body."""

    pos: Pos = field(compare=False)
    name: str
    params: tuple[str, ...]
    body: Stmt


@dataclass(frozen=True)
class Program:
    """Top-level module: declarations in source order."""

    decls: tuple[FnDecl, ...]

    def functions(self) -> dict[str, FnDecl]:
        """Flat name table; a later declaration replaces an earlier one."""
        table: dict[str, FnDecl] = {}
        for decl in self.decls:
            table[decl.name] = decl
        return table
