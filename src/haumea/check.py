"""Haumea static checker — call-resolution diagnostics without running code."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .ast import CallStmt, DoStmt, FnDecl, IfStmt, Pos, Program, Stmt

logger = logging.getLogger(__name__)


@dataclass
class CheckError:
    """A diagnostic; ``fatal`` is False for notes that do not stop a run."""

    msg: str
    pos: Pos
    fatal: bool = True

    def __str__(self) -> str:
        return f"{self.msg} at line {self.pos.line} col {self.pos.col}"


class Checker:
    def __init__(self, program: Program):
        self.program = program
        self.functions: dict[str, FnDecl] = program.functions()
        self.errors: list[CheckError] = []

    def check(self) -> list[CheckError]:
        seen: dict[str, FnDecl] = {}
        for decl in self.program.decls:
            if decl.name in seen:
                first = seen[decl.name]
                self.errors.append(
                    CheckError(
                        f"function '{decl.name}' redeclared (first at line "
                        f"{first.pos.line}); the last declaration wins",
                        decl.pos,
                        fatal=False,
                    )
                )
            seen[decl.name] = decl
            self._check_params(decl)
            self._check_stmt(decl.body)
        logger.info(
            "checked %d function(s): %d diagnostic(s)",
            len(self.program.decls),
            len(self.errors),
        )
        return self.errors

    def _check_params(self, decl: FnDecl) -> None:
        names: set[str] = set()
        for p in decl.params:
            if p in names:
                self.errors.append(
                    CheckError(
                        f"duplicate parameter '{p}' in function '{decl.name}'",
                        decl.pos,
                    )
                )
            names.add(p)

    def _check_stmt(self, st: Stmt) -> None:
        if isinstance(st, DoStmt):
            for sub in st.body:
                self._check_stmt(sub)
            return
        if isinstance(st, IfStmt):
            self._check_stmt(st.then_body)
            if st.else_body is not None:
                self._check_stmt(st.else_body)
            return
        if isinstance(st, CallStmt):
            callee = self.functions.get(st.name)
            if callee is None:
                self.errors.append(
                    CheckError(f"call to undefined function '{st.name}'", st.pos)
                )
            elif len(callee.params) != len(st.args):
                self.errors.append(
                    CheckError(
                        f"function '{st.name}' takes {len(callee.params)} "
                        f"argument(s), got {len(st.args)}",
                        st.pos,
                    )
                )


def check(program: Program) -> list[CheckError]:
    """Return diagnostics for ``program`` (empty list = ok)."""
    return Checker(program).check()
