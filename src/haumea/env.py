"""Haumea environments — a chain of variable scopes."""

from __future__ import annotations

from .ast import Pos
from .errors import HaumeaNameError
from .values import Value


class Scope:
    """One frame of bindings with a back-reference to its enclosing scope.

    The global scope has no parent. Each call gets a fresh scope whose
    parent is the global scope; the caller's scope is never reachable.
    """

    def __init__(self, parent: Scope | None = None):
        self.parent: Scope | None = parent
        self._bindings: dict[str, Value] = {}

    def child(self) -> Scope:
        return Scope(self)

    def define(self, name: str, value: Value) -> None:
        """Bind in this scope, shadowing any outer binding of the same name."""
        self._bindings[name] = value

    def owner(self, name: str) -> Scope | None:
        """The innermost scope in the chain that binds ``name``."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope._bindings:
                return scope
            scope = scope.parent
        return None

    def is_bound(self, name: str) -> bool:
        return self.owner(name) is not None

    def lookup(self, name: str, pos: Pos | None = None) -> Value:
        scope = self.owner(name)
        if scope is None:
            raise _unbound(name, pos)
        return scope._bindings[name]

    def assign(self, name: str, value: Value, pos: Pos | None = None) -> None:
        """Update an existing binding in place, in the scope that owns it."""
        scope = self.owner(name)
        if scope is None:
            raise _unbound(name, pos)
        scope._bindings[name] = value

    def names(self) -> list[str]:
        return sorted(self._bindings)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v.to_string()}" for k, v in self._bindings.items())
        return "Scope(" + inner + ")"


def _unbound(name: str, pos: Pos | None) -> HaumeaNameError:
    if pos is None:
        return HaumeaNameError(f"unbound name '{name}'", name)
    return HaumeaNameError(f"unbound name '{name}'", name, pos.line, pos.col)
