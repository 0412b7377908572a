"""Haumea runtime values — tagged integers and floats."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass


class Value(ABC):
    """A runtime number with a concrete Int or Float tag."""

    @abstractmethod
    def to_python(self) -> int | float:
        ...

    @abstractmethod
    def to_string(self) -> str:
        ...

    def is_truthy(self) -> bool:
        return self.to_python() != 0


@dataclass(frozen=True, eq=False)
class VInt(Value):
    value: int

    def to_python(self) -> int:
        return self.value

    def to_string(self) -> str:
        return str(self.value)

    def __hash__(self) -> int:
        return hash(("int", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, VInt) and self.value == other.value


@dataclass(frozen=True, eq=False)
class VFloat(Value):
    value: float

    def to_python(self) -> float:
        return self.value

    def to_string(self) -> str:
        return repr(self.value)

    def __hash__(self) -> int:
        # Include tag so float values never collide with ints of same value.
        return hash(("float", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, VFloat) and self.value == other.value


TRUE = VInt(1)
FALSE = VInt(0)


def from_bool(b: bool) -> VInt:
    return TRUE if b else FALSE


def from_python(v: int | float | Value) -> Value:
    """Wrap a host number; bools are rejected so 0/1 stay explicit."""
    if isinstance(v, Value):
        return v
    if isinstance(v, bool):
        raise TypeError("bool is not a Haumea value; pass 0 or 1")
    if isinstance(v, int):
        return VInt(v)
    if isinstance(v, float):
        if math.isinf(v) or math.isnan(v):
            raise ValueError(f"{v!r} is not a finite Haumea value")
        return VFloat(v)
    raise TypeError(f"cannot convert {type(v).__name__} to a Haumea value")
