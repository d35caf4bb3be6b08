"""Runtime value model: Noop, Integer, Float and first-class Function."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final, Union

_INT64_MIN: Final[int] = -(2**63)
_INT64_SPAN: Final[int] = 2**64
MAX_ARGUMENT_COUNT: Final[int] = 0xFFFF


def wrap_int64(value: int) -> int:
    """Reduce *value* into the signed 64-bit range with two's complement wraparound."""
    return (value - _INT64_MIN) % _INT64_SPAN + _INT64_MIN


@dataclass(frozen=True)
class Noop:
    """The absorbing null value."""

    def __repr__(self) -> str:
        return "Noop"


NOOP: Final = Noop()


@dataclass(frozen=True)
class Integer:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer expects an int, got {type(self.value).__name__}")
        object.__setattr__(self, "value", wrap_int64(self.value))


@dataclass(frozen=True)
class Float:
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True, eq=False)
class Function:
    """A native callable together with the number of arguments it consumes.

    Two Function values are equal only if they are the same object; the
    implementation is opaque and never compared structurally.
    """

    argument_count: int
    implementation: Callable[[Sequence["Value"]], "Value"]
    name: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.argument_count <= MAX_ARGUMENT_COUNT:
            raise ValueError(
                f"argument_count must be within [0, {MAX_ARGUMENT_COUNT}], got {self.argument_count}"
            )

    def call(self, arguments: Sequence["Value"]) -> "Value":
        if len(arguments) != self.argument_count:
            raise TypeError(
                f"{self.display_name} takes {self.argument_count} arguments, got {len(arguments)}"
            )
        return self.implementation(tuple(arguments))

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else "anonymous"

    def __repr__(self) -> str:
        return f"Function({self.display_name}/{self.argument_count})"


Value = Union[Noop, Integer, Float, Function]


class ValueKind(str, Enum):
    NOOP = "noop"
    INTEGER = "integer"
    FLOAT = "float"
    FUNCTION = "function"


def kind_of(value: Value) -> ValueKind:
    if isinstance(value, Noop):
        return ValueKind.NOOP
    if isinstance(value, Integer):
        return ValueKind.INTEGER
    if isinstance(value, Float):
        return ValueKind.FLOAT
    if isinstance(value, Function):
        return ValueKind.FUNCTION
    raise TypeError(f"unsupported runtime type {type(value).__name__}")


def validate_value(value: object, *, where: str = "value") -> None:
    if isinstance(value, (Noop, Integer, Float, Function)):
        return
    raise TypeError(f"{where} has unsupported runtime type {type(value).__name__}")


def is_truthy(value: Value) -> bool:
    # Integer(0) and Float(0.0) are truthy.
    return not isinstance(value, Noop)


def _render_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == int(value):
        return str(int(value))
    return repr(value)


def render(value: Value) -> str:
    """Format a value for display in the REPL."""
    if isinstance(value, Noop):
        return "noop"
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Float):
        return _render_float(value.value)
    if isinstance(value, Function):
        return f"<function {value.display_name}/{value.argument_count}>"
    raise TypeError(f"unsupported runtime type {type(value).__name__}")
