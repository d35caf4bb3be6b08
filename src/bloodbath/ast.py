"""Expression tree built for one top-level expression and reduced immediately."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .values import Function, Value


@dataclass(frozen=True)
class Constant:
    value: Value


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class Compound:
    items: tuple["Expr", ...]


@dataclass(frozen=True)
class Set:
    name: str
    value: "Expr"


@dataclass(frozen=True)
class Call:
    function: Function
    arguments: tuple["Expr", ...]


@dataclass(frozen=True)
class If:
    condition: "Expr"
    then_branch: "Expr"
    else_branch: "Expr | None" = None


Expr = Union[Constant, Variable, Compound, Set, Call, If]
