"""Reduction of expression trees and the per-line evaluation loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .ast import Call, Compound, Constant, Expr, If, Set, Variable
from .builtins import builtin_table
from .environment import Environment
from .errors import LexError, NestingTooDeep, ReadingFailed
from .lexer import tokenize
from .parser import Parser
from .values import NOOP, Function, Value, is_truthy, kind_of, render

logger = logging.getLogger(__name__)


def default_environment() -> Environment:
    """A fresh environment holding only the builtin verbs."""
    return Environment(builtin_table())


def _changes_parsing(old: Value, new: Value) -> bool:
    if isinstance(old, Function) and isinstance(new, Function):
        return old.argument_count != new.argument_count
    return isinstance(old, Function) or isinstance(new, Function)


def _assign(name: str, value: Value, env: Environment) -> None:
    if name in env:
        old = env.get(name)
        if _changes_parsing(old, value):
            logger.debug("rebinding %r from %s to %s", name, kind_of(old).value, render(value))
    env.set(name, value)


def reduce(expr: Expr, env: Environment) -> Value:
    if isinstance(expr, Constant):
        return expr.value

    if isinstance(expr, Variable):
        return env.get(expr.name)

    if isinstance(expr, Compound):
        result: Value = NOOP
        for item in expr.items:
            result = reduce(item, env)
        return result

    if isinstance(expr, Set):
        value = reduce(expr.value, env)
        _assign(expr.name, value, env)
        return value

    if isinstance(expr, Call):
        arguments = [reduce(argument, env) for argument in expr.arguments]
        return expr.function.call(arguments)

    if isinstance(expr, If):
        if is_truthy(reduce(expr.condition, env)):
            return reduce(expr.then_branch, env)
        if expr.else_branch is not None:
            return reduce(expr.else_branch, env)
        return NOOP

    raise TypeError(f"Unsupported expression node: {type(expr)!r}")


def _evaluate_line(source: str, env: Environment) -> Value:
    try:
        tokens = tokenize(source)
    except LexError as err:
        raise ReadingFailed(err) from err

    # Each top-level expression is reduced before the next is parsed, so a
    # `set` earlier on the line changes how the rest of the line parses.
    parser = Parser(tokens=tokens, env=env)
    result: Value = NOOP
    try:
        while not parser.at_end():
            expr = parser.parse_expression()
            result = reduce(expr, env)
            logger.debug("reduced %r -> %s", expr, render(result))
    except RecursionError as err:
        raise NestingTooDeep() from err
    return result


@dataclass
class Session:
    """Evaluates lines against one environment that persists between calls."""

    env: Environment = field(default_factory=default_environment)

    def evaluate(self, line: str) -> Value:
        return _evaluate_line(line, self.env)

    def __call__(self, line: str) -> Value:
        return self.evaluate(line)

    def reset(self) -> None:
        self.env = default_environment()


def evaluate(source: str, env: Environment | None = None) -> Value:
    """Evaluate one line and return the value of its last top-level expression.

    Without *env* the line runs in a fresh builtin-only environment. With
    *env*, bindings made by the line persist in it; on error, ``set`` calls
    that already completed are kept.
    """
    if env is None:
        env = default_environment()
    return _evaluate_line(source, env)
