"""Arithmetic verbs on top of JAX 64-bit scalar kernels."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from typing import Final

import jax
from jax import lax
import jax.numpy as jnp

from .values import NOOP, Float, Function, Integer, Value

# Integer must be int64 and Float float64; without x64 JAX silently narrows to 32 bits.
jax.config.update("jax_enable_x64", True)

logger = logging.getLogger(__name__)

_USE_JITTED_KERNELS: Final[bool] = os.environ.get("BLOODBATH_DISABLE_JITTED_KERNELS", "0") != "1"

Kernel = Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]

# On integers lax.div truncates toward zero and lax.rem takes the dividend's sign.
_BASE_KERNELS: Final[dict[str, Kernel]] = {
    "+": lax.add,
    "-": lax.sub,
    "*": lax.mul,
    "/": lax.div,
    "%": lax.rem,
}

_JITTED_KERNELS: dict[tuple[str, str], Kernel] = {}


def _jitted_kernel(op: str, dtype: str) -> Kernel:
    # Keyed per operator/dtype pair; jax.jit traces each dtype separately.
    key = (op, dtype)
    fn = _JITTED_KERNELS.get(key)
    if fn is None:
        logger.debug("compiling jitted kernel for %r on %s", op, dtype)
        fn = jax.jit(_BASE_KERNELS[op])
        _JITTED_KERNELS[key] = fn
    return fn


def _apply(op: str, left: jnp.ndarray, right: jnp.ndarray) -> jnp.ndarray:
    if _USE_JITTED_KERNELS:
        return _jitted_kernel(op, str(left.dtype))(left, right)
    return _BASE_KERNELS[op](left, right)


def _as_int64(value: int) -> jnp.ndarray:
    return jnp.asarray(value, dtype=jnp.int64)


def _as_float64(value: int | float) -> jnp.ndarray:
    return jnp.asarray(value, dtype=jnp.float64)


def _box(result: jnp.ndarray) -> Value:
    if jnp.issubdtype(result.dtype, jnp.integer):
        return Integer(int(result))
    return Float(float(result))


def _numeric_operands(left: Value, right: Value) -> tuple[jnp.ndarray, jnp.ndarray] | None:
    """Promote a pair of operands to a common dtype, or None if either is not numeric."""
    if isinstance(left, Integer) and isinstance(right, Integer):
        return _as_int64(left.value), _as_int64(right.value)
    if isinstance(left, (Integer, Float)) and isinstance(right, (Integer, Float)):
        return _as_float64(left.value), _as_float64(right.value)
    return None


def _binary(op: str, arguments: Sequence[Value]) -> Value:
    left, right = arguments
    operands = _numeric_operands(left, right)
    if operands is None:
        return NOOP
    return _box(_apply(op, *operands))


def add(arguments: Sequence[Value]) -> Value:
    return _binary("+", arguments)


def subtract(arguments: Sequence[Value]) -> Value:
    return _binary("-", arguments)


def multiply(arguments: Sequence[Value]) -> Value:
    return _binary("*", arguments)


def divide(arguments: Sequence[Value]) -> Value:
    """Exact integer quotients stay Integer; anything else becomes Float.

    Integer division by zero yields Noop. Float division by zero follows
    IEEE 754 and yields an infinity or NaN.
    """
    left, right = arguments
    if isinstance(left, Integer) and isinstance(right, Integer):
        if right.value == 0:
            return NOOP
        a, b = _as_int64(left.value), _as_int64(right.value)
        if int(_apply("%", a, b)) == 0:
            return _box(_apply("/", a, b))
        return _box(_apply("/", _as_float64(left.value), _as_float64(right.value)))
    return _binary("/", arguments)


ADD: Final = Function(argument_count=2, implementation=add, name="+")
SUBTRACT: Final = Function(argument_count=2, implementation=subtract, name="-")
MULTIPLY: Final = Function(argument_count=2, implementation=multiply, name="*")
DIVIDE: Final = Function(argument_count=2, implementation=divide, name="/")


def builtin_table() -> dict[str, Function]:
    """Bindings installed into every new session's environment."""
    return {fn.display_name: fn for fn in (ADD, SUBTRACT, MULTIPLY, DIVIDE)}
