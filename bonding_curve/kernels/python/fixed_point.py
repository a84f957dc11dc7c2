"""
Fixed-width unsigned arithmetic kernel.

Python ints are unbounded, so width is enforced explicitly:
- reserves, amounts and prices are u64,
- every product that can exceed u64 is taken in u128 ("widened"),
- results are narrow-checked back to u64 before they reach a CurveState.

Any overflow, underflow below zero, or division by zero raises
`CurveMathError`. Callers never see a partially computed value.
"""

from __future__ import annotations

from ...errors import CurveMathError


U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_u64(name: str, value: int) -> int:
    """Return `value` unchanged if it is a u64, else raise `CurveMathError`."""
    _require_int(name, value)
    if value < 0 or value > U64_MAX:
        raise CurveMathError(f"{name} out of u64 range: {value}")
    return value


def narrow_u64(value: int) -> int:
    """Narrow a widened intermediate back to u64."""
    _require_int("value", value)
    if value < 0:
        raise CurveMathError(f"underflow: {value} < 0")
    if value > U64_MAX:
        raise CurveMathError(f"overflow: {value} does not fit in u64")
    return value


def checked_add(a: int, b: int) -> int:
    return narrow_u64(require_u64("a", a) + require_u64("b", b))


def checked_sub(a: int, b: int) -> int:
    return narrow_u64(require_u64("a", a) - require_u64("b", b))


def checked_mul(a: int, b: int) -> int:
    """u64 * u64 -> u64 (fails if the product does not fit)."""
    return narrow_u64(widening_mul(a, b))


def widening_mul(a: int, b: int) -> int:
    """u64 * u64 -> u128. Cannot overflow u128, but the bound is still asserted."""
    product = require_u64("a", a) * require_u64("b", b)
    if product > U128_MAX:
        raise CurveMathError("overflow: product exceeds u128")
    return product


def _require_u128(name: str, value: int) -> int:
    _require_int(name, value)
    if value < 0 or value > U128_MAX:
        raise CurveMathError(f"{name} out of u128 range: {value}")
    return value


def checked_div(numerator: int, denominator: int) -> int:
    """Floor division on u128 operands."""
    _require_u128("numerator", numerator)
    _require_u128("denominator", denominator)
    if denominator == 0:
        raise CurveMathError("division by zero")
    return numerator // denominator


def ceil_div(numerator: int, denominator: int) -> int:
    """Ceiling division on u128 operands: `ceil(numerator / denominator)`."""
    _require_u128("numerator", numerator)
    _require_u128("denominator", denominator)
    if denominator == 0:
        raise CurveMathError("division by zero")
    return (numerator + denominator - 1) // denominator


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """`floor(a * b / denominator)` with the product widened to u128, result narrowed to u64."""
    return narrow_u64(checked_div(widening_mul(a, b), denominator))
