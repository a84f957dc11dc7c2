"""
Fee kernel (deterministic, integer-only).

    fee = floor(amount * basis_points / 10_000)

The fee is floored on both sides of the book: on a buy it is added on top of
the curve cost, on a sell it is taken out of the curve proceeds. Either way the
trader pays it in full and the protocol never has to cover a rounding shortfall
out of reserves.
"""

from __future__ import annotations

from ..errors import InvalidConfiguration
from ..kernels.python.fixed_point import mul_div_floor, require_u64


BPS_DENOM = 10_000


def validate_fee_bps(basis_points: int) -> int:
    if not isinstance(basis_points, int) or isinstance(basis_points, bool):
        raise InvalidConfiguration("fee_basis_points must be an int")
    if not (0 <= basis_points <= BPS_DENOM):
        raise InvalidConfiguration(f"fee_basis_points must be in [0, {BPS_DENOM}]: {basis_points}")
    return basis_points


def compute_fee(amount: int, basis_points: int) -> int:
    """
    Compute `floor(amount * basis_points / 10_000)` with the product widened to u128.

    Raises:
        InvalidConfiguration: `basis_points` outside [0, 10_000]
        CurveMathError: `amount` is not a u64
    """
    validate_fee_bps(basis_points)
    require_u64("amount", amount)
    return mul_div_floor(amount, basis_points, BPS_DENOM)
