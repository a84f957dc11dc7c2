"""
Constant-product bonding-curve pricing.

Quotes are pure functions of a `CurveState` snapshot; nothing here mutates.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per quote
- Invariant: k = virtual_sol * virtual_token, and after any quoted trade k' >= k

Rounding:
- buy cost rounds UP:      cost     = ceil(k / (vt - t)) - vs
- sell proceeds round DOWN: proceeds = vs - ceil(k / (vt + t))

Both directions leave the rounding dust with the curve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import InsufficientLiquidity
from ..kernels.python.fixed_point import (
    ceil_div,
    checked_add,
    checked_sub,
    mul_div_floor,
    narrow_u64,
    require_u64,
    widening_mul,
)
from .curve.types import CurveState
from .fees import compute_fee

if TYPE_CHECKING:
    from ..config import Config


PRICE_SCALE = 1_000_000_000  # 1e9


@dataclass(frozen=True)
class Quote:
    """A fee-inclusive quote.

    For a buy, `total` is what the trader pays (`sol_amount + fee`); for a
    sell, `total` is what the trader receives (`sol_amount - fee`).
    """
    side: str
    token_amount: int
    sol_amount: int
    fee: int
    total: int


def get_buy_price(curve: CurveState, token_amount: int) -> int:
    """
    Base-currency cost, before fee, of taking `token_amount` out of the curve.

    Raises:
        InsufficientLiquidity: `token_amount >= virtual_token_reserves` or
            `token_amount > real_token_reserves`
        CurveMathError: widened arithmetic overflow
    """
    require_u64("token_amount", token_amount)
    if token_amount == 0:
        return 0
    if token_amount >= curve.virtual_token_reserves:
        raise InsufficientLiquidity(
            f"token_amount ({token_amount}) >= virtual_token_reserves ({curve.virtual_token_reserves})"
        )
    if token_amount > curve.real_token_reserves:
        raise InsufficientLiquidity(
            f"token_amount ({token_amount}) > real_token_reserves ({curve.real_token_reserves})"
        )

    k = widening_mul(curve.virtual_sol_reserves, curve.virtual_token_reserves)
    new_virtual_token = checked_sub(curve.virtual_token_reserves, token_amount)
    new_virtual_sol = narrow_u64(ceil_div(k, new_virtual_token))
    return checked_sub(new_virtual_sol, curve.virtual_sol_reserves)


def get_sell_price(curve: CurveState, token_amount: int) -> int:
    """Base-currency proceeds, before fee, of putting `token_amount` back into the curve."""
    require_u64("token_amount", token_amount)
    if token_amount == 0:
        return 0

    k = widening_mul(curve.virtual_sol_reserves, curve.virtual_token_reserves)
    new_virtual_token = checked_add(curve.virtual_token_reserves, token_amount)
    new_virtual_sol = narrow_u64(ceil_div(k, new_virtual_token))
    return checked_sub(curve.virtual_sol_reserves, new_virtual_sol)


def get_buy_quote(curve: CurveState, token_amount: int, config: Config) -> Quote:
    cost = get_buy_price(curve, token_amount)
    fee = compute_fee(cost, config.fee_basis_points)
    return Quote(side="buy", token_amount=token_amount, sol_amount=cost, fee=fee, total=checked_add(cost, fee))


def get_sell_quote(curve: CurveState, token_amount: int, config: Config) -> Quote:
    proceeds = get_sell_price(curve, token_amount)
    fee = compute_fee(proceeds, config.fee_basis_points)
    return Quote(
        side="sell", token_amount=token_amount, sol_amount=proceeds, fee=fee, total=checked_sub(proceeds, fee),
    )


def spot_price_e9(curve: CurveState) -> int:
    """Marginal price in sol units per token unit, scaled by 1e9 (display only)."""
    return mul_div_floor(curve.virtual_sol_reserves, PRICE_SCALE, curve.virtual_token_reserves)


def market_cap(curve: CurveState) -> int:
    """`token_total_supply` valued at the marginal price, in sol units."""
    return mul_div_floor(curve.virtual_sol_reserves, curve.token_total_supply, curve.virtual_token_reserves)
