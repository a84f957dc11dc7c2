"""Guard functions for the bonding-curve engine.

One pure function per action. Each returns None iff the action is allowed in
the given PRE-state, else the rejection code of the failure (see
`bonding_curve.errors`). Pricing helpers may also raise `BondingCurveError`
subclasses (arithmetic, liquidity); the engine turns those into rejections too.

Guards run before any update, so a rejected step never produces a new state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ...errors import CurveComplete, CurveNotComplete, InsufficientLiquidity, InvalidAmount, SlippageExceeded
from ...kernels.python.fixed_point import checked_add, checked_sub
from ..fees import compute_fee
from ..pricing import get_buy_price, get_sell_price
from .types import ActionParams, CurveState

if TYPE_CHECKING:
    from ...config import Config


def guard_buy(state: CurveState, params: ActionParams, config: Config) -> Optional[str]:
    if state.complete:
        return CurveComplete.code
    if params.token_amount <= 0 or params.token_amount > state.real_token_reserves:
        return InsufficientLiquidity.code

    cost = get_buy_price(state, params.token_amount)
    fee = compute_fee(cost, config.fee_basis_points)
    if checked_add(cost, fee) > params.max_sol_amount:
        return SlippageExceeded.code
    return None


def guard_sell(state: CurveState, params: ActionParams, config: Config) -> Optional[str]:
    if state.complete:
        return CurveComplete.code
    if params.token_amount <= 0:
        return InvalidAmount.code

    proceeds = get_sell_price(state, params.token_amount)
    fee = compute_fee(proceeds, config.fee_basis_points)
    if checked_sub(proceeds, fee) < params.min_sol_amount:
        return SlippageExceeded.code
    return None


def guard_withdraw(state: CurveState, params: ActionParams, config: Config) -> Optional[str]:
    if not state.complete:
        return CurveNotComplete.code
    return None
