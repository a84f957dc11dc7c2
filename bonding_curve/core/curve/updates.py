"""State transition functions for the bonding-curve engine.

One pure function per action. Each returns a new `CurveState` with the
action's updates applied.

Semantics:
- updates evaluate against the PRE-state,
- all four reserves move together (virtual and real by the same deltas),
- we implement updates via `dataclasses.replace()` on frozen dataclasses,
- every addition/subtraction is width-checked; a failure raises before any
  state is returned.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ...kernels.python.fixed_point import checked_add, checked_sub
from ..pricing import get_buy_price, get_sell_price
from .types import ActionParams, CurveState

if TYPE_CHECKING:
    from ...config import Config


def apply_buy(state: CurveState, params: ActionParams, config: Config) -> CurveState:
    cost = get_buy_price(state, params.token_amount)
    new_real_token = checked_sub(state.real_token_reserves, params.token_amount)
    return replace(
        state,
        virtual_sol_reserves=checked_add(state.virtual_sol_reserves, cost),
        virtual_token_reserves=checked_sub(state.virtual_token_reserves, params.token_amount),
        real_sol_reserves=checked_add(state.real_sol_reserves, cost),
        real_token_reserves=new_real_token,
        complete=new_real_token == 0,
    )


def apply_sell(state: CurveState, params: ActionParams, config: Config) -> CurveState:
    proceeds = get_sell_price(state, params.token_amount)
    return replace(
        state,
        virtual_sol_reserves=checked_sub(state.virtual_sol_reserves, proceeds),
        virtual_token_reserves=checked_add(state.virtual_token_reserves, params.token_amount),
        real_sol_reserves=checked_sub(state.real_sol_reserves, proceeds),
        real_token_reserves=checked_add(state.real_token_reserves, params.token_amount),
    )


def apply_withdraw(state: CurveState, params: ActionParams, config: Config) -> CurveState:
    # Collected sol leaves custody; the virtual reserves are bookkeeping only.
    return replace(state, real_sol_reserves=0)
