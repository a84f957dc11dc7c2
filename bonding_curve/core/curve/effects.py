"""Effect functions for the bonding-curve engine.

One pure function per action. Each computes the ``Effect`` from the
(PRE, POST) state pair: realized amounts are the reserve deltas, so an effect
can never disagree with the state it describes.

The ``transfers`` tuple is the custody contract: the platform must apply all
of it or none of it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..fees import compute_fee
from .types import ActionParams, Asset, CurveState, Effect, Event, Party, Transfer

if TYPE_CHECKING:
    from ...config import Config


def effect_buy(pre: CurveState, post: CurveState, params: ActionParams, config: Config) -> Effect:
    cost = post.virtual_sol_reserves - pre.virtual_sol_reserves
    fee = compute_fee(cost, config.fee_basis_points)
    return Effect(
        event=Event.BOUGHT,
        token_amount=params.token_amount,
        sol_amount=cost,
        fee=fee,
        paid=cost + fee,
        completed=post.complete and not pre.complete,
        transfers=(
            Transfer(Asset.SOL, Party.TRADER, Party.CURVE, cost),
            Transfer(Asset.SOL, Party.TRADER, Party.FEE_RECIPIENT, fee),
            Transfer(Asset.TOKEN, Party.CURVE, Party.TRADER, params.token_amount),
        ),
    )


def effect_sell(pre: CurveState, post: CurveState, params: ActionParams, config: Config) -> Effect:
    proceeds = pre.virtual_sol_reserves - post.virtual_sol_reserves
    fee = compute_fee(proceeds, config.fee_basis_points)
    payout = proceeds - fee
    return Effect(
        event=Event.SOLD,
        token_amount=params.token_amount,
        sol_amount=proceeds,
        fee=fee,
        received=payout,
        transfers=(
            Transfer(Asset.TOKEN, Party.TRADER, Party.CURVE, params.token_amount),
            Transfer(Asset.SOL, Party.CURVE, Party.TRADER, payout),
            Transfer(Asset.SOL, Party.CURVE, Party.FEE_RECIPIENT, fee),
        ),
    )


def effect_withdraw(pre: CurveState, post: CurveState, params: ActionParams, config: Config) -> Effect:
    withdrawn = pre.real_sol_reserves
    return Effect(
        event=Event.WITHDRAWN,
        sol_amount=withdrawn,
        transfers=(Transfer(Asset.SOL, Party.CURVE, Party.WITHDRAW_AUTHORITY, withdrawn),),
    )
