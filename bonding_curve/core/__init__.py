"""
Core bonding-curve algorithms
"""

from .curve import (
    Action,
    ActionParams,
    CurveState,
    Effect,
    StepResult,
    buy,
    create_curve,
    sell,
    step,
    step_or_raise,
    withdraw,
)
from .fees import BPS_DENOM, compute_fee
from .pricing import Quote, get_buy_price, get_buy_quote, get_sell_price, get_sell_quote

__all__ = [
    "Action",
    "ActionParams",
    "CurveState",
    "Effect",
    "StepResult",
    "buy",
    "create_curve",
    "sell",
    "step",
    "step_or_raise",
    "withdraw",
    "BPS_DENOM",
    "compute_fee",
    "Quote",
    "get_buy_price",
    "get_buy_quote",
    "get_sell_price",
    "get_sell_quote",
]
