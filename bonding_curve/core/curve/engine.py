"""Dispatch-table engine for the bonding curve.

``step(state, params, config)`` is the single entry point. It:

1. Validates parameter domains (u64 amounts).
2. Dispatches to the correct guard / update / effect functions.
3. Checks all state and transition invariants on the post-state.
4. Returns a ``StepResult`` (accepted or rejected with a reason code).

A rejected step returns no state and no effect: callers keep the pre-state and
move no funds. ``buy``/``sell``/``withdraw`` are the raising convenience
wrappers used by the platform.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ...errors import (
    ERRORS_BY_CODE,
    BondingCurveError,
    CurveInvariantError,
    InvalidAmount,
)
from ...kernels.python.fixed_point import U64_MAX
from .effects import effect_buy, effect_sell, effect_withdraw
from .guards import guard_buy, guard_sell, guard_withdraw
from .invariants import check_all, check_transition
from .types import Action, ActionParams, CurveState, Effect, StepResult
from .updates import apply_buy, apply_sell, apply_withdraw

if TYPE_CHECKING:
    from ...config import Config


logger = logging.getLogger(__name__)

GuardFn = Callable[[CurveState, ActionParams, "Config"], Optional[str]]
UpdateFn = Callable[[CurveState, ActionParams, "Config"], CurveState]
EffectFn = Callable[[CurveState, CurveState, ActionParams, "Config"], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.BUY: (guard_buy, apply_buy, effect_buy),
    Action.SELL: (guard_sell, apply_sell, effect_sell),
    Action.WITHDRAW: (guard_withdraw, apply_withdraw, effect_withdraw),
}

# Per-action bounds: list of (field_name, min_val, max_val).
# Zero token amounts pass the domain check; the guards decide what zero means.
_PARAM_BOUNDS: dict[Action, list[tuple[str, int, int]]] = {
    Action.BUY: [
        ("token_amount", 0, U64_MAX),
        ("max_sol_amount", 0, U64_MAX),
    ],
    Action.SELL: [
        ("token_amount", 0, U64_MAX),
        ("min_sol_amount", 0, U64_MAX),
    ],
    Action.WITHDRAW: [],
}


def _validate_params(params: ActionParams) -> str | None:
    """Check parameter domain bounds. Returns the offending field or None."""
    for field, lo, hi in _PARAM_BOUNDS.get(params.action, []):
        val = getattr(params, field)
        if not isinstance(val, int) or isinstance(val, bool) or val < lo or val > hi:
            return field
    return None


def _reject(params: ActionParams, code: str, detail: str | None = None) -> StepResult:
    logger.info("rejected %s: %s%s", params.action.value, code, f" ({detail})" if detail else "")
    return StepResult(accepted=False, rejection=code, detail=detail)


def step(state: CurveState, params: ActionParams, config: Config) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a ``rejection`` code.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return _reject(params, InvalidAmount.code, f"unknown_action:{params.action}")

    bad_field = _validate_params(params)
    if bad_field is not None:
        return _reject(params, InvalidAmount.code, f"param_domain:{bad_field}")

    guard_fn, update_fn, effect_fn = entry

    try:
        rejection = guard_fn(state, params, config)
        if rejection is not None:
            return _reject(params, rejection)
        new_state = update_fn(state, params, config)
    except BondingCurveError as exc:
        return _reject(params, exc.code, str(exc))

    violations = check_all(new_state) + check_transition(state, new_state, params.action)
    if violations:
        return _reject(params, CurveInvariantError.code, ",".join(violations))

    effect = effect_fn(state, new_state, params, config)
    logger.debug(
        "accepted %s: token_amount=%d sol_amount=%d fee=%d",
        params.action.value, effect.token_amount, effect.sol_amount, effect.fee,
    )
    if effect.completed:
        logger.info("curve complete: real_sol_reserves=%d", new_state.real_sol_reserves)
    return StepResult(accepted=True, state=new_state, effect=effect)


def step_or_raise(state: CurveState, params: ActionParams, config: Config) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        The ``BondingCurveError`` subclass whose ``code`` matches the rejection.
        ``CurveInvariantError`` carries the list of violated invariant IDs.
    """
    result = step(state, params, config)
    if result.accepted:
        return result

    code = result.rejection or ""
    if code == CurveInvariantError.code:
        raise CurveInvariantError((result.detail or "").split(","))
    error_cls = ERRORS_BY_CODE.get(code, BondingCurveError)
    raise error_cls(result.detail or code)


def buy(state: CurveState, token_amount: int, max_sol_amount: int, config: Config) -> StepResult:
    """Buy `token_amount` tokens paying at most `max_sol_amount` (fee inclusive)."""
    return step_or_raise(
        state, ActionParams(action=Action.BUY, token_amount=token_amount, max_sol_amount=max_sol_amount), config,
    )


def sell(state: CurveState, token_amount: int, min_sol_amount: int, config: Config) -> StepResult:
    """Sell `token_amount` tokens receiving at least `min_sol_amount` (after fee)."""
    return step_or_raise(
        state, ActionParams(action=Action.SELL, token_amount=token_amount, min_sol_amount=min_sol_amount), config,
    )


def withdraw(state: CurveState, config: Config) -> StepResult:
    """Release a completed curve's collected sol. ``effect.sol_amount`` is the amount withdrawn."""
    return step_or_raise(state, ActionParams(action=Action.WITHDRAW), config)
