"""Invariant checkers for the bonding-curve engine.

Two registries:
- `INVARIANT_REGISTRY`: predicates over a single `CurveState`,
- `TRANSITION_INVARIANT_REGISTRY`: predicates over a (pre, post) pair for a
  given action.

`check_all()` / `check_transition()` return the list of violated invariant IDs
(empty = all pass). The engine runs both on every accepted step.
"""

from __future__ import annotations

from typing import Callable

from ...kernels.python.fixed_point import U64_MAX
from .types import Action, CurveState

_RESERVE_FIELDS = (
    "virtual_sol_reserves",
    "virtual_token_reserves",
    "real_sol_reserves",
    "real_token_reserves",
    "token_total_supply",
    "initial_real_token_reserves",
)


def inv_virtual_reserves_positive(s: CurveState) -> bool:
    return s.virtual_sol_reserves > 0 and s.virtual_token_reserves > 0


def inv_u64_bounds(s: CurveState) -> bool:
    for name in _RESERVE_FIELDS:
        v = getattr(s, name)
        if not isinstance(v, int) or isinstance(v, bool) or not (0 <= v <= U64_MAX):
            return False
    return True


def inv_tokens_sold_within_supply(s: CurveState) -> bool:
    # The seeded reserve may exceed the minted supply; what must never exceed
    # it is the amount that has actually left the curve.
    if s.real_token_reserves > s.initial_real_token_reserves:
        return False
    return s.tokens_sold <= s.token_total_supply


def inv_complete_iff_drained(s: CurveState) -> bool:
    if not s.complete:
        return True
    return s.real_token_reserves == 0


INVARIANT_REGISTRY: dict[str, Callable[[CurveState], bool]] = {
    "inv_virtual_reserves_positive": inv_virtual_reserves_positive,
    "inv_u64_bounds": inv_u64_bounds,
    "inv_tokens_sold_within_supply": inv_tokens_sold_within_supply,
    "inv_complete_iff_drained": inv_complete_iff_drained,
}


def check_all(state: CurveState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]


# ---------------------------------------------------------------------------
# Transition invariants
# ---------------------------------------------------------------------------

def tinv_virtual_tracks_real(pre: CurveState, post: CurveState, action: Action) -> bool:
    if action not in (Action.BUY, Action.SELL):
        return True
    return (
        pre.virtual_token_reserves - pre.real_token_reserves
        == post.virtual_token_reserves - post.real_token_reserves
    )


def tinv_sol_deltas_match(pre: CurveState, post: CurveState, action: Action) -> bool:
    if action not in (Action.BUY, Action.SELL):
        return True
    return (
        post.virtual_sol_reserves - pre.virtual_sol_reserves
        == post.real_sol_reserves - pre.real_sol_reserves
    )


def tinv_k_non_decreasing(pre: CurveState, post: CurveState, action: Action) -> bool:
    if action not in (Action.BUY, Action.SELL):
        return True
    return post.k >= pre.k


def tinv_complete_monotonic(pre: CurveState, post: CurveState, action: Action) -> bool:
    return post.complete or not pre.complete


def tinv_supply_fixed(pre: CurveState, post: CurveState, action: Action) -> bool:
    return (
        pre.token_total_supply == post.token_total_supply
        and pre.initial_real_token_reserves == post.initial_real_token_reserves
    )


TRANSITION_INVARIANT_REGISTRY: dict[str, Callable[[CurveState, CurveState, Action], bool]] = {
    "tinv_virtual_tracks_real": tinv_virtual_tracks_real,
    "tinv_sol_deltas_match": tinv_sol_deltas_match,
    "tinv_k_non_decreasing": tinv_k_non_decreasing,
    "tinv_complete_monotonic": tinv_complete_monotonic,
    "tinv_supply_fixed": tinv_supply_fixed,
}


def check_transition(pre: CurveState, post: CurveState, action: Action) -> list[str]:
    """Return list of violated transition invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in TRANSITION_INVARIANT_REGISTRY.items()
        if not check_fn(pre, post, action)
    ]
