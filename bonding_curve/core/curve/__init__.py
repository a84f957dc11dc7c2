"""`curve`: the bonding-curve state machine (`Active -> Complete`).

- deterministic, integer-only transitions,
- immutable state (frozen dataclasses),
- fail-closed guards and invariant checks.

Public API:
- `create_curve(config, **overrides) -> CurveState`
- `step(state, params, config) -> StepResult`
- `step_or_raise(state, params, config) -> StepResult` (raises on rejection)
- `buy` / `sell` / `withdraw` convenience wrappers
"""

from .engine import buy, sell, step, step_or_raise, withdraw
from .state import create_curve, state_from_dict, state_to_dict
from .types import Action, ActionParams, Asset, CurveState, Effect, Event, Party, StepResult, Transfer

__all__ = [
    "buy",
    "sell",
    "withdraw",
    "step",
    "step_or_raise",
    "create_curve",
    "state_from_dict",
    "state_to_dict",
    "Action",
    "ActionParams",
    "Asset",
    "CurveState",
    "Effect",
    "Event",
    "Party",
    "StepResult",
    "Transfer",
]
