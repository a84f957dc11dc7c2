"""Curve creation and serialization.

`create_curve()` is the only place reserves are seeded. Every other state is
produced by the engine from a previous one.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

from ...errors import InvalidConfiguration
from ...kernels.python.fixed_point import U64_MAX
from .invariants import check_all
from .types import CurveState

if TYPE_CHECKING:
    from ...config import Config

# Auto-derived from CurveState field definitions (single source of truth).
STATE_VAR_NAMES: tuple[str, ...] = tuple(CurveState.__dataclass_fields__)


def _pick(name: str, override: Optional[int], config: Optional[Config], config_attr: str) -> int:
    if override is not None:
        value = override
    elif config is not None:
        value = getattr(config, config_attr)
    else:
        raise InvalidConfiguration(f"{name} must be given when no config is supplied")
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be an int")
    if not (0 <= value <= U64_MAX):
        raise InvalidConfiguration(f"{name} must be a u64: {value}")
    return value


def create_curve(
    config: Optional[Config] = None,
    *,
    initial_virtual_sol: Optional[int] = None,
    initial_virtual_token: Optional[int] = None,
    initial_real_token: Optional[int] = None,
    token_total_supply: Optional[int] = None,
) -> CurveState:
    """
    Seed a fresh, active curve.

    Explicit keyword overrides win over the config defaults.

    Raises:
        InvalidConfiguration: If a seed value is missing, not a u64, or if
            either virtual reserve (or the real token reserve) is zero
    """
    virtual_sol = _pick("initial_virtual_sol", initial_virtual_sol, config, "initial_virtual_sol_reserves")
    virtual_token = _pick(
        "initial_virtual_token", initial_virtual_token, config, "initial_virtual_token_reserves",
    )
    real_token = _pick("initial_real_token", initial_real_token, config, "initial_real_token_reserves")
    supply = _pick("token_total_supply", token_total_supply, config, "token_total_supply")

    if virtual_sol <= 0:
        raise InvalidConfiguration("initial_virtual_sol must be positive")
    if virtual_token <= 0:
        raise InvalidConfiguration("initial_virtual_token must be positive")
    if real_token <= 0:
        raise InvalidConfiguration("initial_real_token must be positive")

    curve = CurveState(
        virtual_sol_reserves=virtual_sol,
        virtual_token_reserves=virtual_token,
        real_sol_reserves=0,
        real_token_reserves=real_token,
        token_total_supply=supply,
        initial_real_token_reserves=real_token,
        complete=False,
    )
    violations = check_all(curve)
    if violations:
        raise InvalidConfiguration(f"seeded curve violates: {', '.join(violations)}")
    return curve


def state_to_dict(state: CurveState) -> dict[str, bool | int]:
    """Serialize a CurveState to a plain dict."""
    return {name: getattr(state, name) for name in STATE_VAR_NAMES}


def state_from_dict(d: Mapping[str, Any]) -> CurveState:
    """Deserialize a dict to a CurveState. Raises KeyError on missing fields."""
    kwargs: dict[str, Any] = {}
    for name in STATE_VAR_NAMES:
        val = d[name]
        if isinstance(val, bool):
            kwargs[name] = val
        elif isinstance(val, int):
            kwargs[name] = int(val)  # normalize int subclasses (e.g. numpy)
        else:
            raise TypeError(f"state var {name!r} must be bool|int, got {type(val).__name__}")
    return CurveState(**kwargs)
