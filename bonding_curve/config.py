"""
Platform configuration.

`Config` is the administrator-set parameter set: fee recipient, withdraw
authority, fee rate and the default seed reserves for new curves. It is a
frozen value threaded explicitly into every engine call; nothing in the
package reads it from module state.

Defaults (`config/bonding_curve.yaml`) match the launch parameters of the
on-chain program this engine prices for.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .core.fees import validate_fee_bps
from .errors import InvalidConfiguration
from .kernels.python.fixed_point import U64_MAX


DEFAULT_FEE_BASIS_POINTS = 100
DEFAULT_INITIAL_VIRTUAL_TOKEN_RESERVES = 1_073_000_000_000_000
DEFAULT_INITIAL_VIRTUAL_SOL_RESERVES = 30_000_000_000
DEFAULT_INITIAL_REAL_TOKEN_RESERVES = 793_100_000_000_000
DEFAULT_TOKEN_TOTAL_SUPPLY = 1_000_000_000_000_000


@dataclass(frozen=True)
class Config:
    fee_recipient: str
    withdraw_authority: str
    fee_basis_points: int = DEFAULT_FEE_BASIS_POINTS
    initial_virtual_sol_reserves: int = DEFAULT_INITIAL_VIRTUAL_SOL_RESERVES
    initial_virtual_token_reserves: int = DEFAULT_INITIAL_VIRTUAL_TOKEN_RESERVES
    initial_real_token_reserves: int = DEFAULT_INITIAL_REAL_TOKEN_RESERVES
    token_total_supply: int = DEFAULT_TOKEN_TOTAL_SUPPLY
    authority: str = ""

    def __post_init__(self) -> None:
        for name in ("fee_recipient", "withdraw_authority"):
            v = getattr(self, name)
            if not isinstance(v, str) or not v.strip():
                raise InvalidConfiguration(f"{name} must be a non-empty string")
        if not isinstance(self.authority, str):
            raise InvalidConfiguration("authority must be a string")
        validate_fee_bps(self.fee_basis_points)
        for name in (
            "initial_virtual_sol_reserves",
            "initial_virtual_token_reserves",
            "initial_real_token_reserves",
            "token_total_supply",
        ):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise InvalidConfiguration(f"{name} must be an int")
            if not (0 <= v <= U64_MAX):
                raise InvalidConfiguration(f"{name} must be a u64: {v}")


CONFIG_FIELD_NAMES: tuple[str, ...] = tuple(Config.__dataclass_fields__)


def config_to_dict(config: Config) -> dict[str, int | str]:
    return {name: getattr(config, name) for name in CONFIG_FIELD_NAMES}


def config_from_dict(d: Mapping[str, Any]) -> Config:
    """Build a Config from a mapping. Unknown keys are rejected."""
    unknown = sorted(set(d) - set(CONFIG_FIELD_NAMES))
    if unknown:
        raise InvalidConfiguration(f"unknown config keys: {', '.join(unknown)}")
    try:
        return Config(**dict(d))
    except TypeError as exc:
        raise InvalidConfiguration(str(exc)) from exc


def load_config(path: str | Path) -> Config:
    """
    Load a Config from a YAML file.

    The file must contain a single mapping; a top-level `bonding_curve:` key is
    also accepted so the section can live inside a larger deployment file.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidConfiguration: If the YAML is malformed or a value is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    try:
        obj = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"Invalid YAML syntax in {config_path}: {exc}") from exc

    if isinstance(obj, Mapping) and set(obj) == {"bonding_curve"}:
        obj = obj["bonding_curve"]
    if not isinstance(obj, Mapping):
        raise InvalidConfiguration("config YAML must be a mapping")
    return config_from_dict(obj)
