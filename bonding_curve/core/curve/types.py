"""Data types for the bonding-curve engine.

All types are frozen dataclasses (immutable); a trade produces a new
`CurveState` via `dataclasses.replace()`.

Units/conventions:
- `*_sol_*` amounts are integer base-currency units (lamports), u64.
- `*_token_*` amounts are integer token base units, u64.
- `*_bps` rates are basis points (1/10_000).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class Action(Enum):
    BUY = "buy"
    SELL = "sell"
    WITHDRAW = "withdraw"


@unique
class Event(Enum):
    BOUGHT = "Bought"
    SOLD = "Sold"
    WITHDRAWN = "Withdrawn"


@unique
class Asset(Enum):
    SOL = "sol"
    TOKEN = "token"


@unique
class Party(Enum):
    """Symbolic custody endpoints. The platform resolves them to ledger accounts."""
    TRADER = "trader"
    CURVE = "curve"
    FEE_RECIPIENT = "fee_recipient"
    WITHDRAW_AUTHORITY = "withdraw_authority"


@dataclass(frozen=True)
class CurveState:
    """Reserve record for one token curve."""

    # Phantom liquidity (never withdrawable)
    virtual_sol_reserves: int
    virtual_token_reserves: int

    # Custodied amounts
    real_sol_reserves: int
    real_token_reserves: int

    # Fixed at creation
    token_total_supply: int
    initial_real_token_reserves: int

    # Terminal flag: False -> True exactly once
    complete: bool = False

    @property
    def k(self) -> int:
        """The constant product (u128)."""
        return self.virtual_sol_reserves * self.virtual_token_reserves

    @property
    def tokens_sold(self) -> int:
        return self.initial_real_token_reserves - self.real_token_reserves


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0."""

    action: Action
    token_amount: int = 0         # buy / sell
    max_sol_amount: int = 0       # buy: caller's slippage bound (fee inclusive)
    min_sol_amount: int = 0       # sell: caller's slippage bound (after fee)


@dataclass(frozen=True)
class Transfer:
    """One custody movement implied by an accepted step."""

    asset: Asset
    source: Party
    destination: Party
    amount: int


@dataclass(frozen=True)
class Effect:
    """Observables of a successful step, computed from the (pre, post) pair."""

    event: Event
    token_amount: int = 0
    sol_amount: int = 0           # curve cost (buy), curve proceeds (sell), withdrawn sol (withdraw)
    fee: int = 0
    paid: int = 0                 # buy: sol_amount + fee
    received: int = 0             # sell: sol_amount - fee
    completed: bool = False       # the step moved the curve to Complete
    transfers: tuple[Transfer, ...] = ()


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: CurveState | None = None
    effect: Effect | None = None
    rejection: str | None = None
    detail: str | None = None
