"""
Token-launch platform shell around the bonding-curve core.

This is an imperative-shell wrapper around the functional core:
- holds the administrator config (set exactly once),
- stores one `CurveState` per `CurveHandle` (the token's mint id),
- turns engine effects into custody movements on a `BalanceTable`,
- serializes quote-then-execute per curve with one lock per handle.

The core decides; the shell only commits. A step whose custody batch cannot be
applied (e.g. the trader is short of sol) leaves both the ledger and the curve
untouched.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from ..config import Config
from ..core.curve import CurveState, Effect, StepResult, create_curve
from ..core.curve import buy as engine_buy
from ..core.curve import sell as engine_sell
from ..core.curve import withdraw as engine_withdraw
from ..core.curve.types import Asset, Party
from ..core.pricing import Quote, get_buy_quote, get_sell_quote
from ..errors import (
    AlreadyInitialized,
    CurveExists,
    InvalidFeeRecipient,
    InvalidWithdrawAuthority,
    NotInitialized,
    UnknownCurve,
)
from ..state.balances import NATIVE_ASSET, AccountId, BalanceTable, LedgerTransfer


logger = logging.getLogger(__name__)

CurveHandle = str


def curve_account(handle: CurveHandle) -> AccountId:
    """Ledger account that custodies a curve's sol and unsold tokens."""
    return f"curve:{handle}"


class Platform:
    def __init__(self, config: Optional[Config] = None):
        self._config: Optional[Config] = None
        self._ledger = BalanceTable()
        self._curves: Dict[CurveHandle, CurveState] = {}
        self._creators: Dict[CurveHandle, AccountId] = {}
        self._locks: Dict[CurveHandle, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        if config is not None:
            self.initialize(config)

    # -- Config ----------------------------------------------------------------

    def initialize(self, config: Config) -> None:
        """Install the administrator config. Allowed exactly once."""
        with self._registry_lock:
            if self._config is not None:
                raise AlreadyInitialized("platform config is already initialized")
            self._config = config
        logger.info(
            "initialized config: fee_recipient=%s withdraw_authority=%s fee_bps=%d",
            config.fee_recipient, config.withdraw_authority, config.fee_basis_points,
        )

    @property
    def initialized(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> Config:
        if self._config is None:
            raise NotInitialized("platform config has not been initialized")
        return self._config

    @property
    def ledger(self) -> BalanceTable:
        return self._ledger

    # -- Accounts ---------------------------------------------------------------

    def deposit(self, account: AccountId, amount: int, asset: str = NATIVE_ASSET) -> None:
        """Fund an account (stands in for an external airdrop / transfer)."""
        with self._registry_lock:
            self._ledger.credit(account, asset, amount)

    def balance(self, account: AccountId, asset: str = NATIVE_ASSET) -> int:
        return self._ledger.get(account, asset)

    # -- Curves -----------------------------------------------------------------

    def create_curve(
        self,
        handle: CurveHandle,
        creator: AccountId,
        *,
        initial_virtual_sol: Optional[int] = None,
        initial_virtual_token: Optional[int] = None,
        initial_real_token: Optional[int] = None,
        token_total_supply: Optional[int] = None,
    ) -> CurveState:
        """
        Seed a curve and mint its whole supply into curve custody.

        Raises:
            NotInitialized: before `initialize()`
            CurveExists: if `handle` already has a curve
            InvalidConfiguration: if the seed values are rejected
        """
        config = self.config
        if not isinstance(handle, str) or not handle or handle == NATIVE_ASSET:
            raise UnknownCurve(f"invalid curve handle: {handle!r}")

        with self._registry_lock:
            if handle in self._curves:
                raise CurveExists(f"curve already exists: {handle}")
            curve = create_curve(
                config,
                initial_virtual_sol=initial_virtual_sol,
                initial_virtual_token=initial_virtual_token,
                initial_real_token=initial_real_token,
                token_total_supply=token_total_supply,
            )
            self._ledger.credit(curve_account(handle), handle, curve.token_total_supply)
            self._curves[handle] = curve
            self._creators[handle] = creator
            self._locks[handle] = threading.Lock()

        logger.info(
            "created curve %s by %s: vs=%d vt=%d rt=%d supply=%d",
            handle, creator, curve.virtual_sol_reserves, curve.virtual_token_reserves,
            curve.real_token_reserves, curve.token_total_supply,
        )
        return curve

    def curve(self, handle: CurveHandle) -> CurveState:
        try:
            return self._curves[handle]
        except KeyError:
            raise UnknownCurve(f"no curve for handle: {handle}") from None

    def creator(self, handle: CurveHandle) -> AccountId:
        self.curve(handle)
        return self._creators[handle]

    def handles(self) -> list[CurveHandle]:
        return sorted(self._curves)

    def _lock_for(self, handle: CurveHandle) -> threading.Lock:
        self.curve(handle)
        return self._locks[handle]

    # -- Quotes -----------------------------------------------------------------

    def quote_buy(self, handle: CurveHandle, token_amount: int) -> Quote:
        return get_buy_quote(self.curve(handle), token_amount, self.config)

    def quote_sell(self, handle: CurveHandle, token_amount: int) -> Quote:
        return get_sell_quote(self.curve(handle), token_amount, self.config)

    # -- Trades -----------------------------------------------------------------

    def _check_fee_recipient(self, fee_recipient: Optional[AccountId]) -> None:
        if fee_recipient is not None and fee_recipient != self.config.fee_recipient:
            raise InvalidFeeRecipient(f"fee recipient mismatch: {fee_recipient}")

    def _resolve(self, handle: CurveHandle, trader: Optional[AccountId], effect: Effect) -> list[LedgerTransfer]:
        config = self.config
        parties: Dict[Party, Optional[AccountId]] = {
            Party.TRADER: trader,
            Party.CURVE: curve_account(handle),
            Party.FEE_RECIPIENT: config.fee_recipient,
            Party.WITHDRAW_AUTHORITY: config.withdraw_authority,
        }
        assets = {Asset.SOL: NATIVE_ASSET, Asset.TOKEN: handle}
        out: list[LedgerTransfer] = []
        for t in effect.transfers:
            source = parties[t.source]
            destination = parties[t.destination]
            if source is None or destination is None:
                raise UnknownCurve(f"unresolved custody party in transfer: {t}")
            if t.amount > 0:
                out.append((assets[t.asset], source, destination, t.amount))
        return out

    def _commit(self, handle: CurveHandle, result: StepResult, transfers: list[LedgerTransfer]) -> None:
        # Ledger first: if custody cannot move, the curve keeps its pre-state.
        with self._registry_lock:
            self._ledger.apply_transfers(transfers)
            assert result.state is not None
            self._curves[handle] = result.state

    def buy(
        self,
        handle: CurveHandle,
        trader: AccountId,
        token_amount: int,
        max_sol_amount: int,
        *,
        fee_recipient: Optional[AccountId] = None,
    ) -> StepResult:
        """
        Buy tokens from a curve.

        Raises:
            CurveComplete, InsufficientLiquidity, SlippageExceeded, CurveMathError:
                from the engine
            InvalidFeeRecipient: `fee_recipient` given and not the configured one
            InsufficientFunds: trader cannot pay `cost + fee`
        """
        self._check_fee_recipient(fee_recipient)
        with self._lock_for(handle):
            result = engine_buy(self.curve(handle), token_amount, max_sol_amount, self.config)
            assert result.effect is not None
            self._commit(handle, result, self._resolve(handle, trader, result.effect))

        logger.info(
            "buy %s: trader=%s tokens=%d paid=%d fee=%d",
            handle, trader, token_amount, result.effect.paid, result.effect.fee,
        )
        return result

    def sell(
        self,
        handle: CurveHandle,
        trader: AccountId,
        token_amount: int,
        min_sol_amount: int,
        *,
        fee_recipient: Optional[AccountId] = None,
    ) -> StepResult:
        """Sell tokens back to a curve. The trader must hold `token_amount` tokens."""
        self._check_fee_recipient(fee_recipient)
        with self._lock_for(handle):
            result = engine_sell(self.curve(handle), token_amount, min_sol_amount, self.config)
            assert result.effect is not None
            self._commit(handle, result, self._resolve(handle, trader, result.effect))

        logger.info(
            "sell %s: trader=%s tokens=%d received=%d fee=%d",
            handle, trader, token_amount, result.effect.received, result.effect.fee,
        )
        return result

    def withdraw(self, handle: CurveHandle, caller: AccountId) -> int:
        """
        Move a completed curve's collected sol, and any tokens left in its
        custody, to the withdraw authority. Returns the sol amount withdrawn.

        Raises:
            InvalidWithdrawAuthority: `caller` is not the configured withdraw authority
            CurveNotComplete: the curve is still active (nothing moves)
        """
        config = self.config
        if caller != config.withdraw_authority:
            raise InvalidWithdrawAuthority(f"{caller} is not the withdraw authority")

        with self._lock_for(handle):
            result = engine_withdraw(self.curve(handle), config)
            assert result.effect is not None
            transfers = self._resolve(handle, None, result.effect)
            leftover_tokens = self._ledger.get(curve_account(handle), handle)
            if leftover_tokens > 0:
                transfers.append((handle, curve_account(handle), config.withdraw_authority, leftover_tokens))
            self._commit(handle, result, transfers)

        logger.info(
            "withdrew %s: sol=%d tokens=%d to %s",
            handle, result.effect.sol_amount, leftover_tokens, config.withdraw_authority,
        )
        return result.effect.sol_amount
