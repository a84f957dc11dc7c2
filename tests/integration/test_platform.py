"""Tests for bonding_curve/integration/platform.py - the custody shell."""

from __future__ import annotations

import threading

import pytest

from bonding_curve.config import Config
from bonding_curve.errors import (
    AlreadyInitialized,
    CurveComplete,
    CurveExists,
    CurveNotComplete,
    InsufficientFunds,
    InvalidFeeRecipient,
    InvalidWithdrawAuthority,
    NotInitialized,
    SlippageExceeded,
    UnknownCurve,
)
from bonding_curve.integration import Platform, curve_account
from bonding_curve.kernels.python.fixed_point import U64_MAX
from bonding_curve.state import NATIVE_ASSET

MINT = "MINT"


def _config() -> Config:
    return Config(fee_recipient="fees", withdraw_authority="authority", fee_basis_points=1000)


def _platform() -> Platform:
    p = Platform(_config())
    p.create_curve(
        MINT,
        creator="creator",
        initial_virtual_sol=100,
        initial_virtual_token=1000,
        initial_real_token=500,
        token_total_supply=1000,
    )
    return p


class TestInitialization:
    def test_uninitialized_platform_refuses_work(self):
        p = Platform()
        assert not p.initialized
        with pytest.raises(NotInitialized):
            p.config
        with pytest.raises(NotInitialized):
            p.create_curve(MINT, creator="creator")

    def test_initialize_once(self):
        p = Platform()
        p.initialize(_config())
        assert p.initialized
        with pytest.raises(AlreadyInitialized):
            p.initialize(_config())


class TestCreateCurve:
    def test_supply_minted_into_curve_custody(self):
        p = _platform()
        assert p.balance(curve_account(MINT), MINT) == 1000
        assert p.balance(curve_account(MINT)) == 0
        assert p.creator(MINT) == "creator"
        assert p.handles() == [MINT]

    def test_duplicate_handle(self):
        p = _platform()
        with pytest.raises(CurveExists):
            p.create_curve(MINT, creator="someone-else")

    @pytest.mark.parametrize("handle", ["", NATIVE_ASSET])
    def test_invalid_handle(self, handle):
        with pytest.raises(UnknownCurve):
            _platform().create_curve(handle, creator="creator")

    def test_config_defaults(self):
        p = Platform(_config())
        curve = p.create_curve("DEFAULT", creator="creator")
        assert curve.virtual_sol_reserves == 30_000_000_000
        assert p.balance(curve_account("DEFAULT"), "DEFAULT") == 1_000_000_000_000_000

    def test_unknown_curve(self):
        p = _platform()
        with pytest.raises(UnknownCurve):
            p.curve("NOPE")
        with pytest.raises(UnknownCurve):
            p.buy("NOPE", "trader", 1, U64_MAX)


class TestTrading:
    def test_buy_moves_custody(self):
        p = _platform()
        p.deposit("trader", 100)
        r = p.buy(MINT, "trader", 100, 13)
        assert r.effect.paid == 13
        assert p.balance("trader") == 87
        assert p.balance("trader", MINT) == 100
        assert p.balance(curve_account(MINT)) == 12
        assert p.balance(curve_account(MINT), MINT) == 900
        assert p.balance("fees") == 1
        assert p.curve(MINT).real_sol_reserves == p.balance(curve_account(MINT))

    def test_sell_moves_custody(self):
        p = _platform()
        p.deposit("trader", 100)
        p.buy(MINT, "trader", 100, 13)
        r = p.sell(MINT, "trader", 100, 10)
        assert r.effect.received == 10
        assert p.balance("trader") == 97
        assert p.balance("trader", MINT) == 0
        assert p.balance(curve_account(MINT)) == 1
        assert p.balance(curve_account(MINT), MINT) == 1000
        assert p.balance("fees") == 2
        assert p.curve(MINT).real_sol_reserves == 1

    def test_sol_is_conserved(self):
        p = _platform()
        p.deposit("alice", 1_000)
        p.deposit("bob", 1_000)
        p.buy(MINT, "alice", 120, U64_MAX)
        p.buy(MINT, "bob", 75, U64_MAX)
        p.sell(MINT, "alice", 60, 0)
        p.buy(MINT, "alice", 10, U64_MAX)
        p.sell(MINT, "bob", 75, 0)
        assert p.ledger.total(NATIVE_ASSET) == 2_000
        assert p.ledger.total(MINT) == 1000
        assert p.curve(MINT).real_sol_reserves == p.balance(curve_account(MINT))

    def test_quotes_match_execution(self):
        p = _platform()
        q = p.quote_buy(MINT, 100)
        p.deposit("trader", q.total)
        p.buy(MINT, "trader", 100, q.total)
        assert p.balance("trader") == 0
        sq = p.quote_sell(MINT, 100)
        p.sell(MINT, "trader", 100, sq.total)
        assert p.balance("trader") == sq.total

    def test_short_trader_leaves_everything_untouched(self):
        p = _platform()
        p.deposit("trader", 12)
        before_curve = p.curve(MINT)
        before_ledger = p.ledger.snapshot()
        with pytest.raises(InsufficientFunds):
            p.buy(MINT, "trader", 100, 13)
        assert p.curve(MINT) == before_curve
        assert p.ledger.snapshot() == before_ledger

    def test_selling_tokens_not_held(self):
        p = _platform()
        p.deposit("alice", 100)
        p.buy(MINT, "alice", 100, 13)
        before_curve = p.curve(MINT)
        with pytest.raises(InsufficientFunds):
            p.sell(MINT, "mallory", 10, 0)
        assert p.curve(MINT) == before_curve

    def test_slippage_moves_nothing(self):
        p = _platform()
        p.deposit("trader", 100)
        with pytest.raises(SlippageExceeded):
            p.buy(MINT, "trader", 100, 12)
        assert p.balance("trader") == 100

    def test_fee_recipient_must_match(self):
        p = _platform()
        p.deposit("trader", 100)
        with pytest.raises(InvalidFeeRecipient):
            p.buy(MINT, "trader", 100, 13, fee_recipient="mallory")
        r = p.buy(MINT, "trader", 100, 13, fee_recipient="fees")
        assert r.accepted

    def test_concurrent_buys_serialize(self):
        p = _platform()
        traders = [f"t{i}" for i in range(10)]
        for t in traders:
            p.deposit(t, 1_000)
        errors: list[BaseException] = []

        def run(trader: str) -> None:
            try:
                p.buy(MINT, trader, 10, U64_MAX)
            except BaseException as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=run, args=(t,)) for t in traders]
        for th in threads:
            th.start()
        for th in threads:
            th.join()

        assert errors == []
        curve = p.curve(MINT)
        assert curve.real_token_reserves == 400
        assert curve.real_sol_reserves == p.balance(curve_account(MINT))
        assert sum(p.balance(t, MINT) for t in traders) == 100
        assert p.ledger.total(NATIVE_ASSET) == 10_000


class TestWithdraw:
    def _completed(self) -> Platform:
        p = _platform()
        p.deposit("whale", 110)
        r = p.buy(MINT, "whale", 500, 110)
        assert r.effect.completed
        return p

    def test_withdraw_before_completion(self):
        p = _platform()
        with pytest.raises(CurveNotComplete):
            p.withdraw(MINT, "authority")

    def test_only_withdraw_authority(self):
        p = self._completed()
        with pytest.raises(InvalidWithdrawAuthority):
            p.withdraw(MINT, "creator")

    def test_withdraw_sweeps_custody(self):
        p = self._completed()
        assert p.withdraw(MINT, "authority") == 100
        assert p.balance("authority") == 100
        assert p.balance("authority", MINT) == 500
        assert p.balance(curve_account(MINT)) == 0
        assert p.balance(curve_account(MINT), MINT) == 0
        assert p.curve(MINT).real_sol_reserves == 0
        assert p.curve(MINT).complete

    def test_trading_stops_after_completion(self):
        p = self._completed()
        with pytest.raises(CurveComplete):
            p.sell(MINT, "whale", 1, 0)
        p.deposit("late", 1_000)
        with pytest.raises(CurveComplete):
            p.buy(MINT, "late", 1, U64_MAX)
