"""Property tests for the bonding-curve engine.

Uses Hypothesis to fuzz curve seeds and random buy/sell sequences and check
the economic properties the engine promises: no round-trip profit, quotes that
execute, sol conservation, and that tokens held can always be sold back.
Seeds are kept small enough that no intermediate overflows u64.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from bonding_curve.config import Config
from bonding_curve.core.curve import Action, ActionParams, CurveState, buy, create_curve, sell, step
from bonding_curve.core.curve.invariants import check_all
from bonding_curve.core.pricing import get_buy_price, get_buy_quote, get_sell_quote
from bonding_curve.kernels.python.fixed_point import U64_MAX


# ---------------------------------------------------------------------------
# Hypothesis strategies
# ---------------------------------------------------------------------------

@st.composite
def curves(draw) -> CurveState:
    vs = draw(st.integers(min_value=1, max_value=1_000_000_000_000))
    vt = draw(st.integers(min_value=2, max_value=1_000_000))
    rt = draw(st.integers(min_value=1, max_value=vt - 1))
    return create_curve(
        initial_virtual_sol=vs,
        initial_virtual_token=vt,
        initial_real_token=rt,
        token_total_supply=vt,
    )


def configs() -> st.SearchStrategy[Config]:
    return st.builds(
        Config,
        fee_recipient=st.just("fees"),
        withdraw_authority=st.just("authority"),
        fee_basis_points=st.integers(min_value=0, max_value=10_000),
    )


def ops() -> st.SearchStrategy[list[tuple[bool, int]]]:
    # (is_buy, fraction in thousandths of what is available)
    return st.lists(
        st.tuples(st.booleans(), st.integers(min_value=1, max_value=1000)),
        min_size=1,
        max_size=30,
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestRoundTrip:
    @given(curve=curves(), config=configs(), frac=st.integers(min_value=1, max_value=1000))
    @settings(max_examples=300, deadline=2000)
    def test_buy_then_sell_never_profits(self, curve: CurveState, config: Config, frac: int):
        t = max(1, curve.real_token_reserves * frac // 1000)
        bought = buy(curve, t, U64_MAX, config)
        if bought.state.complete:
            return
        sold = sell(bought.state, t, 0, config)
        assert sold.effect.sol_amount <= bought.effect.sol_amount
        assert sold.effect.received <= bought.effect.paid
        assert sold.state.k >= curve.k


class TestQuotes:
    @given(curve=curves(), config=configs(), frac=st.integers(min_value=1, max_value=1000))
    @settings(max_examples=300, deadline=2000)
    def test_quote_then_buy_executes_at_quote(self, curve: CurveState, config: Config, frac: int):
        t = max(1, curve.real_token_reserves * frac // 1000)
        q = get_buy_quote(curve, t, config)
        r = buy(curve, t, q.total, config)
        assert (r.effect.sol_amount, r.effect.fee, r.effect.paid) == (q.sol_amount, q.fee, q.total)

    @given(curve=curves(), frac=st.integers(min_value=1, max_value=999))
    @settings(max_examples=300, deadline=2000)
    def test_buy_price_monotonic_in_amount(self, curve: CurveState, frac: int):
        t = max(1, curve.real_token_reserves * frac // 1000)
        if t >= curve.real_token_reserves:
            return
        assert get_buy_price(curve, t) <= get_buy_price(curve, t + 1)

    @given(curve=curves(), config=configs(), t=st.integers(min_value=0, max_value=1_000_000))
    @settings(max_examples=200, deadline=2000)
    def test_sell_quote_is_pure(self, curve: CurveState, config: Config, t: int):
        before = curve
        first = get_sell_quote(curve, t, config)
        assert get_sell_quote(curve, t, config) == first
        assert curve == before


class TestSequences:
    @given(curve=curves(), config=configs(), seq=ops())
    @settings(max_examples=300, deadline=5000)
    def test_random_trades_conserve_sol(self, curve: CurveState, config: Config, seq):
        state = curve
        held = 0
        collected = 0
        for is_buy, frac in seq:
            if is_buy:
                if state.real_token_reserves == 0:
                    continue
                amount = max(1, state.real_token_reserves * frac // 1000)
                params = ActionParams(action=Action.BUY, token_amount=amount, max_sol_amount=U64_MAX)
            else:
                if held == 0:
                    continue
                amount = max(1, held * frac // 1000)
                params = ActionParams(action=Action.SELL, token_amount=amount)

            result = step(state, params, config)
            if state.complete:
                assert not result.accepted
                assert result.rejection == "curve_complete"
                continue

            # tokens held can always be sold back; buys within reserves always fill
            assert result.accepted, (result.rejection, result.detail)
            if is_buy:
                held += amount
                collected += result.effect.sol_amount
            else:
                held -= amount
                collected -= result.effect.sol_amount

            assert result.state.k >= state.k
            assert check_all(result.state) == []
            state = result.state
            assert state.real_sol_reserves == collected
            assert state.tokens_sold == held
