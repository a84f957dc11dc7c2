"""Exception types for the bonding-curve engine.

Every class carries a stable ``code`` which doubles as the rejection reason in
``StepResult``. ``step_or_raise()`` in ``core/curve/engine.py`` maps codes back to classes
for callers that prefer exceptions over ``StepResult`` inspection.
"""

from __future__ import annotations


class BondingCurveError(Exception):
    """Base class for every failure surfaced by the engine or the platform."""

    code = "error"


class CurveMathError(BondingCurveError, ArithmeticError):
    """Overflow, underflow or division by zero in fixed-width arithmetic."""

    code = "arithmetic"


class InsufficientLiquidity(BondingCurveError):
    """Requested token amount exceeds what the curve can supply."""

    code = "insufficient_liquidity"


class SlippageExceeded(BondingCurveError):
    """Execution price moved past the caller's bound. Safe to retry with a fresh quote."""

    code = "slippage_exceeded"


class CurveComplete(BondingCurveError):
    """Trade attempted on a curve that has already completed."""

    code = "curve_complete"


class CurveNotComplete(BondingCurveError):
    """Withdrawal attempted on a curve that is still active."""

    code = "curve_not_complete"


class InvalidConfiguration(BondingCurveError):
    code = "invalid_configuration"


class InvalidAmount(BondingCurveError):
    code = "invalid_amount"


class CurveInvariantError(BondingCurveError):
    """Raised when a post-state violates one or more invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class NotInitialized(BondingCurveError):
    code = "not_initialized"


class AlreadyInitialized(BondingCurveError):
    code = "already_initialized"


class InvalidWithdrawAuthority(BondingCurveError):
    code = "invalid_withdraw_authority"


class InvalidFeeRecipient(BondingCurveError):
    code = "invalid_fee_recipient"


class InsufficientFunds(BondingCurveError):
    """The trader (or the curve's custody) cannot cover a custody transfer."""

    code = "insufficient_funds"


class UnknownCurve(BondingCurveError):
    code = "unknown_curve"


class CurveExists(BondingCurveError):
    code = "curve_exists"


ERRORS_BY_CODE: dict[str, type[BondingCurveError]] = {
    cls.code: cls
    for cls in (
        CurveMathError,
        InsufficientLiquidity,
        SlippageExceeded,
        CurveComplete,
        CurveNotComplete,
        InvalidConfiguration,
        InvalidAmount,
        CurveInvariantError,
        NotInitialized,
        AlreadyInitialized,
        InvalidWithdrawAuthority,
        InvalidFeeRecipient,
        InsufficientFunds,
        UnknownCurve,
        CurveExists,
    )
}
