"""Curve math error classes.

These mirror the conditions under which the pool contracts revert.
"""


class CurveMathError(Exception):
    """Base error for off-chain Curve math."""

    pass


class ZeroBalanceError(CurveMathError):
    """A pool balance is zero where the invariant needs it to be positive."""

    pass


class InvariantDidNotConverge(CurveMathError):
    """Newton iteration for the invariant D did not converge."""

    pass


class GetYDidNotConverge(CurveMathError):
    """Newton iteration for the counterpart balance y did not converge."""

    pass


class UnsafeValueError(CurveMathError):
    """A CryptoSwap parameter or balance ratio is outside the contract's safe range."""

    pass


class InsufficientLiquidityError(CurveMathError):
    """The swap would take the output balance to zero or below."""

    pass


class SnapshotValidationError(ValueError):
    """A fetched pool snapshot is missing critical parameters.

    Raised when A, gamma, D, price_scale or the balances come back zero or
    absent. This is a fetch failure: the caller should refetch rather than
    quote from the snapshot.
    """

    pass
