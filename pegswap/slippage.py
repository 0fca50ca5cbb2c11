"""Slippage and amount-adjustment helpers used around quotes."""

from __future__ import annotations

BPS_DENOMINATOR = 10_000

# Accepted slippage range, in basis points (0.1% to 50%)
MIN_SLIPPAGE_BPS = 10
MAX_SLIPPAGE_BPS = 5_000
DEFAULT_SLIPPAGE_BPS = 100


class InvalidSlippageError(ValueError):
    """Slippage is not an integer number of basis points in the accepted range."""

    pass


def calculate_min_dy(expected_output: int, slippage_bps: int) -> int:
    """Minimum acceptable output for a swap expected to return expected_output.

    min_dy = expected * (10000 - slippage) // 10000
    """
    if expected_output < 0:
        raise ValueError(f"expected_output must be non-negative, got {expected_output}")
    if not 0 <= slippage_bps <= BPS_DENOMINATOR:
        raise InvalidSlippageError(f"Slippage must be 0-{BPS_DENOMINATOR} bps, got {slippage_bps}")
    return expected_output * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def validate_slippage(slippage: str | int | None, default: int = DEFAULT_SLIPPAGE_BPS) -> int:
    """Parse and range-check a slippage value in basis points.

    Args:
        slippage: Basis points as int or decimal string (100 = 1%); None uses default
        default: Value used when slippage is None

    Returns:
        Validated slippage in basis points

    Raises:
        InvalidSlippageError: If the value is not an integer in 10-5000
    """
    if slippage is None:
        slippage = default
    try:
        bps = int(slippage)
    except (TypeError, ValueError) as e:
        raise InvalidSlippageError(
            f"Invalid slippage: {slippage!r}. Must be {MIN_SLIPPAGE_BPS}-{MAX_SLIPPAGE_BPS} bps (0.1%-50%)"
        ) from e
    if not MIN_SLIPPAGE_BPS <= bps <= MAX_SLIPPAGE_BPS:
        raise InvalidSlippageError(
            f"Invalid slippage: {slippage!r}. Must be {MIN_SLIPPAGE_BPS}-{MAX_SLIPPAGE_BPS} bps (0.1%-50%)"
        )
    return bps


def apply_conservative_buffer(amount: int, buffer_bps: int = 100) -> int:
    """Reduce an estimated input amount by buffer_bps before quoting it.

    Used when the amount entering the pool is itself an estimate from an
    upstream leg, so the quoted min_dy stays achievable.
    """
    if not 0 <= buffer_bps < BPS_DENOMINATOR:
        raise ValueError(f"buffer_bps must be in [0, {BPS_DENOMINATOR}), got {buffer_bps}")
    return amount * (BPS_DENOMINATOR - buffer_bps) // BPS_DENOMINATOR

