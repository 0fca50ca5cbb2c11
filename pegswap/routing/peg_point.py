"""Peg-point search.

The peg point of a pool direction (i -> j) is the largest input for which
the swap still returns at least as much as it takes in, i.e. the rate stays
at or above 1:1. It is non-zero only when the output side holds more than
the input side.
"""

from __future__ import annotations

import structlog

from pegswap.amm.base import QuoteEngine, validate_indices
from pegswap.amm.dispatch import AnySnapshot, pool_engine
from pegswap.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from pegswap.constants import PEG_SEARCH_TOLERANCE
from pegswap.slippage import BPS_DENOMINATOR

logger = structlog.get_logger()


def find_peg_point(
    snapshot: AnySnapshot,
    i: int,
    j: int,
    *,
    tolerance: int = PEG_SEARCH_TOLERANCE,
    engine: QuoteEngine | None = None,
) -> int:
    """Largest input (to within tolerance) whose swap output is >= the input.

    Binary search over [0, balances[j] - balances[i]]. The search assumes the
    bonus shrinks monotonically with size, which holds for both invariants
    on pools near their peg; it is not re-checked here.

    Args:
        snapshot: Pool state (StableSwap or CryptoSwap)
        i: Input coin index
        j: Output coin index
        tolerance: Stop once high - low <= tolerance (default: 10 tokens)
        engine: Quote engine; defaults to dispatch by snapshot type

    Returns:
        The peg point, 0 if the direction has no bonus

    Raises:
        IndexError: If i or j is out of range
        ValueError: If i == j or tolerance is not positive
        CurveMathError: If the engine fails on the snapshot
    """
    validate_indices(i, j)
    if tolerance <= 0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")
    engine = engine or pool_engine

    balance_in = snapshot.balances[i]
    balance_out = snapshot.balances[j]
    if balance_out <= balance_in:
        return 0

    low = 0
    high = balance_out - balance_in
    steps = 0
    while high - low > tolerance:
        mid = (low + high) // 2
        dy = engine.quote(i, j, mid, snapshot)
        if dy >= mid:
            low = mid
        else:
            high = mid
        steps += 1

    logger.debug(
        "peg_point_found",
        pool=snapshot.address,
        i=i,
        j=j,
        peg_point=low,
        steps=steps,
    )
    return low


def verify_peg_point(
    peg_point: int,
    verified_dy: int | None,
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
) -> int:
    """Apply a safety margin to an off-chain peg point after an on-chain check.

    Args:
        peg_point: Peg point found off-chain
        verified_dy: On-chain get_dy at the peg point, or None if the check
            could not be made
        config: Margins to apply

    Returns:
        The peg point, cut by below_peg_margin_bps if the on-chain output was
        below it, or by unverified_margin_bps if there was no on-chain output
    """
    if peg_point == 0:
        return 0
    if verified_dy is None:
        margin = config.unverified_margin_bps
    elif verified_dy < peg_point:
        margin = config.below_peg_margin_bps
    else:
        return peg_point

    adjusted = peg_point * (BPS_DENOMINATOR - margin) // BPS_DENOMINATOR
    logger.debug(
        "peg_point_margin_applied",
        peg_point=peg_point,
        verified_dy=verified_dy,
        adjusted=adjusted,
    )
    return adjusted
