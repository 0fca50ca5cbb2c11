"""Hybrid swap/mint route optimizer.

An amount of coin i can become coin j two ways: swap it through the pool,
or mint j from i at a fixed 1:1 rate. Swapping is better only while the
pool pays a bonus, i.e. up to the peg point; everything beyond is minted.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from pegswap.amm.base import QuoteEngine
from pegswap.amm.dispatch import AnySnapshot, pool_engine
from pegswap.amm.errors import CurveMathError, SnapshotValidationError
from pegswap.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from pegswap.routing.peg_point import find_peg_point, verify_peg_point
from pegswap.routing.types import RouteQuote, RouteSplit
from pegswap.safe_int import SafeIntError
from pegswap.slippage import apply_conservative_buffer

logger = structlog.get_logger()

# On-chain check of the off-chain peg point: returns get_dy at the given
# input, or None when the call could not be made
PegVerifier = Callable[[int], int | None]


def split_amount(total: int, peg_point: int) -> RouteSplit:
    """Split total between the swap (up to the peg point) and the mint path.

    Args:
        total: Amount to convert
        peg_point: Largest input the pool converts at >= 1:1

    Returns:
        RouteSplit with swap_amount + mint_amount == total
    """
    if total < 0:
        raise ValueError(f"total must be non-negative, got {total}")
    if peg_point < 0:
        raise ValueError(f"peg_point must be non-negative, got {peg_point}")

    if total == 0:
        return RouteSplit(swap_amount=0, mint_amount=0)
    if peg_point == 0:
        return RouteSplit(swap_amount=0, mint_amount=total)
    if total <= peg_point:
        return RouteSplit(swap_amount=total, mint_amount=0)
    return RouteSplit(swap_amount=peg_point, mint_amount=total - peg_point)


def plan_route(
    total: int,
    snapshot: AnySnapshot | None,
    i: int,
    j: int,
    *,
    engine: QuoteEngine | None = None,
    tolerance: int | None = None,
    verifier: PegVerifier | None = None,
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
) -> RouteSplit:
    """Decide how much of total to swap and how much to mint.

    1. Nothing to convert: (0, 0)
    2. No pool state, or the engine fails on it: mint everything
    3. Swapping all of total already returns >= total: swap everything
    4. Otherwise swap up to the peg point and mint the rest

    Args:
        total: Amount of coin i to convert
        snapshot: Pool state, or None if it could not be fetched
        i: Input coin index
        j: Output coin index
        engine: Quote engine; defaults to dispatch by snapshot type
        tolerance: Peg-point search tolerance (default: config.peg_tolerance)
        verifier: Optional on-chain check of the peg point. A verifier that
            raises is treated like one that returns None
        config: Quote configuration

    Returns:
        RouteSplit with swap_amount + mint_amount == total
    """
    if total < 0:
        raise ValueError(f"total must be non-negative, got {total}")
    if total == 0:
        return split_amount(0, 0)

    if snapshot is None:
        logger.warning("route_degraded_mint_all", reason="pool_state_unavailable", total=total)
        return split_amount(total, 0)

    engine = engine or pool_engine
    tolerance = config.peg_tolerance if tolerance is None else tolerance

    try:
        dy_total = engine.quote(i, j, total, snapshot)
        if dy_total >= total:
            logger.debug("route_swap_all", pool=snapshot.address, total=total, amount_out=dy_total)
            return split_amount(total, total)
        peg_point = find_peg_point(snapshot, i, j, tolerance=tolerance, engine=engine)
    except (CurveMathError, SnapshotValidationError, SafeIntError) as e:
        logger.warning(
            "route_degraded_mint_all",
            reason="quote_failed",
            pool=snapshot.address,
            total=total,
            error=str(e),
        )
        return split_amount(total, 0)

    if peg_point > 0 and verifier is not None:
        verified_dy: int | None
        try:
            verified_dy = verifier(peg_point)
        except Exception as e:
            # A failed check counts as unverified
            logger.warning(
                "peg_point_verification_failed",
                pool=snapshot.address,
                peg_point=peg_point,
                error=str(e),
            )
            verified_dy = None
        peg_point = verify_peg_point(peg_point, verified_dy, config)

    split = split_amount(total, peg_point)
    logger.debug(
        "route_planned",
        pool=snapshot.address,
        total=total,
        peg_point=peg_point,
        swap_amount=split.swap_amount,
        mint_amount=split.mint_amount,
    )
    return split


def quote_route(
    split: RouteSplit,
    snapshot: AnySnapshot | None,
    i: int,
    j: int,
    *,
    engine: QuoteEngine | None = None,
    buffer_bps: int = 0,
) -> RouteQuote:
    """Expected output of executing split: swap output plus minted amount.

    When the total is itself an estimate (the output of a redeem, say),
    buffer_bps reduces the swap input before it is quoted so the quoted
    output stays achievable if the estimate comes in short.

    Raises:
        ValueError: If the split swaps but no snapshot is given, or
            buffer_bps is outside [0, 10000)
    """
    swap_input = apply_conservative_buffer(split.swap_amount, buffer_bps)
    if swap_input == 0:
        return RouteQuote(split=split, swap_output=0)
    if snapshot is None:
        raise ValueError("Cannot quote the swap leg without pool state")
    engine = engine or pool_engine
    return RouteQuote(split=split, swap_output=engine.quote(i, j, swap_input, snapshot))
