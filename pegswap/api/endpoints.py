"""API endpoints for the quote service."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from fastapi import APIRouter, Depends, HTTPException

from pegswap.amm.dispatch import AnySnapshot, PoolEngine, pool_engine
from pegswap.config import QuoteConfig
from pegswap.models.quote import (
    PegPointRequest,
    PegPointResponse,
    QuoteRequest,
    QuoteResponse,
    RouteRequest,
    RouteResponse,
    SnapshotModel,
)
from pegswap.pools.cache import PoolStateCache
from pegswap.routing import find_peg_point, plan_route, quote_route
from pegswap.slippage import calculate_min_dy, validate_slippage

logger = structlog.get_logger()

router = APIRouter()

_config: QuoteConfig | None = None
_cache: PoolStateCache | None = None


def get_config() -> QuoteConfig:
    """Dependency provider for the quote configuration (read once from the environment)."""
    global _config
    if _config is None:
        _config = QuoteConfig.from_env()
    return _config


def get_cache(config: QuoteConfig = Depends(get_config)) -> PoolStateCache:
    """Dependency provider for the pool state cache.

    Override this in tests to inject a cache with a fake clock:
        app.dependency_overrides[get_cache] = lambda: cache
    """
    global _cache
    if _cache is None:
        _cache = PoolStateCache(ttl=config.cache_ttl)
    return _cache


def get_engine() -> PoolEngine:
    """Dependency provider for the quote engine."""
    return pool_engine


# Reads a pool's current state by address
PoolFetcher = Callable[[str], AnySnapshot]


def get_fetcher() -> PoolFetcher | None:
    """Dependency provider for the pool state fetcher.

    The service ships no RPC transport. A deployment overrides this with a
    callable built on fetch_stableswap_snapshot or fetch_cryptoswap_snapshot;
    without one, /route only uses posted pool state.
    """
    return None


def _to_snapshot(model: SnapshotModel) -> AnySnapshot:
    try:
        return model.to_snapshot()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _fetch_snapshot(pool: str, cache: PoolStateCache, fetcher: PoolFetcher) -> AnySnapshot | None:
    """Cached or freshly fetched state for pool, or None if the fetch failed."""
    try:
        return cache.get_or_fetch(pool, lambda: fetcher(pool))
    except Exception as e:
        logger.warning("pool_fetch_failed", pool=pool, error=str(e))
        return None


@router.post("/quote")
async def quote(
    request: QuoteRequest,
    config: QuoteConfig = Depends(get_config),
    engine: PoolEngine = Depends(get_engine),
) -> QuoteResponse:
    """Quote a single swap against the posted pool state.

    Error Handling:
        - Invalid request schema or slippage: 422
        - Engine failure on the snapshot: 422 with the error message
    """
    slippage_bps = validate_slippage(request.slippage_bps, default=config.default_slippage_bps)
    snapshot = _to_snapshot(request.snapshot)
    amount_out = engine.quote(request.i, request.j, request.amount_in, snapshot)

    logger.info(
        "quote_served",
        kind=request.snapshot.kind,
        pool=snapshot.address,
        i=request.i,
        j=request.j,
        amount_in=request.amount_in,
        amount_out=amount_out,
    )
    return QuoteResponse(
        amount_in=request.amount_in,
        amount_out=amount_out,
        min_amount_out=calculate_min_dy(amount_out, slippage_bps),
        slippage_bps=slippage_bps,
    )


@router.post("/peg-point")
async def peg_point(
    request: PegPointRequest,
    config: QuoteConfig = Depends(get_config),
    engine: PoolEngine = Depends(get_engine),
) -> PegPointResponse:
    """Largest input the pool converts at >= 1:1 in direction i -> j."""
    snapshot = _to_snapshot(request.snapshot)
    tolerance = request.tolerance or config.peg_tolerance
    result = find_peg_point(snapshot, request.i, request.j, tolerance=tolerance, engine=engine)

    logger.info("peg_point_served", kind=request.snapshot.kind, pool=snapshot.address, peg_point=result)
    return PegPointResponse(peg_point=result)


@router.post("/route")
async def route(
    request: RouteRequest,
    config: QuoteConfig = Depends(get_config),
    cache: PoolStateCache = Depends(get_cache),
    engine: PoolEngine = Depends(get_engine),
    fetcher: PoolFetcher | None = Depends(get_fetcher),
) -> RouteResponse:
    """Split an amount between swapping and minting.

    Pool state comes from the request, else from the cache or the fetcher
    for request.pool. Without either the route degrades to minting
    everything. With request.estimated the swap leg is quoted on a total
    reduced by the conservative buffer.
    """
    snapshot: AnySnapshot | None
    if request.snapshot is not None:
        snapshot = _to_snapshot(request.snapshot)
    elif request.pool is not None and fetcher is not None:
        snapshot = _fetch_snapshot(request.pool, cache, fetcher)
    else:
        snapshot = None

    split = plan_route(request.total, snapshot, request.i, request.j, engine=engine, config=config)
    buffer_bps = config.conservative_buffer_bps if request.estimated else 0
    result = quote_route(split, snapshot, request.i, request.j, engine=engine, buffer_bps=buffer_bps)

    logger.info(
        "route_served",
        pool=snapshot.address if snapshot is not None else request.pool,
        total=request.total,
        swap_amount=split.swap_amount,
        mint_amount=split.mint_amount,
        expected_output=result.expected_output,
    )
    return RouteResponse(
        swap_amount=split.swap_amount,
        mint_amount=split.mint_amount,
        swap_output=result.swap_output,
        expected_output=result.expected_output,
        degraded=snapshot is None,
    )
