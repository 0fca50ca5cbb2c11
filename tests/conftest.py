"""Pytest configuration and fixtures."""

import pytest

from pegswap.amm.cryptoswap import CryptoSwapSnapshot
from pegswap.amm.stableswap import StableSwapSnapshot
from tests.helpers import CVG_BALANCES_ROUNDED, ONE, make_cryptoswap_snapshot, make_stableswap_snapshot


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Return a fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def cvg_pool() -> StableSwapSnapshot:
    """CVX1/cvgCVX pool with excess cvgCVX (swap bonus for 0 -> 1)."""
    return make_stableswap_snapshot()


@pytest.fixture
def cvg_pool_rounded() -> StableSwapSnapshot:
    """CVX1/cvgCVX pool at the rounded reference balances (peg point ~10.8k)."""
    return make_stableswap_snapshot(balances=CVG_BALANCES_ROUNDED)


@pytest.fixture
def balanced_stable_pool() -> StableSwapSnapshot:
    """Perfectly balanced StableSwap pool (no bonus in either direction)."""
    return make_stableswap_snapshot(balances=(50_000 * ONE, 50_000 * ONE))


@pytest.fixture
def balanced_crypto_pool() -> CryptoSwapSnapshot:
    """Balanced CryptoSwap pool at price_scale 1.0."""
    return make_cryptoswap_snapshot()


@pytest.fixture
def imbalanced_crypto_pool() -> CryptoSwapSnapshot:
    """CryptoSwap pool holding more coin 1 than coin 0 (swap bonus for 0 -> 1)."""
    return make_cryptoswap_snapshot(balances=(60_000 * ONE, 100_000 * ONE))
