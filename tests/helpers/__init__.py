"""Test helpers module for shared test utilities.

- constants: Pool addresses and reference pool states
- factories: Snapshot factory functions
"""

from tests.helpers.constants import (
    CRYPTO_A,
    CRYPTO_FEE_GAMMA,
    CRYPTO_GAMMA,
    CRYPTO_MID_FEE,
    CRYPTO_OUT_FEE,
    CVG_BALANCES,
    CVG_BALANCES_ROUNDED,
    CVG_POOL,
    ONE,
    PX_POOL,
    STABLE_A,
    STABLE_FEE,
    STABLE_OFFPEG_MULTIPLIER,
)
from tests.helpers.factories import make_cryptoswap_snapshot, make_stableswap_snapshot, word

__all__ = [
    # Constants
    "ONE",
    "CVG_POOL",
    "PX_POOL",
    "STABLE_A",
    "STABLE_FEE",
    "STABLE_OFFPEG_MULTIPLIER",
    "CVG_BALANCES",
    "CVG_BALANCES_ROUNDED",
    "CRYPTO_A",
    "CRYPTO_GAMMA",
    "CRYPTO_MID_FEE",
    "CRYPTO_OUT_FEE",
    "CRYPTO_FEE_GAMMA",
    # Factories
    "make_stableswap_snapshot",
    "make_cryptoswap_snapshot",
    "word",
]
