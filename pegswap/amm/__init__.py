"""Pricing engines for Curve StableSwap and CryptoSwap pools."""

from pegswap.amm.base import QuoteEngine, SwapQuote, validate_indices
from pegswap.amm.cryptoswap import CryptoSwapAMM, CryptoSwapSnapshot, cryptoswap_amm
from pegswap.amm.dispatch import AnySnapshot, PoolEngine, pool_engine, quote
from pegswap.amm.errors import (
    CurveMathError,
    GetYDidNotConverge,
    InsufficientLiquidityError,
    InvariantDidNotConverge,
    SnapshotValidationError,
    UnsafeValueError,
    ZeroBalanceError,
)
from pegswap.amm.stableswap import StableSwapAMM, StableSwapSnapshot, stableswap_amm

__all__ = [
    # Base
    "QuoteEngine",
    "SwapQuote",
    "validate_indices",
    # StableSwap
    "StableSwapAMM",
    "StableSwapSnapshot",
    "stableswap_amm",
    # CryptoSwap
    "CryptoSwapAMM",
    "CryptoSwapSnapshot",
    "cryptoswap_amm",
    # Dispatch
    "AnySnapshot",
    "PoolEngine",
    "pool_engine",
    "quote",
    # Errors
    "CurveMathError",
    "ZeroBalanceError",
    "InvariantDidNotConverge",
    "GetYDidNotConverge",
    "UnsafeValueError",
    "InsufficientLiquidityError",
    "SnapshotValidationError",
]
