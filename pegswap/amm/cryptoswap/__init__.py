"""CryptoSwap (Curve crypto v2) two-coin pool implementation."""

# AMM
from .amm import CryptoSwapAMM, cryptoswap_amm

# Math
from .math import (
    MAX_A,
    MAX_GAMMA,
    MIN_A,
    MIN_GAMMA,
    fee,
    geometric_mean,
    get_dy,
    newton_d,
    newton_y,
    validate_snapshot,
)

# Snapshot
from .pools import CryptoSwapSnapshot

__all__ = [
    # AMM
    "CryptoSwapAMM",
    "cryptoswap_amm",
    # Math
    "MIN_A",
    "MAX_A",
    "MIN_GAMMA",
    "MAX_GAMMA",
    "geometric_mean",
    "newton_d",
    "newton_y",
    "fee",
    "get_dy",
    "validate_snapshot",
    # Snapshot
    "CryptoSwapSnapshot",
]
