"""StableSwap (Curve StableSwap-NG) pool implementation.

Two-coin pools with a dynamic off-peg fee, priced bit-for-bit like the
on-chain views contract.
"""

# AMM
from .amm import StableSwapAMM, stableswap_amm

# Math
from .math import dynamic_fee, get_d, get_dy, get_y

# Snapshot
from .pools import StableSwapSnapshot, compute_ann

__all__ = [
    # AMM
    "StableSwapAMM",
    "stableswap_amm",
    # Math
    "get_d",
    "get_y",
    "dynamic_fee",
    "get_dy",
    # Snapshot
    "StableSwapSnapshot",
    "compute_ann",
]
