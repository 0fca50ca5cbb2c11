"""pegswap - off-chain Curve pool quotes and hybrid swap/mint routing."""

from pegswap.amm import CryptoSwapSnapshot, PoolEngine, StableSwapSnapshot, quote
from pegswap.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from pegswap.pools import PoolStateCache
from pegswap.routing import RouteSplit, find_peg_point, plan_route, split_amount

__version__ = "0.1.0"
__all__ = [
    "StableSwapSnapshot",
    "CryptoSwapSnapshot",
    "PoolEngine",
    "quote",
    "QuoteConfig",
    "DEFAULT_QUOTE_CONFIG",
    "PoolStateCache",
    "RouteSplit",
    "find_peg_point",
    "plan_route",
    "split_amount",
    "__version__",
]
