"""Pool state: snapshot cache and eth_call codec."""

from pegswap.pools.cache import CacheEntry, PoolStateCache
from pegswap.pools.parsing import (
    BatchCall,
    EthCall,
    cryptoswap_calls,
    decode_uint256,
    encode_get_dy,
    fetch_cryptoswap_snapshot,
    fetch_stableswap_snapshot,
    parse_cryptoswap_results,
    parse_stableswap_results,
    stableswap_calls,
)

__all__ = [
    # Cache
    "CacheEntry",
    "PoolStateCache",
    # Codec
    "EthCall",
    "BatchCall",
    "stableswap_calls",
    "cryptoswap_calls",
    "decode_uint256",
    "parse_stableswap_results",
    "parse_cryptoswap_results",
    "encode_get_dy",
    "fetch_stableswap_snapshot",
    "fetch_cryptoswap_snapshot",
]
