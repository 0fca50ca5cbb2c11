"""Engine selection by snapshot type.

Callers that only need a quote (peg-point search, route optimizer, API)
hold one PoolEngine and pass it either kind of snapshot.
"""

from __future__ import annotations

from functools import singledispatchmethod

from pegswap.amm.base import SwapQuote
from pegswap.amm.cryptoswap import CryptoSwapAMM, CryptoSwapSnapshot
from pegswap.amm.stableswap import StableSwapAMM, StableSwapSnapshot

# Type alias for any supported pool snapshot
AnySnapshot = StableSwapSnapshot | CryptoSwapSnapshot


class PoolEngine:
    """Quote engine that delegates to the StableSwap or CryptoSwap math.

    Uses singledispatch on the snapshot's concrete type, so adding a pool
    family means registering one more method.
    """

    def __init__(
        self,
        stableswap_amm: StableSwapAMM | None = None,
        cryptoswap_amm: CryptoSwapAMM | None = None,
    ) -> None:
        self.stableswap_amm = stableswap_amm or StableSwapAMM()
        self.cryptoswap_amm = cryptoswap_amm or CryptoSwapAMM()

    def quote(self, i: int, j: int, dx: int, snapshot: AnySnapshot) -> int:
        """Post-fee output of swapping dx of coin i into coin j.

        Raises:
            TypeError: If the snapshot type has no registered engine
        """
        return self._quote(snapshot, i, j, dx)

    def simulate_swap(self, i: int, j: int, dx: int, snapshot: AnySnapshot) -> SwapQuote:
        return SwapQuote(i=i, j=j, amount_in=dx, amount_out=self.quote(i, j, dx, snapshot))

    @singledispatchmethod
    def _quote(self, snapshot: AnySnapshot, i: int, j: int, dx: int) -> int:
        """Base dispatch method - raises for unknown snapshot types."""
        raise TypeError(f"No pricing engine for snapshot type {type(snapshot).__name__}")

    @_quote.register(StableSwapSnapshot)
    def _quote_stableswap(self, snapshot: StableSwapSnapshot, i: int, j: int, dx: int) -> int:
        return self.stableswap_amm.quote(i, j, dx, snapshot)

    @_quote.register(CryptoSwapSnapshot)
    def _quote_cryptoswap(self, snapshot: CryptoSwapSnapshot, i: int, j: int, dx: int) -> int:
        return self.cryptoswap_amm.quote(i, j, dx, snapshot)


# Singleton instance
pool_engine = PoolEngine()


def quote(i: int, j: int, dx: int, snapshot: AnySnapshot) -> int:
    """Quote a swap with the engine matching the snapshot type."""
    return pool_engine.quote(i, j, dx, snapshot)
