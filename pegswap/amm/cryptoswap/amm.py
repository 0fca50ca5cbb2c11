"""CryptoSwap AMM."""

from __future__ import annotations

import structlog

from pegswap.amm.base import SwapQuote

from .math import get_dy
from .pools import CryptoSwapSnapshot

logger = structlog.get_logger()


class CryptoSwapAMM:
    """Crypto v2 pricing engine. Stateless, like StableSwapAMM."""

    def quote(self, i: int, j: int, dx: int, snapshot: CryptoSwapSnapshot) -> int:
        """Post-fee output of swapping dx of coin i into coin j.

        Raises:
            SnapshotValidationError: If the snapshot is missing critical parameters
            CurveMathError: If the invariant math fails on this snapshot
        """
        return get_dy(i, j, dx, snapshot)

    def simulate_swap(self, i: int, j: int, dx: int, snapshot: CryptoSwapSnapshot) -> SwapQuote:
        amount_out = self.quote(i, j, dx, snapshot)
        logger.debug(
            "cryptoswap_quote",
            pool=snapshot.address,
            i=i,
            j=j,
            amount_in=dx,
            amount_out=amount_out,
        )
        return SwapQuote(i=i, j=j, amount_in=dx, amount_out=amount_out)


# Singleton instance
cryptoswap_amm = CryptoSwapAMM()
