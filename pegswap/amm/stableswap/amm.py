"""StableSwap AMM.

Quotes swaps against a StableSwapSnapshot using the off-chain views math.
"""

from __future__ import annotations

import structlog

from pegswap.amm.base import SwapQuote

from .math import get_dy
from .pools import StableSwapSnapshot

logger = structlog.get_logger()


class StableSwapAMM:
    """StableSwap-NG pricing engine.

    Stateless: every call takes the snapshot it should price against.
    """

    def quote(self, i: int, j: int, dx: int, snapshot: StableSwapSnapshot) -> int:
        """Post-fee output of swapping dx of coin i into coin j.

        Raises:
            CurveMathError: If the invariant math fails on this snapshot
        """
        return get_dy(
            i,
            j,
            dx,
            snapshot.xp,
            snapshot.ann,
            snapshot.fee,
            snapshot.offpeg_fee_multiplier,
            rates=snapshot.rates,
        )

    def simulate_swap(self, i: int, j: int, dx: int, snapshot: StableSwapSnapshot) -> SwapQuote:
        """Quote a swap and wrap the result with its inputs."""
        amount_out = self.quote(i, j, dx, snapshot)
        logger.debug(
            "stableswap_quote",
            pool=snapshot.address,
            i=i,
            j=j,
            amount_in=dx,
            amount_out=amount_out,
        )
        return SwapQuote(i=i, j=j, amount_in=dx, amount_out=amount_out)


# Singleton instance
stableswap_amm = StableSwapAMM()
