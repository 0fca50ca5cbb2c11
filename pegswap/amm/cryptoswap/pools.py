"""CryptoSwap pool snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from pegswap.constants import N_COINS, PRECISION


@dataclass(frozen=True)
class CryptoSwapSnapshot:
    """State of a two-coin CryptoSwap (crypto v2) pool.

    Attributes:
        balances: Pool balances in coin units
        A: Amplification as returned by A(), already A * N**N * A_MULTIPLIER
        gamma: Curvature parameter
        D: Last stored invariant
        mid_fee: Fee at perfect balance (1e10 == 100%)
        out_fee: Fee far from balance
        fee_gamma: Fee interpolation parameter
        price_scale: Price of coin 1 in coin 0, 18 decimals
        precisions: Per-coin multipliers to 18 decimals (10**(18 - decimals))
        ramping: True while A/gamma are ramping; D is then recomputed from
            the balances before quoting
        address: Pool address, informational only
    """

    balances: tuple[int, int]
    A: int
    gamma: int
    D: int
    mid_fee: int
    out_fee: int
    fee_gamma: int
    price_scale: int
    precisions: tuple[int, int] = (1, 1)
    ramping: bool = False
    address: str | None = None

    def __post_init__(self) -> None:
        if len(self.balances) != N_COINS:
            raise ValueError(f"CryptoSwap snapshot needs {N_COINS} balances, got {len(self.balances)}")
        if len(self.precisions) != N_COINS or min(self.precisions) <= 0:
            raise ValueError(f"precisions must be {N_COINS} positive integers, got {self.precisions}")
        for name in ("A", "gamma", "D", "mid_fee", "out_fee", "fee_gamma", "price_scale"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if min(self.balances) < 0:
            raise ValueError(f"balances must be non-negative, got {self.balances}")

    @property
    def xp(self) -> list[int]:
        """Balances in the pool's internal units (coin 1 converted at price_scale)."""
        return [
            self.balances[0] * self.precisions[0],
            self.balances[1] * self.precisions[1] * self.price_scale // PRECISION,
        ]
