"""StableSwap pool snapshot.

Immutable view of a StableSwap-NG pool's state at one block.
"""

from __future__ import annotations

from dataclasses import dataclass

from pegswap.constants import A_PRECISION, N_COINS, PRECISION


def compute_ann(a: int, is_a_precise: bool = False) -> int:
    """Convert a StableSwap A reading to Ann = A * A_PRECISION * N_COINS.

    Pools expose A() (raw) and A_precise() (already times A_PRECISION).
    """
    if is_a_precise:
        return a * N_COINS
    return a * A_PRECISION * N_COINS


@dataclass(frozen=True)
class StableSwapSnapshot:
    """State of a two-coin StableSwap pool.

    Attributes:
        balances: Pool balances in coin units (already 18-decimal for the
            usual pairs; see rates otherwise)
        A: Amplification coefficient as returned by A() (unscaled, e.g. 37),
            or by A_precise() when a_precise is set (e.g. 3700)
        fee: Base swap fee (1e10 == 100%, so 10_000_000 is 0.1%)
        offpeg_fee_multiplier: Dynamic fee multiplier (1e10 == 1x; at or
            below 1e10 the fee never rises off-peg)
        rates: Per-coin rate multipliers (stored_rates). 10**18 for coins
            whose balances are already 18-decimal.
        a_precise: True if A was read from A_precise()
        address: Pool address, informational only
    """

    balances: tuple[int, int]
    A: int
    fee: int
    offpeg_fee_multiplier: int
    rates: tuple[int, int] = (PRECISION, PRECISION)
    a_precise: bool = False
    address: str | None = None

    def __post_init__(self) -> None:
        if len(self.balances) != N_COINS:
            raise ValueError(f"StableSwap snapshot needs {N_COINS} balances, got {len(self.balances)}")
        if len(self.rates) != N_COINS:
            raise ValueError(f"StableSwap snapshot needs {N_COINS} rates, got {len(self.rates)}")
        for name, value in (
            ("A", self.A),
            ("fee", self.fee),
            ("offpeg_fee_multiplier", self.offpeg_fee_multiplier),
            *((f"balances[{k}]", b) for k, b in enumerate(self.balances)),
        ):
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        for k, rate in enumerate(self.rates):
            if rate <= 0:
                raise ValueError(f"rates[{k}] must be positive, got {rate}")

    @property
    def ann(self) -> int:
        """A * A_PRECISION * N_COINS, the form the invariant math consumes."""
        return compute_ann(self.A, self.a_precise)

    @property
    def xp(self) -> tuple[int, int]:
        """Balances normalised by rates (identity for 18-decimal coins)."""
        return (
            self.rates[0] * self.balances[0] // PRECISION,
            self.rates[1] * self.balances[1] // PRECISION,
        )
