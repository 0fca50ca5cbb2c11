"""Base types shared by the pricing engines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pegswap.constants import N_COINS


@dataclass(frozen=True)
class SwapQuote:
    """Result of quoting a swap against a pool snapshot.

    Derived value: recomputed on every call, never cached.
    """

    i: int
    j: int
    amount_in: int
    amount_out: int

    @property
    def is_bonus(self) -> bool:
        """True if the swap returns at least as much as it takes in (rate >= 1:1)."""
        return self.amount_out >= self.amount_in


@runtime_checkable
class QuoteEngine(Protocol):
    """Capability shared by the StableSwap and CryptoSwap engines.

    Both engines answer the same question, "how much of coin j does dx of
    coin i buy", over unrelated invariants. Callers that only need a quote
    depend on this protocol, never on the math behind it.
    """

    def quote(self, i: int, j: int, dx: int, snapshot: Any) -> int:
        """Return the post-fee output amount for swapping dx of coin i into coin j.

        Args:
            i: Input coin index
            j: Output coin index
            dx: Input amount (fixed-point, coin i decimals)
            snapshot: Pool snapshot of the type the engine understands

        Returns:
            Output amount (fixed-point, coin j decimals)
        """
        ...


def validate_indices(i: int, j: int, n_coins: int = N_COINS) -> None:
    """Reject out-of-range or identical coin indices.

    Raises:
        IndexError: If i or j is out of range
        ValueError: If i == j
    """
    if i < 0 or i >= n_coins:
        raise IndexError(f"Coin index i={i} out of range for {n_coins} coins")
    if j < 0 or j >= n_coins:
        raise IndexError(f"Coin index j={j} out of range for {n_coins} coins")
    if i == j:
        raise ValueError("Cannot swap coin with itself")
