"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RouteSplit:
    """Division of an amount between the AMM swap and the 1:1 mint path.

    Invariant: swap_amount + mint_amount equals the requested total, and
    neither part is negative.
    """

    swap_amount: int
    mint_amount: int

    def __post_init__(self) -> None:
        if self.swap_amount < 0:
            raise ValueError(f"swap_amount must be non-negative, got {self.swap_amount}")
        if self.mint_amount < 0:
            raise ValueError(f"mint_amount must be non-negative, got {self.mint_amount}")

    @property
    def total(self) -> int:
        return self.swap_amount + self.mint_amount

    @property
    def is_swap_only(self) -> bool:
        return self.mint_amount == 0 and self.swap_amount > 0

    @property
    def is_mint_only(self) -> bool:
        return self.swap_amount == 0 and self.mint_amount > 0


@dataclass(frozen=True)
class RouteQuote:
    """Expected result of executing a RouteSplit."""

    split: RouteSplit
    swap_output: int  # AMM output for split.swap_amount

    @property
    def expected_output(self) -> int:
        """Swap output plus the minted amount (mint converts 1:1)."""
        return self.swap_output + self.split.mint_amount

    @property
    def bonus(self) -> int:
        """Output gained over minting everything (never negative for an optimal split)."""
        return self.expected_output - self.split.total


__all__ = ["RouteSplit", "RouteQuote"]
