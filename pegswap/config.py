"""Quote configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from pegswap.constants import PEG_SEARCH_TOLERANCE, POOL_PARAMS_CACHE_TTL
from pegswap.slippage import validate_slippage


@dataclass(frozen=True)
class QuoteConfig:
    """Centralized configuration for quoting and route planning.

    Attributes:
        cache_ttl: Seconds a cached pool snapshot stays fresh (default: 12, one block)
        peg_tolerance: Width at which the peg-point search stops (default: 10 tokens)
        default_slippage_bps: Slippage used when the caller gives none (default: 100 = 1%)
        below_peg_margin_bps: Peg-point cut when an on-chain check came back
            below the peg point (default: 100 = 1%)
        unverified_margin_bps: Peg-point cut when no on-chain check was
            possible (default: 200 = 2%)
        conservative_buffer_bps: Input reduction applied before quoting the
            swap leg of a route whose total is only an estimate (default: 100 = 1%)
    """

    cache_ttl: float = POOL_PARAMS_CACHE_TTL
    peg_tolerance: int = PEG_SEARCH_TOLERANCE
    default_slippage_bps: int = 100

    # Safety margins
    below_peg_margin_bps: int = 100
    unverified_margin_bps: int = 200
    conservative_buffer_bps: int = 100

    def __post_init__(self) -> None:
        if self.cache_ttl <= 0:
            raise ValueError(f"cache_ttl must be positive, got {self.cache_ttl}")
        if self.peg_tolerance <= 0:
            raise ValueError(f"peg_tolerance must be positive, got {self.peg_tolerance}")
        validate_slippage(self.default_slippage_bps)
        for name in ("below_peg_margin_bps", "unverified_margin_bps", "conservative_buffer_bps"):
            value = getattr(self, name)
            if not 0 <= value < 10_000:
                raise ValueError(f"{name} must be in [0, 10000), got {value}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> QuoteConfig:
        """Build a config from PEGSWAP_* environment variables.

        Reads PEGSWAP_CACHE_TTL, PEGSWAP_PEG_TOLERANCE and
        PEGSWAP_DEFAULT_SLIPPAGE_BPS; unset variables keep their defaults.

        Raises:
            ValueError: If a variable is set but not a valid number
        """
        env = os.environ if environ is None else environ
        default = DEFAULT_QUOTE_CONFIG
        return cls(
            cache_ttl=float(env.get("PEGSWAP_CACHE_TTL", default.cache_ttl)),
            peg_tolerance=int(env.get("PEGSWAP_PEG_TOLERANCE", default.peg_tolerance)),
            default_slippage_bps=int(
                env.get("PEGSWAP_DEFAULT_SLIPPAGE_BPS", default.default_slippage_bps)
            ),
        )


# Default configuration instance
DEFAULT_QUOTE_CONFIG = QuoteConfig()
