"""Pydantic models for the quote service request/response bodies."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag, model_validator

from pegswap.amm.cryptoswap import CryptoSwapSnapshot
from pegswap.amm.stableswap import StableSwapSnapshot
from pegswap.constants import N_COINS, PRECISION
from pegswap.models.types import Address, Uint256

CoinIndex = Annotated[int, Field(ge=0, lt=N_COINS)]


class StableSwapSnapshotModel(BaseModel):
    """StableSwap pool state as sent by the front end."""

    kind: Literal["stableswap"] = "stableswap"
    address: Address | None = None
    balances: tuple[Uint256, Uint256]
    A: Uint256 = Field(description="Raw A() value, or A_precise() when aPrecise is set")
    fee: Uint256 = Field(default=0, description="Base fee, 1e10 == 100%")
    offpeg_fee_multiplier: Uint256 = Field(default=0, alias="offpegFeeMultiplier")
    rates: tuple[Uint256, Uint256] = Field(default=(PRECISION, PRECISION))
    a_precise: bool = Field(default=False, alias="aPrecise")

    model_config = {"populate_by_name": True}

    def to_snapshot(self) -> StableSwapSnapshot:
        return StableSwapSnapshot(
            balances=self.balances,
            A=self.A,
            fee=self.fee,
            offpeg_fee_multiplier=self.offpeg_fee_multiplier,
            rates=self.rates,
            a_precise=self.a_precise,
            address=self.address.lower() if self.address else None,
        )


class CryptoSwapSnapshotModel(BaseModel):
    """CryptoSwap pool state as sent by the front end."""

    kind: Literal["cryptoswap"] = "cryptoswap"
    address: Address | None = None
    balances: tuple[Uint256, Uint256]
    A: Uint256 = Field(description="A() value, already A * N**N * A_MULTIPLIER")
    gamma: Uint256
    D: Uint256
    mid_fee: Uint256 = Field(alias="midFee")
    out_fee: Uint256 = Field(alias="outFee")
    fee_gamma: Uint256 = Field(alias="feeGamma")
    price_scale: Uint256 = Field(alias="priceScale")
    precisions: tuple[int, int] = (1, 1)
    ramping: bool = False

    model_config = {"populate_by_name": True}

    def to_snapshot(self) -> CryptoSwapSnapshot:
        return CryptoSwapSnapshot(
            balances=self.balances,
            A=self.A,
            gamma=self.gamma,
            D=self.D,
            mid_fee=self.mid_fee,
            out_fee=self.out_fee,
            fee_gamma=self.fee_gamma,
            price_scale=self.price_scale,
            precisions=self.precisions,
            ramping=self.ramping,
            address=self.address.lower() if self.address else None,
        )


def _get_snapshot_kind(v: dict[str, Any] | StableSwapSnapshotModel | CryptoSwapSnapshotModel) -> str:
    """Discriminator function for the snapshot union type."""
    if isinstance(v, dict):
        return str(v.get("kind", "stableswap"))
    return v.kind


# Discriminated union on the 'kind' field
SnapshotModel = Annotated[
    Annotated[StableSwapSnapshotModel, Tag("stableswap")]
    | Annotated[CryptoSwapSnapshotModel, Tag("cryptoswap")],
    Discriminator(_get_snapshot_kind),
]


class _DirectionMixin(BaseModel):
    i: CoinIndex = 0
    j: CoinIndex = 1

    @model_validator(mode="after")
    def _distinct_coins(self) -> _DirectionMixin:
        if self.i == self.j:
            raise ValueError("i and j must differ")
        return self


class QuoteRequest(_DirectionMixin):
    """Quote a single swap."""

    snapshot: SnapshotModel
    amount_in: Uint256 = Field(alias="amountIn")
    slippage_bps: int | str | None = Field(default=None, alias="slippageBps")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    min_amount_out: Uint256 = Field(alias="minAmountOut", description="amount_out less slippage")
    slippage_bps: int = Field(alias="slippageBps")

    model_config = {"populate_by_name": True}


class PegPointRequest(_DirectionMixin):
    """Locate the peg point for a pool direction."""

    snapshot: SnapshotModel
    tolerance: Uint256 | None = None


class PegPointResponse(BaseModel):
    peg_point: Uint256 = Field(alias="pegPoint")

    model_config = {"populate_by_name": True}


class RouteRequest(_DirectionMixin):
    """Plan a swap/mint split.

    Without a snapshot the service reads the state of `pool` through its
    fetcher, if one is configured; with neither, the route mints everything.
    """

    total: Uint256
    snapshot: SnapshotModel | None = None
    pool: Address | None = None
    estimated: bool = Field(
        default=False,
        description="total is an estimate from an upstream leg; quote the swap on a reduced input",
    )


class RouteResponse(BaseModel):
    swap_amount: Uint256 = Field(alias="swapAmount")
    mint_amount: Uint256 = Field(alias="mintAmount")
    swap_output: Uint256 = Field(alias="swapOutput")
    expected_output: Uint256 = Field(alias="expectedOutput")
    degraded: bool = Field(default=False, description="True if no pool state was available")

    model_config = {"populate_by_name": True}
