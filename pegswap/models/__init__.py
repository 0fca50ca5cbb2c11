"""Pydantic models for the quote service."""

from pegswap.models.quote import (
    CryptoSwapSnapshotModel,
    PegPointRequest,
    PegPointResponse,
    QuoteRequest,
    QuoteResponse,
    RouteRequest,
    RouteResponse,
    SnapshotModel,
    StableSwapSnapshotModel,
)
from pegswap.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    # Snapshots
    "StableSwapSnapshotModel",
    "CryptoSwapSnapshotModel",
    "SnapshotModel",
    # Requests/responses
    "QuoteRequest",
    "QuoteResponse",
    "PegPointRequest",
    "PegPointResponse",
    "RouteRequest",
    "RouteResponse",
]
