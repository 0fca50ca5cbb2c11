"""Peg-point search and hybrid swap/mint route planning."""

from pegswap.routing.hybrid import PegVerifier, plan_route, quote_route, split_amount
from pegswap.routing.peg_point import find_peg_point, verify_peg_point
from pegswap.routing.types import RouteQuote, RouteSplit

__all__ = [
    # Types
    "RouteSplit",
    "RouteQuote",
    # Peg point
    "find_peg_point",
    "verify_peg_point",
    # Hybrid
    "PegVerifier",
    "split_amount",
    "plan_route",
    "quote_route",
]
