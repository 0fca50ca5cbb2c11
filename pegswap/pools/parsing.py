"""Snapshot codec for Curve pool getters.

Builds the eth_call requests an external fetcher batches to read a pool's
state, and decodes the raw uint256 results into validated snapshots. The
transport itself (batching, retries) lives outside this package.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Literal

import structlog
from eth_abi import decode, encode  # type: ignore[attr-defined]

from pegswap.amm.cryptoswap import CryptoSwapSnapshot, validate_snapshot
from pegswap.amm.errors import SnapshotValidationError
from pegswap.amm.stableswap import StableSwapSnapshot
from pegswap.constants import N_COINS
from pegswap.models.types import normalize_address

logger = structlog.get_logger()

# (to, data) pair for one eth_call
EthCall = tuple[str, str]

# Executes eth_calls and returns their raw results, None for a failed call
BatchCall = Callable[[Sequence[EthCall]], Sequence[str | None]]

# Function selectors
# balances(uint256)
BALANCES_SELECTOR = bytes.fromhex("4903b0d1")
# A()
A_SELECTOR = bytes.fromhex("f446c1d0")
# A_precise()
A_PRECISE_SELECTOR = bytes.fromhex("76a2f0f0")
# fee()
FEE_SELECTOR = bytes.fromhex("ddca3f43")
# offpeg_fee_multiplier()
OFFPEG_FEE_MULTIPLIER_SELECTOR = bytes.fromhex("8edfdd5f")
# gamma()
GAMMA_SELECTOR = bytes.fromhex("b1373929")
# D()
D_SELECTOR = bytes.fromhex("0f529ba2")
# mid_fee()
MID_FEE_SELECTOR = bytes.fromhex("92526c0c")
# out_fee()
OUT_FEE_SELECTOR = bytes.fromhex("ee8de675")
# fee_gamma()
FEE_GAMMA_SELECTOR = bytes.fromhex("72d4f0e2")
# price_scale()
PRICE_SCALE_SELECTOR = bytes.fromhex("b9e8c9fd")
# get_dy(int128,int128,uint256), older pools
GET_DY_INT128_SELECTOR = bytes.fromhex("5e0d443f")
# get_dy(uint256,uint256,uint256), factory pools
GET_DY_UINT256_SELECTOR = bytes.fromhex("556d6e9f")

STABLESWAP_FIELDS = ("balances(0)", "balances(1)", "A", "fee", "offpeg_fee_multiplier")
CRYPTOSWAP_FIELDS = (
    "A",
    "gamma",
    "D",
    "mid_fee",
    "out_fee",
    "fee_gamma",
    "price_scale",
    "balances(0)",
    "balances(1)",
)


def _calldata(selector: bytes, types: Sequence[str] = (), args: Sequence[object] = ()) -> str:
    if not types:
        return "0x" + selector.hex()
    return "0x" + (selector + encode(list(types), list(args))).hex()


def _balances_calls(to: str) -> list[EthCall]:
    return [(to, _calldata(BALANCES_SELECTOR, ["uint256"], [k])) for k in range(N_COINS)]


def stableswap_calls(pool_address: str, *, a_precise: bool = False) -> list[EthCall]:
    """eth_calls reading a StableSwap pool, in the order parse_stableswap_results expects.

    balances(0), balances(1), A() or A_precise(), fee(), offpeg_fee_multiplier()
    """
    to = normalize_address(pool_address)
    return [
        *_balances_calls(to),
        (to, _calldata(A_PRECISE_SELECTOR if a_precise else A_SELECTOR)),
        (to, _calldata(FEE_SELECTOR)),
        (to, _calldata(OFFPEG_FEE_MULTIPLIER_SELECTOR)),
    ]


def cryptoswap_calls(pool_address: str) -> list[EthCall]:
    """eth_calls reading a CryptoSwap pool, in the order parse_cryptoswap_results expects.

    A(), gamma(), D(), mid_fee(), out_fee(), fee_gamma(), price_scale(),
    balances(0), balances(1)
    """
    to = normalize_address(pool_address)
    selectors = (
        A_SELECTOR,
        GAMMA_SELECTOR,
        D_SELECTOR,
        MID_FEE_SELECTOR,
        OUT_FEE_SELECTOR,
        FEE_GAMMA_SELECTOR,
        PRICE_SCALE_SELECTOR,
    )
    return [*((to, _calldata(selector)) for selector in selectors), *_balances_calls(to)]


def decode_uint256(result: str | None) -> int | None:
    """Decode one eth_call result word.

    Args:
        result: 0x-prefixed hex returned by eth_call, or None for a failed call

    Returns:
        The decoded value, or None for a failed or empty result

    Raises:
        SnapshotValidationError: If the result is not valid hex
    """
    if result is None:
        return None
    raw = result[2:] if result.startswith(("0x", "0X")) else result
    if not raw:
        return None
    # Some nodes return minimal hex ("0x0"); left-pad to a full word
    if len(raw) < 64:
        raw = raw.rjust(64, "0")
    try:
        (value,) = decode(["uint256"], bytes.fromhex(raw[:64]))
    except ValueError as e:
        raise SnapshotValidationError(f"Malformed eth_call result: {result!r}") from e
    return value


def _decode_all(results: Sequence[str | None], fields: Sequence[str]) -> list[int | None]:
    if len(results) != len(fields):
        raise SnapshotValidationError(f"Expected {len(fields)} results ({', '.join(fields)}), got {len(results)}")
    return [decode_uint256(r) for r in results]


def parse_stableswap_results(
    results: Sequence[str | None],
    pool_address: str | None = None,
    *,
    a_precise: bool = False,
) -> StableSwapSnapshot:
    """Build a StableSwapSnapshot from the results of stableswap_calls().

    Missing fee values default to 0. Pass the same a_precise flag the calls
    were built with.

    Raises:
        SnapshotValidationError: If a balance or A is missing, or a balance is zero
    """
    balance0, balance1, a, fee, offpeg_fee_multiplier = _decode_all(results, STABLESWAP_FIELDS)

    if balance0 is None or balance1 is None:
        raise SnapshotValidationError(f"StableSwap pool {pool_address}: balances unavailable")
    if a is None:
        raise SnapshotValidationError(f"StableSwap pool {pool_address}: A unavailable")
    if balance0 == 0 or balance1 == 0:
        raise SnapshotValidationError(
            f"StableSwap pool {pool_address}: zero balance ({balance0}, {balance1})"
        )
    if a == 0:
        raise SnapshotValidationError(f"StableSwap pool {pool_address}: A is zero")

    snapshot = StableSwapSnapshot(
        balances=(balance0, balance1),
        A=a,
        fee=fee or 0,
        offpeg_fee_multiplier=offpeg_fee_multiplier or 0,
        a_precise=a_precise,
        address=normalize_address(pool_address) if pool_address else None,
    )
    logger.debug("stableswap_snapshot_parsed", pool=snapshot.address, A=a, balances=snapshot.balances)
    return snapshot


def parse_cryptoswap_results(
    results: Sequence[str | None],
    pool_address: str | None = None,
    *,
    precisions: tuple[int, int] = (1, 1),
    ramping: bool = False,
) -> CryptoSwapSnapshot:
    """Build a CryptoSwapSnapshot from the results of cryptoswap_calls().

    Failed calls read as 0, which the validation below then rejects for the
    critical parameters.

    Raises:
        SnapshotValidationError: If A, gamma, D, price_scale or a balance is zero
    """
    values = [v or 0 for v in _decode_all(results, CRYPTOSWAP_FIELDS)]
    a, gamma, d, mid_fee, out_fee, fee_gamma, price_scale, balance0, balance1 = values

    snapshot = CryptoSwapSnapshot(
        balances=(balance0, balance1),
        A=a,
        gamma=gamma,
        D=d,
        mid_fee=mid_fee,
        out_fee=out_fee,
        fee_gamma=fee_gamma,
        price_scale=price_scale,
        precisions=precisions,
        ramping=ramping,
        address=normalize_address(pool_address) if pool_address else None,
    )
    validate_snapshot(snapshot)
    if balance0 == 0 or balance1 == 0:
        raise SnapshotValidationError(
            f"CryptoSwap pool {pool_address}: zero balance ({balance0}, {balance1})"
        )
    logger.debug("cryptoswap_snapshot_parsed", pool=snapshot.address, A=a, gamma=gamma, D=d)
    return snapshot


def fetch_stableswap_snapshot(
    pool_address: str,
    batch_call: BatchCall,
    *,
    a_precise: bool = False,
) -> StableSwapSnapshot:
    """Read a StableSwap pool through batch_call and parse the results."""
    results = batch_call(stableswap_calls(pool_address, a_precise=a_precise))
    return parse_stableswap_results(results, pool_address, a_precise=a_precise)


def fetch_cryptoswap_snapshot(
    pool_address: str,
    batch_call: BatchCall,
    *,
    precisions: tuple[int, int] = (1, 1),
    ramping: bool = False,
) -> CryptoSwapSnapshot:
    """Read a CryptoSwap pool through batch_call and parse the results.

    Args:
        pool_address: Pool to read
        batch_call: Transport that executes the eth_calls, in order
        precisions: Per-coin decimal multipliers, known from the coin list
        ramping: Whether A or gamma is currently ramping

    Raises:
        SnapshotValidationError: If a critical parameter came back zero or failed
    """
    results = batch_call(cryptoswap_calls(pool_address))
    return parse_cryptoswap_results(results, pool_address, precisions=precisions, ramping=ramping)



def encode_get_dy(
    i: int,
    j: int,
    dx: int,
    index_type: Literal["int128", "uint256"] = "uint256",
) -> str:
    """Calldata for an on-chain get_dy, used to verify an off-chain quote.

    Args:
        i: Input coin index
        j: Output coin index
        dx: Input amount
        index_type: "int128" for older pools, "uint256" for factory pools

    Returns:
        0x-prefixed calldata hex
    """
    if index_type == "int128":
        return _calldata(GET_DY_INT128_SELECTOR, ["int128", "int128", "uint256"], [i, j, dx])
    if index_type == "uint256":
        return _calldata(GET_DY_UINT256_SELECTOR, ["uint256", "uint256", "uint256"], [i, j, dx])
    raise ValueError(f"Unknown get_dy index type: {index_type!r}")
