"""CryptoSwap (Curve crypto v2, two-coin) pool math.

Integer replication of the CurveCryptoSwap2 math and views: the invariant
solvers newton_D and newton_y with their safety bounds, the interpolated
fee, and get_dy.

The Newton solvers work on plain ints. Every subtraction that the Vyper
code could revert on is either preceded by a comparison, as in the
contract, or goes through _checked_sub. get_dy and the fee go through
SafeInt.
"""

from __future__ import annotations

from collections.abc import Sequence

from pegswap.amm.base import validate_indices
from pegswap.amm.errors import (
    GetYDidNotConverge,
    InsufficientLiquidityError,
    InvariantDidNotConverge,
    SnapshotValidationError,
    UnsafeValueError,
)
from pegswap.constants import A_MULTIPLIER, FEE_DENOMINATOR, MAX_ITERATIONS, N_COINS, PRECISION
from pegswap.safe_int import S

from .pools import CryptoSwapSnapshot

MIN_GAMMA = 10**10
MAX_GAMMA = 2 * 10**16
MIN_A = N_COINS**N_COINS * A_MULTIPLIER // 10
MAX_A = N_COINS**N_COINS * A_MULTIPLIER * 100_000


def _check_a_gamma(ann: int, gamma: int) -> None:
    if not MIN_A <= ann <= MAX_A:
        raise UnsafeValueError(f"Unsafe value for A: {ann} (allowed {MIN_A}..{MAX_A})")
    if not MIN_GAMMA <= gamma <= MAX_GAMMA:
        raise UnsafeValueError(f"Unsafe value for gamma: {gamma} (allowed {MIN_GAMMA}..{MAX_GAMMA})")


def _checked_sub(a: int, b: int, name: str) -> int:
    """a - b, raising where the contract's uint256 subtraction would revert."""
    if b > a:
        raise UnsafeValueError(f"Negative {name}: {a} - {b}")
    return a - b


def geometric_mean(unsorted_x: Sequence[int], sort: bool = True) -> int:
    """(x[0] * x[1]) ** (1/2) by Newton's method.

    Raises:
        InvariantDidNotConverge: If iteration doesn't converge
    """
    x = list(unsorted_x)
    if sort and x[0] < x[1]:
        x = [x[1], x[0]]

    d = x[0]
    for _ in range(MAX_ITERATIONS):
        d_prev = d
        d = (d + x[0] * x[1] // d) // N_COINS
        diff = abs(d - d_prev)
        if diff <= 1 or diff * PRECISION < d:
            return d

    raise InvariantDidNotConverge("geometric_mean did not converge")


def newton_d(ann: int, gamma: int, x_unsorted: Sequence[int]) -> int:
    """Find the CryptoSwap invariant D for balances x.

    Args:
        ann: A * N**N * A_MULTIPLIER, as returned by the pool's A()
        gamma: Curvature parameter
        x_unsorted: Balances in the pool's internal (price-scaled) units

    Returns:
        The invariant D

    Raises:
        UnsafeValueError: If A, gamma or the balances are outside the safe range
        InvariantDidNotConverge: If iteration doesn't converge
    """
    _check_a_gamma(ann, gamma)

    x = list(x_unsorted)
    if x[0] < x[1]:
        x = [x[1], x[0]]

    if not 10**9 <= x[0] <= 10**15 * PRECISION:
        raise UnsafeValueError(f"Unsafe value for x[0]: {x[0]}")
    if x[1] * PRECISION // x[0] < 10**14:
        raise UnsafeValueError(f"Unsafe balance ratio: {x[1]} / {x[0]}")

    d = N_COINS * geometric_mean(x, sort=False)
    s = x[0] + x[1]

    for _ in range(MAX_ITERATIONS):
        d_prev = d

        k0 = (PRECISION * N_COINS**2) * x[0] // d * x[1] // d

        g1k0 = gamma + PRECISION
        if g1k0 > k0:
            g1k0 = g1k0 - k0 + 1
        else:
            g1k0 = k0 - g1k0 + 1

        # D / (A * N**N) * g1k0**2 / gamma**2
        mul1 = PRECISION * d // gamma * g1k0 // gamma * g1k0 * A_MULTIPLIER // ann

        # 2 * N * K0 / g1k0
        mul2 = (2 * PRECISION) * N_COINS * k0 // g1k0

        neg_fprime = _checked_sub(
            (s + s * mul2 // PRECISION) + mul1 * N_COINS // k0,
            mul2 * d // PRECISION,
            "neg_fprime",
        )

        d_plus = d * (neg_fprime + s) // neg_fprime
        d_minus = d * d // neg_fprime
        if PRECISION > k0:
            d_minus += d * (mul1 // neg_fprime) // PRECISION * (PRECISION - k0) // k0
        else:
            d_minus = _checked_sub(
                d_minus,
                d * (mul1 // neg_fprime) // PRECISION * (k0 - PRECISION) // k0,
                "d_minus",
            )

        if d_plus > d_minus:
            d = d_plus - d_minus
        else:
            d = (d_minus - d_plus) // 2

        if abs(d - d_prev) * 10**14 < max(10**16, d):
            # The next newton_y must be safe for these balances
            for x_k in x:
                frac = x_k * PRECISION // d
                if not 10**16 <= frac <= 10**20:
                    raise UnsafeValueError(f"Unsafe balance for invariant: {x_k} / {d}")
            return d

    raise InvariantDidNotConverge(f"CryptoSwap newton_D did not converge after {MAX_ITERATIONS} iterations")


def newton_y(ann: int, gamma: int, x: Sequence[int], d: int, i: int) -> int:
    """Calculate x[i] given the other balance and the invariant D.

    Args:
        ann: A * N**N * A_MULTIPLIER
        gamma: Curvature parameter
        x: Balances in internal units (x[i] is ignored)
        d: Invariant to preserve
        i: Index of the balance to solve for

    Returns:
        The new balance of coin i

    Raises:
        UnsafeValueError: If A, gamma, D or the resulting balance is unsafe
        GetYDidNotConverge: If iteration doesn't converge
    """
    _check_a_gamma(ann, gamma)
    if not 10**17 <= d <= 10**15 * PRECISION:
        raise UnsafeValueError(f"Unsafe value for D: {d}")

    x_j = x[1 - i]
    y = d**2 // (x_j * N_COINS**2)
    k0_i = (PRECISION * N_COINS) * x_j // d
    if not 10**16 * N_COINS <= k0_i <= 10**20 * N_COINS:
        raise UnsafeValueError(f"Unsafe value for x[{1 - i}]: {x_j}")

    convergence_limit = max(x_j // 10**14, d // 10**14, 100)

    for _ in range(MAX_ITERATIONS):
        y_prev = y

        k0 = k0_i * y * N_COINS // d
        s = x_j + y

        g1k0 = gamma + PRECISION
        if g1k0 > k0:
            g1k0 = g1k0 - k0 + 1
        else:
            g1k0 = k0 - g1k0 + 1

        # D / (A * N**N) * g1k0**2 / gamma**2
        mul1 = PRECISION * d // gamma * g1k0 // gamma * g1k0 * A_MULTIPLIER // ann

        # 2 * K0 / g1k0
        mul2 = PRECISION + (2 * PRECISION) * k0 // g1k0

        yfprime = PRECISION * y + s * mul2 + mul1
        dyfprime = d * mul2
        if yfprime < dyfprime:
            y = y_prev // 2
            continue
        yfprime -= dyfprime
        fprime = yfprime // y

        y_minus = mul1 // fprime
        y_plus = (yfprime + PRECISION * d) // fprime + y_minus * PRECISION // k0
        y_minus += PRECISION * s // fprime

        if y_plus < y_minus:
            y = y_prev // 2
        else:
            y = y_plus - y_minus

        if abs(y - y_prev) < max(convergence_limit, y // 10**14):
            frac = y * PRECISION // d
            if not 10**16 <= frac <= 10**20:
                raise UnsafeValueError(f"Unsafe value for y: {y}")
            return y

    raise GetYDidNotConverge(f"CryptoSwap newton_y did not converge after {MAX_ITERATIONS} iterations")


def fee(xp: Sequence[int], mid_fee: int, out_fee: int, fee_gamma: int) -> int:
    """Swap fee interpolated between mid_fee (balanced) and out_fee (imbalanced).

    Args:
        xp: Post-swap balances in internal units
        mid_fee: Fee at perfect balance (1e10 == 100%)
        out_fee: Fee far from balance
        fee_gamma: How quickly the fee moves from mid_fee to out_fee

    Returns:
        Fee in FEE_DENOMINATOR units
    """
    total = S(xp[0] + xp[1])
    one = S(PRECISION)
    balance_term = (one * N_COINS**N_COINS) * xp[0] // total * xp[1] // total
    f = S(fee_gamma) * PRECISION // (S(fee_gamma) + one - balance_term)
    return ((S(mid_fee) * f + S(out_fee) * (one - f)) // PRECISION).value


def validate_snapshot(snapshot: CryptoSwapSnapshot) -> None:
    """Reject snapshots whose critical parameters came back zero.

    A CryptoSwap pool with A, gamma, D or price_scale equal to zero does not
    exist on-chain; such a snapshot is a failed fetch.

    Raises:
        SnapshotValidationError: If any critical parameter is zero
    """
    missing = [
        name
        for name, value in (
            ("A", snapshot.A),
            ("gamma", snapshot.gamma),
            ("D", snapshot.D),
            ("price_scale", snapshot.price_scale),
        )
        if value == 0
    ]
    if missing:
        raise SnapshotValidationError(
            f"CryptoSwap snapshot has zero {', '.join(missing)}; refetch the pool state"
        )


def get_dy(i: int, j: int, dx: int, snapshot: CryptoSwapSnapshot) -> int:
    """Output amount of coin j for dx of coin i, after the interpolated fee.

    Args:
        i: Input coin index
        j: Output coin index
        dx: Input amount in coin i units
        snapshot: Pool state

    Returns:
        Post-fee output amount in coin j units

    Raises:
        SnapshotValidationError: If the snapshot is missing critical parameters
        InsufficientLiquidityError: If the swap would empty the output side
        UnsafeValueError: If the pool math leaves its safe range
    """
    validate_indices(i, j)
    validate_snapshot(snapshot)
    if dx < 0:
        raise ValueError(f"dx must be non-negative, got {dx}")

    precisions = snapshot.precisions
    price_scale = snapshot.price_scale * precisions[1]

    d = snapshot.D
    if snapshot.ramping:
        d = newton_d(snapshot.A, snapshot.gamma, snapshot.xp)

    balances = list(snapshot.balances)
    balances[i] += dx
    xp = [balances[0] * precisions[0], balances[1] * price_scale // PRECISION]

    y = newton_y(snapshot.A, snapshot.gamma, xp, d, j)
    if xp[j] <= y:
        raise InsufficientLiquidityError(f"Swap of {dx} would drain coin {j}")

    dy = S(xp[j]) - y - 1
    xp[j] = y
    if j > 0:
        dy = dy * PRECISION // price_scale
    else:
        dy = dy // precisions[0]

    dy = dy - fee(xp, snapshot.mid_fee, snapshot.out_fee, snapshot.fee_gamma) * dy // FEE_DENOMINATOR
    return dy.value
