"""StableSwap-NG pool math.

Integer replication of the CurveStableSwapNGViews contract for two-coin
pools. Every division rounds down in the same order as the Vyper source,
so results match on-chain get_dy exactly.

All arithmetic goes through SafeInt: a subtraction that would underflow or
a division by zero raises instead of returning a wrapped number.
"""

from __future__ import annotations

from collections.abc import Sequence

from pegswap.amm.base import validate_indices
from pegswap.amm.errors import GetYDidNotConverge, InvariantDidNotConverge, ZeroBalanceError
from pegswap.constants import A_PRECISION, FEE_DENOMINATOR, MAX_ITERATIONS, N_COINS, PRECISION
from pegswap.safe_int import S


def get_d(xp: Sequence[int], ann: int) -> int:
    """Calculate the StableSwap invariant D using Newton's method.

    D satisfies: Ann*sum(x) + D = Ann*D + D^(n+1) / (n^n * prod(x)),
    with Ann expressed in A_PRECISION units.

    Algorithm:
        1. Initial guess: D = sum(xp)
        2. Iterate until |D_new - D_prev| <= 1
        3. Max iterations: 255

    Args:
        xp: Balances scaled to a common precision
        ann: A * A_PRECISION * N_COINS

    Returns:
        The invariant D (0 for an empty pool)

    Raises:
        ZeroBalanceError: If one balance is zero while the other is not
        InvariantDidNotConverge: If iteration doesn't converge
    """
    s = S(sum(xp))
    if s == 0:
        return 0

    for k, x in enumerate(xp):
        if x <= 0:
            raise ZeroBalanceError(f"Balance at index {k} must be positive")

    sann = S(ann)
    n = S(N_COINS)
    a_precision = S(A_PRECISION)
    d = s

    for _ in range(MAX_ITERATIONS):
        d_p = d
        for x in xp:
            d_p = d_p * d // S(x)
        d_p = d_p // (n**N_COINS)

        d_prev = d
        numerator = (sann * s // a_precision + d_p * n) * d
        denominator = (sann - a_precision) * d // a_precision + (n + 1) * d_p
        d = numerator // denominator

        if d.abs_diff(d_prev) <= 1:
            return d.value

    raise InvariantDidNotConverge(f"StableSwap invariant did not converge after {MAX_ITERATIONS} iterations")


def get_y(i: int, j: int, x: int, xp: Sequence[int], ann: int, d: int) -> int:
    """Calculate the balance of coin j that keeps D fixed when coin i becomes x.

    Solves Ann*(x + y) + D = Ann*D + D^3 / (4*x*y) for y by Newton's method
    starting from y = D.

    Args:
        i: Index of the coin whose balance is set
        j: Index of the coin to solve for
        x: New balance of coin i
        xp: Current balances (scaled)
        ann: A * A_PRECISION * N_COINS
        d: Invariant to preserve

    Returns:
        The new balance y of coin j

    Raises:
        IndexError: If i or j is out of range
        ValueError: If i == j
        GetYDidNotConverge: If iteration doesn't converge
    """
    validate_indices(i, j, len(xp))

    sd = S(d)
    sann = S(ann)
    n = S(N_COINS)
    c = sd
    s = S.zero()

    for k in range(len(xp)):
        if k == i:
            x_k = S(x)
        elif k != j:
            x_k = S(xp[k])
        else:
            continue
        s = s + x_k
        c = c * sd // (x_k * n)

    c = c * sd * A_PRECISION // (sann * n)
    b = s + sd * A_PRECISION // sann

    y = sd
    for _ in range(MAX_ITERATIONS):
        y_prev = y
        y = (y * y + c) // (2 * y + b - sd)
        if y.abs_diff(y_prev) <= 1:
            return y.value

    raise GetYDidNotConverge(f"StableSwap get_y did not converge after {MAX_ITERATIONS} iterations")


def dynamic_fee(xpi: int, xpj: int, base_fee: int, fee_multiplier: int) -> int:
    """Fee that rises as the two balances drift apart.

    Returns base_fee unchanged when fee_multiplier <= FEE_DENOMINATOR.

    Raises:
        ZeroBalanceError: If both balances are zero
    """
    if fee_multiplier <= FEE_DENOMINATOR:
        return base_fee

    xps2 = S(xpi + xpj) ** 2
    if xps2 == 0:
        raise ZeroBalanceError("Dynamic fee needs a non-empty pool")

    fee_denominator = S(FEE_DENOMINATOR)
    multiplier = S(fee_multiplier)
    imbalance = (multiplier - fee_denominator) * 4 * S(xpi) * S(xpj) // xps2
    return (multiplier * S(base_fee) // (imbalance + fee_denominator)).value


def get_dy(
    i: int,
    j: int,
    dx: int,
    xp: Sequence[int],
    ann: int,
    base_fee: int,
    fee_multiplier: int,
    rates: Sequence[int] | None = None,
) -> int:
    """Output amount of coin j for dx of coin i, after the dynamic fee.

    The fee is evaluated on the average of the pre- and post-swap balances,
    matching the views contract.

    Args:
        i: Input coin index
        j: Output coin index
        dx: Input amount in coin i units
        xp: Balances normalised by rates
        ann: A * A_PRECISION * N_COINS
        base_fee: Pool fee (1e10 == 100%)
        fee_multiplier: offpeg_fee_multiplier
        rates: Optional stored_rates; dx is scaled in by rates[i] and the
            output scaled out by rates[j]

    Returns:
        Post-fee output amount in coin j units. 0 when the gross output
        rounds to nothing.
    """
    validate_indices(i, j, len(xp))
    if dx < 0:
        raise ValueError(f"dx must be non-negative, got {dx}")

    if rates is not None:
        dx = dx * rates[i] // PRECISION

    x = xp[i] + dx
    d = get_d(xp, ann)
    y = get_y(i, j, x, xp, ann, d)

    # Output would be zero or negative
    if y + 1 >= xp[j]:
        return 0

    dy = S(xp[j]) - y - 1
    fee = dynamic_fee((xp[i] + x) // 2, (xp[j] + y) // 2, base_fee, fee_multiplier)
    dy = dy - dy * fee // FEE_DENOMINATOR

    if rates is not None:
        dy = dy * PRECISION // rates[j]
    return dy.value
