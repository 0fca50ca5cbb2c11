"""Tests for StableSwap-NG math and the StableSwap AMM."""

import pytest

from pegswap.amm.errors import ZeroBalanceError
from pegswap.amm.stableswap import (
    StableSwapSnapshot,
    compute_ann,
    dynamic_fee,
    get_d,
    get_dy,
    get_y,
    stableswap_amm,
)
from pegswap.constants import A_PRECISION, FEE_DENOMINATOR, N_COINS
from tests.helpers import (
    CVG_BALANCES,
    ONE,
    STABLE_A,
    STABLE_FEE,
    STABLE_OFFPEG_MULTIPLIER,
    make_stableswap_snapshot,
)

ANN = STABLE_A * A_PRECISION * N_COINS


def cvg_get_dy(dx: int, i: int = 0, j: int = 1, xp=CVG_BALANCES) -> int:
    return get_dy(i, j, dx, xp, ANN, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)


class TestGetD:
    """Tests for the invariant solver."""

    def test_empty_pool_returns_zero(self):
        """An empty pool has D = 0."""
        assert get_d([0, 0], ANN) == 0

    def test_balanced_pool(self):
        """For a balanced pool D is the sum of balances."""
        xp = [1000 * ONE, 1000 * ONE]
        d = get_d(xp, ANN)
        assert 1990 * ONE < d < 2010 * ONE

    def test_imbalanced_pool(self):
        """D lies between 2 * min(xp) and sum(xp)."""
        xp = [50_000 * ONE, 70_000 * ONE]
        d = get_d(xp, ANN)
        assert 100_000 * ONE < d < 120_000 * ONE

    def test_single_zero_balance_rejected(self):
        """A zero balance next to a non-zero one is rejected."""
        with pytest.raises(ZeroBalanceError):
            get_d([0, 1000 * ONE], ANN)


class TestGetY:
    """Tests for the counterpart balance solver."""

    def test_recovers_balance_at_same_invariant(self):
        """get_y at the current balance of i returns the current balance of j."""
        xp = list(CVG_BALANCES)
        d = get_d(xp, ANN)
        y = get_y(0, 1, xp[0], xp, ANN, d)
        # Convergence stops within a wei or two; allow a little rounding slack
        assert abs(y - xp[1]) <= 1000

    def test_recovers_balance_reverse_direction(self):
        xp = [50_000 * ONE, 70_000 * ONE]
        d = get_d(xp, ANN)
        y = get_y(1, 0, xp[1], xp, ANN, d)
        assert abs(y - xp[0]) <= 1000

    def test_finds_y_for_swap(self):
        """Adding 1000 of coin 0 removes a little less than 1100 of coin 1."""
        xp = [50_000 * ONE, 70_000 * ONE]
        d = get_d(xp, ANN)
        y = get_y(0, 1, xp[0] + 1000 * ONE, xp, ANN, d)
        assert xp[1] - 1100 * ONE < y < xp[1]

    def test_same_index_raises(self):
        xp = [50_000 * ONE, 70_000 * ONE]
        with pytest.raises(ValueError):
            get_y(0, 0, xp[0], xp, ANN, get_d(xp, ANN))

    def test_out_of_range_index_raises(self):
        xp = [50_000 * ONE, 70_000 * ONE]
        with pytest.raises(IndexError):
            get_y(0, 2, xp[0], xp, ANN, get_d(xp, ANN))


class TestDynamicFee:
    """Tests for the off-peg fee."""

    def test_zero_multiplier_returns_base_fee(self):
        assert dynamic_fee(50_000 * ONE, 50_000 * ONE, STABLE_FEE, 0) == STABLE_FEE

    def test_multiplier_at_denominator_returns_base_fee(self):
        assert dynamic_fee(50_000 * ONE, 50_000 * ONE, STABLE_FEE, FEE_DENOMINATOR) == STABLE_FEE

    def test_balanced_pool_pays_base_fee(self):
        """At perfect balance the multiplier has no effect."""
        fee = dynamic_fee(50_000 * ONE, 50_000 * ONE, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)
        assert fee == STABLE_FEE

    def test_imbalance_increases_fee(self):
        balanced = dynamic_fee(50_000 * ONE, 50_000 * ONE, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)
        imbalanced = dynamic_fee(30_000 * ONE, 70_000 * ONE, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)
        assert imbalanced > balanced

    def test_fee_never_exceeds_multiplier_times_base(self):
        fee = dynamic_fee(1 * ONE, 1_000_000 * ONE, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)
        assert fee <= STABLE_FEE * STABLE_OFFPEG_MULTIPLIER // FEE_DENOMINATOR

    def test_empty_pool_rejected(self):
        with pytest.raises(ZeroBalanceError):
            dynamic_fee(0, 0, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)


class TestGetDy:
    """Tests for get_dy against the CVX1/cvgCVX reference snapshot."""

    def test_100_tokens_gets_small_bonus(self):
        """The pool holds excess cvgCVX, so 100 CVX1 buys slightly more than 100."""
        dy = cvg_get_dy(100 * ONE)
        assert 100 * ONE < dy < 101 * ONE

    def test_1000_tokens_gets_bonus(self):
        dy = cvg_get_dy(1000 * ONE)
        assert 1000 * ONE < dy < 1010 * ONE

    def test_large_swap_has_worse_rate(self):
        """Average rate falls with size (cross-multiplied to stay in integers)."""
        dx1, dx2 = 1000 * ONE, 50_000 * ONE
        dy1, dy2 = cvg_get_dy(dx1), cvg_get_dy(dx2)
        assert dy2 * dx1 < dy1 * dx2

    def test_average_rate_strictly_decreasing(self):
        sizes = [1000 * ONE, 10_000 * ONE, 20_000 * ONE, 50_000 * ONE]
        outputs = [cvg_get_dy(dx) for dx in sizes]
        for k in range(len(sizes) - 1):
            assert outputs[k + 1] * sizes[k] < outputs[k] * sizes[k + 1]

    def test_reverse_direction_has_no_bonus(self):
        """Selling the abundant coin returns less than the input."""
        dy = cvg_get_dy(100 * ONE, i=1, j=0)
        assert dy < 100 * ONE

    def test_balanced_pool_no_bonus(self):
        dy = cvg_get_dy(100 * ONE, xp=(50_000 * ONE, 50_000 * ONE))
        assert dy < 100 * ONE

    def test_zero_input_returns_at_most_rounding(self):
        """dx = 0 gives no meaningful output (0, or 1 wei of rounding)."""
        assert 0 <= cvg_get_dy(0) <= 1

    def test_negative_input_rejected(self):
        with pytest.raises(ValueError):
            cvg_get_dy(-1)

    def test_output_never_exceeds_balance(self):
        dy = cvg_get_dy(10**30)
        assert 0 < dy < CVG_BALANCES[1]

    def test_rates_scale_six_decimal_coin(self):
        """A 6-decimal coin with rate 1e30 prices like its 18-decimal equivalent."""
        balance0 = 52_847_921_620  # 52,847.92 tokens at 6 decimals
        xp18 = (balance0 * 10**12, CVG_BALANCES[1])
        rates = (10**30, 10**18)

        dx6 = 100 * 10**6
        scaled = get_dy(
            0, 1, dx6, xp18, ANN, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER, rates=rates
        )
        assert scaled == cvg_get_dy(dx6 * 10**12, xp=xp18)

    def test_rates_scale_output_back_to_coin_units(self):
        xp18 = (52_847_921_620 * 10**12, CVG_BALANCES[1])
        rates = (10**30, 10**18)
        scaled = get_dy(1, 0, 100 * ONE, xp18, ANN, STABLE_FEE, STABLE_OFFPEG_MULTIPLIER, rates=rates)
        assert scaled == cvg_get_dy(100 * ONE, i=1, j=0, xp=xp18) // 10**12


class TestReferenceValues:
    """Exact outputs on the CVX1/cvgCVX balances, computed independently in big-integer arithmetic."""

    def test_get_d(self):
        assert get_d(CVG_BALANCES, ANN) == 118294828097490180329847

    def test_get_y(self):
        d = get_d(CVG_BALANCES, ANN)
        assert get_y(0, 1, CVG_BALANCES[0] + 100 * ONE, CVG_BALANCES, ANN, d) == 65364235086094356989791

    def test_dynamic_fee(self):
        fee = dynamic_fee(CVG_BALANCES[0], CVG_BALANCES[1], STABLE_FEE, STABLE_OFFPEG_MULTIPLIER)
        assert fee == 10057185

    @pytest.mark.parametrize(
        ("i", "j", "dx", "expected"),
        [
            (0, 1, 100 * ONE, 100469378842931378953),
            (1, 0, 100 * ONE, 99323285082881632411),
            (0, 1, 10_000 * ONE, 10001779719399807271557),
        ],
    )
    def test_get_dy(self, i, j, dx, expected):
        assert cvg_get_dy(dx, i, j) == expected


class TestStableSwapSnapshot:
    """Tests for the snapshot dataclass."""

    def test_ann(self):
        snapshot = make_stableswap_snapshot(A=37)
        assert snapshot.ann == 37 * 100 * 2

    def test_ann_from_a_precise(self):
        snapshot = make_stableswap_snapshot(A=3700, a_precise=True)
        assert snapshot.ann == 37 * 100 * 2

    def test_a_precise_quotes_like_raw_a(self):
        raw = make_stableswap_snapshot(A=37)
        precise = make_stableswap_snapshot(A=3700, a_precise=True)
        assert stableswap_amm.quote(0, 1, 100 * ONE, precise) == stableswap_amm.quote(0, 1, 100 * ONE, raw)

    def test_compute_ann(self):
        assert compute_ann(37) == 7_400
        assert compute_ann(3700, is_a_precise=True) == 7_400
        # A_precise keeps fractional A that A() truncates
        assert compute_ann(3750, is_a_precise=True) == 7_500

    def test_xp_default_rates_is_identity(self):
        snapshot = make_stableswap_snapshot()
        assert snapshot.xp == CVG_BALANCES

    def test_xp_applies_rates(self):
        snapshot = make_stableswap_snapshot(balances=(100 * 10**6, 100 * ONE), rates=(10**30, 10**18))
        assert snapshot.xp == (100 * ONE, 100 * ONE)

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError, match="balances"):
            make_stableswap_snapshot(balances=(-1, ONE))

    def test_wrong_coin_count_rejected(self):
        with pytest.raises(ValueError, match="2 balances"):
            StableSwapSnapshot(balances=(ONE, ONE, ONE), A=37, fee=0, offpeg_fee_multiplier=0)  # type: ignore[arg-type]

    def test_zero_rate_rejected(self):
        with pytest.raises(ValueError, match="rates"):
            make_stableswap_snapshot(rates=(0, 10**18))

    def test_frozen(self):
        snapshot = make_stableswap_snapshot()
        with pytest.raises(AttributeError):
            snapshot.A = 100  # type: ignore[misc]


class TestStableSwapAMM:
    """Tests for StableSwapAMM."""

    def test_quote_matches_math(self, cvg_pool):
        assert stableswap_amm.quote(0, 1, 100 * ONE, cvg_pool) == cvg_get_dy(100 * ONE)

    def test_simulate_swap(self, cvg_pool):
        result = stableswap_amm.simulate_swap(0, 1, 100 * ONE, cvg_pool)
        assert result.i == 0
        assert result.j == 1
        assert result.amount_in == 100 * ONE
        assert result.amount_out == cvg_get_dy(100 * ONE)
        assert result.is_bonus

    def test_simulate_swap_without_bonus(self, balanced_stable_pool):
        result = stableswap_amm.simulate_swap(0, 1, 100 * ONE, balanced_stable_pool)
        assert not result.is_bonus
