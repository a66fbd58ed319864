"""
Property-based tests for Monte Carlo simulation.

Uses Hypothesis to verify Monte Carlo properties:
1. Prices and standard errors are non-negative
2. Reproducibility for any seed and worker count
3. Pathwise monotonicity under common random numbers
4. Partition invariants

With a shared seed every run below sees the same draws, so monotonicity
in spot and strike holds exactly, not just statistically.

References:
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo Methods
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from mc_pricing.config.settings import SimulationConfig
from mc_pricing.options.payoffs.base import EuropeanOption, OptionType
from mc_pricing.options.simulation.monte_carlo import price_gbm
from mc_pricing.options.simulation.parallel import partition

# =============================================================================
# Strategy Definitions
# =============================================================================

# More constrained strategies for MC (expensive to run)
spot_strategy = st.floats(min_value=50.0, max_value=200.0, allow_nan=False, allow_infinity=False)
strike_strategy = st.floats(min_value=50.0, max_value=200.0, allow_nan=False, allow_infinity=False)
rate_strategy = st.floats(min_value=0.0, max_value=0.10, allow_nan=False, allow_infinity=False)
vol_strategy = st.floats(min_value=0.05, max_value=0.60, allow_nan=False, allow_infinity=False)
time_strategy = st.floats(min_value=0.1, max_value=3.0, allow_nan=False, allow_infinity=False)
seed_strategy = st.integers(min_value=0, max_value=2**31)
workers_strategy = st.integers(min_value=1, max_value=6)
type_strategy = st.sampled_from([OptionType.CALL, OptionType.PUT])

N_PATHS = 4_000


def _config(seed: int, n_workers: int = 2) -> SimulationConfig:
    return SimulationConfig(n_paths=N_PATHS, base_seed=seed, n_workers=n_workers)


# =============================================================================
# Bounds
# =============================================================================

class TestMCBoundsProperty:
    """[T1] MC prices of non-negative payoffs are non-negative."""

    @given(
        spot=spot_strategy,
        strike=strike_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
        option_type=type_strategy,
        seed=seed_strategy,
    )
    @settings(max_examples=30, deadline=None)
    def test_price_and_se_non_negative(self, spot, strike, rate, vol, time, option_type, seed) -> None:
        option = EuropeanOption(strike=strike, maturity=time, option_type=option_type)
        result = price_gbm(option, spot, rate, vol, _config(seed))

        assert result.price >= 0.0
        assert result.standard_error >= 0.0
        assert result.n_paths == N_PATHS

    @given(strike=strike_strategy, rate=rate_strategy, vol=vol_strategy, time=time_strategy, seed=seed_strategy)
    @settings(max_examples=30, deadline=None)
    def test_put_bounded_by_discounted_strike(self, strike, rate, vol, time, seed) -> None:
        """[T1] Put payoff <= K pathwise, so P <= K e^(-rT)."""
        put = EuropeanOption(strike=strike, maturity=time, option_type=OptionType.PUT)
        result = price_gbm(put, 100.0, rate, vol, _config(seed))

        assert result.price <= strike * result.discount_factor * (1 + 1e-12)


# =============================================================================
# Reproducibility
# =============================================================================

class TestReproducibilityProperty:
    """Same (seed, n_workers) gives identical results."""

    @given(seed=seed_strategy, n_workers=workers_strategy)
    @settings(max_examples=25, deadline=None)
    def test_rerun_identical(self, seed, n_workers) -> None:
        call = EuropeanOption(strike=100.0, maturity=1.0)
        a = price_gbm(call, 100.0, 0.05, 0.2, _config(seed, n_workers))
        b = price_gbm(call, 100.0, 0.05, 0.2, _config(seed, n_workers))

        assert a == b


# =============================================================================
# Pathwise Monotonicity (CRN)
# =============================================================================

class TestMonotonicityProperty:
    """[T1] Payoffs are monotone in S0 and K path by path."""

    @given(
        spot=spot_strategy,
        bump=st.floats(min_value=0.01, max_value=20.0),
        vol=vol_strategy,
        seed=seed_strategy,
    )
    @settings(max_examples=30, deadline=None)
    def test_call_increasing_in_spot(self, spot, bump, vol, seed) -> None:
        call = EuropeanOption(strike=100.0, maturity=1.0)
        low = price_gbm(call, spot, 0.03, vol, _config(seed))
        high = price_gbm(call, spot + bump, 0.03, vol, _config(seed))

        assert high.price >= low.price

    @given(
        strike=strike_strategy,
        bump=st.floats(min_value=0.01, max_value=20.0),
        vol=vol_strategy,
        seed=seed_strategy,
    )
    @settings(max_examples=30, deadline=None)
    def test_call_decreasing_in_strike(self, strike, bump, vol, seed) -> None:
        low_k = EuropeanOption(strike=strike, maturity=1.0)
        high_k = EuropeanOption(strike=strike + bump, maturity=1.0)

        assert price_gbm(high_k, 100.0, 0.03, vol, _config(seed)).price <= price_gbm(
            low_k, 100.0, 0.03, vol, _config(seed)
        ).price

    @given(
        strike=strike_strategy,
        bump=st.floats(min_value=0.01, max_value=20.0),
        vol=vol_strategy,
        seed=seed_strategy,
    )
    @settings(max_examples=30, deadline=None)
    def test_put_increasing_in_strike(self, strike, bump, vol, seed) -> None:
        low_k = EuropeanOption(strike=strike, maturity=1.0, option_type=OptionType.PUT)
        high_k = EuropeanOption(strike=strike + bump, maturity=1.0, option_type=OptionType.PUT)

        assert price_gbm(high_k, 100.0, 0.03, vol, _config(seed)).price >= price_gbm(
            low_k, 100.0, 0.03, vol, _config(seed)
        ).price


# =============================================================================
# Partition Invariants
# =============================================================================

class TestPartitionProperty:
    """Static schedule covers every iteration exactly once."""

    @given(
        n_iterations=st.integers(min_value=0, max_value=10_000_000),
        n_workers=st.integers(min_value=1, max_value=256),
        base_seed=st.integers(min_value=0, max_value=2**31),
        offset=st.integers(min_value=0, max_value=1),
    )
    @settings(max_examples=200)
    def test_blocks_tile_range(self, n_iterations, n_workers, base_seed, offset) -> None:
        blocks = partition(n_iterations, n_workers, base_seed, offset)

        assert len(blocks) == n_workers
        assert blocks[0].start == 0
        assert blocks[-1].stop == n_iterations
        for prev, nxt in zip(blocks, blocks[1:]):
            assert prev.stop == nxt.start
            assert 0 <= prev.size - nxt.size <= 1
        assert [b.seed for b in blocks] == [base_seed + k + offset for k in range(n_workers)]
