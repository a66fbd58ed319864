"""
Variance reduction effectiveness tests.

[T1] Per Glasserman Ch. 4, antithetic variates reduce variance for
monotone payoffs because corr(payoff(Z), payoff(-Z)) < 0.

The reported standard error treats the 2N antithetic paths as independent,
so it does not show the reduction. These tests measure the real spread of
the estimator across many seeds instead.

References:
    [T1] Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 4
"""

import numpy as np
import pytest

from mc_pricing.config.settings import SimulationConfig
from mc_pricing.options.simulation.gbm import GBMParams, generate_terminal_values
from mc_pricing.options.simulation.monte_carlo import price_gbm
from mc_pricing.options.simulation.sampler import NormalSampler

# =============================================================================
# Constants
# =============================================================================

SPOT, RATE, VOL = 100.0, 0.05, 0.20

#: Independent estimators per technique
N_SEEDS = 100

#: Paths per estimator
N_PATHS = 10_000


def _rmse_across_seeds(instrument, analytical: float, antithetic: bool) -> float:
    errors = []
    for seed in range(N_SEEDS):
        config = SimulationConfig(n_paths=N_PATHS, base_seed=seed, use_antithetic=antithetic, n_workers=1)
        errors.append(price_gbm(instrument, SPOT, RATE, VOL, config).price - analytical)
    return float(np.sqrt(np.mean(np.square(errors))))


# =============================================================================
# Tests
# =============================================================================

class TestAntitheticVariates:
    """[T1] Antithetic pairs reduce estimator error at equal path count."""

    @pytest.mark.validation
    @pytest.mark.slow
    def test_call_rmse_reduced(self, atm_call, market):
        plain = _rmse_across_seeds(atm_call, market.call_price, antithetic=False)
        anti = _rmse_across_seeds(atm_call, market.call_price, antithetic=True)

        assert anti < plain, f"antithetic RMSE {anti:.4f} >= plain RMSE {plain:.4f}"

    @pytest.mark.validation
    @pytest.mark.slow
    def test_put_rmse_reduced(self, atm_put, market):
        plain = _rmse_across_seeds(atm_put, market.put_price, antithetic=False)
        anti = _rmse_across_seeds(atm_put, market.put_price, antithetic=True)

        assert anti < plain

    @pytest.mark.validation
    def test_pair_payoffs_negatively_correlated(self, atm_call):
        """corr(payoff(Z), payoff(-Z)) < 0 for a call."""
        params = GBMParams(spot=SPOT, rate=RATE, volatility=VOL)
        spots = generate_terminal_values(params, 1.0, 100_000, NormalSampler(42), antithetic=True)
        payoffs = atm_call.payoff_vectorized(spots)

        half = len(payoffs) // 2
        corr = np.corrcoef(payoffs[:half], payoffs[half:])[0, 1]

        assert corr < -0.3

    @pytest.mark.validation
    def test_reported_se_not_reduced(self, atm_call, small_config):
        """The naive SE is of the same size with or without antithetic pairs."""
        anti = price_gbm(atm_call, SPOT, RATE, VOL, small_config)
        plain = price_gbm(atm_call, SPOT, RATE, VOL, SimulationConfig(
            n_paths=small_config.n_paths, use_antithetic=False, n_workers=small_config.n_workers,
        ))

        assert anti.standard_error == pytest.approx(plain.standard_error, rel=0.1)
