"""
Tests for GBM terminal-spot generation.

[T1] S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)
"""

import numpy as np
import pytest

from mc_pricing.options.simulation.gbm import (
    GBMParams,
    generate_terminal_values,
    terminal_spots,
    validate_gbm_simulation,
)
from mc_pricing.options.simulation.sampler import NormalSampler


@pytest.fixture
def params() -> GBMParams:
    return GBMParams(spot=100.0, rate=0.05, volatility=0.20)


class TestGBMParams:
    """Tests for derived GBM quantities."""

    def test_drift(self, params):
        assert params.drift(1.0) == pytest.approx(0.05 - 0.02)

    def test_diffusion(self, params):
        assert params.diffusion(4.0) == pytest.approx(0.40)

    def test_discount_factor(self, params):
        assert params.discount_factor(1.0) == pytest.approx(np.exp(-0.05))

    def test_forward(self, params):
        assert params.forward(2.0) == pytest.approx(100.0 * np.exp(0.10))


class TestTerminalSpots:
    """Tests for the draw-to-spot map."""

    def test_zero_draw(self, params):
        out = terminal_spots(params, 1.0, np.array([0.0]))
        assert out[0] == pytest.approx(100.0 * np.exp(0.03))

    def test_monotone_in_draw(self, params):
        out = terminal_spots(params, 1.0, np.array([-1.0, 0.0, 1.0]))
        assert out[0] < out[1] < out[2]

    def test_antithetic_pair_log_symmetry(self, params):
        """log S(Z) + log S(-Z) = 2 (log S0 + drift)."""
        z = NormalSampler(1).sample_n(100)
        up = np.log(terminal_spots(params, 1.0, z))
        down = np.log(terminal_spots(params, 1.0, -z))
        np.testing.assert_allclose(up + down, 2 * (np.log(100.0) + params.drift(1.0)))


class TestGenerateTerminalValues:
    """Tests for single-stream generation."""

    def test_plain_count(self, params):
        out = generate_terminal_values(params, 1.0, 1001, NormalSampler(42))
        assert out.shape == (1001,)

    def test_antithetic_drops_odd_path(self, params):
        out = generate_terminal_values(params, 1.0, 1001, NormalSampler(42), antithetic=True)
        assert out.shape == (1000,)

    def test_antithetic_halves_mirror(self, params):
        out = generate_terminal_values(params, 1.0, 10, NormalSampler(42), antithetic=True)
        z = NormalSampler(42).sample_n(5)
        np.testing.assert_allclose(out[:5], terminal_spots(params, 1.0, z))
        np.testing.assert_allclose(out[5:], terminal_spots(params, 1.0, -z))

    def test_reproducible(self, params):
        a = generate_terminal_values(params, 1.0, 500, NormalSampler(3))
        b = generate_terminal_values(params, 1.0, 500, NormalSampler(3))
        np.testing.assert_array_equal(a, b)

    def test_all_positive(self, params):
        out = generate_terminal_values(params, 1.0, 10_000, NormalSampler(42))
        assert np.all(out > 0)


class TestValidation:
    """[T1] Risk-neutral moments."""

    def test_validation_passes(self, params):
        report = validate_gbm_simulation(params, maturity=1.0, n_paths=100_000, seed=42)
        assert report["validation_passed"]
        assert report["variance_error_pct"] < 2.0

    def test_report_keys(self, params):
        report = validate_gbm_simulation(params, n_paths=1000)
        for key in ("theoretical_mean", "simulated_mean", "mean_se", "simulated_log_variance"):
            assert key in report
