"""
Tests for the closed-form Black-Scholes reference.

Known answers: S = K = 100, r = 5%, σ = 20%, T = 1 (Hull, Example 15.6 style).
"""

import logging

import numpy as np
import pytest

from mc_pricing.options.payoffs.base import OptionType
from mc_pricing.options.pricing.black_scholes import (
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_put,
    implied_volatility,
    put_call_parity_check,
)


class TestPrices:
    """[T1] Known-answer prices."""

    def test_atm_call(self, market):
        assert black_scholes_call(100, 100, 0.05, 0.20, 1.0) == pytest.approx(market.call_price, abs=1e-4)

    def test_atm_put(self, market):
        assert black_scholes_put(100, 100, 0.05, 0.20, 1.0) == pytest.approx(market.put_price, abs=1e-4)

    def test_dispatch(self):
        assert black_scholes_price(100, 95, 0.03, 0.25, 0.5, OptionType.CALL) == black_scholes_call(
            100, 95, 0.03, 0.25, 0.5
        )
        assert black_scholes_price(100, 95, 0.03, 0.25, 0.5, OptionType.PUT) == black_scholes_put(
            100, 95, 0.03, 0.25, 0.5
        )

    def test_put_call_parity(self, tolerances):
        call = black_scholes_call(110, 100, 0.04, 0.3, 2.0)
        put = black_scholes_put(110, 100, 0.04, 0.3, 2.0)
        assert call - put == pytest.approx(110 - 100 * np.exp(-0.08), abs=tolerances.analytical)
        assert put_call_parity_check(call, put, 110, 100, 0.04, 2.0)

    def test_parity_check_detects_violation(self):
        assert not put_call_parity_check(10.0, 5.0, 100, 100, 0.05, 1.0)


class TestGreeks:
    """[T1] Unscaled analytical Greeks."""

    def test_atm_call_greeks(self, market):
        result = black_scholes_greeks(100, 100, 0.05, 0.20, 1.0, OptionType.CALL)
        assert result.price == pytest.approx(market.call_price, abs=1e-4)
        assert result.delta == pytest.approx(market.call_delta, abs=1e-4)
        assert result.gamma == pytest.approx(0.018762, abs=1e-5)
        assert result.vega == pytest.approx(37.524, abs=1e-2)
        assert result.rho == pytest.approx(53.232, abs=1e-2)
        assert result.theta == pytest.approx(-6.414, abs=1e-2)

    def test_put_delta_is_call_delta_minus_one(self):
        call = black_scholes_greeks(100, 90, 0.05, 0.25, 0.75, OptionType.CALL)
        put = black_scholes_greeks(100, 90, 0.05, 0.25, 0.75, OptionType.PUT)
        assert put.delta == pytest.approx(call.delta - 1.0)
        assert put.gamma == pytest.approx(call.gamma)
        assert put.vega == pytest.approx(call.vega)

    def test_d2_relation(self):
        result = black_scholes_greeks(100, 100, 0.05, 0.20, 1.0, OptionType.CALL)
        assert result.d1 - result.d2 == pytest.approx(0.20)


class TestInputValidation:
    """Closed form rejects non-positive inputs with CRITICAL errors."""

    @pytest.mark.parametrize(
        "kwargs, field",
        [
            (dict(spot=0.0), "spot"),
            (dict(strike=-1.0), "strike"),
            (dict(volatility=0.0), "volatility"),
            (dict(maturity=0.0), "maturity"),
        ],
    )
    def test_rejects(self, kwargs, field):
        args = dict(spot=100.0, strike=100.0, rate=0.05, volatility=0.2, maturity=1.0)
        args.update(kwargs)
        with pytest.raises(ValueError, match=f"CRITICAL: {field} must be > 0"):
            black_scholes_call(**args)


class TestImpliedVolatility:
    """Newton-Raphson inversion of the closed form."""

    @pytest.mark.parametrize("vol", [0.1, 0.25, 0.6])
    @pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
    def test_round_trip(self, vol, option_type):
        price = black_scholes_price(100, 105, 0.03, vol, 1.0, option_type)
        assert implied_volatility(price, 100, 105, 0.03, 1.0, option_type) == pytest.approx(vol, abs=1e-5)

    def test_custom_initial_guess(self):
        price = black_scholes_call(100, 100, 0.05, 0.3, 1.0)
        assert implied_volatility(price, 100, 100, 0.05, 1.0, OptionType.CALL, initial_guess=0.2) == pytest.approx(
            0.3, abs=1e-5
        )

    def test_iteration_cap_returns_none(self):
        price = black_scholes_call(100, 100, 0.05, 0.3, 1.0)
        assert implied_volatility(price, 100, 100, 0.05, 1.0, OptionType.CALL, max_iterations=0) is None

    def test_unreachable_price_logs_small_vega(self, caplog):
        """A call worth more than spot drives vol up until vega vanishes."""
        with caplog.at_level(logging.WARNING):
            result = implied_volatility(150.0, 100, 100, 0.05, 1.0, OptionType.CALL)
        assert result is None
        assert "vega too small" in caplog.text

    def test_newton_overshoot_logs_domain_exit(self, caplog):
        """A near-zero price overshoots to negative vol on the first step."""
        with caplog.at_level(logging.WARNING):
            result = implied_volatility(0.001, 100, 100, 0.05, 1.0, OptionType.CALL)
        assert result is None
        assert "left the valid domain" in caplog.text
