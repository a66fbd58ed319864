"""
Black-Scholes option pricing with Greeks.

Closed-form reference for the Monte Carlo engines: analytical price,
Greeks and a Newton-Raphson implied volatility solver for European options
on a non-dividend-paying underlying.

Greeks are unscaled (vega per unit volatility, rho per unit rate, theta per
year) so they compare directly with the finite-difference engine.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import stats

from mc_pricing.config.settings import SETTINGS
from mc_pricing.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from mc_pricing.options.payoffs.base import OptionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BSResult:
    """
    Immutable Black-Scholes pricing result.

    Attributes
    ----------
    price : float
        Option price
    delta : float
        Delta (dV/dS)
    gamma : float
        Gamma (d²V/dS²)
    vega : float
        Vega (dV/dσ) - per unit vol
    theta : float
        Theta (dV/dt) - per year
    rho : float
        Rho (dV/dr) - per unit rate
    d1 : float
        d1 parameter
    d2 : float
        d2 parameter
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    d1: float
    d2: float


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    maturity: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * np.sqrt(maturity)

    d1 = (np.log(spot / strike) + (rate + 0.5 * volatility**2) * maturity) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t

    return d1, d2


def _validate_inputs(
    spot: float,
    strike: float,
    volatility: float,
    maturity: float,
) -> None:
    """Validate Black-Scholes inputs."""
    if spot <= 0:
        raise ValueError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility <= 0:
        raise ValueError(f"CRITICAL: volatility must be > 0, got {volatility}")
    if maturity <= 0:
        raise ValueError(f"CRITICAL: maturity must be > 0, got {maturity}")


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    maturity: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*N(d1) - K*e^(-rT)*N(d2)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to expiry (years)

    Returns
    -------
    float
        Call option price

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.05, 0.20, 1.0), 4)
    10.4506
    """
    _validate_inputs(spot, strike, volatility, maturity)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, volatility, maturity)
    call_price = spot * stats.norm.cdf(d1) - strike * np.exp(-rate * maturity) * stats.norm.cdf(d2)

    return float(call_price)


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    maturity: float,
) -> float:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*N(-d1)

    Examples
    --------
    >>> round(black_scholes_put(100, 100, 0.05, 0.20, 1.0), 4)
    5.5735
    """
    _validate_inputs(spot, strike, volatility, maturity)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, volatility, maturity)
    put_price = strike * np.exp(-rate * maturity) * stats.norm.cdf(-d2) - spot * stats.norm.cdf(-d1)

    return float(put_price)


def black_scholes_price(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    maturity: float,
    option_type: OptionType,
) -> float:
    """Price European option using Black-Scholes."""
    if option_type == OptionType.CALL:
        return black_scholes_call(spot, strike, rate, volatility, maturity)
    else:
        return black_scholes_put(spot, strike, rate, volatility, maturity)


def black_scholes_greeks(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    maturity: float,
    option_type: OptionType,
) -> BSResult:
    """
    Calculate Black-Scholes price and all Greeks.

    [T1] Delta (call) = N(d1), Delta (put) = N(d1) - 1
    [T1] Gamma = n(d1) / (S * σ * √T)
    [T1] Vega = S * n(d1) * √T
    [T1] Theta (call) = -S*n(d1)*σ/(2√T) - r*K*e^(-rT)*N(d2)
    [T1] Rho (call) = K * T * e^(-rT) * N(d2)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    maturity : float
        Time to expiry (years)
    option_type : OptionType
        Call or put

    Returns
    -------
    BSResult
        Price and all Greeks
    """
    _validate_inputs(spot, strike, volatility, maturity)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, volatility, maturity)

    sqrt_t = np.sqrt(maturity)
    exp_rate = np.exp(-rate * maturity)
    n_d1 = stats.norm.pdf(d1)

    gamma = n_d1 / (spot * volatility * sqrt_t)
    vega = spot * n_d1 * sqrt_t
    theta_common = -spot * n_d1 * volatility / (2 * sqrt_t)

    if option_type == OptionType.CALL:
        price = spot * stats.norm.cdf(d1) - strike * exp_rate * stats.norm.cdf(d2)
        delta = stats.norm.cdf(d1)
        theta = theta_common - rate * strike * exp_rate * stats.norm.cdf(d2)
        rho = strike * maturity * exp_rate * stats.norm.cdf(d2)
    else:
        price = strike * exp_rate * stats.norm.cdf(-d2) - spot * stats.norm.cdf(-d1)
        delta = stats.norm.cdf(d1) - 1.0
        theta = theta_common + rate * strike * exp_rate * stats.norm.cdf(-d2)
        rho = -strike * maturity * exp_rate * stats.norm.cdf(-d2)

    return BSResult(
        price=float(price),
        delta=float(delta),
        gamma=float(gamma),
        vega=float(vega),
        theta=float(theta),
        rho=float(rho),
        d1=float(d1),
        d2=float(d2),
    )


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    maturity: float,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> bool:
    """
    [T1] Put-call parity: C - P = S - K*e^(-rT)
    """
    parity_rhs = spot - strike * np.exp(-rate * maturity)
    return bool(abs((call_price - put_price) - parity_rhs) < tolerance)


def implied_volatility(
    market_price: float,
    spot: float,
    strike: float,
    rate: float,
    maturity: float,
    option_type: OptionType,
    initial_guess: Optional[float] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
) -> Optional[float]:
    """
    Calculate implied volatility using Newton-Raphson.

    sigma_{n+1} = sigma_n - (BS(sigma_n) - market) / vega(sigma_n)

    Parameters
    ----------
    market_price : float
        Observed market price
    spot : float
        Spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate
    maturity : float
        Time to expiry
    option_type : OptionType
        Call or put
    initial_guess : float, optional
        Starting volatility (default ``SETTINGS.implied_vol.initial_guess``)
    tolerance : float, optional
        Absolute price tolerance (default ``SETTINGS.implied_vol.tolerance``)
    max_iterations : int, optional
        Iteration cap (default ``SETTINGS.implied_vol.max_iterations``)

    Returns
    -------
    float or None
        Implied volatility, or None if not converged. A warning is logged
        when vega is too small to divide by (deep ITM/OTM options).
    """
    cfg = SETTINGS.implied_vol
    vol = initial_guess if initial_guess is not None else cfg.initial_guess
    tolerance = tolerance if tolerance is not None else cfg.tolerance
    max_iterations = max_iterations if max_iterations is not None else cfg.max_iterations

    for _ in range(max_iterations):
        try:
            result = black_scholes_greeks(spot, strike, rate, vol, maturity, option_type)
        except ValueError:
            logger.warning(f"Implied vol: Newton step left the valid domain (vol={vol:.6f})")
            return None

        price_diff = result.price - market_price

        if abs(price_diff) < tolerance:
            return vol

        if abs(result.vega) < cfg.min_vega:
            logger.warning(
                f"Implied vol: vega too small ({result.vega:.3e}) at vol={vol:.6f}, solver might fail"
            )
            break

        vol = vol - price_diff / result.vega

    return None
