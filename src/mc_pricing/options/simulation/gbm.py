"""
Geometric Brownian Motion (GBM) terminal-spot generation.

European payoffs depend only on S(T), so GBM is simulated exactly in one
step rather than by time-stepping:

[T1] S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 3
"""

from dataclasses import dataclass

import numpy as np

from mc_pricing.options.simulation.sampler import NormalSampler


@dataclass(frozen=True)
class GBMParams:
    """
    Market parameters for GBM simulation.

    Attributes
    ----------
    spot : float
        Initial spot price
    rate : float
        Risk-free rate (annualized, decimal)
    volatility : float
        Volatility (annualized, decimal)

    Notes
    -----
    Maturity belongs to the instrument, so derived quantities take ``T``.
    Inputs are not validated: a negative volatility or maturity gives an
    undefined numeric result rather than an error.
    """

    spot: float
    rate: float
    volatility: float

    def drift(self, maturity: float) -> float:
        """Total log drift: (r - σ²/2)·T."""
        return (self.rate - 0.5 * self.volatility**2) * maturity

    def diffusion(self, maturity: float) -> float:
        """Total log diffusion scale: σ·√T."""
        return self.volatility * np.sqrt(maturity)

    def discount_factor(self, maturity: float) -> float:
        """Discount factor: exp(-r·T)."""
        return float(np.exp(-self.rate * maturity))

    def forward(self, maturity: float) -> float:
        """Forward price: S·exp(r·T)."""
        return float(self.spot * np.exp(self.rate * maturity))


def terminal_spots(params: GBMParams, maturity: float, z: np.ndarray) -> np.ndarray:
    """
    Map standard-normal draws to terminal spots.

    Passing ``-z`` yields the antithetic partner of every path.

    Parameters
    ----------
    params : GBMParams
        Market parameters
    maturity : float
        Time to maturity in years
    z : np.ndarray
        Standard-normal draws

    Returns
    -------
    np.ndarray
        S(T) for each draw
    """
    return params.spot * np.exp(params.drift(maturity) + params.diffusion(maturity) * z)


def generate_terminal_values(
    params: GBMParams,
    maturity: float,
    n_paths: int,
    sampler: NormalSampler,
    antithetic: bool = False,
) -> np.ndarray:
    """
    Generate terminal values from a single stream.

    Parameters
    ----------
    params : GBMParams
        Market parameters
    maturity : float
        Time to maturity in years
    n_paths : int
        Number of paths; with antithetic sampling ``n_paths // 2`` draws
        are made and an odd ``n_paths`` drops one path
    sampler : NormalSampler
        Stream to draw from
    antithetic : bool, default False
        Append the antithetic path -Z after the original paths

    Returns
    -------
    np.ndarray
        Terminal values, shape (n_paths,) or (2 * (n_paths // 2),)
    """
    if antithetic:
        z = sampler.sample_n(n_paths // 2)
        z_all = np.concatenate([z, -z])
    else:
        z_all = sampler.sample_n(n_paths)

    return terminal_spots(params, maturity, z_all)


def validate_gbm_simulation(
    params: GBMParams,
    maturity: float = 1.0,
    n_paths: int = 100_000,
    seed: int = 42,
) -> dict:
    """
    Validate GBM simulation against theoretical moments.

    [T1] Under risk-neutral measure:
    - E[S(T)] = S(0) * exp(r*T) (forward price)
    - Var[log(S(T)/S(0))] = σ²T

    Parameters
    ----------
    params : GBMParams
        Market parameters
    maturity : float, default 1.0
        Time to maturity in years
    n_paths : int, default 100000
        Number of paths for validation
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    terminal = generate_terminal_values(
        params, maturity, n_paths, NormalSampler(seed), antithetic=True
    )

    expected_mean = params.forward(maturity)
    expected_log_var = params.volatility**2 * maturity

    simulated_mean = terminal.mean()
    simulated_log_var = np.log(terminal / params.spot).var()
    se_mean = terminal.std() / np.sqrt(len(terminal))

    return {
        "n_paths": len(terminal),
        "theoretical_mean": expected_mean,
        "simulated_mean": simulated_mean,
        "mean_error_pct": abs(simulated_mean - expected_mean) / expected_mean * 100,
        "mean_se": se_mean,
        "theoretical_log_variance": expected_log_var,
        "simulated_log_variance": simulated_log_var,
        "variance_error_pct": abs(simulated_log_var - expected_log_var) / expected_log_var * 100,
        "validation_passed": abs(simulated_mean - expected_mean) / expected_mean < 0.01,
    }
