"""
Heston stochastic volatility Monte Carlo.

Time-steps spot and variance with the Euler-Maruyama full-truncation
scheme and prices terminal-spot payoffs across parallel workers.

[T1] Heston SDEs:
  dS = r S dt + sqrt(v) S dW1
  dv = kappa(theta - v) dt + xi sqrt(v) dW2
  dW1 dW2 = rho dt

Full truncation: v+ = max(v, 0) is used in every drift and diffusion term,
so sqrt never sees a negative variance. The stored v itself may go
negative for one step and is clamped again on the next.

Known bias: the scheme is biased for small n_steps, and violating the Feller
condition (2*kappa*theta >= xi^2) raises the clamping frequency and the bias.
Neither is reported as an error.

References
----------
[T1] Heston, S. L. (1993). A closed-form solution for options with stochastic
     volatility with applications to bond and currency options.
[T1] Lord, R., Koekkoek, R., & van Dijk, D. (2010). A comparison of biased
     simulation schemes for stochastic volatility models.
"""

import logging
from dataclasses import dataclass

import numpy as np

from mc_pricing.config.settings import SimulationConfig
from mc_pricing.options.payoffs.base import Instrument, evaluate_payoffs
from mc_pricing.options.simulation.parallel import (
    PartialSums,
    WorkBlock,
    batch_sizes,
    fork_join,
    partition,
    reduce_partial_sums,
)
from mc_pricing.options.simulation.sampler import NormalSampler

logger = logging.getLogger(__name__)

#: Worker k of a Heston call is seeded base_seed + k
HESTON_SEED_OFFSET = 0


@dataclass(frozen=True)
class HestonParams:
    """
    Heston model parameters.

    Attributes
    ----------
    v0 : float
        Initial variance (volatility squared)
    kappa : float
        Mean reversion speed
    theta : float
        Long-run variance
    xi : float
        Volatility of variance (vol-of-vol)
    rho : float
        Correlation between asset and variance noise, in [-1, 1]

    Notes
    -----
    Not validated. xi = 0 is allowed and reduces the variance to a
    deterministic mean-reverting path.
    """

    v0: float
    kappa: float
    theta: float
    xi: float
    rho: float

    def satisfies_feller(self) -> bool:
        """
        Check if Feller condition is satisfied.

        [T1] Feller condition: 2*kappa*theta >= xi^2
        """
        return 2 * self.kappa * self.theta >= self.xi**2

    def expected_variance(self, time: float) -> float:
        """[T1] E[v(t)] = v0*exp(-kappa*t) + theta*(1 - exp(-kappa*t))."""
        decay = np.exp(-self.kappa * time)
        return float(self.v0 * decay + self.theta * (1 - decay))


@dataclass(frozen=True)
class HestonMCResult:
    """
    Heston Monte Carlo pricing result.

    Attributes
    ----------
    price : float
        Discounted mean payoff
    n_paths : int
        Number of paths simulated
    n_steps : int
        Time steps per path
    discount_factor : float
        Discount factor used

    Notes
    -----
    No standard error is produced for Heston prices.
    """

    price: float
    n_paths: int
    n_steps: int
    discount_factor: float


def generate_heston_terminal_spots(
    sampler: NormalSampler,
    n_paths: int,
    spot: float,
    rate: float,
    maturity: float,
    params: HestonParams,
    n_steps: int,
    return_variance: bool = False,
) -> np.ndarray | tuple[np.ndarray, np.ndarray]:
    """
    Simulate terminal spots for a batch of paths from one stream.

    Each step draws two independent normals per path (a (2, n_paths)
    block) and correlates them by Cholesky decomposition:
    dWs = Z1·√dt, dWv = (rho·Z1 + √(1-rho²)·Z2)·√dt.

    Parameters
    ----------
    sampler : NormalSampler
        Stream owned by the calling worker
    n_paths : int
        Number of paths in this batch
    spot : float
        Initial spot price
    rate : float
        Risk-free rate (decimal)
    maturity : float
        Time to maturity in years
    params : HestonParams
        Heston model parameters
    n_steps : int
        Number of time steps
    return_variance : bool, default False
        Also return the terminal (unclamped) variance of each path

    Returns
    -------
    np.ndarray or tuple[np.ndarray, np.ndarray]
        Terminal spots, shape (n_paths,), and optionally terminal variances
    """
    dt = maturity / n_steps
    sqrt_dt = np.sqrt(dt)

    c1 = params.rho
    c2 = np.sqrt(1.0 - params.rho**2)

    s = np.full(n_paths, spot, dtype=np.float64)
    v = np.full(n_paths, params.v0, dtype=np.float64)

    for _ in range(n_steps):
        z1, z2 = sampler.sample_n((2, n_paths))

        dws = z1 * sqrt_dt
        dwv = (c1 * z1 + c2 * z2) * sqrt_dt

        # Full truncation
        v_pos = np.maximum(v, 0.0)
        sqrt_v = np.sqrt(v_pos)

        v = v + params.kappa * (params.theta - v_pos) * dt + params.xi * sqrt_v * dwv
        s = s * np.exp((rate - 0.5 * v_pos) * dt + sqrt_v * dws)

    if return_variance:
        return s, v
    return s


def _accumulate_heston_block(
    block: WorkBlock,
    sampler: NormalSampler,
    instrument: Instrument,
    spot: float,
    rate: float,
    maturity: float,
    params: HestonParams,
    n_steps: int,
    batch_size: int,
) -> PartialSums:
    """Simulate one worker's paths and return its payoff sum."""
    sum_payoffs = 0.0

    for size in batch_sizes(block.size, batch_size):
        spots = generate_heston_terminal_spots(
            sampler, size, spot, rate, maturity, params, n_steps
        )
        sum_payoffs += float(evaluate_payoffs(instrument, spots).sum())

    return PartialSums(sum_payoffs=sum_payoffs)


def price_heston(
    instrument: Instrument,
    spot: float,
    rate: float,
    params: HestonParams,
    config: SimulationConfig,
) -> HestonMCResult:
    """
    Price a terminal-spot payoff under Heston by parallel Monte Carlo.

    Parameters
    ----------
    instrument : Instrument
        Payoff capability (payoff + maturity)
    spot : float
        Initial spot price
    rate : float
        Risk-free rate (decimal)
    params : HestonParams
        Heston model parameters (v0, kappa, theta, xi, rho)
    config : SimulationConfig
        Uses n_paths, n_steps, base_seed, n_workers and batch_size;
        use_antithetic is ignored

    Returns
    -------
    HestonMCResult
        Discounted price

    Examples
    --------
    >>> from mc_pricing.options.payoffs.base import EuropeanOption
    >>> heston = HestonParams(v0=0.04, kappa=2.0, theta=0.04, xi=0.3, rho=-0.7)
    >>> call = EuropeanOption(strike=100.0, maturity=1.0)
    >>> result = price_heston(call, 100.0, 0.05, heston, SimulationConfig(n_paths=50_000))
    """
    maturity = instrument.maturity
    n_steps = config.n_steps

    blocks = partition(config.n_paths, config.resolved_workers, config.base_seed, HESTON_SEED_OFFSET)

    def task(block: WorkBlock, sampler: NormalSampler) -> PartialSums:
        return _accumulate_heston_block(
            block, sampler, instrument, spot, rate, maturity, params, n_steps, config.batch_size
        )

    totals = reduce_partial_sums(fork_join(task, blocks))
    discount_factor = float(np.exp(-rate * maturity))

    with np.errstate(divide="ignore", invalid="ignore"):
        price = np.float64(totals.sum_payoffs) / np.float64(config.n_paths) * discount_factor

    if not params.satisfies_feller():
        logger.debug(
            f"Heston: Feller condition violated (2*kappa*theta={2 * params.kappa * params.theta:.4f} "
            f"< xi^2={params.xi**2:.4f}); variance clamping will be frequent"
        )
    logger.debug(
        f"Heston: paths={config.n_paths} steps={n_steps} workers={len(blocks)} "
        f"seed={config.base_seed} price={float(price):.6f}"
    )

    return HestonMCResult(
        price=float(price),
        n_paths=config.n_paths,
        n_steps=n_steps,
        discount_factor=discount_factor,
    )


def validate_heston_simulation(
    spot: float,
    rate: float,
    maturity: float,
    params: HestonParams,
    n_paths: int = 100_000,
    n_steps: int = 252,
    seed: int = 42,
) -> dict:
    """
    Validate Heston simulation against theoretical moments.

    [T1] Under Heston model:
    - E[S(T)] = S(0) * exp(r*T) (forward price, risk-neutral)
    - E[v(T)] = v0*exp(-kappa*T) + theta*(1 - exp(-kappa*T)) (mean reversion)

    Parameters
    ----------
    spot : float
        Initial spot price
    rate : float
        Risk-free rate
    maturity : float
        Time to expiry
    params : HestonParams
        Heston parameters
    n_paths : int, default 100000
        Number of paths for validation
    n_steps : int, default 252
        Number of time steps
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    spots, variances = generate_heston_terminal_spots(
        NormalSampler(seed), n_paths, spot, rate, maturity, params, n_steps,
        return_variance=True,
    )

    expected_spot_mean = spot * np.exp(rate * maturity)
    expected_var_mean = params.expected_variance(maturity)

    simulated_spot_mean = spots.mean()
    simulated_var_mean = variances.mean()

    return {
        "n_paths": n_paths,
        "n_steps": n_steps,
        "feller_condition_satisfied": params.satisfies_feller(),
        "theoretical_spot_mean": expected_spot_mean,
        "simulated_spot_mean": simulated_spot_mean,
        "spot_error_pct": abs(simulated_spot_mean - expected_spot_mean) / expected_spot_mean * 100,
        "spot_se": spots.std() / np.sqrt(n_paths),
        "theoretical_var_mean": expected_var_mean,
        "simulated_var_mean": simulated_var_mean,
        "var_error_pct": abs(simulated_var_mean - expected_var_mean) / expected_var_mean * 100,
        "all_finite": bool(np.all(np.isfinite(spots)) and np.all(np.isfinite(variances))),
        "spot_validation_passed": abs(simulated_spot_mean - expected_spot_mean) / expected_spot_mean < 0.02,
        "var_validation_passed": abs(simulated_var_mean - expected_var_mean) / expected_var_mean < 0.05,
    }
