"""
Monte Carlo option pricing engine (GBM).

Fans the requested paths across a team of worker threads, each with a
private random stream, accumulates payoff and squared-payoff sums per
worker, and reduces them into a discounted price and standard error.

[T1] MC converges to analytical price at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

import numpy as np

from mc_pricing.config.settings import SETTINGS, SimulationConfig
from mc_pricing.options.payoffs.base import EuropeanOption, Instrument, OptionType, evaluate_payoffs
from mc_pricing.options.simulation.gbm import GBMParams, terminal_spots
from mc_pricing.options.simulation.parallel import (
    PartialSums,
    WorkBlock,
    batch_sizes,
    fork_join,
    partition,
    reduce_partial_sums,
)
from mc_pricing.options.simulation.sampler import NormalSampler

if TYPE_CHECKING:
    from mc_pricing.options.simulation.heston_paths import HestonMCResult, HestonParams

logger = logging.getLogger(__name__)

#: Worker k of a GBM call is seeded base_seed + k + 1
GBM_SEED_OFFSET = 1


@dataclass(frozen=True)
class MCResult:
    """
    Monte Carlo pricing result.

    Attributes
    ----------
    price : float
        Option price (discounted expected payoff)
    standard_error : float
        Standard error of the estimate
    n_paths : int
        Number of paths actually used (2 * (n // 2) with antithetic)
    discount_factor : float
        Discount factor used
    """

    price: float
    standard_error: float
    n_paths: int
    discount_factor: float

    @property
    def confidence_interval(self) -> tuple[float, float]:
        """95% confidence interval (z = 1.96)."""
        return (
            self.price - 1.96 * self.standard_error,
            self.price + 1.96 * self.standard_error,
        )

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of 95% confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


def _accumulate_gbm_block(
    block: WorkBlock,
    sampler: NormalSampler,
    instrument: Instrument,
    params: GBMParams,
    maturity: float,
    antithetic: bool,
    batch_size: int,
) -> PartialSums:
    """Simulate one worker's iterations and return its private sums."""
    sum_payoffs = 0.0
    sum_sq_payoffs = 0.0

    for size in batch_sizes(block.size, batch_size):
        z = sampler.sample_n(size)

        payoffs = evaluate_payoffs(instrument, terminal_spots(params, maturity, z))
        sum_payoffs += float(payoffs.sum())
        sum_sq_payoffs += float(np.dot(payoffs, payoffs))

        if antithetic:
            payoffs_anti = evaluate_payoffs(instrument, terminal_spots(params, maturity, -z))
            sum_payoffs += float(payoffs_anti.sum())
            sum_sq_payoffs += float(np.dot(payoffs_anti, payoffs_anti))

    return PartialSums(sum_payoffs=sum_payoffs, sum_sq_payoffs=sum_sq_payoffs)


def _compute_result(totals: PartialSums, actual_paths: int, discount_factor: float) -> MCResult:
    """
    Compute MC result from reduced sums.

    [T1] Var = E[X²] - E[X]², floored at zero against cancellation.
    """
    n = np.float64(actual_paths)

    with np.errstate(divide="ignore", invalid="ignore"):
        mean_payoff = np.float64(totals.sum_payoffs) / n
        variance = np.maximum(np.float64(totals.sum_sq_payoffs) / n - mean_payoff**2, 0.0)
        standard_error = np.sqrt(variance / n) * discount_factor

    return MCResult(
        price=float(mean_payoff * discount_factor),
        standard_error=float(standard_error),
        n_paths=actual_paths,
        discount_factor=discount_factor,
    )


def price_gbm(
    instrument: Instrument,
    spot: float,
    rate: float,
    volatility: float,
    config: SimulationConfig,
) -> MCResult:
    """
    Price a terminal-spot payoff under GBM by parallel Monte Carlo.

    Parameters
    ----------
    instrument : Instrument
        Payoff capability (payoff + maturity)
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    config : SimulationConfig
        Path count, seed, antithetic flag and worker count

    Returns
    -------
    MCResult
        Discounted price and standard error

    Notes
    -----
    With antithetic sampling each loop iteration draws one Z and prices
    both Z and -Z, so ``n_paths // 2`` iterations run and an odd
    ``n_paths`` silently drops one path. Inputs are not validated.

    Examples
    --------
    >>> call = EuropeanOption(strike=100.0, maturity=1.0)
    >>> result = price_gbm(call, 100.0, 0.05, 0.20, SimulationConfig(n_paths=100_000))
    >>> abs(result.price - 10.4506) < 4 * result.standard_error
    True
    """
    maturity = instrument.maturity
    params = GBMParams(spot=spot, rate=rate, volatility=volatility)
    antithetic = config.use_antithetic

    loops = config.n_paths // 2 if antithetic else config.n_paths
    actual_paths = 2 * loops if antithetic else config.n_paths

    blocks = partition(loops, config.resolved_workers, config.base_seed, GBM_SEED_OFFSET)

    def task(block: WorkBlock, sampler: NormalSampler) -> PartialSums:
        return _accumulate_gbm_block(
            block, sampler, instrument, params, maturity, antithetic, config.batch_size
        )

    totals = reduce_partial_sums(fork_join(task, blocks))
    result = _compute_result(totals, actual_paths, params.discount_factor(maturity))

    logger.debug(
        f"GBM: paths={actual_paths} workers={len(blocks)} seed={config.base_seed} "
        f"antithetic={antithetic} price={result.price:.6f} se={result.standard_error:.6f}"
    )
    return result


class MonteCarloEngine:
    """
    Monte Carlo pricing engine.

    Thin object wrapper over the pure pricing functions. The engine holds
    only a frozen config; every call takes its seed from that config (or an
    explicit override), so one engine may be shared between threads.

    Parameters
    ----------
    config : SimulationConfig, optional
        Defaults to ``SETTINGS.simulation``

    Examples
    --------
    >>> engine = MonteCarloEngine(SimulationConfig(n_paths=100_000, base_seed=42))
    >>> result = engine.price_european_call(spot=100, strike=100, rate=0.05, volatility=0.20, maturity=1.0)
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SETTINGS.simulation

    def with_seed(self, seed: int) -> "MonteCarloEngine":
        """Return an engine identical to this one but reseeded."""
        return MonteCarloEngine(self.config.with_seed(seed))

    def price(
        self,
        instrument: Instrument,
        spot: float,
        rate: float,
        volatility: float,
        use_antithetic: Optional[bool] = None,
        seed: Optional[int] = None,
    ) -> MCResult:
        """
        Price any terminal-spot instrument under GBM.

        Parameters
        ----------
        instrument : Instrument
            Payoff capability
        spot : float
            Current spot price
        rate : float
            Risk-free rate (decimal)
        volatility : float
            Volatility (decimal)
        use_antithetic : bool, optional
            Overrides ``config.use_antithetic`` for this call
        seed : int, optional
            Overrides ``config.base_seed`` for this call

        Returns
        -------
        MCResult
            Monte Carlo pricing result
        """
        config = self.config
        if use_antithetic is not None:
            config = replace(config, use_antithetic=use_antithetic)
        if seed is not None:
            config = config.with_seed(seed)
        return price_gbm(instrument, spot, rate, volatility, config)

    def price_european_call(
        self,
        spot: float,
        strike: float,
        rate: float,
        volatility: float,
        maturity: float,
    ) -> MCResult:
        """
        Price European call option.

        [T1] Call payoff: max(S(T) - K, 0)
        """
        call = EuropeanOption(strike=strike, maturity=maturity, option_type=OptionType.CALL)
        return self.price(call, spot, rate, volatility)

    def price_european_put(
        self,
        spot: float,
        strike: float,
        rate: float,
        volatility: float,
        maturity: float,
    ) -> MCResult:
        """
        Price European put option.

        [T1] Put payoff: max(K - S(T), 0)
        """
        put = EuropeanOption(strike=strike, maturity=maturity, option_type=OptionType.PUT)
        return self.price(put, spot, rate, volatility)

    def price_heston(
        self,
        instrument: Instrument,
        spot: float,
        rate: float,
        heston_params: "HestonParams",
        n_steps: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> "HestonMCResult":
        """
        Price a terminal-spot instrument under Heston stochastic volatility.

        Parameters
        ----------
        instrument : Instrument
            Payoff capability
        spot : float
            Initial spot price
        rate : float
            Risk-free rate (decimal)
        heston_params : HestonParams
            Heston model parameters (v0, kappa, theta, xi, rho)
        n_steps : int, optional
            Overrides ``config.n_steps`` for this call
        seed : int, optional
            Overrides ``config.base_seed`` for this call

        Returns
        -------
        HestonMCResult
            Discounted price (no standard error)
        """
        from mc_pricing.options.simulation.heston_paths import price_heston

        config = self.config
        if n_steps is not None:
            config = replace(config, n_steps=n_steps)
        if seed is not None:
            config = config.with_seed(seed)
        return price_heston(instrument, spot, rate, heston_params, config)


def price_vanilla_mc(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    maturity: float,
    option_type: OptionType,
    n_paths: int = 100_000,
    seed: int = 42,
    n_workers: Optional[int] = None,
) -> MCResult:
    """
    Convenience function to price vanilla option via MC.

    Always uses antithetic sampling.

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
        Time to expiry in years
    option_type : OptionType
        CALL or PUT
    n_paths : int, default 100000
        Number of paths
    seed : int, default 42
        Base seed
    n_workers : int, optional
        Worker threads (default resolved from settings)

    Returns
    -------
    MCResult
        Monte Carlo pricing result
    """
    option = EuropeanOption(strike=strike, maturity=maturity, option_type=option_type)
    config = SimulationConfig(
        n_paths=n_paths, base_seed=seed, use_antithetic=True, n_workers=n_workers
    )
    return price_gbm(option, spot, rate, volatility, config)


def convergence_analysis(
    instrument: Instrument,
    spot: float,
    rate: float,
    volatility: float,
    analytical_price: float,
    path_counts: Sequence[int] = (1_000, 10_000, 100_000, 1_000_000),
    seed: int = 42,
    use_antithetic: bool = True,
    n_workers: Optional[int] = None,
) -> dict:
    """
    Analyze MC convergence to analytical price.

    [T1] MC error should converge at rate 1/√N.

    Parameters
    ----------
    instrument : Instrument
        Payoff capability
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    analytical_price : float
        Closed-form (Black-Scholes) price
    path_counts : Sequence[int]
        Numbers of paths to test
    seed : int, default 42
        Base seed
    use_antithetic : bool, default True
        Antithetic sampling flag
    n_workers : int, optional
        Worker threads (default resolved from settings)

    Returns
    -------
    dict
        Per-path-count results plus estimated error and SE convergence rates
    """
    results = []

    for n in path_counts:
        config = SimulationConfig(
            n_paths=n, base_seed=seed, use_antithetic=use_antithetic, n_workers=n_workers
        )
        mc_result = price_gbm(instrument, spot, rate, volatility, config)

        error = abs(mc_result.price - analytical_price)
        lower, upper = mc_result.confidence_interval

        results.append(
            {
                "n_paths": n,
                "mc_price": mc_result.price,
                "analytical_price": analytical_price,
                "absolute_error": error,
                "relative_error": error / analytical_price if analytical_price > 0 else float("inf"),
                "standard_error": mc_result.standard_error,
                "within_ci": lower <= analytical_price <= upper,
            }
        )

    return {
        "results": results,
        "convergence_rate": _estimate_convergence_rate(results, "absolute_error"),
        "standard_error_rate": _estimate_convergence_rate(results, "standard_error"),
    }


def _estimate_convergence_rate(results: list[dict], key: str) -> float:
    """
    Estimate convergence rate from results.

    [T1] Theory predicts rate = -0.5 (error ~ 1/√N).

    Returns
    -------
    float
        Slope of log(results[key]) against log(n_paths)
    """
    log_n = np.log([r["n_paths"] for r in results])
    log_error = np.log([r[key] + 1e-10 for r in results])

    slope, _ = np.polyfit(log_n, log_error, 1)
    return float(slope)
