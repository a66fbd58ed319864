"""
Frozen configuration settings for Monte Carlo pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
A config is changed only by building a new one (``with_seed`` or
``dataclasses.replace``), never in place.
"""

import os
from dataclasses import dataclass, field, replace


def _resolve_n_workers() -> int:
    """
    Resolve default worker count with environment variable override.

    Priority:
    1. MC_PRICING_N_WORKERS environment variable (if set)
    2. Default: number of CPUs reported by the OS

    Returns
    -------
    int
        Number of worker threads per pricing call
    """
    env_workers = os.environ.get("MC_PRICING_N_WORKERS")
    if env_workers:
        return max(1, int(env_workers))
    return os.cpu_count() or 1


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo simulation configuration.

    Attributes
    ----------
    n_paths : int
        Number of simulated paths (> 0, not enforced)
    n_steps : int
        Time steps per path (Heston only)
    base_seed : int
        Base seed; worker k uses base_seed + k + engine offset
    use_antithetic : bool
        Pair each draw Z with -Z (GBM only)
    n_workers : int, optional
        Worker threads per call. None resolves to MC_PRICING_N_WORKERS
        or the CPU count.
    batch_size : int
        Paths simulated per vectorized batch inside a worker. GBM consumes
        the same draws for any batch size. Heston draws one (2, batch) block per time
        step, so batch_size is part of its reproducibility key.

    Note
    ----
    Results are bit-identical only for a fixed (base_seed, n_workers), plus
    batch_size for Heston.
    Changing n_workers changes which seed feeds which block of paths.
    """

    n_paths: int
    n_steps: int = 100
    base_seed: int = 42
    use_antithetic: bool = True
    n_workers: int | None = None
    batch_size: int = 65_536

    @property
    def resolved_workers(self) -> int:
        """Worker count actually used for a pricing call."""
        if self.n_workers is None:
            return _resolve_n_workers()
        return max(1, self.n_workers)

    def with_seed(self, seed: int) -> "SimulationConfig":
        """Return a copy of this config reseeded to ``seed``."""
        return replace(self, base_seed=seed)


# =============================================================================
# Greeks Configuration
# =============================================================================

@dataclass(frozen=True)
class GreeksConfig:
    """
    Immutable finite-difference bump sizes.

    Attributes
    ----------
    delta_epsilon : float
        Absolute spot bump for delta
    gamma_epsilon : float
        Absolute spot bump for gamma
    vega_epsilon : float
        Absolute volatility bump for vega
    rho_epsilon : float
        Absolute rate bump for rho
    """

    delta_epsilon: float = 0.01
    gamma_epsilon: float = 0.01
    vega_epsilon: float = 0.001
    rho_epsilon: float = 0.001


# =============================================================================
# Implied Volatility Configuration
# =============================================================================

@dataclass(frozen=True)
class ImpliedVolConfig:
    """
    Newton-Raphson solver settings for implied volatility.

    Attributes
    ----------
    initial_guess : float
        Starting volatility
    tolerance : float
        Absolute price tolerance for convergence
    max_iterations : int
        Iteration cap before giving up
    min_vega : float
        Vega below which the Newton step is not attempted
    """

    initial_guess: float = 0.5
    tolerance: float = 1e-6
    max_iterations: int = 100
    min_vega: float = 1e-8


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from mc_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.base_seed
    42
    """

    simulation: SimulationConfig = field(
        default_factory=lambda: SimulationConfig(n_paths=100_000)
    )
    greeks: GreeksConfig = field(default_factory=GreeksConfig)
    implied_vol: ImpliedVolConfig = field(default_factory=ImpliedVolConfig)


# Singleton instance - import this
SETTINGS = Settings()
