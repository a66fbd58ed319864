"""
Monte Carlo simulation for option pricing.

Provides:
- Seedable normal sampler, one per worker
- Fork-join partitioning and reduction
- GBM pricing engine with antithetic variates
- Heston pricing engine (full-truncation Euler)
- Finite-difference Greeks with common random numbers
"""

from mc_pricing.options.simulation.gbm import (
    GBMParams,
    generate_terminal_values,
    terminal_spots,
    validate_gbm_simulation,
)
from mc_pricing.options.simulation.greeks import (
    FiniteDifferenceGreeks,
    GreeksResult,
)
from mc_pricing.options.simulation.heston_paths import (
    HestonMCResult,
    HestonParams,
    generate_heston_terminal_spots,
    price_heston,
    validate_heston_simulation,
)
from mc_pricing.options.simulation.monte_carlo import (
    MCResult,
    MonteCarloEngine,
    convergence_analysis,
    price_gbm,
    price_vanilla_mc,
)
from mc_pricing.options.simulation.parallel import (
    PartialSums,
    WorkBlock,
    fork_join,
    partition,
)
from mc_pricing.options.simulation.sampler import NormalSampler

__all__ = [
    # Sampler / parallel
    "NormalSampler",
    "PartialSums",
    "WorkBlock",
    "fork_join",
    "partition",
    # GBM
    "GBMParams",
    "generate_terminal_values",
    "terminal_spots",
    "validate_gbm_simulation",
    # Monte Carlo
    "MCResult",
    "MonteCarloEngine",
    "convergence_analysis",
    "price_gbm",
    "price_vanilla_mc",
    # Heston
    "HestonMCResult",
    "HestonParams",
    "generate_heston_terminal_spots",
    "price_heston",
    "validate_heston_simulation",
    # Greeks
    "FiniteDifferenceGreeks",
    "GreeksResult",
]
