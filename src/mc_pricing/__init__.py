"""
mc-pricing: Parallel Monte Carlo option pricing.

Quick Start
-----------
>>> from mc_pricing import EuropeanOption, SimulationConfig, price_gbm
>>> call = EuropeanOption(strike=100.0, maturity=1.0)
>>> result = price_gbm(call, spot=100.0, rate=0.05, volatility=0.20,
...                    config=SimulationConfig(n_paths=1_000_000, base_seed=42))
>>> print(f"{result.price:.4f} ± {result.standard_error:.4f}")

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Configuration
# =============================================================================
from mc_pricing.config.settings import SETTINGS, GreeksConfig, SimulationConfig

# =============================================================================
# Instruments
# =============================================================================
from mc_pricing.options.payoffs.base import EuropeanOption, Instrument, OptionType

# =============================================================================
# Simulation Engines
# =============================================================================
from mc_pricing.options.simulation import (
    FiniteDifferenceGreeks,
    GBMParams,
    GreeksResult,
    HestonMCResult,
    HestonParams,
    MCResult,
    MonteCarloEngine,
    NormalSampler,
    price_gbm,
    price_heston,
)

# =============================================================================
# Analytical Reference
# =============================================================================
from mc_pricing.options.pricing import (
    BSResult,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_put,
    implied_volatility,
)

__all__ = [
    "__version__",
    # Configuration
    "SETTINGS",
    "GreeksConfig",
    "SimulationConfig",
    # Instruments
    "EuropeanOption",
    "Instrument",
    "OptionType",
    # Simulation
    "FiniteDifferenceGreeks",
    "GBMParams",
    "GreeksResult",
    "HestonMCResult",
    "HestonParams",
    "MCResult",
    "MonteCarloEngine",
    "NormalSampler",
    "price_gbm",
    "price_heston",
    # Analytical
    "BSResult",
    "black_scholes_call",
    "black_scholes_greeks",
    "black_scholes_put",
    "implied_volatility",
]
