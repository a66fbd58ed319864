"""
Centralized pytest fixtures for the mc-pricing test suite.

Fixture Categories:
1. Market Parameters - Standard market conditions for option pricing
2. Instruments - ATM European call and put
3. Simulation Configs - Fixed-seed, fixed-worker configurations
4. Heston Parameters - Standard and adversarial (Feller-violating) sets
"""

from dataclasses import dataclass

import pytest

from mc_pricing.config.settings import SimulationConfig
from mc_pricing.options.payoffs.base import EuropeanOption, OptionType
from mc_pricing.options.simulation.heston_paths import HestonParams

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Closed-form identities
    analytical: float = 1e-10

    # Same seed, same workers: bit-identical
    reproducible: float = 0.0

    # Monte Carlo vs analytical
    mc_100k_paths: float = 0.15
    mc_1m_paths: float = 0.02


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class MarketCase:
    """Standard Black-Scholes test case with its closed-form answers."""

    spot: float
    strike: float
    rate: float
    volatility: float
    maturity: float
    call_price: float
    put_price: float
    call_delta: float


#: S = K = 100, r = 5%, σ = 20%, T = 1
ATM_CASE = MarketCase(
    spot=100.0,
    strike=100.0,
    rate=0.05,
    volatility=0.20,
    maturity=1.0,
    call_price=10.4506,
    put_price=5.5735,
    call_delta=0.6368,
)


@pytest.fixture
def market() -> MarketCase:
    """ATM market case with known Black-Scholes values."""
    return ATM_CASE


# =============================================================================
# INSTRUMENTS
# =============================================================================

@pytest.fixture
def atm_call() -> EuropeanOption:
    """ATM one-year European call."""
    return EuropeanOption(strike=ATM_CASE.strike, maturity=ATM_CASE.maturity, option_type=OptionType.CALL)


@pytest.fixture
def atm_put() -> EuropeanOption:
    """ATM one-year European put."""
    return EuropeanOption(strike=ATM_CASE.strike, maturity=ATM_CASE.maturity, option_type=OptionType.PUT)


# =============================================================================
# SIMULATION CONFIGS
# =============================================================================

@pytest.fixture
def small_config() -> SimulationConfig:
    """Cheap deterministic config for mechanics tests."""
    return SimulationConfig(n_paths=20_000, n_steps=20, base_seed=42, n_workers=4)


@pytest.fixture
def single_worker_config() -> SimulationConfig:
    """One worker, one batch: lets tests replay the stream by hand."""
    return SimulationConfig(
        n_paths=10_000, n_steps=10, base_seed=42, n_workers=1, batch_size=1_000_000
    )


# =============================================================================
# HESTON PARAMETERS
# =============================================================================

@pytest.fixture
def heston_params() -> HestonParams:
    """Typical equity Heston parameters (Feller satisfied)."""
    return HestonParams(v0=0.04, kappa=2.0, theta=0.04, xi=0.3, rho=-0.7)


@pytest.fixture
def adversarial_heston_params() -> HestonParams:
    """Small kappa, large xi: Feller badly violated, variance hits zero often."""
    return HestonParams(v0=0.04, kappa=0.1, theta=0.04, xi=2.0, rho=-0.9)

