"""
Option pricing implementations.

Provides:
- Black-Scholes analytical pricing with Greeks
- Newton-Raphson implied volatility
"""

from mc_pricing.options.pricing.black_scholes import (
    BSResult,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_price,
    black_scholes_put,
    implied_volatility,
    put_call_parity_check,
)

__all__ = [
    "BSResult",
    "black_scholes_call",
    "black_scholes_greeks",
    "black_scholes_price",
    "black_scholes_put",
    "implied_volatility",
    "put_call_parity_check",
]
