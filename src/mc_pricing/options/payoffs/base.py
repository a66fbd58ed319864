"""
Instrument capability and terminal-spot payoffs.

The simulation engines only ever need two things from an instrument:
its maturity and its payoff at the terminal spot. Any object exposing
those satisfies :class:`Instrument`; the engines never inspect the variant.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

import numpy as np


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


@runtime_checkable
class Instrument(Protocol):
    """
    Capability consumed by the path engines.

    Implementations may also provide ``payoff_vectorized(spots)``; when
    present the engines use it for whole batches of terminal spots. It must
    produce identical results to calling ``payoff`` element by element.
    """

    @property
    def maturity(self) -> float:
        """Time to maturity in years."""
        ...

    def payoff(self, terminal_spot: float) -> float:
        """Payoff at maturity for one terminal spot."""
        ...


@dataclass(frozen=True)
class EuropeanOption:
    """
    European call or put, exercised only at maturity.

    Attributes
    ----------
    strike : float
        Strike price (K)
    maturity : float
        Time to maturity in years (T)
    option_type : OptionType
        CALL or PUT
    """

    strike: float
    maturity: float
    option_type: OptionType = OptionType.CALL

    def payoff(self, terminal_spot: float) -> float:
        """
        [T1] Call: max(S - K, 0). Put: max(K - S, 0).
        """
        if self.option_type == OptionType.CALL:
            return max(terminal_spot - self.strike, 0.0)
        return max(self.strike - terminal_spot, 0.0)

    def payoff_vectorized(self, terminal_spots: np.ndarray) -> np.ndarray:
        """Payoffs for an array of terminal spots."""
        if self.option_type == OptionType.CALL:
            return np.maximum(terminal_spots - self.strike, 0.0)
        return np.maximum(self.strike - terminal_spots, 0.0)

    @property
    def type_name(self) -> str:
        """Display name ("Call" or "Put")."""
        return self.option_type.value.capitalize()


def evaluate_payoffs(instrument: Instrument, terminal_spots: np.ndarray) -> np.ndarray:
    """
    Evaluate an instrument's payoff over a batch of terminal spots.

    Uses ``payoff_vectorized`` when the instrument provides it and falls
    back to a per-spot loop over ``payoff`` otherwise.

    Parameters
    ----------
    instrument : Instrument
        Payoff capability
    terminal_spots : np.ndarray
        Simulated terminal spots, shape (n,)

    Returns
    -------
    np.ndarray
        Undiscounted payoffs, shape (n,)
    """
    vectorized = getattr(instrument, "payoff_vectorized", None)
    if vectorized is not None:
        return np.asarray(vectorized(terminal_spots), dtype=np.float64)

    return np.fromiter(
        (instrument.payoff(float(s)) for s in terminal_spots),
        dtype=np.float64,
        count=len(terminal_spots),
    )
