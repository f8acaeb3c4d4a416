from __future__ import annotations

import math
from dataclasses import dataclass, replace as _dc_replace
from enum import Enum
from typing import overload

import numpy as np

from .exceptions import (
    InvalidContractParameters,
    InvalidIterationCount,
    InvalidMarketParameters,
)

__all__ = [
    "OptionKind",
    "CALL",
    "PUT",
    "Payoff",
    "MarketParameters",
    "validate_count",
]


class OptionKind(str, Enum):
    """Vanilla contract type."""

    CALL = "call"
    PUT = "put"


CALL = OptionKind.CALL
PUT  = OptionKind.PUT


# ---------------------------------------------------------------------------
# Payoff: closed variant over {call, put}, each carrying its strike
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Payoff:
    """European call/put payoff at a fixed strike.

    Parameters
    ----------
    kind : OptionKind
        ``CALL`` or ``PUT`` (the strings ``"call"``/``"put"`` are accepted).
    strike : float
        Strike ``K``; must be finite and strictly positive.

    Notes
    -----
    Evaluation is vectorised: a scalar terminal price gives a Python float,
    an array gives an array of the same shape.  Negative terminal prices are
    a caller error and are not checked.
    """
    kind: OptionKind
    strike: float

    def __post_init__(self):
        try:
            kind = OptionKind(self.kind)
        except ValueError:
            raise InvalidContractParameters(
                f"kind must be 'call' or 'put', got {self.kind!r}"
            ) from None
        object.__setattr__(self, "kind", kind)
        try:
            strike = float(self.strike)
        except (TypeError, ValueError):
            raise InvalidContractParameters(
                f"strike must be a number, got {self.strike!r}"
            ) from None
        if not math.isfinite(strike) or strike <= 0.0:
            raise InvalidContractParameters(f"strike must be positive, got {self.strike}")
        object.__setattr__(self, "strike", strike)

    @classmethod
    def call(cls, strike: float) -> Payoff:
        return cls(OptionKind.CALL, strike)

    @classmethod
    def put(cls, strike: float) -> Payoff:
        return cls(OptionKind.PUT, strike)

    @property
    def is_call(self) -> bool:
        return self.kind is OptionKind.CALL

    @overload
    def payoff(self, ST: float) -> float: ...
    @overload
    def payoff(self, ST: np.ndarray) -> np.ndarray: ...

    def payoff(self, ST):
        if self.is_call:
            out = np.maximum(ST - self.strike, 0.0)
        else:
            out = np.maximum(self.strike - ST, 0.0)
        if np.ndim(out) == 0:
            return float(out)
        return out

    __call__ = payoff


# ---------------------------------------------------------------------------
# Market snapshot
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MarketParameters:
    """Black-Scholes market snapshot shared read-only by every pricer.

    Parameters
    ----------
    spot : float
        Current underlying price ``S`` (> 0).
    sigma : float
        Annualised volatility (>= 0).
    rate : float
        Continuously-compounded risk-free rate ``r``.
    maturity : float
        Time to expiry ``T`` in years (>= 0).

    ``sigma == 0`` and ``maturity == 0`` are representable but degenerate;
    each pricer rejects them at its entry point.
    """
    spot: float
    sigma: float
    rate: float
    maturity: float

    def __post_init__(self):
        for name in ("spot", "sigma", "rate", "maturity"):
            exc = InvalidContractParameters if name == "spot" else InvalidMarketParameters
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError):
                raise exc(f"{name} must be a number, got {getattr(self, name)!r}") from None
            if not math.isfinite(value):
                raise exc(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, value)
        if self.spot <= 0:
            raise InvalidContractParameters(f"spot must be positive, got {self.spot}")
        if self.sigma < 0:
            raise InvalidMarketParameters(f"sigma must be non-negative, got {self.sigma}")
        if self.maturity < 0:
            raise InvalidMarketParameters(f"maturity must be non-negative, got {self.maturity}")

    # short aliases matching the usual notation
    @property
    def S(self) -> float:
        return self.spot

    @property
    def r(self) -> float:
        return self.rate

    @property
    def T(self) -> float:
        return self.maturity

    def discount_factor(self) -> float:
        return math.exp(-self.rate * self.maturity)

    def replace(self, **changes) -> MarketParameters:
        """Return a shocked copy, e.g. ``params.replace(spot=110.0)``."""
        return _dc_replace(self, **changes)

    def require_nondegenerate(self) -> None:
        """Raise unless ``sigma > 0`` and ``maturity > 0``."""
        if self.sigma <= 0:
            raise InvalidMarketParameters(f"sigma must be positive, got {self.sigma}")
        if self.maturity <= 0:
            raise InvalidMarketParameters(f"maturity must be positive, got {self.maturity}")


def validate_count(name: str, value) -> int:
    """Return *value* as an ``int`` if it is a positive integer count."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidIterationCount(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidIterationCount(f"{name} must be positive, got {value}")
    return int(value)
