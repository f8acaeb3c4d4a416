"""Error taxonomy for invalid pricing inputs.

Every condition here is a deterministic caller-input error raised at a
pricer's public entry point; nothing is retried.  All classes derive from
``ValueError`` so existing ``except ValueError`` handlers keep working.
"""

from __future__ import annotations

__all__ = [
    "PricingError",
    "InvalidMarketParameters",
    "InvalidIterationCount",
    "InvalidContractParameters",
]


class PricingError(ValueError):
    """Base class for every input-validation failure raised by europricer."""


class InvalidMarketParameters(PricingError):
    """Volatility or maturity unusable by a pricer.

    Raised when ``sigma <= 0`` or ``T <= 0`` reaches Black-Scholes, Monte
    Carlo or the binomial tree (``d1`` divides by ``sigma * sqrt(T)``), when a
    negative ``sigma``/``T`` is used to build :class:`MarketParameters`, or when
    the CRR risk-neutral probability falls outside ``(0, 1)``.
    """


class InvalidIterationCount(PricingError):
    """Non-positive (or non-integer) ``path_count`` / ``step_count``."""


class InvalidContractParameters(PricingError):
    """Non-positive or non-finite strike or spot."""
