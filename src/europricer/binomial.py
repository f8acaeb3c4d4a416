from __future__ import annotations

import logging
import math

import numpy as np

from .core import MarketParameters, Payoff, validate_count
from .exceptions import InvalidMarketParameters

__all__ = ["binomial_price", "crr_parameters"]

logger = logging.getLogger(__name__)


def crr_parameters(params: MarketParameters, N: int) -> tuple[float, float, float, float, float]:
    """Cox-Ross-Rubinstein ``(dt, u, d, disc, p)`` for an ``N``-step lattice."""
    N = validate_count("step_count", N)
    params.require_nondegenerate()
    dt = params.maturity / N
    u = math.exp(params.sigma * math.sqrt(dt))
    d = 1.0 / u
    disc = math.exp(-params.rate * dt)
    p = (math.exp(params.rate * dt) - d) / (u - d)
    if not (0.0 < p < 1.0):
        raise InvalidMarketParameters(
            f"Risk-neutral prob p={p:.6g} out of (0,1); try larger step_count or different params."
        )
    return dt, u, d, disc, p


def binomial_price(payoff: Payoff, params: MarketParameters, step_count: int = 200) -> float:
    """Cox-Ross-Rubinstein recombining tree, European exercise."""
    N = validate_count("step_count", step_count)
    dt, u, d, disc, p = crr_parameters(params, N)
    logger.debug("crr N=%d dt=%.6g u=%.8f d=%.8f p=%.8f", N, dt, u, d, p)

    # Payoff at maturity; S*u^j*d^(N-j) taken in log space so large N cannot overflow
    j = np.arange(N + 1)
    ST = params.spot * np.exp((2 * j - N) * params.sigma * math.sqrt(dt))
    V = np.asarray(payoff.payoff(ST), dtype=float)

    # Backward induction
    for _ in range(N - 1, -1, -1):
        V = disc * (p * V[1:] + (1.0 - p) * V[:-1])

    px = float(V[0])
    logger.debug("crr price kind=%s K=%g N=%d -> %.10f", payoff.kind.value, payoff.strike, N, px)
    return px
