from __future__ import annotations

import logging
import math

from .core import MarketParameters, Payoff
from .exceptions import InvalidContractParameters, InvalidMarketParameters

__all__ = ["normal_cdf", "d1", "d2", "price", "delta", "implied_vol"]

logger = logging.getLogger(__name__)

_SQRT2 = math.sqrt(2.0)


def normal_cdf(x: float) -> float:
    """Standard normal CDF via the error function."""
    return 0.5 * (1.0 + math.erf(x / _SQRT2))


def _d1_d2(S, K, T, r, sigma):
    if T <= 0 or sigma <= 0:
        raise InvalidMarketParameters(
            f"Black-Scholes needs sigma > 0 and T > 0, got sigma={sigma}, T={T}"
        )
    rt = sigma * math.sqrt(T)
    d_1 = (math.log(S / K) + (r + 0.5 * sigma * sigma) * T) / rt
    return d_1, d_1 - rt


def d1(payoff: Payoff, params: MarketParameters) -> float:
    return _d1_d2(params.spot, payoff.strike, params.maturity, params.rate, params.sigma)[0]


def d2(payoff: Payoff, params: MarketParameters) -> float:
    return _d1_d2(params.spot, payoff.strike, params.maturity, params.rate, params.sigma)[1]


def price(payoff: Payoff, params: MarketParameters) -> float:
    """Closed-form Black-Scholes value of a European call or put."""
    S, K = params.spot, payoff.strike
    k1, k2 = _d1_d2(S, K, params.maturity, params.rate, params.sigma)
    disc = params.discount_factor()
    if payoff.is_call:
        px = S * normal_cdf(k1) - K * disc * normal_cdf(k2)
    else:
        px = K * disc * normal_cdf(-k2) - S * normal_cdf(-k1)
    logger.debug("bs price kind=%s K=%g -> %.10f", payoff.kind.value, K, px)
    return px


def delta(payoff: Payoff, params: MarketParameters) -> float:
    """dPrice/dSpot: ``N(d1)`` for a call, ``N(d1) - 1`` for a put."""
    k1, _ = _d1_d2(params.spot, payoff.strike, params.maturity, params.rate, params.sigma)
    n1 = normal_cdf(k1)
    return n1 if payoff.is_call else n1 - 1.0


def implied_vol(payoff: Payoff, params: MarketParameters, target_price: float,
                *, tol: float = 1e-10, maxiter: int = 200, bracket=(1e-6, 5.0)) -> float:
    """Brent root find on sigma; ``params.sigma`` is ignored.

    Raises
    ------
    InvalidContractParameters
        If *target_price* is outside the open no-arbitrage band for the
        contract, where no volatility reproduces it.
    """
    from scipy.optimize import brentq

    if params.maturity <= 0:
        raise InvalidMarketParameters(f"maturity must be positive, got {params.maturity}")
    S, K = params.spot, payoff.strike
    disc_K = K * params.discount_factor()
    if payoff.is_call:
        lo, hi = max(S - disc_K, 0.0), S
    else:
        lo, hi = max(disc_K - S, 0.0), disc_K
    if not (lo < target_price < hi):
        raise InvalidContractParameters(
            f"target price {target_price} outside no-arbitrage bounds ({lo:.6g}, {hi:.6g})"
        )

    def f(sig):
        return price(payoff, params.replace(sigma=sig)) - target_price

    a, b = bracket
    if f(a) * f(b) > 0:
        # widen bracket heuristically
        a, b = 1e-8, max(10.0, 2 * b)
        if f(a) * f(b) > 0:
            raise InvalidMarketParameters(
                f"no volatility in [{a:g}, {b:g}] reproduces target price {target_price}"
            )
    return float(brentq(f, a, b, xtol=tol, maxiter=maxiter))
