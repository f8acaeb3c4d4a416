"""Cross-method benchmarking and convergence analysis.

The closed-form Black-Scholes price is the reference; the binomial tree and
Monte Carlo engines are checked against it, either at a single resolution
(:func:`cross_validate`) or across a sweep (:func:`convergence_analysis`).
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .binomial import binomial_price
from .black_scholes import price as bs_price
from .config import PricingConfig
from .core import MarketParameters, Payoff
from .monte_carlo import monte_carlo_estimate, monte_carlo_price, monte_carlo_price_parallel
from .rng import GaussianSource

__all__ = [
    "METHODS",
    "cross_validate",
    "convergence_analysis",
]

logger = logging.getLogger(__name__)

METHODS = ("bs", "mc", "tree")


# ---------------------------------------------------------------------------
# Cross-model benchmarking
# ---------------------------------------------------------------------------

def cross_validate(
    payoff: Payoff,
    params: MarketParameters,
    *,
    methods: Sequence[str] = METHODS,
    config: Optional[PricingConfig] = None,
    rng: Optional[GaussianSource] = None,
) -> dict:
    """Price one contract with every requested method.

    Parameters
    ----------
    payoff : Payoff
    params : MarketParameters
    methods : sequence of str
        Subset of ``{"bs", "mc", "tree"}``.  Default: all.
    config : PricingConfig, optional
        Path/step counts and seed.  Default: ``PricingConfig()``.
    rng : GaussianSource, optional
        Source consumed by Monte Carlo.  Default: a fresh source seeded from
        ``config.seed``.  Ignored when ``config.n_workers > 1``, where
        independent per-chunk streams are derived from ``config.seed``.

    Returns
    -------
    dict
        ``"bs"``, ``"mc"`` (price, stderr), ``"tree"``, ``"max_discrepancy"``
        (vs BS, NaN when BS was not requested).
    """
    unknown = set(methods) - set(METHODS)
    if unknown:
        raise ValueError(f"Unknown method(s): {sorted(unknown)}")
    cfg = config or PricingConfig()

    results: dict = {}

    if "bs" in methods:
        results["bs"] = bs_price(payoff, params)

    if "mc" in methods:
        if cfg.n_workers > 1:
            est = monte_carlo_price_parallel(
                payoff, params, cfg.path_count, seed=cfg.seed,
                n_workers=cfg.n_workers, chunk_size=cfg.chunk_size,
            )
        else:
            src = rng if rng is not None else GaussianSource(cfg.seed)
            est = monte_carlo_estimate(payoff, params, src, cfg.path_count,
                                       chunk_size=cfg.chunk_size)
        results["mc"] = (est.price, est.stderr)

    if "tree" in methods:
        results["tree"] = binomial_price(payoff, params, cfg.step_count)

    # Compute max discrepancy versus BS
    ref = results.get("bs")
    if ref is not None:
        discs = []
        for k, v in results.items():
            if k == "bs":
                continue
            p = v[0] if isinstance(v, tuple) else v
            discs.append(abs(p - ref))
        results["max_discrepancy"] = max(discs) if discs else 0.0
    else:
        results["max_discrepancy"] = float("nan")

    logger.info("cross_validate kind=%s K=%g: %s", payoff.kind.value, payoff.strike, results)
    return results


# ---------------------------------------------------------------------------
# Convergence analysis
# ---------------------------------------------------------------------------

def convergence_analysis(
    payoff: Payoff,
    params: MarketParameters,
    method: str,
    param_values: Sequence[int] | np.ndarray,
    *,
    seed: int = 42,
    reference: Optional[float] = None,
) -> dict:
    """Analyse convergence of a numerical method as its resolution grows.

    Parameters
    ----------
    method : str
        ``"mc"`` (values are path counts) or ``"tree"`` (step counts).
    param_values : array-like of int
        Resolutions to test.
    seed : int
        Each Monte Carlo run uses a fresh ``GaussianSource(seed)``.
    reference : float, optional
        True price for error computation.  Default: BS analytical.

    Returns
    -------
    dict
        ``"params"``, ``"prices"``, ``"errors"``, ``"order"`` (estimated).
    """
    param_values = [int(v) for v in param_values]

    if reference is None:
        reference = bs_price(payoff, params)

    prices = []
    for val in param_values:
        if method == "mc":
            p = monte_carlo_price(payoff, params, GaussianSource(seed), val)
        elif method == "tree":
            p = binomial_price(payoff, params, val)
        else:
            raise ValueError(f"Unknown method: {method}")
        prices.append(float(p))

    errors = [abs(p - reference) for p in prices]

    # Estimate convergence order from log-log regression
    order = float("nan")
    valid = [(v, e) for v, e in zip(param_values, errors) if e > 0]
    if len(valid) >= 2:
        log_v = np.log([v for v, _ in valid])
        log_e = np.log([e for _, e in valid])
        # error ~ C / v^order  => log(e) = -order * log(v) + const
        coeffs = np.polyfit(log_v, log_e, 1)
        order = -float(coeffs[0])

    return {
        "params": param_values,
        "prices": prices,
        "errors": errors,
        "order": order,
    }
