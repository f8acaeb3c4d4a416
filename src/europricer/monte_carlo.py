# europricer/monte_carlo.py

from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

import numpy as np

from .core import MarketParameters, Payoff, validate_count
from .rng import GaussianSource

__all__ = [
    "MonteCarloResult",
    "monte_carlo_price",
    "monte_carlo_estimate",
    "monte_carlo_price_parallel",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonteCarloResult:
    """Discounted sample mean and its estimated standard error."""
    price: float
    stderr: float
    n_paths: int


# ---- helpers: terminal-only simulation, no path storage ----

def _plan_chunks(n: int, chunk_size: int) -> list[int]:
    chunks = []
    remaining = n
    while remaining > 0:
        m = min(chunk_size, remaining)
        chunks.append(m)
        remaining -= m
    return chunks


def _chunk_sumstats(payoff: Payoff, params: MarketParameters, z: np.ndarray):
    """
    Map standard normals to exact risk-neutral GBM terminal prices
        S_T = S * exp((r - sigma^2/2) T + sigma sqrt(T) z)
    and return the sufficient statistics (n, sum payoff, sum payoff^2).
    """
    T, sigma = params.maturity, params.sigma
    mu = (params.rate - 0.5 * sigma * sigma) * T
    sig = sigma * math.sqrt(T)
    ST = params.spot * np.exp(mu + sig * z)
    X = payoff.payoff(ST)
    return z.size, float(X.sum()), float((X * X).sum())


def _chunk_worker(m: int, payoff: Payoff, params: MarketParameters,
                  seed: np.random.SeedSequence):
    # independent stream per chunk
    rng = GaussianSource(seed)
    return _chunk_sumstats(payoff, params, rng.sample_many(m))


def _finalise(stats_list, params: MarketParameters) -> MonteCarloResult:
    n = sum(s[0] for s in stats_list)
    sumX = sum(s[1] for s in stats_list)
    sumX2 = sum(s[2] for s in stats_list)
    df = params.discount_factor()

    meanX = sumX / n
    varX = max(0.0, (sumX2 - n * meanX * meanX) / (n - 1)) if n > 1 else 0.0
    return MonteCarloResult(
        price=df * meanX,
        stderr=df * math.sqrt(varX / n),
        n_paths=n,
    )


# ---- public API ----

def monte_carlo_estimate(
    payoff: Payoff,
    params: MarketParameters,
    rng: GaussianSource,
    path_count: int,
    *,
    chunk_size: int = 100_000,
) -> MonteCarloResult:
    """
    European option Monte Carlo under risk-neutral GBM (terminal-only).

    Draws exactly `path_count` normals from `rng`, in blocks of at most
    `chunk_size` to cap memory; the block size does not change the draw
    sequence.  Returns the discounted sample mean with its standard error.
    """
    n = validate_count("path_count", path_count)
    chunk_size = validate_count("chunk_size", chunk_size)
    params.require_nondegenerate()

    stats_list = [
        _chunk_sumstats(payoff, params, rng.sample_many(m))
        for m in _plan_chunks(n, chunk_size)
    ]
    result = _finalise(stats_list, params)
    logger.debug(
        "mc kind=%s K=%g n=%d -> %.10f (stderr %.3g)",
        payoff.kind.value, payoff.strike, n, result.price, result.stderr,
    )
    return result


def monte_carlo_price(
    payoff: Payoff,
    params: MarketParameters,
    rng: GaussianSource,
    path_count: int,
    *,
    chunk_size: int = 100_000,
) -> float:
    """Discounted sample mean ``exp(-rT) * mean(payoff(S_T))`` over `path_count` draws."""
    return monte_carlo_estimate(payoff, params, rng, path_count, chunk_size=chunk_size).price


def monte_carlo_price_parallel(
    payoff: Payoff,
    params: MarketParameters,
    path_count: int,
    *,
    seed: int | None = None,
    n_workers: int | None = None,
    chunk_size: int = 100_000,
) -> MonteCarloResult:
    """
    Partitioned Monte Carlo: each chunk of `path_count` gets its own child
    stream from ``SeedSequence(seed).spawn``, partial sums are added and
    divided by `path_count` once.

    For a fixed `seed` and `chunk_size` the result does not depend on
    `n_workers`; it is *not* bit-identical to `monte_carlo_price` run on a
    single ``GaussianSource(seed)``.

    Notes:
    - Uses a process pool when n_workers > 1; in notebooks prefer n_workers=1.
    - n_workers=None uses ``os.cpu_count()``.
    """
    n = validate_count("path_count", path_count)
    chunk_size = validate_count("chunk_size", chunk_size)
    if n_workers is None:
        n_workers = os.cpu_count() or 1
    n_workers = validate_count("n_workers", n_workers)
    params.require_nondegenerate()

    chunks = _plan_chunks(n, chunk_size)
    child_seeds = [src.seed_sequence for src in GaussianSource(seed).spawn(len(chunks))]
    logger.debug("mc parallel n=%d chunks=%d workers=%d", n, len(chunks), n_workers)

    if n_workers == 1 or len(chunks) == 1:
        stats_list = [
            _chunk_worker(m, payoff, params, ss) for m, ss in zip(chunks, child_seeds)
        ]
    else:
        with ProcessPoolExecutor(max_workers=min(n_workers, len(chunks))) as ex:
            futs = [
                ex.submit(_chunk_worker, m, payoff, params, ss)
                for m, ss in zip(chunks, child_seeds)
            ]
            # collect in submission order so the float sums are reproducible
            stats_list = [f.result() for f in futs]

    return _finalise(stats_list, params)
