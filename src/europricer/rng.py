# rng.py
# Explicit, caller-owned source of standard-normal draws for Monte Carlo.
# Never shared implicitly: each pricing call receives the source it consumes,
# so seeding and parallel partitioning stay under the caller's control.

from __future__ import annotations

import numpy as np

from .core import validate_count
from .exceptions import InvalidIterationCount

__all__ = ["GaussianSource"]


class GaussianSource:
    """Seedable generator of independent N(0, 1) variates.

    Parameters
    ----------
    seed : int | numpy.random.SeedSequence | None
        Seed for the underlying PCG64 generator.  ``None`` draws fresh OS
        entropy, so results are then not reproducible.

    Notes
    -----
    ``sample_many(n)`` consumes the stream exactly like ``n`` calls to
    ``sample()``.  Instances are not thread-safe; give each thread or worker
    its own source (see :meth:`spawn`).
    """

    def __init__(self, seed: int | np.random.SeedSequence | None = None):
        if isinstance(seed, np.random.SeedSequence):
            self._seq = seed
        else:
            if seed is not None and (isinstance(seed, bool)
                                     or not isinstance(seed, (int, np.integer)) or seed < 0):
                raise InvalidIterationCount(f"seed must be a non-negative integer, got {seed!r}")
            self._seq = np.random.SeedSequence(seed)
        self._gen = np.random.default_rng(self._seq)
        self._draws = 0

    def __repr__(self) -> str:
        return f"GaussianSource(entropy={self._seq.entropy!r}, draws={self._draws})"

    @property
    def draws(self) -> int:
        """Number of variates drawn so far."""
        return self._draws

    @property
    def seed_sequence(self) -> np.random.SeedSequence:
        return self._seq

    def sample(self) -> float:
        self._draws += 1
        return float(self._gen.standard_normal())

    def sample_many(self, n: int) -> np.ndarray:
        n = validate_count("n", n)
        self._draws += n
        return self._gen.standard_normal(n)

    def spawn(self, n: int) -> list[GaussianSource]:
        """Independent child sources derived from this source's seed sequence."""
        n = validate_count("n", n)
        return [GaussianSource(child) for child in self._seq.spawn(n)]
