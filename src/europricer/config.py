from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from .core import validate_count
from .exceptions import InvalidIterationCount

__all__ = ["PricingConfig"]


@dataclass(frozen=True)
class PricingConfig:
    """Resolution and seeding defaults shared by the CLI and validation helpers.

    The defaults reproduce the reference demo run: one million Monte Carlo
    paths and a 200-step tree.
    """
    path_count: int = 1_000_000
    step_count: int = 200
    seed: int | None = None
    chunk_size: int = 100_000
    n_workers: int = 1

    def __post_init__(self) -> None:
        for name in ("path_count", "step_count", "chunk_size", "n_workers"):
            validate_count(name, getattr(self, name))
        if self.seed is not None:
            if isinstance(self.seed, bool) or not isinstance(self.seed, int):
                raise InvalidIterationCount(f"seed must be an integer or None, got {self.seed!r}")
            if self.seed < 0:
                raise InvalidIterationCount(f"seed must be non-negative, got {self.seed}")

    @classmethod
    def from_env(cls, prefix: str = "EUROPRICER_",
                 environ: Mapping[str, str] | None = None) -> PricingConfig:
        """Build a config from ``<prefix><FIELD>`` variables, e.g. ``EUROPRICER_SEED``."""
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(prefix + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[f.name] = int(raw.replace("_", ""))
            except ValueError:
                raise InvalidIterationCount(
                    f"{prefix + f.name.upper()} must be an integer, got {raw!r}"
                ) from None
        return cls(**overrides)
