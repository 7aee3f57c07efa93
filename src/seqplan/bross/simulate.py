from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from seqplan.bross.errors import InvalidArgumentError


@dataclass(frozen=True)
class PairSimConfig:
    n: int = 40
    p_a: float = 0.7
    p_b: float = 0.4
    seed: int = 42


def simulate_pairs(cfg: PairSimConfig) -> pd.DataFrame:
    """Generate matched-pair 0/1 responses to treatments A and B."""
    n = int(cfg.n)
    if n < 1:
        raise InvalidArgumentError(f"n must be >= 1, got {cfg.n!r}")
    for name, p in (("p_a", cfg.p_a), ("p_b", cfg.p_b)):
        if not 0.0 <= float(p) <= 1.0:
            raise InvalidArgumentError(f"{name} must be in [0, 1], got {p!r}")

    rng = np.random.default_rng(int(cfg.seed))
    a = (rng.random(n) < float(cfg.p_a)).astype(int)
    b = (rng.random(n) < float(cfg.p_b)).astype(int)
    return pd.DataFrame({"pair_id": np.arange(1, n + 1), "A": a, "B": b})
