from __future__ import annotations

from typing import Tuple

from scipy.stats import beta

from seqplan.bross.errors import InvalidArgumentError


def clopper_pearson(k: int, n: int, alpha: float = 0.05) -> Tuple[float, float]:
    """Exact two-sided (1 - alpha) binomial CI for k successes in n trials."""
    if int(n) != n or n < 1:
        raise InvalidArgumentError(f"trials must be a positive integer, got {n!r}")
    if int(k) != k or not 0 <= k <= n:
        raise InvalidArgumentError(f"successes must be an integer in [0, {n}], got {k!r}")
    if not 0 < float(alpha) < 1:
        raise InvalidArgumentError(f"alpha must be in (0, 1), got {alpha!r}")

    k = int(k)
    n = int(n)
    a = float(alpha)
    lower = 0.0 if k == 0 else float(beta.ppf(a / 2, k, n - k + 1))
    upper = 1.0 if k == n else float(beta.ppf(1 - a / 2, k + 1, n - k))
    return (lower, upper)
