from __future__ import annotations

import numpy as np
import pandas as pd

from seqplan.bross.errors import InvalidInputError


def validate_pairs(x, allow_empty: bool = False) -> np.ndarray:
    """Return `x` as an N-by-2 int array of 0/1 responses (A, B).

    With `allow_empty=True` an empty input (`[]`, a 0-by-2 array) comes back
    as a 0-by-2 array instead of raising.
    """
    if isinstance(x, pd.DataFrame):
        x = x.to_numpy()

    try:
        arr = np.asarray(x, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"pairs must be numeric ({e})") from e

    if allow_empty and arr.shape in ((0,), (0, 2)):
        return np.empty((0, 2), dtype=int)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidInputError(f"pairs must be an N-by-2 matrix, got shape {arr.shape}")
    if arr.shape[0] == 0:
        raise InvalidInputError("pairs must not be empty")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError("pairs must not contain NaN or infinite values")
    if not np.all(np.isin(arr, (0.0, 1.0))):
        raise InvalidInputError("All pair values must be 0 or 1.")

    return arr.astype(int)


def informative_mask(pairs: np.ndarray) -> np.ndarray:
    return pairs[:, 0] != pairs[:, 1]


def informative_pairs(pairs: np.ndarray) -> np.ndarray:
    """Drop 0-0 and 1-1 pairs, keeping the order of the rest."""
    return pairs[informative_mask(pairs)]


def pair_summary(pairs: np.ndarray) -> dict[str, int]:
    """Counts of each pair type, for reports."""
    a = pairs[:, 0]
    b = pairs[:, 1]
    return {
        "n_pairs": int(len(pairs)),
        "n_informative": int(np.sum(a != b)),
        "a_only": int(np.sum((a == 1) & (b == 0))),
        "b_only": int(np.sum((a == 0) & (b == 1))),
        "both": int(np.sum((a == 1) & (b == 1))),
        "neither": int(np.sum((a == 0) & (b == 0))),
    }

