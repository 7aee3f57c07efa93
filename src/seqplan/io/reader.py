from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd


def read_pairs_csv(path: str, a_col: Optional[str] = None, b_col: Optional[str] = None) -> pd.DataFrame:
    """Read a pair matrix. Without column names, columns "A" and "B" are used if present, else the first two."""
    df = pd.read_csv(path)
    if a_col is None and b_col is None:
        if {"A", "B"} <= set(df.columns):
            return df[["A", "B"]]
        return df.iloc[:, :2]

    missing = [c for c in (a_col, b_col) if c is not None and c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Present columns: {list(df.columns)}")
    if a_col is None or b_col is None:
        raise ValueError("Provide both a_col and b_col, or neither.")
    return df[[a_col, b_col]]


def read_map_csv(path) -> np.ndarray:
    """Read a headerless decision map of integer region codes."""
    df = pd.read_csv(path, header=None)
    return df.to_numpy()
