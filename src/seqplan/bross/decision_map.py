from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources

import numpy as np

from seqplan.bross.errors import InvalidMapError
from seqplan.bross.schema import Position, RegionCode
from seqplan.io.reader import read_map_csv

MAP_SIZE = 31
START_POSITION = Position(row=30, col=1)

ALLOWED_CODES = frozenset(int(c.value) for c in RegionCode)


def validate_grid(grid) -> np.ndarray:
    """Check shape and region codes; return an int copy of the grid."""
    arr = np.asarray(grid)
    if arr.shape != (MAP_SIZE, MAP_SIZE):
        raise InvalidMapError(f"decision map must be {MAP_SIZE}x{MAP_SIZE}, got shape {arr.shape}")

    try:
        values = arr.astype(float)
    except (TypeError, ValueError) as e:
        raise InvalidMapError(f"decision map must be numeric ({e})") from e
    if not np.all(np.isfinite(values)) or not np.all(values == np.round(values)):
        raise InvalidMapError("decision map must contain finite integer region codes")

    out = values.astype(int)
    bad = sorted(set(np.unique(out).tolist()) - ALLOWED_CODES)
    if bad:
        raise InvalidMapError(f"unknown region codes {bad}; allowed: {sorted(ALLOWED_CODES)}")
    return out


@dataclass(frozen=True, eq=False)
class DecisionMap:
    """Bross decision regions on a fixed 31x31 grid.

    Rows count down as A wins a pair, columns count right as B wins one.
    The canonical grid is read-only; every walk works on `initial_grid()`.
    """

    grid: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        arr = validate_grid(self.grid)
        arr.setflags(write=False)
        object.__setattr__(self, "grid", arr)

    @classmethod
    def from_csv(cls, path) -> "DecisionMap":
        return cls(grid=read_map_csv(path))

    def initial_grid(self) -> np.ndarray:
        return self.grid.copy()

    def starting_position(self) -> Position:
        return START_POSITION

    def region_at(self, pos: Position) -> RegionCode:
        return RegionCode(int(self.grid[pos.as_index()]))


@lru_cache(maxsize=1)
def load_bross_map() -> DecisionMap:
    """Load the shipped decision map (validated once per process).

    The grid is a reconstruction of the geometry of Bross' plan (a sloped
    twilight band between the A-better and B-better regions, closed by a
    no-difference wedge), not a copy of the published chart.
    """
    ref = resources.files("seqplan.bross").joinpath("data/bross_map.csv")
    with resources.as_file(ref) as path:
        return DecisionMap.from_csv(path)
