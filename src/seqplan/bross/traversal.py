from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from seqplan.bross.decision_map import MAP_SIZE, DecisionMap, load_bross_map
from seqplan.bross.errors import InvalidInputError, OutOfBoundsError
from seqplan.bross.pairs import informative_mask, informative_pairs, validate_pairs
from seqplan.bross.schema import DecisionCode, Position, RegionCode, TraversalResult

logger = logging.getLogger(__name__)

_CONCLUSIVE = {
    int(RegionCode.NO_DIFFERENCE): DecisionCode.NO_DIFFERENCE,
    int(RegionCode.A_BETTER): DecisionCode.A_BETTER,
    int(RegionCode.B_BETTER): DecisionCode.B_BETTER,
}


def _step(pos: Position, a: int) -> Position:
    """A preference moves one row up, B preference one column right."""
    if a == 1:
        nxt = Position(row=pos.row - 1, col=pos.col)
    else:
        nxt = Position(row=pos.row, col=pos.col + 1)
    if not (1 <= nxt.row <= MAP_SIZE and 1 <= nxt.col <= MAP_SIZE):
        raise OutOfBoundsError(f"step from ({pos.row}, {pos.col}) leaves the {MAP_SIZE}x{MAP_SIZE} map")
    return nxt


def run_traversal(pairs, decision_map: Optional[DecisionMap] = None) -> TraversalResult:
    """Walk the decision map with informative pairs, in order.

    The walk stops at the first no-difference / A-better / B-better cell,
    which is marked as a boundary. Running out of pairs inside the twilight
    zone gives TWILIGHT, and the last cell is marked as a boundary too.
    Every other visited cell gets the path marker. An empty input returns a
    result with `decision=None` and no grid. Anything that is not an N-by-2
    matrix of 0/1 values raises InvalidInputError.
    """
    arr = validate_pairs(pairs, allow_empty=True)
    n = int(len(arr))
    if n == 0:
        return TraversalResult(decision=None, grid=None)
    if not np.all(informative_mask(arr)):
        raise InvalidInputError("run_traversal expects informative pairs only (A != B)")

    dmap = decision_map if decision_map is not None else load_bross_map()
    grid = dmap.initial_grid()
    pos = dmap.starting_position()

    decision: Optional[DecisionCode] = None
    path: List[Position] = []
    consumed = 0

    for k in range(1, n + 1):
        pos = _step(pos, int(arr[k - 1, 0]))
        path.append(pos)
        consumed = k

        idx = pos.as_index()
        region = int(grid[idx])

        if region in _CONCLUSIVE:
            decision = _CONCLUSIVE[region]
            grid[idx] = int(RegionCode.BOUNDARY)
            break

        grid[idx] = int(RegionCode.PATH)
        if region == int(RegionCode.TWILIGHT):
            decision = DecisionCode.TWILIGHT
            if k == n:
                grid[idx] = int(RegionCode.BOUNDARY)

    stopped_early = consumed < n
    if stopped_early:
        logger.debug("walk stopped at pair %d of %d with %s", consumed, n, decision)

    return TraversalResult(
        decision=decision,
        grid=grid,
        path=path,
        n_pairs=n,
        n_informative=n,
        n_consumed=consumed,
        stopped_early=stopped_early,
    )


def seqanalysis(x, decision_map: Optional[DecisionMap] = None) -> TraversalResult:
    """One-shot Bross analysis of an N-by-2 matrix of 0/1 responses."""
    pairs = validate_pairs(x)
    informative = informative_pairs(pairs)

    res = run_traversal(informative, decision_map=decision_map)
    res.n_pairs = int(len(pairs))
    res.n_informative = int(len(informative))
    if res.decision is None and len(informative) == 0:
        res.warnings.append("No informative pairs available. Analysis cannot proceed.")
    return res
