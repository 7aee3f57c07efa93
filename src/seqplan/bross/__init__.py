"""Bross sequential analysis for paired binary outcomes.

This package provides:

* A fixed 31x31 decision map laid out like the Bross sequential plan. The
  shipped grid reconstructs the plan's geometry (start cell, twilight band,
  conclusive regions); its boundaries are not taken from the published chart
* A walk over the map driven by informative (A != B) pairs, stopping at the
  first conclusive region (no difference / A better / B better)
* An order-robustness check: Monte Carlo permutations of the pair order with
  exact Clopper-Pearson intervals for each outcome

Non-informative pairs (0-0, 1-1) are dropped before the walk. A run with no
informative pairs returns no decision (`None`, reported as NaN).
"""

from seqplan.bross.schema import (
    DecisionCode,
    OrderCheckConfig,
    OrderCheckResult,
    Position,
    RegionCode,
    TraversalResult,
)
from seqplan.bross.errors import (
    InvalidArgumentError,
    InvalidInputError,
    InvalidMapError,
    OutOfBoundsError,
    SeqPlanError,
)
from seqplan.bross.decision_map import DecisionMap, load_bross_map
from seqplan.bross.intervals import clopper_pearson
from seqplan.bross.traversal import run_traversal, seqanalysis
from seqplan.bross.ordercheck import permutation_codes, run_order_check, summarize_codes

__all__ = [
    "DecisionCode",
    "OrderCheckConfig",
    "OrderCheckResult",
    "Position",
    "RegionCode",
    "TraversalResult",
    "InvalidArgumentError",
    "InvalidInputError",
    "InvalidMapError",
    "OutOfBoundsError",
    "SeqPlanError",
    "DecisionMap",
    "load_bross_map",
    "clopper_pearson",
    "run_traversal",
    "seqanalysis",
    "permutation_codes",
    "run_order_check",
    "summarize_codes",
]
