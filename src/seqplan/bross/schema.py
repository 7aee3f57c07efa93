from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from seqplan.bross.errors import InvalidArgumentError


class RegionCode(int, Enum):
    """Cell values of a decision map (the last two are written by a walk)."""

    TWILIGHT = -1
    NO_DIFFERENCE = 0
    A_BETTER = 1
    B_BETTER = 2
    PATH = 3
    BOUNDARY = 4


class DecisionCode(int, Enum):
    TWILIGHT = -1
    NO_DIFFERENCE = 0
    A_BETTER = 1
    B_BETTER = 2


DECISION_MESSAGES: Dict[Optional[DecisionCode], str] = {
    DecisionCode.TWILIGHT: "Inconclusive: twilight zone",
    DecisionCode.NO_DIFFERENCE: "No difference between A and B",
    DecisionCode.A_BETTER: "A is better",
    DecisionCode.B_BETTER: "B is better",
    None: "No informative pairs",
}

# Fixed reporting order; None stands for "no informative pairs".
OUTCOME_CATEGORIES: Tuple[Optional[DecisionCode], ...] = (
    DecisionCode.TWILIGHT,
    DecisionCode.NO_DIFFERENCE,
    DecisionCode.A_BETTER,
    DecisionCode.B_BETTER,
    None,
)

OUTCOME_LABELS: Tuple[str, ...] = (
    "Twilight(-1)",
    "NoDiff(0)",
    "A_better(1)",
    "B_better(2)",
    "NoInfo(NaN)",
)


def decision_message(decision: Optional[DecisionCode]) -> str:
    return DECISION_MESSAGES[decision]


@dataclass(frozen=True)
class Position:
    """1-indexed (row, col) cell of a decision map."""

    row: int
    col: int

    def as_index(self) -> Tuple[int, int]:
        return (self.row - 1, self.col - 1)


@dataclass(frozen=True)
class OrderCheckConfig:
    n_perm: int = 1000
    alpha: float = 0.05
    show_progress: bool = False
    seed: int = 42
    n_jobs: int = 1

    def validate(self) -> None:
        if int(self.n_perm) != self.n_perm or self.n_perm < 1:
            raise InvalidArgumentError(f"n_perm must be a positive integer, got {self.n_perm!r}")
        if not 0 < float(self.alpha) < 1:
            raise InvalidArgumentError(f"alpha must be in (0, 1), got {self.alpha!r}")
        if int(self.n_jobs) != self.n_jobs or self.n_jobs < 1:
            raise InvalidArgumentError(f"n_jobs must be a positive integer, got {self.n_jobs!r}")


@dataclass
class TraversalResult:
    decision: Optional[DecisionCode]
    grid: Optional[np.ndarray]
    path: List[Position] = field(default_factory=list)

    n_pairs: int = 0
    n_informative: int = 0
    n_consumed: int = 0
    stopped_early: bool = False

    warnings: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return decision_message(self.decision)

    @property
    def code(self) -> float:
        """Numeric decision, NaN when no informative pairs were available."""
        return float(self.decision.value) if self.decision is not None else np.nan

    def path_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "step": np.arange(1, len(self.path) + 1),
                "row": [p.row for p in self.path],
                "col": [p.col for p in self.path],
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decision": int(self.decision.value) if self.decision is not None else None,
            "decision_label": self.decision.name if self.decision is not None else None,
            "message": self.message,
            "n_pairs": int(self.n_pairs),
            "n_informative": int(self.n_informative),
            "n_consumed": int(self.n_consumed),
            "stopped_early": bool(self.stopped_early),
            "path": [asdict(p) for p in self.path],
            "warnings": list(self.warnings),
        }


@dataclass
class OrderCheckResult:
    codes: np.ndarray
    freq: pd.DataFrame
    alpha: float

    diagnostics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def _row(self, label: str) -> pd.Series:
        return self.freq.loc[label]

    def _ci(self, label: str) -> Tuple[float, float]:
        row = self._row(label)
        return (float(row["Lower_CI"]), float(row["Upper_CI"]))

    @property
    def p_twilight(self) -> float:
        return float(self._row("Twilight(-1)")["Proportion"])

    @property
    def p_no_diff(self) -> float:
        return float(self._row("NoDiff(0)")["Proportion"])

    @property
    def p_a(self) -> float:
        return float(self._row("A_better(1)")["Proportion"])

    @property
    def p_b(self) -> float:
        return float(self._row("B_better(2)")["Proportion"])

    @property
    def p_nan(self) -> float:
        return float(self._row("NoInfo(NaN)")["Proportion"])

    @property
    def ci_twilight(self) -> Tuple[float, float]:
        return self._ci("Twilight(-1)")

    @property
    def ci_no_diff(self) -> Tuple[float, float]:
        return self._ci("NoDiff(0)")

    @property
    def ci_a(self) -> Tuple[float, float]:
        return self._ci("A_better(1)")

    @property
    def ci_b(self) -> Tuple[float, float]:
        return self._ci("B_better(2)")

    @property
    def ci_nan(self) -> Tuple[float, float]:
        return self._ci("NoInfo(NaN)")

    def to_dict(self) -> Dict[str, Any]:
        rows = [
            {
                "Outcome": str(label),
                "Code": None if not np.isfinite(row["Code"]) else int(row["Code"]),
                "Count": int(row["Count"]),
                "Proportion": float(row["Proportion"]),
                "Lower_CI": float(row["Lower_CI"]),
                "Upper_CI": float(row["Upper_CI"]),
            }
            for label, row in self.freq.iterrows()
        ]
        return {
            "n_perm": int(len(self.codes)),
            "alpha": float(self.alpha),
            "freq": rows,
            "diagnostics": dict(self.diagnostics),
            "warnings": list(self.warnings),
        }


def codes_to_array(decisions: Sequence[Optional[DecisionCode]]) -> np.ndarray:
    """Numeric code vector with NaN for runs that had no informative pairs."""
    return np.array([np.nan if d is None else float(d.value) for d in decisions], dtype=float)
