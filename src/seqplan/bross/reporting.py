from __future__ import annotations

from typing import Dict

import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.figure import Figure
import matplotlib.pyplot as plt

from seqplan.bross.schema import OrderCheckResult, RegionCode, TraversalResult

# One colour per RegionCode, in code order -1..4.
REGION_COLORS = [
    (1.0, 1.0, 0.0),
    (122 / 255, 15 / 255, 227 / 255),
    (1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0),
    (0.0, 1.0, 1.0),
    (0.0, 1.0, 0.0),
]


def _fmt(x: float) -> str:
    return f"{x:.4g}" if np.isfinite(x) else "(n/a)"


def render_traversal_md(result: TraversalResult) -> str:
    warn_block = ("- " + "\n- ".join(result.warnings)) if result.warnings else "(none)"
    if result.path:
        end = result.path[-1]
        end_str = f"row={end.row}, col={end.col}"
    else:
        end_str = "(n/a)"

    return f"""# seqplan Bross sequential analysis

## Inputs
- pairs: `{result.n_pairs}`
- informative pairs: `{result.n_informative}`

## Decision
- decision: **{result.message}**
- code: `{_fmt(result.code)}`
- informative pairs used: `{result.n_consumed}` of `{result.n_informative}`
- stopped before the last pair: **{"Yes" if result.stopped_early else "No"}**
- final cell: `{end_str}`

## Warnings
{warn_block}

## Artifacts
- tables/path.csv
- tables/decision_map.csv
- plots/decision_map.png
"""


def render_order_check_md(result: OrderCheckResult) -> str:
    d = result.diagnostics
    level = 100 * (1 - result.alpha)
    lines = ["| outcome | count | proportion | lower CI | upper CI |", "|---|---:|---:|---:|---:|"]
    for label, row in result.freq.iterrows():
        lines.append(
            f"| {label} | {int(row['Count'])} | {row['Proportion']:.4f} | {row['Lower_CI']:.4f} | {row['Upper_CI']:.4f} |"
        )
    table = "\n".join(lines)
    warn_block = ("- " + "\n- ".join(result.warnings)) if result.warnings else "(none)"

    return f"""# seqplan order-robustness check

## Inputs
- pairs: `{d.get("n_pairs")}` (informative: `{d.get("n_informative")}`)
- permutations: `{d.get("n_perm")}`
- alpha: `{result.alpha}` (Clopper-Pearson {level:.4g}% intervals)
- seed: `{d.get("seed")}`

## Outcome frequencies
{table}

- most frequent outcome: **{d.get("modal_outcome")}** ({100 * float(d.get("modal_share", np.nan)):.1f}% of permutations)

## Notes
- Each permutation shuffles all pairs, drops the non-informative ones and re-runs the walk.
- A conclusion that flips between permutations depends on the order in which pairs arrived.

## Warnings
{warn_block}

## Artifacts
- tables/frequency.csv
- tables/codes.csv
- plots/outcomes.png
"""


def make_decision_map_plot(result: TraversalResult) -> Figure:
    """Marked decision map, drawn row 1 at the top."""
    fig = plt.figure(figsize=(6, 6))
    ax = fig.add_subplot(111)
    if result.grid is not None:
        codes = [int(c.value) for c in RegionCode]
        cmap = ListedColormap(REGION_COLORS)
        norm = BoundaryNorm(np.arange(min(codes) - 0.5, max(codes) + 1.5), cmap.N)
        ax.pcolormesh(result.grid, cmap=cmap, norm=norm, edgecolors="k", linewidth=0.2)
        ax.invert_yaxis()
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(result.message)
    fig.tight_layout()
    return fig


def make_outcome_plot(result: OrderCheckResult) -> Figure:
    freq = result.freq
    p = freq["Proportion"].to_numpy(dtype=float)
    lo = freq["Lower_CI"].to_numpy(dtype=float)
    hi = freq["Upper_CI"].to_numpy(dtype=float)
    x = np.arange(len(freq))

    fig = plt.figure(figsize=(8, 4.5))
    ax = fig.add_subplot(111)
    ax.bar(x, p, color=[REGION_COLORS[0], REGION_COLORS[1], REGION_COLORS[2], REGION_COLORS[3], (0.6, 0.6, 0.6)])
    ax.errorbar(x, p, yerr=np.clip(np.vstack([p - lo, hi - p]), 0.0, None), fmt="none", ecolor="k", capsize=4)
    ax.set_xticks(x)
    ax.set_xticklabels(list(freq.index))
    ax.set_ylim(0.0, 1.0)
    ax.set_title("Decision over random pair orders")
    ax.set_ylabel("proportion of permutations")
    fig.tight_layout()
    return fig


def make_order_check_plots(result: OrderCheckResult) -> Dict[str, Figure]:
    return {"outcomes": make_outcome_plot(result)}
