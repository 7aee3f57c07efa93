"""Robustness of the Bross decision to the order of pairs.

The decision of a sequential walk depends on which informative pairs arrive
first. `run_order_check` permutes the rows of the pair matrix many times,
re-runs the walk on each permutation and reports how often each decision
came out, with exact (Clopper-Pearson) binomial intervals.
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from tqdm import tqdm

from seqplan.bross.decision_map import DecisionMap, load_bross_map
from seqplan.bross.errors import InvalidArgumentError
from seqplan.bross.intervals import clopper_pearson
from seqplan.bross.pairs import informative_pairs, pair_summary, validate_pairs
from seqplan.bross.schema import (
    OUTCOME_CATEGORIES,
    OUTCOME_LABELS,
    DecisionCode,
    OrderCheckConfig,
    OrderCheckResult,
    codes_to_array,
)
from seqplan.bross.traversal import run_traversal

logger = logging.getLogger(__name__)

Decision = Optional[DecisionCode]
IntervalFn = Callable[[int, int, float], Tuple[float, float]]

# Permutations per process-pool task.
CHUNK_SIZE = 50


def _check_n_perm(n_perm: int) -> int:
    if isinstance(n_perm, bool) or int(n_perm) != n_perm or n_perm < 1:
        raise InvalidArgumentError(f"n_perm must be a positive integer, got {n_perm!r}")
    return int(n_perm)


def _check_alpha(alpha: float) -> float:
    if not 0 < float(alpha) < 1:
        raise InvalidArgumentError(f"alpha must be in (0, 1), got {alpha!r}")
    return float(alpha)


def chunk_sizes(n_perm: int, chunk_size: int = CHUNK_SIZE) -> List[int]:
    """Split `n_perm` runs into chunks of `chunk_size` (the last one shorter)."""
    full, rest = divmod(int(n_perm), int(chunk_size))
    return [int(chunk_size)] * full + ([rest] if rest else [])


def _run_chunk(pairs: np.ndarray, size: int, rng: np.random.Generator, dmap: DecisionMap, bar=None) -> List[Decision]:
    """Permute all rows, then filter, then walk; `size` times."""
    out: List[Decision] = []
    n = len(pairs)
    for _ in range(size):
        shuffled = pairs[rng.permutation(n)]
        out.append(run_traversal(informative_pairs(shuffled), decision_map=dmap).decision)
        if bar is not None:
            bar.update(1)
    return out


def permutation_codes(
    x,
    n_perm: int,
    rng: Optional[np.random.Generator] = None,
    *,
    decision_map: Optional[DecisionMap] = None,
    show_progress: bool = False,
    n_jobs: int = 1,
) -> List[Decision]:
    """Decision of the walk for `n_perm` independent random orderings of `x`.

    With `n_jobs > 1` the permutations are split into small chunks of at most
    `CHUNK_SIZE` runs that execute on a process pool, each chunk drawing from
    its own child generator. The merged list keeps chunk order. If a chunk
    fails (or the caller interrupts), chunks that have not started are
    cancelled and the error is re-raised.
    """
    n_perm = _check_n_perm(n_perm)
    if isinstance(n_jobs, bool) or int(n_jobs) != n_jobs or n_jobs < 1:
        raise InvalidArgumentError(f"n_jobs must be a positive integer, got {n_jobs!r}")
    pairs = validate_pairs(x)
    rng = rng if rng is not None else np.random.default_rng()
    dmap = decision_map if decision_map is not None else load_bross_map()

    with tqdm(total=n_perm, desc="seqanalysis permutations", unit="perm", disable=not show_progress) as bar:
        if n_jobs == 1:
            return _run_chunk(pairs, n_perm, rng, dmap, bar=bar)

        sizes = chunk_sizes(n_perm)
        seeds = np.random.SeedSequence(int(rng.integers(0, 2**63 - 1))).spawn(len(sizes))
        chunks: List[List[Decision]] = [[] for _ in sizes]

        pool = ProcessPoolExecutor(max_workers=min(int(n_jobs), len(sizes)))
        try:
            futures = {
                pool.submit(_run_chunk, pairs, size, np.random.default_rng(seed), dmap): i
                for i, (size, seed) in enumerate(zip(sizes, seeds))
            }
            for fut in as_completed(futures):
                i = futures[fut]
                chunks[i] = fut.result()
                bar.update(len(chunks[i]))
                logger.debug("permutation chunk %d/%d done (%d runs)", i + 1, len(sizes), len(chunks[i]))
        except BaseException:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown()

    return [d for chunk in chunks for d in chunk]


def _as_decision(value) -> Decision:
    if value is None:
        return None
    if isinstance(value, DecisionCode):
        return value
    v = float(value)
    if np.isnan(v):
        return None
    try:
        return DecisionCode(int(v))
    except ValueError as e:
        raise InvalidArgumentError(f"unknown decision code {value!r}") from e


def summarize_codes(
    results: Sequence,
    alpha: float = 0.05,
    ci_fn: IntervalFn = clopper_pearson,
) -> pd.DataFrame:
    """Count, proportion and exact CI for each of the five outcome categories."""
    alpha = _check_alpha(alpha)
    decisions = [_as_decision(r) for r in results]
    total = len(decisions)
    counts = Counter(decisions)

    rows = []
    for cat, label in zip(OUTCOME_CATEGORIES, OUTCOME_LABELS):
        k = int(counts.get(cat, 0))
        if total > 0:
            lo, hi = ci_fn(k, total, alpha)
            prop = k / total
        else:
            lo, hi = (0.0, 1.0)
            prop = 0.0
        rows.append(
            {
                "Code": np.nan if cat is None else float(cat.value),
                "Count": k,
                "Proportion": float(prop),
                "Lower_CI": float(lo),
                "Upper_CI": float(hi),
            }
        )

    freq = pd.DataFrame(rows, index=pd.Index(OUTCOME_LABELS, name="Outcome"))
    if int(freq["Count"].sum()) != total:
        raise RuntimeError("outcome counts do not add up to the number of runs")
    return freq


def run_order_check(
    x,
    cfg: OrderCheckConfig = OrderCheckConfig(),
    *,
    decision_map: Optional[DecisionMap] = None,
    rng: Optional[np.random.Generator] = None,
) -> OrderCheckResult:
    """Monte Carlo order-robustness check of the Bross decision."""
    cfg.validate()
    pairs = validate_pairs(x)
    rng = rng if rng is not None else np.random.default_rng(int(cfg.seed))

    decisions = permutation_codes(
        pairs,
        cfg.n_perm,
        rng,
        decision_map=decision_map,
        show_progress=cfg.show_progress,
        n_jobs=cfg.n_jobs,
    )
    freq = summarize_codes(decisions, alpha=cfg.alpha)

    warnings: List[str] = []
    summary = pair_summary(pairs)
    if summary["n_informative"] == 0:
        warnings.append("All pairs are non-informative; every permutation returned NoInfo.")
    if cfg.n_perm < 100:
        warnings.append(f"n_perm={cfg.n_perm} is small; proportions and intervals are coarse.")

    modal = str(freq["Count"].idxmax())
    return OrderCheckResult(
        codes=codes_to_array(decisions),
        freq=freq,
        alpha=float(cfg.alpha),
        diagnostics={
            **summary,
            "n_perm": int(cfg.n_perm),
            "seed": int(cfg.seed),
            "n_jobs": int(cfg.n_jobs),
            "modal_outcome": modal,
            "modal_share": float(freq.loc[modal, "Proportion"]),
        },
        warnings=warnings,
    )
