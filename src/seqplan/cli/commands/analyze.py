from __future__ import annotations

import sys
from typing import Any

import pandas as pd

from seqplan.bross.decision_map import DecisionMap, load_bross_map
from seqplan.bross.pairs import pair_summary, validate_pairs
from seqplan.bross.reporting import make_decision_map_plot, render_traversal_md
from seqplan.bross.traversal import seqanalysis
from seqplan.cli.bundle import (
    prepare_out_dir,
    save_plot,
    write_report_md,
    write_results_json,
    write_run_meta,
    write_table,
)
from seqplan.io.reader import read_pairs_csv


def _warn(msg: str) -> None:
    print(f"[seqplan][warn] {msg}", file=sys.stderr)


def load_decision_map(path) -> DecisionMap:
    return DecisionMap.from_csv(path) if path else load_bross_map()


def cmd_analyze(args) -> int:
    df = read_pairs_csv(args.input, a_col=getattr(args, "a_col", None), b_col=getattr(args, "b_col", None))
    pairs = validate_pairs(df)
    dmap = load_decision_map(getattr(args, "map", None))

    res = seqanalysis(pairs, decision_map=dmap)
    for w in res.warnings:
        _warn(w)

    out_dir = prepare_out_dir(getattr(args, "out", None), command="analyze")
    write_run_meta(out_dir, args, extra={"command": "analyze"})

    artifacts: dict[str, Any] = {"report_md": "report.md", "plots": [], "tables": []}
    artifacts["tables"].append(write_table(out_dir, "path", res.path_frame()))
    grid = res.grid if res.grid is not None else dmap.initial_grid()
    artifacts["tables"].append(write_table(out_dir, "decision_map", pd.DataFrame(grid), header=False))
    artifacts["plots"].append(save_plot(out_dir, "decision_map", make_decision_map_plot(res)))

    payload: dict[str, Any] = {
        "command": "analyze",
        "inputs": {"input": args.input, "map": getattr(args, "map", None) or "bross (built-in)"},
        "pairs": pair_summary(pairs),
        "estimates": res.to_dict(),
        "warnings": res.warnings,
        "artifacts": artifacts,
    }

    write_results_json(out_dir, payload)
    write_report_md(out_dir, render_traversal_md(res))
    print(res.message)
    return 0
