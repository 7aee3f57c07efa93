from __future__ import annotations

import sys
from typing import Any

import pandas as pd

from seqplan.bross.ordercheck import run_order_check
from seqplan.bross.reporting import make_order_check_plots, render_order_check_md
from seqplan.bross.schema import OrderCheckConfig
from seqplan.cli.bundle import (
    prepare_out_dir,
    save_plot,
    write_report_md,
    write_results_json,
    write_run_meta,
    write_table,
)
from seqplan.cli.commands.analyze import load_decision_map
from seqplan.io.reader import read_pairs_csv


def _warn(msg: str) -> None:
    print(f"[seqplan][warn] {msg}", file=sys.stderr)


def cmd_order_check(args) -> int:
    cfg = OrderCheckConfig(
        n_perm=int(getattr(args, "n_perm", 1000)),
        alpha=float(getattr(args, "alpha", 0.05)),
        show_progress=bool(getattr(args, "progress", False)),
        seed=int(getattr(args, "seed", 42)),
        n_jobs=int(getattr(args, "n_jobs", 1)),
    )
    cfg.validate()

    df = read_pairs_csv(args.input, a_col=getattr(args, "a_col", None), b_col=getattr(args, "b_col", None))
    dmap = load_decision_map(getattr(args, "map", None))

    res = run_order_check(df, cfg, decision_map=dmap)
    for w in res.warnings:
        _warn(w)

    out_dir = prepare_out_dir(getattr(args, "out", None), command="order-check")
    write_run_meta(out_dir, args, extra={"command": "order-check"})

    artifacts: dict[str, Any] = {"report_md": "report.md", "plots": [], "tables": []}
    artifacts["tables"].append(write_table(out_dir, "frequency", res.freq, index=True))
    codes = pd.DataFrame({"perm": range(1, len(res.codes) + 1), "code": res.codes})
    artifacts["tables"].append(write_table(out_dir, "codes", codes))
    for name, fig in make_order_check_plots(res).items():
        artifacts["plots"].append(save_plot(out_dir, name, fig))

    payload: dict[str, Any] = {
        "command": "order-check",
        "inputs": {
            "input": args.input,
            "n_perm": cfg.n_perm,
            "alpha": cfg.alpha,
            "seed": cfg.seed,
            "n_jobs": cfg.n_jobs,
        },
        "estimates": res.to_dict(),
        "warnings": res.warnings,
        "artifacts": artifacts,
    }

    write_results_json(out_dir, payload)
    write_report_md(out_dir, render_order_check_md(res))
    print(res.freq.to_string())
    return 0
