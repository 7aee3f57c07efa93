from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from seqplan.bross.simulate import PairSimConfig, simulate_pairs
from seqplan.cli.bundle import prepare_out_dir, write_run_meta
from seqplan.cli.commands.analyze import cmd_analyze
from seqplan.cli.commands.order_check import cmd_order_check


def cmd_simulate(args) -> int:
    sim_cfg = PairSimConfig(
        n=int(getattr(args, "n", 40)),
        p_a=float(getattr(args, "p_a", 0.7)),
        p_b=float(getattr(args, "p_b", 0.4)),
        seed=int(getattr(args, "seed", 42)),
    )
    df = simulate_pairs(sim_cfg)

    out_dir = prepare_out_dir(getattr(args, "out", None), command="simulate")
    write_run_meta(out_dir, args, extra={"command": "simulate", "sim_config": sim_cfg})
    data_path = out_dir / "pairs.csv"
    df.to_csv(data_path, index=False)

    rc = cmd_analyze(SimpleNamespace(input=str(data_path), a_col="A", b_col="B", map=None, out=str(Path(out_dir) / "analyze")))
    if rc != 0:
        return rc

    return cmd_order_check(
        SimpleNamespace(
            input=str(data_path),
            a_col="A",
            b_col="B",
            map=None,
            n_perm=int(getattr(args, "n_perm", 1000)),
            alpha=float(getattr(args, "alpha", 0.05)),
            seed=sim_cfg.seed,
            n_jobs=int(getattr(args, "n_jobs", 1)),
            progress=bool(getattr(args, "progress", False)),
            out=str(Path(out_dir) / "order_check"),
        )
    )
