from __future__ import annotations

import argparse
import sys

from seqplan.bross.errors import SeqPlanError
from seqplan.cli.commands.analyze import cmd_analyze
from seqplan.cli.commands.order_check import cmd_order_check
from seqplan.cli.commands.run_config import cmd_run_config
from seqplan.cli.commands.simulate import cmd_simulate
from seqplan.cli.commands.version import cmd_version


def _add_input_args(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("--input", required=True, help="CSV with one row per pair.")
    sp.add_argument("--a-col", dest="a_col", default=None, help="Column with 0/1 responses to A (default: A or first column).")
    sp.add_argument("--b-col", dest="b_col", default=None, help="Column with 0/1 responses to B (default: B or second column).")
    sp.add_argument("--map", default=None, help="Headerless 31x31 CSV decision map (default: built-in Bross plan).")


def _add_order_check_args(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("--n-perm", dest="n_perm", type=int, default=1000, help="Number of random orderings.")
    sp.add_argument("--alpha", type=float, default=0.05, help="Significance level for the binomial CIs.")
    sp.add_argument("--n-jobs", dest="n_jobs", type=int, default=1, help="Worker processes.")
    sp.add_argument("--progress", action="store_true", help="Show a progress bar.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="seqplan", description="Bross sequential analysis for paired binary outcomes.")
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("version", help="Print installed package version.")
    sp.set_defaults(func=cmd_version)

    sp = sub.add_parser("analyze", help="Walk the Bross decision map once, in input order.")
    _add_input_args(sp)
    sp.add_argument("--out", default=None, help="Bundle directory.")
    sp.set_defaults(func=cmd_analyze)

    sp = sub.add_parser("order-check", help="Monte Carlo robustness of the decision to pair order.")
    _add_input_args(sp)
    _add_order_check_args(sp)
    sp.add_argument("--seed", type=int, default=42)
    sp.add_argument("--out", default=None, help="Bundle directory.")
    sp.set_defaults(func=cmd_order_check)

    sp = sub.add_parser("simulate", help="Simulate pairs, then run analyze and order-check on them.")
    sp.add_argument("--n", type=int, default=40, help="Number of pairs.")
    sp.add_argument("--p-a", dest="p_a", type=float, default=0.7, help="Response probability under A.")
    sp.add_argument("--p-b", dest="p_b", type=float, default=0.4, help="Response probability under B.")
    sp.add_argument("--seed", type=int, default=42)
    _add_order_check_args(sp)
    sp.add_argument("--out", default=None, help="Bundle directory.")
    sp.set_defaults(func=cmd_simulate)

    sp = sub.add_parser("run-config", help="Run a command described by a YAML config.")
    sp.add_argument("--config", required=True)
    sp.set_defaults(func=cmd_run_config)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except (SeqPlanError, ValueError, FileNotFoundError) as e:
        print(f"[seqplan][error] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
