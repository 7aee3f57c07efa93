from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import yaml

from seqplan.cli.commands.analyze import cmd_analyze
from seqplan.cli.commands.order_check import cmd_order_check
from seqplan.cli.commands.simulate import cmd_simulate


def _fail(msg: str) -> int:
    print(f"[seqplan][error] {msg}", file=sys.stderr)
    return 2


def _as_args(d: dict[str, Any]) -> SimpleNamespace:
    # cmd_* functions expect attribute access (args.foo)
    return SimpleNamespace(**d)


def _load_yaml(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping (YAML dict).")
    return data


def cmd_run_config(args) -> int:
    cfg = _load_yaml(str(args.config))

    command = str(cfg.get("command", "")).strip()
    if not command:
        return _fail("Missing required field: command")

    input_path = cfg.get("input", None)
    out_dir = cfg.get("out", None)

    params = cfg.get("params", {}) or {}
    if not isinstance(params, dict):
        return _fail("Field `params` must be a mapping (YAML dict).")

    base_args: dict[str, Any] = {"out": out_dir}

    if command == "analyze":
        if input_path is None:
            return _fail("analyze requires `input`")
        merged = {
            **base_args,
            "input": input_path,
            "a_col": params.get("a_col"),
            "b_col": params.get("b_col"),
            "map": params.get("map"),
        }
        return int(cmd_analyze(_as_args(merged)))

    if command in {"order-check", "order_check"}:
        if input_path is None:
            return _fail("order-check requires `input`")
        merged = {
            **base_args,
            "input": input_path,
            "a_col": params.get("a_col"),
            "b_col": params.get("b_col"),
            "map": params.get("map"),
            "n_perm": int(params.get("n_perm", 1000)),
            "alpha": float(params.get("alpha", 0.05)),
            "seed": int(params.get("seed", 42)),
            "n_jobs": int(params.get("n_jobs", 1)),
            "progress": bool(params.get("progress", False)),
        }
        return int(cmd_order_check(_as_args(merged)))

    if command == "simulate":
        merged = {
            **base_args,
            "n": int(params.get("n", 40)),
            "p_a": float(params.get("p_a", 0.7)),
            "p_b": float(params.get("p_b", 0.4)),
            "seed": int(params.get("seed", 42)),
            "n_perm": int(params.get("n_perm", 1000)),
            "alpha": float(params.get("alpha", 0.05)),
            "n_jobs": int(params.get("n_jobs", 1)),
            "progress": bool(params.get("progress", False)),
        }
        return int(cmd_simulate(_as_args(merged)))

    return _fail(f"Unknown command: {command}")
