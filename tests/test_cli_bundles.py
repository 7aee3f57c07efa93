import json

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd

from seqplan.bross.simulate import PairSimConfig, simulate_pairs
from seqplan.cli.main import main

EXAMPLE = [
    (1, 1), (1, 0), (0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (1, 1), (1, 0), (1, 0),
    (1, 0), (1, 1), (1, 0), (0, 1), (0, 0), (1, 0), (1, 0), (1, 0), (1, 1), (1, 0),
]


def _write_pairs(tmp_path, rows, cols=("A", "B")):
    path = tmp_path / "pairs.csv"
    pd.DataFrame(rows, columns=list(cols)).to_csv(path, index=False)
    return path


def test_analyze_writes_bundle(tmp_path):
    inp = _write_pairs(tmp_path, EXAMPLE)
    out = tmp_path / "analyze"
    rc = main(["analyze", "--input", str(inp), "--out", str(out)])
    assert rc == 0

    payload = json.loads((out / "results.json").read_text(encoding="utf-8"))
    assert payload["estimates"]["decision"] == 1
    assert payload["estimates"]["message"] == "A is better"
    assert payload["pairs"]["n_informative"] == 13

    path = pd.read_csv(out / "tables" / "path.csv")
    assert len(path) == 13
    grid = pd.read_csv(out / "tables" / "decision_map.csv", header=None).to_numpy()
    assert grid.shape == (31, 31)
    assert grid[18, 2] == 4
    assert (out / "plots" / "decision_map.png").exists()
    assert (out / "report.md").exists()
    assert (out / "run_meta.json").exists()


def test_analyze_with_named_columns(tmp_path):
    inp = _write_pairs(tmp_path, [(1, 1), (0, 0)], cols=("drug", "placebo"))
    out = tmp_path / "analyze"
    rc = main(["analyze", "--input", str(inp), "--a-col", "drug", "--b-col", "placebo", "--out", str(out)])
    assert rc == 0
    payload = json.loads((out / "results.json").read_text(encoding="utf-8"))
    assert payload["estimates"]["decision"] is None
    assert payload["warnings"]


def test_order_check_writes_bundle(tmp_path):
    inp = _write_pairs(tmp_path, EXAMPLE)
    out = tmp_path / "oc"
    rc = main(["order-check", "--input", str(inp), "--n-perm", "200", "--seed", "3", "--out", str(out)])
    assert rc == 0

    freq = pd.read_csv(out / "tables" / "frequency.csv", index_col=0)
    assert int(freq["Count"].sum()) == 200
    assert freq.loc["A_better(1)", "Count"] == 200
    codes = pd.read_csv(out / "tables" / "codes.csv")
    assert len(codes) == 200
    assert (out / "plots" / "outcomes.png").exists()

    payload = json.loads((out / "results.json").read_text(encoding="utf-8"))
    assert payload["estimates"]["n_perm"] == 200


def test_invalid_input_returns_error_code(tmp_path, capsys):
    inp = _write_pairs(tmp_path, [(1, 2), (0, 1)])
    rc = main(["analyze", "--input", str(inp), "--out", str(tmp_path / "bad")])
    assert rc == 2
    assert "[seqplan][error]" in capsys.readouterr().err

    rc = main(["order-check", "--input", str(inp), "--n-perm", "0", "--out", str(tmp_path / "bad2")])
    assert rc == 2


def test_run_config_dispatches_order_check(tmp_path):
    inp = _write_pairs(tmp_path, EXAMPLE)
    out = tmp_path / "cfg_out"
    cfg = tmp_path / "run.yaml"
    cfg.write_text(
        f"command: order-check\ninput: {inp}\nout: {out}\nparams:\n  n_perm: 50\n  alpha: 0.1\n  seed: 1\n",
        encoding="utf-8",
    )
    assert main(["run-config", "--config", str(cfg)]) == 0
    assert (out / "tables" / "frequency.csv").exists()

    bad = tmp_path / "bad.yaml"
    bad.write_text("command: nope\n", encoding="utf-8")
    assert main(["run-config", "--config", str(bad)]) == 2


def test_simulate_command(tmp_path):
    out = tmp_path / "sim"
    rc = main(["simulate", "--n", "30", "--p-a", "0.8", "--p-b", "0.3", "--n-perm", "50", "--out", str(out)])
    assert rc == 0
    assert (out / "pairs.csv").exists()
    assert (out / "analyze" / "results.json").exists()
    assert (out / "order_check" / "tables" / "frequency.csv").exists()


def test_simulate_pairs_is_seeded():
    cfg = PairSimConfig(n=100, p_a=0.7, p_b=0.2, seed=4)
    d1 = simulate_pairs(cfg)
    d2 = simulate_pairs(cfg)
    assert d1.equals(d2)
    assert set(np.unique(d1[["A", "B"]].to_numpy()).tolist()) <= {0, 1}
    assert d1["A"].mean() > d1["B"].mean()
