from __future__ import annotations

import argparse
import shutil
import subprocess
from pathlib import Path


def run(cmd: list[str]) -> None:
    print("+", " ".join(cmd))
    subprocess.run(cmd, check=True)


def main() -> int:
    p = argparse.ArgumentParser(description="Build out/ bundles for the example data.")
    p.add_argument("--out", default="out", help="Output directory (default: out)")
    p.add_argument("--clean", action="store_true", help="Remove out/ before building")
    p.add_argument("--print-tree", action="store_true", help="Print out/ file tree after build")
    args = p.parse_args()

    out = Path(args.out)

    if args.clean and out.exists():
        shutil.rmtree(out)

    run(["seqplan", "--help"])
    run(["seqplan", "version"])

    run(["seqplan", "analyze", "--input", "examples/example_pairs.csv", "--out", str(out / "analyze_example")])

    run([
        "seqplan", "order-check",
        "--input", "examples/example_pairs.csv",
        "--n-perm", "5000",
        "--alpha", "0.05",
        "--seed", "123",
        "--out", str(out / "order_check_example"),
    ])

    run([
        "seqplan", "simulate",
        "--n", "60",
        "--p-a", "0.55",
        "--p-b", "0.45",
        "--seed", "7",
        "--n-perm", "2000",
        "--out", str(out / "simulate_close_call"),
    ])

    run(["seqplan", "run-config", "--config", "configs/templates/analyze_example.yaml"])
    run(["seqplan", "run-config", "--config", "configs/templates/order_check_example.yaml"])

    if args.print_tree:
        print("=== out tree (files) ===")
        for f in sorted(out.rglob("*")):
            if f.is_file():
                print(f)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
