from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from statistics import mean, pstdev

ESTIMATORS = ["backprop", "finite_diff"]


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.4f} ± {sd:.4f}"


def _train_one(gate: str, estimator: str, seed: int, epochs: int, lr: float, eps: float):
    import numpy as np

    from wigglenet.core.network import Network
    from wigglenet.core.strategies import Backprop, FiniteDifference
    from wigglenet.data.samples import gate_dataset
    from wigglenet.training.metrics import gate_failures
    from wigglenet.training.trainer import SGDOptimizer, Trainer

    data = gate_dataset(gate)
    net = Network([2, 2, 1])
    net.randomize(np.random.default_rng(seed))
    strat = Backprop() if estimator == "backprop" else FiniteDifference(eps=eps)
    probe = net.copy()
    drift = float(
        np.max(
            np.abs(
                FiniteDifference(eps=eps).gradient(probe, data).flat()
                - Backprop().gradient(probe, data).flat()
            )
        )
    )
    start = time.perf_counter()
    result = Trainer(net, strat, SGDOptimizer(lr=lr)).run(
        data, epochs, eval_every=epochs, log_every=0
    )
    elapsed = time.perf_counter() - start
    return {
        "final_cost": result.final_cost,
        "failures": gate_failures(net, data),
        "seconds": elapsed,
        "grad_gap": drift,
    }


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    ap = argparse.ArgumentParser()
    ap.add_argument("--gate", default="xor", choices=["or", "and", "nand", "xor"])
    ap.add_argument("--seeds", nargs="+", type=int, default=[0, 1, 2])
    ap.add_argument("--epochs", type=int, default=2000)
    ap.add_argument("--lr", type=float, default=1.0)
    ap.add_argument("--eps", type=float, default=0.1)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for estimator in ESTIMATORS:
        for s in args.seeds:
            r = _train_one(args.gate, estimator, s, args.epochs, args.lr, args.eps)
            runs.append({"estimator": estimator, "seed": s, **r})
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    agg = {}
    for estimator in ESTIMATORS:
        costs = [r["final_cost"] for r in runs if r["estimator"] == estimator]
        secs = [r["seconds"] for r in runs if r["estimator"] == estimator]
        agg[estimator] = {
            "n": len(costs),
            "final_cost_mu": mean(costs),
            "final_cost_sd": pstdev(costs) if len(costs) > 1 else 0.0,
            "seconds_mu": mean(secs),
        }
    bp_secs = agg["backprop"]["seconds_mu"]
    for estimator in ESTIMATORS:
        agg[estimator]["slowdown_vs_bp"] = agg[estimator]["seconds_mu"] / bp_secs if bp_secs else 0.0

    csv_path = out / "bench_estimators.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            ["estimator", "seeds", "epochs", "final_cost_mu", "final_cost_sd", "seconds_mu", "slowdown_vs_bp"]
        )
        for estimator in ESTIMATORS:
            a = agg[estimator]
            w.writerow(
                [
                    estimator,
                    a["n"],
                    args.epochs,
                    f"{a['final_cost_mu']:.4f}",
                    f"{a['final_cost_sd']:.4f}",
                    f"{a['seconds_mu']:.4f}",
                    f"{a['slowdown_vs_bp']:.2f}",
                ]
            )

    md_path = out / "bench_estimators.md"
    lines = []
    lines.append(f"### Finite differences vs backpropagation on `{args.gate}`")
    lines.append("")
    lines.append(
        f"- Seeds: `{args.seeds}`; Epochs: `{args.epochs}`; LR: `{args.lr}`; eps: `{args.eps}`"
    )
    gaps = [r["grad_gap"] for r in runs if r["estimator"] == "backprop"]
    lines.append(f"- Max |finite_diff - backprop| at init: `{max(gaps):.4f}`")
    lines.append("")
    lines.append("| Estimator | Final cost (μ±σ) | Seconds | Slowdown vs BP | Seeds |")
    lines.append("|---|---:|---:|---:|---:|")
    for estimator in ESTIMATORS:
        fc = [r["final_cost"] for r in runs if r["estimator"] == estimator]
        a = agg[estimator]
        lines.append(
            f"| {estimator.upper()} | {_fmt_mu_sigma(fc)} | {a['seconds_mu']:.3f} | "
            f"{a['slowdown_vs_bp']:.2f}x | {a['n']} |"
        )
    md_path.write_text("\n".join(lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
