import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def test_bench_estimators_runs_quickly(tmp_path):
    out = tmp_path / "bench"
    subprocess.check_call(
        [
            sys.executable,
            str(ROOT / "scripts" / "bench_estimators.py"),
            "--seeds",
            "0",
            "--epochs",
            "5",
            "--out",
            str(out),
        ]
    )
    md = (out / "bench_estimators.md").read_text(encoding="utf-8")
    assert "| BACKPROP |" in md and "| FINITE_DIFF |" in md
    assert (out / "bench_estimators.csv").exists()
