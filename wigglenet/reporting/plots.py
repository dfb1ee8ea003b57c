"""Headless cost-curve plotting."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Sequence, Tuple


class PlotAdapter:
    """Record the evaluated cost per epoch and optionally save ``cost.png``.

    Only epochs the trainer actually evaluated reach ``on_epoch``, so each one
    is drawn as a marker; the title names the estimator and architecture of
    the run.
    """

    def __init__(
        self,
        run_dir: str | Path,
        enable_plots: bool = False,
        *,
        estimator: str = "",
        architecture: Sequence[int] = (),
    ):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.estimator = estimator
        self.architecture = list(architecture)
        self.points: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    @property
    def title(self) -> str:
        parts = [self.estimator or "training"]
        if self.architecture:
            parts.append("[" + ", ".join(str(w) for w in self.architecture) + "]")
        return " ".join(parts)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots or "loss" not in metrics:
            return
        self.points.append((epoch, float(metrics["loss"])))

    def close(self) -> Path | None:
        if not self.enable_plots or not self.points:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, costs = zip(*self.points)
        fig, ax = plt.subplots()
        ax.plot(epochs, costs, marker=".", linewidth=1)
        ax.annotate(
            f"{costs[-1]:.4g}",
            xy=(epochs[-1], costs[-1]),
            xytext=(-4, 6),
            textcoords="offset points",
            ha="right",
        )
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Cost")
        if min(costs) > 0:
            ax.set_yscale("log")
        ax.set_title(self.title)
        plot_path = self.run_dir / "cost.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch
