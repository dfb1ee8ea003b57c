"""Core typing contracts for wigglenet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .matrix import Matrix

Array = np.ndarray


@dataclass(frozen=True)
class Dataset:
    """Labeled examples: one row of ``inputs`` per row of ``targets``."""

    inputs: "Matrix"
    targets: "Matrix"

    def __post_init__(self) -> None:
        if self.inputs.rows != self.targets.rows:
            raise ValueError(
                f"Dataset has {self.inputs.rows} input rows but "
                f"{self.targets.rows} target rows"
            )

    @classmethod
    def from_flat(
        cls, samples: Sequence[float], stride: int, label_cols: int = 1
    ) -> "Dataset":
        """Split a flat table of ``stride``-wide samples into features and labels.

        Only single-label tables (``label_cols == 1``) are carved with the
        stride extraction; wider label blocks are taken from the row tail.
        """

        from .matrix import Matrix

        if stride <= label_cols:
            raise ValueError(f"stride {stride} leaves no feature columns")
        if len(samples) % stride != 0:
            raise ValueError(
                f"{len(samples)} values do not divide into samples of width {stride}"
            )
        n = len(samples) // stride
        features = stride - label_cols
        if label_cols == 1:
            inputs = Matrix.from_flat(n, features, samples, stride)
            targets = Matrix.from_flat(n, 1, list(samples)[features:], stride)
            return cls(inputs=inputs, targets=targets)

        table = [list(samples[i * stride : (i + 1) * stride]) for i in range(n)]
        inputs = Matrix.from_rows([row[:features] for row in table])
        targets = Matrix.from_rows([row[features:] for row in table])
        return cls(inputs=inputs, targets=targets)

    def __len__(self) -> int:
        return self.inputs.rows

    def example(self, i: int) -> Tuple["Matrix", "Matrix"]:
        return self.inputs.row(i), self.targets.row(i)


@dataclass
class ActivationTrace:
    """Per-layer activations written by ``Network.forward``.

    Slot 0 is the input buffer, the last slot is the network output.
    """

    layers: List["Matrix"]

    @property
    def input(self) -> "Matrix":
        return self.layers[0]

    @property
    def output(self) -> "Matrix":
        return self.layers[-1]


@dataclass
class DeltaBuffer:
    """Backward-pass error terms, one ``1 x width`` row per layer."""

    layers: List["Matrix"]

    def zero(self) -> None:
        for m in self.layers:
            m.fill(0.0)


@dataclass
class Gradient:
    """Partial derivatives of the cost, shaped like a network's parameters."""

    weights: List["Matrix"]
    biases: List["Matrix"]

    def zero(self) -> None:
        for m in self.weights:
            m.fill(0.0)
        for m in self.biases:
            m.fill(0.0)

    def flat(self) -> Array:
        """All partials in parameter order (per layer: weights, then biases)."""

        parts: List[Array] = []
        for w, b in zip(self.weights, self.biases):
            parts.append(w.elems)
            parts.append(b.elems)
        if not parts:
            return np.zeros(0, dtype=np.float64)
        return np.concatenate(parts)


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`wigglenet.training.trainer.Trainer.run`."""

    steps: int
    final_cost: float
    history: List[float] = field(default_factory=list)
    metrics_path: str = ""
    manifest_path: str = ""
