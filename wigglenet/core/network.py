"""Feed-forward stack of affine + sigmoid layers."""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

import numpy as np

from ..training import losses
from .activations import sigmoid_
from .matrix import Matrix
from .types import ActivationTrace, Dataset, DeltaBuffer, Gradient, ModelDescription


class Network:
    """Weights and biases for ``len(architecture) - 1`` sigmoid layers.

    The network owns only its parameters. Forward passes write into an
    :class:`ActivationTrace` supplied by the caller, so every buffer that a
    pass mutates is visible at the call site.
    """

    def __init__(self, architecture: Sequence[int]) -> None:
        dims = [int(w) for w in architecture]
        if len(dims) < 2:
            raise ValueError(
                f"Architecture needs at least an input and an output width, got {dims}"
            )
        if any(w <= 0 for w in dims):
            raise ValueError(f"Layer widths must be positive, got {dims}")
        self.architecture: List[int] = dims
        self.weights: List[Matrix] = []
        self.biases: List[Matrix] = []
        for in_dim, out_dim in zip(dims[:-1], dims[1:]):
            self.weights.append(Matrix(in_dim, out_dim))
            self.biases.append(Matrix(1, out_dim))

    @property
    def layer_count(self) -> int:
        return len(self.weights)

    @property
    def input_width(self) -> int:
        return self.architecture[0]

    @property
    def output_width(self) -> int:
        return self.architecture[-1]

    def describe(self) -> ModelDescription:
        return ModelDescription(layer_dims=list(self.architecture))

    def parameter_count(self) -> int:
        return sum(len(w.elems) + len(b.elems) for w, b in zip(self.weights, self.biases))

    def parameters(self) -> Iterator[Tuple[Matrix, int, int]]:
        """Yield ``(matrix, row, col)`` for every scalar parameter.

        Order is layer by layer; within a layer the weights row by row, column
        by column, followed by the biases.
        """

        for w, b in zip(self.weights, self.biases):
            for m in (w, b):
                for r in range(m.rows):
                    for c in range(m.cols):
                        yield m, r, c

    def copy(self) -> "Network":
        clone = Network(self.architecture)
        for dst, src in zip(clone.weights, self.weights):
            dst.load(src)
        for dst, src in zip(clone.biases, self.biases):
            dst.load(src)
        return clone

    # ------------------------------------------------------------------
    # Parameter initialisation and update

    def randomize(
        self, rng: np.random.Generator, low: float = 0.0, high: float = 1.0
    ) -> None:
        for w, b in zip(self.weights, self.biases):
            w.randomize(rng, low, high)
            b.randomize(rng, low, high)

    def fill(self, value: float) -> None:
        for w, b in zip(self.weights, self.biases):
            w.fill(value)
            b.fill(value)

    def apply(self, gradient: Gradient, rate: float) -> None:
        """Take one descent step: ``param -= rate * gradient``."""

        self._check_gradient(gradient)
        for params, grads in (
            (self.weights, gradient.weights),
            (self.biases, gradient.biases),
        ):
            for m, g in zip(params, grads):
                for i in range(len(m.elems)):
                    m.elems[i] -= rate * g.elems[i]

    # ------------------------------------------------------------------
    # Scratch buffers

    def new_trace(self) -> ActivationTrace:
        return ActivationTrace(layers=[Matrix(1, w) for w in self.architecture])

    def new_deltas(self) -> DeltaBuffer:
        return DeltaBuffer(layers=[Matrix(1, w) for w in self.architecture])

    def new_gradient(self) -> Gradient:
        return Gradient(
            weights=[Matrix(w.rows, w.cols) for w in self.weights],
            biases=[Matrix(b.rows, b.cols) for b in self.biases],
        )

    # ------------------------------------------------------------------
    # Evaluation

    def set_input(self, trace: ActivationTrace, row: Matrix) -> None:
        if row.shape != (1, self.input_width):
            raise ValueError(
                f"Input must have shape (1, {self.input_width}), got {row.shape}"
            )
        trace.input.load(row)

    def forward(self, trace: ActivationTrace) -> ActivationTrace:
        self._check_trace(trace)
        for i, (w, b) in enumerate(zip(self.weights, self.biases)):
            trace.layers[i + 1].load(sigmoid_(trace.layers[i].dot(w).sum(b)))
        return trace

    def output(self, trace: ActivationTrace) -> Matrix:
        return trace.output

    def predict(self, row: Matrix) -> Matrix:
        """Run one example through a fresh trace and return the output copy."""

        trace = self.new_trace()
        self.set_input(trace, row)
        self.forward(trace)
        return trace.output.copy()

    def cost(self, dataset: Dataset, trace: ActivationTrace | None = None) -> float:
        return losses.cost(self, dataset, trace)

    # ------------------------------------------------------------------
    # Validation helpers

    def _check_trace(self, trace: ActivationTrace) -> None:
        widths = [m.cols for m in trace.layers]
        if widths != self.architecture or any(m.rows != 1 for m in trace.layers):
            raise ValueError(
                f"Activation trace widths {widths} do not match architecture "
                f"{self.architecture}"
            )

    def _check_gradient(self, gradient: Gradient) -> None:
        pairs = list(zip(self.weights, gradient.weights)) + list(
            zip(self.biases, gradient.biases)
        )
        if len(gradient.weights) != self.layer_count or len(gradient.biases) != self.layer_count:
            raise ValueError("Gradient layer count does not match network")
        for param, grad in pairs:
            if param.shape != grad.shape:
                raise ValueError(
                    f"Gradient shape {grad.shape} does not match parameter {param.shape}"
                )

    def __repr__(self) -> str:
        return f"Network(architecture={self.architecture})"


__all__ = ["Network"]
