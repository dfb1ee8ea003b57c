"""Gradient estimators for wigglenet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol

from ..training.losses import check_dataset, cost
from .activations import sigmoid_deriv
from .matrix import Matrix
from .network import Network
from .types import ActivationTrace, Dataset, DeltaBuffer, Gradient


class GradientEstimator(Protocol):
    """Protocol implemented by the gradient sources a trainer can use."""

    def gradient(self, network: Network, dataset: Dataset) -> Gradient:
        """Return ``d cost / d parameter`` for every weight and bias."""


@dataclass
class FiniteDifference:
    """Forward-difference estimate, one full-dataset cost per parameter.

    Slow and coarse; used as the reference that backpropagation is checked
    against.
    """

    eps: float = 0.1

    def __post_init__(self) -> None:
        if self.eps <= 0:
            raise ValueError(f"eps must be positive, got {self.eps}")

    def gradient(self, network: Network, dataset: Dataset) -> Gradient:
        trace = network.new_trace()
        grad = network.new_gradient()
        base = cost(network, dataset, trace)

        slots: Dict[int, Matrix] = {}
        for param, g in zip(network.weights + network.biases, grad.weights + grad.biases):
            slots[id(param)] = g

        for param, r, c in network.parameters():
            saved = param.get(r, c)
            param.set(r, c, saved + self.eps)
            slots[id(param)].set(r, c, (cost(network, dataset, trace) - base) / self.eps)
            param.set(r, c, saved)
        return grad


@dataclass
class Backprop:
    """Exact gradient of the summed squared error through sigmoid layers."""

    def gradient(self, network: Network, dataset: Dataset) -> Gradient:
        check_dataset(network, dataset)
        n = dataset.inputs.rows
        if n == 0:
            raise ValueError("Cannot backpropagate over an empty dataset")

        trace = network.new_trace()
        deltas = network.new_deltas()
        grad = network.new_gradient()
        grad.zero()

        for i in range(n):
            network.set_input(trace, dataset.inputs.row(i))
            network.forward(trace)
            deltas.zero()
            out = trace.output
            seed = deltas.layers[-1]
            for j in range(out.cols):
                # d cost / d out for the squared error
                seed.set(0, j, 2.0 * (out.get(0, j) - dataset.targets.get(i, j)))
            self._backward(network, trace, deltas, grad)

        for m in grad.weights + grad.biases:
            m.apply_all(lambda v: v / n)
        return grad

    @staticmethod
    def _backward(
        network: Network,
        trace: ActivationTrace,
        deltas: DeltaBuffer,
        grad: Gradient,
    ) -> None:
        acts = trace.layers
        for layer in range(network.layer_count, 0, -1):
            weights = network.weights[layer - 1]
            prev = acts[layer - 1]
            for j in range(acts[layer].cols):
                a = acts[layer].get(0, j)
                d = deltas.layers[layer].get(0, j)
                s = d * sigmoid_deriv(a)
                grad.biases[layer - 1].apply_at(0, j, lambda v: v + s)
                for k in range(prev.cols):
                    pa = prev.get(0, k)
                    w = weights.get(k, j)
                    grad.weights[layer - 1].apply_at(k, j, lambda v: v + s * pa)
                    deltas.layers[layer - 1].apply_at(0, k, lambda v: v + s * w)


__all__ = ["GradientEstimator", "FiniteDifference", "Backprop"]
