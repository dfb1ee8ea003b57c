"""Mean squared error over a labeled dataset."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.types import ActivationTrace, Dataset

if TYPE_CHECKING:  # pragma: no cover
    from ..core.network import Network


def check_dataset(network: "Network", dataset: Dataset) -> None:
    """Raise ``ValueError`` unless ``dataset`` fits ``network``."""

    if dataset.inputs.rows != dataset.targets.rows:
        raise ValueError(
            f"Dataset has {dataset.inputs.rows} input rows but "
            f"{dataset.targets.rows} target rows"
        )
    if dataset.inputs.cols != network.input_width:
        raise ValueError(
            f"Dataset inputs have {dataset.inputs.cols} columns, network expects "
            f"{network.input_width}"
        )
    if dataset.targets.cols != network.output_width:
        raise ValueError(
            f"Dataset targets have {dataset.targets.cols} columns, network outputs "
            f"{network.output_width}"
        )


def cost(
    network: "Network", dataset: Dataset, trace: ActivationTrace | None = None
) -> float:
    """Squared error summed over output columns, averaged over examples.

    ``trace`` is left holding the last example's activations.
    """

    check_dataset(network, dataset)
    if trace is None:
        trace = network.new_trace()
    n = dataset.inputs.rows
    if n == 0:
        raise ValueError("Cannot evaluate cost on an empty dataset")
    total = 0.0
    targets = dataset.targets
    for i in range(n):
        network.set_input(trace, dataset.inputs.row(i))
        network.forward(trace)
        out = trace.output
        for j in range(targets.cols):
            d = out.get(0, j) - targets.get(i, j)
            total += d * d
    return total / n


__all__ = ["cost", "check_dataset"]
