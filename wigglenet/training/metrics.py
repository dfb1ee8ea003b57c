"""Prediction checks for trained boolean-function networks."""

from __future__ import annotations

import logging
from typing import List, Tuple

from ..core.network import Network
from ..core.types import Dataset
from ..data.samples import encode_adder_input
from .losses import check_dataset

logger = logging.getLogger(__name__)


def threshold(value: float, cutoff: float = 0.5) -> int:
    return int(value > cutoff)


def predictions(network: Network, dataset: Dataset) -> List[List[float]]:
    """Raw network outputs for every dataset row."""

    check_dataset(network, dataset)
    trace = network.new_trace()
    rows: List[List[float]] = []
    for i in range(dataset.inputs.rows):
        network.set_input(trace, dataset.inputs.row(i))
        network.forward(trace)
        rows.append(trace.output.to_list()[0])
    return rows


def gate_failures(network: Network, dataset: Dataset, cutoff: float = 0.5) -> int:
    """Count rows where any thresholded output disagrees with its label."""

    failures = 0
    for i, outputs in enumerate(predictions(network, dataset)):
        expected = [threshold(v, cutoff) for v in dataset.targets.to_list()[i]]
        got = [threshold(v, cutoff) for v in outputs]
        if got != expected:
            logger.debug("row %d: expected %s, got %s", i, expected, got)
            failures += 1
    return failures


def decode_adder_output(outputs: List[float], bits: int) -> Tuple[int, bool]:
    """Return ``(sum, overflow)`` from thresholded sum bits and the carry."""

    total = 0
    for j in range(bits):
        total |= threshold(outputs[j]) << j
    return total, bool(threshold(outputs[bits]))


def adder_failures(network: Network, bits: int) -> int:
    """Check every ``x + y`` against the network's decoded prediction.

    A raised carry is only correct when the true sum overflows; otherwise the
    decoded sum bits must equal ``x + y``.
    """

    if network.input_width != 2 * bits or network.output_width != bits + 1:
        raise ValueError(
            f"Network {network.architecture} does not fit a {bits}-bit adder"
        )
    n = 1 << bits
    trace = network.new_trace()
    fails = 0
    for x in range(n):
        for y in range(n):
            z = x + y
            network.set_input(trace, encode_adder_input(x, y, bits))
            network.forward(trace)
            got, overflow = decode_adder_output(trace.output.to_list()[0], bits)
            if overflow:
                if z < n:
                    logger.debug("%d + %d = (OVERFLOW <> %d)", x, y, z)
                    fails += 1
            elif got != z:
                logger.debug("%d + %d = (%d <> %d)", x, y, z, got)
                fails += 1
    return fails


__all__ = [
    "adder_failures",
    "decode_adder_output",
    "gate_failures",
    "predictions",
    "threshold",
]
