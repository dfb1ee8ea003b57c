"""Truth tables and the binary adder used by the training presets."""

from __future__ import annotations

from typing import Dict, Tuple

from ..core.matrix import Matrix
from ..core.types import Dataset
from .registry import register_dataset

# Each gate is a flat table of (x1, x2, label) rows.
GATE_STRIDE = 3

# fmt: off
OR: Tuple[float, ...] = (
    0., 0., 0.,
    0., 1., 1.,
    1., 0., 1.,
    1., 1., 1.,
)

AND: Tuple[float, ...] = (
    0., 0., 0.,
    0., 1., 0.,
    1., 0., 0.,
    1., 1., 1.,
)

NAND: Tuple[float, ...] = (
    0., 0., 1.,
    0., 1., 1.,
    1., 0., 1.,
    1., 1., 0.,
)

XOR: Tuple[float, ...] = (
    0., 0., 0.,
    0., 1., 1.,
    1., 0., 1.,
    1., 1., 0.,
)
# fmt: on

GATES: Dict[str, Tuple[float, ...]] = {
    "or": OR,
    "and": AND,
    "nand": NAND,
    "xor": XOR,
}

SYMBOLS: Dict[str, str] = {"or": "|", "and": "&", "nand": "~&", "xor": "^"}


def gate_dataset(name: str) -> Dataset:
    """Return the 4-row truth table for gate ``name``."""

    try:
        table = GATES[name.lower()]
    except KeyError as exc:
        available = ", ".join(sorted(GATES))
        raise KeyError(f"Unknown gate {name!r}. Available gates: {available}") from exc
    return Dataset.from_flat(table, GATE_STRIDE)


def encode_adder_input(x: int, y: int, bits: int) -> Matrix:
    """Both operands as bits, least significant first: ``x`` then ``y``."""

    row = Matrix(1, 2 * bits)
    for j in range(bits):
        row.set(0, j, float((x >> j) & 1))
        row.set(0, j + bits, float((y >> j) & 1))
    return row


def adder_dataset(bits: int = 2) -> Dataset:
    """Every ``x + y`` for ``bits``-wide operands.

    Targets hold the ``bits`` low sum bits followed by the carry.
    """

    if bits <= 0:
        raise ValueError(f"bits must be positive, got {bits}")
    n = 1 << bits
    rows = n * n
    inputs = Matrix(rows, 2 * bits)
    targets = Matrix(rows, bits + 1)
    for i in range(rows):
        x, y = divmod(i, n)
        z = x + y
        for j in range(bits):
            inputs.set(i, j, float((x >> j) & 1))
            inputs.set(i, j + bits, float((y >> j) & 1))
            targets.set(i, j, float((z >> j) & 1))
        targets.set(i, bits, float(z >= n))
    return Dataset(inputs=inputs, targets=targets)


@register_dataset("gate")
def _gate_factory(gate: str = "or", **_: object) -> Dataset:
    return gate_dataset(gate)


@register_dataset("adder")
def _adder_factory(bits: int = 2, **_: object) -> Dataset:
    return adder_dataset(int(bits))


__all__ = [
    "AND",
    "GATES",
    "GATE_STRIDE",
    "NAND",
    "OR",
    "SYMBOLS",
    "XOR",
    "adder_dataset",
    "encode_adder_input",
    "gate_dataset",
]
