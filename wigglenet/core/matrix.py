"""Dense row-major matrix used by every wigglenet component.

The buffer is a flat ``numpy`` array but all arithmetic is spelled out as
plain loops over it so the algorithms stay readable.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence

import numpy as np

from .types import Array

Pointwise = Callable[[float], float]


class Matrix:
    """Fixed-shape matrix backed by a contiguous float64 buffer."""

    __slots__ = ("rows", "cols", "elems")

    def __init__(self, rows: int, cols: int) -> None:
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix shape must be non-negative, got ({rows}, {cols})")
        self.rows = int(rows)
        self.cols = int(cols)
        self.elems: Array = np.zeros(self.rows * self.cols, dtype=np.float64)

    # ------------------------------------------------------------------
    # Constructors

    @classmethod
    def filled(cls, rows: int, cols: int, value: float) -> "Matrix":
        m = cls(rows, cols)
        m.fill(value)
        return m

    @classmethod
    def random(
        cls,
        rows: int,
        cols: int,
        rng: np.random.Generator,
        low: float = 0.0,
        high: float = 1.0,
    ) -> "Matrix":
        m = cls(rows, cols)
        m.randomize(rng, low, high)
        return m

    @classmethod
    def from_rows(cls, values: Sequence[Sequence[float]]) -> "Matrix":
        """Build a matrix from a list of equal-length rows."""

        rows = len(values)
        cols = len(values[0]) if rows else 0
        m = cls(rows, cols)
        for r, row in enumerate(values):
            if len(row) != cols:
                raise ValueError(f"Row {r} has {len(row)} values, expected {cols}")
            for c, value in enumerate(row):
                m.set(r, c, value)
        return m

    @classmethod
    def from_flat(
        cls, rows: int, cols: int, samples: Iterable[float], stride: int
    ) -> "Matrix":
        m = cls(rows, cols)
        m.load_submatrix(samples, stride)
        return m

    # ------------------------------------------------------------------
    # Shape and access

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    def _index(self, r: int, c: int) -> int:
        if not 0 <= r < self.rows or not 0 <= c < self.cols:
            raise IndexError(
                f"Index ({r}, {c}) out of bounds for matrix of shape {self.shape}"
            )
        return r * self.cols + c

    def get(self, r: int, c: int) -> float:
        return float(self.elems[self._index(r, c)])

    def set(self, r: int, c: int, value: float) -> None:
        self.elems[self._index(r, c)] = value

    # ------------------------------------------------------------------
    # In-place mutation

    def fill(self, value: float) -> None:
        for i in range(len(self.elems)):
            self.elems[i] = value

    def randomize(
        self, rng: np.random.Generator, low: float = 0.0, high: float = 1.0
    ) -> None:
        """Draw every cell independently from ``U[low, high)``."""

        if high < low:
            raise ValueError(f"Empty range [{low}, {high})")
        for i in range(len(self.elems)):
            self.elems[i] = rng.uniform(low, high)

    def apply_all(self, f: Pointwise) -> None:
        for i in range(len(self.elems)):
            self.elems[i] = f(float(self.elems[i]))

    def apply_at(self, r: int, c: int, f: Pointwise) -> None:
        idx = self._index(r, c)
        self.elems[idx] = f(float(self.elems[idx]))

    def load(self, other: "Matrix") -> None:
        """Copy ``other``'s buffer into this matrix."""

        if self.shape != other.shape:
            raise ValueError(f"Cannot load {other.shape} into {self.shape}")
        for i in range(len(self.elems)):
            self.elems[i] = other.elems[i]

    def load_submatrix(self, samples: Iterable[float], stride: int) -> None:
        """Fill from flat samples of width ``stride`` (features + label).

        A single-column destination receives the value at every ``stride``-th
        position starting from the first; any wider destination receives the
        remaining values, skipping an element when it closes a sample and the
        destination cursor sits on a row boundary.
        """

        if stride <= 0:
            raise ValueError(f"stride must be positive, got {stride}")
        values = list(samples)
        size = len(self.elems)
        j = 0

        if self.cols == 1:
            picked = values[::stride]
            if len(picked) > size:
                raise ValueError(
                    f"{len(picked)} labels do not fit in {self.rows} rows"
                )
            for j, e in enumerate(picked):
                self.elems[j] = e
            return

        for i, e in enumerate(values):
            if (i + 1) % stride == 0 and j % self.cols == 0:
                continue
            if j >= size:
                raise ValueError(
                    f"Samples overflow a {self.rows}x{self.cols} destination at index {i}"
                )
            self.elems[j] = e
            j += 1

    # ------------------------------------------------------------------
    # Producing new matrices

    def copy(self) -> "Matrix":
        m = Matrix(self.rows, self.cols)
        m.elems = self.elems.copy()
        return m

    def sum(self, other: "Matrix") -> "Matrix":
        if self.shape != other.shape:
            raise ValueError(f"Cannot sum {self.shape} and {other.shape}")
        out = Matrix(self.rows, self.cols)
        for i in range(len(self.elems)):
            out.elems[i] = self.elems[i] + other.elems[i]
        return out

    def dot(self, other: "Matrix") -> "Matrix":
        if self.cols != other.rows:
            raise ValueError(
                f"Cannot multiply {self.shape} by {other.shape}: inner dimensions differ"
            )
        out = Matrix(self.rows, other.cols)
        lhs, rhs = self.elems, other.elems
        for i in range(out.rows):
            for j in range(out.cols):
                acc = 0.0
                for k in range(self.cols):
                    acc += lhs[i * self.cols + k] * rhs[k * other.cols + j]
                out.elems[i * out.cols + j] = acc
        return out

    def row(self, r: int) -> "Matrix":
        if not 0 <= r < self.rows:
            raise IndexError(f"Row {r} out of bounds for {self.rows} rows")
        out = Matrix(1, self.cols)
        start = r * self.cols
        out.elems = self.elems[start : start + self.cols].copy()
        return out

    def to_list(self) -> List[List[float]]:
        return [
            [float(v) for v in self.elems[r * self.cols : (r + 1) * self.cols]]
            for r in range(self.rows)
        ]

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols})"

    def __str__(self) -> str:
        return format_matrix(self)


def format_matrix(
    m: Matrix, name: str | None = None, padding: int = 0, mantissa: int = 7
) -> str:
    """Render ``m`` as a bracketed block, one row per line."""

    pad = " " * padding
    lines = []
    for row in m.to_list():
        cells = "".join(f"{value:.{mantissa}f}  " for value in row)
        lines.append(f"    {pad}{cells}")
    body = "".join(f"{line}\n" for line in lines)
    title = f"{name} = " if name else ""
    return f"{pad}{title}[\n{body}{pad}]"


__all__ = ["Matrix", "format_matrix"]
