"""Activation utilities for wigglenet."""

from __future__ import annotations

import numpy as np

from .matrix import Matrix


def sigmoid(x: float) -> float:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``."""

    with np.errstate(over="ignore"):
        return float(1.0 / (1.0 + np.exp(-x)))


def sigmoid_deriv(a: float) -> float:
    """Derivative of the sigmoid expressed through its output ``a``."""

    return a * (1.0 - a)


def sigmoid_(m: Matrix) -> Matrix:
    """Apply :func:`sigmoid` to every cell of ``m`` in place and return it."""

    m.apply_all(sigmoid)
    return m


__all__ = ["sigmoid", "sigmoid_deriv", "sigmoid_"]
