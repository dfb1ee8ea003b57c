"""Core numerical primitives for wigglenet."""

from . import activations, matrix, network, strategies, types

__all__ = ["activations", "matrix", "network", "strategies", "types"]
