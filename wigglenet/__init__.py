"""wigglenet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.matrix import Matrix, format_matrix
from .core.network import Network
from .core.strategies import Backprop, FiniteDifference
from .core.types import ActivationTrace, Dataset, DeltaBuffer, Gradient, RunResult
from .data import adder_dataset, gate_dataset
from .training.losses import cost
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import SGDOptimizer, Trainer

__all__ = [
    "ActivationTrace",
    "Backprop",
    "Dataset",
    "DeltaBuffer",
    "FiniteDifference",
    "Gradient",
    "Matrix",
    "Network",
    "RunResult",
    "SGDOptimizer",
    "Trainer",
    "activations",
    "adder_dataset",
    "cost",
    "format_matrix",
    "gate_dataset",
    "load_preset",
    "presets",
    "run_pipeline",
    "types",
]
