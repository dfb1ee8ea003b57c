"""Dataset registry and the built-in sample tables."""

# Importing ``samples`` registers the built-in datasets.
from . import samples  # noqa: F401
from .registry import available_datasets, get_dataset, register_dataset
from .samples import adder_dataset, encode_adder_input, gate_dataset

__all__ = [
    "adder_dataset",
    "available_datasets",
    "encode_adder_input",
    "gate_dataset",
    "get_dataset",
    "register_dataset",
]
