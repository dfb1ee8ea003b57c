"""Named dataset factories."""

from __future__ import annotations

from typing import Any, Callable, Iterable, MutableMapping

from ..core.types import Dataset

DatasetFactory = Callable[..., Dataset]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    Works as a decorator::

        @register_dataset("gate")
        def make_gate(**options):
            ...

    or directly with ``register_dataset("gate", make_gate)``.
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(name: str, **options: Any) -> Dataset:
    """Build the dataset registered as ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}")
    return _REGISTRY[name](**options)


def available_datasets() -> Iterable[str]:
    return sorted(_REGISTRY)


__all__ = ["available_datasets", "get_dataset", "register_dataset"]
