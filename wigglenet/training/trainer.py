"""Full-batch gradient-descent training loop for wigglenet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Sequence

from ..core.network import Network
from ..core.strategies import GradientEstimator
from ..core.types import Dataset, Gradient, RunResult
from .losses import check_dataset, cost

logger = logging.getLogger(__name__)


@dataclass
class SGDOptimizer:
    """Vanilla gradient descent: no momentum, clipping or adaptive rates."""

    lr: float

    def step(self, network: Network, gradient: Gradient) -> None:
        network.apply(gradient, self.lr)


class Trainer:
    """Run ``epochs`` rounds of estimate-gradient then descend."""

    def __init__(
        self,
        network: Network,
        estimator: GradientEstimator,
        optimizer: SGDOptimizer,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.estimator = estimator
        self.optimizer = optimizer
        self.callbacks = list(callbacks or [])

    def step(self, dataset: Dataset) -> Gradient:
        gradient = self.estimator.gradient(self.network, dataset)
        self.optimizer.step(self.network, gradient)
        return gradient

    def run(
        self,
        dataset: Dataset,
        epochs: int,
        *,
        eval_every: int = 1,
        log_every: int = 1000,
        split_loggers: Mapping[str, Sequence[object]] | None = None,
    ) -> RunResult:
        """Train for ``epochs`` full-batch steps.

        The cost is evaluated after every ``eval_every``-th step (and always
        after the last one) and reported to the callbacks as ``{"loss": c}``.
        """

        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        check_dataset(self.network, dataset)
        split_loggers = split_loggers or {}
        eval_every = max(1, eval_every)
        trace = self.network.new_trace()

        history: List[float] = []
        last_cost = cost(self.network, dataset, trace)
        logger.info(
            "Training %s with %s for %d epochs (lr=%g), initial cost %.6f",
            self.network,
            type(self.estimator).__name__,
            epochs,
            self.optimizer.lr,
            last_cost,
        )

        for epoch in range(1, epochs + 1):
            self.step(dataset)
            if epoch % eval_every != 0 and epoch != epochs:
                continue
            last_cost = cost(self.network, dataset, trace)
            history.append(last_cost)
            logger.debug("epoch %d: cost %.6f", epoch, last_cost)
            if log_every and epoch % log_every == 0:
                logger.info("epoch %d: cost %.6f", epoch, last_cost)
            self._emit_epoch("train", epoch, {"loss": last_cost}, split_loggers)

        logger.info("Finished %d epochs, final cost %.6f", epochs, last_cost)
        return RunResult(steps=epochs, final_cost=last_cost, history=history)

    def _emit_epoch(
        self,
        split: str,
        epoch: int,
        metrics: Mapping[str, float],
        loggers: Mapping[str, Sequence[object]],
    ) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
        for callback in loggers.get(split, []):
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["SGDOptimizer", "Trainer"]
