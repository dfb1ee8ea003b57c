from __future__ import annotations

import logging
from typing import Mapping

import numpy as np
import pytest

from wigglenet.core.network import Network
from wigglenet.core.strategies import Backprop, FiniteDifference
from wigglenet.data.samples import gate_dataset
from wigglenet.training.trainer import SGDOptimizer, Trainer


class _Capture:
    def __init__(self) -> None:
        self.history: list[tuple[int, Mapping[str, float]]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.history.append((epoch, dict(metrics)))


def _network(seed: int = 0) -> Network:
    net = Network([2, 2, 1])
    net.randomize(np.random.default_rng(seed))
    return net


def test_sgd_step_subtracts_scaled_gradient():
    net = _network()
    data = gate_dataset("or")
    before = net.copy()
    grad = Backprop().gradient(net, data)
    SGDOptimizer(lr=0.5).step(net, grad)
    for w_new, w_old, g in zip(net.weights, before.weights, grad.weights):
        expected = w_old.elems - 0.5 * g.elems
        assert np.allclose(w_new.elems, expected)


@pytest.mark.parametrize("estimator", [Backprop(), FiniteDifference(eps=0.1)])
def test_training_lowers_cost(estimator):
    net = _network(1)
    data = gate_dataset("and")
    start = net.cost(data)
    trainer = Trainer(net, estimator, SGDOptimizer(lr=1.0))
    result = trainer.run(data, epochs=200, eval_every=50)
    assert result.steps == 200
    assert result.final_cost < start
    assert result.final_cost == pytest.approx(net.cost(data))


def test_callbacks_receive_evaluated_epochs():
    net = _network(2)
    capture = _Capture()
    seen: list[int] = []
    trainer = Trainer(net, Backprop(), SGDOptimizer(lr=0.1), callbacks=[capture])
    result = trainer.run(
        gate_dataset("or"),
        epochs=10,
        eval_every=4,
        split_loggers={"train": [lambda epoch, metrics: seen.append(epoch)]},
    )
    assert [epoch for epoch, _ in capture.history] == [4, 8, 10]
    assert seen == [4, 8, 10]
    assert all("loss" in metrics for _, metrics in capture.history)
    assert result.history == [metrics["loss"] for _, metrics in capture.history]


def test_zero_epochs_reports_initial_cost():
    net = _network(3)
    data = gate_dataset("or")
    result = Trainer(net, Backprop(), SGDOptimizer(lr=0.1)).run(data, epochs=0)
    assert result.steps == 0
    assert result.history == []
    assert result.final_cost == pytest.approx(net.cost(data))


def test_negative_epochs_rejected():
    trainer = Trainer(_network(), Backprop(), SGDOptimizer(lr=0.1))
    with pytest.raises(ValueError):
        trainer.run(gate_dataset("or"), epochs=-1)


def test_run_logs_progress(caplog):
    trainer = Trainer(_network(), Backprop(), SGDOptimizer(lr=0.1))
    with caplog.at_level(logging.INFO, logger="wigglenet.training.trainer"):
        trainer.run(gate_dataset("or"), epochs=4, log_every=2)
    messages = [record.getMessage() for record in caplog.records]
    assert any("epoch 2" in message for message in messages)
    assert any("Finished 4 epochs" in message for message in messages)
