"""Gradient descent converges on the boolean-function tasks."""

import numpy as np
import pytest

from wigglenet.core.network import Network
from wigglenet.core.strategies import Backprop, FiniteDifference
from wigglenet.data.samples import adder_dataset, gate_dataset
from wigglenet.training.metrics import adder_failures, gate_failures
from wigglenet.training.trainer import SGDOptimizer, Trainer


def _train(arch, dataset, *, seed, epochs, lr, estimator=None):
    net = Network(arch)
    net.randomize(np.random.default_rng(seed))
    trainer = Trainer(net, estimator or Backprop(), SGDOptimizer(lr=lr))
    result = trainer.run(dataset, epochs, eval_every=epochs, log_every=0)
    return net, result


def test_or_gate_converges_with_backprop():
    data = gate_dataset("or")
    costs = []
    for seed in range(3):
        net, result = _train([2, 2, 1], data, seed=seed, epochs=10_000, lr=0.1)
        costs.append(result.final_cost)
        if result.final_cost < 0.01:
            break
    assert min(costs) < 0.01, costs
    assert gate_failures(net, data) == 0


@pytest.mark.slow
def test_or_gate_converges_with_finite_difference():
    data = gate_dataset("or")
    costs = []
    for seed in range(3):
        net, result = _train(
            [2, 2, 1],
            data,
            seed=seed,
            epochs=10_000,
            lr=0.1,
            estimator=FiniteDifference(eps=0.1),
        )
        costs.append(result.final_cost)
        if result.final_cost < 0.05 and gate_failures(net, data) == 0:
            break
    assert min(costs) < 0.05, costs
    assert gate_failures(net, data) == 0


@pytest.mark.slow
def test_xor_converges_with_hidden_layer():
    data = gate_dataset("xor")
    costs = []
    # a [2, 2, 1] sigmoid net can stall on a plateau from some initialisations
    for seed in range(5):
        net, result = _train([2, 2, 1], data, seed=seed, epochs=30_000, lr=0.1)
        costs.append(result.final_cost)
        if result.final_cost < 0.05:
            break
    assert min(costs) < 0.05, costs
    assert gate_failures(net, data) == 0


def test_xor_is_not_learnable_without_hidden_layer():
    data = gate_dataset("xor")
    for seed in range(2):
        _, result = _train([2, 1], data, seed=seed, epochs=10_000, lr=0.1)
        assert result.final_cost > 0.2


@pytest.mark.slow
def test_two_bit_adder_learns_every_sum():
    data = adder_dataset(2)
    fails = []
    for seed in range(3):
        net, _ = _train([4, 8, 3], data, seed=seed, epochs=5_000, lr=1.0)
        fails.append(adder_failures(net, 2))
        if fails[-1] == 0:
            break
    assert fails[-1] == 0, fails
