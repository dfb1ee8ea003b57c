import numpy as np
import pytest

from wigglenet.core.activations import sigmoid, sigmoid_, sigmoid_deriv
from wigglenet.core.matrix import Matrix
from wigglenet.core.network import Network
from wigglenet.core.types import Dataset
from wigglenet.data.samples import gate_dataset


def test_sigmoid_midpoint_and_range():
    assert sigmoid(0.0) == 0.5
    for x in np.linspace(-30.0, 30.0, 121):
        assert 0.0 < sigmoid(float(x)) < 1.0
    assert sigmoid_deriv(0.5) == 0.25
    m = sigmoid_(Matrix(1, 3))
    assert m.to_list() == [[0.5, 0.5, 0.5]]


def test_sigmoid_saturates_instead_of_overflowing():
    assert sigmoid(-1000.0) == 0.0
    assert sigmoid(1000.0) == 1.0
    net = Network([1, 1])
    net.weights[0].set(0, 0, 1000.0)
    assert net.predict(Matrix.from_rows([[-1.0]])).to_list() == [[0.0]]


def test_network_shapes_follow_architecture():
    net = Network([4, 8, 3])
    assert net.layer_count == 2
    assert [w.shape for w in net.weights] == [(4, 8), (8, 3)]
    assert [b.shape for b in net.biases] == [(1, 8), (1, 3)]
    assert net.parameter_count() == 4 * 8 + 8 + 8 * 3 + 3
    trace = net.new_trace()
    assert [m.shape for m in trace.layers] == [(1, 4), (1, 8), (1, 3)]
    assert net.describe().layer_dims == [4, 8, 3]


@pytest.mark.parametrize("arch", [[], [3], [2, 0, 1]])
def test_invalid_architecture_raises(arch):
    with pytest.raises(ValueError):
        Network(arch)


def test_randomize_resamples_parameters_only():
    net = Network([2, 2, 1])
    trace = net.new_trace()
    net.randomize(np.random.default_rng(0), -1.0, 1.0)
    values = [v for m in net.weights + net.biases for v in m.elems]
    assert all(-1.0 <= v < 1.0 for v in values)
    assert any(v != 0.0 for v in values)
    assert all(v == 0.0 for m in trace.layers for v in m.elems)


def test_parameters_order_is_weights_then_biases_per_layer():
    net = Network([2, 1, 1])
    visited = [(id(m), r, c) for m, r, c in net.parameters()]
    expected = [
        (id(net.weights[0]), 0, 0),
        (id(net.weights[0]), 1, 0),
        (id(net.biases[0]), 0, 0),
        (id(net.weights[1]), 0, 0),
        (id(net.biases[1]), 0, 0),
    ]
    assert visited == expected


def test_set_input_requires_exact_shape():
    net = Network([2, 1])
    trace = net.new_trace()
    with pytest.raises(ValueError):
        net.set_input(trace, Matrix(1, 3))
    with pytest.raises(ValueError):
        net.set_input(trace, Matrix(2, 2))
    net.set_input(trace, Matrix.from_rows([[1.0, 0.0]]))
    assert trace.input.to_list() == [[1.0, 0.0]]


def test_forward_with_zero_parameters_outputs_half():
    net = Network([2, 3, 1])
    trace = net.new_trace()
    net.set_input(trace, Matrix.from_rows([[1.0, 1.0]]))
    net.forward(trace)
    assert net.output(trace).to_list() == [[0.5]]
    assert trace.layers[1].to_list() == [[0.5, 0.5, 0.5]]


def test_forward_matches_hand_computation():
    net = Network([2, 1])
    net.weights[0].set(0, 0, 2.0)
    net.weights[0].set(1, 0, -1.0)
    net.biases[0].set(0, 0, 0.5)
    out = net.predict(Matrix.from_rows([[1.0, 3.0]]))
    assert out.get(0, 0) == pytest.approx(sigmoid(2.0 - 3.0 + 0.5))


def test_forward_is_idempotent():
    net = Network([2, 4, 2])
    net.randomize(np.random.default_rng(5))
    trace = net.new_trace()
    net.set_input(trace, Matrix.from_rows([[0.3, 0.9]]))
    first = net.forward(trace).output.to_list()
    second = net.forward(trace).output.to_list()
    assert first == second


def test_forward_rejects_foreign_trace():
    net = Network([2, 2, 1])
    with pytest.raises(ValueError):
        net.forward(Network([2, 3, 1]).new_trace())


def test_cost_with_zero_parameters():
    net = Network([2, 2, 1])
    assert net.cost(gate_dataset("or")) == pytest.approx(0.25)


def test_cost_sums_output_columns():
    net = Network([1, 2])
    data = Dataset(
        inputs=Matrix.from_rows([[0.0], [1.0]]),
        targets=Matrix.from_rows([[1.0, 1.0], [0.0, 1.0]]),
    )
    # every output is 0.5, so each column contributes 0.25 per example
    assert net.cost(data) == pytest.approx(0.5)


def test_cost_leaves_trace_on_last_example():
    net = Network([2, 1])
    net.randomize(np.random.default_rng(1))
    data = gate_dataset("xor")
    trace = net.new_trace()
    net.cost(data, trace)
    assert trace.input.to_list() == [[1.0, 1.0]]


def test_cost_rejects_mismatched_widths():
    data = gate_dataset("or")
    with pytest.raises(ValueError):
        Network([2, 2]).cost(data)
    with pytest.raises(ValueError):
        Network([3, 1]).cost(data)


def test_dataset_row_mismatch_raises():
    with pytest.raises(ValueError):
        Dataset(inputs=Matrix(4, 2), targets=Matrix(3, 1))


def test_apply_descends_along_gradient():
    net = Network([1, 1])
    net.fill(1.0)
    grad = net.new_gradient()
    grad.weights[0].fill(2.0)
    grad.biases[0].fill(-4.0)
    net.apply(grad, 0.5)
    assert net.weights[0].get(0, 0) == pytest.approx(0.0)
    assert net.biases[0].get(0, 0) == pytest.approx(3.0)


def test_apply_rejects_mismatched_gradient():
    net = Network([2, 1])
    with pytest.raises(ValueError):
        net.apply(Network([2, 2]).new_gradient(), 0.1)


def test_copy_preserves_parameters_independently():
    net = Network([2, 2, 1])
    net.randomize(np.random.default_rng(2))
    clone = net.copy()
    clone.fill(0.0)
    assert any(v != 0.0 for v in net.weights[0].elems)
