import numpy as np
import pytest

from autodiff import (
    ComputedVector,
    ConstantVector,
    Context,
    EmptyReductionError,
    ParallelConfig,
    Parameter,
    ParameterVector,
    RankMismatchError,
    Vector,
)
from autodiff.ops import add


def _xs(*values):
    return ParameterVector.from_values(values, name="x")


def test_reduce_sum_and_mean():
    xs = _xs(1.0, 2.0, 3.0)
    ctx = Context()
    total = xs.reduce_sum()
    mean = xs.reduce_mean()
    assert total.value(ctx) == 6.0
    assert mean.value(ctx) == 2.0
    assert total.gradient(ctx)[xs[1]] == 1.0
    assert mean.gradient(ctx)[xs[1]] == pytest.approx(1.0 / 3.0)


def test_reduce_sum_of_single_element():
    xs = _xs(4.0)
    ctx = Context()
    assert xs.reduce_sum().value(ctx) == 4.0
    assert xs.reduce_sum().gradient(ctx) == {xs[0]: 1.0}


def test_reduce_sum_of_long_vector():
    xs = ParameterVector.from_initializer(5000, lambda: 1.0)
    ctx = Context()
    total = xs.reduce_sum()
    assert total.value(ctx) == 5000.0
    assert len(total.gradient(ctx)) == 5000


def test_reduce_sum_matches_repeated_add():
    xs = _xs(0.1, 0.2, 0.3, 0.4)
    folded = xs[0]
    for e in xs.elements[1:]:
        folded = add(folded, e)
    ctx = Context()
    assert xs.reduce_sum().value(ctx) == folded.value(ctx)


@pytest.mark.parametrize("method", ["reduce_sum", "reduce_mean"])
def test_empty_reduction_fails(method):
    empty = ParameterVector()
    assert empty.rank == 0
    with pytest.raises(EmptyReductionError):
        getattr(empty, method)()


def test_rank_mismatch_detected_at_construction():
    a = _xs(1.0, 2.0)
    b = _xs(1.0, 2.0, 3.0)
    with pytest.raises(RankMismatchError) as info:
        a + b
    assert (info.value.left_rank, info.value.right_rank) == (2, 3)
    with pytest.raises(RankMismatchError):
        a - b
    with pytest.raises(RankMismatchError):
        a * b
    with pytest.raises(RankMismatchError):
        Vector.map2(add, a, b)
    with pytest.raises(ValueError):
        a.dot(b)


def test_elementwise_ops():
    xs = _xs(1.0, 2.0, 3.0)
    ys = ConstantVector.from_values([4.0, 5.0, 6.0])
    ctx = Context()
    assert list((xs + ys).values(ctx)) == [5.0, 7.0, 9.0]
    assert list((xs - ys).values(ctx)) == [-3.0, -3.0, -3.0]
    prod = xs * ys
    assert isinstance(prod, ComputedVector)
    assert list(prod.values(ctx)) == [4.0, 10.0, 18.0]
    assert prod[2].gradient(ctx) == {xs[2]: 6.0}


def test_scalar_broadcast_ops():
    xs = _xs(1.0, 2.0)
    s = Parameter(10.0)
    ctx = Context()
    assert list((xs * 2.0).values(ctx)) == [2.0, 4.0]
    assert list((3 * xs).values(ctx)) == [3.0, 6.0]
    assert list((xs + 1).values(ctx)) == [2.0, 3.0]
    assert list((1 + xs).values(ctx)) == [2.0, 3.0]
    assert list((xs - 1).values(ctx)) == [0.0, 1.0]
    assert list((5 - xs).values(ctx)) == [4.0, 3.0]
    assert list((xs / 2).values(ctx)) == [0.5, 1.0]
    assert list((-xs).values(ctx)) == [-1.0, -2.0]

    scaled = xs * s
    g = scaled.reduce_sum().gradient(ctx)
    assert g[s] == 3.0
    assert g[xs[0]] == 10.0
    assert list((s + xs).values(ctx)) == [11.0, 12.0]


def test_square_dot_and_map():
    xs = _xs(1.0, -2.0, 3.0)
    ys = ConstantVector(2.0, 2.0, 2.0)
    ctx = Context()
    assert list(xs.square().values(ctx)) == [1.0, 4.0, 9.0]
    d = xs.dot(ys)
    assert d.value(ctx) == 4.0
    assert d.gradient(ctx) == {xs[0]: 2.0, xs[1]: 2.0, xs[2]: 2.0}
    cubes = xs.map(lambda e: e * e * e)
    assert list(cubes.values(ctx)) == [1.0, -8.0, 27.0]


def test_mean_squared_error_gradient():
    xs = _xs(1.0, 2.0, 3.0)
    targets = ConstantVector.from_values([1.5, 1.5, 3.5])
    loss = (xs - targets).square().reduce_mean()
    ctx = Context()
    assert loss.value(ctx) == pytest.approx(0.75 / 3.0)
    g = loss.gradient(ctx)
    assert [g[x] for x in xs] == pytest.approx([2 * -0.5 / 3, 2 * 0.5 / 3, 2 * -0.5 / 3])


@pytest.mark.parametrize("config", [ParallelConfig(), ParallelConfig(enabled=False), ParallelConfig(n_workers=1)])
def test_batch_evaluation_matches_sequential(config):
    xs = _xs(*range(10))
    computed = ComputedVector(*(x * x for x in xs), config=config)
    ctx = Context()
    values = computed.prepare_values(ctx)
    grads = computed.prepare_gradients(ctx)
    assert isinstance(values, np.ndarray)
    assert list(values) == [float(i * i) for i in range(10)]
    assert [g[x] for g, x in zip(grads, xs)] == [2.0 * i for i in range(10)]
    for e in computed:
        assert ctx.contains_value(e)
        assert ctx.contains_gradient(e)


def test_leaf_vectors_evaluate_sequentially():
    xs = _xs(1.0, 2.0)
    ctx = Context()
    assert list(xs.prepare_values(ctx)) == [1.0, 2.0]
    assert xs.prepare_gradients(ctx) == [{xs[0]: 1.0}, {xs[1]: 1.0}]


def test_parameter_vector_construction():
    counter = iter(range(100))
    xs = ParameterVector.from_initializer(4, lambda: float(next(counter)), name="w")
    assert [float(p.val) for p in xs.params] == [0.0, 1.0, 2.0, 3.0]
    assert xs[2].name == "w[2]"
    assert len(xs) == 4

    xs.assign([5.0, 6.0, 7.0, 8.0])
    assert list(xs.values(Context())) == [5.0, 6.0, 7.0, 8.0]
    with pytest.raises(RankMismatchError):
        xs.assign([1.0])
    with pytest.raises(TypeError):
        ParameterVector(1.0)


def test_parallel_config_validates_workers():
    with pytest.raises(ValueError):
        ParallelConfig(n_workers=0)
