import logging

import pytest

from autodiff import (
    Context,
    GradientDescent,
    OptimizerConfig,
    Parameter,
    ParameterVector,
    ConstantVector,
    update_parameters,
)
from autodiff.optim import Optimizer


def test_default_learn_rate():
    x = Parameter(1.0)
    assert GradientDescent(x * x).learn_rate == 0.001
    assert GradientDescent(x * x, config=OptimizerConfig(learn_rate=0.5)).learn_rate == 0.5
    assert GradientDescent(x * x, 0.2, OptimizerConfig(learn_rate=0.5)).learn_rate == 0.2


def test_single_step_updates_parameter():
    x = Parameter(0.0)
    opt = GradientDescent((x - 3.0).square(), learn_rate=0.1)
    snapshot = opt.minimize(Context())
    assert snapshot == {x: -6.0}
    assert float(x.val) == pytest.approx(0.6)


def test_converges_monotonically_on_quadratic():
    x = Parameter(0.0)
    loss = (x - 3.0).square()
    opt = GradientDescent(loss, learn_rate=0.1)

    xs, losses = [float(x.val)], []
    for _ in range(60):
        ctx = Context()
        losses.append(float(loss.value(ctx)))
        opt.minimize(ctx)
        xs.append(float(x.val))

    assert all(a < b <= 3.0 for a, b in zip(xs, xs[1:]))
    assert all(b <= a for a, b in zip(losses, losses[1:]))
    assert xs[-1] == pytest.approx(3.0, abs=1e-4)


def test_all_updates_use_one_gradient_snapshot():
    x, y = Parameter(1.0), Parameter(2.0)
    opt = GradientDescent(x * y, learn_rate=0.1)
    opt.minimize(Context())
    # d/dx = y0 = 2, d/dy = x0 = 1
    assert float(x.val) == pytest.approx(0.8)
    assert float(y.val) == pytest.approx(1.9)


def test_update_parameters_visits_every_parameter_once():
    a, b, c = Parameter(1.0), Parameter(2.0), Parameter(3.0)
    loss = a * b + b * c
    seen = []
    snapshot = update_parameters(loss, lambda p, g: seen.append((p, g)), Context())
    assert dict(seen) == snapshot == {a: 2.0, b: 4.0, c: 2.0}
    assert len(seen) == 3


def test_fit_records_non_increasing_history():
    w = ParameterVector.from_values([0.0, 0.0, 0.0], name="w")
    target = ConstantVector.from_values([1.0, -2.0, 0.5])
    loss = (w - target).square().reduce_mean()
    opt = GradientDescent(loss, learn_rate=0.5)

    history = opt.fit(100)
    assert len(history) == 100
    assert all(b <= a for a, b in zip(history, history[1:]))
    assert [float(p.val) for p in w.params] == pytest.approx([1.0, -2.0, 0.5], abs=1e-4)

    more = opt.fit(5)
    assert len(more) == 5
    assert len(opt.loss_history) == 105


def test_fit_logs_progress(caplog):
    x = Parameter(0.0)
    opt = GradientDescent((x - 1.0).square(), config=OptimizerConfig(learn_rate=0.1, log_every=5))
    with caplog.at_level(logging.INFO, logger="autodiff.optim.base"):
        opt.fit(10)
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 2
    assert messages[0].startswith("step 5/10")


def test_custom_optimizer_subclass():
    class SignDescent(Optimizer):
        def minimize(self, ctx):
            def step(param, partial):
                param.val = param.val - 0.5 * (1.0 if partial > 0 else -1.0)
            return update_parameters(self.loss, step, ctx)

    x = Parameter(2.0)
    SignDescent(x * x).fit(4)
    assert float(x.val) == 0.0

    with pytest.raises(TypeError):
        Optimizer(x)
