import numpy as np
import pytest

from aad_backprop.aad import (
    Constant,
    Context,
    Gradient,
    UnsupportedDerivativeError,
    check_grad,
)
from aad_backprop.aad.ops import (
    dot, logsoftmax, logsumexp, matmul, reduce_mean, reduce_sum, relu,
    sigmoid, sum_all, tanh, transpose,
)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


def test_broadcast_scalar_gradient_is_summed():
    ctx = Context()
    v = ctx.create_variable([1.0, 2.0, 3.0])
    s = ctx.create_variable(2.0)
    g = Gradient.of(sum_all(v * s), ctx)
    assert g.grad(s) == pytest.approx(6.0)
    assert np.shape(g.grad(s)) == ()
    np.testing.assert_allclose(g.grad(v), [2.0, 2.0, 2.0])


def test_broadcast_row_gradient_is_summed(rng):
    ctx = Context()
    m = ctx.create_variable(rng.normal(size=(2, 3)))
    row = ctx.create_variable(rng.normal(size=3))
    expr = sum_all(tanh(m + row) * m)
    g = Gradient.of(expr, ctx)
    assert g.grad(row).shape == (3,)
    assert check_grad(expr, ctx, row)
    assert check_grad(expr, ctx, m)


def test_sum_and_mean():
    ctx = Context()
    v = ctx.create_variable([1.0, 2.0, 3.0, 4.0])
    np.testing.assert_allclose(Gradient.of(reduce_mean(v), ctx).grad(v), [0.25] * 4)
    np.testing.assert_allclose(Gradient.of(reduce_sum(v * v), ctx).grad(v), [2.0, 4.0, 6.0, 8.0])


def test_reductions_along_axis(rng):
    ctx = Context()
    m = ctx.create_variable(rng.normal(size=(2, 4)))
    weights = Constant([1.0, -2.0])
    np.testing.assert_allclose(
        Gradient.of(sum_all(reduce_mean(m, axis=1) * weights), ctx).grad(m),
        [[0.25] * 4, [-0.5] * 4],
    )
    expr = sum_all(_squared_column_sums(m))
    assert check_grad(expr, ctx, m)


def _squared_column_sums(m):
    col = reduce_sum(m, axis=0)
    return col * col


@pytest.mark.parametrize("shape_a, shape_b", [
    ((3,), (3,)),
    ((2, 3), (3,)),
    ((3,), (3, 2)),
    ((2, 3), (3, 4)),
])
def test_dot_ranks_match_finite_differences(rng, shape_a, shape_b):
    ctx = Context()
    a = ctx.create_variable(rng.normal(size=shape_a))
    b = ctx.create_variable(rng.normal(size=shape_b))
    expr = sum_all(tanh(dot(a, b)))
    assert check_grad(expr, ctx, a)
    assert check_grad(expr, ctx, b)
    g = Gradient.of(expr, ctx)
    assert g.grad(a).shape == shape_a
    assert g.grad(b).shape == shape_b


def test_matmul_operator(rng):
    ctx = Context()
    a = ctx.create_variable(rng.normal(size=(2, 3)))
    b = ctx.create_variable(rng.normal(size=(3, 2)))
    lhs = Gradient.of(sum_all(a @ b), ctx).grad(a)
    rhs = Gradient.of(sum_all(matmul(a, b)), ctx).grad(a)
    np.testing.assert_allclose(lhs, rhs)
    np.testing.assert_allclose(lhs, np.ones((2, 2)) @ ctx.get_variable_value(b).T)


def test_dot_unsupported_rank_raises():
    ctx = Context()
    s = ctx.create_variable(2.0)
    v = ctx.create_variable([1.0, 2.0])
    g = Gradient.of(sum_all(dot(s, v)), ctx)
    assert g.value() == pytest.approx(6.0)
    with pytest.raises(UnsupportedDerivativeError, match=r"ranks \(0, 1\)"):
        g.grad(s)


def test_transpose():
    ctx = Context()
    a = ctx.create_variable([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    b = np.arange(6.0).reshape(3, 2)
    g = Gradient.of(sum_all(transpose(a) * b), ctx)
    np.testing.assert_allclose(g.grad(a), b.T)


def test_logsumexp_gradient_is_softmax():
    ctx = Context()
    x_val = np.array([0.5, -1.0, 2.0])
    x = ctx.create_variable(x_val)
    g = Gradient.of(logsumexp(x), ctx)
    softmax = np.exp(x_val) / np.exp(x_val).sum()
    assert g.value() == pytest.approx(np.log(np.exp(x_val).sum()))
    np.testing.assert_allclose(g.grad(x), softmax)


def test_logsumexp_is_stable_for_large_inputs():
    ctx = Context()
    x = ctx.create_variable([1000.0, 1000.0])
    assert Gradient.of(logsumexp(x), ctx).value() == pytest.approx(1000.0 + np.log(2.0))


def test_logsoftmax_along_axis(rng):
    ctx = Context()
    x = ctx.create_variable(rng.normal(size=(4, 3)))
    labels = Constant(np.eye(3)[[0, 2, 1, 0]])
    expr = -sum_all(logsoftmax(x, axis=1) * labels)
    rows = np.exp(logsoftmax(x, axis=1).eval(ctx).value).sum(axis=1)
    np.testing.assert_allclose(rows, np.ones(4))
    assert check_grad(expr, ctx, x)


def test_relu_gradient_masks_negatives_and_splits_zero():
    ctx = Context()
    v = ctx.create_variable([-1.0, 0.0, 2.0])
    g = Gradient.of(sum_all(relu(v)), ctx)
    np.testing.assert_allclose(g.value(), 2.0)
    np.testing.assert_allclose(g.grad(v), [0.0, 0.5, 1.0])


def test_sigmoid_array():
    ctx = Context()
    v = ctx.create_variable([-2.0, 0.0, 3.0])
    s = 1.0 / (1.0 + np.exp(-np.array([-2.0, 0.0, 3.0])))
    np.testing.assert_allclose(Gradient.of(sum_all(sigmoid(v)), ctx).grad(v), s * (1.0 - s))
