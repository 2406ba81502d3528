import numpy as np
import pytest

from aad_backprop.aad import (
    Context,
    GradCheckConfig,
    check_grad,
    compare_grads,
    finite_diff_grad,
)
from aad_backprop.aad.core.var import Operation
from aad_backprop.aad.core.vjp import LinVJP
from aad_backprop.aad.ops import cos, sin, sum_all


class WrongSquare(Operation):
    """x**2 with a deliberately wrong derivative (x instead of 2x)."""
    op_tag = "wrong_square"

    def forward(self, x):
        return x * x, LinVJP(lambda v: v)


def test_forward_scheme():
    ctx = Context()
    x = ctx.create_variable(3.0)
    fd = finite_diff_grad(x * x, ctx, x, eps=1e-6, scheme='forward')
    assert fd == pytest.approx(6.0, abs=1e-4)


def test_central_scheme_is_default():
    ctx = Context()
    x = ctx.create_variable(0.5)
    assert finite_diff_grad(sin(x), ctx, x) == pytest.approx(np.cos(0.5), abs=1e-8)


def test_array_variable_is_bumped_elementwise():
    ctx = Context()
    v = ctx.create_variable([0.1, 0.2, 0.3])
    fd = finite_diff_grad(sum_all(sin(v)), ctx, v)
    assert fd.shape == (3,)
    np.testing.assert_allclose(fd, np.cos([0.1, 0.2, 0.3]), atol=1e-8)


def test_value_is_restored():
    ctx = Context()
    v = ctx.create_variable([0.1, 0.2])
    x = ctx.create_variable(0.7)
    finite_diff_grad(sum_all(sin(v)) * x, ctx, v)
    finite_diff_grad(sum_all(sin(v)) * x, ctx, x, scheme='forward')
    np.testing.assert_array_equal(ctx.get_variable_value(v), [0.1, 0.2])
    assert ctx.get_variable_value(x) == 0.7


def test_unknown_scheme_raises():
    ctx = Context()
    x = ctx.create_variable(0.5)
    with pytest.raises(ValueError, match="Unknown finite-difference scheme"):
        finite_diff_grad(sin(x), ctx, x, scheme='backward')


def test_non_scalar_expression_raises():
    ctx = Context()
    v = ctx.create_variable([0.1, 0.2])
    with pytest.raises(ValueError, match="scalar-valued"):
        finite_diff_grad(sin(v), ctx, v)
    np.testing.assert_array_equal(ctx.get_variable_value(v), [0.1, 0.2])


def test_compare_grads_returns_both_estimates():
    ctx = Context()
    x = ctx.create_variable(0.5)
    y = ctx.create_variable(0.3)
    fd, ad = compare_grads(y * sin(x) + cos(y), ctx, y)
    assert ad == pytest.approx(np.sin(0.5) - np.sin(0.3))
    assert fd == pytest.approx(ad, abs=1e-8)


def test_check_grad_detects_wrong_rule():
    ctx = Context()
    x = ctx.create_variable(1.5)
    assert check_grad(x * x, ctx, x)
    assert not check_grad(WrongSquare(x), ctx, x)


def test_check_grad_honours_config():
    ctx = Context()
    x = ctx.create_variable(1.5)
    loose = GradCheckConfig(epsilon=1e-3, scheme='forward', rtol=1e-2, atol=1e-2)
    strict = GradCheckConfig(epsilon=1e-3, scheme='forward', rtol=0.0, atol=1e-9)
    assert check_grad(x * x * x, ctx, x, loose)
    assert not check_grad(x * x * x, ctx, x, strict)
