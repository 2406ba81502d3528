import numpy as np
import pytest

from aad_backprop.aad import Context, Constant, InvalidArgnumError
from aad_backprop.aad.ops import cos, sin


@pytest.fixture
def ctx_xy():
    ctx = Context()
    x = ctx.create_variable(0.5)
    y = ctx.create_variable(2.0)
    return ctx, x, y


def test_leaf_ids_are_variable_indices(ctx_xy):
    ctx, x, y = ctx_xy
    assert x.eval(ctx).id == 0
    assert y.eval(ctx).id == 1
    assert x.eval(ctx).is_leaf()


def test_interior_ids_start_after_variables(ctx_xy):
    ctx, x, y = ctx_xy
    root = x * y + x
    node = root.eval(ctx)
    mul = node.operands[0]
    assert mul.id == 2
    assert node.id == 3
    assert node.value == pytest.approx(0.5 * 2.0 + 0.5)


def test_progenitors_cover_everything_upstream(ctx_xy):
    ctx, x, y = ctx_xy
    node = (x * y + x).eval(ctx)
    assert node.progenitors == frozenset({0, 1, 2})
    assert node.operands[0].progenitors == frozenset({0, 1})
    assert x.eval(ctx).progenitors == frozenset()


def test_counter_resets_on_every_pass(ctx_xy):
    ctx, x, y = ctx_xy
    expr = sin(x) * cos(y)
    first = expr.eval(ctx)
    second = expr.eval(ctx)
    assert first.id == second.id
    assert first is not second


def test_constant_gets_fresh_id(ctx_xy):
    ctx, x, _ = ctx_xy
    node = (Constant(3.0) * x).eval(ctx)
    const, leaf = node.operands
    assert const.op_tag == "const"
    assert const.id == 2
    assert leaf.id == 0
    assert node.id == 3


def test_raw_numbers_are_wrapped_as_constants(ctx_xy):
    ctx, x, _ = ctx_xy
    node = (2.0 * x).eval(ctx)
    assert node.operands[0].op_tag == "const"
    assert node.value == pytest.approx(1.0)


def test_shared_subexpression_is_evaluated_once(ctx_xy):
    ctx, x, _ = ctx_xy
    s = sin(x)
    tape = ctx.new_tape()
    node = (s * s).eval(ctx, tape)
    assert node.operands[0] is node.operands[1]
    assert len(tape) == 3  # x, sin, mul


def test_scalar_results_are_float64(ctx_xy):
    ctx, x, y = ctx_xy
    assert isinstance((x * y).eval(ctx).value, np.float64)


def test_node_vjp_rejects_bad_argnum(ctx_xy):
    ctx, x, _ = ctx_xy
    node = sin(x).eval(ctx)
    with pytest.raises(InvalidArgnumError, match="Invalid argnum 1 fed to sin VJP"):
        node.vjp(1.0, node.operands[0], 1)


def test_foreign_variable_fails_during_evaluation(ctx_xy):
    ctx, x, _ = ctx_xy
    other = Context()
    z = other.create_variable(1.0)
    with pytest.raises(IndexError):
        (x * z).eval(ctx)
