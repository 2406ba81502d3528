import numpy as np
import pytest

from aad_backprop.aad import Context, ContextMismatchError, Variable


def test_create_variable_assigns_sequential_indices():
    ctx = Context()
    x = ctx.create_variable(0.5)
    y = ctx.create_variable([1.0, 2.0])
    assert (x.index, y.index) == (0, 1)
    assert len(ctx) == ctx.n_variables == 2
    assert x.context is ctx


def test_values_are_stored_as_float64():
    ctx = Context()
    x = ctx.create_variable(3)
    v = ctx.create_variable([1, 2, 3])
    assert isinstance(ctx.get_variable_value(x), np.float64)
    assert ctx.get_variable_value(v).dtype == np.float64


def test_array_value_is_copied_on_store():
    ctx = Context()
    data = np.array([1.0, 2.0])
    v = ctx.create_variable(data)
    data[0] = 100.0
    np.testing.assert_array_equal(ctx.get_variable_value(v), [1.0, 2.0])


def test_set_variable_value_overwrites():
    ctx = Context()
    x = ctx.create_variable(0.5)
    ctx.set_variable_value(x, 0.8)
    assert ctx.get_variable_value(x) == pytest.approx(0.8)


def test_non_numeric_value_raises_type_error():
    ctx = Context()
    with pytest.raises(TypeError):
        ctx.create_variable("0.5")


def test_foreign_variable_is_rejected():
    ctx_a, ctx_b = Context(), Context()
    x = ctx_a.create_variable(1.0)
    ctx_b.create_variable(2.0)
    with pytest.raises(ContextMismatchError):
        ctx_b.set_variable_value(x, 3.0)
    with pytest.raises(IndexError):
        ctx_b.get_variable_value(x)


def test_check_variable_rejects_non_variables():
    ctx = Context()
    with pytest.raises(TypeError):
        ctx.check_variable(0)


def test_variables_lists_every_slot():
    ctx = Context()
    x = ctx.create_variable(1.0)
    y = ctx.create_variable(2.0)
    assert ctx.variables() == [x, y]
    assert repr(ctx) == "Context(n_variables=2)"
    assert isinstance(ctx.variables()[0], Variable)
