from unittest.mock import MagicMock

import pytest

from constraint_core.expression import Expression
from constraint_core.variable import Variable


def test_variable_defaults():
    x = Variable()
    assert x.name == ""
    assert x.value == 0.0
    assert x.context is None


def test_variable_ids_increase():
    a = Variable("a")
    b = Variable("b")
    assert b.id > a.id


def test_variable_name_and_context_are_settable():
    x = Variable("x")
    x.name = "renamed"
    x.context = "box"
    assert x.name == "renamed"
    assert x.context == "box"
    assert str(x) == "box[renamed:0.0]"


def test_variable_str_without_context():
    assert str(Variable("x")) == "[x:0.0]"


def test_to_dict():
    x = Variable("x")
    x.set_value(3.5)
    assert x.to_dict() == {"name": "x", "value": 3.5}


def test_subscribe_called_on_change_only():
    x = Variable("x")
    callback = MagicMock()
    x.subscribe(callback)

    x.set_value(1.0)
    x.set_value(1.0)
    x.set_value(2.0)

    assert callback.call_count == 2
    callback.assert_any_call(1.0, 0.0)
    callback.assert_called_with(2.0, 1.0)


def test_unsubscribe_stops_notifications():
    x = Variable("x")
    callback = MagicMock()
    x.subscribe(callback)
    x.unsubscribe()
    x.set_value(4.0)
    callback.assert_not_called()


def test_variables_hash_by_identity():
    a = Variable("same")
    b = Variable("same")
    assert a != b
    assert len({a, b}) == 2


def test_arithmetic_builds_expressions():
    x = Variable("x")
    y = Variable("y")

    expr = 2 * x + y - 3
    assert isinstance(expr, Expression)
    assert expr.terms == {x: 2.0, y: 1.0}
    assert expr.constant == -3.0


def test_reflected_arithmetic():
    x = Variable("x")

    assert (10 - x).terms == {x: -1.0}
    assert (10 - x).constant == 10.0
    assert (1 + x).constant == 1.0
    assert (x * 3).terms == {x: 3.0}
    assert (x / 4).terms == {x: 0.25}
    assert (-x).terms == {x: -1.0}


def test_variable_minus_itself_keeps_zero_term():
    x = Variable("x")
    expr = x - x
    assert expr.terms == {x: 0.0}
    assert expr.constant == 0.0


def test_divide_by_zero():
    with pytest.raises(ZeroDivisionError):
        Variable("x") / 0


def test_multiply_by_variable_is_not_linear():
    with pytest.raises(TypeError):
        Variable("x") * Variable("y")
