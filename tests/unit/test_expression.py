import pytest

from constraint_core.exceptions import ExpressionError
from constraint_core.expression import Expression
from constraint_core.variable import Variable


def test_empty_expression_is_constant_zero():
    expr = Expression()
    assert expr.is_constant()
    assert expr.constant == 0.0
    assert expr.value() == 0.0


def test_items_are_summed():
    x = Variable("x")
    y = Variable("y")
    inner = Expression(x, 2)

    expr = Expression(1, x, inner, (3, y), (2.0, inner))

    assert expr.terms == {x: 4.0, y: 3.0}
    assert expr.constant == 7.0


def test_value_uses_current_variable_values():
    x = Variable("x")
    y = Variable("y")
    x.set_value(2.0)
    y.set_value(-1.0)

    expr = 3 * x + 2 * y + 1.5
    assert expr.value() == 5.5


def test_terms_view_is_read_only():
    x = Variable("x")
    expr = Expression(x)
    with pytest.raises(TypeError):
        expr.terms[x] = 5.0  # type: ignore[index]


def test_operations_return_new_expressions():
    x = Variable("x")
    base = Expression(x, 1)

    total = base + 2
    assert total is not base
    assert base.constant == 1.0
    assert total.constant == 3.0


def test_subtract_and_negate():
    x = Variable("x")
    y = Variable("y")

    expr = Expression(x) - Expression(y, 4)
    assert expr.terms == {x: 1.0, y: -1.0}
    assert expr.constant == -4.0

    negated = -expr
    assert negated.terms == {x: -1.0, y: 1.0}
    assert negated.constant == 4.0


def test_divide():
    x = Variable("x")
    expr = Expression((4, x), 2) / 2
    assert expr.terms == {x: 2.0}
    assert expr.constant == 1.0


@pytest.mark.parametrize(
    "item, reason",
    [
        ((1.0, Variable("x"), 2.0), "length 2"),
        (("a", Variable("x")), "item 0 must be a number"),
        ((1.0, "x"), "item 1 must be a variable or expression"),
        ("x", "unsupported type"),
        (None, "unsupported type"),
        (True, "unsupported type"),
    ],
)
def test_invalid_items(item, reason):
    with pytest.raises(ExpressionError, match=reason):
        Expression(item)


def test_expression_error_is_value_error():
    with pytest.raises(ValueError):
        Expression([1.0])


def test_str():
    x = Variable("x")
    y = Variable("y")

    assert str(Expression(5)) == "5.0"
    assert str(Expression((2, x), y)) == "2.0*[x:0.0] + 1.0*[y:0.0]"
    assert str(Expression(x, -3)) == "1.0*[x:0.0] + -3.0"
