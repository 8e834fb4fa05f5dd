import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from constraint_core.floats import EPSILON, approx_equal, near_zero

finite_floats = st.floats(allow_nan=False, allow_infinity=False)
INF = math.inf
NAN = math.nan


def test_epsilon_value():
    assert EPSILON == 1.0e-8


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (0.0, 9.0e-9, True),
        # Difference exactly at the tolerance is not equal
        (0.0, 1.0e-8, False),
        (1.0e-8, 0.0, False),
        (0.0, 1.1e-8, False),
        (5.0, 5.0 + 9.0e-9, True),
        (5.0, 5.0 - 9.0e-9, True),
        (1.0, 1.000000001, True),
        (1.0, 1.0 + 2.0e-8, False),
        (-3.0, -3.0, True),
        (0.0, -0.0, True),
    ],
)
def test_approx_equal_table(a, b, expected):
    assert approx_equal(a, b) is expected


def test_approx_equal_uses_rounded_difference():
    # 1.00000001 rounds to 1 + 9.99999994e-9, which is inside the tolerance
    assert 1.00000001 - 1.0 < EPSILON
    assert approx_equal(1.0, 1.00000001)


def test_approx_equal_tolerance_is_absolute():
    # 16384.0 is one ulp at 1e20; 1e20 + 1.0 rounds back to 1e20
    assert 1.0e20 + 1.0 == 1.0e20
    assert approx_equal(1.0e20, 1.0e20 + 16384.0) is False
    assert approx_equal(1.0e20 + 16384.0, 1.0e20) is False


@pytest.mark.parametrize(
    "a, b",
    [
        (NAN, NAN),
        (NAN, 0.0),
        (0.0, NAN),
        (INF, INF),
        (-INF, -INF),
        (INF, -INF),
        (-INF, INF),
        (INF, 0.0),
        (0.0, -INF),
    ],
)
def test_approx_equal_non_finite_is_never_equal(a, b):
    assert approx_equal(a, b) is False


@given(finite_floats)
def test_approx_equal_hypothesis_reflexive(x):
    assert approx_equal(x, x)


@given(finite_floats, finite_floats)
def test_approx_equal_hypothesis_symmetric(a, b):
    assert approx_equal(a, b) == approx_equal(b, a)


@given(
    st.floats(min_value=-1e6, max_value=1e6),
    st.floats(min_value=-1e6, max_value=1e6),
)
def test_approx_equal_hypothesis_matches_absolute_difference(a, b):
    assert approx_equal(a, b) == (abs(a - b) < EPSILON)


@given(st.floats(allow_nan=True, allow_infinity=True), st.floats(allow_nan=True, allow_infinity=True))
def test_approx_equal_hypothesis_deterministic(a, b):
    assert approx_equal(a, b) == approx_equal(a, b)


@given(st.floats(allow_nan=True, allow_infinity=True))
def test_approx_equal_hypothesis_nan_operand(x):
    assert approx_equal(NAN, x) is False
    assert approx_equal(x, NAN) is False


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, True),
        (-0.0, True),
        (9.0e-9, True),
        (-9.0e-9, True),
        (1.0e-8, False),
        (-1.0e-8, False),
        (1.0, False),
        (NAN, False),
        (INF, False),
        (-INF, False),
    ],
)
def test_near_zero_table(value, expected):
    assert near_zero(value) is expected


@given(finite_floats)
def test_near_zero_hypothesis_matches_approx_equal(f):
    assert near_zero(f) == approx_equal(f, 0.0)
