from typing import Final

from beartype import beartype

# Absolute tolerance shared by every numeric comparison in the solver.
EPSILON: Final[float] = 1.0e-8


@beartype
def approx_equal(a: float, b: float) -> bool:
    """
    Compare two floats within the fixed absolute tolerance.

    The difference must be strictly below EPSILON. The branch on ``a > b``
    is kept instead of ``abs(a - b)`` so that non-finite inputs behave as
    plain IEEE subtraction dictates: any NaN operand, and two infinities of
    the same sign (``inf - inf`` is NaN), compare as not equal.
    """
    return (a - b) < EPSILON if a > b else (b - a) < EPSILON


@beartype
def near_zero(value: float) -> bool:
    """Check if a float is effectively zero within the fixed absolute tolerance."""
    return -value < EPSILON if value < 0.0 else value < EPSILON
