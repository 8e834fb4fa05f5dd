"""
Symbolic constraint strengths.

A strength is a single float packing three weight levels (strong, medium,
weak), each clamped to [0, 1000], so that any amount of a higher level
outweighs the largest amount of the level below it.
"""

from typing import Final

from beartype import beartype

_LEVEL_MAX: Final[float] = 1000.0


def _clamp_level(value: float) -> float:
    return max(0.0, min(_LEVEL_MAX, value))


@beartype
def create(strong: float | int, medium: float | int, weak: float | int, weight: float | int = 1.0) -> float:
    """Create a strength from its strong, medium and weak components."""
    result = 0.0
    result += _clamp_level(strong * weight) * 1_000_000.0
    result += _clamp_level(medium * weight) * 1_000.0
    result += _clamp_level(weak * weight)
    return result


REQUIRED: Final[float] = create(1000.0, 1000.0, 1000.0)
STRONG: Final[float] = create(1.0, 0.0, 0.0)
MEDIUM: Final[float] = create(0.0, 1.0, 0.0)
WEAK: Final[float] = create(0.0, 0.0, 1.0)


@beartype
def clip(value: float | int) -> float:
    """Clip a strength to the allowed range [0, REQUIRED]."""
    return max(0.0, min(REQUIRED, float(value)))
