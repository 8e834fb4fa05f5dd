from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from constraint_core.exceptions import ExpressionError
from constraint_core.variable import Variable


def _is_number(item: object) -> bool:
    return isinstance(item, (int, float)) and not isinstance(item, bool)


class Expression:
    """
    A linear expression: a sum of weighted variables plus a constant.

    The constructor sums any number of items, each one of:
      - a number (added to the constant)
      - a Variable (coefficient 1)
      - an Expression (terms and constant merged)
      - a ``(coefficient, Variable | Expression)`` pair (scaled before merging)

    Coefficients for the same variable accumulate.
    """

    def __init__(self, *items: object) -> None:
        self._terms: dict[Variable, float] = {}
        self._constant = 0.0
        for item in items:
            self._merge(item)

    def _add_term(self, variable: Variable, coefficient: float) -> None:
        self._terms[variable] = self._terms.get(variable, 0.0) + coefficient

    def _merge_scaled(self, other: Expression, factor: float) -> None:
        self._constant += other._constant * factor
        for variable, coefficient in other._terms.items():
            self._add_term(variable, coefficient * factor)

    def _merge(self, item: object) -> None:
        if _is_number(item):
            self._constant += float(item)  # type: ignore[arg-type]
        elif isinstance(item, Variable):
            self._add_term(item, 1.0)
        elif isinstance(item, Expression):
            self._merge_scaled(item, 1.0)
        elif isinstance(item, tuple):
            if len(item) != 2:
                raise ExpressionError(item, "pair must have length 2")
            factor, target = item
            if not _is_number(factor):
                raise ExpressionError(item, "pair item 0 must be a number")
            if isinstance(target, Variable):
                self._add_term(target, float(factor))
            elif isinstance(target, Expression):
                self._merge_scaled(target, float(factor))
            else:
                raise ExpressionError(item, "pair item 1 must be a variable or expression")
        else:
            raise ExpressionError(item, "unsupported type")

    @property
    def terms(self) -> Mapping[Variable, float]:
        """Read-only view of the variable coefficients."""
        return MappingProxyType(self._terms)

    @property
    def constant(self) -> float:
        return self._constant

    def value(self) -> float:
        """Evaluate the expression with the current variable values."""
        result = self._constant
        for variable, coefficient in self._terms.items():
            result += variable.value * coefficient
        return result

    def is_constant(self) -> bool:
        return not self._terms

    def __add__(self, other: object) -> Expression:
        if not (_is_number(other) or isinstance(other, (Variable, Expression))):
            return NotImplemented
        return Expression(self, other)

    def __radd__(self, other: object) -> Expression:
        if not _is_number(other):
            return NotImplemented
        return Expression(other, self)

    def __sub__(self, other: object) -> Expression:
        if _is_number(other):
            return Expression(self, -other)  # type: ignore[operator]
        if not isinstance(other, (Variable, Expression)):
            return NotImplemented
        return Expression(self, (-1.0, other))

    def __rsub__(self, other: object) -> Expression:
        if not _is_number(other):
            return NotImplemented
        return Expression(other, (-1.0, self))

    def __mul__(self, coefficient: object) -> Expression:
        if not _is_number(coefficient):
            return NotImplemented
        return Expression((coefficient, self))

    __rmul__ = __mul__

    def __truediv__(self, coefficient: object) -> Expression:
        if not _is_number(coefficient):
            return NotImplemented
        return Expression((1.0 / coefficient, self))  # type: ignore[operator]

    def __neg__(self) -> Expression:
        return Expression((-1.0, self))

    def __repr__(self) -> str:
        return f"Expression({self})"

    def __str__(self) -> str:
        parts = [f"{coefficient}*{variable}" for variable, coefficient in self._terms.items()]
        if self._constant != 0.0 or not parts:
            parts.append(str(self._constant))
        return " + ".join(parts)
