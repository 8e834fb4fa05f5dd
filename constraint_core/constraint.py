from __future__ import annotations

import itertools
from enum import Enum

from constraint_core import strength as strengths
from constraint_core.expression import Expression
from constraint_core.variable import Variable


class Operator(str, Enum):
    LE = "<="
    GE = ">="
    EQ = "=="

    def symbol(self) -> str:
        return "=" if self == Operator.EQ else self.value


_ids = itertools.count()


class Constraint:
    """
    A linear constraint ``expression <op> 0`` with a strength.

    When ``rhs`` is given, or ``expression`` is a bare Variable, the stored
    expression is ``expression - rhs``. The strength is clipped to
    [0, REQUIRED].
    """

    def __init__(
        self,
        expression: Expression | Variable,
        operator: Operator,
        rhs: Expression | Variable | float | int | None = None,
        strength: float | int = strengths.REQUIRED,
    ) -> None:
        self._operator = Operator(operator)
        self._strength = strengths.clip(strength)
        if rhs is None and isinstance(expression, Expression):
            self._expression = expression
        else:
            self._expression = Expression(expression) - (0.0 if rhs is None else rhs)
        self._id = next(_ids)

    @property
    def id(self) -> int:
        return self._id

    @property
    def expression(self) -> Expression:
        return self._expression

    @property
    def op(self) -> Operator:
        return self._operator

    @property
    def strength(self) -> float:
        return self._strength

    def __repr__(self) -> str:
        return f"Constraint({self})"

    def __str__(self) -> str:
        return f"{self._expression} {self._operator.symbol()} 0 ({self._strength})"
