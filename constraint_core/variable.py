from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from beartype import beartype

if TYPE_CHECKING:
    from constraint_core.expression import Expression

ValueCallback = Callable[[float, float], None]

_ids = itertools.count()


class Variable:
    """
    A named scalar whose value is computed by the solver.

    Variables compare and hash by identity, so they can be used as mapping
    keys. Arithmetic on a variable produces an Expression.
    """

    def __init__(self, name: str = "", context: Any = None) -> None:
        self._name = name
        self._value = 0.0
        self._context = context
        self._id = next(_ids)
        self._callback: ValueCallback | None = None

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = name

    @property
    def context(self) -> Any:
        """Arbitrary user object attached to the variable."""
        return self._context

    @context.setter
    def context(self, context: Any) -> None:
        self._context = context

    @property
    def value(self) -> float:
        return self._value

    @beartype
    def set_value(self, value: float) -> None:
        """Store a new value and notify the subscriber if it changed."""
        previous = self._value
        self._value = value
        if self._callback is not None and previous != value:
            self._callback(value, previous)

    def subscribe(self, callback: ValueCallback) -> None:
        """Call ``callback(value, previous_value)`` whenever the value changes."""
        self._callback = callback

    def unsubscribe(self) -> None:
        self._callback = None

    def to_dict(self) -> dict[str, object]:
        return {"name": self._name, "value": self._value}

    def _expression(self) -> Expression:
        from constraint_core.expression import Expression

        return Expression(self)

    def __add__(self, other: object) -> Expression:
        return self._expression() + other

    def __radd__(self, other: object) -> Expression:
        return other + self._expression()

    def __sub__(self, other: object) -> Expression:
        return self._expression() - other

    def __rsub__(self, other: object) -> Expression:
        return other - self._expression()

    def __mul__(self, coefficient: object) -> Expression:
        return self._expression() * coefficient

    def __rmul__(self, coefficient: object) -> Expression:
        return coefficient * self._expression()

    def __truediv__(self, coefficient: object) -> Expression:
        return self._expression() / coefficient

    def __neg__(self) -> Expression:
        return -self._expression()

    def __repr__(self) -> str:
        return f"Variable(name={self._name!r}, value={self._value!r})"

    def __str__(self) -> str:
        prefix = "" if self._context is None else str(self._context)
        return f"{prefix}[{self._name}:{self._value}]"
