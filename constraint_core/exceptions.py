"""
Custom exception hierarchy for constraint solving.

Provides structured error handling with specific exception types for the
different ways building expressions or editing the solver can fail. The
tolerance helpers in ``constraint_core.floats`` never raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from constraint_core.constraint import Constraint
    from constraint_core.variable import Variable


class ConstraintSolverError(Exception):
    """Base exception for all constraint solver errors."""

    pass


class ExpressionError(ConstraintSolverError, ValueError):
    """Raised when an expression is built from an unsupported item."""

    def __init__(self, item: object, reason: str) -> None:
        self.item = item
        self.reason = reason
        super().__init__(f"Invalid expression item {item!r}: {reason}")


class DuplicateConstraintError(ConstraintSolverError):
    """Raised when a constraint is added to a solver that already holds it."""

    def __init__(self, constraint: Constraint) -> None:
        self.constraint = constraint
        super().__init__(f"Duplicate constraint: {constraint}")


class UnknownConstraintError(ConstraintSolverError):
    """Raised when removing a constraint the solver does not hold."""

    def __init__(self, constraint: Constraint) -> None:
        self.constraint = constraint
        super().__init__(f"Unknown constraint: {constraint}")


class UnsatisfiableConstraintError(ConstraintSolverError):
    """Raised when a required constraint conflicts with the current system."""

    def __init__(self, constraint: Constraint) -> None:
        self.constraint = constraint
        super().__init__(f"Unsatisfiable constraint: {constraint}")


class DuplicateEditVariableError(ConstraintSolverError):
    """Raised when a variable is registered as an edit variable twice."""

    def __init__(self, variable: Variable) -> None:
        self.variable = variable
        super().__init__(f"Duplicate edit variable: {variable}")


class UnknownEditVariableError(ConstraintSolverError):
    """Raised when a variable is used as an edit variable without being registered."""

    def __init__(self, variable: Variable) -> None:
        self.variable = variable
        super().__init__(f"Unknown edit variable: {variable}")


class BadRequiredStrengthError(ConstraintSolverError):
    """Raised when an edit variable is given the required strength."""

    def __init__(self, strength: float) -> None:
        self.strength = strength
        super().__init__(f"Edit variable strength must be below required, got {strength}")


class UnboundedObjectiveError(ConstraintSolverError):
    """Raised when the objective can decrease without bound."""

    def __init__(self) -> None:
        super().__init__("The objective is unbounded")


class SolverIterationsExceededError(ConstraintSolverError):
    """Raised when optimization does not converge within the iteration limit."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"Solver iterations exceeded: {max_iterations}")


class InternalSolverError(ConstraintSolverError):
    """Raised when the tableau reaches a state that should not be possible."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Internal solver error: {reason}")
