from constraint_core import floats, strength
from constraint_core.config import ConfigError
from constraint_core.config.solver import SolverConfig
from constraint_core.constraint import Constraint, Operator
from constraint_core.exceptions import (
    BadRequiredStrengthError,
    ConstraintSolverError,
    DuplicateConstraintError,
    DuplicateEditVariableError,
    ExpressionError,
    InternalSolverError,
    SolverIterationsExceededError,
    UnboundedObjectiveError,
    UnknownConstraintError,
    UnknownEditVariableError,
    UnsatisfiableConstraintError,
)
from constraint_core.expression import Expression
from constraint_core.floats import EPSILON, approx_equal, near_zero
from constraint_core.solver import Solver
from constraint_core.variable import Variable

__all__ = [
    "EPSILON",
    "BadRequiredStrengthError",
    "ConfigError",
    "Constraint",
    "ConstraintSolverError",
    "DuplicateConstraintError",
    "DuplicateEditVariableError",
    "Expression",
    "ExpressionError",
    "InternalSolverError",
    "Operator",
    "Solver",
    "SolverConfig",
    "SolverIterationsExceededError",
    "UnboundedObjectiveError",
    "UnknownConstraintError",
    "UnknownEditVariableError",
    "UnsatisfiableConstraintError",
    "Variable",
    "approx_equal",
    "floats",
    "near_zero",
    "strength",
]
