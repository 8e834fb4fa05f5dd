"""
Incremental Cassowary constraint solver.

The tableau is kept in a form where every basic symbol owns a row giving
its value in terms of the parametric symbols. Constraints and edit
suggestions are applied incrementally: adding or removing a constraint runs
the primal simplex on the objective, while suggesting a value runs the dual
simplex to restore feasibility. Every zero test on tableau coefficients and
row constants goes through ``constraint_core.floats.near_zero``.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum

import structlog
from beartype import beartype

from constraint_core import strength as strengths
from constraint_core.config.solver import SolverConfig
from constraint_core.constraint import Constraint, Operator
from constraint_core.exceptions import (
    BadRequiredStrengthError,
    DuplicateConstraintError,
    DuplicateEditVariableError,
    InternalSolverError,
    SolverIterationsExceededError,
    UnboundedObjectiveError,
    UnknownConstraintError,
    UnknownEditVariableError,
    UnsatisfiableConstraintError,
)
from constraint_core.expression import Expression
from constraint_core.floats import near_zero
from constraint_core.variable import Variable

_FLOAT_MAX = sys.float_info.max

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Tableau internals
# ---------------------------------------------------------------------------


class SymbolType(Enum):
    INVALID = 0
    EXTERNAL = 1
    SLACK = 2
    ERROR = 3
    DUMMY = 4


@dataclass(frozen=True)
class Symbol:
    type: SymbolType
    id: int

    def is_pivotable(self) -> bool:
        return self.type in (SymbolType.SLACK, SymbolType.ERROR)


INVALID_SYMBOL = Symbol(SymbolType.INVALID, -1)


class Row:
    """A tableau row: a constant plus symbol coefficients."""

    def __init__(self, constant: float = 0.0) -> None:
        self.constant = constant
        self.cells: dict[Symbol, float] = {}

    def is_constant(self) -> bool:
        return not self.cells

    def all_dummies(self) -> bool:
        return all(symbol.type == SymbolType.DUMMY for symbol in self.cells)

    def copy(self) -> Row:
        row = Row(self.constant)
        row.cells = dict(self.cells)
        return row

    def add(self, value: float) -> float:
        """Add ``value`` to the constant and return the new constant."""
        self.constant += value
        return self.constant

    def insert_symbol(self, symbol: Symbol, coefficient: float = 1.0) -> None:
        """Accumulate a coefficient for ``symbol``, dropping the cell if it cancels out."""
        value = self.cells.get(symbol, 0.0) + coefficient
        if near_zero(value):
            self.cells.pop(symbol, None)
        else:
            self.cells[symbol] = value

    def insert_row(self, other: Row, coefficient: float = 1.0) -> None:
        """Add ``other`` scaled by ``coefficient`` to this row."""
        self.constant += other.constant * coefficient
        for symbol, value in other.cells.items():
            self.insert_symbol(symbol, value * coefficient)

    def remove_symbol(self, symbol: Symbol) -> None:
        self.cells.pop(symbol, None)

    def reverse_sign(self) -> None:
        self.constant = -self.constant
        self.cells = {symbol: -value for symbol, value in self.cells.items()}

    def solve_for(self, symbol: Symbol) -> None:
        """
        Solve the row for ``symbol``, which must be present.

        The row ``a*x + b*y + c = 0`` becomes ``x = -b/a*y - c/a``, with ``x``
        removed from the cells.
        """
        coefficient = -1.0 / self.cells.pop(symbol)
        self.constant *= coefficient
        self.cells = {other: value * coefficient for other, value in self.cells.items()}

    def solve_for_ex(self, lhs: Symbol, rhs: Symbol) -> None:
        """
        Solve ``lhs = b*rhs + c`` for ``rhs``.

        ``lhs`` must not be in the row and ``rhs`` must be.
        """
        self.insert_symbol(lhs, -1.0)
        self.solve_for(rhs)

    def coefficient_for(self, symbol: Symbol) -> float:
        return self.cells.get(symbol, 0.0)

    def substitute(self, symbol: Symbol, row: Row) -> None:
        """Replace ``symbol`` with the contents of ``row``; no-op if absent."""
        coefficient = self.cells.pop(symbol, None)
        if coefficient is not None:
            self.insert_row(row, coefficient)


@dataclass
class _Tag:
    marker: Symbol = INVALID_SYMBOL
    other: Symbol = INVALID_SYMBOL


@dataclass
class _EditInfo:
    tag: _Tag
    constraint: Constraint
    constant: float = 0.0


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


class Solver:
    """
    Constraint solver.

    Attributes:
        max_iterations: Pivot limit for a single optimization before
            SolverIterationsExceededError is raised.
        log_level: Minimum level of the solver logger. Takes effect once logging
            is routed through the standard library, see ``constraint_core.logs.structlog.configure``.
    """

    def __init__(self, config: SolverConfig | None = None) -> None:
        config = config or SolverConfig()
        self.max_iterations: int = config.max_iterations
        self.log_level: str = config.log_level
        logging.getLogger(__name__).setLevel(self.log_level)
        self.logger = logger.bind(component=self.__class__.__name__)
        self._cn_map: dict[Constraint, _Tag] = {}
        self._row_map: dict[Symbol, Row] = {}
        self._var_map: dict[Variable, Symbol] = {}
        self._edit_map: dict[Variable, _EditInfo] = {}
        self._infeasible_rows: list[Symbol] = []
        self._objective = Row()
        self._artificial: Row | None = None
        self._id_tick = 0

    # -- constraints --------------------------------------------------------

    def create_constraint(
        self,
        lhs: Expression | Variable,
        operator: Operator,
        rhs: Expression | Variable | float | int,
        strength: float | int = strengths.REQUIRED,
    ) -> Constraint:
        """Create a constraint, add it to the solver and return it."""
        constraint = Constraint(lhs, operator, rhs, strength)
        self.add_constraint(constraint)
        return constraint

    @beartype
    def add_constraint(self, constraint: Constraint) -> None:
        if constraint in self._cn_map:
            raise DuplicateConstraintError(constraint)

        # Symbols reserved for the constraint's variables are kept if adding
        # fails; they are likely shared with other constraints.
        row, tag = self._create_row(constraint)
        subject = self._choose_subject(row, tag)

        # A row made only of dummies is redundant when its constant is zero,
        # and unsatisfiable otherwise.
        if subject.type == SymbolType.INVALID and row.all_dummies():
            if not near_zero(row.constant):
                self.logger.warning("unsatisfiable constraint", constraint=str(constraint))
                raise UnsatisfiableConstraintError(constraint)
            subject = tag.marker

        if subject.type == SymbolType.INVALID:
            if not self._add_with_artificial_variable(row):
                self.logger.warning("unsatisfiable constraint", constraint=str(constraint))
                raise UnsatisfiableConstraintError(constraint)
        else:
            row.solve_for(subject)
            self._substitute(subject, row)
            self._row_map[subject] = row

        self._cn_map[constraint] = tag
        self.logger.debug("constraint added", constraint=str(constraint), rows=len(self._row_map))

        self._optimize(self._objective)

    @beartype
    def remove_constraint(self, constraint: Constraint) -> None:
        tag = self._cn_map.pop(constraint, None)
        if tag is None:
            raise UnknownConstraintError(constraint)

        # Error effects must leave the objective before any pivoting.
        self._remove_constraint_effects(constraint, tag)

        marker = tag.marker
        row = self._row_map.pop(marker, None)
        if row is None:
            leaving = self._get_marker_leaving_symbol(marker)
            if leaving.type == SymbolType.INVALID:
                raise InternalSolverError("failed to find leaving row")
            row = self._row_map.pop(leaving)
            row.solve_for_ex(leaving, marker)
            self._substitute(marker, row)

        self.logger.debug("constraint removed", constraint=str(constraint), rows=len(self._row_map))
        self._optimize(self._objective)

    def has_constraint(self, constraint: Constraint) -> bool:
        return constraint in self._cn_map

    def get_constraints(self) -> list[Constraint]:
        return list(self._cn_map)

    # -- edit variables -----------------------------------------------------

    @beartype
    def add_edit_variable(self, variable: Variable, strength: float | int) -> None:
        """Register ``variable`` for value suggestions at a non-required strength."""
        if variable in self._edit_map:
            raise DuplicateEditVariableError(variable)
        clipped = strengths.clip(strength)
        if clipped == strengths.REQUIRED:
            raise BadRequiredStrengthError(clipped)
        constraint = Constraint(Expression(variable), Operator.EQ, None, clipped)
        self.add_constraint(constraint)
        self._edit_map[variable] = _EditInfo(tag=self._cn_map[constraint], constraint=constraint)
        self.logger.debug("edit variable added", variable=str(variable), strength=clipped)

    @beartype
    def remove_edit_variable(self, variable: Variable) -> None:
        info = self._edit_map.pop(variable, None)
        if info is None:
            raise UnknownEditVariableError(variable)
        self.remove_constraint(info.constraint)
        self.logger.debug("edit variable removed", variable=str(variable))

    def has_edit_variable(self, variable: Variable) -> bool:
        return variable in self._edit_map

    @beartype
    def suggest_value(self, variable: Variable, value: float | int) -> None:
        """Suggest a value for an edit variable and re-optimize."""
        info = self._edit_map.get(variable)
        if info is None:
            raise UnknownEditVariableError(variable)

        rows = self._row_map
        delta = value - info.constant
        info.constant = float(value)

        # Positive error variable is basic.
        marker = info.tag.marker
        row = rows.get(marker)
        if row is not None:
            if row.add(-delta) < 0.0:
                self._infeasible_rows.append(marker)
            self._dual_optimize()
            return

        # Negative error variable is basic.
        other = info.tag.other
        row = rows.get(other)
        if row is not None:
            if row.add(delta) < 0.0:
                self._infeasible_rows.append(other)
            self._dual_optimize()
            return

        # Otherwise update every row where the error variables appear.
        for symbol, row in rows.items():
            coefficient = row.coefficient_for(marker)
            if coefficient != 0.0 and row.add(delta * coefficient) < 0.0 and symbol.type != SymbolType.EXTERNAL:
                self._infeasible_rows.append(symbol)
        self._dual_optimize()

    def update_variables(self) -> None:
        """Write the current solution into every variable known to the solver."""
        for variable, symbol in self._var_map.items():
            row = self._row_map.get(symbol)
            variable.set_value(row.constant if row is not None else 0.0)

    # -- tableau construction ---------------------------------------------

    def _make_symbol(self, symbol_type: SymbolType) -> Symbol:
        symbol = Symbol(symbol_type, self._id_tick)
        self._id_tick += 1
        return symbol

    def _get_var_symbol(self, variable: Variable) -> Symbol:
        symbol = self._var_map.get(variable)
        if symbol is None:
            symbol = self._make_symbol(SymbolType.EXTERNAL)
            self._var_map[variable] = symbol
        return symbol

    def _create_row(self, constraint: Constraint) -> tuple[Row, _Tag]:
        """
        Build the tableau row for a constraint.

        Terms with a near-zero coefficient are skipped and basic variables are
        substituted by their rows. Slack, error and dummy symbols are added
        according to the operator and strength, and the row is negated if
        needed so that its constant is non-negative.
        """
        expression = constraint.expression
        row = Row(expression.constant)

        for variable, coefficient in expression.terms.items():
            if near_zero(coefficient):
                continue
            symbol = self._get_var_symbol(variable)
            basic = self._row_map.get(symbol)
            if basic is not None:
                row.insert_row(basic, coefficient)
            else:
                row.insert_symbol(symbol, coefficient)

        objective = self._objective
        strength = constraint.strength
        tag = _Tag()
        if constraint.op in (Operator.LE, Operator.GE):
            coefficient = 1.0 if constraint.op == Operator.LE else -1.0
            slack = self._make_symbol(SymbolType.SLACK)
            tag.marker = slack
            row.insert_symbol(slack, coefficient)
            if strength < strengths.REQUIRED:
                error = self._make_symbol(SymbolType.ERROR)
                tag.other = error
                row.insert_symbol(error, -coefficient)
                objective.insert_symbol(error, strength)
        elif strength < strengths.REQUIRED:
            # expression = error_plus - error_minus
            error_plus = self._make_symbol(SymbolType.ERROR)
            error_minus = self._make_symbol(SymbolType.ERROR)
            tag.marker = error_plus
            tag.other = error_minus
            row.insert_symbol(error_plus, -1.0)
            row.insert_symbol(error_minus, 1.0)
            objective.insert_symbol(error_plus, strength)
            objective.insert_symbol(error_minus, strength)
        else:
            dummy = self._make_symbol(SymbolType.DUMMY)
            tag.marker = dummy
            row.insert_symbol(dummy)

        if row.constant < 0.0:
            row.reverse_sign()

        return row, tag

    def _choose_subject(self, row: Row, tag: _Tag) -> Symbol:
        """
        Pick the symbol to solve a new row for.

        Precedence: the first external symbol, then a marker or other tag
        symbol that is pivotable and has a negative coefficient. Returns
        INVALID_SYMBOL when there is no candidate.
        """
        for symbol in row.cells:
            if symbol.type == SymbolType.EXTERNAL:
                return symbol
        if tag.marker.is_pivotable() and row.coefficient_for(tag.marker) < 0.0:
            return tag.marker
        if tag.other.is_pivotable() and row.coefficient_for(tag.other) < 0.0:
            return tag.other
        return INVALID_SYMBOL

    def _add_with_artificial_variable(self, row: Row) -> bool:
        """Add ``row`` through an artificial variable; False if it cannot be satisfied."""
        artificial_symbol = self._make_symbol(SymbolType.SLACK)
        self._row_map[artificial_symbol] = row.copy()
        self._artificial = row.copy()

        # Succeeds only if the artificial objective reaches zero.
        self._optimize(self._artificial)
        success = near_zero(self._artificial.constant)
        self._artificial = None

        basic = self._row_map.pop(artificial_symbol, None)
        if basic is not None:
            if basic.is_constant():
                return success
            entering = self._any_pivotable_symbol(basic)
            if entering.type == SymbolType.INVALID:
                return False
            basic.solve_for_ex(artificial_symbol, entering)
            self._substitute(entering, basic)
            self._row_map[entering] = basic

        for tableau_row in self._row_map.values():
            tableau_row.remove_symbol(artificial_symbol)
        self._objective.remove_symbol(artificial_symbol)
        return success

    def _substitute(self, symbol: Symbol, row: Row) -> None:
        """Substitute ``symbol`` by ``row`` across the tableau and objectives."""
        for basic, tableau_row in self._row_map.items():
            tableau_row.substitute(symbol, row)
            if tableau_row.constant < 0.0 and basic.type != SymbolType.EXTERNAL:
                self._infeasible_rows.append(basic)
        self._objective.substitute(symbol, row)
        if self._artificial is not None:
            self._artificial.substitute(symbol, row)

    # -- optimization -------------------------------------------------------

    def _pivot(self, leaving: Symbol, entering: Symbol) -> None:
        row = self._row_map.pop(leaving)
        row.solve_for_ex(leaving, entering)
        self._substitute(entering, row)
        self._row_map[entering] = row

    def _optimize(self, objective: Row) -> None:
        """Run primal simplex iterations until ``objective`` is minimal."""
        for _ in range(self.max_iterations):
            entering = self._get_entering_symbol(objective)
            if entering.type == SymbolType.INVALID:
                return
            leaving = self._get_leaving_symbol(entering)
            if leaving.type == SymbolType.INVALID:
                self.logger.warning("objective is unbounded", entering=entering.id)
                raise UnboundedObjectiveError()
            self._pivot(leaving, entering)
        raise SolverIterationsExceededError(self.max_iterations)

    def _dual_optimize(self) -> None:
        """Run dual simplex iterations until every queued infeasible row is feasible."""
        while self._infeasible_rows:
            leaving = self._infeasible_rows.pop()
            row = self._row_map.get(leaving)
            if row is not None and row.constant < 0.0:
                entering = self._get_dual_entering_symbol(row)
                if entering.type == SymbolType.INVALID:
                    raise InternalSolverError("dual optimize failed")
                self._pivot(leaving, entering)

    def _get_entering_symbol(self, objective: Row) -> Symbol:
        """First non-dummy symbol with a negative objective coefficient."""
        for symbol, coefficient in objective.cells.items():
            if coefficient < 0.0 and symbol.type != SymbolType.DUMMY:
                return symbol
        return INVALID_SYMBOL

    def _get_dual_entering_symbol(self, row: Row) -> Symbol:
        """Symbol with a positive coefficient in ``row`` minimizing objective/coefficient."""
        ratio = _FLOAT_MAX
        entering = INVALID_SYMBOL
        for symbol, coefficient in row.cells.items():
            if coefficient > 0.0 and symbol.type != SymbolType.DUMMY:
                r = self._objective.coefficient_for(symbol) / coefficient
                if r < ratio:
                    ratio = r
                    entering = symbol
        return entering

    def _get_leaving_symbol(self, entering: Symbol) -> Symbol:
        """Restricted basic symbol with the smallest -constant/coefficient ratio."""
        ratio = _FLOAT_MAX
        found = INVALID_SYMBOL
        for symbol, row in self._row_map.items():
            if symbol.type == SymbolType.EXTERNAL:
                continue
            coefficient = row.coefficient_for(entering)
            if coefficient < 0.0:
                r = -row.constant / coefficient
                if r < ratio:
                    ratio = r
                    found = symbol
        return found

    def _get_marker_leaving_symbol(self, marker: Symbol) -> Symbol:
        """
        Choose the basic row to pivot ``marker`` into.

        Precedence:
          1. restricted row with a negative marker coefficient and the smallest -constant/coefficient
          2. restricted row with the smallest constant/coefficient
          3. the last unrestricted row holding the marker
        """
        r1 = r2 = _FLOAT_MAX
        first = second = third = INVALID_SYMBOL
        for symbol, row in self._row_map.items():
            coefficient = row.coefficient_for(marker)
            if coefficient == 0.0:
                continue
            if symbol.type == SymbolType.EXTERNAL:
                third = symbol
            elif coefficient < 0.0:
                r = -row.constant / coefficient
                if r < r1:
                    r1 = r
                    first = symbol
            else:
                r = row.constant / coefficient
                if r < r2:
                    r2 = r
                    second = symbol
        if first != INVALID_SYMBOL:
            return first
        if second != INVALID_SYMBOL:
            return second
        return third

    def _remove_constraint_effects(self, constraint: Constraint, tag: _Tag) -> None:
        if tag.marker.type == SymbolType.ERROR:
            self._remove_marker_effects(tag.marker, constraint.strength)
        if tag.other.type == SymbolType.ERROR:
            self._remove_marker_effects(tag.other, constraint.strength)

    def _remove_marker_effects(self, marker: Symbol, strength: float) -> None:
        row = self._row_map.get(marker)
        if row is not None:
            self._objective.insert_row(row, -strength)
        else:
            self._objective.insert_symbol(marker, -strength)

    def _any_pivotable_symbol(self, row: Row) -> Symbol:
        for symbol in row.cells:
            if symbol.is_pivotable():
                return symbol
        return INVALID_SYMBOL
