"""
Constraint-solving backends.

The model builder only talks to the SolverBackend interface: create integer
and boolean variables, post (optionally reified) equality/inequality,
disjunction and element constraints, then solve for any feasible assignment.
CpSatBackend is the OR-Tools CP-SAT implementation.

A backend owns exactly one model. Build a new backend for every solve.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Sequence

from ortools.sat.python import cp_model
from pydantic import BaseModel, ConfigDict, Field


class SolverStatus(str, Enum):
    """Solver result status."""
    OPTIMAL = "OPTIMAL"
    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"
    MODEL_INVALID = "MODEL_INVALID"
    UNKNOWN = "UNKNOWN"

    @property
    def is_success(self) -> bool:
        return self in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)


class SolverParameters(BaseModel):
    """Search settings passed through to the solving engine."""
    model_config = ConfigDict(extra="forbid")

    max_time_in_seconds: Optional[float] = Field(
        default=None, gt=0, description="Wall-clock limit (None = run to completion)"
    )
    num_workers: int = Field(default=0, ge=0, description="Search workers (0 = all cores)")
    random_seed: Optional[int] = Field(default=None, ge=0, description="Seed for reproducible search")
    log_search_progress: bool = Field(default=False, description="Print engine search log")


class SolverBackend(ABC):
    """Minimal constraint-programming capability used by the model builder."""

    @abstractmethod
    def new_int_var(self, lo: int, hi: int, name: str = "") -> Any:
        """Integer variable with inclusive domain [lo, hi]."""

    @abstractmethod
    def new_bool_var(self, name: str = "") -> Any:
        """0/1 variable usable as a literal."""

    @abstractmethod
    def negate(self, literal: Any) -> Any:
        """Negated literal of a boolean variable."""

    @abstractmethod
    def add_equality(self, left: Any, right: Any, only_enforce_if: Any = None) -> None:
        """left == right, optionally enforced only when a literal holds."""

    @abstractmethod
    def add_not_equal(self, left: Any, right: Any, only_enforce_if: Any = None) -> None:
        """left != right, optionally enforced only when a literal holds."""

    @abstractmethod
    def add_bool_or(self, literals: Sequence[Any]) -> None:
        """At least one literal holds."""

    @abstractmethod
    def add_element(self, index: Any, values: Sequence[int], target: Any) -> None:
        """target == values[index]."""

    @abstractmethod
    def solve(self) -> SolverStatus:
        """Solve the accumulated model for any feasible assignment."""

    @abstractmethod
    def value(self, var: Any) -> int:
        """Value of a variable in the last solution."""

    def wall_time(self) -> float:
        """Seconds spent in the last solve."""
        return 0.0


class CpSatBackend(SolverBackend):
    """
    SolverBackend backed by OR-Tools CP-SAT.

    Usage:
        backend = CpSatBackend(SolverParameters(random_seed=1, num_workers=1))
        x = backend.new_int_var(0, 3, "x")
        status = backend.solve()
    """

    _STATUS_MAP = {
        cp_model.OPTIMAL: SolverStatus.OPTIMAL,
        cp_model.FEASIBLE: SolverStatus.FEASIBLE,
        cp_model.INFEASIBLE: SolverStatus.INFEASIBLE,
        cp_model.MODEL_INVALID: SolverStatus.MODEL_INVALID,
        cp_model.UNKNOWN: SolverStatus.UNKNOWN,
    }

    def __init__(self, parameters: Optional[SolverParameters] = None):
        self.parameters = parameters or SolverParameters()
        self.model = cp_model.CpModel()
        self._solver: Optional[cp_model.CpSolver] = None

    def new_int_var(self, lo: int, hi: int, name: str = "") -> cp_model.IntVar:
        return self.model.NewIntVar(lo, hi, name)

    def new_bool_var(self, name: str = "") -> cp_model.IntVar:
        return self.model.NewBoolVar(name)

    def negate(self, literal: Any) -> Any:
        return literal.Not()

    def add_equality(self, left: Any, right: Any, only_enforce_if: Any = None) -> None:
        constraint = self.model.Add(left == right)
        if only_enforce_if is not None:
            constraint.OnlyEnforceIf(only_enforce_if)

    def add_not_equal(self, left: Any, right: Any, only_enforce_if: Any = None) -> None:
        constraint = self.model.Add(left != right)
        if only_enforce_if is not None:
            constraint.OnlyEnforceIf(only_enforce_if)

    def add_bool_or(self, literals: Sequence[Any]) -> None:
        self.model.AddBoolOr(list(literals))

    def add_element(self, index: Any, values: Sequence[int], target: Any) -> None:
        self.model.AddElement(index, list(values), target)

    def solve(self) -> SolverStatus:
        solver = cp_model.CpSolver()
        params = self.parameters

        if params.max_time_in_seconds is not None:
            solver.parameters.max_time_in_seconds = params.max_time_in_seconds
        solver.parameters.num_workers = params.num_workers
        if params.random_seed is not None:
            solver.parameters.random_seed = params.random_seed
        solver.parameters.log_search_progress = params.log_search_progress

        status_code = solver.Solve(self.model)
        self._solver = solver

        return self._STATUS_MAP.get(status_code, SolverStatus.UNKNOWN)

    def value(self, var: Any) -> int:
        if self._solver is None:
            raise RuntimeError("Must call solve() before reading values")
        return int(self._solver.Value(var))

    def wall_time(self) -> float:
        return self._solver.WallTime() if self._solver is not None else 0.0
