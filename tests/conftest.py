"""Shared test fixtures."""

from __future__ import annotations

import itertools
from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import pytest

from timetable_weaver.solver_backend import SolverBackend, SolverStatus


@dataclass(frozen=True, eq=False)
class FakeVar:
    name: str
    lo: int
    hi: int
    is_bool: bool = False


@dataclass(frozen=True, eq=False)
class FakeLiteral:
    var: FakeVar
    negated: bool = True


class RecordingBackend(SolverBackend):
    """
    In-memory backend that records every posted constraint.

    With scripted_status unset, solve() enumerates every assignment of the
    declared variables and returns the first one satisfying all constraints,
    so only tiny models should be solved this way.
    """

    def __init__(self, scripted_status: Optional[SolverStatus] = None, values: Optional[dict] = None):
        self.variables: list[FakeVar] = []
        self.constraints: list[tuple] = []
        self.scripted_status = scripted_status
        self.scripted_values = values or {}
        self.solution: dict[str, int] = {}
        self.solve_calls = 0

    def new_int_var(self, lo: int, hi: int, name: str = "") -> FakeVar:
        var = FakeVar(name or f"v{len(self.variables)}", lo, hi)
        self.variables.append(var)
        return var

    def new_bool_var(self, name: str = "") -> FakeVar:
        var = FakeVar(name or f"b{len(self.variables)}", 0, 1, is_bool=True)
        self.variables.append(var)
        return var

    def negate(self, literal: Any) -> FakeLiteral:
        return FakeLiteral(literal)

    def add_equality(self, left, right, only_enforce_if=None) -> None:
        self.constraints.append(("eq", left, right, only_enforce_if))

    def add_not_equal(self, left, right, only_enforce_if=None) -> None:
        self.constraints.append(("ne", left, right, only_enforce_if))

    def add_bool_or(self, literals: Sequence[Any]) -> None:
        self.constraints.append(("or", tuple(literals)))

    def add_element(self, index, values: Sequence[int], target) -> None:
        self.constraints.append(("element", index, tuple(values), target))

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def count(self, kind: str) -> int:
        return Counter(c[0] for c in self.constraints)[kind]

    def var(self, name: str) -> FakeVar:
        return next(v for v in self.variables if v.name == name)

    def _literal(self, literal: Any, assignment: dict[str, int]) -> bool:
        if isinstance(literal, FakeLiteral):
            value = assignment[literal.var.name]
            return not value if literal.negated else bool(value)
        return bool(assignment[literal.name])

    def satisfied(self, assignment: dict[str, int]) -> bool:
        """Whether an assignment of every variable satisfies every constraint."""
        for constraint in self.constraints:
            kind = constraint[0]
            if kind in ("eq", "ne"):
                _, left, right, literal = constraint
                if literal is not None and not self._literal(literal, assignment):
                    continue
                equal = assignment[left.name] == assignment[right.name]
                if equal != (kind == "eq"):
                    return False
            elif kind == "or":
                if not any(self._literal(l, assignment) for l in constraint[1]):
                    return False
            elif kind == "element":
                _, index, values, target = constraint
                i = assignment[index.name]
                if not 0 <= i < len(values) or assignment[target.name] != values[i]:
                    return False
        return True

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def solve(self) -> SolverStatus:
        self.solve_calls += 1

        if self.scripted_status is not None:
            self.solution = dict(self.scripted_values)
            return self.scripted_status

        names = [v.name for v in self.variables]
        domains = [range(v.lo, v.hi + 1) for v in self.variables]
        for combo in itertools.product(*domains):
            assignment = dict(zip(names, combo))
            if self.satisfied(assignment):
                self.solution = assignment
                return SolverStatus.FEASIBLE

        return SolverStatus.INFEASIBLE

    def value(self, var: FakeVar) -> int:
        return self.solution[var.name]


@pytest.fixture
def recording_backend() -> RecordingBackend:
    """Fresh recording backend that brute-forces tiny models."""
    return RecordingBackend()


@pytest.fixture
def scripted_backend():
    """Factory for backends that return a fixed status and variable values."""
    def make(status: SolverStatus, values: Optional[dict] = None) -> RecordingBackend:
        return RecordingBackend(scripted_status=status, values=values)
    return make
