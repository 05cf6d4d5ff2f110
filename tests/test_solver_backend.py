"""Tests for the CP-SAT backend and solver parameters."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from timetable_weaver.solver_backend import CpSatBackend, SolverParameters, SolverStatus


class TestSolverStatus:
    """Tests for status helpers."""

    @pytest.mark.parametrize("status", [SolverStatus.OPTIMAL, SolverStatus.FEASIBLE])
    def test_success(self, status):
        assert status.is_success

    @pytest.mark.parametrize(
        "status",
        [SolverStatus.INFEASIBLE, SolverStatus.UNKNOWN, SolverStatus.MODEL_INVALID],
    )
    def test_failure(self, status):
        assert not status.is_success


class TestSolverParameters:
    """Tests for parameter validation."""

    def test_defaults(self):
        params = SolverParameters()
        assert params.max_time_in_seconds is None
        assert params.num_workers == 0
        assert params.random_seed is None
        assert params.log_search_progress is False

    def test_negative_workers_rejected(self):
        with pytest.raises(ValidationError):
            SolverParameters(num_workers=-1)

    def test_zero_time_limit_rejected(self):
        with pytest.raises(ValidationError):
            SolverParameters(max_time_in_seconds=0)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            SolverParameters(timeout=5)


class TestCpSatBackend:
    """Tests that exercise OR-Tools through the backend interface."""

    def test_element_binds_target(self):
        """target == values[index] with index forced to 2."""
        backend = CpSatBackend()
        index = backend.new_int_var(2, 2, "index")
        target = backend.new_int_var(0, 100, "target")
        backend.add_element(index, [10, 20, 30], target)

        status = backend.solve()

        assert status.is_success
        assert backend.value(target) == 30

    def test_reified_equality(self):
        """A literal forced true makes the enforced equality hold."""
        backend = CpSatBackend()
        x = backend.new_int_var(0, 3, "x")
        y = backend.new_int_var(3, 3, "y")
        equal = backend.new_bool_var("equal")
        backend.add_equality(x, y, only_enforce_if=equal)
        backend.add_not_equal(x, y, only_enforce_if=backend.negate(equal))
        backend.add_bool_or([equal])

        assert backend.solve().is_success
        assert backend.value(x) == 3
        assert backend.value(equal) == 1

    def test_negated_literal_enforces_inequality(self):
        backend = CpSatBackend()
        x = backend.new_int_var(0, 1, "x")
        y = backend.new_int_var(1, 1, "y")
        equal = backend.new_bool_var("equal")
        backend.add_equality(x, y, only_enforce_if=equal)
        backend.add_not_equal(x, y, only_enforce_if=backend.negate(equal))
        backend.add_bool_or([backend.negate(equal)])

        assert backend.solve().is_success
        assert backend.value(x) == 0

    def test_infeasible(self):
        backend = CpSatBackend()
        x = backend.new_int_var(0, 0, "x")
        y = backend.new_int_var(0, 0, "y")
        backend.add_not_equal(x, y)

        assert backend.solve() == SolverStatus.INFEASIBLE

    def test_value_before_solve(self):
        backend = CpSatBackend()
        x = backend.new_int_var(0, 1, "x")
        with pytest.raises(RuntimeError):
            backend.value(x)

    def test_parameters_applied(self):
        params = SolverParameters(num_workers=1, random_seed=7, max_time_in_seconds=10)
        backend = CpSatBackend(params)
        backend.new_int_var(0, 5, "x")
        assert backend.solve().is_success
        assert backend.wall_time() >= 0.0
