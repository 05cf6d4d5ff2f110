"""
Constraint model builder for timetabling.

Formulation, per lesson i (index into TimetableConfig.lessons):
- day_i    in [0, days - 1]
- period_i in [0, periods_per_day - 1]
- slot_i   in [0, len(allowed_i) - 1], bound to day_i/period_i by element
  constraints over the lesson's allowed slots
- pairwise no-overlap for lessons sharing a teacher or a class

There is no objective; any feasible assignment is accepted. A lesson with no
allowed slot fails the build locally and the solver is never called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .constraints import ConstraintStats, apply_all_constraints
from .data.availability import Slot
from .data.models import Lesson, TimetableConfig
from .solver_backend import CpSatBackend, SolverBackend, SolverParameters, SolverStatus

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes for Variables and Solutions
# =============================================================================

@dataclass
class LessonVars:
    """Variables for a single lesson."""
    index: int
    lesson: Lesson

    day_var: Any
    period_var: Any

    # Set while adding availability constraints
    slot_var: Any = None
    allowed_slots: list[Slot] = field(default_factory=list)


@dataclass
class LessonAssignment:
    """A single lesson placement in the solution."""
    lesson_index: int
    day: int
    period: int
    class_name: str
    teacher_name: str
    subject_name: str

    @property
    def slot(self) -> Slot:
        return (self.day, self.period)

    def to_dict(self) -> dict[str, Any]:
        return {
            "lessonIndex": self.lesson_index,
            "day": self.day,
            "period": self.period,
            "className": self.class_name,
            "teacherName": self.teacher_name,
            "subjectName": self.subject_name,
        }


@dataclass
class TimetableSolution:
    """Result of one generation run."""
    status: SolverStatus
    assignments: list[LessonAssignment] = field(default_factory=list)
    solve_time_ms: int = 0
    unschedulable_lessons: list[int] = field(default_factory=list)

    @property
    def is_feasible(self) -> bool:
        return self.status.is_success

    def get(self, lesson_index: int) -> Optional[LessonAssignment]:
        """Assignment for a lesson index, or None if nothing was assigned."""
        for assignment in self.assignments:
            if assignment.lesson_index == lesson_index:
                return assignment
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "solveTimeMs": self.solve_time_ms,
            "unschedulableLessons": list(self.unschedulable_lessons),
            "assignments": [a.to_dict() for a in self.assignments],
        }


# =============================================================================
# Main Model Builder
# =============================================================================

class TimetableModelBuilder:
    """
    Builds and solves a constraint model for one TimetableConfig.

    A builder is single-use: it owns one backend (and therefore one model)
    and is discarded after solve().

    Usage:
        builder = TimetableModelBuilder(config)
        builder.create_variables()
        builder.add_constraints()
        solution = builder.solve()
    """

    def __init__(
        self,
        config: TimetableConfig,
        backend: Optional[SolverBackend] = None,
        parameters: Optional[SolverParameters] = None,
    ):
        """
        Initialize the model builder.

        Args:
            config: The timetabling instance (validated here)
            backend: Solving backend; a new CpSatBackend when omitted
            parameters: Parameters for the default backend

        Raises:
            ConfigurationError: If the instance is malformed
        """
        config.validate()

        self.config = config
        self.backend = backend if backend is not None else CpSatBackend(parameters)

        self.lesson_vars: list[LessonVars] = []
        self.constraint_stats: Optional[ConstraintStats] = None

        # State tracking
        self._variables_created = False
        self._constraints_added = False
        self._solved = False

    # -------------------------------------------------------------------------
    # Variable Creation
    # -------------------------------------------------------------------------

    def create_variables(self) -> None:
        """Create day and period variables for every lesson."""
        if self._variables_created:
            return

        days = self.config.days
        periods = self.config.periods_per_day

        for index, lesson in enumerate(self.config.lessons):
            self.lesson_vars.append(LessonVars(
                index=index,
                lesson=lesson,
                day_var=self.backend.new_int_var(0, days - 1, f"lesson_{index}_day"),
                period_var=self.backend.new_int_var(0, periods - 1, f"lesson_{index}_period"),
            ))

        self._variables_created = True

    # -------------------------------------------------------------------------
    # Constraint Addition
    # -------------------------------------------------------------------------

    def add_constraints(self) -> ConstraintStats:
        """Add availability and no-overlap constraints."""
        if not self._variables_created:
            raise RuntimeError("Must call create_variables() before add_constraints()")

        if self._constraints_added:
            return self.constraint_stats

        self.constraint_stats = apply_all_constraints(self)
        self._constraints_added = True

        for index in self.unschedulable_lessons:
            logger.warning("No available slots for lesson %d", index)

        return self.constraint_stats

    @property
    def unschedulable_lessons(self) -> list[int]:
        """Lessons found to have no allowed slot (empty until constraints are added)."""
        if self.constraint_stats is None:
            return []
        return list(self.constraint_stats.unschedulable_lessons)

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def solve(self) -> TimetableSolution:
        """
        Solve the timetabling problem.

        Returns:
            TimetableSolution; assignments are only populated on success
        """
        if self._solved:
            raise RuntimeError("Model already solved; build a new TimetableModelBuilder")
        if not self._variables_created:
            self.create_variables()
        if not self._constraints_added:
            self.add_constraints()

        self._solved = True

        unschedulable = self.unschedulable_lessons
        if unschedulable:
            return TimetableSolution(
                status=SolverStatus.INFEASIBLE,
                unschedulable_lessons=unschedulable,
            )

        status = self.backend.solve()
        solve_time_ms = int(self.backend.wall_time() * 1000)

        if not status.is_success:
            logger.info("No solution found (status %s)", status.value)
            return TimetableSolution(status=status, solve_time_ms=solve_time_ms)

        return TimetableSolution(
            status=status,
            assignments=self._extract_assignments(),
            solve_time_ms=solve_time_ms,
        )

    def _extract_assignments(self) -> list[LessonAssignment]:
        """Decode day/period for every lesson from the solved model."""
        assignments = []

        for lv in self.lesson_vars:
            lesson = lv.lesson
            assignments.append(LessonAssignment(
                lesson_index=lv.index,
                day=self.backend.value(lv.day_var),
                period=self.backend.value(lv.period_var),
                class_name=lesson.student_class.name,
                teacher_name=lesson.teacher.name,
                subject_name=lesson.subject.name,
            ))

        return assignments

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def get_statistics(self) -> dict[str, Any]:
        """Get model statistics."""
        stats = self.constraint_stats
        return {
            "num_lessons": len(self.config.lessons),
            "num_days": self.config.days,
            "num_periods_per_day": self.config.periods_per_day,
            "num_lesson_vars": len(self.lesson_vars),
            "num_conflicting_pairs": stats.no_overlap.constrained_pairs if stats else 0,
            "num_allowed_slots": stats.availability.total_allowed_slots if stats else 0,
            "num_constraints": stats.total_constraints if stats else 0,
            "unschedulable_lessons": self.unschedulable_lessons,
            "variables_created": self._variables_created,
            "constraints_added": self._constraints_added,
        }
