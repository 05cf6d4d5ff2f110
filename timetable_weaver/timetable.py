"""Timetable generation entry points."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TextIO

from .data.availability import Slot
from .data.models import TimetableConfig
from .model_builder import TimetableModelBuilder, TimetableSolution
from .solver_backend import CpSatBackend, SolverBackend, SolverParameters

logger = logging.getLogger(__name__)


class Timetable:
    """
    A timetabling instance plus the result of its last generation.

    Every generate() call builds a fresh model and backend; nothing from a
    previous call is reused.

    Usage:
        timetable = Timetable(config)
        if timetable.generate():
            day, period = timetable.get_assignment(0)
    """

    def __init__(
        self,
        config: TimetableConfig,
        parameters: Optional[SolverParameters] = None,
        backend_factory: Optional[Callable[[], SolverBackend]] = None,
    ):
        """
        Args:
            config: The instance to schedule
            parameters: Parameters for the default CP-SAT backend
            backend_factory: Creates a fresh backend per generate() call;
                overrides parameters when given
        """
        self.config = config
        self.parameters = parameters or SolverParameters()
        self._backend_factory = backend_factory or (lambda: CpSatBackend(self.parameters))
        self.solution: Optional[TimetableSolution] = None

    def generate(self) -> bool:
        """
        Build, solve and decode the model.

        Returns:
            True if every lesson received a (day, period)
        """
        self.solution = None

        builder = TimetableModelBuilder(self.config, backend=self._backend_factory())
        solution = builder.solve()
        self.solution = solution

        if solution.is_feasible:
            self._log_solution(solution)
        else:
            logger.info("No solution found.")

        return solution.is_feasible

    def get_assignment(self, lesson_index: int) -> Slot:
        """
        (day, period) of a lesson after a successful generate().

        Raises:
            RuntimeError: If no successful generation has happened
            IndexError: If the lesson index is out of range
        """
        if self.solution is None or not self.solution.is_feasible:
            raise RuntimeError("No timetable has been generated")
        # Lessons added after generate() have no assignment
        assignment = self.solution.get(lesson_index)
        if assignment is None:
            raise IndexError(f"lesson index {lesson_index} out of range")
        return assignment.slot

    def print_config(self, stream: Optional[TextIO] = None) -> None:
        """Write a plain-text description of the instance."""
        if stream is None:
            stream = sys.stdout
        stream.write(self.config.describe())

    def _log_solution(self, solution: TimetableSolution) -> None:
        logger.info("Solution found:")
        for a in solution.assignments:
            logger.info(
                "Lesson %d (%s, %s, %s) scheduled at Day %d, Period %d",
                a.lesson_index, a.class_name, a.teacher_name, a.subject_name,
                a.day, a.period,
            )


def generate_timetable(
    config: TimetableConfig,
    parameters: Optional[SolverParameters] = None,
) -> TimetableSolution:
    """
    Generate a timetable for an instance.

    Args:
        config: The instance to schedule
        parameters: Optional CP-SAT parameters

    Returns:
        TimetableSolution with status and assignments
    """
    timetable = Timetable(config, parameters=parameters)
    timetable.generate()
    return timetable.solution
