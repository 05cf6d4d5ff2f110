"""Timetable Weaver - CP-SAT based weekly lesson scheduling."""

from .data import (
    Availability,
    Teacher,
    StudentClass,
    Subject,
    Lesson,
    TimetableConfig,
    ConfigurationError,
    DataValidationError,
    load_timetable_from_json,
)
from .solver_backend import SolverBackend, CpSatBackend, SolverParameters, SolverStatus
from .model_builder import TimetableModelBuilder, TimetableSolution, LessonAssignment
from .timetable import Timetable, generate_timetable

__all__ = [
    # Data
    "Availability",
    "Teacher",
    "StudentClass",
    "Subject",
    "Lesson",
    "TimetableConfig",
    "ConfigurationError",
    "DataValidationError",
    "load_timetable_from_json",
    # Solving
    "SolverBackend",
    "CpSatBackend",
    "SolverParameters",
    "SolverStatus",
    "TimetableModelBuilder",
    "TimetableSolution",
    "LessonAssignment",
    # Generation
    "Timetable",
    "generate_timetable",
]
