"""
Grid views and verification of a generated timetable.

Grids are indexed grid[day][period] and hold the LessonAssignment placed in
that slot, or None when the slot is free.
"""

from __future__ import annotations

from typing import Optional

from ..constraints.no_overlap import shares_class, shares_teacher
from ..data.models import StudentClass, Teacher, TimetableConfig
from ..model_builder import LessonAssignment, TimetableSolution

Grid = list[list[Optional[LessonAssignment]]]


def _empty_grid(config: TimetableConfig) -> Grid:
    return [[None] * config.periods_per_day for _ in range(config.days)]


def build_class_grid(
    config: TimetableConfig,
    solution: TimetableSolution,
    cls: StudentClass,
) -> Grid:
    """Day x period grid of one class's lessons."""
    grid = _empty_grid(config)
    for a in solution.assignments:
        if config.lessons[a.lesson_index].student_class is cls:
            grid[a.day][a.period] = a
    return grid


def build_teacher_grid(
    config: TimetableConfig,
    solution: TimetableSolution,
    teacher: Teacher,
) -> Grid:
    """Day x period grid of one teacher's lessons."""
    grid = _empty_grid(config)
    for a in solution.assignments:
        if config.lessons[a.lesson_index].teacher is teacher:
            grid[a.day][a.period] = a
    return grid


def find_violations(config: TimetableConfig, solution: TimetableSolution) -> list[str]:
    """
    Re-check a solution against the instance.

    Checks that every lesson is assigned, lies inside the calendar, falls in
    a slot where its teacher and class are both free, and does not share a
    slot with another lesson of the same teacher or class.

    Returns:
        Human-readable violation descriptions (empty if the solution is valid)
    """
    violations: list[str] = []

    if not solution.is_feasible:
        return violations

    by_index = {a.lesson_index: a for a in solution.assignments}

    for index, lesson in enumerate(config.lessons):
        a = by_index.get(index)
        if a is None:
            violations.append(f"Lesson {index} has no assignment")
            continue

        if not (0 <= a.day < config.days and 0 <= a.period < config.periods_per_day):
            violations.append(f"Lesson {index} placed outside the calendar at {a.slot}")
            continue

        if not lesson.teacher.is_available(a.day, a.period):
            violations.append(
                f"Lesson {index}: teacher '{lesson.teacher.name}' unavailable at {a.slot}"
            )
        if not lesson.student_class.is_available(a.day, a.period):
            violations.append(
                f"Lesson {index}: class '{lesson.student_class.name}' unavailable at {a.slot}"
            )

    lessons = config.lessons
    for i in range(len(lessons)):
        for j in range(i + 1, len(lessons)):
            a, b = by_index.get(i), by_index.get(j)
            if a is None or b is None or a.slot != b.slot:
                continue
            if shares_teacher(lessons[i], lessons[j]):
                violations.append(
                    f"Lessons {i} and {j}: teacher '{lessons[i].teacher.name}' double-booked at {a.slot}"
                )
            if shares_class(lessons[i], lessons[j]):
                violations.append(
                    f"Lessons {i} and {j}: class '{lessons[i].student_class.name}' double-booked at {a.slot}"
                )

    return violations
