"""
Availability constraints for timetabling.

Availability is enforced by construction rather than by forbidding slots:
- allowed_i is the list of (day, period) pairs where both the lesson's
  teacher and class are free (day-by-day AND of the two masks)
- a slot variable indexes into allowed_i
- element constraints bind day_i and period_i to allowed_i[slot_i]

Any solution therefore respects availability, and the search only ever sees
feasible slots. A lesson with an empty allowed_i makes the instance
infeasible without calling the solver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..data.availability import Slot

if TYPE_CHECKING:
    from ..data.models import Lesson, TimetableConfig
    from ..model_builder import TimetableModelBuilder


@dataclass
class AvailabilityStats:
    """Statistics about availability constraints added."""
    lessons_constrained: int = 0
    element_constraints: int = 0
    total_allowed_slots: int = 0
    unschedulable_lessons: list[int] = field(default_factory=list)


def compute_allowed_slots(lesson: Lesson, days: int, periods_per_day: int) -> list[Slot]:
    """
    Slots where both the lesson's teacher and class are free.

    Args:
        lesson: The lesson
        days: Days in the calendar
        periods_per_day: Periods per day in the calendar

    Returns:
        (day, period) pairs in day-major order
    """
    teacher_avail = lesson.teacher.availability
    class_avail = lesson.student_class.availability

    slots = []
    for day in range(days):
        mask = teacher_avail.get_day(day) & class_avail.get_day(day)
        if not mask:
            continue
        for period in range(periods_per_day):
            if (mask >> period) & 1:
                slots.append((day, period))

    return slots


def find_unschedulable_lessons(config: TimetableConfig) -> list[int]:
    """Indices of lessons whose teacher and class are never free together."""
    return [
        index
        for index, lesson in enumerate(config.lessons)
        if not compute_allowed_slots(lesson, config.days, config.periods_per_day)
    ]


def add_allowed_slot_constraints(builder: TimetableModelBuilder) -> AvailabilityStats:
    """
    Bind every lesson's day/period variables to its allowed slots.

    For lesson i with allowed slots [(d0, p0), (d1, p1), ...]:
    1. Create slot_i in [0, len(allowed_i) - 1]
    2. day_i    == [d0, d1, ...][slot_i]
    3. period_i == [p0, p1, ...][slot_i]

    Lessons without allowed slots are recorded in the stats and skipped; the
    builder must not solve when any are reported.

    Args:
        builder: The timetable model builder with created variables

    Returns:
        AvailabilityStats with counts and unschedulable lesson indices
    """
    stats = AvailabilityStats()
    config = builder.config

    for lesson_vars in builder.lesson_vars:
        allowed = compute_allowed_slots(
            lesson_vars.lesson, config.days, config.periods_per_day
        )
        lesson_vars.allowed_slots = allowed

        if not allowed:
            stats.unschedulable_lessons.append(lesson_vars.index)
            continue

        slot_var = builder.backend.new_int_var(
            0, len(allowed) - 1, f"lesson_{lesson_vars.index}_slot"
        )
        lesson_vars.slot_var = slot_var

        builder.backend.add_element(slot_var, [d for d, _ in allowed], lesson_vars.day_var)
        builder.backend.add_element(slot_var, [p for _, p in allowed], lesson_vars.period_var)

        stats.lessons_constrained += 1
        stats.element_constraints += 2
        stats.total_allowed_slots += len(allowed)

    return stats
