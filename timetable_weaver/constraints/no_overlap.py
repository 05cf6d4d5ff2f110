"""
No-overlap constraints for timetabling.

Prevents double-booking of:
- Teachers (cannot teach two lessons in the same slot)
- Classes (cannot attend two lessons in the same slot)

Each conflicting pair (i, j), i < j, gets its own encoding:

    day_equal    <=> day_i == day_j
    period_equal <=> period_i == period_j
    NOT day_equal OR NOT period_equal

Pairs conflict when they share the same Teacher object or the same
StudentClass object. Entities are compared by identity, not by name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..data.models import Lesson
    from ..model_builder import TimetableModelBuilder


@dataclass
class NoOverlapStats:
    """Statistics about no-overlap constraints added."""
    pairs_checked: int = 0
    teacher_conflicts: int = 0
    class_conflicts: int = 0
    constrained_pairs: int = 0
    indicator_vars: int = 0


def shares_teacher(a: Lesson, b: Lesson) -> bool:
    return a.teacher is b.teacher


def shares_class(a: Lesson, b: Lesson) -> bool:
    return a.student_class is b.student_class


def lessons_conflict(a: Lesson, b: Lesson) -> bool:
    """Whether two lessons may not share a slot."""
    return shares_teacher(a, b) or shares_class(a, b)


def conflicting_pairs(lessons: Sequence[Lesson]) -> list[tuple[int, int]]:
    """All index pairs (i, j), i < j, whose lessons conflict."""
    pairs = []
    for i in range(len(lessons)):
        for j in range(i + 1, len(lessons)):
            if lessons_conflict(lessons[i], lessons[j]):
                pairs.append((i, j))
    return pairs


def add_pairwise_no_overlap(builder: TimetableModelBuilder) -> NoOverlapStats:
    """
    Add a no-overlap encoding for every conflicting lesson pair.

    Args:
        builder: The timetable model builder with created variables

    Returns:
        NoOverlapStats with counts of pairs and variables added
    """
    stats = NoOverlapStats()
    backend = builder.backend
    lesson_vars = builder.lesson_vars
    n = len(lesson_vars)

    stats.pairs_checked = n * (n - 1) // 2

    for i in range(n):
        for j in range(i + 1, n):
            a, b = lesson_vars[i], lesson_vars[j]

            same_teacher = shares_teacher(a.lesson, b.lesson)
            same_class = shares_class(a.lesson, b.lesson)
            if not (same_teacher or same_class):
                continue

            stats.teacher_conflicts += int(same_teacher)
            stats.class_conflicts += int(same_class)

            day_equal = backend.new_bool_var(f"lesson_{i}_{j}_day_equal")
            backend.add_equality(a.day_var, b.day_var, only_enforce_if=day_equal)
            backend.add_not_equal(a.day_var, b.day_var, only_enforce_if=backend.negate(day_equal))

            period_equal = backend.new_bool_var(f"lesson_{i}_{j}_period_equal")
            backend.add_equality(a.period_var, b.period_var, only_enforce_if=period_equal)
            backend.add_not_equal(
                a.period_var, b.period_var, only_enforce_if=backend.negate(period_equal)
            )

            # Same slot <=> day_equal AND period_equal, which is forbidden
            backend.add_bool_or([backend.negate(day_equal), backend.negate(period_equal)])

            stats.constrained_pairs += 1
            stats.indicator_vars += 2

    return stats
