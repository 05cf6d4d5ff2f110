"""
Constraint modules for the timetable model.

Both constraint families are hard: the model has no objective and the
solver only looks for a feasible assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..model_builder import TimetableModelBuilder

from .availability import (
    compute_allowed_slots,
    find_unschedulable_lessons,
    add_allowed_slot_constraints,
    AvailabilityStats,
)

from .no_overlap import (
    shares_teacher,
    shares_class,
    lessons_conflict,
    conflicting_pairs,
    add_pairwise_no_overlap,
    NoOverlapStats,
)


@dataclass
class ConstraintStats:
    """Statistics about all constraints applied."""
    availability: AvailabilityStats = field(default_factory=AvailabilityStats)
    no_overlap: NoOverlapStats = field(default_factory=NoOverlapStats)

    @property
    def unschedulable_lessons(self) -> list[int]:
        return self.availability.unschedulable_lessons

    @property
    def total_constraints(self) -> int:
        # Each no-overlap pair posts 4 reified (in)equalities and 1 disjunction
        return self.availability.element_constraints + 5 * self.no_overlap.constrained_pairs


def apply_all_constraints(builder: TimetableModelBuilder) -> ConstraintStats:
    """
    Apply availability and no-overlap constraints to a builder.

    If any lesson has no allowed slot, the no-overlap pass is skipped: the
    instance is already known to be infeasible.
    """
    stats = ConstraintStats()
    stats.availability = add_allowed_slot_constraints(builder)

    if not stats.availability.unschedulable_lessons:
        stats.no_overlap = add_pairwise_no_overlap(builder)

    return stats


__all__ = [
    "compute_allowed_slots",
    "find_unschedulable_lessons",
    "add_allowed_slot_constraints",
    "AvailabilityStats",
    "shares_teacher",
    "shares_class",
    "lessons_conflict",
    "conflicting_pairs",
    "add_pairwise_no_overlap",
    "NoOverlapStats",
    "ConstraintStats",
    "apply_all_constraints",
]
