"""
Entity models for a timetabling instance.

Teachers, classes and subjects each own a private copy of an Availability.
Lessons reference entities without owning them; several lessons may share
the same Teacher or StudentClass object.

Identity conventions:
- Entities compare by object identity, never by name or availability content.
  Two Teacher objects named "Alice" are two different teachers.
- Within one TimetableConfig collection, names must be unique.
- The position of a lesson in TimetableConfig.lessons is its stable index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .availability import Availability, MAX_DAYS, MAX_PERIODS_PER_DAY
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


# =============================================================================
# Entities
# =============================================================================

@dataclass(frozen=True, eq=False)
class _Entity:
    """Named actor owning one Availability."""
    name: str
    availability: Availability

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError(f"{type(self).__name__} name must not be empty")
        # Owned by value: later edits to the caller's grid do not leak in
        object.__setattr__(self, "availability", self.availability.copy())

    def is_available(self, day: int, period: int) -> bool:
        return self.availability.get(day, period)

    def __str__(self) -> str:
        return self.name


class Teacher(_Entity):
    """Teacher entity."""


class StudentClass(_Entity):
    """
    Student class/group.
    Named 'StudentClass' to avoid collision with Python's 'class' keyword.
    """


class Subject(_Entity):
    """Subject/course."""


@dataclass(frozen=True, eq=False)
class Lesson:
    """Weekly demand for one class, taught by one teacher, in one subject."""
    student_class: StudentClass
    teacher: Teacher
    subject: Subject
    periods_per_week: int = 1

    def __post_init__(self) -> None:
        if self.periods_per_week < 1:
            raise ConfigurationError(
                f"periods_per_week must be at least 1, got {self.periods_per_week}"
            )

    def __str__(self) -> str:
        return f"{self.subject.name} for {self.student_class.name} ({self.teacher.name})"


# =============================================================================
# Problem Instance
# =============================================================================

@dataclass
class TimetableConfig:
    """
    Complete timetabling instance.

    The calendar shape (days, periods_per_day) is carried here and checked
    against every Availability by validate().
    """
    name: str = "Timetable"
    days: int = 5
    periods_per_day: int = 6
    teachers: list[Teacher] = field(default_factory=list)
    classes: list[StudentClass] = field(default_factory=list)
    subjects: list[Subject] = field(default_factory=list)
    lessons: list[Lesson] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check the instance is well formed.

        Raises:
            ConfigurationError: On calendar bounds, availability dimension
                mismatches or duplicate names within a collection
        """
        if not 1 <= self.days <= MAX_DAYS:
            raise ConfigurationError(f"days must be between 1 and {MAX_DAYS}, got {self.days}")
        if not 1 <= self.periods_per_day <= MAX_PERIODS_PER_DAY:
            raise ConfigurationError(
                f"periods_per_day must be between 1 and {MAX_PERIODS_PER_DAY}, "
                f"got {self.periods_per_day}"
            )

        errors: list[str] = []
        shape = (self.days, self.periods_per_day)

        def check_shape(kind: str, entity: _Entity) -> None:
            if entity.availability.shape != shape:
                errors.append(
                    f"{kind} '{entity.name}' availability is "
                    f"{entity.availability.days}x{entity.availability.periods_per_day}, "
                    f"expected {self.days}x{self.periods_per_day}"
                )

        def check_duplicates(items: list[_Entity], kind: str) -> None:
            seen: set[str] = set()
            for item in items:
                if item.name in seen:
                    errors.append(f"Duplicate {kind} name: '{item.name}'")
                seen.add(item.name)

        for teacher in self.teachers:
            check_shape("Teacher", teacher)
        for cls in self.classes:
            check_shape("Class", cls)
        for subject in self.subjects:
            check_shape("Subject", subject)

        for index, lesson in enumerate(self.lessons):
            # Referenced entities need not be listed, but their grids must fit
            for kind, entity, listed in (
                ("Teacher", lesson.teacher, self.teachers),
                ("Class", lesson.student_class, self.classes),
                ("Subject", lesson.subject, self.subjects),
            ):
                if not any(entity is item for item in listed):
                    logger.warning(
                        "Lesson %d references %s '%s' not listed in the config",
                        index, kind.lower(), entity.name,
                    )
                    check_shape(kind, entity)

        check_duplicates(self.teachers, "teacher")
        check_duplicates(self.classes, "class")
        check_duplicates(self.subjects, "subject")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )

    # -------------------------------------------------------------------------
    # Lookup Methods
    # -------------------------------------------------------------------------

    def get_teacher(self, name: str) -> Optional[Teacher]:
        """Get teacher by name."""
        return next((t for t in self.teachers if t.name == name), None)

    def get_class(self, name: str) -> Optional[StudentClass]:
        """Get class by name."""
        return next((c for c in self.classes if c.name == name), None)

    def get_subject(self, name: str) -> Optional[Subject]:
        """Get subject by name."""
        return next((s for s in self.subjects if s.name == name), None)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def get_teacher_lessons(self, teacher: Teacher) -> list[Lesson]:
        """Get all lessons taught by this teacher object."""
        return [l for l in self.lessons if l.teacher is teacher]

    def get_class_lessons(self, cls: StudentClass) -> list[Lesson]:
        """Get all lessons attended by this class object."""
        return [l for l in self.lessons if l.student_class is cls]

    def total_periods_per_week(self, cls: StudentClass) -> int:
        """Sum of periods_per_week over a class's lessons."""
        return sum(l.periods_per_week for l in self.get_class_lessons(cls))

    @property
    def total_slots(self) -> int:
        return self.days * self.periods_per_day

    def summary(self) -> dict[str, Any]:
        """Get a summary of the instance."""
        return {
            "name": self.name,
            "days": self.days,
            "periods_per_day": self.periods_per_day,
            "teachers": len(self.teachers),
            "classes": len(self.classes),
            "subjects": len(self.subjects),
            "lessons": len(self.lessons),
            "total_slots": self.total_slots,
            "total_periods_per_week": sum(l.periods_per_week for l in self.lessons),
        }

    def describe(self) -> str:
        """Plain-text dump of the instance."""
        lines = [
            "Timetable Configuration:",
            f"Name: {self.name}",
            f"Days: {self.days}",
            f"Periods per Day: {self.periods_per_day}",
            "",
            "Subjects:",
        ]
        lines.extend(f"  - {s.name}" for s in self.subjects)
        lines.append("")
        lines.append("Teachers:")
        lines.extend(f"  - {t.name}" for t in self.teachers)
        lines.append("")
        lines.append("Classes:")
        lines.extend(f"  - {c.name}" for c in self.classes)
        lines.append("")
        lines.append("Lessons:")
        for number, lesson in enumerate(self.lessons, start=1):
            lines.append(f"  Lesson {number}: {lesson}, {lesson.periods_per_week} per week")
        return "\n".join(lines) + "\n"
