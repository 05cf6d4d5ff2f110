"""
Load and save timetabling instances as JSON documents.

Document layout (camelCase or snake_case keys are both accepted):

    {
      "name": "Spring term",
      "days": 5,
      "periodsPerDay": 6,
      "teachers": [{"name": "Alice", "availability": {"days": 5, "periodsPerDay": 6,
                                                      "buffer": [63, 63, 0, 63, 63]}}],
      "classes":  [{"name": "Class 1"}],
      "subjects": [{"name": "Math"}],
      "lessons":  [{"className": "Class 1", "teacherName": "Alice",
                    "subjectName": "Math", "periodsPerWeek": 3}]
    }

An entity without an "availability" entry is free in every period.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from .availability import Availability, MAX_DAYS, MAX_PERIODS_PER_DAY
from .models import Lesson, StudentClass, Subject, Teacher, TimetableConfig


class DataValidationError(Exception):
    """Raised when an instance document fails validation."""
    pass


# =============================================================================
# Document Schema
# =============================================================================

class AvailabilityData(BaseModel):
    """Serialized availability grid: one bitmask per day."""
    model_config = ConfigDict(extra="forbid")

    days: int = Field(ge=1, le=MAX_DAYS, description="Days in the grid")
    periods_per_day: int = Field(ge=1, le=MAX_PERIODS_PER_DAY, description="Periods per day")
    buffer: list[int] = Field(description="One mask per day, bit p set = period p free")

    @model_validator(mode="after")
    def validate_masks(self) -> "AvailabilityData":
        """Ensure there is one mask per day and every mask fits the day width."""
        if len(self.buffer) != self.days:
            raise ValueError(f"buffer has {len(self.buffer)} masks, expected {self.days}")
        limit = 1 << self.periods_per_day
        for day, mask in enumerate(self.buffer):
            if not 0 <= mask < limit:
                raise ValueError(
                    f"mask {mask} for day {day} does not fit in {self.periods_per_day} periods"
                )
        return self

    def to_availability(self) -> Availability:
        return Availability.from_masks(self.days, self.periods_per_day, self.buffer)


class EntityData(BaseModel):
    """Teacher, class or subject entry."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, description="Unique name within its collection")
    availability: Optional[AvailabilityData] = Field(
        default=None, description="Availability grid (omitted = always free)"
    )


class LessonData(BaseModel):
    """Lesson entry referencing entities by name."""
    model_config = ConfigDict(extra="forbid")

    class_name: str = Field(min_length=1, description="Class name")
    teacher_name: str = Field(min_length=1, description="Teacher name")
    subject_name: str = Field(min_length=1, description="Subject name")
    periods_per_week: int = Field(default=1, ge=1, description="Weekly periods required")


class TimetableDocument(BaseModel):
    """Complete instance document."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="Timetable", description="Instance name")
    days: int = Field(default=5, ge=1, le=MAX_DAYS, description="Days per week")
    periods_per_day: int = Field(
        default=6, ge=1, le=MAX_PERIODS_PER_DAY, description="Periods per day"
    )
    teachers: list[EntityData] = Field(default_factory=list)
    classes: list[EntityData] = Field(default_factory=list)
    subjects: list[EntityData] = Field(default_factory=list)
    lessons: list[LessonData] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_no_duplicate_names(self) -> "TimetableDocument":
        """Ensure names are unique within each collection."""
        errors: list[str] = []

        def check_duplicates(items: list[EntityData], entity_name: str) -> None:
            seen: set[str] = set()
            for item in items:
                if item.name in seen:
                    errors.append(f"Duplicate {entity_name} name: '{item.name}'")
                seen.add(item.name)

        check_duplicates(self.teachers, "teacher")
        check_duplicates(self.classes, "class")
        check_duplicates(self.subjects, "subject")

        if errors:
            raise ValueError("Duplicate name validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    @model_validator(mode="after")
    def validate_references(self) -> "TimetableDocument":
        """Validate lesson references and availability dimensions."""
        errors: list[str] = []

        teacher_names = {t.name for t in self.teachers}
        class_names = {c.name for c in self.classes}
        subject_names = {s.name for s in self.subjects}

        for index, lesson in enumerate(self.lessons):
            if lesson.teacher_name not in teacher_names:
                errors.append(f"Lesson {index}: unknown teacher '{lesson.teacher_name}'")
            if lesson.class_name not in class_names:
                errors.append(f"Lesson {index}: unknown class '{lesson.class_name}'")
            if lesson.subject_name not in subject_names:
                errors.append(f"Lesson {index}: unknown subject '{lesson.subject_name}'")

        for kind, items in (
            ("Teacher", self.teachers),
            ("Class", self.classes),
            ("Subject", self.subjects),
        ):
            for item in items:
                avail = item.availability
                if avail and (avail.days, avail.periods_per_day) != (self.days, self.periods_per_day):
                    errors.append(
                        f"{kind} '{item.name}': availability is {avail.days}x{avail.periods_per_day}, "
                        f"expected {self.days}x{self.periods_per_day}"
                    )

        if errors:
            raise ValueError("Reference validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    def to_config(self) -> TimetableConfig:
        """Build the runtime instance, sharing entity objects between lessons."""
        def availability_of(item: EntityData) -> Availability:
            if item.availability is None:
                return Availability.full(self.days, self.periods_per_day)
            return item.availability.to_availability()

        teachers = {t.name: Teacher(t.name, availability_of(t)) for t in self.teachers}
        classes = {c.name: StudentClass(c.name, availability_of(c)) for c in self.classes}
        subjects = {s.name: Subject(s.name, availability_of(s)) for s in self.subjects}

        lessons = [
            Lesson(
                student_class=classes[l.class_name],
                teacher=teachers[l.teacher_name],
                subject=subjects[l.subject_name],
                periods_per_week=l.periods_per_week,
            )
            for l in self.lessons
        ]

        return TimetableConfig(
            name=self.name,
            days=self.days,
            periods_per_day=self.periods_per_day,
            teachers=list(teachers.values()),
            classes=list(classes.values()),
            subjects=list(subjects.values()),
            lessons=lessons,
        )


# =============================================================================
# Loading and Saving
# =============================================================================

def timetable_config_from_dict(data: dict) -> TimetableConfig:
    """
    Validate an instance document and build a TimetableConfig.

    Raises:
        DataValidationError: If the document fails validation
    """
    try:
        document = TimetableDocument.model_validate(_convert_keys_to_snake_case(data))
    except ValidationError as e:
        raise DataValidationError(str(e)) from e
    return document.to_config()


def load_timetable_from_json(path: Union[str, Path]) -> TimetableConfig:
    """
    Load and validate an instance from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        TimetableConfig ready for generation

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        DataValidationError: If the data fails validation
    """
    with open(Path(path)) as f:
        data = json.load(f)

    return timetable_config_from_dict(data)


def config_to_dict(config: TimetableConfig) -> dict:
    """
    Serialize a TimetableConfig to a camelCase document.

    Entities referenced by lessons but missing from the config collections
    are appended to their collection so the document loads back.
    """
    def entity(item) -> dict:
        return {"name": item.name, "availability": item.availability.to_dict()}

    def collect(listed: list, attr: str) -> list:
        items = list(listed)
        for lesson in config.lessons:
            ref = getattr(lesson, attr)
            if not any(ref is item for item in items):
                items.append(ref)
        return items

    return {
        "name": config.name,
        "days": config.days,
        "periodsPerDay": config.periods_per_day,
        "teachers": [entity(t) for t in collect(config.teachers, "teacher")],
        "classes": [entity(c) for c in collect(config.classes, "student_class")],
        "subjects": [entity(s) for s in collect(config.subjects, "subject")],
        "lessons": [
            {
                "className": l.student_class.name,
                "teacherName": l.teacher.name,
                "subjectName": l.subject.name,
                "periodsPerWeek": l.periods_per_week,
            }
            for l in config.lessons
        ],
    }


def save_timetable_json(config: TimetableConfig, path: Union[str, Path]) -> None:
    """Write a TimetableConfig to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config_to_dict(config), f, indent=2)


def _convert_keys_to_snake_case(obj: Any) -> Any:
    """Recursively convert dictionary keys from camelCase to snake_case."""
    def to_snake_case(name: str) -> str:
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
        return name.lower()

    if isinstance(obj, dict):
        return {to_snake_case(k): _convert_keys_to_snake_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_keys_to_snake_case(item) for item in obj]
    else:
        return obj
