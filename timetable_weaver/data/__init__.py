"""Instance data: availability grids, entities and JSON loading."""

from .errors import ConfigurationError
from .availability import Availability, Slot, MAX_DAYS, MAX_PERIODS_PER_DAY
from .models import Teacher, StudentClass, Subject, Lesson, TimetableConfig
from .loader import (
    DataValidationError,
    load_timetable_from_json,
    timetable_config_from_dict,
    config_to_dict,
    save_timetable_json,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "DataValidationError",
    # Availability
    "Availability",
    "Slot",
    "MAX_DAYS",
    "MAX_PERIODS_PER_DAY",
    # Entities
    "Teacher",
    "StudentClass",
    "Subject",
    "Lesson",
    "TimetableConfig",
    # Loader
    "load_timetable_from_json",
    "timetable_config_from_dict",
    "config_to_dict",
    "save_timetable_json",
]
