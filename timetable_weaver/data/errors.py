"""Exceptions raised for invalid timetable configuration."""


class ConfigurationError(ValueError):
    """Raised when a timetable instance violates a construction precondition."""
    pass
