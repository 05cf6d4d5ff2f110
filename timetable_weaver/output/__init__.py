"""Solution views and console rendering."""

from .views import (
    Grid,
    build_class_grid,
    build_teacher_grid,
    find_violations,
)
from .formatter import (
    DAY_NAMES,
    print_solution,
    format_solution,
)

__all__ = [
    # Views
    "Grid",
    "build_class_grid",
    "build_teacher_grid",
    "find_violations",
    # Rendering
    "DAY_NAMES",
    "print_solution",
    "format_solution",
]
