"""Console rendering of generated timetables using rich."""

from __future__ import annotations

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..data.models import TimetableConfig
from ..model_builder import TimetableSolution
from .views import Grid, build_class_grid, build_teacher_grid

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _grid_table(title: str, grid: Grid, show_teacher: bool, show_class: bool) -> Table:
    """Rows are days, columns are periods."""
    table = Table(title=escape(title), show_header=True, header_style="bold cyan")
    table.add_column("Day", style="cyan")

    periods = len(grid[0]) if grid else 0
    for period in range(periods):
        table.add_column(f"P{period}", justify="center")

    for day, row in enumerate(grid):
        cells = [DAY_NAMES[day]]
        for a in row:
            if a is None:
                cells.append("[dim]Free[/dim]")
                continue
            cell = escape(a.subject_name)
            if show_teacher:
                cell += f"\n{escape(a.teacher_name)}"
            if show_class:
                cell += f"\n{escape(a.class_name)}"
            cells.append(cell)
        table.add_row(*cells)

    return table


def print_solution(
    config: TimetableConfig,
    solution: TimetableSolution,
    console: Optional[Console] = None,
    by_teacher: bool = False,
) -> None:
    """
    Print a status panel followed by one grid per class (or per teacher).

    Args:
        config: The instance that was solved
        solution: Result of generation
        console: Target console (default: a new stdout console)
        by_teacher: Render teacher grids instead of class grids
    """
    console = console or Console()

    status_color = "green" if solution.is_feasible else "red"
    console.print(Panel(
        Text(solution.status.value, style=f"bold {status_color}"),
        title=Text(config.name),
        subtitle=f"Solved in {solution.solve_time_ms}ms",
    ))

    if solution.unschedulable_lessons:
        console.print("[red]No available slots for lessons:[/red] "
                      + ", ".join(str(i) for i in solution.unschedulable_lessons))
        return

    if not solution.is_feasible:
        console.print("[red]No solution found.[/red]")
        return

    if by_teacher:
        for teacher in config.teachers:
            grid = build_teacher_grid(config, solution, teacher)
            console.print(_grid_table(f"Teacher {teacher.name}", grid, False, True))
    else:
        for cls in config.classes:
            grid = build_class_grid(config, solution, cls)
            console.print(_grid_table(f"Class {cls.name}", grid, True, False))


def format_solution(
    config: TimetableConfig,
    solution: TimetableSolution,
    width: int = 100,
    by_teacher: bool = False,
) -> str:
    """Render print_solution output to plain text."""
    console = Console(record=True, width=width, file=io.StringIO())
    print_solution(config, solution, console=console, by_teacher=by_teacher)
    return console.export_text()
