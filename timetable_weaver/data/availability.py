"""
Bitset availability grid for teachers, classes and subjects.

Each day is stored as one unsigned integer mask:
- bit p set   -> period p is free on that day
- bit p clear -> period p is unavailable

Example (3 periods per day):
    0b101 -> periods 0 and 2 free, period 1 blocked
"""

from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO

from .errors import ConfigurationError


# =============================================================================
# Constants
# =============================================================================

MAX_DAYS = 7
MAX_PERIODS_PER_DAY = 32  # Bit width of a per-day mask

Slot = tuple[int, int]


class Availability:
    """
    Rectangular grid of free/blocked periods addressed by (day, period).

    A new Availability is entirely unavailable. Index arguments are validated
    against the configured dimensions; out-of-range values raise IndexError.

    Usage:
        avail = Availability(5, 6)
        avail.set_day(0, True)
        avail.set(1, 3, True)
        avail.get(1, 3)  # True
    """

    __slots__ = ("_days", "_periods_per_day", "_day_mask", "_buffer")

    def __init__(self, days: int, periods_per_day: int):
        if not 1 <= days <= MAX_DAYS:
            raise ConfigurationError(
                f"days must be between 1 and {MAX_DAYS}, got {days}"
            )
        if not 1 <= periods_per_day <= MAX_PERIODS_PER_DAY:
            raise ConfigurationError(
                f"periods_per_day must be between 1 and {MAX_PERIODS_PER_DAY}, "
                f"got {periods_per_day}"
            )

        self._days = days
        self._periods_per_day = periods_per_day
        self._day_mask = (1 << periods_per_day) - 1
        self._buffer = [0] * days

    # -------------------------------------------------------------------------
    # Alternate constructors
    # -------------------------------------------------------------------------

    @classmethod
    def full(cls, days: int, periods_per_day: int) -> Availability:
        """Create an Availability with every period free."""
        avail = cls(days, periods_per_day)
        for day in range(days):
            avail.set_day(day, True)
        return avail

    @classmethod
    def from_masks(cls, days: int, periods_per_day: int, masks: Iterable[int]) -> Availability:
        """
        Create an Availability from raw per-day masks.

        Args:
            days: Number of days
            periods_per_day: Number of periods per day
            masks: One mask per day

        Raises:
            ConfigurationError: If the mask count is wrong or a mask has bits
                set beyond periods_per_day
        """
        avail = cls(days, periods_per_day)
        masks = list(masks)

        if len(masks) != days:
            raise ConfigurationError(f"expected {days} day masks, got {len(masks)}")

        for day, mask in enumerate(masks):
            if mask < 0 or mask & ~avail._day_mask:
                raise ConfigurationError(
                    f"mask {mask:#x} for day {day} does not fit in "
                    f"{periods_per_day} periods"
                )
            avail._buffer[day] = mask

        return avail

    # -------------------------------------------------------------------------
    # Dimensions
    # -------------------------------------------------------------------------

    @property
    def days(self) -> int:
        return self._days

    @property
    def periods_per_day(self) -> int:
        return self._periods_per_day

    @property
    def day_mask(self) -> int:
        """All-ones mask of width periods_per_day."""
        return self._day_mask

    @property
    def shape(self) -> tuple[int, int]:
        return (self._days, self._periods_per_day)

    def _check_day(self, day: int) -> None:
        if not 0 <= day < self._days:
            raise IndexError(f"day {day} out of range [0, {self._days})")

    def _check_period(self, period: int) -> None:
        if not 0 <= period < self._periods_per_day:
            raise IndexError(
                f"period {period} out of range [0, {self._periods_per_day})"
            )

    # -------------------------------------------------------------------------
    # Single-slot access
    # -------------------------------------------------------------------------

    def get(self, day: int, period: int) -> bool:
        """Return whether the slot is free."""
        self._check_day(day)
        self._check_period(period)
        return (self._buffer[day] >> period) & 1 == 1

    def set(self, day: int, period: int, value: bool = True) -> None:
        """Mark a single slot free (value=True) or blocked (value=False)."""
        self._check_day(day)
        self._check_period(period)

        mask = 1 << period
        if value:
            self._buffer[day] |= mask
        else:
            self._buffer[day] &= ~mask

    def toggle(self, day: int, period: int) -> None:
        """Flip a single slot."""
        self._check_day(day)
        self._check_period(period)
        self._buffer[day] ^= 1 << period

    # -------------------------------------------------------------------------
    # Whole-day access
    # -------------------------------------------------------------------------

    def get_day(self, day: int) -> int:
        """Return the raw mask for a day."""
        self._check_day(day)
        return self._buffer[day]

    def set_day(self, day: int, value: bool = True) -> None:
        """Mark every period of a day free or blocked."""
        self._check_day(day)
        self._buffer[day] = self._day_mask if value else 0

    def toggle_day(self, day: int) -> None:
        """Flip every period of a day."""
        self._check_day(day)
        self._buffer[day] ^= self._day_mask

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def available_slots(self) -> list[Slot]:
        """All free (day, period) pairs in day-major order."""
        slots = []
        for day, mask in enumerate(self._buffer):
            for period in range(self._periods_per_day):
                if (mask >> period) & 1:
                    slots.append((day, period))
        return slots

    def count(self) -> int:
        """Number of free slots."""
        return sum(bin(mask).count("1") for mask in self._buffer)

    def intersect(self, other: Availability) -> Availability:
        """Slots free in both grids. Dimensions must match."""
        if self.shape != other.shape:
            raise ConfigurationError(
                f"cannot intersect availability {self.shape} with {other.shape}"
            )
        return Availability.from_masks(
            self._days,
            self._periods_per_day,
            (a & b for a, b in zip(self._buffer, other._buffer)),
        )

    def __and__(self, other: Availability) -> Availability:
        return self.intersect(other)

    def copy(self) -> Availability:
        return Availability.from_masks(self._days, self._periods_per_day, self._buffer)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Availability):
            return NotImplemented
        return self.shape == other.shape and self._buffer == other._buffer

    __hash__ = None  # Mutable

    def __repr__(self) -> str:
        return (
            f"Availability(days={self._days}, periods_per_day={self._periods_per_day}, "
            f"free={self.count()})"
        )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def render(self) -> str:
        """Grid text: one 'Day d: 1 0 1 ...' line per day."""
        lines = []
        for day in range(self._days):
            cells = " ".join(
                "1" if self.get(day, period) else "0"
                for period in range(self._periods_per_day)
            )
            lines.append(f"Day {day}: {cells}")
        return "\n".join(lines)

    def dump(self, stream: Optional[TextIO] = None) -> None:
        """Write the grid to a stream (stdout by default)."""
        if stream is None:
            stream = sys.stdout
        stream.write(self.render() + "\n")

    def to_dict(self) -> dict:
        """JSON-ready form using the instance file's camelCase keys."""
        return {
            "days": self._days,
            "periodsPerDay": self._periods_per_day,
            "buffer": list(self._buffer),
        }
