"""Day window and grid coordinate system for dayblocks.

All block starts and durations live on a grid of snap-unit slots spanning
the visible day window. The UI maps fractions to pixels.
"""

import math
from typing import List, Union

from dayblocks.engine.errors import ConfigurationError
from dayblocks.models.constants import (
    DAY_START_MINUTE,
    DAY_END_MINUTE,
    SNAP_UNIT_MINUTES,
    MINUTES_PER_DAY,
)

Number = Union[int, float]


def _clamp(value: Number, low: Number, high: Number) -> Number:
    return max(low, min(high, value))


def format_label(minute: int) -> str:
    """Format minutes since 00:00 as a 12-hour clock label.

    Args:
        minute: Minutes since 00:00 (1440 wraps to midnight)

    Returns:
        Label such as "8:00 AM" or "12:30 PM"
    """
    hours = (minute // 60) % 24
    mins = minute % 60
    h12 = ((hours + 11) % 12) + 1
    ampm = "AM" if hours < 12 else "PM"
    return f"{h12}:{mins:02d} {ampm}"


class TimeAxis:
    """Fixed day-window configuration with minute/position conversions."""

    def __init__(
        self,
        day_start_minute: int = DAY_START_MINUTE,
        day_end_minute: int = DAY_END_MINUTE,
        snap_unit_minutes: int = SNAP_UNIT_MINUTES,
    ):
        if snap_unit_minutes <= 0:
            raise ConfigurationError(f"Snap unit must be positive, got {snap_unit_minutes}")
        if not (0 <= day_start_minute < day_end_minute <= MINUTES_PER_DAY):
            raise ConfigurationError(
                f"Day window {day_start_minute}-{day_end_minute} must be non-empty and within 0-{MINUTES_PER_DAY}"
            )
        span = day_end_minute - day_start_minute
        if span % snap_unit_minutes != 0:
            raise ConfigurationError(
                f"Day window of {span} minutes is not a whole number of {snap_unit_minutes}-minute slots"
            )
        if day_start_minute % snap_unit_minutes != 0:
            raise ConfigurationError(
                f"Day start {day_start_minute} is not aligned to the {snap_unit_minutes}-minute grid"
            )
        self.day_start_minute = day_start_minute
        self.day_end_minute = day_end_minute
        self.snap_unit_minutes = snap_unit_minutes

    def __repr__(self) -> str:
        return (
            f"TimeAxis(day_start_minute={self.day_start_minute}, "
            f"day_end_minute={self.day_end_minute}, snap_unit_minutes={self.snap_unit_minutes})"
        )

    @property
    def span_minutes(self) -> int:
        return self.day_end_minute - self.day_start_minute

    @property
    def slot_count(self) -> int:
        return self.span_minutes // self.snap_unit_minutes

    @property
    def latest_start_minute(self) -> int:
        """Last start that still leaves room for one slot."""
        return self.day_end_minute - self.snap_unit_minutes

    def slot_starts(self) -> List[int]:
        """Start minute of every slot, in order."""
        return [
            self.day_start_minute + i * self.snap_unit_minutes
            for i in range(self.slot_count)
        ]

    def round_to_unit(self, value: Number) -> int:
        """Round to the nearest snap-unit multiple, halves rounding up. No clamping."""
        unit = self.snap_unit_minutes
        return int(math.floor(value / unit + 0.5)) * unit

    def snap(self, minute: Number) -> int:
        """Snap a start minute to the grid and clamp it into the day window.

        The result always leaves room for at least one slot before day end.
        """
        return int(_clamp(self.round_to_unit(minute), self.day_start_minute, self.latest_start_minute))

    def snap_end(self, minute: Number) -> int:
        """Snap an end minute to the grid, clamped to [day start + one slot, day end]."""
        low = self.day_start_minute + self.snap_unit_minutes
        return int(_clamp(self.round_to_unit(minute), low, self.day_end_minute))

    def minute_to_fraction(self, minute: Number) -> float:
        """Normalized axis position of a minute, clamped into [0, 1]."""
        fraction = (minute - self.day_start_minute) / self.span_minutes
        return float(_clamp(fraction, 0.0, 1.0))

    def position_to_minute(self, position: Number, axis_extent: Number = 1.0) -> float:
        """Unsnapped minute for a position along a rendered extent."""
        if axis_extent <= 0:
            raise ValueError(f"Axis extent must be positive, got {axis_extent}")
        fraction = _clamp(position / axis_extent, 0.0, 1.0)
        # Round away float noise so exact half-slot positions stay exact.
        return round(self.day_start_minute + fraction * self.span_minutes, 6)

    def fraction_to_minute(self, fraction: Number, axis_extent: Number = 1.0) -> int:
        """Snapped start minute for a pointer position.

        Args:
            fraction: Pointer position along the axis (a fraction when
                axis_extent is 1, otherwise in the same units as axis_extent)
            axis_extent: Rendered length of the day window

        Returns:
            Grid-aligned minute within [day start, day end - one slot]
        """
        return self.snap(self.position_to_minute(fraction, axis_extent))

    def minute_to_position(self, minute: Number, axis_extent: Number = 1.0) -> float:
        return self.minute_to_fraction(minute) * axis_extent

    def format_label(self, minute: int) -> str:
        return format_label(minute)
