# barbershop/core.py

import re
from dataclasses import dataclass

from .errors import ValidationError

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_HHMM = re.compile(HHMM_PATTERN)
# 24:00 is accepted only as an end-of-day bound (e.g. the grid end)
_HHMM_BOUND = re.compile(r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$")

MINUTES_PER_DAY = 24 * 60


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open intervals; touching ends do not overlap
    return not (a_end <= b_start or a_start >= b_end)


def to_minutes(value: str, allow_end_of_day: bool = False) -> int:
    pattern = _HHMM_BOUND if allow_end_of_day else _HHMM
    if not isinstance(value, str) or not pattern.match(value):
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def to_hhmm(minutes: int) -> str:
    if not (0 <= minutes <= MINUTES_PER_DAY):
        raise ValidationError(f"Minute of day out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class Interval:
    """Half-open ``[start, end)`` span of a day, in minutes since midnight."""

    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationError(
                f"Start time {to_hhmm(self.start)} must be before end time {to_hhmm(self.end)}"
            )

    @classmethod
    def from_hhmm(cls, start: str, end: str) -> "Interval":
        return cls(to_minutes(start), to_minutes(end, allow_end_of_day=True))

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)

    def contains(self, point: int) -> bool:
        return self.start <= point < self.end

    def __str__(self):
        return f"{to_hhmm(self.start)}-{to_hhmm(self.end)}"


def time_grid(start: str, end: str, step_minutes: int) -> list[str]:
    """Every HH:MM from ``start`` (inclusive) to ``end`` (exclusive) in ``step_minutes`` steps."""
    if step_minutes <= 0:
        raise ValidationError("Slot step must be a positive number of minutes")
    first = to_minutes(start)
    last = to_minutes(end, allow_end_of_day=True)

    slots = []
    current = first
    while current < last:
        slots.append(to_hhmm(current))
        current += step_minutes
    return slots
