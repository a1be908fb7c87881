"""
Weekly schedule grouping and formatting.

Entries are grouped by day of week, sorted by start time within a day, and
rendered Saturday first so vigil Masses lead the list. Times are wall-clock
"HH:MM" text with no stored zone; no timezone conversion is applied.
"""

import re
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from catholic_schedule.core.errors import InvalidInputError
from catholic_schedule.core.models import ConfessionTime, MassTime

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DISPLAY_ORDER = [6, 0, 1, 2, 3, 4, 5]  # Saturday vigil first

NOTE_SEPARATOR = " • "
RANGE_SEPARATOR = "–"

# Postgres time columns come back as HH:MM:SS; seconds are ignored
TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2}(?:\.\d+)?)?$")

ScheduleEntry = Union[MassTime, ConfessionTime]


class ScheduleKind(str, Enum):
    MASS = "mass"
    CONFESSION = "confession"

    @property
    def table(self) -> str:
        return "mass_times" if self is ScheduleKind.MASS else "confession_times"

    @property
    def columns(self) -> str:
        if self is ScheduleKind.MASS:
            return "day_of_week, time, notes"
        return "day_of_week, start_time, end_time, notes"

    @property
    def title(self) -> str:
        return "Mass times" if self is ScheduleKind.MASS else "Confession times"

    @property
    def empty_message(self) -> str:
        if self is ScheduleKind.MASS:
            return "No Mass times listed."
        return "No confession times currently listed. Please contact the parish for current confession times."

    @property
    def error_prefix(self) -> str:
        return "Error loading Mass times" if self is ScheduleKind.MASS else "Error loading confession times"


def parse_time(value: str) -> Tuple[int, int]:
    """Parse "HH:MM" (or "HH:MM:SS") into an (hour, minute) tuple."""
    match = TIME_PATTERN.match((value or "").strip())
    if not match:
        raise InvalidInputError(f"Invalid time: {value!r}. Use HH:MM.", field="time")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidInputError(f"Invalid time: {value!r}. Use HH:MM.", field="time")
    return hour, minute


def normalize_time(value: str) -> str:
    """Return zero-padded 24-hour "HH:MM" text."""
    hour, minute = parse_time(value)
    return f"{hour:02d}:{minute:02d}"


def format_time(value: str) -> str:
    """
    Format 24-hour text on a 12-hour clock.

    >>> format_time("00:00")
    '12:00 AM'
    >>> format_time("13:05")
    '1:05 PM'
    """
    hour, minute = parse_time(value)
    suffix = "PM" if hour >= 12 else "AM"
    hour12 = (hour + 11) % 12 + 1
    return f"{hour12}:{minute:02d} {suffix}"


def day_name(day_of_week: int) -> str:
    if not 0 <= day_of_week <= 6:
        raise InvalidInputError(f"Invalid day of week: {day_of_week}", field="day_of_week")
    return DAY_NAMES[day_of_week]


def group_by_day(entries: Sequence[ScheduleEntry]) -> Dict[int, List[ScheduleEntry]]:
    """Map day_of_week to its entries, each list sorted ascending by start time."""
    grouped: Dict[int, List[ScheduleEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.day_of_week].append(entry)
    for day_entries in grouped.values():
        day_entries.sort(key=lambda e: parse_time(e.start))
    return dict(grouped)


def format_entry(entry: ScheduleEntry) -> str:
    """Render one entry as a short label, with its note appended when present."""
    if isinstance(entry, ConfessionTime):
        label = f"{format_time(entry.start_time)}{RANGE_SEPARATOR}{format_time(entry.end_time)}"
    else:
        label = format_time(entry.time)
    if entry.notes:
        label = f"{label}{NOTE_SEPARATOR}{entry.notes}"
    return label


@dataclass
class ScheduleDay:
    day_of_week: int
    name: str
    labels: List[str]


@dataclass
class ScheduleView:
    """What a result card shows for one church's schedule."""

    kind: ScheduleKind
    days: List[ScheduleDay] = field(default_factory=list)
    empty_message: Optional[str] = None
    error: Optional[str] = None

    @property
    def title(self) -> str:
        return self.kind.title

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "title": self.title,
            "days": [{"day_of_week": d.day_of_week, "name": d.name, "labels": d.labels} for d in self.days],
            "empty_message": self.empty_message,
            "error": self.error,
        }

    def render_text(self) -> List[str]:
        """Plain-text lines, as printed by the CLI."""
        if self.error:
            return [self.error]
        if self.empty_message:
            return [self.empty_message]
        lines = [f"{self.title}:"]
        for day in self.days:
            lines.append(f"  {day.name}: {', '.join(day.labels)}")
        return lines


def build_schedule_view(kind: ScheduleKind, entries: Sequence[ScheduleEntry]) -> ScheduleView:
    """Group, sort and label entries in display order; empty input yields the fixed message."""
    if not entries:
        return ScheduleView(kind=kind, empty_message=kind.empty_message)

    grouped = group_by_day(entries)
    days = [
        ScheduleDay(day_of_week=day, name=DAY_NAMES[day], labels=[format_entry(e) for e in grouped[day]])
        for day in DISPLAY_ORDER
        if day in grouped
    ]
    return ScheduleView(kind=kind, days=days)


def error_view(kind: ScheduleKind, message: str) -> ScheduleView:
    return ScheduleView(kind=kind, error=f"{kind.error_prefix}: {message}")
