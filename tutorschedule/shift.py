"""
Shift construction (calendar event -> Shift).

One calendar event becomes exactly one Shift:
- the location is the label of the calendar the event came from
- the week day and interval come from the event's start/end timestamps
- the title is split into raw course tags

Cancelled events must be filtered by the caller before they get here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Tuple

DEFAULT_TAG_DELIMITERS: Tuple[str, ...] = ("/", ",", "&", "+", ";")


class InvalidShiftError(ValueError):
    """
    Raised when an event cannot be turned into a Shift
    (missing or unparsable timestamps, end not after start).
    """


@dataclass(frozen=True)
class Shift:
    location: str
    week_day: int
    start: datetime
    end: datetime
    courses_given: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0 <= self.week_day <= 6:
            raise InvalidShiftError(f"week_day must be in 0..6, got {self.week_day}")
        if not self.start < self.end:
            raise InvalidShiftError(f"Shift end must be after start: {self.start} -> {self.end}")
        object.__setattr__(self, "courses_given", tuple(self.courses_given))


def week_day_of(dt: datetime) -> int:
    # Sunday = 0, matching the calendar frontend
    return dt.isoweekday() % 7


def split_course_tags(title: str, delimiters: Iterable[str] = DEFAULT_TAG_DELIMITERS) -> list[str]:
    """
    Split an event title into trimmed, non-empty course tags.

    Example:
        "CS101 / MATH 121" -> ["CS101", "MATH 121"]
    """
    delims = [d for d in delimiters if d]
    if not delims:
        parts = [title]
    else:
        pattern = "|".join(re.escape(d) for d in delims)
        parts = re.split(pattern, title)
    return [p.strip() for p in parts if p.strip()]


def _parse_timestamp(value: Any, field_name: str) -> datetime:
    if isinstance(value, Mapping):
        value = value.get("dateTime")
    if not isinstance(value, str) or not value.strip():
        raise InvalidShiftError(f"Event has no {field_name} dateTime")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise InvalidShiftError(f"Invalid {field_name} timestamp: {value!r}") from exc


def shift_from_event(
    event: Mapping[str, Any],
    location: str,
    delimiters: Iterable[str] = DEFAULT_TAG_DELIMITERS,
) -> Shift:
    """
    Build a Shift from one Google Calendar event mapping.

    Expected shape (only these keys are read):
        {"summary": "CS101 / MATH 121",
         "start": {"dateTime": "2022-10-17T09:00:00-04:00"},
         "end": {"dateTime": "2022-10-17T11:00:00-04:00"}}
    """
    if not isinstance(event, Mapping):
        raise TypeError(f"event must be a mapping, got {type(event).__name__}")

    start = _parse_timestamp(event.get("start"), "start")
    end = _parse_timestamp(event.get("end"), "end")
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise InvalidShiftError("Event mixes timestamps with and without UTC offset")
    if end <= start:
        raise InvalidShiftError(f"Event ends before it starts: {start.isoformat()} -> {end.isoformat()}")

    title = str(event.get("summary") or "")

    return Shift(
        location=location,
        week_day=week_day_of(start),
        start=start,
        end=end,
        courses_given=tuple(split_course_tags(title, delimiters)),
    )
