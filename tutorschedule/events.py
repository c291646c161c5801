"""
Event normalization (cached calendar JSON -> Shift list).

Important rules:
- 1 calendar event = 1 Shift
- events without a status, or with status 'cancelled', are skipped
- events that cannot become a Shift are skipped with a warning
- one load uses one timestamp kind: once a shift with (or without) a UTC
  offset is accepted, events of the other kind are skipped with a warning
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from loguru import logger

from tutorschedule.fetch import raw_path_for
from tutorschedule.shift import DEFAULT_TAG_DELIMITERS, InvalidShiftError, Shift, shift_from_event


def is_active(event: Mapping[str, Any]) -> bool:
    status = event.get("status")
    return bool(status) and status != "cancelled"


def _is_aware(shift: Shift) -> bool:
    return shift.start.tzinfo is not None


def keep_one_timestamp_kind(shifts: Iterable[Shift]) -> list[Shift]:
    """
    Keep the shifts whose timestamps are of the same kind (naive or with
    UTC offset) as the first one. Mixed kinds cannot be compared.
    """
    kept: list[Shift] = []
    aware: bool | None = None
    for shift in shifts:
        if aware is None:
            aware = _is_aware(shift)
        if _is_aware(shift) != aware:
            kind = "with" if aware else "without"
            logger.warning(
                f"Skipping shift at {shift.location} {shift.start.isoformat()}: "
                f"earlier shifts have timestamps {kind} UTC offset"
            )
            continue
        kept.append(shift)
    return kept


def shifts_from_events(
    events: Iterable[Mapping[str, Any]],
    location: str,
    delimiters: Iterable[str] = DEFAULT_TAG_DELIMITERS,
) -> list[Shift]:
    delimiters = tuple(delimiters)
    shifts: list[Shift] = []
    for event in events:
        if not isinstance(event, Mapping) or not is_active(event):
            continue
        try:
            shifts.append(shift_from_event(event, location, delimiters))
        except InvalidShiftError as exc:
            logger.warning(f"Skipping event {event.get('id', '?')} at {location}: {exc}")
    return keep_one_timestamp_kind(shifts)


def _load_items(path: Path, location: str) -> list[Any]:
    """
    Read the cached events of one location. Missing or broken files, and
    files written for another location, give [].
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning(f"No cached events for {location} ({path})")
        return []
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning(f"Could not read cached events {path}: {exc}")
        return []

    if isinstance(data, dict):
        cached_location = data.get("location")
        if cached_location is not None and cached_location != location:
            logger.warning(f"Cached events {path} belong to {cached_location!r}, not {location!r}")
            return []
        data = data.get("items", [])
    return list(data) if isinstance(data, list) else []


def load_cached_shifts(
    raw_dir: Path,
    locations: Iterable[str],
    delimiters: Iterable[str] = DEFAULT_TAG_DELIMITERS,
) -> list[Shift]:
    delimiters = tuple(delimiters)
    shifts: list[Shift] = []
    for location in locations:
        items = _load_items(raw_path_for(raw_dir, location), location)
        shifts.extend(shifts_from_events(items, location, delimiters))
    return keep_one_timestamp_kind(shifts)
