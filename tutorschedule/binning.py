"""
Binning (shifts -> course x location x week day cells).

For every shift and every raw tag in its title:
1. the first catalog course scoring above the threshold wins
2. the location must be one of the requested locations (exact match)
3. the shift's interval is appended to that cell

Unmatched tags and unknown locations are normal with hand-typed calendar
titles. They never raise; they are returned as Diagnostics.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Sequence

from loguru import logger

from tutorschedule.matching import DEFAULT_MATCH_THRESHOLD, CourseInfo, best_match_index
from tutorschedule.model import WEEK_DAYS, CourseSchedule, DailySchedule, Interval, LocationSchedule, Schedule
from tutorschedule.resolve import resolve_all
from tutorschedule.shift import Shift


@dataclass(frozen=True)
class UnmatchedTag:
    tag: str
    location: str
    week_day: int


@dataclass(frozen=True)
class UnknownLocation:
    tag: str
    course: str
    location: str


@dataclass
class Diagnostics:
    """
    Everything the binning pass dropped, in the order it was dropped.
    """

    unmatched_tags: list[UnmatchedTag] = field(default_factory=list)
    unknown_locations: list[UnknownLocation] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.unmatched_tags or self.unknown_locations)

    def __len__(self) -> int:
        return len(self.unmatched_tags) + len(self.unknown_locations)


def _check_inputs(catalog: Sequence[CourseInfo], locations: Sequence[str]) -> None:
    if not catalog:
        raise ValueError("catalog must not be empty")
    for course_info in catalog:
        if not isinstance(course_info, CourseInfo):
            raise TypeError(f"catalog entries must be CourseInfo, got {type(course_info).__name__}")
    if len(set(locations)) != len(locations):
        raise ValueError(f"locations must be distinct: {list(locations)}")


def _assemble(
    catalog: Sequence[CourseInfo],
    locations: Sequence[str],
    cells: dict[tuple[int, str, int], list[Interval]],
) -> Schedule:
    return Schedule(
        CourseSchedule(
            course_info=course_info,
            location_schedules=tuple(
                LocationSchedule(
                    location=location,
                    daily_schedules=tuple(
                        DailySchedule(week_day=day, intervals=tuple(cells.get((ci, location, day), ())))
                        for day in WEEK_DAYS
                    ),
                )
                for location in locations
            ),
        )
        for ci, course_info in enumerate(catalog)
    )


def build_skeleton(catalog: Sequence[CourseInfo], locations: Sequence[str]) -> Schedule:
    """
    Empty schedule: one cell per catalog entry x location x week day.
    """
    _check_inputs(catalog, locations)
    return _assemble(catalog, locations, {})


def bin_shifts(
    catalog: Sequence[CourseInfo],
    locations: Sequence[str],
    shifts: Sequence[Shift],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> tuple[Schedule, Diagnostics]:
    """
    Place every shift's interval into its (course, location, week day) cell.

    Returns the raw (unresolved) schedule and the diagnostics of dropped tags.
    """
    _check_inputs(catalog, locations)

    known_locations = set(locations)

    cells: dict[tuple[int, str, int], list[Interval]] = defaultdict(list)
    diagnostics = Diagnostics()

    for shift in shifts:
        if not isinstance(shift, Shift):
            raise TypeError(f"shifts must contain Shift values, got {type(shift).__name__}")

        for tag in shift.courses_given:
            ci = best_match_index(catalog, tag, threshold)
            if ci is None:
                logger.debug(f"Unmatched tag {tag!r} ({shift.location}, day {shift.week_day})")
                diagnostics.unmatched_tags.append(UnmatchedTag(tag, shift.location, shift.week_day))
                continue

            if shift.location not in known_locations:
                logger.debug(f"Unknown location {shift.location!r} for tag {tag!r}")
                diagnostics.unknown_locations.append(
                    UnknownLocation(tag, catalog[ci].abbreviation, shift.location)
                )
                continue

            cells[(ci, shift.location, shift.week_day)].append(
                Interval(shift.start, shift.end)
            )

    return _assemble(catalog, locations, cells), diagnostics


def build_schedule(
    catalog: Sequence[CourseInfo],
    locations: Sequence[str],
    shifts: Sequence[Shift],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    merge_touching: bool = False,
) -> tuple[Schedule, Diagnostics]:
    """
    Full pipeline: bin the shifts, then resolve every cell.
    """
    raw, diagnostics = bin_shifts(catalog, locations, shifts, threshold)
    if diagnostics:
        logger.info(
            f"Dropped {len(diagnostics.unmatched_tags)} unmatched tags "
            f"and {len(diagnostics.unknown_locations)} tags with unknown locations"
        )
    return resolve_all(raw, merge_touching), diagnostics
