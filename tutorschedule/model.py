"""
Central data model definitions used across the project.

The schedule is a nested structure:

    Schedule -> CourseSchedule -> LocationSchedule -> DailySchedule -> Interval

All values are frozen dataclasses. The binning and resolving passes build
new values instead of changing existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Tuple

if TYPE_CHECKING:
    from tutorschedule.matching import CourseInfo

# 0 = Sunday ... 6 = Saturday
WEEK_DAYS: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)
WEEK_DAY_NAMES: Tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class Interval:
    """
    One half-open staffing window [start, end).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValueError(f"Interval end must be after start: {self.start} -> {self.end}")


@dataclass(frozen=True)
class DailySchedule:
    week_day: int
    intervals: Tuple[Interval, ...] = ()


@dataclass(frozen=True)
class LocationSchedule:
    """
    Coverage of one course at one location, exactly one entry per week day.
    """

    location: str
    daily_schedules: Tuple[DailySchedule, ...]

    def __post_init__(self) -> None:
        days = tuple(d.week_day for d in self.daily_schedules)
        if days != WEEK_DAYS:
            raise ValueError(f"LocationSchedule needs one DailySchedule per week day, got {days}")

    def day(self, week_day: int) -> DailySchedule:
        if week_day not in WEEK_DAYS:
            raise KeyError(week_day)
        return self.daily_schedules[week_day]


@dataclass(frozen=True)
class CourseSchedule:
    course_info: CourseInfo
    location_schedules: Tuple[LocationSchedule, ...]

    def location(self, name: str) -> LocationSchedule:
        for location_schedule in self.location_schedules:
            if location_schedule.location == name:
                return location_schedule
        raise KeyError(name)

    def has_coverage(self) -> bool:
        return any(
            daily.intervals
            for location_schedule in self.location_schedules
            for daily in location_schedule.daily_schedules
        )


class Schedule(list):
    """
    Ordered list of CourseSchedule values, one per catalog entry in catalog order.
    """

    def __init__(self, course_schedules: Iterable[CourseSchedule] = ()) -> None:
        super().__init__(course_schedules)

    def course(self, abbreviation: str) -> CourseSchedule:
        for course_schedule in self:
            if course_schedule.course_info.abbreviation == abbreviation:
                return course_schedule
        raise KeyError(abbreviation)
