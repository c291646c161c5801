"""
Interval resolution.

Given the raw intervals of one (course, location, week day) cell, produce
the minimal coverage: sorted by start, pairwise non-overlapping, same union.

Overlap rule:
    next.start < running.end

Touching intervals (end == next.start) are a handoff between two shifts and
stay separate unless merge_touching=True.
"""

from __future__ import annotations

from typing import Iterable

from tutorschedule.model import CourseSchedule, DailySchedule, Interval, LocationSchedule, Schedule


def _joins(running_end, next_start, merge_touching: bool) -> bool:
    if merge_touching:
        return next_start <= running_end
    return next_start < running_end


def _sort_key(iv: Interval) -> tuple:
    # equal instants written with different UTC offsets sort by offset
    return (iv.start, iv.end, iv.start.utcoffset(), iv.end.utcoffset())


def resolve_intervals(intervals: Iterable[Interval], merge_touching: bool = False) -> list[Interval]:
    """
    Merge overlapping intervals. O(n log n). Idempotent.
    """
    ordered = sorted(intervals, key=_sort_key)
    if not ordered:
        return []

    merged: list[Interval] = []
    run_start = ordered[0].start
    run_end = ordered[0].end
    for iv in ordered[1:]:
        if _joins(run_end, iv.start, merge_touching):
            if iv.end > run_end:
                run_end = iv.end
            continue
        merged.append(Interval(run_start, run_end))
        run_start, run_end = iv.start, iv.end
    merged.append(Interval(run_start, run_end))

    return merged


def resolve_daily(daily: DailySchedule, merge_touching: bool = False) -> DailySchedule:
    return DailySchedule(
        week_day=daily.week_day,
        intervals=tuple(resolve_intervals(daily.intervals, merge_touching)),
    )


def resolve_all(schedule: Schedule, merge_touching: bool = False) -> Schedule:
    """
    Return a new Schedule with every cell resolved. The input is left untouched.
    """
    return Schedule(
        CourseSchedule(
            course_info=course_schedule.course_info,
            location_schedules=tuple(
                LocationSchedule(
                    location=location_schedule.location,
                    daily_schedules=tuple(
                        resolve_daily(daily, merge_touching) for daily in location_schedule.daily_schedules
                    ),
                )
                for location_schedule in course_schedule.location_schedules
            ),
        )
        for course_schedule in schedule
    )
