"""
tutorschedule: weekly tutoring coverage from staffing calendars.

The core pipeline is pure and does no I/O:

    catalog + locations + shifts -> bin_shifts -> resolve_all -> Schedule
"""

from tutorschedule.binning import Diagnostics, UnknownLocation, UnmatchedTag, bin_shifts, build_schedule, build_skeleton
from tutorschedule.matching import CourseInfo, match_score
from tutorschedule.model import CourseSchedule, DailySchedule, Interval, LocationSchedule, Schedule
from tutorschedule.resolve import resolve_all, resolve_intervals
from tutorschedule.shift import InvalidShiftError, Shift, shift_from_event, split_course_tags

__all__ = [
    "CourseInfo",
    "CourseSchedule",
    "DailySchedule",
    "Diagnostics",
    "Interval",
    "InvalidShiftError",
    "LocationSchedule",
    "Schedule",
    "Shift",
    "UnknownLocation",
    "UnmatchedTag",
    "bin_shifts",
    "build_schedule",
    "build_skeleton",
    "match_score",
    "resolve_all",
    "resolve_intervals",
    "shift_from_event",
    "split_course_tags",
]
