"""
JSON output of a schedule.

Wire shape (the shape the calendar frontend reads):

    [{"course": {"abbreviation": "CS101"},
      "locationSchedules": [{"location": "ARC",
                             "dailySchedules": [{"weekDay": 0,
                                                 "intervals": [{"start": ISO, "end": ISO}]}]}]}]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tutorschedule.model import CourseSchedule, Schedule


def course_schedule_to_dict(course_schedule: CourseSchedule) -> dict[str, Any]:
    return {
        "course": {"abbreviation": course_schedule.course_info.abbreviation},
        "locationSchedules": [
            {
                "location": ls.location,
                "dailySchedules": [
                    {
                        "weekDay": daily.week_day,
                        "intervals": [
                            {"start": iv.start.isoformat(), "end": iv.end.isoformat()} for iv in daily.intervals
                        ],
                    }
                    for daily in ls.daily_schedules
                ],
            }
            for ls in course_schedule.location_schedules
        ],
    }


def schedule_to_dict(schedule: Schedule, include_empty: bool = True) -> list[dict[str, Any]]:
    return [
        course_schedule_to_dict(cs) for cs in schedule if include_empty or cs.has_coverage()
    ]


def write_schedule_json(schedule: Schedule, out_path: str | Path, include_empty: bool = True) -> int:
    """
    Write the schedule as JSON. Returns the number of courses written.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = schedule_to_dict(schedule, include_empty=include_empty)
    out.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return len(payload)
