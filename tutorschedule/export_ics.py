"""
iCalendar (.ics) export.

Every resolved coverage window becomes one calendar event, so the schedule
can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from tutorschedule.model import Schedule


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_ics(dt: datetime) -> str:
    """
    Aware datetimes are written in UTC ('...Z'), naive ones as local time.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return dt.strftime("%Y%m%dT%H%M%S")


def export_schedule_to_ics(schedule: Schedule, out_path: str | Path) -> int:
    """
    Export coverage windows to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//tutorschedule//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for course_schedule in schedule:
        course = course_schedule.course_info.abbreviation
        for location_schedule in course_schedule.location_schedules:
            location = location_schedule.location
            for daily in location_schedule.daily_schedules:
                for iv in daily.intervals:
                    dtstart = _dt_ics(iv.start)
                    uid = f"{course}-{location}-{dtstart}".replace(" ", "_")

                    lines.append("BEGIN:VEVENT")
                    lines.append(f"UID:{_ics_escape(uid)}")
                    lines.append(f"DTSTAMP:{dtstamp}")
                    lines.append(f"DTSTART:{dtstart}")
                    lines.append(f"DTEND:{_dt_ics(iv.end)}")
                    lines.append(f"SUMMARY:{_ics_escape(f'{course} @ {location}')}")
                    lines.append(f"LOCATION:{_ics_escape(location)}")
                    lines.append("END:VEVENT")
                    count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
