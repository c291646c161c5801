"""
Google Calendar fetching (cache raw event JSON).

- Lists the user's calendars
- Loads all events of one staging week for each selected calendar
- Writes one file per location:
  - data/raw/<location>-<hash>.json

The scheduling code never talks to the network; it reads these files.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import quote

import requests
from loguru import logger

from tutorschedule.config import DEFAULT_API_BASE_URL

WEEK = timedelta(days=7)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalendarInfo:
    """
    One calendar; `name` is used as the location label of its events.
    """

    id: str
    name: str


class CalendarFetchError(RuntimeError):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def week_window(staging_day: datetime) -> tuple[datetime, datetime]:
    """
    Return [staging_day, staging_day + 7 days).
    """
    return staging_day, staging_day + WEEK


def _raise_for_status(resp: requests.Response, calendar_name: str | None = None) -> None:
    status = resp.status_code
    if status < 400:
        return
    if status == 401:
        raise CalendarFetchError(401, "Invalid credentials. Log in through Google again.")
    if status == 404 and calendar_name is not None:
        raise CalendarFetchError(
            404, f"{calendar_name} calendar not found. Double check that your calendars are not deleted."
        )
    if status == 500:
        raise CalendarFetchError(500, "Google backend error. Please try again in a few minutes.")
    raise CalendarFetchError(status, "Unknown error while retrieving calendar events.")


def _get_json(
    url: str,
    access_token: str,
    params: dict[str, Any] | None = None,
    calendar_name: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    http = session or requests
    resp = http.get(
        url,
        params=params,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=30,
    )
    _raise_for_status(resp, calendar_name)
    data = resp.json()
    return data if isinstance(data, dict) else {}


def _rfc3339(dt: datetime) -> str:
    # the API rejects timestamps without offset; naive values are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def _safe_filename(location: str) -> str:
    """
    Readable, collision free file stem: "U Hall" -> "U_Hall-<hash>".
    """
    cleaned = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in location.strip())
    digest = hashlib.sha1(location.encode("utf-8")).hexdigest()[:10]
    return f"{cleaned or '_'}-{digest}"


def raw_path_for(raw_dir: Path, location: str) -> Path:
    return raw_dir / f"{_safe_filename(location)}.json"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def list_calendars(
    access_token: str,
    base_url: str = DEFAULT_API_BASE_URL,
    session: requests.Session | None = None,
) -> list[CalendarInfo]:
    data = _get_json(f"{base_url}/users/me/calendarList", access_token, session=session)
    out: list[CalendarInfo] = []
    for item in data.get("items") or []:
        cal_id = str(item.get("id") or "").strip()
        if cal_id:
            out.append(CalendarInfo(id=cal_id, name=str(item.get("summary") or cal_id)))
    return out


def fetch_events(
    access_token: str,
    calendar: CalendarInfo,
    time_min: datetime,
    time_max: datetime,
    base_url: str = DEFAULT_API_BASE_URL,
    session: requests.Session | None = None,
) -> list[dict[str, Any]]:
    """
    Load all events of one calendar between time_min and time_max.

    Recurring events are expanded into single instances, and every result
    page is followed.
    """
    url = f"{base_url}/calendars/{quote(calendar.id, safe='')}/events"
    params: dict[str, Any] = {
        "timeMin": _rfc3339(time_min),
        "timeMax": _rfc3339(time_max),
        "singleEvents": "true",
    }

    events: list[dict[str, Any]] = []
    while True:
        data = _get_json(url, access_token, params=params, calendar_name=calendar.name, session=session)
        events.extend(data.get("items") or [])
        token = data.get("nextPageToken")
        if not token:
            break
        params = {**params, "pageToken": token}

    return events


def fetch_week(
    access_token: str,
    calendars: Iterable[CalendarInfo],
    staging_day: datetime,
    raw_dir: Path,
    base_url: str = DEFAULT_API_BASE_URL,
    session: requests.Session | None = None,
) -> dict[str, Path]:
    """
    Fetch one staging week for every calendar and cache it as JSON.

    Returns {location: cached file}.
    """
    calendars = list(calendars)
    names = [calendar.name for calendar in calendars]
    if len(set(names)) != len(names):
        raise ValueError(f"calendar location names must be distinct: {names}")

    raw_dir.mkdir(parents=True, exist_ok=True)
    time_min, time_max = week_window(staging_day)

    written: dict[str, Path] = {}
    for calendar in calendars:
        logger.info(f"FETCH {calendar.name} ({time_min.date()} - {time_max.date()})")
        events = fetch_events(access_token, calendar, time_min, time_max, base_url=base_url, session=session)

        out_file = raw_path_for(raw_dir, calendar.name)
        payload = {"location": calendar.name, "calendar_id": calendar.id, "items": events}
        out_file.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info(f"Cached {len(events)} events to {out_file}")
        written[calendar.name] = out_file

    return written
