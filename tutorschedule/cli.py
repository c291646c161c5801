"""
CLI (Command Line Interface).

    tutorschedule calendars
    tutorschedule fetch --calendar ARC=<calendar id> --calendar UHall=<calendar id> --week 2022-10-16
    tutorschedule build --location ARC --location UHall [--search CS] [--json out.json] [--ics out.ics]
    tutorschedule match "cs 101"

`fetch` caches the week's events under data/raw/, `build` works only on
those cached files and the course catalog.
"""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

import requests
from loguru import logger
from rich import box
from rich.console import Console
from rich.table import Table

from tutorschedule.binning import Diagnostics, build_schedule
from tutorschedule.catalog import load_catalog
from tutorschedule.config import SchedulerConfig, load_config
from tutorschedule.events import load_cached_shifts
from tutorschedule.export_ics import export_schedule_to_ics
from tutorschedule.fetch import CalendarFetchError, CalendarInfo, fetch_week, list_calendars
from tutorschedule.log import setup_logger
from tutorschedule.matching import best_match, match_score
from tutorschedule.model import WEEK_DAY_NAMES, CourseSchedule, Schedule
from tutorschedule.serialize import write_schedule_json

console = Console()


def _format_intervals(intervals) -> str:
    return "\n".join(f"{iv.start:%H:%M}-{iv.end:%H:%M}" for iv in intervals)


def _course_table(course_schedule: CourseSchedule) -> Table:
    table = Table(title=course_schedule.course_info.abbreviation, box=box.SIMPLE)
    table.add_column("Location")
    for name in WEEK_DAY_NAMES:
        table.add_column(name)
    for ls in course_schedule.location_schedules:
        table.add_row(ls.location, *[_format_intervals(d.intervals) for d in ls.daily_schedules])
    return table


def _filter_schedule(schedule: Schedule, search: str | None, show_empty: bool) -> list[CourseSchedule]:
    query = (search or "").strip().lower()
    out: list[CourseSchedule] = []
    for cs in schedule:
        if query and query not in cs.course_info.abbreviation.lower():
            continue
        if not show_empty and not cs.has_coverage():
            continue
        out.append(cs)
    return out


def _print_diagnostics(diagnostics: Diagnostics) -> None:
    if not diagnostics:
        return
    unmatched = sorted({d.tag for d in diagnostics.unmatched_tags})
    unknown = sorted({d.location for d in diagnostics.unknown_locations})
    if unmatched:
        console.print(f"[yellow]Unmatched tags ({len(unmatched)}):[/] {', '.join(unmatched)}")
    if unknown:
        console.print(f"[yellow]Unknown locations ({len(unknown)}):[/] {', '.join(unknown)}")


def _require_token(config: SchedulerConfig) -> str | None:
    if not config.access_token:
        console.print("Please set TUTORSCHEDULE_ACCESS_TOKEN (Google OAuth access token).")
        return None
    return config.access_token


def _cmd_calendars(args: argparse.Namespace, config: SchedulerConfig) -> int:
    token = _require_token(config)
    if token is None:
        return 1

    try:
        calendars = list_calendars(token, base_url=config.api_base_url)
    except CalendarFetchError as exc:
        console.print(f"[red]Error ({exc.status}):[/] {exc.message}")
        return 1
    except requests.RequestException as exc:
        console.print(f"[red]Network error:[/] {exc}")
        return 1

    if not calendars:
        print("No calendars.")
        return 0

    table = Table(title="Calendars", box=box.SIMPLE)
    table.add_column("Name")
    table.add_column("Id")
    for cal in calendars:
        table.add_row(cal.name, cal.id)
    console.print(table)
    return 0


def _parse_calendar_arg(value: str) -> CalendarInfo:
    location, sep, cal_id = value.partition("=")
    if not sep or not location.strip() or not cal_id.strip():
        raise argparse.ArgumentTypeError(f"expected LOCATION=CALENDAR_ID, got {value!r}")
    return CalendarInfo(id=cal_id.strip(), name=location.strip())


def _parse_week_arg(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an ISO date (YYYY-MM-DD), got {value!r}") from exc


def _cmd_fetch(args: argparse.Namespace, config: SchedulerConfig) -> int:
    token = _require_token(config)
    if token is None:
        return 1

    names = [cal.name for cal in args.calendar]
    if len(set(names)) != len(names):
        print("Locations must be distinct.")
        return 1

    raw_dir = args.raw_dir or config.raw_dir
    try:
        written = fetch_week(token, args.calendar, args.week, raw_dir, base_url=config.api_base_url)
    except CalendarFetchError as exc:
        console.print(f"[red]Error ({exc.status}):[/] {exc.message}")
        return 1
    except requests.RequestException as exc:
        console.print(f"[red]Network error:[/] {exc}")
        return 1

    print(f"Cached {len(written)} calendars to: {raw_dir}")
    return 0


def _cmd_build(args: argparse.Namespace, config: SchedulerConfig) -> int:
    locations: list[str] = [loc.strip() for loc in args.location if loc.strip()]
    if not locations:
        print("Please provide at least one --location.")
        return 1
    if len(set(locations)) != len(locations):
        print("Locations must be distinct.")
        return 1

    catalog_path = args.catalog or config.catalog_path
    catalog = load_catalog(catalog_path)
    if not catalog:
        print(f"Course catalog is empty: {catalog_path}")
        return 1

    raw_dir = args.raw_dir or config.raw_dir
    shifts = load_cached_shifts(raw_dir, locations, config.tag_delimiters)
    logger.info(f"Loaded {len(shifts)} shifts for {', '.join(locations)}")

    schedule, diagnostics = build_schedule(
        catalog,
        locations,
        shifts,
        threshold=config.match_threshold,
        merge_touching=args.merge_touching or config.merge_touching,
    )

    shown = _filter_schedule(schedule, args.search, args.show_empty)
    if not shown:
        print("No courses with coverage.")
    for cs in shown:
        console.print(_course_table(cs))

    _print_diagnostics(diagnostics)

    if args.json:
        n = write_schedule_json(schedule, args.json, include_empty=args.show_empty)
        print(f"Wrote {n} courses to: {args.json}")
    if args.ics:
        n = export_schedule_to_ics(schedule, args.ics)
        print(f"Exported {n} coverage windows to: {args.ics}")

    return 0


def _cmd_match(args: argparse.Namespace, config: SchedulerConfig) -> int:
    tag = (args.tag or "").strip()
    if not tag:
        print("Please provide a tag.")
        return 1

    catalog = load_catalog(args.catalog or config.catalog_path)
    if not catalog:
        print("Course catalog is empty.")
        return 1

    scored = sorted(
        ((match_score(c, tag), i, c.abbreviation) for i, c in enumerate(catalog)),
        key=lambda t: (-t[0], t[1]),
    )

    table = Table(title=f"Matches for {tag!r} (threshold {config.match_threshold})", box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Score", justify="right")
    for score, _, abbreviation in scored[: args.limit]:
        text = f"{score:.3f}"
        table.add_row(abbreviation, f"[green]{text}[/]" if score > config.match_threshold else text)
    console.print(table)

    winner = best_match(catalog, tag, config.match_threshold)
    if winner is None:
        print("No course above the threshold; shifts with this tag are dropped.")
    else:
        print(f"Bins to: {winner.abbreviation}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="tutorschedule", description="Tutoring coverage schedule builder")
    parser.add_argument("--env-file", type=Path, default=None, help="Load settings from this .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("calendars", help="List the Google calendars of the access token")

    p_fetch = sub.add_parser("fetch", help="Fetch and cache one week of calendar events")
    p_fetch.add_argument(
        "--calendar",
        "-c",
        type=_parse_calendar_arg,
        action="append",
        required=True,
        help="LOCATION=CALENDAR_ID (repeatable)",
    )
    p_fetch.add_argument("--week", "-w", type=_parse_week_arg, required=True, help="First day of the week (YYYY-MM-DD)")
    p_fetch.add_argument("--raw-dir", type=Path, default=None, help="Directory to cache events in")

    p_build = sub.add_parser("build", help="Build the coverage schedule from cached events")
    p_build.add_argument("--location", "-l", action="append", required=True, help="Location name (repeatable)")
    p_build.add_argument("--catalog", type=Path, default=None, help="Course catalog file")
    p_build.add_argument("--raw-dir", type=Path, default=None, help="Directory with cached events")
    p_build.add_argument("--search", "-s", type=str, default=None, help="Only show courses containing this text")
    p_build.add_argument("--show-empty", action="store_true", help="Also show courses without coverage")
    p_build.add_argument("--merge-touching", action="store_true", help="Merge back-to-back shifts")
    p_build.add_argument("--json", type=Path, default=None, help="Write schedule JSON to this file")
    p_build.add_argument("--ics", type=Path, default=None, help="Export coverage to this .ics file")

    p_match = sub.add_parser("match", help="Score a course tag against the catalog")
    p_match.add_argument("tag", type=str, help="Free-text course tag")
    p_match.add_argument("--catalog", type=Path, default=None, help="Course catalog file")
    p_match.add_argument("--limit", type=int, default=5, help="Number of results")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logger("DEBUG" if args.verbose else "WARNING")

    try:
        config = load_config(args.env_file)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(2)

    if args.command == "calendars":
        raise SystemExit(_cmd_calendars(args, config))
    if args.command == "fetch":
        raise SystemExit(_cmd_fetch(args, config))
    if args.command == "build":
        raise SystemExit(_cmd_build(args, config))
    if args.command == "match":
        raise SystemExit(_cmd_match(args, config))

    raise SystemExit(2)
