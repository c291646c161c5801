"""
Course catalog loading.

The catalog is the source of truth list of course abbreviations, one per
line (courseCatalog.csv). Blank lines and '#' comments are skipped so that no
degenerate entry reaches the matcher. Duplicates keep their first position.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger

from tutorschedule.matching import CourseInfo


def parse_catalog_lines(lines: Iterable[str]) -> list[CourseInfo]:
    catalog: list[CourseInfo] = []
    seen: set[str] = set()
    for line in lines:
        abbreviation = line.strip()
        if not abbreviation or abbreviation.startswith("#"):
            continue
        if abbreviation in seen:
            logger.debug(f"Duplicate catalog entry {abbreviation!r} ignored")
            continue
        seen.add(abbreviation)
        catalog.append(CourseInfo(abbreviation))
    return catalog


def load_catalog(path: str | Path) -> list[CourseInfo]:
    """
    Load the catalog file. A missing or unreadable file gives an empty catalog.
    """
    catalog_path = Path(path)
    try:
        text = catalog_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning(f"Course catalog not found: {catalog_path}")
        return []
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Could not read course catalog {catalog_path}: {exc}")
        return []

    catalog = parse_catalog_lines(text.splitlines())
    logger.debug(f"Loaded {len(catalog)} courses from {catalog_path}")
    return catalog
