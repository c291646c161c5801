"""
Runtime configuration.

Values come from environment variables (optionally loaded from a .env file):

    TUTORSCHEDULE_MATCH_THRESHOLD   similarity a tag must exceed (default 0.9)
    TUTORSCHEDULE_TAG_DELIMITERS    characters splitting event titles (default "/,&+;")
    TUTORSCHEDULE_MERGE_TOUCHING    merge intervals that only touch (default false)
    TUTORSCHEDULE_CATALOG_PATH      line-delimited course catalog
    TUTORSCHEDULE_DATA_DIR          cache directory for fetched calendar events
    TUTORSCHEDULE_ACCESS_TOKEN      Google OAuth access token for fetching
    TUTORSCHEDULE_API_BASE_URL      Google Calendar API base url
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from tutorschedule.matching import DEFAULT_MATCH_THRESHOLD
from tutorschedule.shift import DEFAULT_TAG_DELIMITERS

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = PACKAGE_DIR / "data"
DEFAULT_API_BASE_URL = "https://www.googleapis.com/calendar/v3"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class SchedulerConfig:
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    tag_delimiters: tuple[str, ...] = DEFAULT_TAG_DELIMITERS
    merge_touching: bool = False
    catalog_path: Path = DEFAULT_DATA_DIR / "courseCatalog.csv"
    data_dir: Path = DEFAULT_DATA_DIR
    access_token: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL

    def __post_init__(self) -> None:
        if not 0.0 <= self.match_threshold < 1.0:
            raise ValueError(f"match_threshold must be in [0, 1), got {self.match_threshold}")

    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw"


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _env(name: str) -> str | None:
    value = os.getenv(f"TUTORSCHEDULE_{name}")
    return value.strip() if value is not None else None


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"TUTORSCHEDULE_{name} must be a boolean, got {value!r}")


def load_config(dotenv_path: str | Path | None = None) -> SchedulerConfig:
    """
    Build a SchedulerConfig from the environment. Unset variables keep defaults.
    """
    load_env(dotenv_path)
    kwargs: dict = {}

    threshold = _env("MATCH_THRESHOLD")
    if threshold:
        try:
            kwargs["match_threshold"] = float(threshold)
        except ValueError as exc:
            raise ValueError(f"TUTORSCHEDULE_MATCH_THRESHOLD must be a number, got {threshold!r}") from exc

    delimiters = os.getenv("TUTORSCHEDULE_TAG_DELIMITERS")
    if delimiters is not None:
        # every character is one delimiter, whitespace is never one
        kwargs["tag_delimiters"] = tuple(ch for ch in delimiters if not ch.isspace())

    merge = _env("MERGE_TOUCHING")
    if merge is not None:
        kwargs["merge_touching"] = _parse_bool("MERGE_TOUCHING", merge)

    data_dir = _env("DATA_DIR")
    if data_dir:
        kwargs["data_dir"] = Path(data_dir).expanduser().resolve()

    catalog_path = _env("CATALOG_PATH")
    if catalog_path:
        kwargs["catalog_path"] = Path(catalog_path).expanduser().resolve()
    elif data_dir:
        kwargs["catalog_path"] = kwargs["data_dir"] / "courseCatalog.csv"

    token = _env("ACCESS_TOKEN")
    if token:
        kwargs["access_token"] = token

    base_url = _env("API_BASE_URL")
    if base_url:
        kwargs["api_base_url"] = base_url.rstrip("/")

    return SchedulerConfig(**kwargs)
