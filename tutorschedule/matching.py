"""
Fuzzy matching of free-text course tags against catalog courses.

Shift titles are typed by hand ("cs 101", "CS-101 / MATH 121", ...), so a tag
is compared to each catalog abbreviation with a similarity score in [0, 1].

Scoring rule:
    both strings are casefolded and stripped of all whitespace, then
    compared with difflib.SequenceMatcher.ratio() = 2*M / (len(a) + len(b))

Identical strings (ignoring case and whitespace) score 1.0, strings without
any common character score 0.0. An empty string never matches anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import Sequence

DEFAULT_MATCH_THRESHOLD = 0.9


def normalize_tag(text: str) -> str:
    """
    Casefold and remove every whitespace character.
    """
    return "".join(text.casefold().split())


def similarity(a: str, b: str) -> float:
    na = normalize_tag(a)
    nb = normalize_tag(b)
    if not na or not nb:
        return 0.0
    if na == nb:
        return 1.0
    # autojunk off: results must not depend on string length heuristics
    return SequenceMatcher(None, na, nb, autojunk=False).ratio()


@dataclass(frozen=True)
class CourseInfo:
    """
    One canonical catalog course, e.g. CourseInfo("CS101").
    """

    abbreviation: str
    _normalized: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.abbreviation, str):
            raise TypeError(f"abbreviation must be a string, got {type(self.abbreviation).__name__}")
        object.__setattr__(self, "abbreviation", self.abbreviation.strip())
        object.__setattr__(self, "_normalized", normalize_tag(self.abbreviation))

    @property
    def is_degenerate(self) -> bool:
        return not self._normalized

    def match_score(self, tag: str) -> float:
        return match_score(self, tag)


def match_score(course_info: CourseInfo, tag: str) -> float:
    """
    Score how well `tag` denotes `course_info`. Pure and deterministic.
    """
    if course_info.is_degenerate:
        return 0.0
    return similarity(course_info.abbreviation, tag)


def best_match_index(
    catalog: Sequence[CourseInfo],
    tag: str,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> int | None:
    """
    Return the position of the first catalog entry (in catalog order)
    scoring above `threshold`, or None.
    """
    for i, course_info in enumerate(catalog):
        if match_score(course_info, tag) > threshold:
            return i
    return None


def best_match(
    catalog: Sequence[CourseInfo],
    tag: str,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> CourseInfo | None:
    i = best_match_index(catalog, tag, threshold)
    return None if i is None else catalog[i]
