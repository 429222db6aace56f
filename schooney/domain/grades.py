"""
School grade helpers: ordinal rank for sorting and school-level mapping.

Grade labels sort by rank rather than lexicographically, so "Year 2" comes
before "Year 10". School levels group the grades:

- Preprep: Pre-nursery to Year 2
- Prep: Year 3 to Year 8
- Senior: Year 9 to Year 13
"""

from __future__ import annotations

import re
from typing import Iterable, List

GRADE_ORDER: List[str] = [
    "Pre-nursery",
    "Nursery",
    "Reception",
    *(f"Year {n}" for n in range(1, 14)),
]

UNRANKED = 999

_NAMED_RANKS = {"Pre-nursery": -2, "Nursery": -1, "Reception": 0}
_YEAR_PATTERN = re.compile(r"Year (\d+)")

_LEVEL_LABELS = {"preprep": "Preprep", "prep": "Prep", "senior": "Senior"}
_LEVEL_RANGES = {
    "preprep": "Pre-nursery to Year 2",
    "prep": "Year 3 to Year 8",
    "senior": "Year 9 to Year 13",
}


def grade_rank(grade: str) -> int:
    """Ordinal rank of a grade label; unrecognized labels rank last."""
    if grade in _NAMED_RANKS:
        return _NAMED_RANKS[grade]
    match = _YEAR_PATTERN.search(grade)
    return int(match.group(1)) if match else UNRANKED


def school_level_for_grade(grade: str) -> str:
    """Map a grade label to its school level (preprep, prep or senior)."""
    rank = grade_rank(grade)
    if rank <= 2:
        return "preprep"
    if 3 <= rank <= 8:
        return "prep"
    return "senior"


def school_level_label(level: str) -> str:
    return _LEVEL_LABELS[level]


def school_level_range(level: str) -> str:
    return _LEVEL_RANGES[level]


def sorted_grades(grades: Iterable[str]) -> List[str]:
    """
    Unique grade labels in school order; unknown labels follow alphabetically.
    """
    unique = set(grades)
    known = [g for g in GRADE_ORDER if g in unique]
    unknown = sorted(g for g in unique if g not in GRADE_ORDER)
    return known + unknown


__all__ = [
    "GRADE_ORDER",
    "UNRANKED",
    "grade_rank",
    "school_level_for_grade",
    "school_level_label",
    "school_level_range",
    "sorted_grades",
]
