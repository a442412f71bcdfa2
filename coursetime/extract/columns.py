from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Declarative column matching.

Source files arrive with unpredictable headers ("Course Name", "[LCT] Time
spent (L)", "Reporting (M)", ...). Each logical field maps to an ordered
tuple of ColumnMatcher rules. find_column() evaluates the rules in order and,
for each rule, scans the headers in encounter order; the first hit wins.
Exact rules come first, then all-of substring rules, then any-of rules.

Headers are compared trimmed and lower-cased.
"""

__all__ = [
    "MatchKind",
    "ColumnMatcher",
    "exact",
    "all_of",
    "any_of",
    "Field",
    "COURSE_FIELD_MATCHERS",
    "TIME_ENTRY_FIELD_MATCHERS",
    "REPORTING_MATCHERS",
    "ANY_REPORTING",
    "normalize_header",
    "find_column",
    "find_columns",
]


class MatchKind(Enum):
    EXACT = "exact"
    ALL_OF = "all_of"
    ANY_OF = "any_of"


@dataclass(frozen=True)
class ColumnMatcher:
    """One header rule.

    terms are lower-case. excluding lists substrings that disqualify a header
    even when the rule otherwise matches.
    """
    kind: MatchKind
    terms: tuple[str, ...]
    excluding: tuple[str, ...] = ()

    def matches(self, header: str) -> bool:
        h = normalize_header(header)
        if any(x in h for x in self.excluding):
            return False
        if self.kind is MatchKind.EXACT:
            return h in self.terms
        if self.kind is MatchKind.ALL_OF:
            return all(t in h for t in self.terms)
        return any(t in h for t in self.terms)


def exact(*names: str) -> ColumnMatcher:
    return ColumnMatcher(MatchKind.EXACT, tuple(names))


def all_of(*terms: str, excluding: tuple[str, ...] = ()) -> ColumnMatcher:
    return ColumnMatcher(MatchKind.ALL_OF, tuple(terms), excluding)


def any_of(*terms: str) -> ColumnMatcher:
    return ColumnMatcher(MatchKind.ANY_OF, tuple(terms))


class Field(str, Enum):
    COURSE_NAME = "course_name"
    TOTAL_TIME = "total_time"
    YEAR = "year"
    DATE_LIKE = "date_like"
    CATEGORY = "category"
    HOURS = "hours"
    USER = "user"


# Legacy and Modern course files
COURSE_FIELD_MATCHERS: dict[Field, tuple[ColumnMatcher, ...]] = {
    Field.COURSE_NAME: (
        exact("course name", "coursename", "name", "course", "title"),
        all_of("course", "name"),
    ),
    Field.TOTAL_TIME: (
        exact("time spent", "timespent", "time", "hours", "total time", "totaltime"),
        all_of("time", "spent"),
        all_of("total", "time"),
        all_of("total", "hour"),
    ),
    Field.YEAR: (
        exact("year"),
        any_of("year"),
    ),
    Field.DATE_LIKE: (
        any_of("date", "completed", "reporting"),
    ),
}

# Time Spent category file
TIME_ENTRY_FIELD_MATCHERS: dict[Field, tuple[ColumnMatcher, ...]] = {
    Field.COURSE_NAME: (
        exact("course name", "course", "name", "title"),
        any_of("course", "name", "title"),
    ),
    Field.CATEGORY: (
        exact("category"),
        any_of("category", "type"),
    ),
    Field.HOURS: (
        exact("time", "hours", "time spent"),
        any_of("time", "hour"),
    ),
    Field.USER: (
        exact("user", "member", "employee"),
        any_of("user", "member", "employee"),
    ),
}

# Reporting column scoped to the file's own (L)/(M) marker
REPORTING_MATCHERS: dict[str, tuple[ColumnMatcher, ...]] = {
    "legacy": (
        all_of("reporting", "(l)"),
        all_of("reporting", excluding=("(m)",)),
    ),
    "modern": (
        all_of("reporting", "(m)"),
        all_of("reporting", excluding=("(l)",)),
    ),
}

ANY_REPORTING: tuple[ColumnMatcher, ...] = (all_of("reporting"),)


def normalize_header(header: Any) -> str:
    return str(header).strip().lower()


def find_column(columns: Iterable[str] | Mapping[str, Any], matchers: tuple[ColumnMatcher, ...]) -> str | None:
    """Return the original header selected by the first matching rule."""
    headers = list(columns)
    for matcher in matchers:
        for header in headers:
            if matcher.matches(header):
                return header
    return None


def find_columns(columns: Iterable[str] | Mapping[str, Any], matchers: tuple[ColumnMatcher, ...]) -> list[str]:
    """Return every header matched by any rule, in encounter order."""
    return [h for h in columns if any(m.matches(h) for m in matchers)]
