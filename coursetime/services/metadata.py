from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..extract.coercion import is_blank, parse_duration_phrase
from ..extract.columns import ColumnMatcher, all_of, any_of, exact, find_column
from ..models.course_records import UnifiedCourseData

"""Metadata options and derived course length.

Filter panels need the distinct values of a few well-known metadata columns
(vertical, SME, authoring tool, ...). Each option is located with the same
ColumnMatcher rules the normalizers use, over the cleaned metadata keys.
"""

__all__ = [
    "METADATA_OPTION_MATCHERS",
    "MetadataFieldSummary",
    "MetadataOptions",
    "extract_metadata_options",
    "DurationRange",
    "course_length_hours",
    "matches_duration_range",
]

METADATA_OPTION_MATCHERS: dict[str, tuple[ColumnMatcher, ...]] = {
    "verticals": (any_of("vertical"),),
    "authoring_tools": (all_of("authoring", "tool"),),
    "smes": (any_of("sme"),),
    "legal_reviewers": (all_of("legal", "reviewer"),),
    "course_lengths": (all_of("course", "length"),),
    "statuses": (exact("status"),),
    "id_assigned": (all_of("id", "assigned"),),
    "course_types": (all_of("course", "type"),),
    "course_styles": (all_of("course", "style"),),
}

COURSE_LENGTH_MATCHERS = METADATA_OPTION_MATCHERS["course_lengths"]


@dataclass(frozen=True)
class MetadataFieldSummary:
    key: str
    values: list[str]
    missing_count: int


@dataclass(frozen=True)
class MetadataOptions:
    """Sorted distinct values per option, plus a summary of every metadata key."""
    options: dict[str, list[str]] = field(default_factory=dict)
    all_fields: list[MetadataFieldSummary] = field(default_factory=list)

    def __getitem__(self, name: str) -> list[str]:
        return self.options[name]


def extract_metadata_options(courses: Sequence[UnifiedCourseData]) -> MetadataOptions:
    option_values: dict[str, set[str]] = {name: set() for name in METADATA_OPTION_MATCHERS}
    field_values: dict[str, set[str]] = {}
    field_missing: dict[str, int] = {}

    for course in courses:
        metadata = course.metadata
        for key, value in metadata.items():
            field_values.setdefault(key, set())
            field_missing.setdefault(key, 0)
            if is_blank(value):
                field_missing[key] += 1
            else:
                field_values[key].add(str(value).strip())

        for name, matchers in METADATA_OPTION_MATCHERS.items():
            key = find_column(metadata, matchers)
            if key is not None and not is_blank(metadata[key]):
                option_values[name].add(str(metadata[key]).strip())

    return MetadataOptions(
        options={name: sorted(values) for name, values in option_values.items()},
        all_fields=[
            MetadataFieldSummary(key=key, values=sorted(field_values[key]), missing_count=field_missing[key])
            for key in sorted(field_values)
        ],
    )


class DurationRange(str, Enum):
    ALL = "all"
    LESS_THAN_1 = "lt1"
    ONE_TO_TWO = "1to2"
    TWO_TO_FOUR = "2to4"
    FOUR_TO_EIGHT = "4to8"
    EIGHT_PLUS = "8plus"


_RANGE_BOUNDS: dict[DurationRange, tuple[float, float]] = {
    DurationRange.ALL: (float("-inf"), float("inf")),
    DurationRange.LESS_THAN_1: (float("-inf"), 1),
    DurationRange.ONE_TO_TWO: (1, 2),
    DurationRange.TWO_TO_FOUR: (2, 4),
    DurationRange.FOUR_TO_EIGHT: (4, 8),
    DurationRange.EIGHT_PLUS: (8, float("inf")),
}


def matches_duration_range(hours: float, duration_range: DurationRange) -> bool:
    low, high = _RANGE_BOUNDS[duration_range]
    return low <= hours < high


def course_length_hours(course: UnifiedCourseData) -> float | None:
    """Learner-facing course length in hours, from the "course length" metadata column."""
    key = find_column(course.metadata, COURSE_LENGTH_MATCHERS)
    if key is None:
        return None
    return parse_duration_phrase(course.metadata[key])
