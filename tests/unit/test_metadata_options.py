from __future__ import annotations

import pytest

from coursetime.models.course_records import Classification, UnifiedCourseData
from coursetime.services.metadata import (
    DurationRange,
    course_length_hours,
    extract_metadata_options,
    matches_duration_range,
)


def _course(metadata: dict) -> UnifiedCourseData:
    return UnifiedCourseData(
        course_name="X",
        normalized_course_name="x",
        reporting_year=2024,
        total_time=1,
        status="Completed",
        classification=Classification.LEGACY,
        metadata=metadata,
    )


def test_extract_metadata_options_distinct_sorted():
    courses = [
        _course({"Vertical": "Safety", "SME": "B. Chen", "Authoring Tool": "Rise", "Status": "Completed"}),
        _course({"Vertical": "Compliance", "SME": " B. Chen ", "Authoring Tool": None, "Status": "Retired"}),
        _course({"Vertical": "Safety", "Course Length": "30 mins"}),
    ]
    options = extract_metadata_options(courses)
    assert options["verticals"] == ["Compliance", "Safety"]
    assert options["smes"] == ["B. Chen"]
    assert options["authoring_tools"] == ["Rise"]
    assert options["statuses"] == ["Completed", "Retired"]
    assert options["course_lengths"] == ["30 mins"]
    assert options["legal_reviewers"] == []


def test_all_fields_summary_counts_missing():
    courses = [_course({"Owner": "a", "Notes": None}), _course({"Owner": None})]
    summary = {f.key: f for f in extract_metadata_options(courses).all_fields}
    assert list(summary) == ["Notes", "Owner"]
    assert summary["Owner"].values == ["a"]
    assert summary["Owner"].missing_count == 1
    assert summary["Notes"].missing_count == 1


def test_course_length_hours():
    assert course_length_hours(_course({"Course Length": "1-2 hours"})) == pytest.approx(1.5)
    assert course_length_hours(_course({"Course Length": "self paced"})) is None
    assert course_length_hours(_course({})) is None


@pytest.mark.parametrize(
    ("hours", "duration_range", "expected"),
    [
        (0.5, DurationRange.LESS_THAN_1, True),
        (1.0, DurationRange.LESS_THAN_1, False),
        (1.0, DurationRange.ONE_TO_TWO, True),
        (4.0, DurationRange.FOUR_TO_EIGHT, True),
        (8.0, DurationRange.EIGHT_PLUS, True),
        (100, DurationRange.ALL, True),
    ],
)
def test_matches_duration_range(hours, duration_range, expected):
    assert matches_duration_range(hours, duration_range) is expected
