from __future__ import annotations

import pytest

from coursetime.models.course_records import Classification, UnifiedCourseData
from coursetime.services.analytics import compute_analytics


def _course(name: str, year: int, total: float, classification: Classification, status: str = "Completed",
            breakdown: dict[str, float] | None = None) -> UnifiedCourseData:
    return UnifiedCourseData(
        course_name=name,
        normalized_course_name=name.lower(),
        reporting_year=year,
        total_time=total,
        status=status,
        classification=classification,
        category_breakdown=breakdown,
    )


@pytest.fixture()
def courses() -> list[UnifiedCourseData]:
    return [
        _course("A", 2024, 10, Classification.LEGACY, breakdown={"Design": 3, "QA": 1}),
        _course("B", 2023, 4, Classification.MODERN, status="Retired"),
        _course("C", 2024, 6, Classification.IN_PROGRESS, status="In Progress", breakdown={"Design": 6}),
        _course("A", 2025, 10, Classification.MODERN, breakdown={"Design": 1}),
    ]


def test_summary(courses):
    summary = compute_analytics(courses).summary
    assert summary.total_courses == 4
    assert summary.total_time_spent == 30
    assert summary.in_progress_courses == 1
    assert summary.completed_courses == 3
    assert summary.legacy_courses == 1
    assert summary.modern_courses == 2
    assert summary.average_time_per_course == pytest.approx(7.5)


def test_by_year_ascending(courses):
    by_year = compute_analytics(courses).by_year
    assert [(y.year, y.count, y.total_time) for y in by_year] == [(2023, 1, 4), (2024, 2, 16), (2025, 1, 10)]
    assert by_year[1].avg_time == 8


def test_by_status_first_seen_order(courses):
    by_status = compute_analytics(courses).by_status
    assert [(s.status, s.count, s.total_time) for s in by_status] == [
        ("Completed", 2, 20),
        ("Retired", 1, 4),
        ("In Progress", 1, 6),
    ]


def test_by_category_counts_distinct_course_names(courses):
    by_category = compute_analytics(courses).by_category
    assert [c.category for c in by_category] == ["Design", "QA"]
    design = by_category[0]
    assert design.total_time == 10
    # "A" appears under two years but counts once
    assert design.course_count == 2
    assert design.avg_time_per_course == 5


def test_top_courses_stable_and_limited(courses):
    top = compute_analytics(courses, top_n=3).top_courses
    assert [(t.course_name, t.year) for t in top] == [("A", 2024), ("A", 2025), ("C", 2024)]


def test_time_by_year_and_classification(courses):
    rows = compute_analytics(courses).time_by_year_and_classification
    assert [(r.year, r.legacy, r.modern, r.in_progress) for r in rows] == [
        (2023, 0, 4, 0),
        (2024, 10, 0, 6),
        (2025, 0, 10, 0),
    ]


def test_empty_dataset():
    analytics = compute_analytics([])
    assert analytics.summary.total_courses == 0
    assert analytics.summary.average_time_per_course == 0
    assert analytics.by_year == []
    assert analytics.top_courses == []


def test_to_dict_is_plain_data(courses):
    data = compute_analytics(courses).to_dict()
    assert data["summary"]["total_courses"] == 4
    assert data["by_category"][0]["category"] == "Design"
