from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..models.analytics import (
    AggregatedAnalytics,
    AnalyticsSummary,
    CategoryStat,
    StatusStat,
    TopCourse,
    YearClassificationStat,
    YearStat,
)
from ..models.config_models import DEFAULT_TOP_COURSES_LIMIT
from ..models.course_records import Classification, UnifiedCourseData

"""Analytics aggregator over the unified dataset.

Pure and fully re-derivable: compute_analytics() is called once per run over
the final list and holds no state. Sums are plain float additions, never
rounded here.
"""


def _year_of(course: UnifiedCourseData) -> int:
    return course.year or date.today().year


def compute_analytics(
    courses: Sequence[UnifiedCourseData], top_n: int = DEFAULT_TOP_COURSES_LIMIT,
) -> AggregatedAnalytics:
    """Compute every grouped view the dashboard shows.

    Args:
        courses: Unified course instances
        top_n: How many courses to keep in top_courses

    Returns:
        AggregatedAnalytics with summary, by-year, by-status, by-category,
        top courses and time by year and classification
    """
    total_courses = len(courses)
    total_time = sum(c.total_time for c in courses)
    in_progress = sum(1 for c in courses if c.classification is Classification.IN_PROGRESS)
    summary = AnalyticsSummary(
        total_courses=total_courses,
        total_time_spent=total_time,
        completed_courses=total_courses - in_progress,
        in_progress_courses=in_progress,
        average_time_per_course=total_time / total_courses if total_courses else 0.0,
        legacy_courses=sum(1 for c in courses if c.classification is Classification.LEGACY),
        modern_courses=sum(1 for c in courses if c.classification is Classification.MODERN),
    )

    return AggregatedAnalytics(
        summary=summary,
        by_year=_by_year(courses),
        by_status=_by_status(courses),
        by_category=_by_category(courses),
        top_courses=_top_courses(courses, top_n),
        time_by_year_and_classification=_time_by_year_and_classification(courses),
    )


def _by_year(courses: Sequence[UnifiedCourseData]) -> list[YearStat]:
    buckets: dict[int, list[float]] = {}
    for course in courses:
        buckets.setdefault(_year_of(course), []).append(course.total_time)
    return [
        YearStat(year=year, count=len(times), total_time=sum(times), avg_time=sum(times) / len(times))
        for year, times in sorted(buckets.items())
    ]


def _by_status(courses: Sequence[UnifiedCourseData]) -> list[StatusStat]:
    counts: dict[str, int] = {}
    totals: dict[str, float] = {}
    for course in courses:
        counts[course.status] = counts.get(course.status, 0) + 1
        totals[course.status] = totals.get(course.status, 0.0) + course.total_time
    return [StatusStat(status=s, count=counts[s], total_time=totals[s]) for s in counts]


def _by_category(courses: Sequence[UnifiedCourseData]) -> list[CategoryStat]:
    totals: dict[str, float] = {}
    members: dict[str, set[str]] = {}
    for course in courses:
        if not course.category_breakdown:
            continue
        for category, hours in course.category_breakdown.items():
            totals[category] = totals.get(category, 0.0) + hours
            members.setdefault(category, set()).add(course.normalized_course_name)
    stats = [
        CategoryStat(
            category=category,
            total_time=totals[category],
            course_count=len(members[category]),
            avg_time_per_course=totals[category] / len(members[category]),
        )
        for category in totals
    ]
    return sorted(stats, key=lambda s: s.total_time, reverse=True)


def _top_courses(courses: Sequence[UnifiedCourseData], top_n: int) -> list[TopCourse]:
    ranked = sorted(courses, key=lambda c: c.total_time, reverse=True)[:top_n]
    return [
        TopCourse(course_name=c.course_name, total_time=c.total_time, year=c.year, status=c.status)
        for c in ranked
    ]


def _time_by_year_and_classification(courses: Sequence[UnifiedCourseData]) -> list[YearClassificationStat]:
    buckets: dict[int, dict[Classification, float]] = {}
    for course in courses:
        bucket = buckets.setdefault(_year_of(course), {c: 0.0 for c in Classification})
        bucket[course.classification] += course.total_time
    return [
        YearClassificationStat(
            year=year,
            legacy=bucket[Classification.LEGACY],
            modern=bucket[Classification.MODERN],
            in_progress=bucket[Classification.IN_PROGRESS],
        )
        for year, bucket in sorted(buckets.items())
    ]
