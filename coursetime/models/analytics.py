from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

"""Aggregated analytics models.

All figures are unrounded floats; rounding for display belongs to whoever
renders them.
"""

__all__ = [
    "AnalyticsSummary",
    "YearStat",
    "StatusStat",
    "CategoryStat",
    "TopCourse",
    "YearClassificationStat",
    "AggregatedAnalytics",
]


@dataclass(frozen=True)
class AnalyticsSummary:
    total_courses: int
    total_time_spent: float
    completed_courses: int  # classification != In Progress
    in_progress_courses: int
    average_time_per_course: float
    legacy_courses: int
    modern_courses: int


@dataclass(frozen=True)
class YearStat:
    year: int
    count: int
    total_time: float
    avg_time: float


@dataclass(frozen=True)
class StatusStat:
    status: str
    count: int
    total_time: float


@dataclass(frozen=True)
class CategoryStat:
    category: str
    total_time: float
    course_count: int  # distinct normalized course names
    avg_time_per_course: float


@dataclass(frozen=True)
class TopCourse:
    course_name: str
    total_time: float
    year: int
    status: str


@dataclass(frozen=True)
class YearClassificationStat:
    year: int
    legacy: float
    modern: float
    in_progress: float


@dataclass(frozen=True)
class AggregatedAnalytics:
    summary: AnalyticsSummary
    by_year: list[YearStat]
    by_status: list[StatusStat]
    by_category: list[CategoryStat]
    top_courses: list[TopCourse]
    time_by_year_and_classification: list[YearClassificationStat]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
