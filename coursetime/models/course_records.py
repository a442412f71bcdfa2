from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Per-source and unified course records.

Per-source records are what the normalizers emit: a handful of recognized
fields plus `fields`, a verbatim copy of every original column so nothing is
lost for metadata display. UnifiedCourseData is the reconciled course
instance that downstream views consume.
"""

__all__ = [
    "Classification",
    "CourseRecord",
    "LegacyCourseRecord",
    "ModernCourseRecord",
    "TimeSpentRecord",
    "RawRecords",
    "UnifiedCourseData",
]


class Classification(str, Enum):
    """Provenance tag of a unified instance (distinct from free-text status)."""
    LEGACY = "Legacy"
    MODERN = "Modern"
    IN_PROGRESS = "In Progress"


@dataclass(frozen=True)
class CourseRecord:
    """Common shape of Legacy and Modern course rows.

    total_time is authoritative for the instance built from this row and comes
    from this file only.
    """
    row_number: int  # spreadsheet row (header = 1)
    course_name: str
    total_time: float = 0.0
    year: int | None = None  # year/date column year, not the Reporting year
    fields: dict[str, Any] = field(default_factory=dict)  # every original column


@dataclass(frozen=True)
class LegacyCourseRecord(CourseRecord):
    pass


@dataclass(frozen=True)
class ModernCourseRecord(CourseRecord):
    pass


@dataclass(frozen=True)
class TimeSpentRecord:
    """One granular time entry. It carries no year of its own."""
    row_number: int
    course_name: str
    category: str | None = None
    hours: float | None = None
    user: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def effective_hours(self) -> float:
        return self.hours or 0.0


@dataclass(frozen=True)
class RawRecords:
    """Back-references to the per-source rows behind a unified instance."""
    legacy: LegacyCourseRecord | None = None
    modern: ModernCourseRecord | None = None
    time_spent: tuple[TimeSpentRecord, ...] = ()


@dataclass(frozen=True)
class UnifiedCourseData:
    """Canonical course instance produced by reconciliation.

    Identity is (normalized_course_name, reporting_year). `year` duplicates
    reporting_year for consumers that group by year.
    """
    course_name: str
    normalized_course_name: str
    reporting_year: int
    total_time: float
    status: str
    classification: Classification
    metadata: dict[str, Any] = field(default_factory=dict)
    raw_records: RawRecords = field(default_factory=RawRecords)
    category_breakdown: dict[str, float] | None = None

    @property
    def year(self) -> int:
        return self.reporting_year

    @property
    def identity_key(self) -> str:
        return f"{self.normalized_course_name}__{self.reporting_year}"

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view (raw records reduced to their row numbers)."""
        raw = self.raw_records
        return {
            "courseName": self.course_name,
            "normalizedCourseName": self.normalized_course_name,
            "reportingYear": self.reporting_year,
            "year": self.year,
            "totalTime": self.total_time,
            "status": self.status,
            "classification": self.classification.value,
            "categoryBreakdown": dict(self.category_breakdown) if self.category_breakdown is not None else None,
            "metadata": {k: _jsonable(v) for k, v in self.metadata.items()},
            "rawRecords": {
                "legacyRow": raw.legacy.row_number if raw.legacy else None,
                "modernRow": raw.modern.row_number if raw.modern else None,
                "timeSpentRows": [e.row_number for e in raw.time_spent],
            },
        }


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
