from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from .analytics import AggregatedAnalytics
from .course_records import UnifiedCourseData
from .diagnostic import Diagnostic, count_by_severity

"""Result models for normalization, reconciliation and a full pipeline run.

Every stage hands its data and its diagnostics back together; nothing is
raised for row-level problems.
"""

T = TypeVar("T")


@dataclass(frozen=True)
class NormalizationResult(Generic[T]):
    """Output of one source normalizer."""
    data: list[T]
    errors: list[Diagnostic]


@dataclass(frozen=True)
class MergeResult:
    """Output of the reconciliation engine."""
    unified: list[UnifiedCourseData]
    errors: list[Diagnostic]


class PipelineStatus(Enum):
    """Outcome of a run.

    - COMPLETED: unified dataset and analytics were produced
    - BLOCKED: an error-severity diagnostic stopped the run before reconciliation
    """
    COMPLETED = "completed"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class PipelineResult:
    """Everything one run hands to the presentation layer.

    errors holds all diagnostics in processing order: Legacy, Modern,
    Time Spent, then reconciliation.
    """
    status: PipelineStatus
    unified: list[UnifiedCourseData]
    errors: list[Diagnostic]
    analytics: AggregatedAnalytics | None
    start_time: datetime
    end_time: datetime
    source_rows: dict[str, int] = field(default_factory=dict)  # label -> decoded row count

    @property
    def elapsed_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def error_count(self) -> int:
        return count_by_severity(self.errors)[0]

    @property
    def warning_count(self) -> int:
        return count_by_severity(self.errors)[1]

    @property
    def critical_errors(self) -> list[Diagnostic]:
        return [d for d in self.errors if d.is_error]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "unified": [c.to_dict() for c in self.unified],
            "errors": [d.to_dict() for d in self.errors],
            "analytics": self.analytics.to_dict() if self.analytics is not None else None,
            "sourceRows": dict(self.source_rows),
            "elapsedSeconds": self.elapsed_seconds,
        }
