"""Domain models for the course time analytics pipeline.

This package contains the record, diagnostic, analytics and configuration
dataclasses shared by the extractors, normalizers, reconciliation engine and
aggregator.
"""

from .analytics import AggregatedAnalytics
from .config_models import FallbackYears, PipelineConfig
from .course_records import (
    Classification,
    LegacyCourseRecord,
    ModernCourseRecord,
    RawRecords,
    TimeSpentRecord,
    UnifiedCourseData,
)
from .diagnostic import Diagnostic, Severity
from .processing_result import MergeResult, NormalizationResult, PipelineResult, PipelineStatus
from .source_file import DecodedSource, SourceKind

__all__ = [
    # Configuration models
    "FallbackYears",
    "PipelineConfig",
    # Records
    "Classification",
    "LegacyCourseRecord",
    "ModernCourseRecord",
    "TimeSpentRecord",
    "RawRecords",
    "UnifiedCourseData",
    # Diagnostics and results
    "Diagnostic",
    "Severity",
    "NormalizationResult",
    "MergeResult",
    "PipelineResult",
    "PipelineStatus",
    "AggregatedAnalytics",
    # Sources
    "DecodedSource",
    "SourceKind",
]
