from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from types import MappingProxyType
from typing import Any

from ..extract.coercion import extract_year, is_blank, normalize_course_name
from ..extract.columns import ANY_REPORTING, REPORTING_MATCHERS, find_column
from ..extract.metadata_fields import clean_metadata
from ..models.config_models import PipelineConfig
from ..models.course_records import (
    Classification,
    CourseRecord,
    LegacyCourseRecord,
    ModernCourseRecord,
    RawRecords,
    TimeSpentRecord,
    UnifiedCourseData,
)
from ..models.diagnostic import Diagnostic
from ..models.processing_result import MergeResult
from ..models.source_file import SourceKind

"""Reconciliation engine: per-source records -> unified course instances.

The run is an explicit fold over immutable ReconcileSnapshot values, one
pure function per stage:

1. seed_legacy            Legacy rows become instances (inserted unconditionally)
2. merge_modern           Modern rows join unless their identity key exists (Legacy wins)
3. attach_time_entries    time entries matched by normalized name only (year ignored)
4. synthesize_in_progress unmatched time-entry groups become In Progress instances

Identity key = normalized course name + "__" + reporting year. The key is a
naming-convention heuristic: inconsistent names under-merge and coincidental
names over-merge.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ReconcileSnapshot",
    "create_course_key",
    "extract_reporting_year",
    "seed_legacy",
    "merge_modern",
    "attach_time_entries",
    "synthesize_in_progress",
    "merge_and_classify",
    "STAGES",
]

DEFAULT_STATUS = "Completed"
IN_PROGRESS_STATUS = "In Progress"


@dataclass(frozen=True)
class ReconcileSnapshot:
    """State between stages. Each stage returns a new snapshot."""
    courses: Mapping[str, UnifiedCourseData] = field(default_factory=lambda: MappingProxyType({}))
    pending_time_entries: Mapping[str, tuple[TimeSpentRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    diagnostics: tuple[Diagnostic, ...] = ()

    def evolve(
        self,
        courses: dict[str, UnifiedCourseData] | None = None,
        pending_time_entries: dict[str, tuple[TimeSpentRecord, ...]] | None = None,
        diagnostics: Sequence[Diagnostic] = (),
    ) -> ReconcileSnapshot:
        return ReconcileSnapshot(
            courses=MappingProxyType(dict(courses)) if courses is not None else self.courses,
            pending_time_entries=(
                MappingProxyType(dict(pending_time_entries))
                if pending_time_entries is not None
                else self.pending_time_entries
            ),
            diagnostics=self.diagnostics + tuple(diagnostics),
        )


def create_course_key(course_name: str, reporting_year: int) -> str:
    return f"{normalize_course_name(course_name)}__{reporting_year}"


def extract_reporting_year(fields: Mapping[str, Any], scope: str) -> int | None:
    """Year from the Reporting column belonging to `scope` ("legacy"/"modern").

    A column marked for the other source is skipped; if no scoped column has
    a value, any Reporting column is tried.
    """
    key = find_column(fields, REPORTING_MATCHERS[scope])
    if key is not None and not is_blank(fields[key]):
        return extract_year(fields[key])
    key = find_column(fields, ANY_REPORTING)
    if key is not None and not is_blank(fields[key]):
        return extract_year(fields[key])
    return None


def _status_from(metadata: Mapping[str, Any]) -> str:
    for key in ("Status", "status"):
        value = metadata.get(key)
        if not is_blank(value):
            return str(value).strip()
    return DEFAULT_STATUS


def _resolve_instance_year(
    record: CourseRecord, kind: SourceKind, scope: str, fallback: int,
) -> tuple[int, Diagnostic | None]:
    reporting_year = extract_reporting_year(record.fields, scope)
    if reporting_year is not None:
        return reporting_year, None
    if record.year is not None:
        used, origin = record.year, "year/date column"
    else:
        used, origin = fallback, "configured default"
    note = Diagnostic.warning(
        kind.label,
        f'Course "{record.course_name}" missing Reporting date/year; using {used} from {origin}',
        row=record.row_number,
        field="Reporting",
    )
    return used, note


def _build_instance(
    record: CourseRecord, year: int, classification: Classification, raw: RawRecords,
) -> UnifiedCourseData:
    metadata = clean_metadata(record.fields)
    return UnifiedCourseData(
        course_name=record.course_name,
        normalized_course_name=normalize_course_name(record.course_name),
        reporting_year=year,
        total_time=record.total_time,
        status=_status_from(metadata),
        classification=classification,
        metadata=metadata,
        raw_records=raw,
    )


def seed_legacy(
    snapshot: ReconcileSnapshot, legacy: Sequence[LegacyCourseRecord], config: PipelineConfig,
) -> ReconcileSnapshot:
    courses = dict(snapshot.courses)
    notes: list[Diagnostic] = []
    kind = SourceKind.LEGACY
    for record in legacy:
        year, note = _resolve_instance_year(record, kind, "legacy", config.fallback_years.legacy)
        if note is not None:
            notes.append(note)
        key = create_course_key(record.course_name, year)
        if key in courses:
            notes.append(Diagnostic.warning(
                kind.label,
                f'Course "{record.course_name}" for year {year} appears more than once; '
                f"row {record.row_number} replaces row {courses[key].raw_records.legacy.row_number}",
                row=record.row_number,
                field="Course Name",
            ))
        courses[key] = _build_instance(record, year, Classification.LEGACY, RawRecords(legacy=record))
    return snapshot.evolve(courses=courses, diagnostics=notes)


def merge_modern(
    snapshot: ReconcileSnapshot, modern: Sequence[ModernCourseRecord], config: PipelineConfig,
) -> ReconcileSnapshot:
    courses = dict(snapshot.courses)
    notes: list[Diagnostic] = []
    kind = SourceKind.MODERN
    for record in modern:
        year, note = _resolve_instance_year(record, kind, "modern", config.fallback_years.modern)
        if note is not None:
            notes.append(note)
        key = create_course_key(record.course_name, year)
        if key in courses:
            notes.append(Diagnostic.warning(
                kind.label,
                f'Duplicate course instance found: "{record.course_name}" for year {year}',
                row=record.row_number,
                field="Course Name",
            ))
            continue
        courses[key] = _build_instance(record, year, Classification.MODERN, RawRecords(modern=record))
    return snapshot.evolve(courses=courses, diagnostics=notes)


def group_time_entries(entries: Sequence[TimeSpentRecord]) -> dict[str, tuple[TimeSpentRecord, ...]]:
    """Group by normalized course name, preserving first-seen order."""
    groups: dict[str, list[TimeSpentRecord]] = {}
    for entry in entries:
        groups.setdefault(normalize_course_name(entry.course_name), []).append(entry)
    return {name: tuple(group) for name, group in groups.items()}


def build_category_breakdown(entries: Sequence[TimeSpentRecord], default_category: str) -> dict[str, float]:
    breakdown: dict[str, float] = {}
    for entry in entries:
        category = entry.category or default_category
        breakdown[category] = breakdown.get(category, 0.0) + entry.effective_hours
    return breakdown


def attach_time_entries(
    snapshot: ReconcileSnapshot, entries: Sequence[TimeSpentRecord], config: PipelineConfig,
) -> ReconcileSnapshot:
    """Attach category breakdowns; the first instance (map order) with a name claims its group."""
    pending = dict(snapshot.pending_time_entries)
    for name, group in group_time_entries(entries).items():
        pending[name] = pending.get(name, ()) + group

    courses: dict[str, UnifiedCourseData] = {}
    for key, course in snapshot.courses.items():
        group = pending.pop(course.normalized_course_name, None)
        if group is None:
            courses[key] = course
            continue
        courses[key] = replace(
            course,
            category_breakdown=build_category_breakdown(group, config.default_category),
            raw_records=replace(course.raw_records, time_spent=group),
        )
    return snapshot.evolve(courses=courses, pending_time_entries=pending)


def synthesize_in_progress(
    snapshot: ReconcileSnapshot, config: PipelineConfig, today: date | None = None,
) -> ReconcileSnapshot:
    """Turn every unclaimed time-entry group into an In Progress instance."""
    if not snapshot.pending_time_entries:
        return snapshot
    year = config.fallback_years.resolve_in_progress(today)
    courses = dict(snapshot.courses)
    for normalized_name, group in snapshot.pending_time_entries.items():
        display_name = group[0].course_name
        courses[create_course_key(display_name, year)] = UnifiedCourseData(
            course_name=display_name,
            normalized_course_name=normalized_name,
            reporting_year=year,
            total_time=sum(e.effective_hours for e in group),
            status=IN_PROGRESS_STATUS,
            classification=Classification.IN_PROGRESS,
            category_breakdown=build_category_breakdown(group, config.default_category),
            metadata={},
            raw_records=RawRecords(time_spent=group),
        )
    count = len(snapshot.pending_time_entries)
    note = Diagnostic.warning(
        SourceKind.TIME_SPENT.label,
        f"{count} course(s) have time entries but no Legacy/Modern record; "
        f"reported as In Progress under year {year}",
        field="Course Name",
    )
    return snapshot.evolve(courses=courses, pending_time_entries={}, diagnostics=[note])


StageHook = Callable[[str, ReconcileSnapshot], None]

STAGES = ("seed_legacy", "merge_modern", "attach_time_entries", "synthesize_in_progress")


def merge_and_classify(
    legacy: Sequence[LegacyCourseRecord],
    modern: Sequence[ModernCourseRecord],
    time_spent: Sequence[TimeSpentRecord],
    config: PipelineConfig | None = None,
    *,
    on_stage: StageHook | None = None,
    today: date | None = None,
) -> MergeResult:
    """Run all four stages and return the unified dataset with its diagnostics."""
    config = config or PipelineConfig()
    steps: list[tuple[str, Callable[[ReconcileSnapshot], ReconcileSnapshot]]] = [
        ("seed_legacy", lambda s: seed_legacy(s, legacy, config)),
        ("merge_modern", lambda s: merge_modern(s, modern, config)),
        ("attach_time_entries", lambda s: attach_time_entries(s, time_spent, config)),
        ("synthesize_in_progress", lambda s: synthesize_in_progress(s, config, today)),
    ]
    snapshot = ReconcileSnapshot()
    for name, step in steps:
        snapshot = step(snapshot)
        logger.debug("stage %s: courses=%d pending=%d", name, len(snapshot.courses), len(snapshot.pending_time_entries))
        if on_stage is not None:
            on_stage(name, snapshot)

    return MergeResult(unified=list(snapshot.courses.values()), errors=list(snapshot.diagnostics))
