from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from ..extract.coercion import extract_number, extract_text, extract_year, is_blank
from ..extract.columns import (
    COURSE_FIELD_MATCHERS,
    TIME_ENTRY_FIELD_MATCHERS,
    Field,
    find_column,
    find_columns,
)
from ..models.config_models import DEFAULT_MISSING_NAME_WARNING_CAP
from ..models.course_records import CourseRecord, LegacyCourseRecord, ModernCourseRecord, TimeSpentRecord
from ..models.diagnostic import Diagnostic
from ..models.processing_result import NormalizationResult
from ..models.source_file import SourceKind

"""Source normalizers: raw rows -> per-source records + diagnostics.

One function per upload. Failures are row-local: a bad row yields a
Diagnostic and is skipped (or kept, for warnings) while the rest of the file
continues.

Row numbers in diagnostics are spreadsheet rows (header is row 1). Rows from
the reader carry their own `row_number`; plain dicts count as rows[i] -> i + 2.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "normalize_legacy_data",
    "normalize_modern_data",
    "normalize_time_spent_data",
    "resolve_year",
]

HEADER_ROWS = 1

C = TypeVar("C", bound=CourseRecord)


def _row_number(index: int, row: dict[str, Any]) -> int:
    number = getattr(row, "row_number", None)
    if number is not None:
        return number
    return index + HEADER_ROWS + 1


def resolve_year(row: dict[str, Any]) -> int | None:
    """Year from a "year" column, else the first date-like column yielding one."""
    year_key = find_column(row, COURSE_FIELD_MATCHERS[Field.YEAR])
    if year_key is not None:
        year = extract_year(row[year_key])
        if year is not None:
            return year
    for key in find_columns(row, COURSE_FIELD_MATCHERS[Field.DATE_LIKE]):
        year = extract_year(row[key])
        if year is not None:
            return year
    return None


def _course_name(row: dict[str, Any], matchers) -> str | None:
    key = find_column(row, matchers)
    if key is None:
        return None
    return extract_text(row[key])


def _total_time(row: dict[str, Any]) -> float:
    key = find_column(row, COURSE_FIELD_MATCHERS[Field.TOTAL_TIME])
    if key is None or is_blank(row[key]):
        return 0.0
    return extract_number(row[key])


def _normalize_course_rows(
    rows: Sequence[dict[str, Any]],
    kind: SourceKind,
    record_type: type[C],
    *,
    warn_on_zero_time: bool,
) -> NormalizationResult[C]:
    errors: list[Diagnostic] = []
    data: list[C] = []
    label = kind.label

    for index, row in enumerate(rows):
        row_number = _row_number(index, row)
        course_name = _course_name(row, COURSE_FIELD_MATCHERS[Field.COURSE_NAME])
        if not course_name:
            errors.append(Diagnostic.error(
                label, "Missing or empty course name", row=row_number, field="Course Name",
            ))
            continue

        total_time = _total_time(row)
        if warn_on_zero_time and total_time == 0:
            errors.append(Diagnostic.warning(
                label,
                f'Course "{course_name}" has zero or missing total time',
                row=row_number,
                field="Total Time",
            ))

        data.append(record_type(
            row_number=row_number,
            course_name=course_name,
            total_time=total_time,
            year=resolve_year(row),
            fields=dict(row),
        ))

    logger.debug("%s: %d of %d rows normalized", label, len(data), len(rows))
    return NormalizationResult(data=data, errors=errors)


def normalize_legacy_data(rows: Sequence[dict[str, Any]]) -> NormalizationResult[LegacyCourseRecord]:
    """Normalize Legacy course rows.

    Course name is required (error, row dropped). Total time is required but
    tolerant: zero or missing produces a warning and the row is kept.
    """
    return _normalize_course_rows(rows, SourceKind.LEGACY, LegacyCourseRecord, warn_on_zero_time=True)


def normalize_modern_data(rows: Sequence[dict[str, Any]]) -> NormalizationResult[ModernCourseRecord]:
    """Normalize Modern course rows. Same shape as Legacy, no zero-time warning."""
    return _normalize_course_rows(rows, SourceKind.MODERN, ModernCourseRecord, warn_on_zero_time=False)


def normalize_time_spent_data(
    rows: Sequence[dict[str, Any]],
    missing_name_warning_cap: int = DEFAULT_MISSING_NAME_WARNING_CAP,
) -> NormalizationResult[TimeSpentRecord]:
    """Normalize Time Spent category rows.

    A row without a course name is dropped with a warning listing the
    available columns. Only the first `missing_name_warning_cap` such rows are
    reported; the rest are dropped silently.
    """
    errors: list[Diagnostic] = []
    data: list[TimeSpentRecord] = []
    label = SourceKind.TIME_SPENT.label
    matchers = TIME_ENTRY_FIELD_MATCHERS
    missing_names = 0

    for index, row in enumerate(rows):
        row_number = _row_number(index, row)
        course_name = _course_name(row, matchers[Field.COURSE_NAME])
        if not course_name:
            missing_names += 1
            if missing_names <= missing_name_warning_cap:
                errors.append(Diagnostic.warning(
                    label,
                    f"Missing or empty course name. Available columns: {', '.join(row.keys())}",
                    row=row_number,
                    field="Course Name",
                ))
            continue

        category_key = find_column(row, matchers[Field.CATEGORY])
        hours_key = find_column(row, matchers[Field.HOURS])
        user_key = find_column(row, matchers[Field.USER])

        hours = None
        if hours_key is not None and not is_blank(row[hours_key]):
            hours = extract_number(row[hours_key])

        data.append(TimeSpentRecord(
            row_number=row_number,
            course_name=course_name,
            category=extract_text(row[category_key]) if category_key is not None else None,
            hours=hours,
            user=extract_text(row[user_key]) if user_key is not None else None,
            fields=dict(row),
        ))

    if missing_names > missing_name_warning_cap:
        logger.debug("%s: %d rows without course name (%d reported)", label, missing_names, missing_name_warning_cap)
    logger.debug("%s: %d of %d rows normalized", label, len(data), len(rows))
    return NormalizationResult(data=data, errors=errors)
