from __future__ import annotations

from ..extract.coercion import format_duration
from ..models.processing_result import PipelineResult, PipelineStatus

"""SUMMARY line and short report rendering.

SUMMARY format:
SUMMARY status={completed|blocked} courses={n} legacy={n} modern={n}
in_progress={n} hours={h} errors={n} warnings={n} elapsed_sec={s}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        # avoid scientific notation for tiny values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: PipelineResult) -> str:
    """Render the SUMMARY line for a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = PipelineResult(status=PipelineStatus.BLOCKED, unified=[], errors=[],
        ...                    analytics=None, start_time=t, end_time=t)
        >>> render_summary_line(r)
        'SUMMARY status=blocked courses=0 legacy=0 modern=0 in_progress=0 hours=0 errors=0 warnings=0 elapsed_sec=0'
    """
    if result.analytics is not None:
        s = result.analytics.summary
        courses, legacy, modern, in_progress = s.total_courses, s.legacy_courses, s.modern_courses, s.in_progress_courses
        hours = s.total_time_spent
    else:
        courses = legacy = modern = in_progress = 0
        hours = 0.0

    return (
        f"SUMMARY status={result.status.value} "
        f"courses={courses} "
        f"legacy={legacy} "
        f"modern={modern} "
        f"in_progress={in_progress} "
        f"hours={_format_number(hours)} "
        f"errors={result.error_count} "
        f"warnings={result.warning_count} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )


def render_top_courses(result: PipelineResult, limit: int = 10) -> list[str]:
    """Lines like "  1. Fire Safety 101 (2023, Completed) 2:30"."""
    if result.status is not PipelineStatus.COMPLETED or result.analytics is None:
        return []
    lines = []
    for rank, course in enumerate(result.analytics.top_courses[:limit], start=1):
        lines.append(
            f"{rank:>3}. {course.course_name} ({course.year}, {course.status}) {format_duration(course.total_time)}"
        )
    return lines
