from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

"""Config dataclasses for the course time analytics pipeline.

These are the typed, defaulted settings the pipeline runs with. The YAML
loader in coursetime/config/loader.py builds them; when no config file is
present the defaults below apply unchanged.
"""

DEFAULT_LEGACY_YEAR = 2024
DEFAULT_MODERN_YEAR = 2026
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_MISSING_NAME_WARNING_CAP = 5
DEFAULT_TOP_COURSES_LIMIT = 20


@dataclass(frozen=True)
class FallbackYears:
    """Years used when a course row carries no usable Reporting year.

    These are placeholders, not business rules; every use is reported as a
    warning diagnostic.
    """
    legacy: int = DEFAULT_LEGACY_YEAR
    modern: int = DEFAULT_MODERN_YEAR
    in_progress: int | None = None  # None -> calendar year at run time

    def resolve_in_progress(self, today: date | None = None) -> int:
        if self.in_progress is not None:
            return self.in_progress
        return (today or date.today()).year


@dataclass(frozen=True)
class PipelineConfig:
    """Root configuration object for one processing run."""
    fallback_years: FallbackYears = field(default_factory=FallbackYears)
    default_category: str = DEFAULT_CATEGORY
    missing_name_warning_cap: int = DEFAULT_MISSING_NAME_WARNING_CAP  # Time Spent rows only
    top_courses_limit: int = DEFAULT_TOP_COURSES_LIMIT
    keep_na_strings: tuple[str, ...] = ()  # strings pandas must not read as NaN
    diagnostics_log_dir: str | None = None  # JSON lines export, off by default
