from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum

"""Diagnostic model for row-level validation findings.

Normalizers and the reconciliation engine never raise for bad rows; they
return Diagnostic values next to their data. Severity decides whether the
orchestrator may continue:

- ERROR: the row was excluded and the run must stop before reconciliation
- WARNING: informational, the row (or instance) is still included
"""

__all__ = [
    "Diagnostic",
    "Severity",
    "has_errors",
    "count_by_severity",
]


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """One validation finding.

    Attributes:
        file: Source label (e.g. "Legacy Course Data")
        message: Human readable description
        severity: ERROR blocks the run, WARNING does not
        row: 1-based spreadsheet row (header is row 1). None when not row-bound
        field: Logical field the finding is about, if any
    """
    file: str
    message: str
    severity: Severity
    row: int | None = None
    field: str | None = None

    @staticmethod
    def error(file: str, message: str, *, row: int | None = None, field: str | None = None) -> Diagnostic:
        return Diagnostic(file=file, message=message, severity=Severity.ERROR, row=row, field=field)

    @staticmethod
    def warning(file: str, message: str, *, row: int | None = None, field: str | None = None) -> Diagnostic:
        return Diagnostic(file=file, message=message, severity=Severity.WARNING, row=row, field=field)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (fixed key set)."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def describe(self) -> str:
        location = self.file
        if self.row is not None:
            location += f" row {self.row}"
        if self.field:
            location += f" [{self.field}]"
        return f"{location}: {self.message}"


def has_errors(diagnostics: list[Diagnostic] | tuple[Diagnostic, ...]) -> bool:
    return any(d.is_error for d in diagnostics)


def count_by_severity(diagnostics: list[Diagnostic] | tuple[Diagnostic, ...]) -> tuple[int, int]:
    """Return (errors, warnings)."""
    errors = sum(1 for d in diagnostics if d.is_error)
    return errors, len(diagnostics) - errors
