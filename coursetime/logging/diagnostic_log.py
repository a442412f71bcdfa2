from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from coursetime.models.diagnostic import Diagnostic

"""Diagnostics export as JSON Lines.

Off by default: a buffer is only created when a diagnostics directory is
configured. Each flush appends to `diagnostics-YYYYMMDD-HHMMSS.log` (UTC),
the file name being fixed on first access.
"""

__all__ = [
    "DiagnosticLogBuffer",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DiagnosticLogBuffer:
    """In-memory buffer of diagnostics. flush() writes JSON Lines."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self._records: list[Diagnostic] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.directory / f"diagnostics-{stamp}.log"
        return self._file_path

    def append(self, record: Diagnostic) -> None:
        self._records.append(record)

    def extend(self, records: list[Diagnostic]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path:
        fp = self.file_path
        if not self._records:
            return fp
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
