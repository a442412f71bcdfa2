from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

"""Source descriptors for the three uploads.

SourceKind carries the user-facing label used in every Diagnostic, and
DecodedSource is the join unit produced by the concurrent decode step:
one per upload, holding the raw rows exactly as the reader returned them.
"""


class SourceKind(Enum):
    """The three uploads, in processing order.

    The enum value is the label shown to users and stored in Diagnostic.file.
    """
    LEGACY = "Legacy Course Data"
    MODERN = "Modern Course Data"
    TIME_SPENT = "Time Spent Category Data"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class DecodedSource:
    """Raw rows of one decoded upload.

    rows keep their original header strings; index 0 is spreadsheet row 2.
    """
    kind: SourceKind
    path: Path
    rows: list[dict[str, Any]]

    @property
    def row_count(self) -> int:
        return len(self.rows)
