from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for the decode step (TTY only).

A single tqdm bar counts decoded uploads. In non-TTY environments (CI, pipes)
the bar is disabled so no ANSI control sequences reach the output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over decoded files."""

    def __init__(self, total_files: int, *, description: str = "Decoding files") -> None:
        self.total_files = total_files
        self.description = description
        self.completed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def finish_file(self, file_path: Path, success: bool = True) -> None:
        """Record one finished decode (success or failure)."""
        self.completed += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(last=file_path.name, ok=success)
            self.pbar.update(1)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
