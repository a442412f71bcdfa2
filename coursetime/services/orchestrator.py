from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Protocol

from ..excel.reader import TabularDecodeError, read_tabular_file
from ..models.config_models import PipelineConfig
from ..models.diagnostic import Diagnostic, has_errors
from ..models.processing_result import NormalizationResult, PipelineResult, PipelineStatus
from ..models.source_file import DecodedSource, SourceKind
from .analytics import compute_analytics
from .normalizers import normalize_legacy_data, normalize_modern_data, normalize_time_spent_data
from .progress import ProgressTracker
from .reconcile import ReconcileSnapshot, merge_and_classify

"""Pipeline orchestration.

decode_sources()  decodes the three uploads concurrently and joins on all of
                  them; any decode failure fails the whole upload.
run_pipeline()    normalize -> critical-error gate -> reconcile -> aggregate,
                  in one synchronous pass.
process_files()   decode_sources() + run_pipeline().
DashboardSession  keeps the last completed result and replaces it wholesale.

Telemetry goes through an explicit PipelineHooks object instead of ambient
prints.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Raised when an upload cannot be processed at all (decode failure)."""


class PipelineHooks(Protocol):
    def on_decoded(self, source: DecodedSource) -> None: ...

    def on_normalized(self, kind: SourceKind, result: NormalizationResult[Any]) -> None: ...

    def on_stage(self, stage: str, snapshot: ReconcileSnapshot) -> None: ...


class NullHooks:
    """Hooks that do nothing."""

    def on_decoded(self, source: DecodedSource) -> None:
        pass

    def on_normalized(self, kind: SourceKind, result: NormalizationResult[Any]) -> None:
        pass

    def on_stage(self, stage: str, snapshot: ReconcileSnapshot) -> None:
        pass


class LoggingHooks(NullHooks):
    """Report intermediate counts at DEBUG level through the package logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def on_decoded(self, source: DecodedSource) -> None:
        columns = list(source.rows[0].keys()) if source.rows else []
        self.log.debug("decoded %s: rows=%d columns=%s", source.kind.label, source.row_count, columns)

    def on_normalized(self, kind: SourceKind, result: NormalizationResult[Any]) -> None:
        self.log.debug("normalized %s: records=%d diagnostics=%d", kind.label, len(result.data), len(result.errors))

    def on_stage(self, stage: str, snapshot: ReconcileSnapshot) -> None:
        self.log.debug(
            "reconcile %s: courses=%d pending_time_groups=%d",
            stage, len(snapshot.courses), len(snapshot.pending_time_entries),
        )


@dataclass(frozen=True)
class SourcePaths:
    legacy: Path
    modern: Path
    time_spent: Path

    def items(self) -> list[tuple[SourceKind, Path]]:
        return [
            (SourceKind.LEGACY, Path(self.legacy)),
            (SourceKind.MODERN, Path(self.modern)),
            (SourceKind.TIME_SPENT, Path(self.time_spent)),
        ]


def decode_sources(
    paths: SourcePaths,
    config: PipelineConfig | None = None,
    hooks: PipelineHooks | None = None,
) -> dict[SourceKind, DecodedSource]:
    """Decode all three uploads concurrently and wait for every one.

    Raises:
        ProcessingError: if any file failed to decode (first failure in
            Legacy, Modern, Time Spent order is reported)
    """
    config = config or PipelineConfig()
    hooks = hooks or NullHooks()
    items = paths.items()

    with ThreadPoolExecutor(max_workers=len(items), thread_name_prefix="decode") as pool:
        futures: dict[SourceKind, Future[list[dict[str, Any]]]] = {
            kind: pool.submit(read_tabular_file, path, config.keep_na_strings) for kind, path in items
        }
        path_of = {futures[kind]: path for kind, path in items}
        # waits for all three, failed or not
        with ProgressTracker(len(items)) as progress:
            for future in as_completed(futures.values()):
                progress.finish_file(path_of[future], success=future.exception() is None)

    failures: list[TabularDecodeError] = []
    decoded: dict[SourceKind, DecodedSource] = {}
    for kind, path in items:
        exc = futures[kind].exception()
        if exc is not None:
            if not isinstance(exc, TabularDecodeError):
                exc = TabularDecodeError(path, str(exc))
            logger.debug(f"decode failed {kind.label}: {exc}")
            failures.append(exc)
            continue
        decoded[kind] = DecodedSource(kind=kind, path=path, rows=futures[kind].result())

    if failures:
        raise ProcessingError(str(failures[0])) from failures[0]

    for source in decoded.values():
        hooks.on_decoded(source)
    return decoded


def run_pipeline(
    legacy_rows: Sequence[dict[str, Any]],
    modern_rows: Sequence[dict[str, Any]],
    time_spent_rows: Sequence[dict[str, Any]],
    config: PipelineConfig | None = None,
    hooks: PipelineHooks | None = None,
    *,
    today: date | None = None,
) -> PipelineResult:
    """Normalize, gate, reconcile and aggregate decoded rows.

    Diagnostics are concatenated in processing order (Legacy, Modern, Time
    Spent, reconciliation). If normalization produced any error-severity
    diagnostic the run stops there with status BLOCKED: no unified data and
    no analytics.
    """
    config = config or PipelineConfig()
    hooks = hooks or NullHooks()
    start_time = datetime.now(UTC)
    source_rows = {
        SourceKind.LEGACY.label: len(legacy_rows),
        SourceKind.MODERN.label: len(modern_rows),
        SourceKind.TIME_SPENT.label: len(time_spent_rows),
    }

    legacy = normalize_legacy_data(legacy_rows)
    hooks.on_normalized(SourceKind.LEGACY, legacy)
    modern = normalize_modern_data(modern_rows)
    hooks.on_normalized(SourceKind.MODERN, modern)
    time_spent = normalize_time_spent_data(time_spent_rows, config.missing_name_warning_cap)
    hooks.on_normalized(SourceKind.TIME_SPENT, time_spent)

    diagnostics: list[Diagnostic] = [*legacy.errors, *modern.errors, *time_spent.errors]

    if has_errors(diagnostics):
        critical = sum(1 for d in diagnostics if d.is_error)
        logger.info(f"found {critical} critical error(s); reconciliation skipped")
        return PipelineResult(
            status=PipelineStatus.BLOCKED,
            unified=[],
            errors=diagnostics,
            analytics=None,
            start_time=start_time,
            end_time=datetime.now(UTC),
            source_rows=source_rows,
        )

    merged = merge_and_classify(
        legacy.data, modern.data, time_spent.data, config, on_stage=hooks.on_stage, today=today,
    )
    diagnostics.extend(merged.errors)
    analytics = compute_analytics(merged.unified, top_n=config.top_courses_limit)

    return PipelineResult(
        status=PipelineStatus.COMPLETED,
        unified=merged.unified,
        errors=diagnostics,
        analytics=analytics,
        start_time=start_time,
        end_time=datetime.now(UTC),
        source_rows=source_rows,
    )


def process_files(
    paths: SourcePaths,
    config: PipelineConfig | None = None,
    hooks: PipelineHooks | None = None,
    *,
    today: date | None = None,
) -> PipelineResult:
    """Decode the three uploads, then run the pipeline over them.

    Raises:
        ProcessingError: a file could not be decoded; nothing was produced
    """
    decoded = decode_sources(paths, config, hooks)
    return run_pipeline(
        decoded[SourceKind.LEGACY].rows,
        decoded[SourceKind.MODERN].rows,
        decoded[SourceKind.TIME_SPENT].rows,
        config,
        hooks,
        today=today,
    )


class DashboardSession:
    """Holds the dataset currently on display.

    A completed run replaces it wholesale. A blocked run or a decode failure
    leaves it untouched; the latest diagnostics are still exposed through
    `errors` so the user can fix and re-upload.
    """

    def __init__(self, config: PipelineConfig | None = None, hooks: PipelineHooks | None = None) -> None:
        self.config = config or PipelineConfig()
        self.hooks = hooks or LoggingHooks()
        self.current: PipelineResult | None = None
        self.errors: list[Diagnostic] = []
        self.last_updated: datetime | None = None

    @property
    def awaiting_upload(self) -> bool:
        return self.current is None

    def upload(self, paths: SourcePaths, *, today: date | None = None) -> PipelineResult:
        """Process a new upload.

        Raises:
            ProcessingError: decode failure; previous dataset kept
        """
        self.last_updated = datetime.now(UTC)
        try:
            result = process_files(paths, self.config, self.hooks, today=today)
        except ProcessingError as e:
            self.errors = [Diagnostic.error("System", str(e))]
            raise

        self.errors = list(result.errors)
        if result.status is PipelineStatus.COMPLETED:
            self.current = result
        return result
