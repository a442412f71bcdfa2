from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from coursetime.config.loader import ConfigError, load_effective_config
from coursetime.excel.reader import TabularDecodeError, read_tabular_file
from coursetime.logging.diagnostic_log import DiagnosticLogBuffer
from coursetime.logging.init import log_summary, setup_logging
from coursetime.models.processing_result import PipelineStatus
from coursetime.services.orchestrator import DashboardSession, ProcessingError, SourcePaths
from coursetime.services.summary import render_summary_line, render_top_courses

"""CLI entrypoint.

Flow:
- Load .env (COURSETIME_CONFIG may point at a config file)
- Load config (explicit --config, env, config/coursetime.yml, or defaults)
- Decode + process the three uploads
- Print diagnostics, top courses and the SUMMARY line

Exit codes: 0 completed, 2 blocked by error-severity diagnostics, 1 fatal.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_BLOCKED = 2

TOP_COURSES_SHOWN = 10


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; existing environment wins unless override."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Course development time analytics")
    p.add_argument("legacy", type=Path, help="Legacy course data (.xlsx/.xls/.csv)")
    p.add_argument("modern", type=Path, help="Modern course data (.xlsx/.xls/.csv)")
    p.add_argument("time_spent", type=Path, help="Time spent category data (.xlsx/.xls/.csv)")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print headers & first rows then exit")
    p.add_argument("--json", type=Path, default=None, help="Write the full result as JSON to this path")
    p.add_argument("--diagnostics-log", type=Path, default=None, help="Directory for a JSON Lines diagnostics log")
    return p.parse_args(argv)


def _inspect_data(paths: SourcePaths, keep_na_strings: tuple[str, ...]) -> int:
    status = EXIT_SUCCESS
    for kind, path in paths.items():
        print(f"FILE: {kind.label} ({path.name})")
        try:
            rows = read_tabular_file(path, keep_na_strings)
        except TabularDecodeError as e:
            print(f"  read_error: {e.reason}")
            status = EXIT_FATAL
            continue
        columns = list(rows[0].keys()) if rows else []
        print(f"  rows={len(rows)} cols={columns}")
        # datetime 値は JSON 化できないため isoformat へ
        safe_rows = [
            {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()}
            for r in rows[:3]
        ]
        print("  sample_rows=", safe_rows)
    return status


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで [] を渡すケース)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = load_effective_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    paths = SourcePaths(legacy=args.legacy, modern=args.modern, time_spent=args.time_spent)

    if args.inspect_data:
        return _inspect_data(paths, cfg.keep_na_strings)

    session = DashboardSession(cfg)
    try:
        result = session.upload(paths)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for diagnostic in result.errors:
        if diagnostic.is_error:
            logger.error(diagnostic.describe())
        else:
            logger.warning(diagnostic.describe())

    log_dir = args.diagnostics_log or (Path(cfg.diagnostics_log_dir) if cfg.diagnostics_log_dir else None)
    if log_dir is not None and result.errors:
        buffer = DiagnosticLogBuffer(log_dir)
        buffer.extend(result.errors)
        logger.info(f"diagnostics written to {buffer.flush()}")

    if result.status is PipelineStatus.BLOCKED:
        logger.error(f"found {result.error_count} critical error(s); fix the files and re-run")
    else:
        for line in render_top_courses(result, TOP_COURSES_SHOWN):
            logger.info(line)

    if args.json is not None:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(
            json.dumps(result.to_dict(), ensure_ascii=False, indent=2, default=str), encoding="utf-8"
        )
        logger.info(f"result written to {args.json}")

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.status is PipelineStatus.BLOCKED:
        return EXIT_BLOCKED
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
