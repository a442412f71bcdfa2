from __future__ import annotations

from datetime import date
from pathlib import Path

from coursetime.models.config_models import PipelineConfig
from coursetime.services.orchestrator import SourcePaths, process_files


def _write_sources(data: Path) -> SourcePaths:
    (data / "legacy.csv").write_text(
        "Course Name,Total Time,Reporting (L),Legal Reviewer\n"
        "NA,3,2023,NA\n"
        "Ethics,2,2023,N/A\n",
        encoding="utf-8",
    )
    (data / "modern.csv").write_text("Course Name,Time Spent,Reporting (M)\n", encoding="utf-8")
    (data / "time.csv").write_text("Course,Category,Hours\n", encoding="utf-8")
    return SourcePaths(legacy=data / "legacy.csv", modern=data / "modern.csv", time_spent=data / "time.csv")


def test_na_course_name_blocks_by_default(temp_workdir: Path):
    result = process_files(_write_sources(temp_workdir / "data"), today=date(2025, 6, 1))
    assert result.status.value == "blocked"
    assert result.critical_errors[0].row == 2


def test_keep_na_strings_keeps_literal_values(temp_workdir: Path):
    config = PipelineConfig(keep_na_strings=("NA",))
    result = process_files(_write_sources(temp_workdir / "data"), config, today=date(2025, 6, 1))
    assert result.status.value == "completed"
    names = sorted(c.course_name for c in result.unified)
    assert names == ["Ethics", "NA"]
    reviewers = {c.course_name: c.metadata["Legal Reviewer"] for c in result.unified}
    assert reviewers["NA"] == "NA"
    # N/A is still a pandas default NA string
    assert reviewers["Ethics"] is None
