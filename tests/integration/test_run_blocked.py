from __future__ import annotations

from datetime import date
from pathlib import Path

from coursetime.models.processing_result import PipelineStatus
from coursetime.services.orchestrator import DashboardSession, SourcePaths


def test_fix_and_reupload_flow(temp_workdir: Path, excel_writer):
    data = temp_workdir / "data"
    modern = excel_writer(data / "modern.xlsx", [{"Course Name": "Coaching", "Time Spent": 2, "Reporting (M)": 2025}])
    time_spent = excel_writer(data / "time.xlsx", [{"Course": "Coaching", "Category": "QA", "Hours": 1}])
    broken_legacy = excel_writer(data / "legacy_v1.xlsx", [
        {"Course Name": "Ethics", "Total Time": 3, "Reporting (L)": 2023},
        {"Course Name": None, "Total Time": 4, "Reporting (L)": 2023},
        {"Course Name": "", "Total Time": 5, "Reporting (L)": 2024},
    ])
    session = DashboardSession()

    blocked = session.upload(SourcePaths(broken_legacy, modern, time_spent), today=date(2025, 6, 1))

    assert blocked.status is PipelineStatus.BLOCKED
    assert [d.row for d in blocked.critical_errors] == [3, 4]
    assert session.awaiting_upload is True

    fixed_legacy = excel_writer(data / "legacy_v2.xlsx", [
        {"Course Name": "Ethics", "Total Time": 3, "Reporting (L)": 2023},
        {"Course Name": "Forklift", "Total Time": 4, "Reporting (L)": 2023},
    ])
    completed = session.upload(SourcePaths(fixed_legacy, modern, time_spent), today=date(2025, 6, 1))

    assert completed.status is PipelineStatus.COMPLETED
    assert session.current is completed
    assert session.errors == []
    coaching = next(c for c in completed.unified if c.course_name == "Coaching")
    assert coaching.category_breakdown == {"QA": 1}
