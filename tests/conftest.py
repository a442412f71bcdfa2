# Shared pytest fixtures
from __future__ import annotations
import tempfile
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from coursetime.logging.init import reset_logging

FIXED_TODAY = date(2025, 6, 1)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # set-then-delete so teardown also drops a value loaded from .env
        monkeypatch.setenv("COURSETIME_CONFIG", "")
        monkeypatch.delenv("COURSETIME_CONFIG")
        yield p


@pytest.fixture(autouse=True)
def clean_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def today() -> date:
    return FIXED_TODAY


@pytest.fixture()
def sample_config_yaml() -> str:
    return """fallback_years:
  legacy: 2024
  modern: 2026
  in_progress: 2025
default_category: Uncategorized
missing_name_warning_cap: 5
top_courses_limit: 20
keep_na_strings: []
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "coursetime.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_excel(path: Path, rows: list[dict[str, Any]], columns: list[str] | None = None) -> Path:
    """Write rows to a single-sheet workbook with a header row."""
    df = pd.DataFrame(rows, columns=columns)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Sheet1", index=False)
    return path


@pytest.fixture()
def legacy_rows() -> list[dict[str, Any]]:
    return [
        {"Course Name": "Fire Safety 101", "Total Time": 10, "Reporting (L)": "2023-03-01", "Status": "Completed",
         "[LCT] Vertical (L)": "Safety"},
        {"Course Name": "Data Privacy", "Total Time": "2:30", "Reporting (L)": 2024, "Status": "Completed",
         "[LCT] Vertical (L)": "Compliance"},
    ]


@pytest.fixture()
def modern_rows() -> list[dict[str, Any]]:
    return [
        {"Course Name": "fire safety 101", "Time Spent": 99, "Reporting (M)": "2023", "Status": "Completed"},
        {"Course Name": "Coaching Basics", "Time Spent": 4.5, "Reporting (M)": "2025-01-10", "Status": "Retired"},
    ]


@pytest.fixture()
def time_spent_rows() -> list[dict[str, Any]]:
    return [
        {"Course": "Fire Safety 101", "Category": "Design", "Hours": 2},
        {"Course": "FIRE SAFETY 101!", "Category": "Review", "Hours": 1.5},
        {"Course": "Draft Module", "Category": None, "Hours": 3},
        {"Course": "Draft Module", "Category": "Design", "Hours": None},
    ]


@pytest.fixture()
def sample_files(temp_workdir: Path, legacy_rows, modern_rows, time_spent_rows) -> dict[str, Path]:
    data = temp_workdir / "data"
    return {
        "legacy": write_excel(data / "legacy.xlsx", legacy_rows),
        "modern": write_excel(data / "modern.xlsx", modern_rows),
        "time_spent": write_excel(data / "time_spent.xlsx", time_spent_rows),
    }


@pytest.fixture()
def excel_writer():
    return write_excel
