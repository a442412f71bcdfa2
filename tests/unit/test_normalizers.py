from __future__ import annotations

import pytest

from coursetime.excel.reader import RawRow
from coursetime.models.diagnostic import Severity
from coursetime.services.normalizers import (
    normalize_legacy_data,
    normalize_modern_data,
    normalize_time_spent_data,
    resolve_year,
)


class TestLegacy:
    def test_reporting_date_and_clock_time(self):
        result = normalize_legacy_data([
            {"Course Name": "Fire Safety 101", "Time spent": "2:30", "Reporting": "2023-05-01"},
        ])
        assert result.errors == []
        record = result.data[0]
        assert record.course_name == "Fire Safety 101"
        assert record.total_time == pytest.approx(2.5)
        assert record.year == 2023
        assert record.row_number == 2

    def test_missing_name_is_error_and_row_dropped(self):
        result = normalize_legacy_data([
            {"Course Name": "  ", "Total Time": 3},
            {"Course Name": "Kept", "Total Time": 1},
        ])
        assert [r.course_name for r in result.data] == ["Kept"]
        assert len(result.errors) == 1
        err = result.errors[0]
        assert err.severity is Severity.ERROR
        assert err.file == "Legacy Course Data"
        assert err.row == 2
        assert err.field == "Course Name"
        assert err.message == "Missing or empty course name"

    def test_row_number_carried_by_decoded_rows(self):
        result = normalize_legacy_data([
            RawRow({"Course Name": "Ethics", "Total Time": 1}, row_number=2),
            RawRow({"Course Name": None, "Total Time": 4}, row_number=5),
        ])
        assert result.data[0].row_number == 2
        assert [e.row for e in result.errors] == [5]

    def test_zero_time_warns_but_keeps_row(self):
        result = normalize_legacy_data([{"Course Name": "Empty", "Total Time": None}])
        assert len(result.data) == 1
        assert result.data[0].total_time == 0.0
        warning = result.errors[0]
        assert warning.severity is Severity.WARNING
        assert warning.message == 'Course "Empty" has zero or missing total time'
        assert warning.field == "Total Time"

    def test_all_original_columns_kept(self):
        row = {"Course Name": "A", "Total Time": 1, "[LCT] Vertical (L)": "Safety"}
        result = normalize_legacy_data([row])
        assert result.data[0].fields == row


class TestModern:
    def test_zero_time_is_silent(self):
        result = normalize_modern_data([{"Course Name": "B", "Time Spent": 0, "Year": 2025}])
        assert result.errors == []
        assert result.data[0].year == 2025

    def test_missing_name_is_error(self):
        result = normalize_modern_data([{"Title": None, "Hours": 2}])
        assert result.data == []
        assert result.errors[0].file == "Modern Course Data"
        assert result.errors[0].is_error


class TestTimeSpent:
    def test_fields_extracted(self):
        result = normalize_time_spent_data([
            {"Course": "Fire Safety 101", "Category": "LP Development", "Hours": 3, "User": "alex"},
        ])
        entry = result.data[0]
        assert entry.course_name == "Fire Safety 101"
        assert entry.category == "LP Development"
        assert entry.hours == 3.0
        assert entry.user == "alex"

    def test_blank_hours_is_none(self):
        result = normalize_time_spent_data([{"Course": "A", "Category": "QA", "Hours": None}])
        assert result.data[0].hours is None
        assert result.data[0].effective_hours == 0.0

    def test_missing_name_is_warning_listing_columns(self):
        result = normalize_time_spent_data([
            {"Course": "", "Category": "QA", "Hours": 1},
            {"Course": "Next", "Category": "QA", "Hours": 2},
        ])
        assert [e.course_name for e in result.data] == ["Next"]
        assert len(result.errors) == 1
        warning = result.errors[0]
        assert warning.severity is Severity.WARNING
        assert warning.row == 2
        assert "Available columns: Course, Category, Hours" in warning.message

    def test_missing_name_warnings_capped(self):
        rows = [{"Course": None, "Hours": 1} for _ in range(8)]
        result = normalize_time_spent_data(rows, missing_name_warning_cap=3)
        assert result.data == []
        assert len(result.errors) == 3
        assert [e.row for e in result.errors] == [2, 3, 4]


class TestResolveYear:
    def test_year_column_first(self):
        assert resolve_year({"Year": 2022, "Completed Date": "2024-01-01"}) == 2022

    def test_falls_back_to_date_like_columns(self):
        assert resolve_year({"Year": None, "Start Date": "n/a", "Completed": "2023-09-09"}) == 2023

    def test_none_when_nothing_found(self):
        assert resolve_year({"Course Name": "A"}) is None
