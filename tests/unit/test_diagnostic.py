from __future__ import annotations

import json
from pathlib import Path

from coursetime.logging.diagnostic_log import DiagnosticLogBuffer
from coursetime.models.diagnostic import Diagnostic, Severity, count_by_severity, has_errors


def test_constructors_set_severity():
    err = Diagnostic.error("Legacy Course Data", "Missing or empty course name", row=4, field="Course Name")
    warn = Diagnostic.warning("Modern Course Data", "dup")
    assert err.severity is Severity.ERROR and err.is_error
    assert warn.severity is Severity.WARNING and not warn.is_error
    assert warn.row is None


def test_to_json_line_fixed_keys():
    d = Diagnostic.warning("Time Spent Category Data", "Missing or empty course name", row=7, field="Course Name")
    payload = json.loads(d.to_json_line())
    assert payload == {
        "file": "Time Spent Category Data",
        "message": "Missing or empty course name",
        "severity": "warning",
        "row": 7,
        "field": "Course Name",
    }


def test_describe():
    assert Diagnostic.error("Legacy Course Data", "bad", row=3, field="Course Name").describe() == (
        "Legacy Course Data row 3 [Course Name]: bad"
    )
    assert Diagnostic.warning("System", "oops").describe() == "System: oops"


def test_counts():
    diags = [Diagnostic.error("a", "x"), Diagnostic.warning("a", "y"), Diagnostic.warning("a", "z")]
    assert has_errors(diags) is True
    assert has_errors(diags[1:]) is False
    assert count_by_severity(diags) == (1, 2)


class TestDiagnosticLogBuffer:
    def test_flush_writes_json_lines(self, temp_workdir: Path):
        buffer = DiagnosticLogBuffer(temp_workdir / "logs" / "diag")
        buffer.append(Diagnostic.error("Legacy Course Data", "Missing or empty course name", row=2))
        buffer.extend([Diagnostic.warning("Modern Course Data", "dup", row=3)])

        path = buffer.flush()

        assert path.parent == temp_workdir / "logs" / "diag"
        assert path.name.startswith("diagnostics-") and path.suffix == ".log"
        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["severity"] for line in lines] == ["error", "warning"]
        assert len(buffer) == 0

    def test_flush_appends_to_same_file(self, temp_workdir: Path):
        buffer = DiagnosticLogBuffer(temp_workdir / "logs")
        buffer.append(Diagnostic.warning("a", "one"))
        first = buffer.flush()
        buffer.append(Diagnostic.warning("a", "two"))
        second = buffer.flush()
        assert first == second
        assert len(first.read_text(encoding="utf-8").splitlines()) == 2

    def test_empty_flush_writes_nothing(self, temp_workdir: Path):
        buffer = DiagnosticLogBuffer(temp_workdir / "logs")
        path = buffer.flush()
        assert not path.exists()
