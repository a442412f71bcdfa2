from __future__ import annotations

import math
import re
import warnings
from datetime import date, datetime, time, timedelta
from typing import Any

import pandas as pd
from openpyxl.utils.datetime import to_excel

"""Cell value coercion.

Every function here is total: malformed input yields the documented
sentinel (0, None) instead of an exception, so a single bad cell cannot
abort a whole file.

Clock-style strings ("1:45", "1:45:00 AM") are always read as durations.
Excel stores elapsed time as a time of day, and the exports carry that
formatting through; a genuine time-of-day value would be misread.
A time-formatted cell of 24 hours or more comes back from openpyxl as a
datetime near the 1900 epoch (25:30 -> 1900-01-01 01:30); its serial
value is the elapsed time in days.
"""

__all__ = [
    "is_blank",
    "extract_text",
    "extract_number",
    "extract_year",
    "parse_duration_phrase",
    "format_duration",
    "normalize_course_name",
    "MIN_YEAR",
    "MAX_YEAR",
]

MIN_YEAR = 2022
MAX_YEAR = 2100

_CLOCK_RE = re.compile(r"^(\d+):(\d+)(?::(\d+))?\s*(?:AM|PM)?$", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(20\d{2})\b")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")
_NON_NUMERIC_RE = re.compile(r"[^\d.]")
_DATE_HINT_RE = re.compile(
    r"\d{1,4}[/.-]\d{1,2}|\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\b",
    re.IGNORECASE,
)

_SHORT_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_RANGE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:-|–|to)\s*(\d+(?:\.\d+)?)")
_MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:min|mins|minute|minutes)\b")
_HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:h|hr|hrs|hour|hours)\b")

_PUNCTUATION_RE = re.compile(r"[^\w\s-]")
_WHITESPACE_RE = re.compile(r"\s+")


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NaT:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def extract_text(value: Any) -> str | None:
    """Trimmed string form of a cell, None when blank."""
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        # 101.0 from a numeric column reads better as "101"
        return str(int(value))
    text = str(value).strip()
    return text or None


def _clock_hours(hours: int, minutes: int, seconds: int = 0) -> float:
    return hours + minutes / 60 + seconds / 3600


def extract_number(value: Any) -> float:
    """Coerce a time/amount cell to hours (float). Returns 0.0 when nothing parses."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return 0.0
        return float(value)
    if isinstance(value, timedelta):
        return value.total_seconds() / 3600
    if isinstance(value, time):
        return _clock_hours(value.hour, value.minute, value.second)
    if is_blank(value):
        return 0.0
    if isinstance(value, (datetime, date)):
        return float(to_excel(value)) * 24

    text = str(value).strip()
    match = _CLOCK_RE.match(text)
    if match:
        seconds = int(match.group(3)) if match.group(3) else 0
        return _clock_hours(int(match.group(1)), int(match.group(2)), seconds)

    cleaned = _NON_NUMERIC_RE.sub("", text)
    number = _LEADING_NUMBER_RE.match(cleaned)
    if number is None:
        return 0.0
    try:
        return float(number.group(0))
    except ValueError:
        return 0.0


def extract_year(value: Any) -> int | None:
    """Find a reporting year in a cell.

    Order: number within [MIN_YEAR, MAX_YEAR], date objects, a 20xx substring,
    full date parsing. None when nothing matches.
    """
    if is_blank(value) or value is False:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value == 0:
            return None
        if MIN_YEAR <= value <= MAX_YEAR:
            return int(math.floor(value))
    if isinstance(value, (datetime, date)):
        return value.year
    if isinstance(value, (time, timedelta)):
        return None

    text = str(value)
    match = _YEAR_RE.search(text)
    if match:
        return int(match.group(1))

    return _parse_date_year(text)


def _parse_date_year(text: str) -> int | None:
    # pandas also accepts "today", "now" and bare clock times
    if not _DATE_HINT_RE.search(text):
        return None
    with warnings.catch_warnings():
        # pandas warns when it has to guess a format; guessing is the point here
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is None or parsed is pd.NaT or pd.isna(parsed):
        return None
    return int(parsed.year)


def parse_duration_phrase(value: Any) -> float | None:
    """Read a free-text duration ("30 mins", "1 to 2 hours", "1:30") as hours.

    Used for metadata columns such as course length. None when unparseable.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if math.isnan(value):
            return None
        return float(value)
    if is_blank(value):
        return None
    if isinstance(value, (date, time, timedelta)):
        return extract_number(value)

    text = str(value).strip().lower()

    if "hour" in text and ("less than" in text or "under" in text):
        return 0.5

    match = _SHORT_CLOCK_RE.match(text)
    if match:
        seconds = int(match.group(3)) if match.group(3) else 0
        return _clock_hours(int(match.group(1)), int(match.group(2)), seconds)

    match = _RANGE_RE.search(text)
    if match:
        return (float(match.group(1)) + float(match.group(2))) / 2

    match = _MINUTES_RE.search(text)
    if match:
        return float(match.group(1)) / 60

    match = _HOURS_RE.search(text)
    if match:
        return float(match.group(1))

    cleaned = _NON_NUMERIC_RE.sub("", text)
    try:
        return float(cleaned)
    except ValueError:
        return None


def format_duration(hours: float | str) -> str:
    """Render hours as "h:mm". Strings already in that shape pass through."""
    if isinstance(hours, str):
        if re.match(r"^\d+:\d{2}$", hours):
            return hours
        numeric = extract_number(hours)
        if numeric == 0:
            return hours
        hours = numeric
    whole = int(math.floor(hours))
    minutes = int(round((hours - whole) * 60))
    if minutes == 60:
        whole, minutes = whole + 1, 0
    return f"{whole}:{minutes:02d}"


def normalize_course_name(name: Any) -> str:
    """Matching form of a course name.

    Lower-cased and trimmed, punctuation other than hyphens removed, runs of
    whitespace collapsed to one space.
    """
    if is_blank(name):
        return ""
    text = str(name).strip().lower()
    text = _PUNCTUATION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
