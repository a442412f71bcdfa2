"""Field Extractor: header heuristics and cell value coercion."""

from .coercion import (
    extract_number,
    extract_text,
    extract_year,
    format_duration,
    is_blank,
    normalize_course_name,
    parse_duration_phrase,
)
from .columns import Field, find_column, find_columns
from .metadata_fields import clean_field_name, clean_metadata, find_metadata_field, get_metadata_value

__all__ = [
    "extract_number",
    "extract_text",
    "extract_year",
    "format_duration",
    "is_blank",
    "normalize_course_name",
    "parse_duration_phrase",
    "Field",
    "find_column",
    "find_columns",
    "clean_field_name",
    "clean_metadata",
    "find_metadata_field",
    "get_metadata_value",
]
