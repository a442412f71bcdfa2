from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .coercion import is_blank

"""Metadata key cleaning and lookup.

Course exports decorate headers with a bracketed team tag and a trailing
source marker, e.g. "[LCT] Vertical (L)". Cleaning strips both so Legacy and
Modern metadata line up under the same keys.
"""

_PREFIX_TAG_RE = re.compile(r"^\[[^\]]*\]\s*")
_SOURCE_MARKER_RE = re.compile(r"\s*\((?:l|m|legacy|modern)\)$", re.IGNORECASE)


def clean_field_name(name: str) -> str:
    cleaned = _PREFIX_TAG_RE.sub("", str(name).strip())
    return _SOURCE_MARKER_RE.sub("", cleaned).strip()


def clean_metadata(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Copy with cleaned keys. On a clash after cleaning the later column wins."""
    return {clean_field_name(k): v for k, v in metadata.items()}


def find_metadata_field(metadata: Mapping[str, Any], field_name: str) -> Any:
    if field_name in metadata:
        return metadata[field_name]
    needle = field_name.lower()
    for key, value in metadata.items():
        if needle in key.lower():
            return value
    return None


def get_metadata_value(metadata: Mapping[str, Any], search_keys: list[str], default: str = "N/A") -> str:
    """First non-blank value among search_keys, as a trimmed string."""
    for key in search_keys:
        value = find_metadata_field(metadata, key)
        if not is_blank(value):
            return str(value).strip()
    return default
