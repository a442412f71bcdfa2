from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_CATEGORY,
    DEFAULT_LEGACY_YEAR,
    DEFAULT_MISSING_NAME_WARNING_CAP,
    DEFAULT_MODERN_YEAR,
    DEFAULT_TOP_COURSES_LIMIT,
    FallbackYears,
    PipelineConfig,
)

"""Config loader.

Responsibilities:
- Load a YAML file (every key optional)
- Validate it against the bundled config_schema.json
- Apply defaults and build a PipelineConfig
- Resolve which file to load (explicit path, COURSETIME_CONFIG, default location)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/coursetime.yml")
CONFIG_ENV_VAR = "COURSETIME_CONFIG"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_from_mapping(data: dict[str, Any]) -> PipelineConfig:
    _validate_config_schema(data)
    years = data.get("fallback_years") or {}
    return PipelineConfig(
        fallback_years=FallbackYears(
            legacy=years.get("legacy", DEFAULT_LEGACY_YEAR),
            modern=years.get("modern", DEFAULT_MODERN_YEAR),
            in_progress=years.get("in_progress"),
        ),
        default_category=data.get("default_category", DEFAULT_CATEGORY),
        missing_name_warning_cap=data.get("missing_name_warning_cap", DEFAULT_MISSING_NAME_WARNING_CAP),
        top_courses_limit=data.get("top_courses_limit", DEFAULT_TOP_COURSES_LIMIT),
        keep_na_strings=tuple(data.get("keep_na_strings") or ()),
        diagnostics_log_dir=data.get("diagnostics_log_dir"),
    )


def load_config(path: Path) -> PipelineConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return config_from_mapping(data)


def resolve_config_path(explicit: Path | None = None) -> Path | None:
    """Pick the config file to load.

    Order: explicit path, $COURSETIME_CONFIG, config/coursetime.yml if it
    exists. None means run with defaults.
    """
    if explicit is not None:
        return explicit
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_effective_config(explicit: Path | None = None) -> PipelineConfig:
    path = resolve_config_path(explicit)
    if path is None:
        return PipelineConfig()
    return load_config(path)
