from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.thresholds import UrgencyThresholds

"""Configuration loader.

Responsibilities:
- Load the YAML config (``config/premium_leave.yml`` by default)
- Validate it against the bundled JSON schema
- Apply defaults for every omitted key
- Check cross-field rules the schema cannot express
  (critical <= high <= moderate)

The processing core never reads configuration; the loaded thresholds are
passed explicitly to every batch.
"""

__all__ = [
    "ConfigError",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/premium_leave.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class AppConfig:
    thresholds: UrgencyThresholds = field(default_factory=UrgencyThresholds)
    sheet_name: str | None = None  # None = primeira aba
    header_row: int = 1            # linha do cabeçalho (1-based)


def default_config() -> AppConfig:
    return AppConfig()


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (unknown keys, wrong types,
            out-of-range values).
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


def _build_thresholds(raw: dict[str, Any]) -> UrgencyThresholds:
    known = {f.name for f in fields(UrgencyThresholds)}
    thresholds = UrgencyThresholds(**{k: v for k, v in raw.items() if k in known})
    if not (
        thresholds.critical_max_months
        <= thresholds.high_max_months
        <= thresholds.moderate_max_months
    ):
        raise ConfigError(
            "config validation failed: urgency bands must satisfy "
            "critical_max_months <= high_max_months <= moderate_max_months"
        )
    return thresholds


def load_config(path: Path) -> AppConfig:
    """Load and validate a YAML config file.

    Args:
        path: Path to the YAML file

    Returns:
        AppConfig with defaults for every omitted key

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails
            schema validation
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if data is None:
        data = {}

    _validate_config_schema(data)

    reader = data.get("reader") or {}
    return AppConfig(
        thresholds=_build_thresholds(data.get("thresholds") or {}),
        sheet_name=reader.get("sheet_name"),
        header_row=reader.get("header_row", 1),
    )
