from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..constants import DEFAULT_TABLE_TYPE_KEYS, KEY_TABLE_END, MAX_EMPTY_COLUMNS, MAX_EMPTY_ROWS, START_COLUMN, START_ROW
from ..models.config_models import ImporterConfig, SheetDefinition

"""Config loader.

Responsibilities:
- Load the YAML config (e.g. config/importer.yml)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for every missing key
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (wrong types, unknown keys ...).
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


def default_config() -> ImporterConfig:
    """Config used when no file is given."""
    return ImporterConfig()


def build_config(data: dict[str, Any]) -> ImporterConfig:
    """Turn validated config data into an ImporterConfig."""
    default_sheet = SheetDefinition(
        start_row=data.get("start_row", START_ROW),
        start_column=data.get("start_column", START_COLUMN),
        end_key=data.get("end_key", KEY_TABLE_END),
    )
    sheets = {
        name: SheetDefinition(
            start_row=raw.get("start_row", default_sheet.start_row),
            start_column=raw.get("start_column", default_sheet.start_column),
            end_key=raw.get("end_key", default_sheet.end_key),
        )
        for name, raw in (data.get("sheets") or {}).items()
    }
    return ImporterConfig(
        source_directory=data.get("source_directory"),
        default_sheet=default_sheet,
        sheets=sheets,
        table_type_keys=tuple(data.get("table_type_keys", DEFAULT_TABLE_TYPE_KEYS)),
        max_empty_rows=data.get("max_empty_rows", MAX_EMPTY_ROWS),
        max_empty_columns=data.get("max_empty_columns", MAX_EMPTY_COLUMNS),
        logs_dir=data.get("logs_dir", "./logs"),
        reject_tables_with_errors=data.get("reject_tables_with_errors", False),
    )


def load_config(path: Path) -> ImporterConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level of {path} must be a mapping")

    _validate_config_schema(data)
    return build_config(data)
