from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import FillConfig

"""Config loader.

Responsibilities:
- Load the optional YAML config (config/fill.yml by default)
- Validate it against the JSON schema shipped with the package
- Layer environment overrides (FORMFILL_*) on top of file values
- Fall back to FillConfig defaults for anything left unset
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/fill.yml")

# Environment variable -> FillConfig field
ENV_OVERRIDES = {
    "FORMFILL_TEMPLATE": "template",
    "FORMFILL_CSV": "csv_file",
    "FORMFILL_OUTPUT_DIR": "output_dir",
}


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or if the
            config data fails validation (unknown keys, wrong types, bad enum).
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


def _env_overrides() -> dict[str, str]:
    return {field: os.environ[var] for var, field in ENV_OVERRIDES.items() if os.environ.get(var)}


def load_config(path: Path | None = None, *, required: bool = False) -> FillConfig:
    """Build a FillConfig from defaults, an optional YAML file and the environment.

    A missing file is only an error when ``required`` is set (the user pointed
    at it explicitly); otherwise defaults are used.
    """
    path = path or DEFAULT_CONFIG_PATH
    data: dict[str, Any] = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config root must be a mapping: {path}")
        _validate_config_schema(data)
    elif required:
        raise ConfigError(f"config file not found: {path}")

    return FillConfig(**data).with_overrides(**_env_overrides())
