"""Configuration loading and management for deptrace."""

import json
from pathlib import Path
from typing import Any

from .core.exceptions import ConfigFileError, ConfigValidationError
from .core.settings import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    find_config_file,
    load_settings,
    read_config_file,
)

# Config keys that config_set accepts
CONFIGURABLE_KEYS = {
    "tracking.audit_log": {
        "type": bool,
        "default": True,
        "description": "Append every download event to the per-directory audit log",
    },
    "tracking.provenance": {
        "type": bool,
        "default": True,
        "description": "Write one deduplicated provenance record per resolved artifact",
    },
    "tracking.cache_hits": {
        "type": bool,
        "default": True,
        "description": "Record the active dependency path on local cache hits",
    },
    "tracking.audit_log_name": {
        "type": str,
        "default": "_dependency-tracker.txt",
        "description": "File name of the audit log written next to each artifact",
    },
    "tracking.tracking_dir": {
        "type": str,
        "default": ".tracking",
        "description": "Directory (next to each artifact) holding provenance records",
    },
    "tracking.scope_search_depth": {
        "type": int,
        "default": 64,
        "description": "How many trace levels to search for the declaring collect request",
    },
    "logging.level": {
        "type": str,
        "default": "warning",
        "description": "Log level (debug, info, warning, error)",
    },
    "logging.console": {
        "type": bool,
        "default": False,
        "description": "Output debug logs to stderr",
    },
    "logging.file": {
        "type": bool,
        "default": True,
        "description": "Output debug logs to ~/.deptrace/deptrace.log",
    },
}

VALID_LOG_LEVELS = {"debug", "info", "warning", "error"}


def _get_default_config() -> dict:
    """Get default config from Pydantic models."""
    from .core.models.config import DeptraceConfig

    return DeptraceConfig().to_dict()


def _get_nested(d: dict, key: str, default=None):
    """Get a nested key like 'tracking.audit_log'."""
    for part in key.split("."):
        if isinstance(d, dict) and part in d:
            d = d[part]
        else:
            return default
    return d


def _set_nested(d: dict, key: str, value):
    """Set a nested key like 'tracking.audit_log'."""
    parts = key.split(".")
    for part in parts[:-1]:
        if part not in d:
            d[part] = {}
        d = d[part]
    d[parts[-1]] = value


def _toml_value(val: Any) -> str:
    if isinstance(val, bool):
        return str(val).lower()
    if isinstance(val, str):
        return json.dumps(val)
    return str(val)


def load_config(config_path: Path | None = None, start_dir: str | None = None) -> dict:
    """
    Load configuration from file.

    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching from (if config_path not given)

    Returns:
        Configuration dict with defaults applied
    """
    settings = load_settings(config_path=config_path, start_dir=start_dir)
    return settings.to_dict()


def get_config_path_for_write(start_dir: str | None = None) -> Path:
    """
    Get the path where config should be written.

    Prefers an existing .deptrace/config.toml, otherwise creates one in start_dir or cwd.
    """
    existing = find_config_file(start_dir)
    if existing and existing.name == CONFIG_FILE_NAME:
        return existing

    base = Path(start_dir) if start_dir else Path.cwd()
    config_dir = base / CONFIG_DIR_NAME
    config_dir.mkdir(exist_ok=True)
    return config_dir / CONFIG_FILE_NAME


def save_config(config: dict, config_path: Path):
    """
    Save configuration to a .deptrace/config.toml file.

    Only saves non-default values.
    """
    lines = []
    defaults = _get_default_config()

    for section in ("tracking", "logging"):
        section_lines = []
        for key, val in config.get(section, {}).items():
            if val != defaults.get(section, {}).get(key):
                section_lines.append(f"{key} = {_toml_value(val)}")
        if section_lines:
            lines.append(f"[{section}]")
            lines.extend(section_lines)
            lines.append("")

    try:
        config_path.write_text("\n".join(lines))
    except OSError as e:
        raise ConfigFileError(
            f"Failed to write config file: {e}", file_path=str(config_path), cause=e
        ) from e


def config_get(key: str, start_dir: str | None = None):
    """Get a config value."""
    config = load_config(start_dir=start_dir)
    return _get_nested(config, key)


def _parse_value(key: str, value: str) -> Any:
    key_info = CONFIGURABLE_KEYS[key]

    if key_info["type"] is bool:
        if value.lower() in ("true", "1", "yes", "on"):
            return True
        if value.lower() in ("false", "0", "no", "off"):
            return False
        raise ConfigValidationError(f"Invalid boolean value: {value}", key=key, value=value)

    if key_info["type"] is int:
        try:
            parsed = int(value)
        except ValueError as e:
            raise ConfigValidationError(
                f"Invalid integer value: {value}", key=key, value=value, cause=e
            ) from e
        if parsed < 1:
            raise ConfigValidationError("Value must be at least 1", key=key, value=value)
        return parsed

    if key == "logging.level" and value not in VALID_LOG_LEVELS:
        raise ConfigValidationError(
            f"Invalid log level: {value}. Valid levels: {', '.join(sorted(VALID_LOG_LEVELS))}",
            key=key,
            value=value,
        )
    if key in ("tracking.audit_log_name", "tracking.tracking_dir") and (
        not value or "/" in value or "\\" in value
    ):
        raise ConfigValidationError("Must be a plain file name", key=key, value=value)
    return value


def config_set(key: str, value: str, start_dir: str | None = None):
    """Set a config value and save to .deptrace/config.toml."""
    if key not in CONFIGURABLE_KEYS:
        raise ConfigValidationError(
            f"Unknown config key: {key}. Valid keys: {', '.join(CONFIGURABLE_KEYS.keys())}",
            key=key,
        )

    typed_value = _parse_value(key, value)

    config_path = get_config_path_for_write(start_dir)
    current = read_config_file(config_path)
    if current.error:
        raise ConfigFileError(current.error, file_path=str(config_path))

    config = {
        section: dict(values)
        for section, values in current.data.items()
        if isinstance(values, dict)
    }
    _set_nested(config, key, typed_value)
    save_config(config, config_path)

    return config_path, typed_value


def config_list():
    """List all configurable keys with descriptions."""
    return CONFIGURABLE_KEYS
