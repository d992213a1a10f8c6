"""
Settings for deptrace.

Sources, highest priority first: explicit values, ``DEPTRACE_*``
environment variables (``__`` separates section and field), the config
file, model defaults. The config file is ``.deptrace/config.toml`` or the
``[tool.deptrace]`` table of a ``pyproject.toml``, whichever is found first
walking up from the start directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .models.config import LoggingConfig, TrackingConfig

CONFIG_DIR_NAME = ".deptrace"
CONFIG_FILE_NAME = "config.toml"
PYPROJECT_NAME = "pyproject.toml"


def _get_logger():
    from ..services.logging import NullLogger
    from .di import resolve_or_default
    from .interfaces.logger import ILogger

    return resolve_or_default(ILogger, NullLogger)


@dataclass(frozen=True)
class ConfigFile:
    """
    A config file as read from disk.

    Attributes:
        path: Where the file is (None when no file was found)
        data: The deptrace tables only; empty when the file is absent or broken
        error: Why the file could not be used, if it could not
    """

    path: Path | None = None
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


def _deptrace_table(path: Path, document: dict[str, Any]) -> dict[str, Any] | None:
    if path.name == PYPROJECT_NAME:
        return document.get("tool", {}).get("deptrace")
    return document


def read_config_file(path: Path | None) -> ConfigFile:
    """
    Read the deptrace tables of ``path``.

    A missing file reads as empty. Parse and read errors are logged and
    reported on the result; they never abort loading.
    """
    if path is None or not path.exists():
        return ConfigFile(path=path)

    try:
        with open(path, "rb") as f:
            document = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        _get_logger().bind(config_file=path).warning("Failed to parse config file: %s", e)
        return ConfigFile(path=path, error=f"Failed to parse config file: {e}")
    except OSError as e:
        _get_logger().bind(config_file=path).warning("Failed to read config file: %s", e)
        return ConfigFile(path=path, error=f"Failed to read config file: {e}")

    return ConfigFile(path=path, data=_deptrace_table(path, document) or {})


def find_config_file(start_dir: str | None = None) -> Path | None:
    """
    Find the config file by walking up from ``start_dir`` (or the cwd).

    A pyproject.toml only counts when it has a ``[tool.deptrace]`` table.
    """
    start = Path(start_dir) if start_dir else Path.cwd()

    for directory in [start, *start.parents]:
        config_path = directory / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path

        pyproject = directory / PYPROJECT_NAME
        if pyproject.exists():
            try:
                with open(pyproject, "rb") as f:
                    document = tomllib.load(f)
            except (tomllib.TOMLDecodeError, OSError) as e:
                _get_logger().debug("Skipping unreadable %s: %s", pyproject, e)
                continue
            if "deptrace" in document.get("tool", {}):
                return pyproject

    return None


class ConfigFileSource(PydanticBaseSettingsSource):
    """Settings source serving the sections of an already read config file."""

    def __init__(self, settings_cls: type[BaseSettings], config_file: ConfigFile) -> None:
        super().__init__(settings_cls)
        self._config_file = config_file

    def get_field_value(self, field_info: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._config_file.data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        data = self._config_file.data
        return {name: data[name] for name in self.settings_cls.model_fields if name in data}


class DeptraceSettings(BaseSettings):
    """
    Merged deptrace settings.

    ``config_file`` is the file layer the settings were loaded with. Use
    ``load_settings`` or ``from_config_file`` rather than instantiating this
    class directly, which skips the file layer.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEPTRACE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_file: ClassVar[ConfigFile] = ConfigFile()

    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            ConfigFileSource(settings_cls, cls.config_file),
        )

    @classmethod
    def from_config_file(cls, config_file: ConfigFile) -> DeptraceSettings:
        """Load settings with ``config_file`` beneath the environment."""
        bound = type(
            cls.__name__,
            (cls,),
            {"config_file": config_file, "__module__": cls.__module__, "__qualname__": cls.__qualname__},
        )
        return bound()

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict, plus where the file layer came from."""
        result: dict[str, Any] = {
            "tracking": self.tracking.model_dump(),
            "logging": self.logging.model_dump(),
        }
        if self.config_file.path is not None and self.config_file.error is None:
            result["_config_file"] = str(self.config_file.path)
        if self.config_file.error is not None:
            result["_config_error"] = self.config_file.error
        return result


def load_settings(config_path: Path | None = None, start_dir: str | None = None) -> DeptraceSettings:
    """
    Load settings from the config file and the environment.

    Args:
        config_path: Explicit config file (skips the search)
        start_dir: Directory to search upward from when no path is given

    Returns:
        Merged settings
    """
    path = config_path if config_path is not None else find_config_file(start_dir)
    return DeptraceSettings.from_config_file(read_config_file(path))
