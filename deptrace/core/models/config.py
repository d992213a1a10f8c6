"""
Configuration models.

Provides Pydantic models for deptrace configuration with validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["debug", "info", "warning", "error"]


class ConfigBaseModel(BaseModel):
    """Config section; values are coerced from TOML and environment strings."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )


class TrackingConfig(ConfigBaseModel):
    """Tracking configuration section."""

    audit_log: bool = True
    provenance: bool = True
    cache_hits: bool = True
    audit_log_name: Annotated[str, Field(min_length=1)] = "_dependency-tracker.txt"
    tracking_dir: Annotated[str, Field(min_length=1)] = ".tracking"
    scope_search_depth: Annotated[int, Field(ge=1)] = 64

    @field_validator("audit_log_name", "tracking_dir")
    @classmethod
    def validate_plain_name(cls, v: str) -> str:
        """File and directory names must not contain path separators."""
        if "/" in v or "\\" in v:
            raise ValueError("must be a plain name, not a path")
        return v


class LoggingConfig(ConfigBaseModel):
    """Logging configuration section."""

    level: LogLevel = "warning"
    console: bool = False
    file: bool = True


class DeptraceConfig(ConfigBaseModel):
    """Complete deptrace configuration.

    This model represents the full configuration with all sections.
    It can be loaded from TOML files or constructed programmatically.
    """

    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'tracking.audit_log')
            default: Default value if key not found

        Returns:
            Config value or default
        """
        obj: Any = self
        for part in key.split("."):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            elif isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeptraceConfig:
        """Create config from dictionary."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return self.model_dump()
