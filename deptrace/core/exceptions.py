"""
Custom exception hierarchy for deptrace.

Tracking failures must never reach the resolution engine. These exceptions
are raised inside deptrace (configuration, record writes) and caught at the
listener and interceptor boundaries, where they are logged.
"""

from __future__ import annotations


class DeptraceException(Exception):
    """
    Base exception for all deptrace errors.

    Attributes:
        message: Human-readable error description
        context: Additional debugging context (file paths, keys, etc.)
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        if cause is not None:
            self.__cause__ = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class DeptraceConfigError(DeptraceException):
    """Base class for configuration-related errors."""

    pass


class ConfigFileError(DeptraceConfigError):
    """
    Error reading or parsing a configuration file.

    Raised for TOML parsing errors, file not found, permission errors, etc.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


class ConfigValidationError(DeptraceConfigError, ValueError):
    """
    Invalid or missing configuration value.

    Inherits from ValueError so callers catching ValueError keep working.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        value: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if key:
            ctx["key"] = key
        if value is not None:
            ctx["value"] = value
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Tracking Errors
# =============================================================================


class TrackingError(DeptraceException):
    """Base class for errors raised while recording provenance."""

    pass


class RecordWriteError(TrackingError):
    """
    A provenance record or audit-log block could not be written.

    Carries the target path; the store turns it into a failed WriteResult.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message, context=ctx, cause=cause)
