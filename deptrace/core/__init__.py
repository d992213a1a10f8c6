"""
Core infrastructure for deptrace.

This module provides:
- ServiceContainer: DI container using dependency-injector
- Application bootstrap and host wiring helpers
- Protocol definitions for the resolution-engine collaborators
- Custom exception hierarchy
"""

from .bootstrap import (
    bootstrap,
    is_initialized,
    reset,
    tracking_collector,
    tracking_local_repository_factory,
)
from .container import ServiceContainer, get_container, resolve, try_resolve
from .exceptions import (
    ConfigFileError,
    ConfigValidationError,
    DeptraceConfigError,
    DeptraceException,
    RecordWriteError,
    TrackingError,
)

__all__ = [
    "ConfigFileError",
    "ConfigValidationError",
    "DeptraceConfigError",
    "DeptraceException",
    "RecordWriteError",
    "ServiceContainer",
    "TrackingError",
    "bootstrap",
    "get_container",
    "is_initialized",
    "reset",
    "resolve",
    "tracking_collector",
    "tracking_local_repository_factory",
    "try_resolve",
]
