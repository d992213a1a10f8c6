"""
Diagnostic logging for deptrace.

A single stdlib logger named ``deptrace`` is configured from the logging
section of the settings. Listener callbacks run on the engine's resolver
threads, so every line names its thread, and loggers bound to an event
append that event's context.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from ..core.interfaces.logger import ILogger
from ..core.models.config import LoggingConfig

CONTEXT_ATTR = "deptrace_context"


class ContextFormatter(logging.Formatter):
    """Formatter that appends bound context as ``[key=value ...]``."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = getattr(record, CONTEXT_ATTR, None)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            text = f"{text} [{pairs}]"
        return text


class DeptraceLogger(ILogger):
    """
    ILogger over a stdlib logger, optionally bound to some context.

    Use ``configure`` once to install handlers; ``bind`` derives loggers that
    share those handlers.
    """

    LOG_FILE_PATH: ClassVar[Path] = Path.home() / ".deptrace" / "deptrace.log"
    MAX_FILE_SIZE: ClassVar[int] = 10 * 1024 * 1024  # 10MB
    BACKUP_COUNT: ClassVar[int] = 3
    FORMAT: ClassVar[str] = "%(asctime)s [%(levelname)s] %(name)s [%(threadName)s]: %(message)s"

    def __init__(self, logger: logging.Logger, context: Mapping[str, Any] | None = None) -> None:
        self._logger = logger
        self._context = dict(context or {})

    @classmethod
    def configure(
        cls,
        config: LoggingConfig | None = None,
        *,
        name: str = "deptrace",
        log_file: Path | None = None,
    ) -> DeptraceLogger:
        """
        Install handlers for ``config`` on the named stdlib logger.

        Handlers from an earlier call are closed and replaced, so
        bootstrapping twice never duplicates output.

        Args:
            config: Logging section (default: LoggingConfig())
            name: Stdlib logger name
            log_file: Override for the rotating log file location

        Returns:
            An unbound DeptraceLogger
        """
        config = config or LoggingConfig()
        logger = logging.getLogger(name)
        logger.setLevel(config.level.upper())
        logger.propagate = False
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        formatter = ContextFormatter(cls.FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        if config.console:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(formatter)
            logger.addHandler(console)
        if config.file:
            path = log_file or cls.LOG_FILE_PATH
            path.parent.mkdir(parents=True, exist_ok=True)
            rotating = RotatingFileHandler(
                path,
                maxBytes=cls.MAX_FILE_SIZE,
                backupCount=cls.BACKUP_COUNT,
                encoding="utf-8",
            )
            rotating.setFormatter(formatter)
            logger.addHandler(rotating)
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())
        return cls(logger)

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def bind(self, **context: Any) -> DeptraceLogger:
        return DeptraceLogger(self._logger, {**self._context, **context})

    def log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        if self._context:
            extra = dict(kwargs.pop("extra", None) or {})
            extra[CONTEXT_ATTR] = self._context
            kwargs["extra"] = extra
        self._logger.log(level, message, *args, **kwargs)


class NullLogger(ILogger):
    """No-op logger for tests and for hosts that never bootstrap deptrace."""

    def log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def bind(self, **context: Any) -> NullLogger:
        return self
