"""
Logger interface for internal diagnostic output.

Tracking never prints; everything it has to say about itself goes through
an ILogger so hosts can route or silence it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any


class ILogger(ABC):
    """
    Interface for internal logging.

    Messages take printf-style arguments, as with stdlib logging. ``bind``
    returns a logger that carries key/value context (the event type, the
    artifact, the record path) into every message it writes.
    """

    @abstractmethod
    def log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        """Log a message at a stdlib logging level."""

    @abstractmethod
    def bind(self, **context: Any) -> ILogger:
        """Return a logger that adds ``context`` to every message."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, message, *args, **kwargs)
