"""
Protocol definition for dependency-chain tracking.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models.artifact import Artifact
    from ..models.provenance import WriteResult


@runtime_checkable
class IDependencyTracker(Protocol):
    """Protocol for recording the active path that led to an artifact."""

    def track_dependencies(self, directory: Path, artifact: Artifact | None) -> WriteResult | None:
        """Record the current descent path for ``artifact`` under ``directory``.

        Returns None when nothing could be recorded (no artifact, empty path).
        """
        ...
