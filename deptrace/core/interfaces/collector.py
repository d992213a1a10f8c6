"""
Protocol definition for the engine's per-dependency processing step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models.artifact import Dependency, DependencyNode


@runtime_checkable
class IDependencyCollector(Protocol):
    """Protocol for the recursive step that processes one dependency.

    ``parent`` is the graph node whose dependency is being processed; engines
    pass the remaining engine-specific arguments through untouched.
    """

    def process_dependency(
        self,
        parent: DependencyNode,
        dependency: Dependency,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Process ``dependency`` below ``parent``, recursing into its children."""
        ...
