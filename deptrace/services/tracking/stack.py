"""
Active-path stack.

Records the graph nodes currently under recursive processing. The stack is
an explicit object shared by reference between the tracking collector, the
listener and the local repository interceptor.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ...core.interfaces.collector import IDependencyCollector
from ...core.models.artifact import Dependency, DependencyNode


class ActivePathStack:
    """
    Thread-safe, insertion-ordered stack of DependencyNode.

    Sibling subtrees may be processed concurrently, so entries from different
    branches interleave. A snapshot is a best-effort view of the current
    descent, not an authoritative single path.
    """

    def __init__(self) -> None:
        self._nodes: list[DependencyNode] = []
        self._lock = threading.Lock()

    def push(self, node: DependencyNode) -> None:
        """Push a node that is about to be processed."""
        with self._lock:
            self._nodes.append(node)

    def pop(self, node: DependencyNode | None = None) -> DependencyNode | None:
        """
        Pop a node that finished processing.

        Args:
            node: The exact node pushed by the caller. When given, the most
                recent entry that *is* this node is removed, so a concurrent
                sibling's push is never popped by mistake. When omitted, the
                most recent entry is removed.

        Returns:
            The removed node, or None when nothing matched.
        """
        with self._lock:
            if node is None:
                return self._nodes.pop() if self._nodes else None
            for index in range(len(self._nodes) - 1, -1, -1):
                if self._nodes[index] is node:
                    return self._nodes.pop(index)
            return None

    def top(self) -> DependencyNode | None:
        """The most recently pushed node still being processed."""
        with self._lock:
            return self._nodes[-1] if self._nodes else None

    def snapshot(self) -> list[DependencyNode]:
        """Current contents in push order (outermost first)."""
        with self._lock:
            return list(self._nodes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    @contextmanager
    def descend(self, node: DependencyNode) -> Iterator[DependencyNode]:
        """Bracket processing of ``node``: pushed on entry, popped on every exit path."""
        self.push(node)
        try:
            yield node
        finally:
            self.pop(node)


class TrackingDependencyCollector:
    """
    Dependency collector that keeps the active-path stack current.

    Wraps the engine's per-dependency step; every call pushes the parent node
    before delegating and pops it afterwards, including when the step raises.
    Engines must route their recursive calls through this object for nested
    levels to be recorded.
    """

    def __init__(self, delegate: IDependencyCollector, stack: ActivePathStack) -> None:
        self._delegate = delegate
        self._stack = stack

    @property
    def stack(self) -> ActivePathStack:
        return self._stack

    def process_dependency(
        self,
        parent: DependencyNode,
        dependency: Dependency,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        with self._stack.descend(parent):
            return self._delegate.process_dependency(parent, dependency, *args, **kwargs)
