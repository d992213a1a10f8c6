"""
Trace walker.

Walks a request-trace chain from the link an event carried outward and
classifies each payload into the closed set of trace frames.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from ...core.di import resolve_or_default
from ...core.dto.events import RequestTrace
from ...core.interfaces.logger import ILogger
from ...core.models.artifact import Artifact
from ...core.models.trace import (
    ArtifactFetchRequest,
    ClassifiedFrame,
    ClassifiedTrace,
    CollectRequest,
    CollectStepContext,
    DependencyRequest,
    DescriptorRequest,
    ModelBuildRequest,
    PluginReference,
    TraceFrame,
)

UNKNOWN_SCOPE = "?"

FRAME_TYPES: tuple[type, ...] = (
    DescriptorRequest,
    CollectRequest,
    CollectStepContext,
    ArtifactFetchRequest,
    DependencyRequest,
    PluginReference,
    ModelBuildRequest,
)

FrameAdapter = Callable[[Any], "TraceFrame | None"]


class TraceWalker:
    """
    Classifies the frames of a request trace, innermost first.

    Hosts whose engines attach their own request objects can register
    adapters that turn them into trace frames. Classification is first match
    wins: native frames, then adapters in registration order; anything left
    is skipped.
    """

    def __init__(
        self,
        scope_search_depth: int = 64,
        logger: ILogger | None = None,
    ) -> None:
        """
        Initialize the walker.

        Args:
            scope_search_depth: How many links a descriptor frame may look
                outward for the collect request that declared it
            logger: Logger for internal diagnostics
        """
        self._scope_search_depth = scope_search_depth
        self._adapters: list[tuple[type, FrameAdapter]] = []
        self._logger = logger

    @property
    def logger(self) -> ILogger:
        """Get logger, resolving from container or creating NullLogger."""
        if self._logger is None:
            from ..logging import NullLogger

            self._logger = resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]
        return self._logger

    def register_adapter(self, payload_type: type, adapter: FrameAdapter) -> None:
        """Map engine-native payloads of ``payload_type`` to trace frames."""
        self._adapters.append((payload_type, adapter))

    def classify_frame(self, data: Any) -> TraceFrame | None:
        """Classify one payload, or return None for payloads deptrace does not track."""
        if isinstance(data, FRAME_TYPES):
            return data
        for payload_type, adapter in self._adapters:
            if isinstance(data, payload_type):
                return adapter(data)
        # Engine-internal requests and arbitrary objects are elided.
        return None

    def iter_links(self, trace: RequestTrace | None) -> Iterator[RequestTrace]:
        """Yield the links of a chain from ``trace`` outward, stopping on a cycle."""
        seen: set[int] = set()
        link = trace
        while link is not None:
            if id(link) in seen:
                self.logger.warning("Request trace cycle detected after %d links; stopping", len(seen))
                return
            seen.add(id(link))
            yield link
            link = link.parent

    def walk(self, trace: RequestTrace | None) -> list[ClassifiedFrame]:
        """
        Classify every recognized frame of a trace.

        Args:
            trace: Innermost link (may be None)

        Returns:
            Recognized frames, innermost first; empty for an absent chain
        """
        frames: list[ClassifiedFrame] = []
        for depth, link in enumerate(self.iter_links(trace)):
            frame = self.classify_frame(link.data)
            if frame is None:
                continue
            scope = None
            if isinstance(frame, DescriptorRequest):
                scope = self.declared_scope(link, frame.artifact)
            frames.append(ClassifiedFrame(frame=frame, depth=depth, scope=scope))
        return frames

    def classify(self, trace: RequestTrace | None) -> ClassifiedTrace:
        """Classify a whole trace before any decision is made about it."""
        return ClassifiedTrace(frames=self.walk(trace))

    def declared_scope(self, link: RequestTrace, artifact: Artifact) -> str:
        """
        Find the scope under which ``artifact`` was declared.

        Searches outward from ``link`` (inclusive) for the nearest collect
        request, within the configured depth, and looks the artifact up among
        its dependencies. Optional edges report ``<scope>/optional``.

        Returns:
            The scope label, or "?" when no collect request or entry is found
        """
        for depth, candidate in enumerate(self.iter_links(link)):
            if depth >= self._scope_search_depth:
                break
            frame = self.classify_frame(candidate.data)
            if not isinstance(frame, CollectRequest):
                continue
            for dependency in frame.dependencies:
                if dependency.artifact == artifact:
                    return dependency.scope_label or UNKNOWN_SCOPE
            break
        return UNKNOWN_SCOPE
