"""
Tracking repository listener.

Entry point invoked by the resolution engine. Two recording strategies run
side by side and can be toggled independently:

- the audit log appends every download event to a per-directory log and
  records the active path that required each downloaded artifact;
- provenance records classify the whole trace of each resolved event and
  write one deduplicated record per derived key.

Tracking failures are logged and never propagate into the engine.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ...core.di import resolve_or_default
from ...core.dto.events import EventType, RepositoryEvent
from ...core.interfaces.logger import ILogger
from ...core.models.artifact import Artifact, DependencyNode, WorkspaceRepository
from ...core.models.config import TrackingConfig
from ...core.models.provenance import WriteResult
from .formatter import ProvenanceFormatter
from .keys import derive_record_key, requirer_key
from .stack import ActivePathStack
from .store import TrackingStore
from .walker import TraceWalker


class AuditLogStrategy:
    """Raw audit log of download events. Never deduplicates."""

    def __init__(
        self,
        stack: ActivePathStack,
        store: TrackingStore,
        walker: TraceWalker,
        formatter: ProvenanceFormatter,
    ) -> None:
        self._stack = stack
        self._store = store
        self._walker = walker
        self._formatter = formatter

    def record(self, event: RepositoryEvent) -> list[WriteResult]:
        """
        Append a block for ``event`` to the audit log of its directory.

        When the trace contains an artifact fetch, the directly requiring
        node of the current active path also gets a record.
        """
        if event.file is None:
            return []
        directory = event.file.parent
        frames = self._walker.walk(event.trace)
        snapshot = self._stack.snapshot()

        block = self._formatter.render_audit_block(frames, snapshot, event.repository_label)
        results = [self._store.append_audit(directory, block)]

        if any(f.kind == "fetch" for f in frames):
            tracked = self.track_dependencies(directory, event.artifact, snapshot)
            if tracked is not None:
                results.append(tracked)
        return results

    def track_dependencies(
        self,
        directory: Path,
        artifact: Artifact | None,
        snapshot: Sequence[DependencyNode] | None = None,
    ) -> WriteResult | None:
        """Record the active path under a key named after its innermost node."""
        if artifact is None:
            return None
        if snapshot is None:
            snapshot = self._stack.snapshot()
        key = requirer_key(snapshot[-1] if snapshot else None)
        if key is None:
            return None
        text = self._formatter.render_requirer_record(artifact, snapshot)
        return self._store.record_if_absent(directory, key, text)


class ProvenanceStrategy:
    """Deduplicated provenance of resolved artifacts and metadata."""

    def __init__(
        self,
        stack: ActivePathStack,
        store: TrackingStore,
        walker: TraceWalker,
        formatter: ProvenanceFormatter,
    ) -> None:
        self._stack = stack
        self._store = store
        self._walker = walker
        self._formatter = formatter

    def record(self, event: RepositoryEvent) -> list[WriteResult]:
        """
        Write the provenance record for a resolved event, unless already recorded.

        Events served by the workspace repository are not tracked. When no
        local file exists, the record goes to the directory the artifact
        would occupy and lists the repositories that were configured.
        """
        if isinstance(event.repository, WorkspaceRepository):
            return []

        trace = self._walker.classify(event.trace)
        if trace.is_empty:
            return []

        missing = event.file is None or not event.file.is_file()
        key = derive_record_key(trace, missing=missing)
        if key is None:
            return []

        directory = self.target_directory(event, missing)
        if directory is None:
            return []
        if self._store.has_record(directory, key):
            return []

        text = self._formatter.render_provenance_record(
            event.subject,
            trace.frames,
            self._stack.snapshot(),
            missing=missing,
            repository_label=event.repository_label,
            repositories=trace.repositories,
        )
        return [self._store.record_if_absent(directory, key, text)]

    def target_directory(self, event: RepositoryEvent, missing: bool) -> Path | None:
        """Directory holding the event's file, or the one it would occupy when missing."""
        if not missing and event.file is not None:
            return event.file.parent

        manager = event.session.local_repository_manager if event.session else None
        if manager is not None:
            if event.artifact is not None:
                relative = manager.path_for_local_artifact(event.artifact)
            elif event.metadata is not None:
                relative = manager.path_for_local_metadata(event.metadata)
            else:
                return None
            return (manager.repository.basedir / relative).parent

        if event.file is not None:
            return event.file.parent
        return None


class TrackingRepositoryListener:
    """
    Repository listener wiring the tracking strategies to engine events.

    Download events feed the audit log; resolved events feed provenance
    records. The ``*_resolving`` and ``*_downloading`` callbacks are no-ops.
    """

    def __init__(
        self,
        stack: ActivePathStack,
        store: TrackingStore | None = None,
        walker: TraceWalker | None = None,
        formatter: ProvenanceFormatter | None = None,
        config: TrackingConfig | None = None,
        logger: ILogger | None = None,
    ) -> None:
        """
        Initialize the listener.

        Args:
            stack: Active-path stack shared with the tracking collector
            store: Record store (default: TrackingStore built from config)
            walker: Trace walker (default: TraceWalker built from config)
            formatter: Text renderer (default: ProvenanceFormatter)
            config: Tracking configuration (default: TrackingConfig())
            logger: Logger for internal diagnostics
        """
        self._config = config or TrackingConfig()
        self._stack = stack
        self._logger = logger
        store = store or TrackingStore(
            tracking_dir=self._config.tracking_dir,
            audit_log_name=self._config.audit_log_name,
            logger=logger,
        )
        walker = walker or TraceWalker(
            scope_search_depth=self._config.scope_search_depth, logger=logger
        )
        formatter = formatter or ProvenanceFormatter()
        self.audit = AuditLogStrategy(stack, store, walker, formatter)
        self.provenance = ProvenanceStrategy(stack, store, walker, formatter)

    @property
    def logger(self) -> ILogger:
        """Get logger, resolving from container or creating NullLogger."""
        if self._logger is None:
            from ..logging import NullLogger

            self._logger = resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]
        return self._logger

    @property
    def stack(self) -> ActivePathStack:
        return self._stack

    @property
    def config(self) -> TrackingConfig:
        return self._config

    def on_event(self, event: RepositoryEvent) -> None:
        """Dispatch an event to its callback."""
        handlers = {
            EventType.ARTIFACT_RESOLVING: self.artifact_resolving,
            EventType.ARTIFACT_RESOLVED: self.artifact_resolved,
            EventType.ARTIFACT_DOWNLOADING: self.artifact_downloading,
            EventType.ARTIFACT_DOWNLOADED: self.artifact_downloaded,
            EventType.METADATA_RESOLVING: self.metadata_resolving,
            EventType.METADATA_RESOLVED: self.metadata_resolved,
            EventType.METADATA_DOWNLOADING: self.metadata_downloading,
            EventType.METADATA_DOWNLOADED: self.metadata_downloaded,
        }
        handlers[EventType(event.type)](event)

    def artifact_resolving(self, event: RepositoryEvent) -> None:
        pass

    def artifact_resolved(self, event: RepositoryEvent) -> None:
        if self._config.provenance:
            self._run(self.provenance, event)

    def artifact_downloading(self, event: RepositoryEvent) -> None:
        pass

    def artifact_downloaded(self, event: RepositoryEvent) -> None:
        if self._config.audit_log:
            self._run(self.audit, event)

    def metadata_resolving(self, event: RepositoryEvent) -> None:
        pass

    def metadata_resolved(self, event: RepositoryEvent) -> None:
        if self._config.provenance:
            self._run(self.provenance, event)

    def metadata_downloading(self, event: RepositoryEvent) -> None:
        pass

    def metadata_downloaded(self, event: RepositoryEvent) -> None:
        if self._config.audit_log:
            self._run(self.audit, event)

    def track_dependencies(self, directory: Path, artifact: Artifact | None) -> WriteResult | None:
        """Record the active path for an artifact served from the local cache."""
        logger = self.logger.bind(source="cache-hit", artifact=artifact)
        try:
            result = self.audit.track_dependencies(directory, artifact)
        except Exception:
            logger.error("Dependency tracking failed in %s", directory, exc_info=True)
            return None
        if result is not None:
            self._report(logger, result)
        return result

    def _run(self, strategy: AuditLogStrategy | ProvenanceStrategy, event: RepositoryEvent) -> None:
        logger = self.logger.bind(event=EventType(event.type).value, subject=event.subject)
        try:
            results = strategy.record(event)
        except Exception:
            logger.error("%s failed", type(strategy).__name__, exc_info=True)
            return
        for result in results:
            self._report(logger, result)

    def _report(self, logger: ILogger, result: WriteResult) -> None:
        if result.failed:
            logger.error("Could not write %s: %s", result.path, result.error)
        elif result.written:
            logger.debug("Recorded %s", result.path)
