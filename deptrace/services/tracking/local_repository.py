"""
Cache-hit interceptor for the local repository manager.

Resolutions satisfied entirely from the local cache fire no download event,
so the tracking manager records the active path whenever a lookup finds a
file. Every answer of the wrapped manager is returned unchanged.
"""

from __future__ import annotations

from pathlib import Path

from ...core.di import resolve_or_default
from ...core.dto.events import RepositorySystemSession
from ...core.dto.local import (
    LocalArtifactRegistration,
    LocalArtifactRequest,
    LocalArtifactResult,
    LocalMetadataRegistration,
    LocalMetadataRequest,
    LocalMetadataResult,
)
from ...core.interfaces.logger import ILogger
from ...core.interfaces.repository import ILocalRepositoryManager, ILocalRepositoryManagerFactory
from ...core.interfaces.tracking import IDependencyTracker
from ...core.models.artifact import Artifact, LocalRepository, Metadata, RemoteRepository


class TrackingLocalRepositoryManager:
    """Local repository manager that forwards to ``delegate`` and tracks cache hits."""

    def __init__(
        self,
        delegate: ILocalRepositoryManager,
        tracker: IDependencyTracker,
        logger: ILogger | None = None,
    ) -> None:
        self._delegate = delegate
        self._tracker = tracker
        self._logger = logger

    @property
    def logger(self) -> ILogger:
        """Get logger, resolving from container or creating NullLogger."""
        if self._logger is None:
            from ..logging import NullLogger

            self._logger = resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]
        return self._logger

    @property
    def delegate(self) -> ILocalRepositoryManager:
        return self._delegate

    @property
    def repository(self) -> LocalRepository:
        return self._delegate.repository

    def path_for_local_artifact(self, artifact: Artifact) -> str:
        return self._delegate.path_for_local_artifact(artifact)

    def path_for_remote_artifact(
        self, artifact: Artifact, repository: RemoteRepository, context: str
    ) -> str:
        return self._delegate.path_for_remote_artifact(artifact, repository, context)

    def path_for_local_metadata(self, metadata: Metadata) -> str:
        return self._delegate.path_for_local_metadata(metadata)

    def path_for_remote_metadata(
        self, metadata: Metadata, repository: RemoteRepository, context: str
    ) -> str:
        return self._delegate.path_for_remote_metadata(metadata, repository, context)

    def find_artifact(
        self, session: RepositorySystemSession, request: LocalArtifactRequest
    ) -> LocalArtifactResult | None:
        result = self._delegate.find_artifact(session, request)
        if result is not None and result.file is not None:
            self._track(result.file.parent, result.request.artifact)
        return result

    def add_artifact(
        self, session: RepositorySystemSession, registration: LocalArtifactRegistration
    ) -> None:
        self._delegate.add_artifact(session, registration)

    def find_metadata(
        self, session: RepositorySystemSession, request: LocalMetadataRequest
    ) -> LocalMetadataResult | None:
        return self._delegate.find_metadata(session, request)

    def add_metadata(
        self, session: RepositorySystemSession, registration: LocalMetadataRegistration
    ) -> None:
        self._delegate.add_metadata(session, registration)

    def _track(self, directory: Path, artifact: Artifact) -> None:
        try:
            self._tracker.track_dependencies(directory, artifact)
        except Exception:
            self.logger.bind(artifact=artifact, directory=directory).error(
                "Cache-hit tracking failed", exc_info=True
            )


class TrackingLocalRepositoryManagerFactory:
    """Factory wrapping every manager the host factory creates."""

    def __init__(
        self,
        delegate: ILocalRepositoryManagerFactory,
        tracker: IDependencyTracker,
        enabled: bool = True,
        logger: ILogger | None = None,
    ) -> None:
        """
        Args:
            delegate: The host's local repository manager factory
            tracker: Receives cache hits (normally the repository listener)
            enabled: When False, managers are returned undecorated
            logger: Logger for internal diagnostics
        """
        self._delegate = delegate
        self._tracker = tracker
        self._enabled = enabled
        self._logger = logger

    def new_instance(
        self, session: RepositorySystemSession, repository: LocalRepository
    ) -> ILocalRepositoryManager:
        manager = self._delegate.new_instance(session, repository)
        if not self._enabled:
            return manager
        return TrackingLocalRepositoryManager(manager, self._tracker, logger=self._logger)
