"""
Protocol definitions for the local repository collaborator.

The local repository manager owns the on-disk artifact cache layout.
deptrace decorates it to observe cache hits but never changes its answers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..dto.events import RepositorySystemSession
    from ..dto.local import (
        LocalArtifactRegistration,
        LocalArtifactRequest,
        LocalArtifactResult,
        LocalMetadataRegistration,
        LocalMetadataRequest,
        LocalMetadataResult,
    )
    from ..models.artifact import Artifact, LocalRepository, Metadata, RemoteRepository


@runtime_checkable
class ILocalRepositoryManager(Protocol):
    """Protocol for the engine's local repository manager."""

    @property
    def repository(self) -> LocalRepository:
        """The local repository being managed."""
        ...

    def path_for_local_artifact(self, artifact: Artifact) -> str:
        """Relative path of a locally installed artifact."""
        ...

    def path_for_remote_artifact(
        self, artifact: Artifact, repository: RemoteRepository, context: str
    ) -> str:
        """Relative path of an artifact downloaded from ``repository``."""
        ...

    def path_for_local_metadata(self, metadata: Metadata) -> str:
        """Relative path of locally installed metadata."""
        ...

    def path_for_remote_metadata(
        self, metadata: Metadata, repository: RemoteRepository, context: str
    ) -> str:
        """Relative path of metadata downloaded from ``repository``."""
        ...

    def find_artifact(
        self, session: RepositorySystemSession, request: LocalArtifactRequest
    ) -> LocalArtifactResult | None:
        """Look up an artifact in the local repository."""
        ...

    def add_artifact(
        self, session: RepositorySystemSession, registration: LocalArtifactRegistration
    ) -> None:
        """Register an installed or downloaded artifact."""
        ...

    def find_metadata(
        self, session: RepositorySystemSession, request: LocalMetadataRequest
    ) -> LocalMetadataResult | None:
        """Look up metadata in the local repository."""
        ...

    def add_metadata(
        self, session: RepositorySystemSession, registration: LocalMetadataRegistration
    ) -> None:
        """Register installed or downloaded metadata."""
        ...


@runtime_checkable
class ILocalRepositoryManagerFactory(Protocol):
    """Protocol for creating local repository managers."""

    def new_instance(
        self, session: RepositorySystemSession, repository: LocalRepository
    ) -> ILocalRepositoryManager:
        """Create a manager for ``repository``."""
        ...
