"""
Local repository lookup and registration objects.

Request/result pairs exchanged with the local repository manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..models.artifact import Artifact, ArtifactRepository, Metadata, RemoteRepository


@dataclass(frozen=True)
class LocalArtifactRequest:
    """Lookup of an artifact in the local repository."""

    artifact: Artifact
    repositories: list[RemoteRepository] = field(default_factory=list)
    context: str = ""


@dataclass
class LocalArtifactResult:
    """Result of a local artifact lookup; ``file`` is set on a cache hit."""

    request: LocalArtifactRequest
    file: Path | None = None
    available: bool = False
    repository: ArtifactRepository | None = None


@dataclass(frozen=True)
class LocalArtifactRegistration:
    """Registration of an artifact that was installed or downloaded."""

    artifact: Artifact
    repository: RemoteRepository | None = None
    contexts: tuple[str, ...] = ()


@dataclass(frozen=True)
class LocalMetadataRequest:
    """Lookup of metadata in the local repository."""

    metadata: Metadata
    repository: RemoteRepository | None = None
    context: str = ""


@dataclass
class LocalMetadataResult:
    """Result of a local metadata lookup."""

    request: LocalMetadataRequest
    file: Path | None = None
    stale: bool = False


@dataclass(frozen=True)
class LocalMetadataRegistration:
    """Registration of metadata that was installed or downloaded."""

    metadata: Metadata
    repository: RemoteRepository | None = None
    contexts: tuple[str, ...] = ()
