"""
Shared pytest fixtures for deptrace tests.

This module provides:
- artifact/node builders with Maven-style coordinates
- FakeLocalRepositoryManager: an in-memory local repository using the
  default repository layout, backed by a tmp_path directory
- a listener wired to a fresh active-path stack and a NullLogger
- RecordingLogger: keeps every line with the context it was bound to
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from deptrace.core.bootstrap import reset
from deptrace.core.dto.events import RepositorySystemSession
from deptrace.core.dto.local import (
    LocalArtifactRegistration,
    LocalArtifactRequest,
    LocalArtifactResult,
    LocalMetadataRegistration,
    LocalMetadataRequest,
    LocalMetadataResult,
)
from deptrace.core.interfaces.logger import ILogger
from deptrace.core.models.artifact import (
    Artifact,
    Dependency,
    DependencyNode,
    LocalRepository,
    Metadata,
    RemoteRepository,
)
from deptrace.services.logging import NullLogger
from deptrace.services.tracking import ActivePathStack, TrackingRepositoryListener

CENTRAL = RemoteRepository(id="central", url="https://repo.example/central")


class RecordingLogger(ILogger):
    """Logger keeping (level, message, context) for every line, shared across binds."""

    def __init__(self, records: list | None = None, context: dict[str, Any] | None = None) -> None:
        self.records: list[tuple[int, str, dict[str, Any]]] = records if records is not None else []
        self.context = dict(context or {})

    def log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        self.records.append((level, message % args if args else message, self.context))

    def bind(self, **context: Any) -> RecordingLogger:
        return RecordingLogger(self.records, {**self.context, **context})

    def messages(self, level: int) -> list[str]:
        return [message for lvl, message, _ in self.records if lvl == level]


def make_artifact(coords: str) -> Artifact:
    """Build an artifact from ``group:artifact[:ext[:classifier]]:version``."""
    parts = coords.split(":")
    if len(parts) == 3:
        return Artifact(group_id=parts[0], artifact_id=parts[1], version=parts[2])
    if len(parts) == 4:
        return Artifact(
            group_id=parts[0], artifact_id=parts[1], extension=parts[2], version=parts[3]
        )
    return Artifact(
        group_id=parts[0],
        artifact_id=parts[1],
        extension=parts[2],
        classifier=parts[3],
        version=parts[4],
    )


def make_node(coords: str, context: str = "project", scope: str | None = None) -> DependencyNode:
    """Build a graph node, optionally reached through a scoped dependency edge."""
    artifact = make_artifact(coords)
    dependency = Dependency(artifact=artifact, scope=scope) if scope is not None else None
    return DependencyNode(artifact=artifact, request_context=context, dependency=dependency)


class FakeLocalRepositoryManager:
    """Local repository manager using the default layout under ``basedir``."""

    def __init__(self, basedir: Path) -> None:
        self._repository = LocalRepository(basedir=basedir)
        self.added: list[LocalArtifactRegistration] = []

    @property
    def repository(self) -> LocalRepository:
        return self._repository

    def path_for_local_artifact(self, artifact: Artifact) -> str:
        group = artifact.group_id.replace(".", "/")
        classifier = f"-{artifact.classifier}" if artifact.classifier else ""
        name = f"{artifact.artifact_id}-{artifact.version}{classifier}.{artifact.extension}"
        return f"{group}/{artifact.artifact_id}/{artifact.version}/{name}"

    def path_for_remote_artifact(self, artifact, repository, context) -> str:
        return self.path_for_local_artifact(artifact)

    def path_for_local_metadata(self, metadata: Metadata) -> str:
        parts = [p for p in (metadata.group_id.replace(".", "/"), metadata.artifact_id, metadata.version) if p]
        return "/".join([*parts, "maven-metadata-local.xml"])

    def path_for_remote_metadata(self, metadata, repository, context) -> str:
        parts = [p for p in (metadata.group_id.replace(".", "/"), metadata.artifact_id, metadata.version) if p]
        return "/".join([*parts, f"maven-metadata-{repository.id}.xml"])

    def find_artifact(self, session, request: LocalArtifactRequest) -> LocalArtifactResult:
        path = self._repository.basedir / self.path_for_local_artifact(request.artifact)
        if path.is_file():
            return LocalArtifactResult(request=request, file=path, available=True)
        return LocalArtifactResult(request=request)

    def add_artifact(self, session, registration: LocalArtifactRegistration) -> None:
        self.added.append(registration)

    def find_metadata(self, session, request: LocalMetadataRequest) -> LocalMetadataResult:
        return LocalMetadataResult(request=request)

    def add_metadata(self, session, registration: LocalMetadataRegistration) -> None:
        pass

    def install(self, artifact: Artifact, content: str = "content") -> Path:
        """Put a file for ``artifact`` into the repository and return its path."""
        path = self._repository.basedir / self.path_for_local_artifact(artifact)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path


@pytest.fixture(autouse=True)
def reset_container():
    """Give each test an unbootstrapped container."""
    reset()
    yield
    reset()


@pytest.fixture
def local_repo(tmp_path: Path) -> FakeLocalRepositoryManager:
    return FakeLocalRepositoryManager(tmp_path / "repository")


@pytest.fixture
def session(local_repo: FakeLocalRepositoryManager) -> RepositorySystemSession:
    return RepositorySystemSession(local_repository_manager=local_repo)


@pytest.fixture
def stack() -> ActivePathStack:
    return ActivePathStack()


@pytest.fixture
def listener(stack: ActivePathStack) -> TrackingRepositoryListener:
    return TrackingRepositoryListener(stack, logger=NullLogger())
