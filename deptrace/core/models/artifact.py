"""
Artifact domain models.

Identity values produced by the resolution engine: artifacts, metadata,
dependency edges, graph nodes and the repositories they come from. deptrace
only reads and formats these.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator

from .base import ImmutableModel

Coordinate = Annotated[str, Field(min_length=1)]


class Artifact(ImmutableModel):
    """Immutable artifact identity: group, id, extension, classifier, version.

    Equality is by identity tuple. An empty classifier is normalized to None
    so that ``g:a:jar:1.0`` never renders with an empty segment.
    """

    group_id: Coordinate
    artifact_id: Coordinate
    extension: str = "jar"
    classifier: str | None = None
    version: Coordinate

    @field_validator("classifier", mode="before")
    @classmethod
    def normalize_classifier(cls, v: str | None) -> str | None:
        """Treat an empty classifier as absent."""
        if v == "":
            return None
        return v

    def __str__(self) -> str:
        classifier = f":{self.classifier}" if self.classifier else ""
        return f"{self.group_id}:{self.artifact_id}:{self.extension}{classifier}:{self.version}"

    @property
    def key_name(self) -> str:
        """Identity with colons replaced, usable as a file name."""
        return str(self).replace(":", "_")


class Metadata(ImmutableModel):
    """Repository metadata identity (e.g. maven-metadata.xml of a group)."""

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    type: str = "maven-metadata.xml"

    def __str__(self) -> str:
        coords = ":".join(p for p in (self.group_id, self.artifact_id, self.version) if p)
        if coords and self.type:
            return f"{coords}/{self.type}"
        return coords or self.type


class Dependency(ImmutableModel):
    """A declared dependency edge: the target artifact plus scope and optionality."""

    artifact: Artifact
    scope: str = ""
    optional: bool = False

    @property
    def scope_label(self) -> str:
        """Scope as shown in descriptor lines, e.g. ``compile/optional``."""
        return f"{self.scope}/optional" if self.optional else self.scope

    def __str__(self) -> str:
        return f"{self.artifact} ({self.scope}{'?' if self.optional else ''})"


class DependencyNode(ImmutableModel):
    """One vertex of the resolution graph.

    Owned by the resolution engine; deptrace never mutates nodes.
    """

    artifact: Artifact
    request_context: str = ""
    dependency: Dependency | None = None
    children: list[DependencyNode] = Field(default_factory=list)

    def __str__(self) -> str:
        if self.dependency is not None:
            return str(self.dependency)
        return str(self.artifact)


class RemoteRepository(ImmutableModel):
    """A remote repository configured for a request."""

    kind: Literal["remote"] = "remote"
    id: Coordinate
    url: str
    content_type: str = "default"

    def __str__(self) -> str:
        return f"{self.id} ({self.url}, {self.content_type})"


class LocalRepository(ImmutableModel):
    """The on-disk local artifact cache."""

    kind: Literal["local"] = "local"
    basedir: Path
    content_type: str = "default"

    @property
    def id(self) -> str:
        return "local"

    def __str__(self) -> str:
        return f"{self.basedir} ({self.content_type})"


class WorkspaceRepository(ImmutableModel):
    """In-memory pseudo-repository for artifacts built in the current session.

    Resolutions served from it are never tracked.
    """

    kind: Literal["workspace"] = "workspace"
    id: str = "workspace"
    content_type: str = "workspace"

    def __str__(self) -> str:
        return f"{self.id} ({self.content_type})"


ArtifactRepository = RemoteRepository | LocalRepository | WorkspaceRepository
