"""
Request-trace frame models.

Each link of a request trace carries one payload. The payloads deptrace
understands form a closed tagged union; anything else found on a trace is
elided by the walker.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import Field

from .artifact import Artifact, Dependency, DependencyNode, RemoteRepository
from .base import ImmutableModel


class DescriptorRequest(ImmutableModel):
    """Reading the descriptor (pom) of an artifact."""

    kind: Literal["descriptor"] = "descriptor"
    artifact: Artifact
    request_context: str = ""
    repositories: list[RemoteRepository] = Field(default_factory=list)


class CollectRequest(ImmutableModel):
    """Collecting the transitive dependencies of a root."""

    kind: Literal["collect"] = "collect"
    root: Dependency | None = None
    root_artifact: Artifact | None = None
    dependencies: list[Dependency] = Field(default_factory=list)
    repositories: list[RemoteRepository] = Field(default_factory=list)
    request_context: str = ""


class CollectStepContext(ImmutableModel):
    """One step of dependency collection, with the engine's recorded path.

    ``path`` runs from the collection root to the parent of ``node``.
    """

    kind: Literal["collect_step"] = "collect_step"
    path: list[DependencyNode] = Field(default_factory=list)
    node: DependencyNode | None = None
    context: str = ""


class ArtifactFetchRequest(ImmutableModel):
    """Resolving (and possibly downloading) an artifact file."""

    kind: Literal["fetch"] = "fetch"
    artifact: Artifact
    repositories: list[RemoteRepository] = Field(default_factory=list)
    request_context: str = ""


class DependencyRequest(ImmutableModel):
    """Resolving the files of an already collected graph."""

    kind: Literal["dependency_request"] = "dependency_request"
    root: DependencyNode | None = None


class PluginReference(ImmutableModel):
    """A build plugin being resolved."""

    kind: Literal["plugin"] = "plugin"
    group_id: str
    artifact_id: str
    version: str = ""
    declaring_model_id: str | None = None

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class ModelBuildRequest(ImmutableModel):
    """Building the effective model of a project file."""

    kind: Literal["model_build"] = "model_build"
    pom_file: Path | None = None
    model_source_location: str | None = None

    @property
    def location(self) -> str:
        if self.model_source_location:
            return self.model_source_location
        if self.pom_file is not None:
            return str(self.pom_file)
        return "?"

    @property
    def source_file(self) -> Path | None:
        """The project file this model was built from, when one is known."""
        if self.pom_file is not None:
            return self.pom_file
        if self.model_source_location and Path(self.model_source_location).is_absolute():
            return Path(self.model_source_location)
        return None


TraceFrame = Annotated[
    Union[
        DescriptorRequest,
        CollectRequest,
        CollectStepContext,
        ArtifactFetchRequest,
        DependencyRequest,
        PluginReference,
        ModelBuildRequest,
    ],
    Field(discriminator="kind"),
]


class ClassifiedFrame(ImmutableModel):
    """A recognized frame with what the walker learned about it.

    Attributes:
        frame: The typed payload
        depth: Position on the trace, 0 being the link the event carried
        scope: Declared scope of the edge being read (descriptor frames only)
    """

    frame: TraceFrame
    depth: Annotated[int, Field(ge=0)]
    scope: str | None = None

    @property
    def kind(self) -> str:
        return self.frame.kind


class ClassifiedTrace(ImmutableModel):
    """All recognized frames of one trace, innermost first."""

    frames: list[ClassifiedFrame] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.frames

    @property
    def repositories(self) -> list[RemoteRepository]:
        """Remote repositories configured along the trace, deduplicated by id."""
        seen: set[str] = set()
        result = []
        for classified in self.frames:
            frame = classified.frame
            if not isinstance(frame, (ArtifactFetchRequest, CollectRequest, DescriptorRequest)):
                continue
            for repo in frame.repositories:
                if repo.id not in seen:
                    seen.add(repo.id)
                    result.append(repo)
        return result
