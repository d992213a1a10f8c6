"""
Resolution-engine event objects.

These carry live engine objects (trace links, sessions) rather than plain
values, so they are dataclasses instead of validated models. A trace and the
event holding it live only for the duration of one listener call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..interfaces.repository import ILocalRepositoryManager
    from ..models.artifact import Artifact, ArtifactRepository, Metadata


@dataclass(eq=False)
class RequestTrace:
    """One link of a parent-linked request trace.

    ``data`` is whatever the engine attached at that level; walking
    ``parent`` goes from the innermost operation outward.
    """

    data: Any = None
    parent: RequestTrace | None = field(default=None, repr=False)

    def child(self, data: Any) -> RequestTrace:
        """Create a nested link below this one."""
        return RequestTrace(data=data, parent=self)

    @staticmethod
    def new_child(parent: RequestTrace | None, data: Any) -> RequestTrace:
        """Create a link below ``parent``, or a new root link when there is none."""
        if parent is None:
            return RequestTrace(data=data)
        return parent.child(data)

    @classmethod
    def from_outermost(cls, *data: Any) -> RequestTrace:
        """Build a chain from outermost to innermost payload, returning the innermost link."""
        if not data:
            raise ValueError("at least one payload is required")
        trace = cls(data=data[0])
        for item in data[1:]:
            trace = trace.child(item)
        return trace


class EventType(str, Enum):
    """Repository event kinds fired by the resolution engine."""

    ARTIFACT_RESOLVING = "artifact-resolving"
    ARTIFACT_RESOLVED = "artifact-resolved"
    ARTIFACT_DOWNLOADING = "artifact-downloading"
    ARTIFACT_DOWNLOADED = "artifact-downloaded"
    METADATA_RESOLVING = "metadata-resolving"
    METADATA_RESOLVED = "metadata-resolved"
    METADATA_DOWNLOADING = "metadata-downloading"
    METADATA_DOWNLOADED = "metadata-downloaded"


@dataclass
class RepositorySystemSession:
    """The slice of the engine session deptrace reads."""

    local_repository_manager: ILocalRepositoryManager | None = None
    offline: bool = False
    config_properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RepositoryEvent:
    """A resolution event.

    Attributes:
        type: What happened
        session: Session the event belongs to
        trace: Innermost request-trace link active when the event fired
        artifact: Artifact the event is about (artifact events)
        metadata: Metadata the event is about (metadata events)
        file: Local file of the artifact/metadata, if any
        repository: Repository the file came from, if any
        exceptions: Failures the engine hit, if any
    """

    type: EventType
    session: RepositorySystemSession | None = None
    trace: RequestTrace | None = None
    artifact: Artifact | None = None
    metadata: Metadata | None = None
    file: Path | None = None
    repository: ArtifactRepository | None = None
    exceptions: list[Exception] = field(default_factory=list)

    @property
    def subject(self) -> str:
        """Printable identity of the artifact or metadata."""
        if self.artifact is not None:
            return str(self.artifact)
        if self.metadata is not None:
            return str(self.metadata)
        return "?"

    @property
    def repository_label(self) -> str:
        return "?" if self.repository is None else str(self.repository)
