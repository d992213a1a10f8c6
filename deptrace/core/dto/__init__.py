"""
Engine-facing data transfer objects.

Events, request traces and local repository requests exchanged with the
resolution engine.
"""

from .events import EventType, RepositoryEvent, RepositorySystemSession, RequestTrace
from .local import (
    LocalArtifactRegistration,
    LocalArtifactRequest,
    LocalArtifactResult,
    LocalMetadataRegistration,
    LocalMetadataRequest,
    LocalMetadataResult,
)

__all__ = [
    "EventType",
    "LocalArtifactRegistration",
    "LocalArtifactRequest",
    "LocalArtifactResult",
    "LocalMetadataRegistration",
    "LocalMetadataRequest",
    "LocalMetadataResult",
    "RepositoryEvent",
    "RepositorySystemSession",
    "RequestTrace",
]
