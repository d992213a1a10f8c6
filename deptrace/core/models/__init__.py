"""
Pydantic models for deptrace.

This package provides typed, validated models for all deptrace data structures.
All models use Pydantic v2 with strict validation.
"""

from .artifact import (
    Artifact,
    ArtifactRepository,
    Dependency,
    DependencyNode,
    LocalRepository,
    Metadata,
    RemoteRepository,
    WorkspaceRepository,
)
from .base import ImmutableModel
from .config import DeptraceConfig, LoggingConfig, TrackingConfig
from .provenance import RecordKey, RecordKind, WriteResult, WriteStatus
from .trace import (
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

__all__ = [
    "Artifact",
    "ArtifactFetchRequest",
    "ArtifactRepository",
    "ClassifiedFrame",
    "ClassifiedTrace",
    "CollectRequest",
    "CollectStepContext",
    "Dependency",
    "DependencyNode",
    "DependencyRequest",
    "DeptraceConfig",
    "DescriptorRequest",
    "ImmutableModel",
    "LocalRepository",
    "LoggingConfig",
    "Metadata",
    "ModelBuildRequest",
    "PluginReference",
    "RecordKey",
    "RecordKind",
    "RemoteRepository",
    "TraceFrame",
    "TrackingConfig",
    "WorkspaceRepository",
    "WriteResult",
    "WriteStatus",
]
