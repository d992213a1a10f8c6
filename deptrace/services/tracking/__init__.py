"""
Dependency provenance tracking.

Observes resolution events and records, for each artifact, the chain of
requests and graph nodes that led to it.
"""

from .formatter import AUDIT_SEPARATOR, ProvenanceFormatter
from .keys import derive_record_key, path_slug, requirer_key
from .listener import AuditLogStrategy, ProvenanceStrategy, TrackingRepositoryListener
from .local_repository import TrackingLocalRepositoryManager, TrackingLocalRepositoryManagerFactory
from .stack import ActivePathStack, TrackingDependencyCollector
from .store import TrackingStore
from .walker import UNKNOWN_SCOPE, TraceWalker

__all__ = [
    "AUDIT_SEPARATOR",
    "UNKNOWN_SCOPE",
    "ActivePathStack",
    "AuditLogStrategy",
    "ProvenanceFormatter",
    "ProvenanceStrategy",
    "TraceWalker",
    "TrackingDependencyCollector",
    "TrackingLocalRepositoryManager",
    "TrackingLocalRepositoryManagerFactory",
    "TrackingRepositoryListener",
    "TrackingStore",
    "derive_record_key",
    "path_slug",
    "requirer_key",
]
