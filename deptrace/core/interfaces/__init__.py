"""
Interfaces for deptrace collaborators and services.
"""

from .collector import IDependencyCollector
from .logger import ILogger
from .repository import ILocalRepositoryManager, ILocalRepositoryManagerFactory
from .tracking import IDependencyTracker

__all__ = [
    "IDependencyCollector",
    "IDependencyTracker",
    "ILocalRepositoryManager",
    "ILocalRepositoryManagerFactory",
    "ILogger",
]
