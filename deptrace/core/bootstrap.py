"""
Application bootstrap for deptrace.

Registers the tracking services in the DI container. Hosts call this once
when wiring deptrace into their resolution engine, then resolve the
listener and wrap their collector and local repository factory.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .container import ServiceContainer, get_container
from .interfaces.logger import ILogger
from .models.config import TrackingConfig

if TYPE_CHECKING:
    from ..services.tracking import (
        TrackingDependencyCollector,
        TrackingLocalRepositoryManagerFactory,
    )
    from .interfaces.collector import IDependencyCollector
    from .interfaces.repository import ILocalRepositoryManagerFactory

_initialized = False


def bootstrap(config_path: Path | None = None, start_dir: str | None = None) -> ServiceContainer:
    """
    Bootstrap deptrace.

    Initializes the DI container with:
    - Logger configured from the logging section
    - Tracking configuration
    - One shared active-path stack, store, walker, formatter and listener

    Args:
        config_path: Explicit path to a config file
        start_dir: Directory to search for config from

    Returns:
        Initialized ServiceContainer
    """
    global _initialized

    container = get_container()

    if _initialized:
        return container

    _register_core_services(container, config_path, start_dir)
    _register_tracking_services(container)

    _initialized = True
    return container


def _register_core_services(
    container: ServiceContainer, config_path: Path | None, start_dir: str | None
) -> None:
    """Register logger and configuration."""
    from ..services.logging import DeptraceLogger
    from .settings import load_settings

    settings = load_settings(config_path=config_path, start_dir=start_dir)

    container.register_singleton(TrackingConfig, implementation=settings.tracking)

    container.register_singleton(
        ILogger,  # type: ignore[type-abstract]
        factory=lambda: DeptraceLogger.configure(settings.logging),
    )


def _register_tracking_services(container: ServiceContainer) -> None:
    """Register the tracking components, all sharing one active-path stack."""
    from ..services.tracking import (
        ActivePathStack,
        ProvenanceFormatter,
        TraceWalker,
        TrackingRepositoryListener,
        TrackingStore,
    )

    config = container.resolve(TrackingConfig)

    container.register_singleton(ActivePathStack, factory=ActivePathStack)
    container.register_singleton(
        TrackingStore,
        factory=lambda: TrackingStore(
            tracking_dir=config.tracking_dir,
            audit_log_name=config.audit_log_name,
            logger=container.resolve(ILogger),  # type: ignore[type-abstract]
        ),
    )
    container.register_singleton(
        TraceWalker,
        factory=lambda: TraceWalker(
            scope_search_depth=config.scope_search_depth,
            logger=container.resolve(ILogger),  # type: ignore[type-abstract]
        ),
    )
    container.register_singleton(ProvenanceFormatter, factory=ProvenanceFormatter)
    container.register_singleton(
        TrackingRepositoryListener,
        factory=lambda: TrackingRepositoryListener(
            stack=container.resolve(ActivePathStack),
            store=container.resolve(TrackingStore),
            walker=container.resolve(TraceWalker),
            formatter=container.resolve(ProvenanceFormatter),
            config=config,
            logger=container.resolve(ILogger),  # type: ignore[type-abstract]
        ),
    )


def tracking_collector(delegate: IDependencyCollector) -> TrackingDependencyCollector:
    """Wrap the engine's dependency collector around the shared active-path stack."""
    from ..services.tracking import ActivePathStack, TrackingDependencyCollector

    return TrackingDependencyCollector(delegate, bootstrap().resolve(ActivePathStack))


def tracking_local_repository_factory(
    delegate: ILocalRepositoryManagerFactory,
) -> TrackingLocalRepositoryManagerFactory:
    """Wrap the engine's local repository manager factory to track cache hits."""
    from ..services.tracking import (
        TrackingLocalRepositoryManagerFactory,
        TrackingRepositoryListener,
    )

    container = bootstrap()
    return TrackingLocalRepositoryManagerFactory(
        delegate,
        tracker=container.resolve(TrackingRepositoryListener),
        enabled=container.resolve(TrackingConfig).cache_hits,
        logger=container.resolve(ILogger),  # type: ignore[type-abstract]
    )


def reset() -> None:
    """
    Reset the application state.

    Useful for testing to ensure clean state between tests.
    """
    global _initialized
    ServiceContainer.reset()
    _initialized = False


def is_initialized() -> bool:
    """Check if the application has been bootstrapped."""
    return _initialized
