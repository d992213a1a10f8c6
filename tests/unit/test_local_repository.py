"""Unit tests for the cache-hit interceptor."""

import logging
from unittest.mock import MagicMock

from deptrace.core.dto.local import (
    LocalArtifactRegistration,
    LocalArtifactRequest,
    LocalMetadataRequest,
)
from deptrace.core.interfaces.repository import ILocalRepositoryManager
from deptrace.core.models.artifact import Metadata
from deptrace.services.logging import NullLogger
from deptrace.services.tracking import (
    TrackingLocalRepositoryManager,
    TrackingLocalRepositoryManagerFactory,
)
from tests.conftest import CENTRAL, RecordingLogger, make_artifact, make_node

LIB = make_artifact("g:lib:1")


def wrap(local_repo, tracker=None, logger=None) -> TrackingLocalRepositoryManager:
    return TrackingLocalRepositoryManager(
        local_repo, tracker or MagicMock(), logger=logger or NullLogger()
    )


class TestForwarding:
    """The wrapper answers exactly like the wrapped manager."""

    def test_paths_and_repository(self, local_repo):
        manager = wrap(local_repo)
        metadata = Metadata(group_id="g", artifact_id="lib")

        assert manager.repository == local_repo.repository
        assert manager.path_for_local_artifact(LIB) == local_repo.path_for_local_artifact(LIB)
        assert manager.path_for_remote_artifact(LIB, CENTRAL, "") == (
            local_repo.path_for_remote_artifact(LIB, CENTRAL, "")
        )
        assert manager.path_for_local_metadata(metadata) == (
            local_repo.path_for_local_metadata(metadata)
        )
        assert manager.path_for_remote_metadata(metadata, CENTRAL, "") == (
            local_repo.path_for_remote_metadata(metadata, CENTRAL, "")
        )

    def test_registrations_reach_delegate(self, local_repo, session):
        registration = LocalArtifactRegistration(artifact=LIB, repository=CENTRAL)

        wrap(local_repo).add_artifact(session, registration)

        assert local_repo.added == [registration]

    def test_metadata_lookup_is_not_tracked(self, local_repo, session):
        tracker = MagicMock()
        request = LocalMetadataRequest(metadata=Metadata(group_id="g"))

        result = wrap(local_repo, tracker).find_metadata(session, request)

        assert result.request is request
        tracker.track_dependencies.assert_not_called()

    def test_satisfies_protocol(self, local_repo):
        assert isinstance(wrap(local_repo), ILocalRepositoryManager)


class TestCacheHits:
    """Tests for tracking on local lookups."""

    def test_hit_tracks_artifact_directory(self, local_repo, session):
        tracker = MagicMock()
        file = local_repo.install(LIB)

        result = wrap(local_repo, tracker).find_artifact(session, LocalArtifactRequest(artifact=LIB))

        assert result.file == file
        tracker.track_dependencies.assert_called_once_with(file.parent, LIB)

    def test_miss_is_not_tracked(self, local_repo, session):
        tracker = MagicMock()

        result = wrap(local_repo, tracker).find_artifact(session, LocalArtifactRequest(artifact=LIB))

        assert result.file is None
        tracker.track_dependencies.assert_not_called()

    def test_tracker_failure_is_logged(self, local_repo, session):
        tracker = MagicMock()
        tracker.track_dependencies.side_effect = RuntimeError("boom")
        logger = RecordingLogger()
        file = local_repo.install(LIB)

        result = wrap(local_repo, tracker, logger).find_artifact(
            session, LocalArtifactRequest(artifact=LIB)
        )

        assert result.file == file
        [(level, message, context)] = logger.records
        assert level == logging.ERROR
        assert message == "Cache-hit tracking failed"
        assert context == {"artifact": LIB, "directory": file.parent}

    def test_end_to_end_with_listener(self, local_repo, session, listener, stack):
        file = local_repo.install(LIB)
        manager = wrap(local_repo, listener)

        with stack.descend(make_node("g:app:1")):
            manager.find_artifact(session, LocalArtifactRequest(artifact=LIB))

        record = file.parent / ".tracking" / "g_app_jar_1.requirer.dep"
        assert record.read_text() == "g:lib:jar:1\n -> g:app:jar:1 (context: project)\n"


class TestFactory:
    """Tests for the decorating factory."""

    def test_wraps_new_managers(self, local_repo, session):
        delegate = MagicMock()
        delegate.new_instance.return_value = local_repo
        factory = TrackingLocalRepositoryManagerFactory(delegate, MagicMock(), logger=NullLogger())

        manager = factory.new_instance(session, local_repo.repository)

        assert isinstance(manager, TrackingLocalRepositoryManager)
        assert manager.delegate is local_repo
        delegate.new_instance.assert_called_once_with(session, local_repo.repository)

    def test_disabled_returns_delegate_manager(self, local_repo, session):
        delegate = MagicMock()
        delegate.new_instance.return_value = local_repo
        factory = TrackingLocalRepositoryManagerFactory(delegate, MagicMock(), enabled=False)

        assert factory.new_instance(session, local_repo.repository) is local_repo
