"""Unit tests for configuration loading and bootstrap wiring."""

import pytest

from deptrace.config import config_get, config_set, load_config, save_config
from deptrace.core.bootstrap import (
    bootstrap,
    is_initialized,
    tracking_collector,
    tracking_local_repository_factory,
)
from deptrace.core.exceptions import ConfigFileError, ConfigValidationError
from deptrace.core.models.config import DeptraceConfig, TrackingConfig
from deptrace.core.settings import ConfigFile, DeptraceSettings, load_settings, read_config_file
from deptrace.services.tracking import (
    ActivePathStack,
    TrackingLocalRepositoryManager,
    TrackingRepositoryListener,
)


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A project directory with no config, and file logging off."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DEPTRACE_LOGGING__FILE", "false")
    return tmp_path


def write_config(project, text: str) -> None:
    config_dir = project / ".deptrace"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.toml").write_text(text)


class TestLoading:
    """Tests for settings sources."""

    def test_defaults(self, project):
        settings = load_settings(start_dir=str(project))

        assert settings.tracking == TrackingConfig()
        assert settings.tracking.scope_search_depth == 64
        assert settings.logging.level == "warning"

    def test_toml_file(self, project):
        write_config(project, '[tracking]\naudit_log = false\ntracking_dir = ".prov"\n')

        config = load_config(start_dir=str(project))

        assert config["tracking"]["audit_log"] is False
        assert config["tracking"]["tracking_dir"] == ".prov"
        assert config["tracking"]["provenance"] is True
        assert config["_config_file"].endswith("config.toml")

    def test_pyproject_section(self, project):
        (project / "pyproject.toml").write_text("[tool.deptrace.tracking]\ncache_hits = false\n")
        assert config_get("tracking.cache_hits") is False

    def test_environment_overrides_file(self, project, monkeypatch):
        write_config(project, "[tracking]\ncache_hits = true\n")
        monkeypatch.setenv("DEPTRACE_TRACKING__CACHE_HITS", "false")

        assert load_settings(start_dir=str(project)).tracking.cache_hits is False

    def test_broken_file_falls_back_to_defaults(self, project):
        write_config(project, "[tracking\n")

        config = load_config(start_dir=str(project))

        assert config["tracking"] == TrackingConfig().model_dump()
        assert "_config_error" in config

    def test_settings_from_config_file(self, project):
        config_file = ConfigFile(path=project / "x.toml", data={"logging": {"level": "error"}})

        settings = DeptraceSettings.from_config_file(config_file)

        assert settings.logging.level == "error"
        assert settings.to_dict()["_config_file"] == str(project / "x.toml")
        assert DeptraceSettings.config_file == ConfigFile()

    def test_read_missing_file(self, project):
        config_file = read_config_file(project / "absent.toml")
        assert config_file.data == {}
        assert config_file.error is None

    def test_config_model_get(self):
        config = DeptraceConfig.from_dict({"tracking": {"audit_log_name": "audit.txt"}})

        assert config.get("tracking.audit_log_name") == "audit.txt"
        assert config.get("tracking.nope", "x") == "x"

    def test_path_like_names_rejected(self):
        with pytest.raises(ValueError):
            TrackingConfig(tracking_dir="a/b")


class TestConfigSet:
    """Tests for writing config values."""

    def test_round_trip(self, project):
        path, value = config_set("tracking.scope_search_depth", "16")

        assert value == 16
        assert path == project / ".deptrace" / "config.toml"
        assert "scope_search_depth = 16" in path.read_text()
        assert config_get("tracking.scope_search_depth") == 16

    def test_default_values_not_written(self, project):
        config_set("tracking.audit_log", "false")
        path, _ = config_set("logging.level", "debug")

        text = path.read_text()
        assert "audit_log = false" in text
        assert 'level = "debug"' in text
        assert "provenance" not in text

    def test_environment_overrides_not_persisted(self, project, monkeypatch):
        """Only the file being edited is written back, never the merged settings."""
        monkeypatch.setenv("DEPTRACE_TRACKING__CACHE_HITS", "false")

        path, _ = config_set("logging.level", "debug")

        text = path.read_text()
        assert "cache_hits" not in text
        assert "file = " not in text
        assert 'level = "debug"' in text

    def test_existing_file_values_kept(self, project):
        write_config(project, "[tracking]\nprovenance = false\n")

        path, _ = config_set("tracking.audit_log", "false")

        text = path.read_text()
        assert "provenance = false" in text
        assert "audit_log = false" in text

    def test_string_values_escaped(self, project):
        path, _ = config_set("tracking.audit_log_name", 'say "hi".txt')

        assert 'audit_log_name = "say \\"hi\\".txt"' in path.read_text()
        assert config_get("tracking.audit_log_name") == 'say "hi".txt'

    def test_broken_file_not_overwritten(self, project):
        write_config(project, "[tracking\n")

        with pytest.raises(ConfigFileError):
            config_set("tracking.audit_log", "false")

        assert (project / ".deptrace" / "config.toml").read_text() == "[tracking\n"

    def test_unwritable_file(self, project):
        with pytest.raises(ConfigFileError):
            save_config(
                {"tracking": {"audit_log": False}}, project / "absent" / "config.toml"
            )

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("tracking.bogus", "1"),
            ("tracking.audit_log", "maybe"),
            ("tracking.scope_search_depth", "0"),
            ("tracking.scope_search_depth", "many"),
            ("logging.level", "loud"),
            ("tracking.tracking_dir", "a/b"),
        ],
    )
    def test_invalid_values(self, project, key, value):
        with pytest.raises(ConfigValidationError):
            config_set(key, value)


class TestBootstrap:
    """Tests for container wiring."""

    def test_components_share_one_stack(self, project):
        container = bootstrap(start_dir=str(project))
        listener = container.resolve(TrackingRepositoryListener)

        collector = tracking_collector(object())

        assert is_initialized()
        assert listener.stack is container.resolve(ActivePathStack)
        assert collector.stack is listener.stack
        assert container.resolve(TrackingRepositoryListener) is listener

    def test_config_reaches_listener(self, project):
        write_config(project, "[tracking]\nprovenance = false\n")

        listener = bootstrap(start_dir=str(project)).resolve(TrackingRepositoryListener)

        assert listener.config.provenance is False

    def test_cache_hits_enabled(self, project, local_repo, session):
        class Factory:
            def new_instance(self, session, repository):
                return local_repo

        bootstrap(start_dir=str(project))
        manager = tracking_local_repository_factory(Factory()).new_instance(
            session, local_repo.repository
        )
        assert isinstance(manager, TrackingLocalRepositoryManager)

    def test_cache_hits_disabled(self, project, monkeypatch, local_repo, session):
        class Factory:
            def new_instance(self, session, repository):
                return local_repo

        monkeypatch.setenv("DEPTRACE_TRACKING__CACHE_HITS", "false")
        bootstrap(start_dir=str(project))

        manager = tracking_local_repository_factory(Factory()).new_instance(
            session, local_repo.repository
        )
        assert manager is local_repo
