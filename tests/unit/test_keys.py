"""Unit tests for record key derivation."""

from pathlib import Path

from deptrace.core.models.trace import (
    ArtifactFetchRequest,
    ClassifiedFrame,
    ClassifiedTrace,
    CollectStepContext,
    DependencyRequest,
    ModelBuildRequest,
    PluginReference,
)
from deptrace.services.tracking import derive_record_key, path_slug, requirer_key
from tests.conftest import make_artifact, make_node


def classified(*frames) -> ClassifiedTrace:
    return ClassifiedTrace(
        frames=[ClassifiedFrame(frame=f, depth=i) for i, f in enumerate(frames)]
    )


PLUGIN = PluginReference(group_id="org.plugins", artifact_id="compiler", version="3.1")
STEP = CollectStepContext(
    path=[make_node("g:root:1"), make_node("g:mid:1")],
    node=make_node("g:leaf:1"),
    context="compile",
)


class TestDeriveRecordKey:
    """Tests for the key priority order."""

    def test_collect_step_root_wins(self):
        key = derive_record_key(classified(STEP, PLUGIN))
        assert key is not None
        assert key.filename == "g_root_jar_1.dep"

    def test_priority_ignores_frame_order(self):
        request = DependencyRequest(root=make_node("g:app:1"))
        key = derive_record_key(classified(request, PLUGIN, STEP))
        assert key is not None
        assert key.filename == "g_root_jar_1.dep"

    def test_first_step_is_used(self):
        outer = CollectStepContext(path=[make_node("g:outer:1")], node=make_node("g:root:1"))
        key = derive_record_key(classified(STEP, outer))
        assert key is not None
        assert key.filename == "g_root_jar_1.dep"

    def test_missing_outcome_uses_miss(self):
        key = derive_record_key(classified(STEP), missing=True)
        assert key is not None
        assert key.filename == "g_root_jar_1.miss"

    def test_empty_collect_step_path_yields_no_key(self):
        step = CollectStepContext(path=[], node=make_node("g:leaf:1"))
        assert derive_record_key(classified(step, PLUGIN)) is None

    def test_plugin_key(self):
        key = derive_record_key(classified(PLUGIN, DependencyRequest(root=make_node("g:app:1"))))
        assert key is not None
        assert key.filename == "org.plugins_compiler_3.1.plugin"

    def test_plugin_kind_is_kept_when_missing(self):
        key = derive_record_key(classified(PLUGIN), missing=True)
        assert key is not None
        assert key.kind == "plugin"

    def test_dependency_request_root(self):
        key = derive_record_key(classified(DependencyRequest(root=make_node("g:app:2"))))
        assert key is not None
        assert key.filename == "g_app_jar_2.dep"

    def test_dependency_request_without_root_falls_through(self):
        key = derive_record_key(
            classified(DependencyRequest(), ModelBuildRequest(pom_file=Path("/work/app/pom.xml")))
        )
        assert key is not None
        assert key.filename == "work_app_pom.xml.dep"

    def test_model_build_without_source_file(self):
        model = ModelBuildRequest(model_source_location="org.example:parent:1.0")
        assert derive_record_key(classified(model)) is None

    def test_nothing_classifiable(self):
        fetch = ArtifactFetchRequest(artifact=make_artifact("g:a:1"))
        assert derive_record_key(classified(fetch)) is None
        assert derive_record_key(ClassifiedTrace()) is None


class TestHelpers:
    """Tests for path slugs and requirer keys."""

    def test_path_slug_strips_leading_separators(self):
        assert path_slug("/home/dev/project/pom.xml") == "home_dev_project_pom.xml"

    def test_path_slug_replaces_colons_and_backslashes(self):
        assert path_slug("C:\\work\\pom.xml") == "C__work_pom.xml"

    def test_requirer_key(self):
        key = requirer_key(make_node("g:mid:1.5"))
        assert key is not None
        assert key.filename == "g_mid_jar_1.5.requirer.dep"
        assert key.kind == "requirer"
        assert requirer_key(None) is None
