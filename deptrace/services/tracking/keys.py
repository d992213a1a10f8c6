"""
Record key derivation.

Decides the stable name a provenance record is stored under. Keys are kind
qualified (.dep, .miss, .plugin, .requirer.dep) so records from different
outcomes and from the two recording strategies never share a file.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from ...core.models.artifact import DependencyNode
from ...core.models.provenance import RecordKey
from ...core.models.trace import (
    ClassifiedTrace,
    CollectStepContext,
    DependencyRequest,
    ModelBuildRequest,
    PluginReference,
)

_SEPARATORS = "".join(sorted({"/", "\\", os.sep, os.altsep or "/"}))
_SLUG_PATTERN = re.compile(f"[{re.escape(_SEPARATORS)}:]")


def path_slug(path: Path | str) -> str:
    """
    Turn a file path into a single file-name component.

    Leading separators are stripped, then separators and colons become
    underscores: ``/work/app/pom.xml`` -> ``work_app_pom.xml``.
    """
    return _SLUG_PATTERN.sub("_", str(path).lstrip(_SEPARATORS))


def requirer_key(node: DependencyNode | None) -> RecordKey | None:
    """Key for a record named after the node that directly required an artifact."""
    if node is None:
        return None
    return RecordKey(name=node.artifact.key_name, kind="requirer")


def derive_record_key(trace: ClassifiedTrace, missing: bool = False) -> RecordKey | None:
    """
    Derive the record key for a classified trace.

    Priority:
        1. collect step with a recorded path: the path's root artifact
        2. plugin resolution: ``group_artifact_version`` with a .plugin kind
        3. dependency request: its root node's artifact
        4. model build with a known source file: a slug of that path
        5. otherwise no key

    A collect step whose path is empty means no record can be derived.

    Args:
        trace: Fully classified trace
        missing: Whether the artifact has no local file (.miss instead of .dep)

    Returns:
        The record key, or None when no record should be written
    """
    kind = "miss" if missing else "dep"

    step: CollectStepContext | None = None
    plugin: PluginReference | None = None
    request: DependencyRequest | None = None
    sources: list[Path] = []
    for classified in trace.frames:
        frame = classified.frame
        if isinstance(frame, CollectStepContext):
            if step is None:
                step = frame
        elif isinstance(frame, PluginReference):
            if plugin is None:
                plugin = frame
        elif isinstance(frame, DependencyRequest):
            if request is None:
                request = frame
        elif isinstance(frame, ModelBuildRequest) and frame.source_file is not None:
            sources.append(frame.source_file)

    if step is not None:
        if not step.path:
            return None
        return RecordKey(name=step.path[0].artifact.key_name, kind=kind)

    if plugin is not None:
        name = f"{plugin.group_id}_{plugin.artifact_id}_{plugin.version}"
        return RecordKey(name=name, kind="plugin")

    if request is not None and request.root is not None:
        return RecordKey(name=request.root.artifact.key_name, kind=kind)

    for source in sources:
        slug = path_slug(source)
        if slug:
            return RecordKey(name=slug, kind=kind)

    return None
