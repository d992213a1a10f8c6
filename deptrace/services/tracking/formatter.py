"""
Provenance formatter.

Renders classified trace frames and active-path snapshots as indented text.
Each frame that widens the context (descriptor read, collect request, model
build, plugin resolution) indents everything after it by one level; frames
carrying leaf data (artifact fetch, collect step) render the path beneath
them without changing the level.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

from ...core.models.artifact import Artifact, DependencyNode, RemoteRepository
from ...core.models.trace import (
    ArtifactFetchRequest,
    ClassifiedFrame,
    CollectRequest,
    CollectStepContext,
    DependencyRequest,
    DescriptorRequest,
    ModelBuildRequest,
    PluginReference,
)

AUDIT_SEPARATOR = "~~~"


class ProvenanceFormatter:
    """Text renderer for audit-log blocks and provenance records."""

    INDENT: ClassVar[str] = "  "
    ARROW: ClassVar[str] = " -> "

    def indent(self, level: int) -> str:
        return self.INDENT * level

    def render_frames(
        self,
        frames: Sequence[ClassifiedFrame],
        stack: Sequence[DependencyNode] = (),
        *,
        fetch_verb: str = "Resolved",
        repository_label: str | None = None,
    ) -> list[str]:
        """
        Render classified frames, innermost first.

        Args:
            frames: Frames from the trace walker
            stack: Active-path snapshot rendered beneath artifact fetch frames
            fetch_verb: Verb for artifact fetch lines ("Downloaded", "Resolved")
            repository_label: Appended to descriptor and fetch lines when given

        Returns:
            Lines without trailing newlines
        """
        lines: list[str] = []
        repo = f" (repository: {repository_label})" if repository_label is not None else ""
        level = 0

        for classified in frames:
            frame = classified.frame
            ind = self.indent(level)

            if isinstance(frame, DescriptorRequest):
                lines.append(
                    f"{ind}Reading descriptor for artifact {frame.artifact} "
                    f"(context: {frame.request_context}) (scope: {classified.scope or '?'}){repo}"
                )
                level += 1
            elif isinstance(frame, ArtifactFetchRequest):
                lines.append(f"{ind}{fetch_verb} artifact {frame.artifact}{repo}")
                lines.extend(self.render_stack(stack, level))
            elif isinstance(frame, CollectStepContext):
                lines.extend(self.render_path(frame, level))
            elif isinstance(frame, CollectRequest):
                roots = [r for r in (frame.root, frame.root_artifact) if r is not None]
                for root in roots or ["?"]:
                    lines.append(f"{ind}Transitive dependencies collection for {root}")
                level += 1
            elif isinstance(frame, ModelBuildRequest):
                lines.append(f"{ind}Model building for {frame.location}")
                level += 1
            elif isinstance(frame, PluginReference):
                lines.append(
                    f"{ind}Resolution of plugin {frame} ({frame.declaring_model_id or '?'})"
                )
                level += 1
            elif isinstance(frame, DependencyRequest):
                # Only used to derive record keys.
                continue

        return lines

    def render_stack(self, stack: Sequence[DependencyNode], level: int) -> list[str]:
        """Render an active-path snapshot, each entry one level deeper than the last."""
        return [
            f"{self.indent(level + depth)}{self.ARROW}{node} (context: {node.request_context})"
            for depth, node in enumerate(stack, start=1)
        ]

    def render_path(self, step: CollectStepContext, level: int) -> list[str]:
        """
        Render the engine-recorded dependency path of a collect step.

        The path is stored root to leaf; it is rendered leaf to root so the
        closest requirer comes first.
        """
        ind = self.indent(level)
        subject = f" of {step.node}" if step.node is not None else ""
        lines = [f"{ind}Dependency path{subject} (context: {step.context})"]
        for node in reversed(step.path):
            lines.append(f"{self.indent(level + 1)}{self.ARROW}{node.artifact} ({step.context})")
        return lines

    def render_audit_block(
        self,
        frames: Sequence[ClassifiedFrame],
        stack: Sequence[DependencyNode],
        repository_label: str,
    ) -> str:
        """Render one audit-log block, separator line included."""
        lines = [AUDIT_SEPARATOR]
        lines.extend(
            self.render_frames(
                frames, stack, fetch_verb="Downloaded", repository_label=repository_label
            )
        )
        return "\n".join(lines) + "\n"

    def render_requirer_record(self, artifact: Artifact, stack: Sequence[DependencyNode]) -> str:
        """Render the record naming the descent path that required ``artifact``."""
        lines = [str(artifact)]
        for depth, node in enumerate(stack):
            lines.append(
                f"{self.indent(depth)}{self.ARROW}{node} (context: {node.request_context})"
            )
        return "\n".join(lines) + "\n"

    def render_provenance_record(
        self,
        subject: str,
        frames: Sequence[ClassifiedFrame],
        stack: Sequence[DependencyNode],
        *,
        missing: bool,
        repository_label: str | None = None,
        repositories: Sequence[RemoteRepository] = (),
    ) -> str:
        """
        Render a deduplicated provenance record.

        A resolved record ends with the repository the file came from. A
        missing record ends with every remote repository that was configured,
        one ``" * <id> : <url>"`` line each, under a header that is written
        even when there are none.
        """
        lines = [f"{'Missing' if missing else 'Resolved'} {subject}"]
        lines.extend(self.render_frames(frames, stack, fetch_verb="Resolved"))
        if missing:
            lines.append("Configured repositories:")
            lines.extend(f" * {repo.id} : {repo.url}" for repo in repositories)
        else:
            lines.append(f"Repository: {repository_label or '?'}")
        return "\n".join(lines) + "\n"
