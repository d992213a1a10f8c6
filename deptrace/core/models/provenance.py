"""
Provenance record models.

Keys under which records are stored and the outcome of writing them.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, ClassVar, Literal

from pydantic import Field, computed_field

from .base import ImmutableModel

RecordKind = Literal["dep", "miss", "plugin", "requirer"]


class RecordKey(ImmutableModel):
    """Stable name of a provenance record inside a tracking directory.

    The kind selects the file suffix. Direct-requirer records written by the
    audit log use ``.requirer.dep`` so they never share a file with the
    resolved-path ``.dep`` records of the same identity.
    """

    SUFFIXES: ClassVar[dict[str, str]] = {
        "dep": ".dep",
        "miss": ".miss",
        "plugin": ".plugin",
        "requirer": ".requirer.dep",
    }

    name: Annotated[str, Field(min_length=1)]
    kind: RecordKind = "dep"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def filename(self) -> str:
        return f"{self.name}{self.SUFFIXES[self.kind]}"


class WriteStatus(str, Enum):
    """Outcome of a tracking-store write."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


class WriteResult(ImmutableModel):
    """Result of a record or audit-log write.

    The store reports I/O failures here instead of raising them.
    """

    status: WriteStatus
    path: Path
    error: str | None = None

    @property
    def written(self) -> bool:
        return self.status == WriteStatus.WRITTEN

    @property
    def skipped(self) -> bool:
        return self.status == WriteStatus.SKIPPED

    @property
    def failed(self) -> bool:
        return self.status == WriteStatus.FAILED
