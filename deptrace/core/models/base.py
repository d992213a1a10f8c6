"""
Base model for deptrace values.

Artifacts, trace frames and record keys are snapshots of what the
resolution engine handed over; once built they never change and they are
safe to share between the resolver threads that fire events.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ImmutableModel(BaseModel):
    """Frozen, strictly validated value.

    Strict mode keeps engine values from being coerced (a version is never
    parsed from an int, a path never from a str). Instances handed back in
    are trusted rather than revalidated.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="forbid",
        revalidate_instances="never",
    )
