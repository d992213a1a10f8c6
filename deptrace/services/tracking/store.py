"""
Tracking store.

Persists provenance records (write-once, first writer wins) and appends
audit-log blocks. I/O failures come back as WriteResult values; the store
never raises into the caller.
"""

from __future__ import annotations

from pathlib import Path

from ...core.di import resolve_or_default
from ...core.exceptions import RecordWriteError
from ...core.interfaces.logger import ILogger
from ...core.models.provenance import RecordKey, WriteResult, WriteStatus


class TrackingStore:
    """
    Writes records into a tracking subdirectory of each artifact directory.

    Layout, relative to an artifact's storage directory::

        _dependency-tracker.txt     append-only audit log
        .tracking/<key>.<kind>      one record per key
    """

    def __init__(
        self,
        tracking_dir: str = ".tracking",
        audit_log_name: str = "_dependency-tracker.txt",
        logger: ILogger | None = None,
    ) -> None:
        self._tracking_dir = tracking_dir
        self._audit_log_name = audit_log_name
        self._logger = logger

    @property
    def logger(self) -> ILogger:
        """Get logger, resolving from container or creating NullLogger."""
        if self._logger is None:
            from ..logging import NullLogger

            self._logger = resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]
        return self._logger

    def tracking_path(self, directory: Path) -> Path:
        return directory / self._tracking_dir

    def record_path(self, directory: Path, key: RecordKey) -> Path:
        return self.tracking_path(directory) / key.filename

    def audit_log_path(self, directory: Path) -> Path:
        return directory / self._audit_log_name

    def has_record(self, directory: Path, key: RecordKey) -> bool:
        return self.record_path(directory, key).is_file()

    def record_if_absent(self, directory: Path, key: RecordKey, text: str) -> WriteResult:
        """
        Write a record unless one already exists for ``key``.

        The file is created exclusively, so once it exists no later call
        replaces it.

        Args:
            directory: Artifact storage directory
            key: Record key
            text: Full record body

        Returns:
            WriteResult: written, skipped (already recorded) or failed
        """
        target = self.record_path(directory, key)
        if target.is_file():
            return WriteResult(status=WriteStatus.SKIPPED, path=target)

        try:
            created = self._write_exclusive(target, text)
        except RecordWriteError as e:
            return WriteResult(status=WriteStatus.FAILED, path=target, error=str(e))

        if not created:
            return WriteResult(status=WriteStatus.SKIPPED, path=target)
        self.logger.debug("Wrote provenance record %s", target)
        return WriteResult(status=WriteStatus.WRITTEN, path=target)

    def append_audit(self, directory: Path, block: str) -> WriteResult:
        """Append one block to the audit log of ``directory``, creating it if absent."""
        target = self.audit_log_path(directory)
        try:
            with open(target, "a", encoding="utf-8") as f:
                f.write(block)
        except OSError as e:
            error = RecordWriteError(f"Failed to append audit log: {e}", path=str(target), cause=e)
            return WriteResult(status=WriteStatus.FAILED, path=target, error=str(error))
        return WriteResult(status=WriteStatus.WRITTEN, path=target)

    def _write_exclusive(self, target: Path, text: str) -> bool:
        """Create ``target`` with ``text``; False if another writer created it first."""
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RecordWriteError(
                f"Failed to create tracking directory: {e}", path=str(target.parent), cause=e
            ) from e

        try:
            f = open(target, "x", encoding="utf-8")
        except FileExistsError:
            return False
        except OSError as e:
            raise RecordWriteError(f"Failed to create record: {e}", path=str(target), cause=e) from e

        try:
            with f:
                f.write(text)
        except OSError as e:
            # A truncated record would block every later writer for this key.
            target.unlink(missing_ok=True)
            raise RecordWriteError(f"Failed to write record: {e}", path=str(target), cause=e) from e
        return True
