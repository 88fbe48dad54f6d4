"""Snapshot storage for SVCS.

Each snapshot is a directory named by its fingerprint holding a full copy
of every tracked file under its relative path. Snapshots are written into
a staging directory first and renamed into place, so a fingerprint
directory only ever exists once all of its files were copied.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..utils.fs import copy_file
from ..utils.log import log_debug
from .errors import SnapshotNotFoundError, StorageError


@dataclass
class SnapshotResult:
    """Result of a snapshot creation."""
    created: bool
    fingerprint: str
    file_count: int = 0
    total_size: int = 0


class SnapshotStore:
    """Content-addressable store of snapshot directories."""

    STAGING_PREFIX = ".staging-"

    def __init__(self, storage_dir: Path, project_root: Path):
        """Initialize snapshot store.

        Args:
            storage_dir: Directory holding one subdirectory per snapshot
            project_root: Working directory snapshots are taken from
        """
        self.storage_dir = Path(storage_dir)
        self.project_root = Path(project_root)

    def exists(self, fingerprint: str) -> bool:
        """Check whether a snapshot was already created for fingerprint."""
        if not self._is_valid_name(fingerprint):
            return False
        return (self.storage_dir / fingerprint).is_dir()

    def create(self, fingerprint: str, files: Iterable[str]) -> SnapshotResult:
        """Create a snapshot of files unless one exists for fingerprint.

        Args:
            fingerprint: Snapshot fingerprint of files
            files: Relative paths to copy from the working directory

        Returns:
            SnapshotResult; created is False when the snapshot already existed

        Raises:
            StorageError: A file could not be copied. The staging directory
                is left in place and is never mistaken for a snapshot.
        """
        if not self._is_valid_name(fingerprint):
            raise ValueError(f"Invalid fingerprint: {fingerprint!r}")

        if self.exists(fingerprint):
            log_debug(f"Snapshot {fingerprint} already exists")
            return SnapshotResult(created=False, fingerprint=fingerprint)

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(
                dir=self.storage_dir,
                prefix=f"{self.STAGING_PREFIX}{fingerprint[:8]}-",
            ))
        except OSError as e:
            raise StorageError(f"Failed to prepare snapshot {fingerprint}: {e}") from e

        file_count = 0
        total_size = 0
        for rel_path in files:
            src = self.project_root / rel_path
            try:
                copy_file(src, staging / rel_path)
                total_size += src.stat().st_size
            except OSError as e:
                raise StorageError(f"Failed to copy '{rel_path}' into snapshot: {e}") from e
            file_count += 1

        try:
            os.rename(staging, self.storage_dir / fingerprint)
        except OSError as e:
            raise StorageError(f"Failed to finalize snapshot {fingerprint}: {e}") from e

        log_debug(f"Created snapshot {fingerprint} ({file_count} files, {total_size} bytes)")
        return SnapshotResult(
            created=True,
            fingerprint=fingerprint,
            file_count=file_count,
            total_size=total_size,
        )

    def resolve(self, fingerprint: str) -> list[str]:
        """List the files stored in a snapshot.

        Returns:
            Relative POSIX paths, sorted

        Raises:
            SnapshotNotFoundError: No snapshot exists for fingerprint
        """
        if not self.exists(fingerprint):
            raise SnapshotNotFoundError(fingerprint)

        snapshot_dir = self.storage_dir / fingerprint
        files = []
        try:
            for root, _, names in os.walk(snapshot_dir):
                for name in names:
                    rel_path = (Path(root) / name).relative_to(snapshot_dir)
                    files.append(rel_path.as_posix())
        except OSError as e:
            raise StorageError(f"Failed to read snapshot {fingerprint}: {e}") from e

        files.sort()
        return files

    def restore(self, fingerprint: str, target_root: Path | None = None) -> list[str]:
        """Copy a snapshot's files back into the working directory.

        Existing files are overwritten; files absent from the snapshot are
        left untouched.

        Args:
            fingerprint: Snapshot to restore
            target_root: Directory to restore into (defaults to project root)

        Returns:
            Relative paths that were written

        Raises:
            SnapshotNotFoundError: No snapshot exists for fingerprint
            StorageError: A file could not be written
        """
        files = self.resolve(fingerprint)
        root = Path(target_root) if target_root else self.project_root
        snapshot_dir = self.storage_dir / fingerprint

        for rel_path in files:
            try:
                copy_file(snapshot_dir / rel_path, root / rel_path)
            except OSError as e:
                raise StorageError(f"Failed to restore '{rel_path}': {e}") from e

        log_debug(f"Restored {len(files)} files from {fingerprint}")
        return files

    def list(self) -> list[str]:
        """List fingerprints of all completed snapshots, sorted."""
        if not self.storage_dir.exists():
            return []

        return sorted(
            entry.name for entry in self.storage_dir.iterdir()
            if entry.is_dir() and self._is_valid_name(entry.name)
        )

    def list_staging(self) -> list[Path]:
        """List staging directories left behind by failed snapshots."""
        if not self.storage_dir.exists():
            return []

        return sorted(
            entry for entry in self.storage_dir.iterdir()
            if entry.is_dir() and entry.name.startswith(self.STAGING_PREFIX)
        )

    @staticmethod
    def _is_valid_name(fingerprint: str) -> bool:
        # Anything that could leave the storage directory is treated as unknown
        if not fingerprint or fingerprint.startswith("."):
            return False
        return "/" not in fingerprint and "\\" not in fingerprint and os.sep not in fingerprint
