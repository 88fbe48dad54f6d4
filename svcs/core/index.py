"""Tracked-file index for SVCS.

The index is a newline-delimited list of relative paths. Order is the
order in which files were first tracked; entries are only ever appended.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

from ..utils.fs import append_text, read_text_or_none
from ..utils.log import log_debug
from .errors import FileNotFoundInWorkdirError, InvalidPathError, StorageError

# Undecodable file names are kept as surrogates so they round-trip byte for byte
INDEX_ERRORS = "surrogateescape"


class TrackedFileIndex:
    """Durable ordered set of tracked paths."""

    def __init__(
        self,
        index_path: Path,
        project_root: Path,
        storage_dir_name: str | None = None,
    ):
        """Initialize the index.

        Args:
            index_path: File holding the tracked paths
            project_root: Working directory the paths are relative to
            storage_dir_name: Top-level directory that may never be tracked
        """
        self.index_path = Path(index_path)
        self.project_root = Path(project_root)
        self.storage_dir_name = storage_dir_name

    def list(self) -> list[str]:
        """Return tracked paths in tracking order (empty if none)."""
        try:
            content = read_text_or_none(self.index_path, errors=INDEX_ERRORS)
        except OSError as e:
            raise StorageError(f"Failed to read index {self.index_path}: {e}") from e

        if content is None:
            return []
        return [line for line in content.split("\n") if line]

    def contains(self, path: str) -> bool:
        return self.normalize(path) in self.list()

    def track(self, path: str) -> bool:
        """Start tracking a file.

        Args:
            path: Path relative to the working directory

        Returns:
            True if the path was added, False if it was already tracked

        Raises:
            FileNotFoundInWorkdirError: No file exists at path
            InvalidPathError: Path escapes the working tree or is not a file
        """
        rel_path = self.normalize(path)
        target = self.project_root / rel_path

        if not target.exists():
            raise FileNotFoundInWorkdirError(path)
        if not target.is_file():
            raise InvalidPathError(path, "not a regular file")

        if rel_path in self.list():
            log_debug(f"Already tracked: {rel_path}")
            return False

        try:
            append_text(self.index_path, rel_path + "\n", errors=INDEX_ERRORS)
        except OSError as e:
            raise StorageError(f"Failed to update index {self.index_path}: {e}") from e

        log_debug(f"Tracking {rel_path}")
        return True

    def normalize(self, path: str) -> str:
        """Convert a user-supplied path to the form stored in the index.

        Raises:
            InvalidPathError: Path is empty, outside the working tree, or
                inside the storage directory
        """
        if not path or not path.strip():
            raise InvalidPathError(path, "empty path")
        if "\n" in path or "\r" in path:
            raise InvalidPathError(path, "line breaks are not allowed")

        candidate = Path(path)
        if candidate.is_absolute():
            try:
                candidate = candidate.resolve().relative_to(self.project_root.resolve())
            except ValueError:
                raise InvalidPathError(path, "outside the working directory") from None

        rel = PurePosixPath(os.path.normpath(candidate).replace(os.sep, "/"))
        if rel.parts and rel.parts[0] == "..":
            raise InvalidPathError(path, "outside the working directory")
        if str(rel) == ".":
            raise InvalidPathError(path, "not a regular file")
        if self.storage_dir_name and rel.parts[0] == self.storage_dir_name:
            raise InvalidPathError(path, "inside the repository storage")

        return str(rel)
