"""SVCS controller - main orchestrator.

Coordinates the tracked-file index, fingerprinting, the snapshot store and
the commit log for commit and checkout.

There is no locking between separate invocations. Two processes working on
the same repository at once can interleave index appends or see a staging
directory that is still being filled.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from ..config import ConfigLoader, ConfigScope, SvcsConfig
from ..utils.fs import ensure_dir
from ..utils.log import log_debug
from .commit_log import CommitLog, CommitLogEntry
from .errors import (
    CommitIdNotPassedError,
    IdentityNotConfiguredError,
    MessageNotPassedError,
    StorageError,
    UserError,
)
from .fingerprint import snapshot_fingerprint
from .index import TrackedFileIndex
from .snapshot_store import SnapshotStore


CommitStatus = Literal["committed", "nothing_to_commit"]


@dataclass
class SvcsStatus:
    """Status of a repository."""
    initialized: bool
    tracked_count: int
    commit_count: int
    latest_commit: str | None
    current_fingerprint: str | None
    clean: bool
    author: str | None
    project_root: str
    vcs_dir: str


class SvcsController:
    """Main controller for SVCS operations."""

    def __init__(
        self,
        project_root: Path | str | None = None,
        config_loader: ConfigLoader | None = None,
    ):
        """Initialize controller.

        Args:
            project_root: Working directory under version control (defaults to cwd)
            config_loader: Config source (defaults to one rooted at project_root)
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._config_loader = config_loader or ConfigLoader(project_root=self.project_root)
        self._index: TrackedFileIndex | None = None
        self._store: SnapshotStore | None = None
        self._log: CommitLog | None = None

    @property
    def config(self) -> SvcsConfig:
        """Get current configuration."""
        try:
            return self._config_loader.config
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to read configuration: {e}") from e

    @property
    def index(self) -> TrackedFileIndex:
        """Get tracked-file index (lazy init)."""
        if self._index is None:
            self._index = TrackedFileIndex(
                index_path=self.get_index_path(),
                project_root=self.project_root,
                storage_dir_name=self.config.vcs_dir_name,
            )
        return self._index

    @property
    def store(self) -> SnapshotStore:
        """Get snapshot store (lazy init)."""
        if self._store is None:
            self._store = SnapshotStore(
                storage_dir=self.get_commits_dir(),
                project_root=self.project_root,
            )
        return self._store

    @property
    def log(self) -> CommitLog:
        """Get commit log (lazy init)."""
        if self._log is None:
            self._log = CommitLog(log_path=self.get_log_path())
        return self._log

    def get_vcs_dir(self) -> Path:
        return self.project_root / self.config.vcs_dir_name

    def get_commits_dir(self) -> Path:
        return self.get_vcs_dir() / self.config.commits_dir_name

    def get_index_path(self) -> Path:
        return self.get_vcs_dir() / self.config.index_file_name

    def get_log_path(self) -> Path:
        return self.get_vcs_dir() / self.config.log_file_name

    def init(self) -> dict[str, Any]:
        """Create the repository storage directories.

        Returns:
            Result dictionary with the storage location
        """
        try:
            ensure_dir(self.get_vcs_dir())
            ensure_dir(self.get_commits_dir())
        except OSError as e:
            raise StorageError(f"Failed to create {self.get_vcs_dir()}: {e}") from e
        return {"success": True, "vcsDir": str(self.get_vcs_dir())}

    def get_username(self) -> str | None:
        """Get the configured author, if any."""
        return self.config.author

    def set_username(self, username: str, scope: ConfigScope = ConfigScope.PROJECT) -> dict[str, Any]:
        """Store the author name.

        Args:
            username: Name to store
            scope: Project or global config

        Returns:
            Result dictionary
        """
        try:
            path = self._config_loader.save_username(username, scope=scope)
        except ValueError as e:
            return {"success": False, "error": str(e)}
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to save username: {e}") from e

        return {"success": True, "username": username.strip(), "path": str(path)}

    def track(self, path: str) -> dict[str, Any]:
        """Add a file to the index.

        Args:
            path: Path relative to the working directory

        Returns:
            Result dictionary; tracked is False if the file was already tracked
        """
        try:
            tracked = self.index.track(path)
        except UserError as e:
            return {"success": False, "error": str(e)}

        return {"success": True, "path": path, "tracked": tracked}

    def list_tracked(self) -> list[str]:
        """List tracked files in tracking order."""
        return self.index.list()

    def current_fingerprint(self) -> str | None:
        """Fingerprint of the tracked files as they are now.

        Returns:
            Hex digest, or None if nothing is tracked
        """
        return self._fingerprint(self.index.list())

    def commit(self, message: str | None) -> dict[str, Any]:
        """Snapshot the tracked files and record a commit.

        Args:
            message: Commit message

        Returns:
            Result dictionary; status is "committed" or "nothing_to_commit"
        """
        try:
            if not message or not message.strip():
                raise MessageNotPassedError()

            files = self.index.list()
            fingerprint = self._fingerprint(files)
            if fingerprint is None:
                log_debug("No tracked files")
                return self._commit_result("nothing_to_commit", None)

            if self.store.exists(fingerprint):
                log_debug(f"Snapshot {fingerprint} already exists")
                return self._commit_result("nothing_to_commit", fingerprint)

            # Identity is checked before anything is written
            author = self.get_username()
            if not author:
                raise IdentityNotConfiguredError()

            self.init()
            result = self.store.create(fingerprint, files)
            if not result.created:
                return self._commit_result("nothing_to_commit", fingerprint)

            self.log.append(fingerprint, message, author)
        except UserError as e:
            return {"success": False, "error": str(e)}

        return self._commit_result("committed", fingerprint, file_count=result.file_count)

    def checkout(self, fingerprint: str | None) -> dict[str, Any]:
        """Restore the working files from a snapshot.

        Args:
            fingerprint: Commit id to restore

        Returns:
            Result dictionary with the restored files
        """
        try:
            if not fingerprint or not fingerprint.strip():
                raise CommitIdNotPassedError()

            commit_id = fingerprint.strip()
            files = self.store.restore(commit_id, self.project_root)
        except UserError as e:
            return {"success": False, "error": str(e)}

        return {
            "success": True,
            "fingerprint": commit_id,
            "files": files,
            "fileCount": len(files),
        }

    def list_commits(self) -> list[CommitLogEntry]:
        """List commits, most recent first."""
        entries = self.log.list()
        entries.reverse()
        return entries

    def get_status(self) -> SvcsStatus:
        """Get repository status.

        Returns:
            SvcsStatus with current state
        """
        tracked = self.list_tracked()
        commits = self.list_commits()

        try:
            current = self._fingerprint(tracked)
        except StorageError:
            current = None

        return SvcsStatus(
            initialized=self.get_vcs_dir().exists(),
            tracked_count=len(tracked),
            commit_count=len(commits),
            latest_commit=commits[0].fingerprint if commits else None,
            current_fingerprint=current,
            clean=current is not None and self.store.exists(current),
            author=self.get_username(),
            project_root=str(self.project_root),
            vcs_dir=str(self.get_vcs_dir()),
        )

    def validate_system(self) -> dict[str, Any]:
        """Validate repository state.

        Returns:
            Validation result with any issues found
        """
        issues = []

        if not self.get_vcs_dir().exists():
            issues.append("Repository not initialized (no commits or tracked files yet)")

        for path in self.list_tracked():
            if not (self.project_root / path).is_file():
                issues.append(f"Tracked file '{path}' is missing")

        logged = [entry.fingerprint for entry in self.log.list()]
        snapshots = set(self.store.list())

        for fingerprint in logged:
            if fingerprint not in snapshots:
                issues.append(f"Commit {fingerprint} has no snapshot")

        logged_set = set(logged)
        for fingerprint in sorted(snapshots - logged_set):
            issues.append(f"Snapshot {fingerprint} has no log entry")

        for staging in self.store.list_staging():
            issues.append(f"Incomplete snapshot left at {staging.name}")

        return {
            "valid": len(issues) == 0,
            "issues": issues,
        }

    def _fingerprint(self, files: list[str]) -> str | None:
        try:
            return snapshot_fingerprint(files, self.project_root)
        except OSError as e:
            raise StorageError(f"Failed to read tracked file: {e}") from e

    @staticmethod
    def _commit_result(status: CommitStatus, fingerprint: str | None, file_count: int = 0) -> dict[str, Any]:
        return {
            "success": True,
            "status": status,
            "fingerprint": fingerprint,
            "fileCount": file_count,
        }
