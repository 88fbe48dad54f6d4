"""Core modules for SVCS."""

from .commit_log import CommitLog, CommitLogEntry
from .controller import SvcsController
from .index import TrackedFileIndex
from .snapshot_store import SnapshotStore

__all__ = [
    "CommitLog",
    "CommitLogEntry",
    "SnapshotStore",
    "SvcsController",
    "TrackedFileIndex",
]
