"""Append-only commit log for SVCS.

Each commit is stored as a text block:

    commit <fingerprint>
    Author: <author>
    <message>

Blocks are separated by a blank line and only ever appended.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..utils.fs import append_text, read_text_or_none
from ..utils.log import log_debug
from .errors import IdentityNotConfiguredError, MessageNotPassedError, StorageError


@dataclass(frozen=True)
class CommitLogEntry:
    """One commit record."""
    fingerprint: str
    message: str
    author: str

    def to_block(self) -> str:
        """Render as an on-disk log block (including the separator)."""
        return f"commit {self.fingerprint}\nAuthor: {self.author}\n{self.message}\n\n"

    @classmethod
    def from_block(cls, block: str) -> CommitLogEntry | None:
        """Parse an on-disk block, or return None if it is malformed."""
        lines = block.strip("\n").split("\n")
        if len(lines) < 3:
            return None

        header, author_line = lines[0], lines[1]
        if not header.startswith("commit ") or not author_line.startswith("Author: "):
            return None

        return cls(
            fingerprint=header[len("commit "):].strip(),
            author=author_line[len("Author: "):],
            message="\n".join(lines[2:]),
        )

    def render(self) -> str:
        """Render for display (no trailing separator)."""
        return self.to_block().rstrip("\n")


def normalize_message(message: str) -> str:
    """Drop blank lines so a message never contains the block separator."""
    lines = [line.rstrip() for line in (message or "").strip().splitlines()]
    return "\n".join(line for line in lines if line)


class CommitLog:
    """Durable append-only sequence of commit records."""

    def __init__(self, log_path: Path):
        """Initialize the commit log.

        Args:
            log_path: File holding the log blocks
        """
        self.log_path = Path(log_path)

    def append(self, fingerprint: str, message: str, author: str | None) -> CommitLogEntry:
        """Append a commit record.

        Raises:
            IdentityNotConfiguredError: author is empty
            MessageNotPassedError: message is empty
            StorageError: The log could not be written
        """
        clean_author = " ".join((author or "").split())
        if not clean_author:
            raise IdentityNotConfiguredError()

        clean_message = normalize_message(message)
        if not clean_message:
            raise MessageNotPassedError()

        entry = CommitLogEntry(
            fingerprint=fingerprint,
            message=clean_message,
            author=clean_author,
        )

        try:
            append_text(self.log_path, entry.to_block())
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to append to log {self.log_path}: {e}") from e

        log_debug(f"Logged commit {fingerprint} by {clean_author}")
        return entry

    def list(self) -> list[CommitLogEntry]:
        """Return all records in append (chronological) order."""
        try:
            content = read_text_or_none(self.log_path)
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to read log {self.log_path}: {e}") from e

        if not content:
            return []

        entries = []
        for block in content.split("\n\n"):
            if not block.strip():
                continue
            entry = CommitLogEntry.from_block(block)
            if entry is None:
                log_debug(f"Skipping malformed log block: {block[:40]!r}")
                continue
            entries.append(entry)
        return entries

    def contains(self, fingerprint: str) -> bool:
        return any(entry.fingerprint == fingerprint for entry in self.list())
