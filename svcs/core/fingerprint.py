"""Content fingerprints for tracked files.

A snapshot fingerprint is the MD5 of the concatenated per-file MD5 hex
digests, taken in index order. Reordering the index changes the result
even when the file set is the same.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable

CHUNK_SIZE = 64 * 1024


def file_fingerprint(path: Path | str) -> str:
    """Hash the full byte content of one file.

    Args:
        path: File to read

    Returns:
        32-character hex digest

    Raises:
        OSError: If the file cannot be opened or read
    """
    h = hashlib.md5(usedforsecurity=False)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def snapshot_fingerprint(paths: Iterable[str], root: Path | str) -> str | None:
    """Combine the fingerprints of all tracked files.

    Args:
        paths: Tracked relative paths, in index order
        root: Working directory the paths are relative to

    Returns:
        Hex digest, or None if there are no tracked files
    """
    root_path = Path(root)
    digests = [file_fingerprint(root_path / p) for p in paths]
    if not digests:
        return None

    h = hashlib.md5(usedforsecurity=False)
    h.update("".join(digests).encode("ascii"))
    return h.hexdigest()
