"""File system utilities for SVCS.

These helpers are the only place that touches the repository's durable
state: the index, the commit log, the config file and snapshot copies.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


def atomic_write(file_path: Path | str, content: str | bytes, mode: str = "w") -> None:
    """Write content atomically using tempfile + rename pattern.

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode ('w' for text, 'wb' for binary)
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file must live in the same directory for rename to be atomic
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, mode) as f:
            f.write(content)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def append_text(file_path: Path | str, content: str, errors: str = "strict") -> None:
    """Append text to a file, creating it (and its parents) if needed.

    Existing content is never rewritten.

    Args:
        file_path: Target file path
        content: Text to append
        errors: Codec error handler ('surrogateescape' keeps undecodable
            file names byte-exact)
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8", errors=errors) as f:
        f.write(content)


def read_text_or_none(file_path: Path | str, errors: str = "strict") -> str | None:
    """Read a text file, returning None if it does not exist.

    Any other read failure propagates, including UnicodeDecodeError.
    """
    try:
        with open(file_path, encoding="utf-8", errors=errors) as f:
            return f.read()
    except FileNotFoundError:
        return None


def copy_file(source: Path | str, destination: Path | str) -> None:
    """Copy file bytes from source to destination, creating parent dirs."""
    dst = Path(destination)
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dst)


def ensure_dir(dir_path: Path | str) -> Path:
    """Ensure directory exists, creating it if necessary.

    Args:
        dir_path: Directory path to create

    Returns:
        Path object for the directory
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path
