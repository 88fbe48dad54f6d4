"""Exception types for SVCS.

UserError subclasses are reported to the user and never abort the
process. StorageError marks an I/O failure that aborts the current
operation.
"""

from __future__ import annotations


class SvcsError(Exception):
    """Base class for SVCS errors."""


class UserError(SvcsError):
    """Raised for invalid requests that should be reported, not crash."""


class MessageNotPassedError(UserError):
    """Raised when a commit is requested without a message."""

    def __init__(self) -> None:
        super().__init__("Message was not passed.")


class CommitIdNotPassedError(UserError):
    """Raised when a checkout is requested without a commit id."""

    def __init__(self) -> None:
        super().__init__("Commit id was not passed.")


class FileNotFoundInWorkdirError(UserError):
    """Raised when tracking a path that has no file in the working tree."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Can't find '{path}'.")


class InvalidPathError(UserError):
    """Raised when a path escapes the working tree or points into storage."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Can't track '{path}': {reason}.")


class SnapshotNotFoundError(UserError):
    """Raised when no snapshot exists for a fingerprint."""

    def __init__(self, fingerprint: str):
        self.fingerprint = fingerprint
        super().__init__("Commit does not exist.")


class IdentityNotConfiguredError(UserError):
    """Raised when committing without a configured username."""

    def __init__(self) -> None:
        super().__init__("Please, tell me who you are.")


class StorageError(SvcsError):
    """Raised when reading or writing repository state fails."""
