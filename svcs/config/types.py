"""Configuration types for SVCS."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConfigScope(str, Enum):
    """Where a username is stored."""
    PROJECT = "project"  # vcs/config.txt in the working directory
    GLOBAL = "global"    # ~/.svcs/config.txt


@dataclass
class SvcsConfig:
    """Main SVCS configuration."""
    username: str | None = None
    vcs_dir_name: str = "vcs"
    commits_dir_name: str = "commits"
    index_file_name: str = "index.txt"
    log_file_name: str = "log.txt"
    config_file_name: str = "config.txt"

    @property
    def author(self) -> str | None:
        """Configured username, or None if unset or blank."""
        if self.username is None:
            return None
        name = self.username.strip()
        return name or None
