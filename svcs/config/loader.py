"""Configuration loader for SVCS.

Resolves the author identity from the environment, the project config
file and the global config file.
"""

from __future__ import annotations

from pathlib import Path

from ..utils.env import get_env_username, get_global_svcs_dir
from ..utils.fs import atomic_write, read_text_or_none
from .types import ConfigScope, SvcsConfig


class ConfigLoader:
    """Loads and stores SVCS configuration."""

    def __init__(self, project_root: Path | None = None, defaults: SvcsConfig | None = None):
        """Initialize config loader.

        Args:
            project_root: Working directory (for project-local config)
            defaults: Layout defaults to load on top of
        """
        self.project_root = project_root
        self.defaults = defaults or SvcsConfig()
        self._config: SvcsConfig | None = None

    @property
    def config(self) -> SvcsConfig:
        """Get loaded configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> SvcsConfig:
        """Load configuration from all sources.

        Priority (highest to lowest):
        1. SVCS_USERNAME environment variable
        2. Project-local config (vcs/config.txt)
        3. Global config (~/.svcs/config.txt)
        4. No username

        Returns:
            Merged SvcsConfig
        """
        username = get_env_username()

        if username is None:
            project_path = self.get_config_path(ConfigScope.PROJECT)
            if project_path is not None:
                username = self._read_username(project_path)

        if username is None:
            username = self._read_username(self.get_config_path(ConfigScope.GLOBAL))

        return SvcsConfig(
            username=username,
            vcs_dir_name=self.defaults.vcs_dir_name,
            commits_dir_name=self.defaults.commits_dir_name,
            index_file_name=self.defaults.index_file_name,
            log_file_name=self.defaults.log_file_name,
            config_file_name=self.defaults.config_file_name,
        )

    def reload(self) -> SvcsConfig:
        """Force reload configuration."""
        self._config = None
        return self.config

    def get_config_path(self, scope: ConfigScope) -> Path | None:
        """Get the username file for a scope (None for project scope without a root)."""
        if scope == ConfigScope.GLOBAL:
            return get_global_svcs_dir() / self.defaults.config_file_name
        if not self.project_root:
            return None
        return self.project_root / self.defaults.vcs_dir_name / self.defaults.config_file_name

    def save_username(self, username: str, scope: ConfigScope = ConfigScope.PROJECT) -> Path:
        """Store a username.

        Args:
            username: Name to store
            scope: Project or global config file

        Returns:
            Path where the username was saved
        """
        name = (username or "").strip()
        if not name:
            raise ValueError("Username must not be empty")

        config_path = self.get_config_path(scope)
        if config_path is None:
            raise ValueError("No project root set for project-scope config")

        atomic_write(config_path, name, mode="w")
        self._config = None
        return config_path

    @staticmethod
    def _read_username(config_path: Path) -> str | None:
        content = read_text_or_none(config_path)
        if content is None:
            return None
        name = content.strip()
        return name or None
