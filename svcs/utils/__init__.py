"""Utility modules for SVCS."""

from .fs import append_text, atomic_write, copy_file, ensure_dir, read_text_or_none
from .env import get_env_username, get_global_svcs_dir, get_home_dir, get_project_root, is_debug_mode
from .log import log_debug

__all__ = [
    "append_text",
    "atomic_write",
    "copy_file",
    "ensure_dir",
    "read_text_or_none",
    "get_env_username",
    "get_global_svcs_dir",
    "get_home_dir",
    "get_project_root",
    "is_debug_mode",
    "log_debug",
]
