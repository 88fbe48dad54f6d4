"""Configuration management for SVCS."""

from .types import ConfigScope, SvcsConfig
from .loader import ConfigLoader

__all__ = [
    "ConfigScope",
    "SvcsConfig",
    "ConfigLoader",
]
