"""Configuration for repo-hq."""

from repo_hq.config.logging import configure_logging
from repo_hq.config.settings import Settings, get_settings, load_settings

__all__ = ["Settings", "configure_logging", "get_settings", "load_settings"]
