"""Persistent storage for repo-hq."""

from repo_hq.repositories.cache import CacheStore

__all__ = ["CacheStore"]
