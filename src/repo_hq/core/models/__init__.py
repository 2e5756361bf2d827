"""Domain models for repo-hq."""

from repo_hq.core.models.query import DEFAULT_HOST, Query
from repo_hq.core.models.repository import (
    Remote,
    Repository,
    RepositoryCatalog,
    Vcs,
)

__all__ = [
    "DEFAULT_HOST",
    "Query",
    "Remote",
    "Repository",
    "RepositoryCatalog",
    "Vcs",
]
