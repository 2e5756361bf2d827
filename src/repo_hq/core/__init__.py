"""Core domain models and interfaces for repo-hq."""

from repo_hq.core.exceptions import (
    CacheCorruptError,
    CacheWriteError,
    ConfigurationError,
    ExternalCommandError,
    NoRootConfiguredError,
    QueryParseError,
    RepoHQError,
    RepositoryNotFoundError,
)
from repo_hq.core.models import (
    Query,
    Remote,
    Repository,
    RepositoryCatalog,
    Vcs,
)

__all__ = [
    # Models
    "Query",
    "Remote",
    "Repository",
    "RepositoryCatalog",
    "Vcs",
    # Exceptions
    "RepoHQError",
    "ConfigurationError",
    "CacheCorruptError",
    "CacheWriteError",
    "NoRootConfiguredError",
    "QueryParseError",
    "RepositoryNotFoundError",
    "ExternalCommandError",
]
