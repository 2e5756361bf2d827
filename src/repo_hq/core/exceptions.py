"""Exception hierarchy for repo-hq."""

from typing import Any


class RepoHQError(Exception):
    """Base exception for all repo-hq errors.

    Errors local to a single catalog entry are absorbed where they happen;
    everything raised as a RepoHQError aborts the requested operation.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(RepoHQError):
    """Malformed configuration (settings file, environment or patterns)."""


class CacheCorruptError(RepoHQError):
    """The cache file exists but cannot be read or decoded."""


class NoRootConfiguredError(RepoHQError):
    """A query was resolved with neither an explicit nor a configured root."""


class QueryParseError(RepoHQError):
    """A query string could not be parsed into host and path."""


class RepositoryNotFoundError(RepoHQError):
    """A repository path does not exist on disk."""


class ExternalCommandError(RepoHQError):
    """An external command exited non-zero or failed to launch."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.command = command or []
        self.returncode = returncode
        details = {"command": self.command, "returncode": returncode, **(details or {})}
        super().__init__(message, details=details)


class CacheWriteError(RepoHQError):
    """The cache file could not be written; the previous cache is intact."""
