"""Workspace: the managed set of repositories and operations on it."""

from collections.abc import Callable
from enum import Enum
from pathlib import Path

import structlog

from repo_hq.config.settings import Settings
from repo_hq.core.exceptions import (
    CacheWriteError,
    NoRootConfiguredError,
    RepositoryNotFoundError,
)
from repo_hq.core.models.query import Query
from repo_hq.core.models.repository import Remote, Repository, RepositoryCatalog
from repo_hq.query.resolver import QueryResolver
from repo_hq.repositories.cache import CacheStore
from repo_hq.scanning.excludes import ExcludeMatcher
from repo_hq.scanning.scanner import RepositoryScanner
from repo_hq.vcs.probe import detect_from_path, get_remote_url

logger = structlog.get_logger(__name__)


class AddAction(str, Enum):
    """Outcome of adding a repository to the catalog."""

    ADDED = "added"
    REPLACED = "replaced"


def revalidate(repo: Repository) -> Repository | None:
    """Re-check repo against the filesystem.

    Returns an updated copy with the remote re-read, or None when the path
    is gone or no longer carries a VCS marker.
    """
    path = Path(repo.path)
    if not path.is_dir():
        return None
    vcs = detect_from_path(path)
    if vcs is None:
        return None
    url = get_remote_url(path, vcs)
    return Repository(path=repo.path, vcs=vcs, remote=Remote(url=url) if url else None)


class Workspace:
    """Owns the repository catalog for one invocation.

    The catalog is read from the cache on first use and only written back
    by save_cache().
    """

    def __init__(
        self,
        settings: Settings,
        root: str | Path | None = None,
        cache: CacheStore | None = None,
    ) -> None:
        self._settings = settings
        self._root = Path(root).expanduser() if root else None
        self._cache = cache or CacheStore(settings.cache_path)
        self._catalog: RepositoryCatalog | None = None
        self._excludes = ExcludeMatcher.from_patterns(settings.excludes)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def excludes(self) -> ExcludeMatcher:
        return self._excludes

    @property
    def catalog(self) -> RepositoryCatalog:
        if self._catalog is None:
            self._catalog = self._cache.load()
        return self._catalog

    @property
    def repositories(self) -> list[Repository]:
        return list(self.catalog.repositories)

    def add_repository(self, repo: Repository) -> AddAction:
        """Insert repo, replacing an entry for the same local path."""
        index = self.catalog.find(repo)
        if index is not None:
            self.catalog.repositories[index] = repo
            logger.info("Replaced existing entry", path=repo.path)
            return AddAction.REPLACED

        self.catalog.repositories.append(repo)
        logger.info("Added new entry", path=repo.path)
        return AddAction.ADDED

    def new_repository_from_path(self, path: str | Path) -> Repository | None:
        """Build a Repository for path, or None if it is not one."""
        path = Path(path).expanduser()
        vcs = detect_from_path(path)
        if vcs is None:
            return None
        url = get_remote_url(path, vcs)
        try:
            return Repository.from_path(path, vcs, Remote(url=url) if url else None)
        except RepositoryNotFoundError:
            logger.debug("Repository vanished before it was added", path=str(path))
            return None

    def import_repositories(
        self, root: str | Path, depth: int | None = None
    ) -> list[Repository]:
        """Scan root and add every repository found below it."""
        scanner = RepositoryScanner(self._excludes)
        imported = []
        for path in sorted(scanner.scan(root, depth)):
            repo = self.new_repository_from_path(path)
            if repo is None:
                continue
            self.add_repository(repo)
            imported.append(repo)
        logger.info("Imported repositories", root=str(root), count=len(imported))
        return imported

    def drop_invalid_repositories(self) -> list[Repository]:
        """Re-validate every entry and drop stale or excluded ones.

        Returns the dropped entries; survivors keep their relative order.
        """
        kept = []
        dropped = []
        for repo in self.catalog.repositories:
            refreshed = revalidate(repo)
            if refreshed is None:
                logger.info("Dropped missing repository", path=repo.path)
                dropped.append(repo)
            elif self._excludes.matches(refreshed.path):
                logger.info("Dropped excluded repository", path=repo.path)
                dropped.append(repo)
            else:
                kept.append(refreshed)
        self.catalog.repositories = kept
        return dropped

    def sort_repositories(self) -> None:
        self.catalog.sort()

    def save_cache(self) -> None:
        """Write the catalog to the cache file."""
        try:
            self._cache.dump(self.catalog)
        except OSError as e:
            raise CacheWriteError(
                f"Cannot write cache file {self._cache.path}: {e}",
                details={"path": str(self._cache.path)},
            ) from e

    def root_dir(self) -> Path:
        """The explicit root if given, else the configured one."""
        root = self._root or self._settings.root_dir
        if root is None:
            raise NoRootConfiguredError(
                "Unknown root directory: pass --root or set 'root' in the config file"
            )
        return root

    def resolve_query(self, query: Query) -> Path:
        return QueryResolver(self.root_dir()).resolve(query)

    def for_each_repo(self, f: Callable[[Repository], None]) -> None:
        for repo in self.catalog.repositories:
            f(repo)
