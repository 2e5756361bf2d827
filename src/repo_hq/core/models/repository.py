"""Repository and catalog models."""

from enum import Enum
from pathlib import Path, PurePath

from pydantic import BaseModel, Field

from repo_hq.core.exceptions import RepositoryNotFoundError

CATALOG_VERSION = 1


class Vcs(str, Enum):
    """Supported version control systems."""

    GIT = "git"
    HG = "hg"
    DARCS = "darcs"
    PIJUL = "pijul"


class Remote(BaseModel):
    """Remote location a repository was cloned from."""

    url: str

    class Config:
        frozen = True


class Repository(BaseModel):
    """A local clone under management.

    Two repositories are the same local repository when their canonicalized
    paths are equal, whatever their remotes say.
    """

    path: str
    vcs: Vcs
    remote: Remote | None = None

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        vcs: Vcs,
        remote: Remote | None = None,
    ) -> "Repository":
        """Create a repository, canonicalizing its path."""
        try:
            canonical = Path(path).expanduser().resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise RepositoryNotFoundError(
                f"Repository path does not exist: {path}",
                details={"path": str(path)},
            ) from e
        return cls(path=str(canonical), vcs=vcs, remote=remote)

    @property
    def name(self) -> str:
        """Display name, the final segment of the path."""
        return PurePath(self.path).name

    @property
    def remote_url(self) -> str | None:
        return self.remote.url if self.remote else None

    def is_same_local(self, other: "Repository") -> bool:
        return self.path == other.path


class RepositoryCatalog(BaseModel):
    """Ordered collection of managed repositories, as stored in the cache."""

    version: int = CATALOG_VERSION
    repositories: list[Repository] = Field(default_factory=list)

    def find(self, repo: Repository) -> int | None:
        """Index of the entry that is the same local repository, if any."""
        for index, existing in enumerate(self.repositories):
            if existing.is_same_local(repo):
                return index
        return None

    def sort(self) -> None:
        """Stable sort by display name."""
        self.repositories.sort(key=lambda r: r.name)
