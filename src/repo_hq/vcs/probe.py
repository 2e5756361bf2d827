"""Detection of VCS control directories and their configured remotes.

Each supported VCS is described by a VcsBackend entry: the marker that
identifies a repository root, the executable used for init/clone, and a
reader for the remote URL stored in the repository's own configuration.
"""

import configparser
import subprocess
import tomllib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from repo_hq.core.models.repository import Vcs

logger = structlog.get_logger(__name__)


def _read_git_remote(path: Path) -> str | None:
    try:
        result = subprocess.run(
            ["git", "config", "--get", "remote.origin.url"],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, OSError):
        return None
    url = result.stdout.strip()
    return url if url else None


def _read_hg_remote(path: Path) -> str | None:
    parser = configparser.RawConfigParser()
    parser.read(path / ".hg" / "hgrc", encoding="utf-8")
    url = parser.get("paths", "default", fallback="").strip()
    return url if url else None


def _read_darcs_remote(path: Path) -> str | None:
    prefs = path / "_darcs" / "prefs" / "defaultrepo"
    if not prefs.is_file():
        return None
    for line in prefs.read_text(encoding="utf-8").splitlines():
        if line.strip():
            return line.strip()
    return None


def _read_pijul_remote(path: Path) -> str | None:
    config = path / ".pijul" / "config"
    if not config.is_file():
        return None
    with config.open("rb") as f:
        data = tomllib.load(f)
    url = data.get("default_remote")
    return url if isinstance(url, str) and url else None


@dataclass(frozen=True)
class VcsBackend:
    """Per-VCS behaviour table."""

    marker: str
    executable: str
    read_remote: Callable[[Path], str | None]


BACKENDS: dict[Vcs, VcsBackend] = {
    Vcs.GIT: VcsBackend(marker=".git", executable="git", read_remote=_read_git_remote),
    Vcs.HG: VcsBackend(marker=".hg", executable="hg", read_remote=_read_hg_remote),
    Vcs.DARCS: VcsBackend(marker="_darcs", executable="darcs", read_remote=_read_darcs_remote),
    Vcs.PIJUL: VcsBackend(marker=".pijul", executable="pijul", read_remote=_read_pijul_remote),
}


def detect_from_path(path: str | Path) -> Vcs | None:
    """Return the VCS whose marker sits directly inside path, if any.

    Filesystem errors count as "not a repository".
    """
    path = Path(path)
    for vcs, backend in BACKENDS.items():
        try:
            if (path / backend.marker).exists():
                return vcs
        except OSError as e:
            logger.debug("Probe failed", path=str(path), error=str(e))
            return None
    return None


def get_remote_url(path: str | Path, vcs: Vcs) -> str | None:
    """Read the configured remote URL of a repository, if one is set."""
    path = Path(path)
    try:
        return BACKENDS[vcs].read_remote(path)
    except (OSError, UnicodeDecodeError, configparser.Error, tomllib.TOMLDecodeError) as e:
        logger.debug("Could not read remote", path=str(path), vcs=vcs.value, error=str(e))
        return None
