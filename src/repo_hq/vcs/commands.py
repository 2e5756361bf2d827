"""Init and clone operations delegated to the VCS executables."""

from pathlib import Path

import structlog

from repo_hq.core.exceptions import ExternalCommandError
from repo_hq.core.models.repository import Vcs
from repo_hq.utils.process import run_inherit
from repo_hq.vcs.probe import BACKENDS

logger = structlog.get_logger(__name__)


def init(path: str | Path, vcs: Vcs) -> None:
    """Create an empty repository at path, creating directories as needed."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExternalCommandError(
            f"Could not create directory {path}: {e}",
            details={"path": str(path)},
        ) from e
    logger.info("Initializing repository", path=str(path), vcs=vcs.value)
    run_inherit(BACKENDS[vcs].executable, ["init"], cwd=path)


def clone(
    url: str,
    dest: str | Path,
    vcs: Vcs,
    args: list[str] | tuple[str, ...] = (),
) -> None:
    """Clone url into dest, passing extra args to the VCS clone command."""
    dest = Path(dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExternalCommandError(
            f"Could not create directory {dest.parent}: {e}",
            details={"path": str(dest.parent)},
        ) from e
    logger.info("Cloning repository", url=url, dest=str(dest), vcs=vcs.value)
    run_inherit(BACKENDS[vcs].executable, ["clone", *args, url, str(dest)])
