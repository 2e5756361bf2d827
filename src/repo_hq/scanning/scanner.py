"""Discovery of repositories below a root directory."""

import os
from pathlib import Path

import structlog

from repo_hq.scanning.excludes import ExcludeMatcher
from repo_hq.vcs.probe import detect_from_path

logger = structlog.get_logger(__name__)


class RepositoryScanner:
    """Walks directory trees looking for VCS-controlled directories.

    The walk follows symbolic links and uses an explicit stack. A directory
    other than the scan root is pruned, together with everything below it,
    when its immediate parent is a repository root or when its canonical
    path matches an exclude pattern. Only the parent is checked, not every
    ancestor.
    """

    def __init__(self, excludes: ExcludeMatcher | None = None) -> None:
        self._excludes = excludes or ExcludeMatcher.from_patterns([])

    def scan(self, root: str | Path, max_depth: int | None = None) -> set[Path]:
        """Return the repository paths found under root.

        The root is depth 0; with max_depth set, deeper entries are not
        visited. The result set is deterministic, its order is not.
        """
        root = Path(root).expanduser().absolute()
        try:
            root_real = os.path.realpath(root)
        except OSError:
            root_real = str(root)

        found: set[Path] = set()
        # Each entry carries the canonical paths of the directories above it
        stack: list[tuple[Path, int, tuple[str, ...]]] = [(root, 0, ())]
        while stack:
            path, depth, ancestors = stack.pop()
            real = root_real if depth == 0 else self._canonicalize(path)

            if depth > 0:
                if real is None or not self._is_eligible(path, real):
                    continue
                if real in ancestors:
                    logger.debug("Skipping symlink loop", path=str(path))
                    continue

            if detect_from_path(path) is not None:
                found.add(path)

            if max_depth is not None and depth >= max_depth:
                continue

            chain = (*ancestors, real)
            for child in self._list_subdirectories(path):
                stack.append((child, depth + 1, chain))

        logger.debug("Scan finished", root=str(root), found=len(found))
        return found

    def _is_eligible(self, path: Path, real: str) -> bool:
        if detect_from_path(path.parent) is not None:
            return False
        return not self._excludes.matches(real)

    @staticmethod
    def _canonicalize(path: Path) -> str | None:
        try:
            return str(path.resolve(strict=True))
        except (OSError, RuntimeError) as e:
            logger.debug("Cannot canonicalize entry", path=str(path), error=str(e))
            return None

    @staticmethod
    def _list_subdirectories(path: Path) -> list[Path]:
        try:
            with os.scandir(path) as entries:
                children = []
                for entry in entries:
                    try:
                        if entry.is_dir():
                            children.append(Path(entry.path))
                    except OSError as e:
                        logger.debug("Skipping entry", path=entry.path, error=str(e))
                return children
        except OSError as e:
            logger.debug("Cannot read directory", path=str(path), error=str(e))
            return []


def scan(
    root: str | Path,
    max_depth: int | None = None,
    excludes: ExcludeMatcher | None = None,
) -> set[Path]:
    """Convenience wrapper around RepositoryScanner.scan."""
    return RepositoryScanner(excludes).scan(root, max_depth)
