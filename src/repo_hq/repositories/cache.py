"""JSON file storage for the repository catalog."""

import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from repo_hq.core.exceptions import CacheCorruptError
from repo_hq.core.models.repository import RepositoryCatalog

logger = structlog.get_logger(__name__)


class CacheStore:
    """Reads and writes the catalog cache file.

    Writes go to a temporary file in the same directory which then replaces
    the cache, so an interrupted save leaves the previous cache intact.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> RepositoryCatalog:
        """Load the catalog; a missing cache file yields an empty catalog."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No cache file, starting empty", path=str(self._path))
            return RepositoryCatalog()
        except (OSError, UnicodeDecodeError) as e:
            raise CacheCorruptError(
                f"Cannot read cache file {self._path}: {e}",
                details={"path": str(self._path)},
            ) from e

        try:
            catalog = RepositoryCatalog.model_validate_json(raw)
        except ValidationError as e:
            raise CacheCorruptError(
                f"Malformed cache file {self._path}: {e.error_count()} error(s)",
                details={"path": str(self._path), "errors": e.errors(include_url=False)},
            ) from e

        logger.debug(
            "Cache loaded", path=str(self._path), repositories=len(catalog.repositories)
        )
        return catalog

    def dump(self, catalog: RepositoryCatalog) -> None:
        """Atomically replace the cache file with catalog."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(catalog.model_dump(mode="json"), indent=2) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(
            "Cache saved", path=str(self._path), repositories=len(catalog.repositories)
        )
