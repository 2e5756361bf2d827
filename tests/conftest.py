"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from repo_hq.config.settings import Settings, get_settings
from repo_hq.core.models.repository import Vcs
from repo_hq.vcs.probe import BACKENDS


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's config file, environment and cache out of tests."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    for var in ("REPO_HQ_ROOT", "REPO_HQ_INCLUDES", "REPO_HQ_EXCLUDES", "REPO_HQ_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("REPO_HQ_CONFIG", str(config_dir / "config.toml"))
    monkeypatch.setenv("REPO_HQ_CACHE_PATH", str(tmp_path / "cache" / "cache.json"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield config_dir / "config.toml"
    get_settings.cache_clear()


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    """Directory that holds the repositories created by a test."""
    path = tmp_path / "w"
    path.mkdir()
    return path


@pytest.fixture
def make_repo() -> Callable[..., Path]:
    """Create a directory carrying the control directory of a VCS."""

    def _make_repo(path: Path, vcs: Vcs = Vcs.GIT) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / BACKENDS[vcs].marker).mkdir(exist_ok=True)
        return path

    return _make_repo


@pytest.fixture
def settings(tmp_path: Path, workspace_dir: Path) -> Settings:
    """Settings rooted at the test workspace with a private cache file."""
    return Settings(
        root=str(workspace_dir),
        cache_path=str(tmp_path / "cache" / "cache.json"),
    )
