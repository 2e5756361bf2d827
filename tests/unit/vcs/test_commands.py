"""Tests for VCS init and clone commands."""

import subprocess
from pathlib import Path

import pytest

from repo_hq.core.exceptions import ExternalCommandError
from repo_hq.core.models.repository import Vcs
from repo_hq.vcs import commands


class FakeRun:
    """Records subprocess.run calls and returns a fixed exit code."""

    def __init__(self, returncode: int = 0, error: Exception | None = None) -> None:
        self.returncode = returncode
        self.error = error
        self.calls: list[tuple[list[str], object]] = []

    def __call__(self, argv, cwd=None, check=False):
        self.calls.append((argv, cwd))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(argv, self.returncode)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr("repo_hq.utils.process.subprocess.run", fake)
    return fake


@pytest.mark.unit
class TestInit:
    """Tests for commands.init."""

    def test_creates_directory_and_runs_init(self, tmp_path: Path, fake_run: FakeRun) -> None:
        dest = tmp_path / "a" / "b"
        commands.init(dest, Vcs.PIJUL)
        assert dest.is_dir()
        assert fake_run.calls == [(["pijul", "init"], dest)]

    def test_nonzero_exit(self, tmp_path: Path, fake_run: FakeRun) -> None:
        fake_run.returncode = 3
        with pytest.raises(ExternalCommandError) as exc_info:
            commands.init(tmp_path / "repo", Vcs.HG)
        assert exc_info.value.returncode == 3
        assert exc_info.value.command == ["hg", "init"]

    def test_missing_executable(self, tmp_path: Path, fake_run: FakeRun) -> None:
        fake_run.error = FileNotFoundError("darcs")
        with pytest.raises(ExternalCommandError) as exc_info:
            commands.init(tmp_path / "repo", Vcs.DARCS)
        assert exc_info.value.returncode is None


@pytest.mark.unit
class TestClone:
    """Tests for commands.clone."""

    def test_clone_arguments(self, tmp_path: Path, fake_run: FakeRun) -> None:
        dest = tmp_path / "github.com" / "user" / "repo"
        commands.clone("https://github.com/user/repo", dest, Vcs.GIT, ["--depth", "1"])
        assert dest.parent.is_dir()
        argv, _ = fake_run.calls[0]
        assert argv == ["git", "clone", "--depth", "1", "https://github.com/user/repo", str(dest)]

    def test_clone_failure(self, tmp_path: Path, fake_run: FakeRun) -> None:
        fake_run.returncode = 128
        with pytest.raises(ExternalCommandError) as exc_info:
            commands.clone("https://github.com/user/repo", tmp_path / "repo", Vcs.GIT)
        assert exc_info.value.returncode == 128
        assert "128" in exc_info.value.message
