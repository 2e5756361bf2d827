"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from repo_hq.cli import cli
from repo_hq.core.models.repository import Vcs
from repo_hq.vcs.probe import BACKENDS


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cache_file(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "cache.json"


@pytest.fixture
def configured(isolated_config: Path, workspace_dir: Path) -> Path:
    """Write a config file rooted at the test workspace."""
    isolated_config.write_text(
        f'root = "{workspace_dir}"\nincludes = ["{workspace_dir}"]\n'
    )
    return isolated_config


def _cached_paths(cache_file: Path) -> list[str]:
    data = json.loads(cache_file.read_text())
    return [r["path"] for r in data["repositories"]]


@pytest.mark.unit
class TestAddAndList:
    """Tests for `add` and `list`."""

    def test_add_and_list(
        self, runner: CliRunner, workspace_dir: Path, make_repo, cache_file: Path
    ) -> None:
        repo = make_repo(workspace_dir / "alpha")
        result = runner.invoke(cli, ["add", str(repo), str(workspace_dir)])
        assert result.exit_code == 0, result.output
        assert "Added:" in result.output
        assert f"Ignored: {workspace_dir} is not a repository" in result.output
        assert _cached_paths(cache_file) == [str(repo.resolve())]

        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(repo.resolve())

        result = runner.invoke(cli, ["list", "--format", "name"])
        assert result.stdout.strip() == "alpha"

    def test_add_defaults_to_cwd(
        self, runner: CliRunner, workspace_dir: Path, make_repo,
        monkeypatch: pytest.MonkeyPatch, cache_file: Path,
    ) -> None:
        repo = make_repo(workspace_dir / "here")
        monkeypatch.chdir(repo)
        result = runner.invoke(cli, ["add"])
        assert result.exit_code == 0, result.output
        assert _cached_paths(cache_file) == [str(repo.resolve())]

    def test_list_without_cache(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_corrupt_cache_fails(self, runner: CliRunner, cache_file: Path) -> None:
        cache_file.parent.mkdir(parents=True)
        cache_file.write_text("garbage")
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 1
        assert "Error:" in result.output


@pytest.mark.unit
class TestImportAndRefresh:
    """Tests for `import` and `refresh`."""

    def test_import_roots(
        self, runner: CliRunner, workspace_dir: Path, make_repo, cache_file: Path
    ) -> None:
        make_repo(workspace_dir / "a")
        make_repo(workspace_dir / "nested" / "b", Vcs.HG)
        result = runner.invoke(cli, ["import", str(workspace_dir), "--depth", "1"])
        assert result.exit_code == 0, result.output
        assert [Path(p).name for p in _cached_paths(cache_file)] == ["a"]

    def test_import_uses_configured_includes(
        self, runner: CliRunner, configured: Path, workspace_dir: Path, make_repo,
        cache_file: Path,
    ) -> None:
        make_repo(workspace_dir / "a")
        make_repo(workspace_dir / "b")
        result = runner.invoke(cli, ["import"])
        assert result.exit_code == 0, result.output
        assert sorted(Path(p).name for p in _cached_paths(cache_file)) == ["a", "b"]

    def test_import_without_roots_fails(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["import"])
        assert result.exit_code == 1
        assert "includes" in result.output

    def test_refresh_and_sort(
        self, runner: CliRunner, workspace_dir: Path, make_repo, cache_file: Path
    ) -> None:
        for name in ("c", "b", "a"):
            make_repo(workspace_dir / name)
        runner.invoke(cli, ["add", *(str(workspace_dir / n) for n in ("c", "b", "a"))])
        (workspace_dir / "b" / ".git").rmdir()

        result = runner.invoke(cli, ["refresh", "--sort"])
        assert result.exit_code == 0, result.output
        assert "Dropped:" in result.output
        assert [Path(p).name for p in _cached_paths(cache_file)] == ["a", "c"]


@pytest.mark.unit
class TestNewAndClone:
    """Tests for `new` and `clone` with the VCS commands stubbed out."""

    @pytest.fixture
    def fake_vcs(self, monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
        calls: list[tuple] = []

        def fake_init(path, vcs):
            calls.append(("init", Path(path), vcs))
            (Path(path) / BACKENDS[vcs].marker).mkdir(parents=True)

        def fake_clone(url, dest, vcs, args=()):
            calls.append(("clone", url, Path(dest), vcs, tuple(args)))
            (Path(dest) / BACKENDS[vcs].marker).mkdir(parents=True)

        monkeypatch.setattr("repo_hq.cli.vcs_commands.init", fake_init)
        monkeypatch.setattr("repo_hq.cli.vcs_commands.clone", fake_clone)
        return calls

    def test_clone_resolves_query(
        self, runner: CliRunner, configured: Path, workspace_dir: Path,
        fake_vcs: list, cache_file: Path,
    ) -> None:
        result = runner.invoke(cli, ["clone", "user/repo"])
        assert result.exit_code == 0, result.output
        dest = workspace_dir / "github.com" / "user" / "repo"
        assert fake_vcs == [("clone", "https://github.com/user/repo", dest, Vcs.GIT, ())]

        data = json.loads(cache_file.read_text())
        assert data["repositories"][0]["remote"] == {"url": "https://github.com/user/repo"}

    def test_clone_ssh_with_root_and_args(
        self, runner: CliRunner, tmp_path: Path, fake_vcs: list
    ) -> None:
        root = tmp_path / "elsewhere"
        dest = tmp_path / "dest"
        result = runner.invoke(
            cli,
            ["clone", "--ssh", "--root", str(root), "gitlab.com/u/r", str(dest), "--", "--depth", "1"],
        )
        assert result.exit_code == 0, result.output
        assert fake_vcs == [("clone", "git@gitlab.com:u/r", dest, Vcs.GIT, ("--depth", "1"))]

    def test_clone_full_url_is_passed_verbatim(
        self, runner: CliRunner, configured: Path, workspace_dir: Path, fake_vcs: list
    ) -> None:
        url = "ssh://git@example.org:2222/team/tool"
        result = runner.invoke(cli, ["clone", url])
        assert result.exit_code == 0, result.output
        dest = workspace_dir / "example.org" / "team" / "tool"
        assert fake_vcs == [("clone", url, dest, Vcs.GIT, ())]

    def test_clone_existing_repository_is_left_alone(
        self, runner: CliRunner, configured: Path, workspace_dir: Path, make_repo,
        fake_vcs: list,
    ) -> None:
        make_repo(workspace_dir / "github.com" / "user" / "repo")
        result = runner.invoke(cli, ["clone", "user/repo"])
        assert result.exit_code == 0
        assert "already exists" in result.output
        assert fake_vcs == []

    def test_clone_without_root_fails(self, runner: CliRunner, fake_vcs: list) -> None:
        result = runner.invoke(cli, ["clone", "user/repo"])
        assert result.exit_code == 1
        assert "root" in result.output
        assert fake_vcs == []

    def test_clone_bad_query_fails(self, runner: CliRunner, configured: Path, fake_vcs: list) -> None:
        result = runner.invoke(cli, ["clone", "https://github.com/"])
        assert result.exit_code == 1
        assert fake_vcs == []

    def test_new_from_query(
        self, runner: CliRunner, configured: Path, workspace_dir: Path,
        fake_vcs: list, cache_file: Path,
    ) -> None:
        result = runner.invoke(cli, ["new", "user/fresh", "--vcs", "hg"])
        assert result.exit_code == 0, result.output
        dest = workspace_dir / "github.com" / "user" / "fresh"
        assert fake_vcs == [("init", dest, Vcs.HG)]
        assert _cached_paths(cache_file) == [str(dest.resolve())]

    def test_new_from_path(self, runner: CliRunner, tmp_path: Path, fake_vcs: list) -> None:
        dest = tmp_path / "plain"
        result = runner.invoke(cli, ["new", str(dest)])
        assert result.exit_code == 0, result.output
        assert fake_vcs == [("init", dest, Vcs.GIT)]


@pytest.mark.unit
class TestForeachAndCompletion:
    """Tests for `foreach` and `completion`."""

    def test_foreach_dry_run(
        self, runner: CliRunner, workspace_dir: Path, make_repo
    ) -> None:
        repos = [make_repo(workspace_dir / n) for n in ("a", "b")]
        runner.invoke(cli, ["add", *map(str, repos)])
        result = runner.invoke(cli, ["foreach", "--dry-run", "git", "status"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 2
        assert all(line.startswith("+ git status") for line in lines)

    def test_foreach_reports_failures(
        self, runner: CliRunner, workspace_dir: Path, make_repo
    ) -> None:
        repo = make_repo(workspace_dir / "a")
        runner.invoke(cli, ["add", str(repo)])
        result = runner.invoke(cli, ["foreach", "repo-hq-no-such-command"])
        assert result.exit_code == 1
        assert "Failed in" in result.output

    @pytest.mark.parametrize("shell", ["bash", "zsh", "fish"])
    def test_completion(self, runner: CliRunner, shell: str) -> None:
        result = runner.invoke(cli, ["completion", shell])
        assert result.exit_code == 0
        assert "_REPO_HQ_COMPLETE" in result.output

    def test_completion_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "repo-hq.bash"
        result = runner.invoke(cli, ["completion", "bash", str(out)])
        assert result.exit_code == 0
        assert "_REPO_HQ_COMPLETE" in out.read_text()

    def test_completion_write_failure(self, runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "missing-dir" / "repo-hq.bash"
        result = runner.invoke(cli, ["completion", "bash", str(out)])
        assert result.exit_code == 1
        assert "Error: Cannot write completion script" in result.output
        assert not isinstance(result.exception, OSError)
