"""CLI for repo-hq."""

import functools
import shlex
import sys
from pathlib import Path

import click
import structlog
from click.shell_completion import get_completion_class

from repo_hq.config.logging import configure_logging
from repo_hq.core.exceptions import ConfigurationError, QueryParseError, RepoHQError
from repo_hq.core.models.query import Query
from repo_hq.core.models.repository import Remote, Repository, Vcs
from repo_hq.query.resolver import QueryResolver
from repo_hq.services.workspace import Workspace
from repo_hq.utils.process import join_command, run_inherit
from repo_hq.vcs import commands as vcs_commands
from repo_hq.vcs.probe import detect_from_path

logger = structlog.get_logger(__name__)

VCS_CHOICES = [v.value for v in Vcs]
COMPLETION_SHELLS = ["bash", "zsh", "fish"]


def handle_errors(func):
    """Report RepoHQError as a message on stderr and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RepoHQError as e:
            click.echo(f"Error: {e.message}", err=True)
            sys.exit(1)

    return wrapper


def _open_workspace(root: str | Path | None = None) -> Workspace:
    from repo_hq.config.settings import get_settings

    return Workspace(get_settings(), root=root)


def _path_or_query(workspace: Workspace, text: str) -> Path:
    """Interpret text as a filesystem path or, failing that, as a query."""
    if text.startswith(("/", ".", "~")):
        return Path(text).expanduser()
    try:
        query = Query.parse(text)
    except QueryParseError:
        return Path(text)
    return workspace.resolve_query(query)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(package_name="repo-hq")
def cli(verbose: bool) -> None:
    """repo-hq: manage local clones of remote repositories."""
    from repo_hq.config.settings import get_settings

    log_level = "DEBUG" if verbose else None
    if log_level is None:
        try:
            log_level = get_settings().log_level
        except RepoHQError:
            log_level = "WARNING"
    configure_logging(log_level=log_level)


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@handle_errors
def add(paths: tuple[Path, ...]) -> None:
    """Add existing repositories into management."""
    workspace = _open_workspace()
    for path in paths or (Path.cwd(),):
        repo = workspace.new_repository_from_path(path)
        if repo is None:
            click.echo(f"Ignored: {path} is not a repository")
            continue
        action = workspace.add_repository(repo)
        click.echo(f"{action.value.capitalize()}: {repo.path}")
    workspace.save_cache()


@cli.command(name="import")
@click.argument("roots", nargs=-1, type=click.Path(path_type=Path))
@click.option("--depth", "-d", type=click.IntRange(min=0), default=None,
              help="Maximal depth of entries below each root")
@handle_errors
def import_(roots: tuple[Path, ...], depth: int | None) -> None:
    """Import existing repositories found below root directories.

    Without ROOTS, the `includes` directories from the configuration are used.
    """
    workspace = _open_workspace()
    scan_roots = list(roots) or workspace.settings.include_dirs
    if not scan_roots:
        raise ConfigurationError("No root directories given and no 'includes' configured")

    for root in scan_roots:
        imported = workspace.import_repositories(root, depth)
        click.echo(f"Imported {len(imported)} repositories from {root}")
    workspace.save_cache()


@cli.command()
@click.option("--sort", "-s", is_flag=True, help="Sort entries by name")
@handle_errors
def refresh(sort: bool) -> None:
    """Drop repositories that no longer exist or match an exclude pattern."""
    workspace = _open_workspace()
    dropped = workspace.drop_invalid_repositories()
    for repo in dropped:
        click.echo(f"Dropped: {repo.path}")
    if sort:
        workspace.sort_repositories()
    workspace.save_cache()


@cli.command()
@click.argument("path")
@click.option("--vcs", type=click.Choice(VCS_CHOICES), default=Vcs.GIT.value,
              show_default=True, help="Version control system to use")
@click.option("--hook", help="Command to run inside the repository after init")
@handle_errors
def new(path: str, vcs: str, hook: str | None) -> None:
    """Create a new repository and add it into management.

    PATH is a directory, or a query resolved below the root directory.
    """
    workspace = _open_workspace()
    dest = _path_or_query(workspace, path)
    kind = Vcs(vcs)

    if detect_from_path(dest) is not None:
        click.echo(f"The repository {dest} already exists.")
        return

    click.echo(f"Creating an empty repository at {dest} (VCS: {kind.value})")
    vcs_commands.init(dest, kind)
    repo = Repository.from_path(dest, kind)

    if hook:
        argv = shlex.split(hook)
        if argv:
            click.echo("Running post hook command...")
            run_inherit(argv[0], argv[1:], cwd=repo.path)

    workspace.add_repository(repo)
    workspace.save_cache()


@cli.command(name="clone")
@click.argument("query")
@click.argument("dest", required=False, type=click.Path(path_type=Path))
@click.argument("args", nargs=-1)
@click.option("--root", type=click.Path(path_type=Path),
              help="Root directory used to determine the destination")
@click.option("--ssh", "-s", is_flag=True, help="Use the SSH protocol")
@click.option("--vcs", type=click.Choice(VCS_CHOICES), default=Vcs.GIT.value,
              show_default=True, help="Version control system to use")
@handle_errors
def clone_(
    query: str,
    dest: Path | None,
    args: tuple[str, ...],
    root: Path | None,
    ssh: bool,
    vcs: str,
) -> None:
    """Clone a remote repository and add it into management.

    QUERY is a URL or a short form such as `user/repo` or `gitlab.com/user/repo`.
    Extra ARGS are passed to the VCS clone command (put them after `--`).
    """
    workspace = _open_workspace(root=root)
    parsed = Query.parse(query)
    target = dest or workspace.resolve_query(parsed)
    url = QueryResolver.to_url(parsed, use_ssh=ssh)
    kind = Vcs(vcs)

    if detect_from_path(target) is not None:
        click.echo(f"The repository {target} already exists.")
        return

    click.echo(f"Cloning {url} into {target} ({kind.value}, arguments: {shlex.join(args)})")
    vcs_commands.clone(url, target, kind, args)
    repo = Repository.from_path(target, kind, Remote(url=url))

    workspace.add_repository(repo)
    workspace.save_cache()


@cli.command(name="list")
@click.option("--format", "fmt", type=click.Choice(["name", "fullpath"]),
              default="fullpath", show_default=True, help="List format")
@handle_errors
def list_(fmt: str) -> None:
    """List local repositories under management."""
    workspace = _open_workspace()
    for repo in workspace.repositories:
        click.echo(repo.name if fmt == "name" else repo.path)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("--dry-run", "-n", is_flag=True, help="Print commands without running them")
@handle_errors
def foreach(command: str, args: tuple[str, ...], dry_run: bool) -> None:
    """Execute a command in each repository."""
    workspace = _open_workspace()
    failures = []

    def run(repo: Repository) -> None:
        if dry_run:
            click.echo(f"+ {join_command(command, args)}  # in {repo.path}")
            return
        try:
            run_inherit(command, args, cwd=repo.path)
        except RepoHQError as e:
            logger.warning("Command failed", path=repo.path, error=e.message)
            failures.append((repo, e))

    workspace.for_each_repo(run)

    if failures:
        for repo, error in failures:
            click.echo(f"Failed in {repo.path}: {error.message}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("shell", type=click.Choice(COMPLETION_SHELLS))
@click.argument("out_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@handle_errors
def completion(shell: str, out_file: Path | None) -> None:
    """Generate the completion script for a shell."""
    completion_class = get_completion_class(shell)
    script = completion_class(cli, {}, "repo-hq", "_REPO_HQ_COMPLETE").source()
    if out_file:
        try:
            out_file.write_text(script, encoding="utf-8")
        except OSError as e:
            raise RepoHQError(
                f"Cannot write completion script to {out_file}: {e}",
                details={"path": str(out_file)},
            ) from e
    else:
        click.echo(script)


if __name__ == "__main__":
    cli()
