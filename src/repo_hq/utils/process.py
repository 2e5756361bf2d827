"""Helpers for running external commands with inherited stdio."""

import shlex
import subprocess
from pathlib import Path

import structlog

from repo_hq.core.exceptions import ExternalCommandError

logger = structlog.get_logger(__name__)


def join_command(command: str, args: list[str] | tuple[str, ...] = ()) -> str:
    """Render a command line for display."""
    return shlex.join([command, *args])


def run_inherit(
    command: str,
    args: list[str] | tuple[str, ...] = (),
    cwd: str | Path | None = None,
) -> None:
    """Run a command attached to the current terminal.

    Raises ExternalCommandError when the command cannot be launched or
    exits with a non-zero status.
    """
    argv = [command, *args]
    logger.debug("Running command", command=join_command(command, args), cwd=str(cwd))
    try:
        result = subprocess.run(argv, cwd=cwd, check=False)
    except OSError as e:
        raise ExternalCommandError(
            f"Failed to launch '{command}': {e}",
            command=argv,
        ) from e

    if result.returncode != 0:
        raise ExternalCommandError(
            f"Command '{command}' exited with return code {result.returncode}",
            command=argv,
            returncode=result.returncode,
        )
