"""VCS detection and command integration."""

from repo_hq.vcs.commands import clone, init
from repo_hq.vcs.probe import BACKENDS, VcsBackend, detect_from_path, get_remote_url

__all__ = [
    "BACKENDS",
    "VcsBackend",
    "clone",
    "detect_from_path",
    "get_remote_url",
    "init",
]
