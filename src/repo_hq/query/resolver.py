"""Resolution of queries to local paths and remote URLs."""

from pathlib import Path

from repo_hq.core.models.query import Query


class QueryResolver:
    """Maps a Query onto the directory layout under a root directory.

    The layout is <root>/<host>/<path>, so github.com/org/repo ends up in
    <root>/github.com/org/repo.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self._root_dir = Path(root_dir).expanduser()

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def resolve(self, query: Query) -> Path:
        """Return the destination path of query under the root directory."""
        return self._root_dir.joinpath(query.effective_host, *query.path.split("/"))

    @staticmethod
    def to_url(query: Query, use_ssh: bool = False) -> str:
        """Build the remote URL handed to the clone command.

        - HTTPS: https://github.com/org/repo
        - SSH:   git@github.com:org/repo

        A query written as a full URL is returned verbatim unless SSH is
        requested, so its scheme and port are kept.
        """
        if query.url and not use_ssh:
            return query.url
        if use_ssh:
            return f"git@{query.effective_host}:{query.path}"
        return f"https://{query.effective_host}/{query.path}"
