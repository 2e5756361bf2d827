"""Query model: a short identifier for a remote repository."""

import re
from urllib.parse import urlsplit

from pydantic import BaseModel

from repo_hq.core.exceptions import QueryParseError

DEFAULT_HOST = "github.com"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_SCP_RE = re.compile(r"^[^@/:\s]+@([^:/\s]+):(.+)$")


class Query(BaseModel):
    """A parsed repository identifier.

    Accepted forms:
    - user/repo                      (host defaults to github.com)
    - gitlab.com/user/repo
    - https://gitlab.com/user/repo.git
    - git@gitlab.com:user/repo.git
    """

    host: str | None = None
    path: str
    # The text as given, for queries written as a full URL
    url: str | None = None

    class Config:
        frozen = True

    @property
    def effective_host(self) -> str:
        return self.host or DEFAULT_HOST

    @classmethod
    def parse(cls, text: str) -> "Query":
        """Parse a query string, raising QueryParseError when malformed."""
        text = text.strip()
        if not text:
            raise QueryParseError("Empty query")

        if _SCHEME_RE.match(text):
            parts = urlsplit(text)
            if not parts.hostname:
                raise QueryParseError(
                    f"Missing host in query URL: {text}", details={"query": text}
                )
            return cls(host=parts.hostname, path=_normalize_path(parts.path, text), url=text)

        scp_match = _SCP_RE.match(text)
        if scp_match:
            host, path = scp_match.groups()
            return cls(host=host, path=_normalize_path(path, text))

        segments = [s for s in text.split("/") if s]
        # GitHub user names cannot contain dots, so a dotted first segment is a host
        if len(segments) >= 2 and "." in segments[0].strip("."):
            return cls(host=segments[0], path=_normalize_path("/".join(segments[1:]), text))
        return cls(host=None, path=_normalize_path(text, text))

    def __str__(self) -> str:
        return f"{self.effective_host}/{self.path}"


def _normalize_path(path: str, original: str) -> str:
    segments = [s for s in path.split("/") if s]
    if segments and segments[-1].endswith(".git") and len(segments[-1]) > len(".git"):
        segments[-1] = segments[-1][: -len(".git")]
    if not segments:
        raise QueryParseError(
            f"No repository path in query: {original}", details={"query": original}
        )
    if any(s in (".", "..") for s in segments):
        raise QueryParseError(
            f"Relative segments are not allowed in query: {original}",
            details={"query": original},
        )
    return "/".join(segments)
