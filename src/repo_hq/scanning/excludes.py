"""Glob-based exclusion of paths from scanning and the catalog."""

import os
import re
from pathlib import Path

from repo_hq.core.exceptions import ConfigurationError

_VERBATIM_UNC_PREFIX = "\\\\?\\UNC\\"
_VERBATIM_PREFIX = "\\\\?\\"


def normalize_path(path: str | Path) -> str:
    """Strip Windows verbatim prefixes and use forward slashes."""
    text = str(path)
    if text.startswith(_VERBATIM_UNC_PREFIX):
        text = "\\\\" + text[len(_VERBATIM_UNC_PREFIX):]
    elif text.startswith(_VERBATIM_PREFIX):
        text = text[len(_VERBATIM_PREFIX):]
    return text.replace("\\", "/")


def _check_pattern(pattern: str) -> None:
    """Reject patterns the glob syntax does not allow."""
    if not pattern:
        raise ConfigurationError("Empty exclude pattern")

    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            # A leading "]" is part of the class
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            j = pattern.find("]", j)
            if j == -1:
                raise ConfigurationError(
                    f"Unclosed character class in exclude pattern: {pattern}",
                    details={"pattern": pattern},
                )
            i = j
        i += 1

    for component in pattern.split("/"):
        if "**" in component and component != "**":
            raise ConfigurationError(
                f"'**' must form a whole path component: {pattern}",
                details={"pattern": pattern},
            )


def _translate(pattern: str) -> str:
    """Translate a validated glob pattern into a regular expression.

    `**/` matches zero or more whole components, so /w/**/build matches
    both /w/build and /w/a/b/build.
    """
    parts = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if pattern.startswith("**", i):
            i += 2
            if i < n:
                # Consume the separator that follows
                parts.append("(?:.*/)?")
                i += 1
            else:
                parts.append(".*")
            continue
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c == "[":
            j = i + 1
            negate = j < n and pattern[j] == "!"
            if negate:
                j += 1
            start = j
            if j < n and pattern[j] == "]":
                j += 1
            j = pattern.find("]", j)
            body = "".join("\\" + ch if ch in "\\^[]" else ch for ch in pattern[start:j])
            parts.append("[" + ("^" if negate else "") + body + "]")
            i = j
        else:
            parts.append(re.escape(c))
        i += 1
    return "(?s:" + "".join(parts) + r")\Z"


class ExcludeMatcher:
    """A set of compiled exclusion patterns.

    Supports *, **, ? and [...] classes. As with the usual glob engines for
    absolute paths, * is allowed to match across separators.
    """

    def __init__(self, patterns: list[str], compiled: list[re.Pattern[str]]) -> None:
        self._patterns = patterns
        self._compiled = compiled

    @classmethod
    def from_patterns(cls, patterns: list[str] | tuple[str, ...]) -> "ExcludeMatcher":
        """Compile patterns, raising ConfigurationError on invalid ones."""
        expanded = []
        compiled = []
        for pattern in patterns:
            if pattern.startswith("~"):
                pattern = os.path.expanduser(pattern)
            pattern = normalize_path(pattern)
            _check_pattern(pattern)
            try:
                compiled.append(re.compile(_translate(pattern)))
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid exclude pattern {pattern!r}: {e}",
                    details={"pattern": pattern},
                ) from e
            expanded.append(pattern)
        return cls(expanded, compiled)

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._compiled)

    def matches(self, path: str | Path) -> bool:
        """True when any pattern matches the normalized path string."""
        text = normalize_path(path)
        return any(regex.match(text) for regex in self._compiled)
