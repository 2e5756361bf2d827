"""Query parsing and resolution."""

from repo_hq.core.models.query import DEFAULT_HOST, Query
from repo_hq.query.resolver import QueryResolver

__all__ = ["DEFAULT_HOST", "Query", "QueryResolver"]
