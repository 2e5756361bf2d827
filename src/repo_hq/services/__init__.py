"""Services layer for repo-hq."""

from repo_hq.services.workspace import AddAction, Workspace

__all__ = ["AddAction", "Workspace"]
