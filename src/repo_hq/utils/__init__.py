"""Utility helpers."""

from repo_hq.utils.process import join_command, run_inherit

__all__ = ["join_command", "run_inherit"]
