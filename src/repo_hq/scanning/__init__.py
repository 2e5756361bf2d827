"""Filesystem scanning for repositories."""

from repo_hq.scanning.excludes import ExcludeMatcher, normalize_path
from repo_hq.scanning.scanner import RepositoryScanner, scan

__all__ = ["ExcludeMatcher", "RepositoryScanner", "normalize_path", "scan"]
