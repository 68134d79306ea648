"""
Data collectors for fetching package data from external sources.

This module provides async clients for the npm registry, GitHub repositories
and GitHub security advisories.
"""

from pkgintel.collectors.advisories import AdvisoryClient
from pkgintel.collectors.base import Collector
from pkgintel.collectors.github import GitHubClient, resolve_repo_from_url
from pkgintel.collectors.npm import NpmClient

__all__ = [
    "Collector",
    "NpmClient",
    "GitHubClient",
    "AdvisoryClient",
    "resolve_repo_from_url",
]
