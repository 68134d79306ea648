"""
GitHub API client for fetching repository statistics.

Uses the GitHub REST API to retrieve stars, forks, open issues, last push
and archived status for the repository a package declares.

GitHub's unauthenticated rate limit is 60 requests/hour; set GITHUB_TOKEN
for anything beyond occasional use.
"""

import os
import re
from datetime import datetime, timezone
from typing import Any

import aiohttp

from pkgintel.collectors.base import Collector
from pkgintel.core.exceptions import NetworkError, RateLimitError
from pkgintel.core.models import Lookup, RepoStat

# https://github.com/owner/repo(.git), git+https://..., git@github.com:owner/repo.git
_GITHUB_URL_PATTERN = re.compile(
    r"github\.com[/:]([\w-]+)/([\w.-]+?)(?:\.git)?(?:/|$)",
    re.IGNORECASE,
)


def resolve_repo_from_url(url: str | None) -> tuple[str, str] | None:
    """Extract (owner, name) from a repository URL.

    Args:
        url: Repository URL in any of the forms npm manifests use.

    Returns:
        Tuple of (owner, repo), or None if the URL isn't a GitHub URL.
    """
    if not url:
        return None
    if match := _GITHUB_URL_PATTERN.search(url):
        owner, repo = match.groups()
        return owner, repo
    return None


class GitHubClient(Collector):
    """Async client for the GitHub repositories API."""

    SERVICE = "GitHub"

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        token: str | None = None,
        timeout: int = 30,
    ):
        """Initialize the GitHub client.

        Args:
            session: Optional aiohttp session.
            token: Optional GitHub personal access token for higher rate limits.
            timeout: Request timeout in seconds.
        """
        super().__init__(session, timeout)
        self.token = token or os.environ.get("GITHUB_TOKEN")

    async def fetch_repo(self, owner: str, repo: str) -> Lookup[RepoStat]:
        """Fetch repository statistics.

        Args:
            owner: Repository owner.
            repo: Repository name.

        Returns:
            FOUND with a RepoStat, ABSENT if the repository doesn't exist or
            is private, ERROR otherwise.
        """
        result = await self._get_json(f"{self.BASE_URL}/repos/{owner}/{repo}")
        if not result.ok:
            return result
        if not isinstance(result.value, dict):
            return Lookup.error(f"Unexpected repository response for {owner}/{repo}")
        return Lookup.found(self.parse_repo(owner, repo, result.value))

    async def fetch_repo_from_url(self, url: str | None) -> Lookup[RepoStat]:
        """Fetch statistics for the repository behind a declared URL.

        Returns:
            ABSENT when the URL can't be resolved to a GitHub repository.
        """
        resolved = resolve_repo_from_url(url)
        if resolved is None:
            return Lookup.absent(f"Unresolvable repository URL: {url}")
        return await self.fetch_repo(*resolved)

    def parse_repo(self, owner: str, repo: str, data: dict[str, Any]) -> RepoStat:
        """Build a RepoStat from a repositories API response."""
        return RepoStat(
            owner=owner,
            name=data.get("name") or repo,
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            open_issues=data.get("open_issues_count") or 0,
            last_push=data.get("pushed_at"),
            archived=bool(data.get("archived", False)),
        )

    def _raise_for_status(self, url: str, resp: aiohttp.ClientResponse) -> None:
        if resp.status == 403:
            # Check for rate limiting
            remaining = resp.headers.get("X-RateLimit-Remaining", "0")
            if remaining == "0":
                reset_time = int(resp.headers.get("X-RateLimit-Reset", 0))
                current_time = int(datetime.now(timezone.utc).timestamp())
                raise RateLimitError(url, self.SERVICE, max(reset_time - current_time, 0))
            raise NetworkError(url, resp.status, "Access forbidden")
        super()._raise_for_status(url, resp)

    def _build_headers(self) -> dict[str, str]:
        """Build request headers for GitHub API."""
        headers = super()._build_headers()
        headers["Accept"] = "application/vnd.github.v3+json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
