"""
Pytest fixtures and configuration for pkgintel tests.

Provides sample records, raw API responses and mocked data sources for
unit testing without network access.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from pkgintel.core.models import (
    AdvisoryRecord,
    DownloadStat,
    DownloadWindow,
    Lookup,
    PackageProfile,
    RepoStat,
    Severity,
)
from pkgintel.reports.generator import ReportGenerator

FIXED_NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_profile() -> Callable[..., PackageProfile]:
    """Factory for registry profiles with sensible defaults."""

    def _make(name: str, version: str = "1.0.0", **kwargs: Any) -> PackageProfile:
        defaults = {
            "description": f"The {name} package",
            "license": "MIT",
            "maintainer_count": 2,
            "versions": (version,),
            "publish_times": {version: "2025-05-01T00:00:00.000Z"},
            "repository_url": f"git+https://github.com/example/{name}.git",
        }
        defaults.update(kwargs)
        return PackageProfile(name=name, version=version, **defaults)

    return _make


@pytest.fixture
def make_advisory() -> Callable[..., AdvisoryRecord]:
    """Factory for advisory records."""
    counter = iter(range(1, 1000))

    def _make(severity: Severity = Severity.MODERATE, **kwargs: Any) -> AdvisoryRecord:
        number = next(counter)
        defaults = {
            "id": f"GHSA-test-{number:04d}",
            "title": f"Advisory {number}",
        }
        defaults.update(kwargs)
        return AdvisoryRecord(severity=severity, **defaults)

    return _make


@pytest.fixture
def sample_profile(make_profile) -> PackageProfile:
    """Create a sample profile with a version history."""
    return make_profile(
        "express",
        version="4.19.2",
        description="Fast, unopinionated, minimalist web framework",
        keywords=("express", "framework", "web", "http", "rest"),
        maintainer_count=4,
        versions=("4.17.1", "4.18.0", "4.18.2", "4.19.0", "4.19.2", "5.0.0-beta.1"),
        publish_times={
            "4.17.1": "2019-05-26T04:25:34.606Z",
            "4.19.2": "2024-03-25T16:00:00.000Z",
        },
        repository_url="git+https://github.com/expressjs/express.git",
        homepage="http://expressjs.com/",
    )


@pytest.fixture
def sample_repo() -> RepoStat:
    """Create sample repository statistics."""
    return RepoStat(
        owner="expressjs",
        name="express",
        stars=64000,
        forks=14000,
        open_issues=180,
        last_push="2025-05-20T10:00:00Z",
        archived=False,
    )


# =============================================================================
# Mock API Response Fixtures
# =============================================================================


@pytest.fixture
def mock_packument() -> dict[str, Any]:
    """Create a mock npm registry packument."""
    return {
        "name": "left-pad",
        "description": "String left pad",
        "dist-tags": {"latest": "1.3.0"},
        "versions": {
            "1.0.0": {"name": "left-pad", "version": "1.0.0"},
            "1.1.0": {"name": "left-pad", "version": "1.1.0"},
            "1.3.0": {
                "name": "left-pad",
                "version": "1.3.0",
                "keywords": ["leftpad", "pad", "typescript"],
                "homepage": "https://github.com/stevemao/left-pad#readme",
            },
        },
        "time": {
            "created": "2014-03-17T22:58:15.000Z",
            "modified": "2022-06-19T11:27:54.000Z",
            "1.0.0": "2014-03-17T22:58:15.000Z",
            "1.1.0": "2016-03-23T10:44:09.000Z",
            "1.3.0": "2018-04-09T01:03:22.000Z",
        },
        "maintainers": [{"name": "stevemao"}, {"name": "azer"}],
        "license": {"type": "WTFPL"},
        "repository": {"type": "git", "url": "git+https://github.com/stevemao/left-pad.git"},
    }


@pytest.fixture
def mock_github_response() -> dict[str, Any]:
    """Create a mock GitHub repositories API response."""
    return {
        "name": "left-pad",
        "full_name": "stevemao/left-pad",
        "stargazers_count": 1200,
        "forks_count": 110,
        "open_issues_count": 3,
        "pushed_at": "2019-01-02T03:04:05Z",
        "archived": True,
    }


@pytest.fixture
def mock_advisory_response() -> list[dict[str, Any]]:
    """Create a mock GitHub global advisories API response."""
    return [
        {
            "ghsa_id": "GHSA-p6mc-m468-83gw",
            "cve_id": "CVE-2020-8203",
            "summary": "Prototype Pollution in lodash",
            "description": "Versions of lodash prior to 4.17.19 are vulnerable.",
            "severity": "high",
            "published_at": "2020-07-15T19:15:48Z",
            "html_url": "https://github.com/advisories/GHSA-p6mc-m468-83gw",
            "vulnerabilities": [
                {
                    "package": {"ecosystem": "npm", "name": "lodash-es"},
                    "vulnerable_version_range": "< 4.17.20",
                    "first_patched_version": "4.17.20",
                },
                {
                    "package": {"ecosystem": "npm", "name": "lodash"},
                    "vulnerable_version_range": ">= 3.7.0, < 4.17.19",
                    "first_patched_version": {"identifier": "4.17.19"},
                },
            ],
        },
        {
            "ghsa_id": "GHSA-29mw-wpgm-hmr9",
            "summary": "Regular Expression Denial of Service in lodash",
            "severity": "medium",
            "vulnerabilities": [],
        },
    ]


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def tmp_package_json(tmp_path: Path) -> Path:
    """Create a temporary package.json file."""
    content = """{
  "name": "test-project",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.18.2",
    "zod": "~3.22.0"
  },
  "devDependencies": {
    "vitest": ">=1.0.0"
  }
}
"""
    file_path = tmp_path / "package.json"
    file_path.write_text(content)
    return file_path


# =============================================================================
# Mock Client Fixtures
# =============================================================================


def _mock_registry(
    profiles: dict[str, PackageProfile],
    weekly: dict[str, int],
    monthly: dict[str, int],
    errors: set[str],
) -> MagicMock:
    async def fetch_profile(name):
        if name in errors:
            return Lookup.error(f"registry unreachable for {name}")
        if name in profiles:
            return Lookup.found(profiles[name])
        return Lookup.absent(f"{name} returned 404")

    async def fetch_downloads(name, window=DownloadWindow.WEEK):
        counts = monthly if window is DownloadWindow.MONTH else weekly
        if name in errors:
            return Lookup.error(f"downloads unreachable for {name}")
        if name in counts:
            return Lookup.found(DownloadStat(package=name, window=window, downloads=counts[name]))
        return Lookup.absent()

    client = MagicMock()
    client.fetch_profile = AsyncMock(side_effect=fetch_profile)
    client.fetch_downloads = AsyncMock(side_effect=fetch_downloads)
    return client


def _mock_repositories(repos: dict[str, RepoStat]) -> MagicMock:
    async def fetch_repo_from_url(url):
        if url in repos:
            return Lookup.found(repos[url])
        return Lookup.absent()

    client = MagicMock()
    client.fetch_repo_from_url = AsyncMock(side_effect=fetch_repo_from_url)
    return client


def _mock_advisories(advisories: dict[str, list[AdvisoryRecord]]) -> MagicMock:
    async def fetch_advisories(name, version=None):
        return list(advisories.get(name, []))

    client = MagicMock()
    client.fetch_advisories = AsyncMock(side_effect=fetch_advisories)
    return client


@pytest.fixture
def make_generator(fixed_clock) -> Callable[..., ReportGenerator]:
    """Factory for a ReportGenerator over mocked data sources.

    Repositories are keyed by the profile's repository URL. Names listed in
    ``errors`` make the registry return ERROR lookups.
    """

    def _make(
        profiles: list[PackageProfile] | None = None,
        weekly: dict[str, int] | None = None,
        monthly: dict[str, int] | None = None,
        repos: dict[str, RepoStat] | None = None,
        advisories: dict[str, list[AdvisoryRecord]] | None = None,
        errors: set[str] | None = None,
        **kwargs: Any,
    ) -> ReportGenerator:
        return ReportGenerator(
            registry=_mock_registry(
                {p.name: p for p in profiles or []},
                weekly or {},
                monthly or {},
                errors or set(),
            ),
            repositories=_mock_repositories(repos or {}),
            advisories=_mock_advisories(advisories or {}),
            clock=fixed_clock,
            **kwargs,
        )

    return _make
