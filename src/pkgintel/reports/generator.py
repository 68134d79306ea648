"""
Report generator for orchestrating package intelligence operations.

Provides the ReportGenerator class that fans out to the npm registry,
GitHub and the advisory database, merges what comes back and derives the
decision-bearing fields of each result.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import aiohttp

from pkgintel.analyzers import alternatives as catalog
from pkgintel.analyzers import trending
from pkgintel.analyzers.security import prioritize, security_recommendation
from pkgintel.collectors.advisories import AdvisoryClient
from pkgintel.collectors.github import GitHubClient
from pkgintel.collectors.npm import NpmClient
from pkgintel.core.exceptions import InvalidArgumentError, PackageNotFoundError
from pkgintel.core.manifest import ManifestEntry, ManifestSource
from pkgintel.core.models import (
    Alternative,
    AlternativesResult,
    ComparisonResult,
    ComparisonRow,
    DependencyAnalysis,
    DownloadWindow,
    Lookup,
    LookupStatus,
    ManifestAnalysis,
    RepoStat,
    ResearchReport,
    SecurityReport,
    SeverityTally,
    TrendDirection,
    TrendingPackage,
    TrendingResult,
    UpdateStatus,
    format_count,
    parse_timestamp,
)
from pkgintel.core.validation import validate_package_name
from pkgintel.core.versions import classify_update, strip_range, version_rank

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportGenerator:
    """Run package intelligence operations.

    Data sources passed in are used as-is (tests inject mocks here). Any
    that are missing are built on a fresh aiohttp session for each call,
    so nothing is shared between invocations.
    """

    MIN_COMPARE = 2
    MAX_COMPARE = 5
    MAX_ALTERNATIVES = 4
    MAX_TRENDING = 8
    MAX_SURFACED_ADVISORIES = 5
    MAX_KEYWORDS = 10
    MAX_SECURITY_PRIORITIES = 3
    MAX_MAJOR_PRIORITIES = 2
    STALE_AFTER_DAYS = 365

    def __init__(
        self,
        registry: NpmClient | None = None,
        repositories: GitHubClient | None = None,
        advisories: AdvisoryClient | None = None,
        github_token: str | None = None,
        timeout: int = 30,
        clock: Callable[[], datetime] | None = None,
        manifest: ManifestSource | None = None,
    ):
        """Initialize the report generator.

        Args:
            registry: npm registry client.
            repositories: GitHub repository client.
            advisories: Security advisory client.
            github_token: Optional GitHub API token for higher rate limits.
            timeout: Request timeout in seconds for clients built here.
            clock: Returns the current time as an aware datetime.
            manifest: package.json parser with its dependency caps.
        """
        self.registry = registry
        self.repositories = repositories
        self.advisories = advisories
        self.github_token = github_token
        self.timeout = timeout
        self.clock = clock or _utcnow
        self.manifest = manifest or ManifestSource()

    @asynccontextmanager
    async def _sources(self) -> AsyncIterator[tuple[NpmClient, GitHubClient, AdvisoryClient]]:
        """Yield (registry, repositories, advisories) for one operation."""
        if None not in (self.registry, self.repositories, self.advisories):
            yield self.registry, self.repositories, self.advisories
            return

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            yield (
                self.registry or NpmClient(session, timeout=self.timeout),
                self.repositories or GitHubClient(
                    session, token=self.github_token, timeout=self.timeout
                ),
                self.advisories or AdvisoryClient(
                    session, token=self.github_token, timeout=self.timeout
                ),
            )

    def _unwrap(self, lookup: Lookup[Any], what: str) -> Any:
        """Return a lookup's value, treating ERROR exactly like ABSENT."""
        if lookup.status is LookupStatus.ERROR:
            logger.info("%s unavailable, treating as absent: %s", what, lookup.detail)
        elif lookup.status is LookupStatus.ABSENT:
            logger.debug("%s absent: %s", what, lookup.detail)
        return lookup.value_or_none()

    async def _repo_stats(self, repositories: GitHubClient, name: str, url: str | None) -> RepoStat | None:
        lookup = await repositories.fetch_repo_from_url(url)
        return self._unwrap(lookup, f"repository of {name}")

    # -------------------------------------------------------------------------
    # research
    # -------------------------------------------------------------------------

    async def research_package(
        self,
        package: str,
        current_version: str | None = None,
    ) -> ResearchReport:
        """Build a full profile of one package.

        Args:
            package: Package name.
            current_version: Optional installed version.

        Returns:
            ResearchReport for the package.

        Raises:
            PackageNotFoundError: If the registry has no profile for it.
        """
        name = validate_package_name(package)

        async with self._sources() as (registry, repositories, advisories):
            profile_lookup, weekly, monthly, found = await asyncio.gather(
                registry.fetch_profile(name),
                registry.fetch_downloads(name, DownloadWindow.WEEK),
                registry.fetch_downloads(name, DownloadWindow.MONTH),
                advisories.fetch_advisories(name, current_version),
            )

            if not profile_lookup.ok:
                raise PackageNotFoundError(name, profile_lookup.detail)
            profile = profile_lookup.value

            repo = await self._repo_stats(repositories, name, profile.repository_url)

        weekly = self._unwrap(weekly, f"weekly downloads of {name}")
        monthly = self._unwrap(monthly, f"monthly downloads of {name}")

        rank = version_rank(current_version, list(profile.versions)) if current_version else None
        versions_behind = rank or None

        last_publish = profile.last_publish
        days_since = None
        if published := parse_timestamp(last_publish):
            days_since = (self.clock() - published).days

        tally = SeverityTally.from_advisories(found)

        return ResearchReport(
            name=profile.name or name,
            description=profile.description,
            current_version=current_version,
            latest_version=profile.version,
            versions_behind=versions_behind,
            weekly_downloads=weekly.downloads if weekly else None,
            monthly_downloads=monthly.downloads if monthly else None,
            github=repo,
            tally=tally,
            advisories=tuple(prioritize(found, self.MAX_SURFACED_ADVISORIES)),
            last_publish=last_publish,
            days_since_last_publish=days_since,
            maintainer_count=profile.maintainer_count,
            typescript=profile.has_type_declarations,
            license=profile.license,
            homepage=profile.homepage,
            keywords=profile.keywords[: self.MAX_KEYWORDS],
            recommendation=self._research_recommendation(
                tally, repo, versions_behind, days_since, profile.version
            ),
        )

    def _research_recommendation(
        self,
        tally: SeverityTally,
        repo: RepoStat | None,
        versions_behind: int | None,
        days_since: int | None,
        latest: str,
    ) -> str:
        """First matching concern wins, most serious first."""
        if tally.urgent:
            return (
                f"{tally.critical} critical and {tally.high} high severity advisories. "
                "Review security before adopting or upgrading."
            )
        if repo and repo.archived:
            return "Repository is archived. Consider an actively maintained alternative."
        if versions_behind:
            return f"{versions_behind} versions behind latest ({latest}). Consider updating."
        if days_since is not None and days_since > self.STALE_AFTER_DAYS:
            return f"No release in {days_since} days. Check that the package is still maintained."
        return "Actively maintained with no critical or high severity advisories."

    # -------------------------------------------------------------------------
    # compare
    # -------------------------------------------------------------------------

    async def compare_packages(self, packages: list[str]) -> ComparisonResult:
        """Compare 2-5 packages side by side.

        Rows come back in request order; missing packages get a sentinel
        row. ``ranking`` orders the found packages by popularity.

        Raises:
            InvalidArgumentError: If fewer than 2 or more than 5 are given.
        """
        if not self.MIN_COMPARE <= len(packages) <= self.MAX_COMPARE:
            raise InvalidArgumentError(
                "packages",
                f"Provide between {self.MIN_COMPARE} and {self.MAX_COMPARE} "
                f"packages to compare, got {len(packages)}",
            )
        names = [validate_package_name(p) for p in packages]

        async with self._sources() as (registry, repositories, _):
            rows = await asyncio.gather(
                *(self._comparison_row(name, registry, repositories) for name in names)
            )

        leaders = sorted(
            (row for row in rows if not row.is_sentinel),
            key=lambda row: row.popularity_score,
            reverse=True,
        )

        recommendation = None
        if leaders:
            top = leaders[0]
            recommendation = (
                f'Based on popularity and activity, "{top.name}" leads with '
                f"{format_count(top.weekly_downloads)} weekly downloads and "
                f"{format_count(top.github_stars)} GitHub stars."
            )

        return ComparisonResult(
            packages=tuple(rows),
            ranking=tuple(row.name for row in leaders),
            recommendation=recommendation,
        )

    async def _comparison_row(
        self,
        name: str,
        registry: NpmClient,
        repositories: GitHubClient,
    ) -> ComparisonRow:
        profile_lookup, weekly = await asyncio.gather(
            registry.fetch_profile(name),
            registry.fetch_downloads(name, DownloadWindow.WEEK),
        )
        profile = self._unwrap(profile_lookup, f"profile of {name}")
        if profile is None:
            return ComparisonRow.not_found(name)

        weekly = self._unwrap(weekly, f"weekly downloads of {name}")
        repo = await self._repo_stats(repositories, name, profile.repository_url)

        return ComparisonRow(
            name=profile.name or name,
            version=profile.version,
            description=profile.description,
            weekly_downloads=weekly.downloads if weekly else None,
            github_stars=repo.stars if repo else None,
            last_update=profile.last_publish,
            typescript=profile.has_type_declarations,
            license=profile.license,
            maintainers=profile.maintainer_count,
        )

    # -------------------------------------------------------------------------
    # alternatives
    # -------------------------------------------------------------------------

    async def find_alternatives(
        self,
        package: str,
        category: str | None = None,
    ) -> AlternativesResult:
        """Find curated alternatives to a package.

        Uncatalogued packages get an empty list and a pointer to npm search,
        not an error. The category is echoed back only.
        """
        name = validate_package_name(package)
        candidates = catalog.get_known_alternatives(name)

        if not candidates:
            return AlternativesResult(
                original=name,
                category=category,
                alternatives=(),
                recommendation=(
                    f'No curated alternatives found for "{name}". '
                    "Consider searching npm for similar packages."
                ),
            )

        async with self._sources() as (registry, repositories, _):
            found = await asyncio.gather(
                *(
                    self._alternative(name, candidate, registry, repositories)
                    for candidate in candidates[: self.MAX_ALTERNATIVES]
                )
            )

        ranked = sorted(
            (alt for alt in found if alt is not None),
            key=lambda alt: alt.weekly_downloads or 0,
            reverse=True,
        )

        return AlternativesResult(
            original=name,
            category=category,
            alternatives=tuple(ranked),
            recommendation=catalog.recommend(name, ranked),
        )

    async def _alternative(
        self,
        original: str,
        candidate: str,
        registry: NpmClient,
        repositories: GitHubClient,
    ) -> Alternative | None:
        profile_lookup, weekly = await asyncio.gather(
            registry.fetch_profile(candidate),
            registry.fetch_downloads(candidate, DownloadWindow.WEEK),
        )
        profile = self._unwrap(profile_lookup, f"profile of {candidate}")
        if profile is None:
            return None

        weekly = self._unwrap(weekly, f"weekly downloads of {candidate}")
        repo = await self._repo_stats(repositories, candidate, profile.repository_url)

        return catalog.build_alternative(
            original,
            candidate,
            profile,
            weekly_downloads=weekly.downloads if weekly else None,
            github_stars=repo.stars if repo else None,
        )

    # -------------------------------------------------------------------------
    # security
    # -------------------------------------------------------------------------

    async def check_security(
        self,
        package: str,
        version: str | None = None,
    ) -> SecurityReport:
        """Audit the known advisories of a package.

        Never fails because the package is missing from the registry; the
        latest version is simply omitted.
        """
        name = validate_package_name(package)

        async with self._sources() as (registry, _, advisories):
            profile_lookup, found = await asyncio.gather(
                registry.fetch_profile(name),
                advisories.fetch_advisories(name, version),
            )

        profile = self._unwrap(profile_lookup, f"profile of {name}")
        latest = profile.version if profile else None
        tally = SeverityTally.from_advisories(found)

        return SecurityReport(
            package=name,
            version=version,
            latest_version=latest,
            tally=tally,
            advisories=tuple(found),
            recommendation=security_recommendation(name, tally, version, latest),
        )

    # -------------------------------------------------------------------------
    # manifest
    # -------------------------------------------------------------------------

    async def analyze_package_json(
        self,
        package_json: Mapping[str, Any],
        check_dev_deps: bool = True,
    ) -> ManifestAnalysis:
        """Audit the declared dependencies of a package.json.

        Args:
            package_json: Decoded package.json content.
            check_dev_deps: Whether to include devDependencies.

        Returns:
            ManifestAnalysis with per-dependency status and priorities.

        Raises:
            InvalidArgumentError: If the manifest structure is malformed.
        """
        deps, dev_deps = self.manifest.parse(package_json, check_dev_deps)

        async with self._sources() as (registry, _, advisories):
            results = await asyncio.gather(
                *(self._analyze_dependency(entry, registry, advisories) for entry in deps + dev_deps)
            )

        dep_results = results[: len(deps)]
        dev_results = results[len(deps):]

        outdated = sum(1 for r in results if r.status.is_outdated)
        security_issues = sum(r.security_issues for r in results)

        summary = f"Analyzed {len(results)} dependencies. "
        if security_issues > 0:
            summary += f"{security_issues} security issues found. "
        if outdated > 0:
            summary += f"{outdated} packages have updates available."
        else:
            summary += "All packages up to date!"

        return ManifestAnalysis(
            total_dependencies=len(results),
            outdated_count=outdated,
            security_issue_count=security_issues,
            dependencies=tuple(dep_results),
            dev_dependencies=tuple(dev_results),
            summary=summary,
            top_priorities=tuple(self._top_priorities(results)),
        )

    async def _analyze_dependency(
        self,
        entry: ManifestEntry,
        registry: NpmClient,
        advisories: AdvisoryClient,
    ) -> DependencyAnalysis:
        profile_lookup, weekly, found = await asyncio.gather(
            registry.fetch_profile(entry.name),
            registry.fetch_downloads(entry.name, DownloadWindow.WEEK),
            advisories.fetch_advisories(entry.name),
        )
        current = strip_range(entry.spec)
        profile = self._unwrap(profile_lookup, f"profile of {entry.name}")
        weekly = self._unwrap(weekly, f"weekly downloads of {entry.name}")

        latest = profile.version if profile else None
        status = classify_update(current, latest) if profile else UpdateStatus.UNKNOWN

        if profile is None:
            recommendation = "Package not found on npm"
        elif status is UpdateStatus.MAJOR:
            recommendation = (
                f"Major update available: {current} → {latest}. "
                "Check changelog for breaking changes."
            )
        elif status is UpdateStatus.MINOR:
            recommendation = f"Minor update: {current} → {latest}"
        elif status is UpdateStatus.PATCH:
            recommendation = f"Patch update: {current} → {latest}"
        else:
            recommendation = None

        urgent = SeverityTally.from_advisories(found).urgent
        if urgent > 0:
            recommendation = f"{urgent} security issue(s). Update immediately!"

        return DependencyAnalysis(
            name=entry.name,
            current=current,
            latest=latest,
            status=status,
            security_issues=len(found),
            weekly_downloads=weekly.downloads if weekly and profile else None,
            recommendation=recommendation,
        )

    def _top_priorities(self, results: list[DependencyAnalysis]) -> list[str]:
        """Security fixes first, then major updates not already listed."""
        priorities: list[str] = []
        listed: set[str] = set()

        with_security = sorted(
            (r for r in results if r.security_issues > 0),
            key=lambda r: r.security_issues,
            reverse=True,
        )
        for dep in with_security:
            if len(listed) >= self.MAX_SECURITY_PRIORITIES:
                break
            if dep.name in listed:
                continue
            priorities.append(f"Update {dep.name} - {dep.security_issues} security issue(s)")
            listed.add(dep.name)

        majors = [
            r for r in results
            if r.status is UpdateStatus.MAJOR and r.name not in listed
        ]
        for dep in majors[: self.MAX_MAJOR_PRIORITIES]:
            priorities.append(f"{dep.name}: major update {dep.current} → {dep.latest}")

        return priorities

    # -------------------------------------------------------------------------
    # trending
    # -------------------------------------------------------------------------

    async def get_trending(
        self,
        category: str,
        framework: str | None = None,
    ) -> TrendingResult:
        """Rank the curated members of a category by recent demand.

        Raises:
            InvalidArgumentError: If the category is not a known one.
        """
        members = trending.CATEGORY_PACKAGES.get(category)
        if members is None:
            raise InvalidArgumentError(
                "category",
                f"Unknown category: {category}. "
                f"Available: {', '.join(trending.CATEGORY_PACKAGES)}",
            )

        names = trending.filter_by_framework(members, framework)[: self.MAX_TRENDING]

        async with self._sources() as (registry, repositories, _):
            found = await asyncio.gather(
                *(self._trending_package(name, registry, repositories) for name in names)
            )

        packages = sorted(
            (p for p in found if p is not None),
            key=lambda p: p.weekly_downloads,
            reverse=True,
        )
        rising = [p.name for p in packages if p.trending is TrendDirection.RISING]

        return TrendingResult(
            category=category,
            framework=framework,
            packages=tuple(packages),
            top_pick=packages[0].name if packages else None,
            rising_stars=tuple(rising),
            recommendation=trending.recommend(category, packages, rising),
        )

    async def _trending_package(
        self,
        name: str,
        registry: NpmClient,
        repositories: GitHubClient,
    ) -> TrendingPackage | None:
        profile_lookup, weekly, monthly = await asyncio.gather(
            registry.fetch_profile(name),
            registry.fetch_downloads(name, DownloadWindow.WEEK),
            registry.fetch_downloads(name, DownloadWindow.MONTH),
        )
        profile = self._unwrap(profile_lookup, f"profile of {name}")
        weekly = self._unwrap(weekly, f"weekly downloads of {name}")
        if profile is None or weekly is None:
            return None

        monthly = self._unwrap(monthly, f"monthly downloads of {name}")
        monthly_count = monthly.downloads if monthly else None
        repo = await self._repo_stats(repositories, name, profile.repository_url)

        return TrendingPackage(
            name=name,
            description=profile.description,
            weekly_downloads=weekly.downloads,
            monthly_downloads=monthly_count,
            github_stars=repo.stars if repo else None,
            last_update=profile.last_publish,
            trending=trending.classify_trend(weekly.downloads, monthly_count),
        )
