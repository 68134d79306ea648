"""
Core data models for pkgintel.

This module defines the value records used throughout pkgintel: registry
profiles, download counts, repository statistics, security advisories, the
tagged ``Lookup`` result every data source returns, and the result records
produced by each operation.

All records are immutable and built fresh for every invocation.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None, recursing into nested dicts."""
    result = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            value = _compact(value)
        result[key] = value
    return result


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by npm or GitHub.

    Naive timestamps are assumed to be UTC. Returns None when the value
    is missing or malformed.
    """
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_count(value: int | None) -> str:
    """Format a count with thousands separators, "unknown" when absent."""
    return f"{value:,}" if value is not None else "unknown"


class LookupStatus(Enum):
    """Outcome of a single data source lookup."""

    FOUND = "found"
    ABSENT = "absent"  # 404, unresolvable input, "no data"
    ERROR = "error"  # transport failure or unexpected HTTP status

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Tagged result of a capability call.

    Data sources never raise for network or HTTP failures. They return a
    Lookup so concurrent fan-outs can't be cancelled by one failing branch.
    """

    status: LookupStatus
    value: T | None = None
    detail: str | None = None

    @classmethod
    def found(cls, value: T) -> "Lookup[T]":
        return cls(LookupStatus.FOUND, value=value)

    @classmethod
    def absent(cls, detail: str | None = None) -> "Lookup[T]":
        return cls(LookupStatus.ABSENT, detail=detail)

    @classmethod
    def error(cls, detail: str) -> "Lookup[T]":
        return cls(LookupStatus.ERROR, detail=detail)

    @property
    def ok(self) -> bool:
        """Return True if the lookup produced a value."""
        return self.status is LookupStatus.FOUND

    def value_or_none(self) -> T | None:
        """Return the value, or None for ABSENT and ERROR outcomes."""
        return self.value if self.ok else None


class Severity(Enum):
    """Advisory severity, ordered critical > high > moderate > low."""

    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"

    def __str__(self) -> str:
        return self.value

    @property
    def sort_order(self) -> int:
        """Return sort order (lower = more severe)."""
        order = {
            Severity.CRITICAL: 0,
            Severity.HIGH: 1,
            Severity.MODERATE: 2,
            Severity.LOW: 3,
        }
        return order[self]

    @classmethod
    def parse(cls, raw: str | None) -> "Severity":
        """Normalize a source severity label.

        GitHub reports "medium" where npm says "moderate". Missing and
        unrecognized labels fall back to MODERATE.
        """
        if not raw:
            return cls.MODERATE
        label = raw.strip().lower()
        if label == "medium":
            return cls.MODERATE
        try:
            return cls(label)
        except ValueError:
            return cls.MODERATE


class DownloadWindow(Enum):
    """Time windows supported by the npm downloads API."""

    WEEK = "last-week"
    MONTH = "last-month"
    YEAR = "last-year"

    def __str__(self) -> str:
        return self.value


class UpdateStatus(Enum):
    """Kind of update available for a declared dependency."""

    UP_TO_DATE = "up-to-date"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @property
    def is_outdated(self) -> bool:
        """Return True if an update of known kind is available."""
        return self not in (UpdateStatus.UP_TO_DATE, UpdateStatus.UNKNOWN)


class MigrationEffort(Enum):
    """Curated estimate of the cost of switching packages."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return {MigrationEffort.LOW: 0, MigrationEffort.MEDIUM: 1, MigrationEffort.HIGH: 2}[self]


class TrendDirection(Enum):
    """Demand trajectory relative to the package's own recent average."""

    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Source records
# =============================================================================


@dataclass(frozen=True)
class PackageProfile:
    """Registry metadata for the latest published version of a package."""

    name: str
    version: str
    description: str | None = None
    license: str | None = None
    homepage: str | None = None
    keywords: tuple[str, ...] = ()
    maintainer_count: int = 0
    versions: tuple[str, ...] = ()
    publish_times: tuple[tuple[str, str], ...] = ()
    repository_url: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.publish_times, Mapping):
            object.__setattr__(self, "publish_times", tuple(self.publish_times.items()))

    @property
    def last_publish(self) -> str | None:
        """Return the publish timestamp of the latest version."""
        return dict(self.publish_times).get(self.version)

    @property
    def has_type_declarations(self) -> bool:
        """Return True if the package ships or is TypeScript declarations."""
        if any(k.lower() in ("typescript", "types") for k in self.keywords):
            return True
        return self.name.startswith("@types/")


@dataclass(frozen=True)
class DownloadStat:
    """Download count for one package over one time window."""

    package: str
    window: DownloadWindow
    downloads: int
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True)
class RepoStat:
    """Repository statistics from GitHub."""

    owner: str
    name: str
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    last_push: str | None = None
    archived: bool = False

    def to_dict(self) -> dict:
        return _compact({
            "stars": self.stars,
            "forks": self.forks,
            "open_issues": self.open_issues,
            "last_push": self.last_push,
            "archived": self.archived,
        })


@dataclass(frozen=True)
class AdvisoryRecord:
    """A disclosed security vulnerability affecting a package."""

    id: str
    severity: Severity
    title: str
    description: str | None = None
    cve: str | None = None
    patched_versions: str | None = None
    vulnerable_versions: str | None = None
    published_at: str | None = None
    url: str | None = None

    def __str__(self) -> str:
        return f"{self.id} ({self.severity}): {self.title}"

    def to_dict(self) -> dict:
        return _compact({
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "cve": self.cve,
            "patched_versions": self.patched_versions,
            "vulnerable_versions": self.vulnerable_versions,
            "published_at": self.published_at,
            "url": self.url,
        })

    def to_summary_dict(self) -> dict:
        return {"id": self.id, "severity": self.severity.value, "title": self.title}


@dataclass(frozen=True)
class SeverityTally:
    """Advisory counts per severity. Always sums to the tallied list length."""

    critical: int = 0
    high: int = 0
    moderate: int = 0
    low: int = 0

    @classmethod
    def from_advisories(cls, advisories: list[AdvisoryRecord]) -> "SeverityTally":
        counts = {s: 0 for s in Severity}
        for advisory in advisories:
            counts[advisory.severity] += 1
        return cls(
            critical=counts[Severity.CRITICAL],
            high=counts[Severity.HIGH],
            moderate=counts[Severity.MODERATE],
            low=counts[Severity.LOW],
        )

    @property
    def total(self) -> int:
        return self.critical + self.high + self.moderate + self.low

    @property
    def urgent(self) -> int:
        """Number of critical and high advisories."""
        return self.critical + self.high

    def to_dict(self) -> dict:
        return {
            "critical": self.critical,
            "high": self.high,
            "moderate": self.moderate,
            "low": self.low,
        }


# =============================================================================
# Operation results
# =============================================================================


@dataclass(frozen=True)
class ResearchReport:
    """Full profile of a single package."""

    name: str
    latest_version: str
    recommendation: str
    tally: SeverityTally
    description: str | None = None
    current_version: str | None = None
    versions_behind: int | None = None
    weekly_downloads: int | None = None
    monthly_downloads: int | None = None
    github: RepoStat | None = None
    advisories: tuple[AdvisoryRecord, ...] = ()  # highest priority first, truncated
    last_publish: str | None = None
    days_since_last_publish: int | None = None
    maintainer_count: int = 0
    typescript: bool = False
    license: str | None = None
    homepage: str | None = None
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return _compact({
            "name": self.name,
            "description": self.description,
            "current_version": self.current_version,
            "latest_version": self.latest_version,
            "versions_behind": self.versions_behind,
            "weekly_downloads": self.weekly_downloads,
            "monthly_downloads": self.monthly_downloads,
            "github": self.github.to_dict() if self.github else None,
            "security": {
                "advisory_count": self.tally.total,
                "critical_count": self.tally.critical,
                "high_count": self.tally.high,
                "by_severity": self.tally.to_dict(),
                "advisories": [a.to_summary_dict() for a in self.advisories],
            },
            "maintenance": {
                "last_publish": self.last_publish,
                "days_since_last_publish": self.days_since_last_publish,
                "maintainer_count": self.maintainer_count,
            },
            "typescript": self.typescript,
            "license": self.license,
            "homepage": self.homepage,
            "keywords": list(self.keywords),
            "recommendation": self.recommendation,
        })


NOT_FOUND_VERSION = "NOT FOUND"


@dataclass(frozen=True)
class ComparisonRow:
    """One package in a side-by-side comparison."""

    name: str
    version: str
    description: str | None = None
    weekly_downloads: int | None = None
    github_stars: int | None = None
    last_update: str | None = None
    typescript: bool = False
    license: str | None = None
    maintainers: int = 0

    @classmethod
    def not_found(cls, name: str) -> "ComparisonRow":
        """Sentinel row for a package missing from the registry."""
        return cls(
            name=name,
            version=NOT_FOUND_VERSION,
            description="Package not found on npm",
            weekly_downloads=0,
            github_stars=0,
            typescript=False,
            maintainers=0,
        )

    @property
    def is_sentinel(self) -> bool:
        return self.version == NOT_FOUND_VERSION

    @property
    def popularity_score(self) -> int:
        """Weekly downloads plus stars weighted 100:1."""
        return (self.weekly_downloads or 0) + (self.github_stars or 0) * 100

    def to_dict(self) -> dict:
        return _compact({
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "weekly_downloads": self.weekly_downloads,
            "github_stars": self.github_stars,
            "last_update": self.last_update,
            "typescript": self.typescript,
            "license": self.license,
            "maintainers": self.maintainers,
        })


@dataclass(frozen=True)
class ComparisonResult:
    """Side-by-side comparison, rows in request order."""

    packages: tuple[ComparisonRow, ...]
    ranking: tuple[str, ...] = ()
    recommendation: str | None = None

    def to_dict(self) -> dict:
        return _compact({
            "packages": [row.to_dict() for row in self.packages],
            "ranking": list(self.ranking),
            "recommendation": self.recommendation,
        })


@dataclass(frozen=True)
class Alternative:
    """A curated substitute for a package."""

    name: str
    migration_effort: MigrationEffort
    pros: tuple[str, ...]
    cons: tuple[str, ...]
    description: str | None = None
    weekly_downloads: int | None = None
    github_stars: int | None = None

    def __str__(self) -> str:
        return f"{self.name} (effort: {self.migration_effort})"

    def to_dict(self) -> dict:
        return _compact({
            "name": self.name,
            "description": self.description,
            "weekly_downloads": self.weekly_downloads,
            "github_stars": self.github_stars,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "migration_effort": self.migration_effort.value,
        })


@dataclass(frozen=True)
class AlternativesResult:
    """Alternatives to a package, most downloaded first."""

    original: str
    alternatives: tuple[Alternative, ...]
    recommendation: str
    category: str | None = None

    def to_dict(self) -> dict:
        return _compact({
            "original": self.original,
            "category": self.category,
            "alternatives": [a.to_dict() for a in self.alternatives],
            "recommendation": self.recommendation,
        })


@dataclass(frozen=True)
class SecurityReport:
    """Advisory audit for a package."""

    package: str
    tally: SeverityTally
    advisories: tuple[AdvisoryRecord, ...]
    recommendation: str
    version: str | None = None
    latest_version: str | None = None

    @property
    def total_advisories(self) -> int:
        return len(self.advisories)

    def to_dict(self) -> dict:
        return _compact({
            "package": self.package,
            "version": self.version,
            "latest_version": self.latest_version,
            "total_advisories": self.total_advisories,
            "by_severity": self.tally.to_dict(),
            "advisories": [a.to_dict() for a in self.advisories],
            "recommendation": self.recommendation,
        })


@dataclass(frozen=True)
class DependencyAnalysis:
    """Update and security status of one declared dependency."""

    name: str
    current: str
    status: UpdateStatus
    security_issues: int = 0
    latest: str | None = None
    weekly_downloads: int | None = None
    recommendation: str | None = None

    def to_dict(self) -> dict:
        return _compact({
            "name": self.name,
            "current": self.current,
            "latest": self.latest,
            "status": self.status.value,
            "security_issues": self.security_issues,
            "weekly_downloads": self.weekly_downloads,
            "recommendation": self.recommendation,
        })


@dataclass(frozen=True)
class ManifestAnalysis:
    """Batch audit of a package.json."""

    total_dependencies: int
    outdated_count: int
    security_issue_count: int
    dependencies: tuple[DependencyAnalysis, ...]
    summary: str
    top_priorities: tuple[str, ...] = ()
    dev_dependencies: tuple[DependencyAnalysis, ...] = ()

    def to_dict(self) -> dict:
        return _compact({
            "total_dependencies": self.total_dependencies,
            "outdated_count": self.outdated_count,
            "security_issue_count": self.security_issue_count,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "dev_dependencies": (
                [d.to_dict() for d in self.dev_dependencies] if self.dev_dependencies else None
            ),
            "summary": self.summary,
            "top_priorities": list(self.top_priorities),
        })


@dataclass(frozen=True)
class TrendingPackage:
    """A category member with its demand trend."""

    name: str
    weekly_downloads: int
    trending: TrendDirection
    description: str | None = None
    monthly_downloads: int | None = None
    github_stars: int | None = None
    last_update: str | None = None

    def to_dict(self) -> dict:
        return _compact({
            "name": self.name,
            "description": self.description,
            "weekly_downloads": self.weekly_downloads,
            "monthly_downloads": self.monthly_downloads,
            "github_stars": self.github_stars,
            "last_update": self.last_update,
            "trending": self.trending.value,
        })


@dataclass(frozen=True)
class TrendingResult:
    """Ranked members of a category."""

    category: str
    packages: tuple[TrendingPackage, ...]
    recommendation: str
    framework: str | None = None
    top_pick: str | None = None
    rising_stars: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return _compact({
            "category": self.category,
            "framework": self.framework,
            "packages": [p.to_dict() for p in self.packages],
            "top_pick": self.top_pick,
            "rising_stars": list(self.rising_stars),
            "recommendation": self.recommendation,
        })
