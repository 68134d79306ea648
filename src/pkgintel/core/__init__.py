"""
Core module for pkgintel.

Contains data models, version helpers, manifest parsing, validation and
exceptions.
"""

from pkgintel.core.exceptions import (
    InvalidArgumentError,
    NetworkError,
    PackageNotFoundError,
    PkgIntelError,
    RateLimitError,
    ValidationError,
)
from pkgintel.core.manifest import ManifestEntry, ManifestSource
from pkgintel.core.models import (
    AdvisoryRecord,
    Alternative,
    AlternativesResult,
    ComparisonResult,
    ComparisonRow,
    DependencyAnalysis,
    DownloadStat,
    DownloadWindow,
    Lookup,
    LookupStatus,
    ManifestAnalysis,
    MigrationEffort,
    PackageProfile,
    RepoStat,
    ResearchReport,
    SecurityReport,
    Severity,
    SeverityTally,
    TrendDirection,
    TrendingPackage,
    TrendingResult,
    UpdateStatus,
)

__all__ = [
    # Models
    "AdvisoryRecord",
    "Alternative",
    "AlternativesResult",
    "ComparisonResult",
    "ComparisonRow",
    "DependencyAnalysis",
    "DownloadStat",
    "DownloadWindow",
    "Lookup",
    "LookupStatus",
    "ManifestAnalysis",
    "MigrationEffort",
    "PackageProfile",
    "RepoStat",
    "ResearchReport",
    "SecurityReport",
    "Severity",
    "SeverityTally",
    "TrendDirection",
    "TrendingPackage",
    "TrendingResult",
    "UpdateStatus",
    # Manifest
    "ManifestEntry",
    "ManifestSource",
    # Exceptions
    "PkgIntelError",
    "PackageNotFoundError",
    "InvalidArgumentError",
    "ValidationError",
    "NetworkError",
    "RateLimitError",
]
