"""
pkgintel: npm package intelligence

Research, compare and audit npm packages from the npm registry, GitHub and
the GitHub security advisory database. Usable as a Python library, a CLI,
or an MCP tool server.

Quick Start:
    >>> import asyncio
    >>> from pkgintel import research
    >>> report = asyncio.run(research("zod"))
    >>> print(f"{report.name} {report.latest_version}")

    # Or use synchronous API:
    >>> from pkgintel import security_sync
    >>> report = security_sync("lodash", "4.17.15")
    >>> if report.tally.urgent:
    ...     print("Update needed!")
"""

__version__ = "0.1.0"

# High-level API (recommended for most users)
from pkgintel.api import (
    alternatives,
    alternatives_sync,
    analyze,
    analyze_sync,
    compare,
    compare_sync,
    research,
    research_sync,
    security,
    security_sync,
    trending,
    trending_sync,
)

# Exceptions
from pkgintel.core.exceptions import (
    InvalidArgumentError,
    NetworkError,
    PackageNotFoundError,
    PkgIntelError,
    RateLimitError,
    ValidationError,
)

# Data models
from pkgintel.core.models import (
    AdvisoryRecord,
    AlternativesResult,
    ComparisonResult,
    ManifestAnalysis,
    ResearchReport,
    SecurityReport,
    Severity,
    SeverityTally,
    TrendingResult,
    UpdateStatus,
)

# Orchestration (for advanced usage)
from pkgintel.reports.generator import ReportGenerator

__all__ = [
    # Version
    "__version__",
    # High-level API
    "research",
    "research_sync",
    "compare",
    "compare_sync",
    "alternatives",
    "alternatives_sync",
    "security",
    "security_sync",
    "analyze",
    "analyze_sync",
    "trending",
    "trending_sync",
    # Models
    "AdvisoryRecord",
    "AlternativesResult",
    "ComparisonResult",
    "ManifestAnalysis",
    "ResearchReport",
    "SecurityReport",
    "Severity",
    "SeverityTally",
    "TrendingResult",
    "UpdateStatus",
    # Core
    "ReportGenerator",
    # Exceptions
    "PkgIntelError",
    "PackageNotFoundError",
    "InvalidArgumentError",
    "ValidationError",
    "NetworkError",
    "RateLimitError",
]
