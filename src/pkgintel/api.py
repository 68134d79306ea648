"""
High-level programmatic API for pkgintel.

This module provides simple, async-friendly functions for each operation.
For more control (shared clients, a fixed clock), use ReportGenerator
directly.

Example:
    import asyncio
    from pkgintel import research, compare

    async def main():
        report = await research("zod")
        print(f"{report.name} {report.latest_version}: {report.recommendation}")

        result = await compare(["zod", "yup", "valibot"])
        print(result.ranking)

    asyncio.run(main())
"""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pkgintel.core.manifest import ManifestSource
from pkgintel.core.models import (
    AlternativesResult,
    ComparisonResult,
    ManifestAnalysis,
    ResearchReport,
    SecurityReport,
    TrendingResult,
)
from pkgintel.reports.generator import ReportGenerator


async def research(
    package: str,
    version: str | None = None,
    *,
    github_token: str | None = None,
) -> ResearchReport:
    """Research a single npm package.

    Args:
        package: Package name (e.g., "react", "@types/node").
        version: Optional installed version, used for "versions behind".
        github_token: Optional GitHub API token for higher rate limits.

    Returns:
        ResearchReport with downloads, repository, security and
        maintenance data.

    Raises:
        PackageNotFoundError: If the package isn't on npm.

    Example:
        >>> import asyncio
        >>> from pkgintel import research
        >>> report = asyncio.run(research("express", "4.17.1"))
        >>> report.versions_behind is not None
        True
    """
    generator = ReportGenerator(github_token=github_token)
    return await generator.research_package(package, version)


async def compare(
    packages: list[str],
    *,
    github_token: str | None = None,
) -> ComparisonResult:
    """Compare 2-5 packages side by side.

    Example:
        >>> import asyncio
        >>> from pkgintel import compare
        >>> result = asyncio.run(compare(["dayjs", "date-fns"]))
        >>> len(result.packages)
        2
    """
    generator = ReportGenerator(github_token=github_token)
    return await generator.compare_packages(packages)


async def alternatives(
    package: str,
    category: str | None = None,
    *,
    github_token: str | None = None,
) -> AlternativesResult:
    """Find curated alternatives to a package."""
    generator = ReportGenerator(github_token=github_token)
    return await generator.find_alternatives(package, category)


async def security(
    package: str,
    version: str | None = None,
    *,
    github_token: str | None = None,
) -> SecurityReport:
    """Check a package for known security advisories."""
    generator = ReportGenerator(github_token=github_token)
    return await generator.check_security(package, version)


async def analyze(
    package_json: Mapping[str, Any] | str | Path | None = None,
    check_dev_deps: bool = True,
    *,
    github_token: str | None = None,
) -> ManifestAnalysis:
    """Analyze the dependencies of a package.json.

    Args:
        package_json: Decoded package.json content, or a path to the file or
            its project directory. Defaults to the current directory.
        check_dev_deps: Whether to include devDependencies.
        github_token: Optional GitHub API token for higher rate limits.

    Example:
        >>> import asyncio
        >>> from pkgintel import analyze
        >>> result = asyncio.run(analyze({"dependencies": {"left-pad": "^1.0.0"}}))
        >>> result.dependencies[0].status
        <UpdateStatus.MINOR: 'minor'>
    """
    if package_json is None or isinstance(package_json, (str, Path)):
        package_json = ManifestSource().load(Path(package_json or Path.cwd()))

    generator = ReportGenerator(github_token=github_token)
    return await generator.analyze_package_json(package_json, check_dev_deps)


async def trending(
    category: str,
    framework: str | None = None,
    *,
    github_token: str | None = None,
) -> TrendingResult:
    """List the members of a category ranked by weekly downloads."""
    generator = ReportGenerator(github_token=github_token)
    return await generator.get_trending(category, framework)


def research_sync(
    package: str,
    version: str | None = None,
    *,
    github_token: str | None = None,
) -> ResearchReport:
    """Synchronous wrapper for research().

    For use in non-async contexts. Runs a new event loop.

    Example:
        >>> from pkgintel import research_sync
        >>> report = research_sync("zod")
        >>> print(report.recommendation)
    """
    return asyncio.run(research(package, version, github_token=github_token))


def compare_sync(
    packages: list[str],
    *,
    github_token: str | None = None,
) -> ComparisonResult:
    """Synchronous wrapper for compare()."""
    return asyncio.run(compare(packages, github_token=github_token))


def alternatives_sync(
    package: str,
    category: str | None = None,
    *,
    github_token: str | None = None,
) -> AlternativesResult:
    """Synchronous wrapper for alternatives()."""
    return asyncio.run(alternatives(package, category, github_token=github_token))


def security_sync(
    package: str,
    version: str | None = None,
    *,
    github_token: str | None = None,
) -> SecurityReport:
    """Synchronous wrapper for security()."""
    return asyncio.run(security(package, version, github_token=github_token))


def analyze_sync(
    package_json: Mapping[str, Any] | str | Path | None = None,
    check_dev_deps: bool = True,
    *,
    github_token: str | None = None,
) -> ManifestAnalysis:
    """Synchronous wrapper for analyze()."""
    return asyncio.run(analyze(package_json, check_dev_deps, github_token=github_token))


def trending_sync(
    category: str,
    framework: str | None = None,
    *,
    github_token: str | None = None,
) -> TrendingResult:
    """Synchronous wrapper for trending()."""
    return asyncio.run(trending(category, framework, github_token=github_token))
