"""pkgintel MCP tool server.

FastMCP server exposing six read-only npm package intelligence tools.
Run: pkgintel-mcp
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from pkgintel.reports.generator import ReportGenerator

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

Category = Literal[
    "state-management",
    "testing",
    "ui-components",
    "date-time",
    "validation",
    "http-client",
    "orm",
    "bundler",
    "css-framework",
    "animation",
]


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging; every tool call builds its own clients."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("pkgintel MCP server starting")
    yield


mcp = FastMCP(
    "pkgintel",
    instructions="Research, compare and audit npm packages: downloads, GitHub activity, security advisories, alternatives and category trends.",
    lifespan=lifespan,
)


def _generator() -> ReportGenerator:
    # GitHub clients pick GITHUB_TOKEN up from the environment
    return ReportGenerator()


@mcp.tool(annotations=READ_ONLY)
async def research_package(package: str, current_version: Optional[str] = None) -> dict:
    """Deep dive on one npm package: downloads, GitHub stats, security, maintenance and TypeScript support.

    Args:
        package: npm package name, e.g. 'zod' or '@tanstack/react-query'.
        current_version: Installed version, to report how many releases behind it is.
    """
    report = await _generator().research_package(package, current_version)
    return report.to_dict()


@mcp.tool(annotations=READ_ONLY)
async def compare_packages(packages: list[str]) -> dict:
    """Compare 2-5 npm packages side by side by downloads, stars, TypeScript support and license.

    Args:
        packages: Between 2 and 5 package names.
    """
    result = await _generator().compare_packages(packages)
    return result.to_dict()


@mcp.tool(annotations=READ_ONLY)
async def find_alternatives(package: str, category: Optional[str] = None) -> dict:
    """Curated alternatives to an npm package with pros, cons and migration effort.

    Args:
        package: Package to replace, e.g. 'moment'.
        category: Optional category hint, echoed back.
    """
    result = await _generator().find_alternatives(package, category)
    return result.to_dict()


@mcp.tool(annotations=READ_ONLY)
async def check_security(package: str, version: Optional[str] = None) -> dict:
    """Known security advisories for an npm package, tallied by severity.

    Args:
        package: npm package name.
        version: Installed version. All advisories for the package are listed regardless.
    """
    report = await _generator().check_security(package, version)
    return report.to_dict()


@mcp.tool(annotations=READ_ONLY)
async def analyze_package_json(package_json: dict, check_dev_deps: bool = True) -> dict:
    """Audit a package.json: outdated dependencies, security issues and top priorities.

    Args:
        package_json: The package.json content as an object.
        check_dev_deps: Whether to include devDependencies. Default true.
    """
    result = await _generator().analyze_package_json(package_json, check_dev_deps)
    return result.to_dict()


@mcp.tool(annotations=READ_ONLY)
async def get_trending(category: Category, framework: Optional[str] = None) -> dict:
    """Most downloaded packages in a category, with rising/stable/declining demand trends.

    Args:
        category: Package category.
        framework: Prefer packages for this framework (react, vue, svelte, node) when
            enough match. Other values leave the category unfiltered.
    """
    result = await _generator().get_trending(category, framework)
    return result.to_dict()


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
