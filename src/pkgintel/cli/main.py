"""
Main CLI entry point for pkgintel.

Provides one command per operation (research, compare, alternatives,
security, analyze, trending) plus ``serve`` to run the MCP tool server.
"""

import asyncio
import logging
import sys
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any, Optional

import click
from rich.logging import RichHandler

from pkgintel import __version__
from pkgintel.analyzers.trending import CATEGORY_PACKAGES, FRAMEWORK_PREFIXES
from pkgintel.cli.output import (
    err_console,
    print_alternatives,
    print_comparison,
    print_error,
    print_info,
    print_json,
    print_manifest,
    print_research,
    print_security,
    print_trending,
)
from pkgintel.core.exceptions import PkgIntelError
from pkgintel.core.manifest import ManifestSource
from pkgintel.reports.generator import ReportGenerator


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run an async coroutine to completion."""
    return asyncio.run(coro)


def _run(
    ctx: click.Context,
    label: str,
    operation: Callable[[ReportGenerator], Coroutine[Any, Any, Any]],
    render: Callable[[Any], None],
    as_json: bool,
) -> None:
    """Run one operation, then print it as JSON or through ``render``."""
    generator = ReportGenerator(github_token=ctx.obj.get("github_token"))

    try:
        if as_json:
            result = run_async(operation(generator))
        else:
            with err_console.status(label):
                result = run_async(operation(generator))
    except PkgIntelError as e:
        print_error(str(e))
        sys.exit(1)

    if as_json:
        print_json(result.to_dict())
    else:
        render(result)


json_option = click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the raw result as JSON.",
)


@click.group()
@click.version_option(version=__version__, prog_name="pkgintel")
@click.option(
    "--github-token",
    envvar="GITHUB_TOKEN",
    help="GitHub API token for higher rate limits.",
)
@click.option(
    "--verbose", "-V",
    is_flag=True,
    help="Log data source lookups.",
)
@click.pass_context
def cli(ctx: click.Context, github_token: Optional[str], verbose: bool) -> None:
    """pkgintel - Know your npm packages.

    Research, compare and audit npm packages using the npm registry,
    GitHub and the GitHub security advisory database.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["github_token"] = github_token


@cli.command()
@click.argument("package")
@click.option(
    "--version", "-v",
    help="Installed version, to report how far behind it is.",
)
@json_option
@click.pass_context
def research(ctx: click.Context, package: str, version: Optional[str], as_json: bool) -> None:
    """Research an npm package in depth.

    \b
    Examples:
        pkgintel research zod
        pkgintel research express -v 4.17.1
    """
    _run(
        ctx,
        f"Researching {package}",
        lambda g: g.research_package(package, version),
        print_research,
        as_json,
    )


@cli.command()
@click.argument("packages", nargs=-1, required=True)
@json_option
@click.pass_context
def compare(ctx: click.Context, packages: tuple[str, ...], as_json: bool) -> None:
    """Compare 2-5 packages side by side.

    \b
    Examples:
        pkgintel compare zod yup valibot
    """
    _run(
        ctx,
        f"Comparing {len(packages)} packages",
        lambda g: g.compare_packages(list(packages)),
        print_comparison,
        as_json,
    )


@cli.command()
@click.argument("package")
@click.option(
    "--category", "-c",
    help="Category hint, echoed in the result.",
)
@json_option
@click.pass_context
def alternatives(
    ctx: click.Context,
    package: str,
    category: Optional[str],
    as_json: bool,
) -> None:
    """Find curated alternatives to a package.

    \b
    Examples:
        pkgintel alternatives moment
    """
    _run(
        ctx,
        f"Finding alternatives for {package}",
        lambda g: g.find_alternatives(package, category),
        print_alternatives,
        as_json,
    )


@cli.command()
@click.argument("package")
@click.option(
    "--version", "-v",
    help="Installed version.",
)
@json_option
@click.pass_context
def security(ctx: click.Context, package: str, version: Optional[str], as_json: bool) -> None:
    """Check a package for known security advisories.

    \b
    Examples:
        pkgintel security lodash -v 4.17.15
    """
    _run(
        ctx,
        f"Checking advisories for {package}",
        lambda g: g.check_security(package, version),
        print_security,
        as_json,
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path), default=".")
@click.option(
    "--no-dev",
    is_flag=True,
    help="Skip devDependencies.",
)
@json_option
@click.pass_context
def analyze(ctx: click.Context, path: Path, no_dev: bool, as_json: bool) -> None:
    """Analyze the dependencies of a package.json.

    PATH is a package.json file or the directory containing one
    (default: current directory).

    \b
    Examples:
        pkgintel analyze
        pkgintel analyze ./web --no-dev
    """
    try:
        package_json = ManifestSource().load(path)
    except PkgIntelError as e:
        print_error(str(e))
        sys.exit(1)

    def render(result):
        if result.total_dependencies == 0:
            print_info("No dependencies declared.")
            return
        print_manifest(result)

    _run(
        ctx,
        "Analyzing dependencies",
        lambda g: g.analyze_package_json(package_json, check_dev_deps=not no_dev),
        render,
        as_json,
    )


@cli.command()
@click.argument("category", type=click.Choice(list(CATEGORY_PACKAGES)))
@click.option(
    "--framework", "-f",
    help=f"Prefer packages for this framework ({', '.join(FRAMEWORK_PREFIXES)}).",
)
@json_option
@click.pass_context
def trending(
    ctx: click.Context,
    category: str,
    framework: Optional[str],
    as_json: bool,
) -> None:
    """Show the most downloaded packages in a category.

    \b
    Examples:
        pkgintel trending validation
        pkgintel trending state-management -f react
    """
    _run(
        ctx,
        f"Fetching {category} packages",
        lambda g: g.get_trending(category, framework),
        print_trending,
        as_json,
    )


@cli.command()
def serve() -> None:
    """Run the MCP tool server over stdio."""
    from pkgintel.server import main

    main()


if __name__ == "__main__":
    cli()
