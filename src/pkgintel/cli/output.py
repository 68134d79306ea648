"""
Rich terminal output helpers for CLI.

Provides functions for printing each operation's result as tables and
panels using the Rich library.
"""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pkgintel.core.models import (
    AlternativesResult,
    ComparisonResult,
    ManifestAnalysis,
    ResearchReport,
    SecurityReport,
    Severity,
    TrendDirection,
    TrendingResult,
    UpdateStatus,
    format_count,
)

# Console instance for all output
console = Console()

# Diagnostics go to stderr so --json output stays parseable
err_console = Console(stderr=True)


SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MODERATE: "yellow",
    Severity.LOW: "cyan",
}

STATUS_STYLES = {
    UpdateStatus.UP_TO_DATE: "green",
    UpdateStatus.PATCH: "cyan",
    UpdateStatus.MINOR: "yellow",
    UpdateStatus.MAJOR: "red",
    UpdateStatus.UNKNOWN: "dim",
}

TREND_STYLES = {
    TrendDirection.RISING: "green",
    TrendDirection.STABLE: "white",
    TrendDirection.DECLINING: "red",
}

EFFORT_STYLES = {
    "low": "green",
    "medium": "yellow",
    "high": "red",
}


def _table(title: str) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )


def _count(value: int | None) -> str:
    return format_count(value) if value is not None else "-"


def print_json(data: dict) -> None:
    """Print a result dictionary as JSON."""
    console.print_json(data=data)


def print_research(report: ResearchReport) -> None:
    """Print a detailed profile of a single package.

    Args:
        report: ResearchReport to display.
    """
    title = f"[bold]{report.name}[/] [dim]v{report.latest_version}[/]"
    console.print()
    console.print(Panel(title, subtitle=escape(report.description or "")))

    console.print("\n[bold cyan]Popularity[/]")
    console.print(f"  Weekly downloads: {_count(report.weekly_downloads)}")
    console.print(f"  Monthly downloads: {_count(report.monthly_downloads)}")

    if report.current_version:
        console.print("\n[bold cyan]Your Version[/]")
        console.print(f"  Installed: {report.current_version}")
        if report.versions_behind:
            console.print(f"  [yellow]{report.versions_behind} versions behind[/]")

    if report.github:
        repo = report.github
        console.print("\n[bold cyan]Repository Information[/]")
        console.print(f"  Stars: {repo.stars:,}")
        console.print(f"  Forks: {repo.forks:,}")
        console.print(f"  Open issues: {repo.open_issues}")
        if repo.last_push:
            console.print(f"  Last push: {repo.last_push[:10]}")
        if repo.archived:
            console.print("  [bold red]Archived[/]")

    console.print("\n[bold cyan]Maintenance[/]")
    if report.last_publish:
        console.print(
            f"  Last publish: {report.last_publish[:10]} "
            f"({report.days_since_last_publish} days ago)"
        )
    console.print(f"  Maintainers: {report.maintainer_count}")
    console.print(f"  TypeScript: {'yes' if report.typescript else 'no'}")
    console.print(f"  License: {report.license or 'Unknown'}")

    tally = report.tally
    style = "bold red" if tally.urgent else ("yellow" if tally.total else "green")
    console.print(f"\n[bold cyan]Security:[/] [{style}]{tally.total} advisories[/]")
    for advisory in report.advisories:
        severity_style = SEVERITY_STYLES[advisory.severity]
        console.print(f"  [{severity_style}]{advisory.id}[/] ({advisory.severity}) - {escape(advisory.title)}")

    console.print(f"\n[bold]Recommendation:[/] {report.recommendation}")
    console.print()


def print_comparison(result: ComparisonResult) -> None:
    """Print a side-by-side comparison table."""
    table = _table("Package Comparison")

    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Version", style="dim")
    table.add_column("Weekly", justify="right")
    table.add_column("Stars", justify="right")
    table.add_column("TS", justify="center")
    table.add_column("License")
    table.add_column("Last Update", style="dim")

    for row in result.packages:
        if row.is_sentinel:
            table.add_row(row.name, Text(row.version, style="red"), "-", "-", "-", "-", "-")
            continue
        table.add_row(
            row.name,
            row.version,
            _count(row.weekly_downloads),
            _count(row.github_stars),
            Text("yes", style="green") if row.typescript else Text("no", style="dim"),
            row.license or "-",
            (row.last_update or "-")[:10],
        )

    console.print()
    console.print(table)
    if result.recommendation:
        console.print(f"\n[bold]Recommendation:[/] {result.recommendation}")


def print_alternatives(result: AlternativesResult) -> None:
    """Print a table of alternative packages."""
    console.print()
    if not result.alternatives:
        console.print(f"[cyan]Info:[/] {result.recommendation}")
        return

    table = _table(f"Alternatives to {result.original}")

    table.add_column("Package", style="cyan")
    table.add_column("Weekly", justify="right")
    table.add_column("Stars", justify="right")
    table.add_column("Migration Effort")
    table.add_column("Pros")
    table.add_column("Cons")

    for alt in result.alternatives:
        effort = alt.migration_effort.value
        table.add_row(
            alt.name,
            _count(alt.weekly_downloads),
            _count(alt.github_stars),
            Text(effort, style=EFFORT_STYLES.get(effort, "white")),
            ", ".join(alt.pros),
            ", ".join(alt.cons),
        )

    console.print(table)
    console.print(f"\n[bold]Recommendation:[/] {result.recommendation}")


def print_security(report: SecurityReport) -> None:
    """Print a security advisory report."""
    title = f"[bold]{report.package}[/]"
    if report.version:
        title += f" [dim]v{report.version}[/]"

    console.print()
    console.print(Panel(title, subtitle=f"{report.total_advisories} advisories"))

    tally = report.tally
    console.print(
        f"  [bold red]critical {tally.critical}[/]  [red]high {tally.high}[/]  "
        f"[yellow]moderate {tally.moderate}[/]  [cyan]low {tally.low}[/]"
    )

    for advisory in report.advisories:
        style = SEVERITY_STYLES[advisory.severity]
        console.print(f"\n  [{style}]{advisory.id}[/] - {escape(advisory.title)}")
        if advisory.vulnerable_versions:
            console.print(f"    Vulnerable: {advisory.vulnerable_versions}")
        if advisory.patched_versions:
            console.print(f"    [green]Patched in:[/] {advisory.patched_versions}")

    console.print(f"\n[bold]Recommendation:[/] {report.recommendation}")
    console.print()


def print_manifest(result: ManifestAnalysis) -> None:
    """Print a dependency audit of a package.json."""
    groups = [("Dependencies", result.dependencies)]
    if result.dev_dependencies:
        groups.append(("Dev Dependencies", result.dev_dependencies))

    for title, deps in groups:
        table = _table(title)
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Current", style="dim")
        table.add_column("Latest")
        table.add_column("Status")
        table.add_column("Advisories", justify="right")
        table.add_column("Recommendation")

        for dep in deps:
            table.add_row(
                dep.name,
                dep.current,
                dep.latest or "-",
                Text(dep.status.value, style=STATUS_STYLES[dep.status]),
                Text(str(dep.security_issues), style="red" if dep.security_issues else "green"),
                dep.recommendation or "",
            )

        console.print()
        console.print(table)

    if result.top_priorities:
        console.print("\n[bold yellow]Top Priorities[/]")
        for priority in result.top_priorities:
            console.print(f"  [yellow]![/] {priority}")

    console.print(f"\n[bold]Summary:[/] {result.summary}")


def print_trending(result: TrendingResult) -> None:
    """Print the ranked members of a category."""
    title = f"Trending: {result.category}"
    if result.framework:
        title += f" ({result.framework})"
    table = _table(title)

    table.add_column("#", justify="right", style="dim")
    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Weekly", justify="right")
    table.add_column("Stars", justify="right")
    table.add_column("Trend")

    for rank, pkg in enumerate(result.packages, start=1):
        table.add_row(
            str(rank),
            pkg.name,
            _count(pkg.weekly_downloads),
            _count(pkg.github_stars),
            Text(pkg.trending.value, style=TREND_STYLES[pkg.trending]),
        )

    console.print()
    console.print(table)
    console.print(f"\n[bold]Recommendation:[/] {result.recommendation}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[bold red]Error:[/] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    err_console.print(f"[cyan]Info:[/] {escape(message)}")
