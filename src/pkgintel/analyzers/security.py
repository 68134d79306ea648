"""
Advisory prioritization and security recommendations.
"""

from pkgintel.core.models import AdvisoryRecord, SeverityTally


def prioritize(advisories: list[AdvisoryRecord], limit: int | None = None) -> list[AdvisoryRecord]:
    """Order advisories most severe first, keeping source order within a severity.

    Args:
        advisories: Advisories in source order.
        limit: Optional maximum number to return.
    """
    ordered = sorted(advisories, key=lambda a: a.severity.sort_order)
    return ordered if limit is None else ordered[:limit]


def security_recommendation(
    package: str,
    tally: SeverityTally,
    version: str | None = None,
    latest_version: str | None = None,
) -> str:
    """Build the advisory summary shown to the user.

    The most severe non-empty bucket decides the wording. When an installed
    version was given and differs from the latest, the latest is appended.
    """
    if tally.total == 0:
        suffix = f" {version}" if version else ""
        recommendation = f'No known security advisories for "{package}"{suffix}.'
    elif tally.critical > 0:
        recommendation = (
            f"CRITICAL: {tally.critical} critical vulnerabilities found. Update immediately!"
        )
    elif tally.high > 0:
        recommendation = f"HIGH: {tally.high} high severity issues. Update recommended."
    else:
        recommendation = f"{tally.total} advisory(ies) found. Review and consider updating."

    if version and latest_version and version != latest_version:
        recommendation += f" Latest version: {latest_version}"

    return recommendation
