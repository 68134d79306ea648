"""
Security advisory client.

Queries the GitHub global security advisory database for npm advisories
affecting a package.
"""

import logging
from typing import Any

from pkgintel.collectors.github import GitHubClient
from pkgintel.core.models import AdvisoryRecord, Severity

logger = logging.getLogger(__name__)


class AdvisoryClient(GitHubClient):
    """Async client for GitHub security advisories (npm ecosystem)."""

    SERVICE = "GitHub advisories"

    ADVISORIES_URL = "https://api.github.com/advisories"

    async def fetch_advisories(
        self,
        name: str,
        version: str | None = None,
    ) -> list[AdvisoryRecord]:
        """Fetch known advisories for a package.

        The version is accepted but not used to filter: every advisory for
        the package is returned. Matching ``version`` against each advisory's
        vulnerable range is left to the reader of ``vulnerable_versions``.

        Args:
            name: Package name.
            version: Optional installed version.

        Returns:
            List of AdvisoryRecord in source order, empty if none were found
            or the database couldn't be queried.
        """
        result = await self._get_json(
            self.ADVISORIES_URL,
            params={"ecosystem": "npm", "affects": name},
        )
        if not result.ok or not isinstance(result.value, list):
            return []

        advisories = [self.parse_advisory(name, item) for item in result.value if isinstance(item, dict)]
        logger.debug("%d advisories for %s", len(advisories), name)
        return advisories

    def parse_advisory(self, name: str, data: dict[str, Any]) -> AdvisoryRecord:
        """Build an AdvisoryRecord from a global advisories API entry.

        Version ranges are taken from the entry for ``name`` when the
        advisory covers several packages, else from the first entry.
        """
        vulnerabilities = data.get("vulnerabilities") or []
        affected: dict[str, Any] = {}
        for entry in vulnerabilities:
            if (entry.get("package") or {}).get("name") == name:
                affected = entry
                break
        else:
            if vulnerabilities:
                affected = vulnerabilities[0]

        return AdvisoryRecord(
            id=data.get("ghsa_id") or str(data.get("id", "")),
            severity=Severity.parse(data.get("severity")),
            title=data.get("summary") or data.get("title") or "Unknown vulnerability",
            description=data.get("description"),
            cve=data.get("cve_id"),
            patched_versions=self._patched_version(affected),
            vulnerable_versions=affected.get("vulnerable_version_range"),
            published_at=data.get("published_at"),
            url=data.get("html_url"),
        )

    def _patched_version(self, affected: dict[str, Any]) -> str | None:
        """First patched version, a string or {"identifier": ...} by API version."""
        patched = affected.get("first_patched_version") or affected.get("patched_versions")
        if isinstance(patched, dict):
            return patched.get("identifier")
        return patched
