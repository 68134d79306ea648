"""
npm registry client for fetching package metadata.

Uses the registry's full packument endpoint for profile data (versions,
publish times, maintainers) and the downloads API for point counts.
"""

from typing import Any

import aiohttp

from pkgintel.collectors.base import Collector
from pkgintel.core.models import DownloadStat, DownloadWindow, Lookup, PackageProfile
from pkgintel.core.validation import encode_package_name_for_url


class NpmClient(Collector):
    """Async client for the npm registry and downloads API.

    Fetches package profiles and download counts.
    """

    SERVICE = "npm"

    BASE_URL = "https://registry.npmjs.org"
    DOWNLOADS_URL = "https://api.npmjs.org/downloads/point"

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: int = 30,
    ):
        """Initialize the npm client.

        Args:
            session: Optional aiohttp session.
            timeout: Request timeout in seconds.
        """
        super().__init__(session, timeout)

    async def fetch_profile(self, name: str) -> Lookup[PackageProfile]:
        """Fetch the registry profile of a package.

        Args:
            name: Package name, scoped or not.

        Returns:
            FOUND with a PackageProfile, ABSENT if the package doesn't exist,
            ERROR if the registry couldn't be queried.
        """
        url = f"{self.BASE_URL}/{encode_package_name_for_url(name)}"
        result = await self._get_json(url)
        if not result.ok:
            return result
        if not isinstance(result.value, dict):
            return Lookup.error(f"Unexpected registry response for {name}")
        return Lookup.found(self.parse_profile(result.value))

    async def fetch_downloads(
        self,
        name: str,
        window: DownloadWindow = DownloadWindow.WEEK,
    ) -> Lookup[DownloadStat]:
        """Fetch the download count for a package over a time window.

        Args:
            name: Package name.
            window: Time window.

        Returns:
            FOUND with a DownloadStat, otherwise ABSENT or ERROR.
        """
        url = f"{self.DOWNLOADS_URL}/{window.value}/{encode_package_name_for_url(name)}"
        result = await self._get_json(url)
        if not result.ok:
            return result
        if not isinstance(result.value, dict):
            return Lookup.error(f"Unexpected downloads response for {name}")

        data = result.value
        downloads = data.get("downloads")
        if not isinstance(downloads, int) or downloads < 0:
            return Lookup.absent(f"No download count for {name} ({window})")

        return Lookup.found(DownloadStat(
            package=data.get("package", name),
            window=window,
            downloads=downloads,
            start=data.get("start"),
            end=data.get("end"),
        ))

    def parse_profile(self, data: dict[str, Any]) -> PackageProfile:
        """Parse a registry packument into a PackageProfile.

        Args:
            data: Raw JSON response from the registry.

        Returns:
            PackageProfile for the latest version.
        """
        dist_tags = data.get("dist-tags") or {}
        version = dist_tags.get("latest") or data.get("version") or ""

        # Top-level fields are copies of the latest version's manifest; fall
        # back to that manifest for fields older packuments omit.
        latest = (data.get("versions") or {}).get(version) or {}

        keywords = data.get("keywords") or latest.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [keywords]

        return PackageProfile(
            name=data.get("name", ""),
            version=version,
            description=data.get("description") or latest.get("description"),
            license=self._parse_license(data.get("license") or latest.get("license")),
            homepage=data.get("homepage") or latest.get("homepage"),
            keywords=tuple(k for k in keywords if isinstance(k, str)),
            maintainer_count=len(data.get("maintainers") or []),
            versions=tuple((data.get("versions") or {}).keys()),
            publish_times=tuple(
                (k, v) for k, v in (data.get("time") or {}).items() if isinstance(v, str)
            ),
            repository_url=self._parse_repository(data.get("repository") or latest.get("repository")),
        )

    def _parse_license(self, value: Any) -> str | None:
        """Normalize the license field ("MIT" or legacy {"type": "MIT"})."""
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            return value.get("type")
        return None

    def _parse_repository(self, value: Any) -> str | None:
        """Normalize the repository field (string shorthand or {"url": ...})."""
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            return value.get("url")
        return None
