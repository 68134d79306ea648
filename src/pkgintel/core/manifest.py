"""
Manifest parsing for package.json content.

Selects the declared dependencies an analysis should look at, in their
declaration order, and rejects structurally malformed manifests.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from pkgintel.core.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class ManifestEntry:
    """A declared dependency and its version range."""

    name: str
    spec: str
    dev: bool = False

    def __str__(self) -> str:
        return f"{self.name}@{self.spec}"


class ManifestSource:
    """Parse package.json mappings into dependency entries.

    The caps bound how many registry, download and advisory lookups one
    analysis can trigger. They are tunable limits, not correctness
    requirements: raise them on a private registry mirror.
    """

    MAX_DEPENDENCIES = 20
    MAX_DEV_DEPENDENCIES = 10

    def __init__(
        self,
        max_dependencies: int = MAX_DEPENDENCIES,
        max_dev_dependencies: int = MAX_DEV_DEPENDENCIES,
    ):
        self.max_dependencies = max_dependencies
        self.max_dev_dependencies = max_dev_dependencies

    def parse(
        self,
        package_json: Any,
        check_dev_deps: bool = True,
    ) -> tuple[list[ManifestEntry], list[ManifestEntry]]:
        """Select the dependencies to analyze.

        Args:
            package_json: Decoded package.json content.
            check_dev_deps: Whether to include devDependencies.

        Returns:
            Tuple of (regular entries, dev entries), each capped and in
            declaration order.

        Raises:
            InvalidArgumentError: If the manifest structure is malformed.
        """
        if not isinstance(package_json, Mapping):
            raise InvalidArgumentError(
                "package_json",
                f"Expected an object, got {type(package_json).__name__}",
            )

        deps = self._entries(package_json, "dependencies", dev=False)
        dev_deps = self._entries(package_json, "devDependencies", dev=True) if check_dev_deps else []

        return deps[: self.max_dependencies], dev_deps[: self.max_dev_dependencies]

    def load(self, path: Path) -> dict[str, Any]:
        """Read package.json from a file or project directory.

        Args:
            path: Path to package.json or the directory containing it.

        Returns:
            Decoded manifest content.

        Raises:
            InvalidArgumentError: If the file is missing or not valid JSON.
        """
        if path.is_dir():
            path = path / "package.json"

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidArgumentError("path", f"Failed to read {path}: {e}")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError("path", f"Invalid JSON in {path}: {e}")

    def _entries(
        self,
        package_json: Mapping[str, Any],
        key: str,
        dev: bool,
    ) -> list[ManifestEntry]:
        section = package_json.get(key)
        if section is None:
            return []
        if not isinstance(section, Mapping):
            raise InvalidArgumentError(
                key, f"Expected a name -> version mapping, got {type(section).__name__}"
            )

        entries = []
        for name, spec in section.items():
            if not isinstance(name, str) or not isinstance(spec, str):
                raise InvalidArgumentError(
                    key, f"Entry {name!r} must map a package name to a version string"
                )
            entries.append(ManifestEntry(name=name, spec=spec, dev=dev))
        return entries
