"""
Semantic version helpers.

npm versions follow SemVer 2.0, so validation and ordering use the
``semver`` package in strict mode: "1.2" or "v1.2.3" are not valid versions.
"""

import re

from semver import Version

from pkgintel.core.models import UpdateStatus

# Leading range operators in a declared dependency ("^1.2.3", ">=1.0.0", "~>2.0.0")
_RANGE_OPERATORS = re.compile(r"^[\^~>=<]+")


def strip_range(spec: str) -> str:
    """Strip leading range operators from a declared version range.

    Args:
        spec: Declared range, e.g. "^1.2.3" or ">= 2.0.0".

    Returns:
        The comparison baseline, e.g. "1.2.3".
    """
    return _RANGE_OPERATORS.sub("", spec.strip()).strip()


def is_valid(version: str | None) -> bool:
    """Return True if ``version`` is a strictly valid semantic version."""
    if not version:
        return False
    return Version.is_valid(version)


def sort_newest_first(versions: list[str]) -> list[str]:
    """Return the valid versions sorted newest first. Invalid ones are dropped."""
    valid = [v for v in versions if is_valid(v)]
    return sorted(valid, key=Version.parse, reverse=True)


def version_rank(current: str | None, versions: list[str]) -> int | None:
    """Zero-based rank of ``current`` among valid versions, newest first.

    Returns None when ``current`` is invalid or not a published version.
    """
    if not is_valid(current):
        return None
    target = Version.parse(current)
    for index, candidate in enumerate(sort_newest_first(versions)):
        if Version.parse(candidate) == target:
            return index
    return None


def classify_update(current: str | None, latest: str | None) -> UpdateStatus:
    """Classify the kind of update from ``current`` to ``latest``.

    Follows npm's ``semver.diff``: the largest differing component between
    the two versions decides. Moving off a pre-release to its own release
    counts as the component being released (1.0.0-rc.1 -> 1.0.0 is major).
    Pre-release deltas fold into the matching major/minor/patch bucket.

    Args:
        current: Baseline version (range operators already stripped).
        latest: Latest published version.

    Returns:
        UpdateStatus, UNKNOWN when either version is not valid semver.
    """
    if not is_valid(current) or not is_valid(latest):
        return UpdateStatus.UNKNOWN

    a = Version.parse(current)
    b = Version.parse(latest)
    if a == b:
        return UpdateStatus.UP_TO_DATE

    high, low = (a, b) if a > b else (b, a)

    if low.prerelease and not high.prerelease:
        if not low.minor and not low.patch:
            return UpdateStatus.MAJOR
        if (low.major, low.minor, low.patch) == (high.major, high.minor, high.patch):
            if low.minor and not low.patch:
                return UpdateStatus.MINOR
            return UpdateStatus.PATCH

    if a.major != b.major:
        return UpdateStatus.MAJOR
    if a.minor != b.minor:
        return UpdateStatus.MINOR
    return UpdateStatus.PATCH
