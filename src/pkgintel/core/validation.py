"""
Input validation utilities for pkgintel.

Validates package names and other caller input before any request is made,
so malformed values surface as InvalidArgument rather than odd HTTP errors.
"""

import re
from urllib.parse import quote

from pkgintel.core.exceptions import ValidationError

# npm package names: optional @scope/ prefix, URL-safe characters, lowercase
# for new packages but legacy names may contain uppercase.
_PACKAGE_NAME_PATTERN = re.compile(
    r"^(?:@[a-z0-9][a-z0-9._~-]*/)?[a-z0-9._~][a-z0-9._~-]*$",
    re.IGNORECASE,
)

# npm registry limit
MAX_PACKAGE_NAME_LENGTH = 214


def validate_package_name(name: str) -> str:
    """Validate an npm package name.

    Args:
        name: Package name to validate.

    Returns:
        The name with surrounding whitespace removed.

    Raises:
        ValidationError: If the package name is invalid.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("package", str(name or ""), "Package name cannot be empty")

    name = name.strip()

    if len(name) > MAX_PACKAGE_NAME_LENGTH:
        raise ValidationError(
            "package",
            name[:50] + "...",
            f"Package name exceeds {MAX_PACKAGE_NAME_LENGTH} character limit",
        )

    if any(ord(c) < 32 or ord(c) == 127 for c in name):
        raise ValidationError(
            "package", repr(name), "Package name contains invalid control characters"
        )

    if not _PACKAGE_NAME_PATTERN.match(name):
        raise ValidationError(
            "package",
            name,
            "Package name must be URL-safe and may only carry a single @scope/ prefix",
        )

    return name


def encode_package_name_for_url(name: str) -> str:
    """URL-encode a package name for use in registry URLs.

    Scoped names keep their "@" but the "/" is escaped, which is the form
    the npm registry expects ("@types%2Fnode").
    """
    return quote(name, safe="@")
