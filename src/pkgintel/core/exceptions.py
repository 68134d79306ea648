"""
Custom exceptions for pkgintel.
"""


class PkgIntelError(Exception):
    """Base exception for all pkgintel errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PackageNotFoundError(PkgIntelError):
    """Raised when a package cannot be found on the npm registry."""

    def __init__(self, package_name: str, details: str | None = None):
        super().__init__(
            f'Package "{package_name}" not found on npm',
            details=details,
        )
        self.package_name = package_name


class InvalidArgumentError(PkgIntelError):
    """Raised when caller input violates an operation's contract."""

    def __init__(self, argument: str, reason: str):
        super().__init__(f"Invalid argument '{argument}'", details=reason)
        self.argument = argument
        self.reason = reason


class ValidationError(InvalidArgumentError):
    """Raised when a value fails validation (package names, versions)."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(field, f"Value '{value}' is invalid: {reason}")
        self.field = field
        self.value = value


class NetworkError(PkgIntelError):
    """Raised when a network request fails."""

    def __init__(self, url: str, status_code: int | None = None, details: str | None = None):
        message = f"Network request failed: {url}"
        if status_code:
            message += f" (status {status_code})"
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code


class RateLimitError(NetworkError):
    """Raised when an API rate limit is exceeded."""

    def __init__(
        self,
        url: str,
        service: str,
        reset_time: int | None = None,
    ):
        details = None
        if reset_time:
            details = f"Rate limit resets in {reset_time} seconds."
        super().__init__(url, details=details)
        self.message = f"Rate limit exceeded for {service}"
        self.service = service
        self.reset_time = reset_time
