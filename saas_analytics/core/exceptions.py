"""Analytics error kinds.

Only ``MissingCompanyContext`` and ``AllPlatformsUnreachable`` ever reach
the API layer. Fetch failures and invalid records are collected as
warnings next to a best-effort result.
"""


class AnalyticsError(Exception):
    """Base class for identity analytics errors."""


class MissingCompanyContext(AnalyticsError):
    """Raised when a request is not scoped to a company."""

    def __init__(self, message: str = "Company ID not found in request") -> None:
        super().__init__(message)


class PlatformFetchFailure(AnalyticsError):
    """Raised when one platform's records cannot be read."""

    def __init__(self, platform: str, reason: str) -> None:
        self.platform = platform
        self.reason = reason
        super().__init__(f"Failed to fetch {platform} users: {reason}")


class InvalidRecord(AnalyticsError):
    """Raised when a platform record lacks a usable email."""

    def __init__(self, platform: str, external_id: str | None, reason: str) -> None:
        self.platform = platform
        self.external_id = external_id
        self.reason = reason
        super().__init__(
            f"Invalid {platform} record {external_id or '<unknown>'}: {reason}"
        )


class AllPlatformsUnreachable(AnalyticsError):
    """Raised when no platform could be read for a company."""

    def __init__(self, company_id: str, platforms: list[str]) -> None:
        self.company_id = company_id
        self.platforms = platforms
        super().__init__(
            f"No platform records reachable for company {company_id} "
            f"(tried: {', '.join(platforms) or 'none'})"
        )
