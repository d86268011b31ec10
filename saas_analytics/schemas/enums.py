"""Identity analytics enums."""

from enum import Enum


class Platform(str, Enum):
    """Connected SaaS platforms.

    Definition order is the fixed platform-enumeration order used for
    every per-platform listing (never-logged-in platforms, waste
    recommendations, breakdowns).
    """

    GOOGLE_WORKSPACE = "google-workspace"
    GITHUB = "github"
    SLACK = "slack"
    ZOOM = "zoom"
    AWS = "aws"
    AZURE = "azure"
    OFFICE365 = "office365"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def order(self) -> int:
        return _ORDER[self]


_DISPLAY_NAMES = {
    Platform.GOOGLE_WORKSPACE: "Google Workspace",
    Platform.GITHUB: "GitHub",
    Platform.SLACK: "Slack",
    Platform.ZOOM: "Zoom",
    Platform.AWS: "AWS",
    Platform.AZURE: "Azure",
    Platform.OFFICE365: "Office 365",
}

_ORDER = {platform: index for index, platform in enumerate(Platform)}


class MembershipActivity(str, Enum):
    """Activity classification of a single platform membership."""

    ACTIVE = "active"  # Logged in within the inactivity threshold
    INACTIVE = "inactive"  # Last login older than the inactivity threshold
    NEVER_LOGGED_IN = "never_logged_in"  # No login, past the grace period
    PENDING = "pending"  # No login yet, still inside the grace period


class RiskBucket(str, Enum):
    """Security risk reporting buckets."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @classmethod
    def for_score(cls, score: int) -> "RiskBucket":
        """Map a 0-100 risk score onto its reporting bucket."""
        if score >= 75:
            return cls.CRITICAL
        if score >= 50:
            return cls.HIGH
        if score >= 25:
            return cls.MEDIUM
        if score > 0:
            return cls.LOW
        return cls.NONE


class WarningKind(str, Enum):
    """Non-fatal problems reported alongside a correlation result."""

    FETCH_FAILURE = "fetch_failure"
    TIMEOUT = "timeout"
    INVALID_RECORD = "invalid_record"


class RecommendationType(str, Enum):
    """Dashboard recommendation types."""

    COST = "cost"
    SECURITY = "security"


class RecommendationPriority(str, Enum):
    """Dashboard recommendation priorities."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
