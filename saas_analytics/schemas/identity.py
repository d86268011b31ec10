"""Cross-platform identity Pydantic schemas."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from saas_analytics.schemas.enums import (
    MembershipActivity,
    Platform,
    RiskBucket,
    WarningKind,
)


def normalize_email(value: object) -> str:
    """Trim and lowercase an email address, rejecting unusable values.

    Raises:
        ValueError: If the value is not a plausible single address
    """
    if not isinstance(value, str):
        raise ValueError("email must be a string")

    email = value.strip().lower()
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or "@" in domain:
        raise ValueError(f"unusable email address: {value!r}")
    if any(ch.isspace() for ch in email):
        raise ValueError(f"unusable email address: {value!r}")
    return email


def as_utc(value: datetime | None) -> datetime | None:
    """Return a timezone-aware UTC datetime. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PlatformUserRecord(BaseModel):
    """One user's membership on one platform, normalized at ingestion."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    external_id: str = Field(min_length=1)
    email: str
    display_name: str = ""
    suspended: bool = False
    is_admin: bool = False
    mfa_enabled: bool = False
    mfa_enforced: bool = False
    last_login: datetime | None = None
    created_at: datetime
    monthly_seat_cost: float | None = Field(default=None, ge=0)  # None = platform default
    synced_at: datetime | None = None

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: object) -> str:
        return normalize_email(v)

    @field_validator("last_login", "created_at", "synced_at")
    @classmethod
    def validate_timestamp(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class GhostStatus(BaseModel):
    """Ghost classification for an identity."""

    model_config = ConfigDict(frozen=True)

    is_ghost: bool
    never_logged_in_platforms: list[Platform] = Field(default_factory=list)
    inactive_days: int = Field(ge=0)
    activity: dict[Platform, MembershipActivity] = Field(default_factory=dict)


class SecurityRisk(BaseModel):
    """Security risk score and contributing flags for an identity."""

    model_config = ConfigDict(frozen=True)

    risk_score: int = Field(ge=0, le=100)
    admin_without_2fa: bool = False
    suspended_with_access: bool = False
    admin_without_2fa_platforms: list[Platform] = Field(default_factory=list)
    suspended_platforms: list[Platform] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def bucket(self) -> RiskBucket:
        return RiskBucket.for_score(self.risk_score)


class LicenseWaste(BaseModel):
    """Monthly license spend and the share of it that is wasted."""

    model_config = ConfigDict(frozen=True)

    total_monthly_cost: float = Field(ge=0)
    wasted_cost: float = Field(ge=0)
    wasted_by_platform: dict[Platform, float] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


class CrossPlatformIdentity(BaseModel):
    """A user unified by normalized email across one or more platforms.

    Built fresh on every correlation run and never mutated; classifiers
    return updated copies.
    """

    model_config = ConfigDict(frozen=True)

    primary_email: str
    platforms: dict[Platform, PlatformUserRecord]
    ghost_status: GhostStatus | None = None
    security_risks: SecurityRisk | None = None
    license_waste: LicenseWaste | None = None
    last_sync: datetime | None = None

    @field_validator("platforms")
    @classmethod
    def validate_platforms(
        cls, v: dict[Platform, PlatformUserRecord]
    ) -> dict[Platform, PlatformUserRecord]:
        """Require at least one membership and keep platform order."""
        if not v:
            raise ValueError("an identity needs at least one platform membership")
        for platform, record in v.items():
            if record.platform != platform:
                raise ValueError(
                    f"record for {record.platform.value} filed under {platform.value}"
                )
        return dict(sorted(v.items(), key=lambda item: item[0].order))

    @property
    def memberships(self) -> list[PlatformUserRecord]:
        """Platform records in platform-enumeration order."""
        return list(self.platforms.values())


class CorrelationConflict(BaseModel):
    """Two records on one platform that normalized to the same email."""

    platform: Platform
    email: str
    kept_external_id: str
    dropped_external_id: str


class PlatformWarning(BaseModel):
    """Non-fatal problem that reduced a platform's contribution."""

    platform: Platform
    kind: WarningKind
    message: str
    external_id: str | None = None


class CorrelationResult(BaseModel):
    """Identities for one company plus everything that degraded them."""

    company_id: str
    identities: list[CrossPlatformIdentity] = Field(default_factory=list)
    reachable_platforms: list[Platform] = Field(default_factory=list)
    warnings: list[PlatformWarning] = Field(default_factory=list)
    conflicts: list[CorrelationConflict] = Field(default_factory=list)
    computed_at: datetime


class CorrelationSummary(BaseModel):
    """Counts returned after an on-demand correlation run."""

    message: str
    total_users: int
    ghost_users: int
    security_risks: int
    license_waste: int
    warnings: list[PlatformWarning] = Field(default_factory=list)
