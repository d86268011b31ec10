"""Platform user and seat cost models.

Rows here are the normalized output of the per-platform sync jobs. One
row per (company, platform, external account); correlation happens at
read time, never in storage.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped

from saas_analytics.core.database import Base


def _utcnow() -> datetime:
    """Naive UTC timestamp, matching how sync times are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PlatformUser(Base):
    """A user account as reported by one connected SaaS platform."""

    __tablename__ = "platform_users"
    __table_args__ = (
        UniqueConstraint("company_id", "platform", "external_id", name="uq_platform_user"),
    )

    id: Mapped[int] = Column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[str] = Column(String(64), nullable=False, index=True)
    platform: Mapped[str] = Column(String(50), nullable=False)
    external_id: Mapped[str] = Column(String(255), nullable=False)
    email: Mapped[str] = Column(String(320), nullable=False)
    display_name: Mapped[str] = Column(String(255), default="")
    suspended: Mapped[bool] = Column(Boolean, default=False)
    is_admin: Mapped[bool] = Column(Boolean, default=False)
    mfa_enabled: Mapped[bool] = Column(Boolean, default=False)
    mfa_enforced: Mapped[bool] = Column(Boolean, default=False)
    last_login: Mapped[datetime | None] = Column(DateTime)
    account_created_at: Mapped[datetime] = Column(DateTime, nullable=False)
    monthly_seat_cost: Mapped[float | None] = Column(Float)  # None = platform default
    raw_data: Mapped[dict | None] = Column(JSON)
    synced_at: Mapped[datetime] = Column(DateTime, default=_utcnow)

    def __repr__(self) -> str:
        return f"<PlatformUser {self.platform}:{self.external_id} ({self.email})>"


class PlatformSeatCost(Base):
    """Billed per-seat monthly cost for a platform, per company."""

    __tablename__ = "platform_seat_costs"
    __table_args__ = (
        UniqueConstraint("company_id", "platform", name="uq_platform_seat_cost"),
    )

    id: Mapped[int] = Column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[str] = Column(String(64), nullable=False)
    platform: Mapped[str] = Column(String(50), nullable=False)
    monthly_cost: Mapped[float] = Column(Float, nullable=False)
    synced_at: Mapped[datetime] = Column(DateTime, default=_utcnow)

    def __repr__(self) -> str:
        return f"<PlatformSeatCost {self.company_id}:{self.platform} ${self.monthly_cost}>"
