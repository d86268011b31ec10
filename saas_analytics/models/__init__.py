"""Database models."""

from saas_analytics.models.platform import PlatformSeatCost, PlatformUser

__all__ = [
    "PlatformUser",
    "PlatformSeatCost",
]
