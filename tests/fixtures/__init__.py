"""Shared test data for identity analytics."""

from .identity_fixtures import (
    NOW,
    SEAT_COSTS,
    by_platform,
    days_ago,
    make_identity,
    make_record,
)

__all__ = [
    "NOW",
    "SEAT_COSTS",
    "by_platform",
    "days_ago",
    "make_identity",
    "make_record",
]
