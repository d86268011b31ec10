#!/usr/bin/env python3
"""Seed database with sample platform users for development/testing."""

import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from saas_analytics.core.database import get_db_context, init_db
from saas_analytics.core.sync import ingest_platform_users, upsert_seat_cost
from saas_analytics.models.platform import PlatformUser
from saas_analytics.schemas.enums import Platform

DEMO_COMPANY_ID = "demo-company"

PEOPLE = [
    ("alice", "Alice Smith"),
    ("bob", "Bob Jones"),
    ("carol", "Carol White"),
    ("dave", "Dave Brown"),
    ("erin", "Erin Green"),
    ("frank", "Frank Black"),
    ("grace", "Grace Hall"),
    ("heidi", "Heidi King"),
]


def _iso(dt: datetime | None) -> str | None:
    return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z") if dt else None


def _epoch(dt: datetime | None) -> int | None:
    return int(dt.timestamp()) if dt else None


def _login(now: datetime, rng: random.Random) -> datetime | None:
    """Mostly recent logins, some stale, some never."""
    roll = rng.random()
    if roll < 0.15:
        return None
    if roll < 0.35:
        return now - timedelta(days=rng.randint(91, 400))
    return now - timedelta(days=rng.randint(0, 60))


def google_users(now, rng):
    return [
        {
            "id": f"1089{index:014d}",
            "primaryEmail": f"{handle}@demo.example.com",
            "name": {"fullName": name},
            "isAdmin": index == 0,
            "isEnrolledIn2Sv": rng.random() > 0.3,
            "isEnforcedIn2Sv": False,
            "suspended": index == 5,
            "lastLoginTime": _iso(_login(now, rng)) or "1970-01-01T00:00:00.000Z",
            "creationTime": _iso(now - timedelta(days=rng.randint(100, 1500))),
        }
        for index, (handle, name) in enumerate(PEOPLE)
    ]


def github_users(now, rng):
    users = [
        {
            "id": 100 + index,
            "login": handle,
            "name": name,
            "email": f"{handle}@demo.example.com",
            "role": "admin" if index in (0, 3) else "member",
            "two_factor_authentication": index != 3,
            "last_active": _iso(_login(now, rng)),
            "created_at": _iso(now - timedelta(days=rng.randint(100, 1500))),
        }
        for index, (handle, name) in enumerate(PEOPLE[:5])
    ]
    # Private address that cannot be correlated
    users.append({
        "id": 999,
        "login": "ghost-bot",
        "email": "999+ghost-bot@users.noreply.github.com",
        "created_at": _iso(now - timedelta(days=30)),
    })
    return users


def slack_users(now, rng):
    return [
        {
            "id": f"U{index:08d}",
            "name": handle,
            "deleted": False,
            "is_admin": index == 1,
            "has_2fa": index != 1,
            "date_last": _epoch(_login(now, rng)),
            "created": _epoch(now - timedelta(days=rng.randint(100, 1500))),
            "profile": {"real_name": name, "email": f"{handle}@demo.example.com"},
        }
        for index, (handle, name) in enumerate(PEOPLE)
    ]


def zoom_users(now, rng):
    return [
        {
            "id": f"zoom-{handle}",
            "email": f"{handle}@demo.example.com",
            "display_name": name,
            "status": "active",
            "role_name": "Owner" if index == 0 else "Member",
            "last_login_time": _iso(_login(now, rng)),
            "user_created_at": _iso(now - timedelta(days=rng.randint(20, 900))),
        }
        for index, (handle, name) in enumerate(PEOPLE[2:], start=2)
    ]


def aws_users(now, rng):
    return [
        {
            "UserName": handle,
            "UserId": f"AIDA{handle.upper():0<16}",
            "Tags": [{"Key": "email", "Value": f"{handle}@demo.example.com"}],
            "status": "active",
            "policies": ["AdministratorAccess"] if handle == "dave" else ["ReadOnlyAccess"],
            "mfaEnabled": handle != "dave",
            "PasswordLastUsed": _iso(_login(now, rng)),
            "CreateDate": _iso(now - timedelta(days=20)),
        }
        for handle, _ in PEOPLE[3:6]
    ]


SEEDERS = {
    Platform.GOOGLE_WORKSPACE: google_users,
    Platform.GITHUB: github_users,
    Platform.SLACK: slack_users,
    Platform.ZOOM: zoom_users,
    Platform.AWS: aws_users,
}


def main():
    """Seed the database."""
    print("Initializing database...")
    init_db()

    print("Seeding data...")
    now = datetime.now(timezone.utc)
    rng = random.Random(42)

    with get_db_context() as db:
        existing = (
            db.query(PlatformUser)
            .filter(PlatformUser.company_id == DEMO_COMPANY_ID)
            .first()
        )
        if existing:
            print("Database already seeded. Clear data/ folder to re-seed.")
            return

        for platform, build in SEEDERS.items():
            result = ingest_platform_users(
                db, DEMO_COMPANY_ID, platform, build(now, rng), synced_at=now
            )
            print(f"  ✓ {platform.display_name}: {result.stored} users ({result.skipped} skipped)")

        upsert_seat_cost(db, DEMO_COMPANY_ID, Platform.SLACK, 7.25)
        print("  ✓ Created seat cost records")

    print(
        f"\nSeeding complete for company '{DEMO_COMPANY_ID}'. "
        "Run 'uvicorn saas_analytics.main:app --reload' to start."
    )


if __name__ == "__main__":
    main()
