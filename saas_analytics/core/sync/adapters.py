"""Per-platform user payload adapters.

Each adapter turns one user object, shaped as the vendor's API returns
it, into a ``PlatformUserRecord``. Adapters are the only place vendor
field names appear; everything downstream sees normalized records.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from saas_analytics.core.exceptions import InvalidRecord
from saas_analytics.schemas.enums import Platform
from saas_analytics.schemas.identity import PlatformUserRecord, normalize_email

logger = logging.getLogger(__name__)

# GitHub hides private addresses behind these; they never match another platform
GITHUB_NOREPLY_SUFFIX = "@users.noreply.github.com"

# Directory roles treated as administrative on Microsoft platforms
PRIVILEGED_ROLE_NAMES = {
    "Global Administrator",
    "Privileged Role Administrator",
    "User Administrator",
    "Security Administrator",
    "Exchange Administrator",
    "SharePoint Administrator",
    "Teams Administrator",
    "Billing Administrator",
}

# AWS policies that grant administrative access
AWS_ADMIN_POLICY_MARKERS = ("Admin", "PowerUser")

Payload = dict[str, Any]
Adapter = Callable[[Payload], dict[str, Any]]


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a vendor timestamp into an aware UTC datetime.

    Accepts datetimes, ISO 8601 strings (``Z`` suffix included) and Unix
    epoch seconds. The Unix epoch itself is how Google reports "never",
    so it parses to None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if parsed.timestamp() <= 0:
        return None
    return parsed.astimezone(timezone.utc)


def _is_privileged_role(role_name: str) -> bool:
    return role_name in PRIVILEGED_ROLE_NAMES or "admin" in role_name.lower()


def _google_workspace(user: Payload) -> dict[str, Any]:
    name = user.get("name") or {}
    return {
        "external_id": user.get("id"),
        "email": user.get("primaryEmail"),
        "display_name": name.get("fullName") or "",
        "suspended": bool(user.get("suspended") or user.get("archived")),
        "is_admin": bool(user.get("isAdmin") or user.get("isDelegatedAdmin")),
        "mfa_enabled": bool(user.get("isEnrolledIn2Sv")),
        "mfa_enforced": bool(user.get("isEnforcedIn2Sv")),
        "last_login": parse_timestamp(user.get("lastLoginTime")),
        "created_at": parse_timestamp(user.get("creationTime")),
    }


def _github(user: Payload) -> dict[str, Any]:
    email = user.get("email")
    if isinstance(email, str) and email.strip().lower().endswith(GITHUB_NOREPLY_SUFFIX):
        raise ValueError("noreply address is not a usable email")
    return {
        "external_id": user.get("id"),
        "email": email,
        "display_name": user.get("name") or user.get("login") or "",
        "suspended": user.get("suspended_at") is not None,
        "is_admin": bool(user.get("site_admin") or user.get("role") == "admin"),
        "mfa_enabled": bool(user.get("two_factor_authentication")),
        # Enforcement is an org-level setting the connector copies onto members
        "mfa_enforced": bool(user.get("two_factor_requirement_enabled")),
        "last_login": parse_timestamp(user.get("last_active")),
        "created_at": parse_timestamp(user.get("created_at")),
    }


def _slack(user: Payload) -> dict[str, Any]:
    profile = user.get("profile") or {}
    return {
        "external_id": user.get("id"),
        "email": profile.get("email"),
        "display_name": profile.get("real_name") or user.get("name") or "",
        "suspended": bool(user.get("deleted")),
        "is_admin": bool(user.get("is_admin") or user.get("is_owner")),
        "mfa_enabled": bool(user.get("has_2fa")),
        "mfa_enforced": bool(user.get("two_factor_required")),
        # From team.accessLogs; users.list has no login time
        "last_login": parse_timestamp(user.get("date_last")),
        "created_at": parse_timestamp(user.get("created") or user.get("updated")),
    }


def _zoom(user: Payload) -> dict[str, Any]:
    display = user.get("display_name") or " ".join(
        part for part in (user.get("first_name"), user.get("last_name")) if part
    )
    return {
        "external_id": user.get("id"),
        "email": user.get("email"),
        "display_name": display,
        "suspended": user.get("status") == "inactive",
        "is_admin": user.get("role_name") in ("Owner", "Admin"),
        "mfa_enabled": bool(user.get("is_two_factor_auth_enabled")),
        "mfa_enforced": False,
        "last_login": parse_timestamp(user.get("last_login_time")),
        "created_at": parse_timestamp(user.get("user_created_at") or user.get("created_at")),
    }


def _aws_email(user: Payload) -> Any:
    if user.get("email"):
        return user["email"]
    for tag in user.get("Tags") or []:
        if str(tag.get("Key", "")).lower() == "email":
            return tag.get("Value")
    return None


def _aws(user: Payload) -> dict[str, Any]:
    policies = user.get("policies") or []
    last_used = user.get("PasswordLastUsed") or user.get("lastActivity")
    return {
        "external_id": user.get("UserId") or user.get("arn") or user.get("Arn"),
        "email": _aws_email(user),
        "display_name": user.get("UserName") or user.get("userName") or "",
        "suspended": user.get("status", "active") != "active",
        "is_admin": any(
            marker in policy for policy in policies for marker in AWS_ADMIN_POLICY_MARKERS
        ),
        "mfa_enabled": bool(user.get("mfaEnabled")),
        "mfa_enforced": False,
        "last_login": parse_timestamp(last_used),
        "created_at": parse_timestamp(user.get("CreateDate") or user.get("createDate")),
    }


def _microsoft(user: Payload) -> dict[str, Any]:
    sign_in = user.get("signInActivity") or {}
    roles = user.get("assignedRoles") or []
    return {
        "external_id": user.get("id"),
        "email": user.get("mail") or user.get("userPrincipalName"),
        "display_name": user.get("displayName") or "",
        "suspended": user.get("accountEnabled") is False,
        "is_admin": any(_is_privileged_role(role) for role in roles),
        "mfa_enabled": bool(user.get("isMfaRegistered")),
        "mfa_enforced": bool(user.get("isMfaEnforced")),
        "last_login": parse_timestamp(sign_in.get("lastSignInDateTime")),
        "created_at": parse_timestamp(user.get("createdDateTime")),
    }


PLATFORM_ADAPTERS: dict[Platform, Adapter] = {
    Platform.GOOGLE_WORKSPACE: _google_workspace,
    Platform.GITHUB: _github,
    Platform.SLACK: _slack,
    Platform.ZOOM: _zoom,
    Platform.AWS: _aws,
    Platform.AZURE: _microsoft,
    Platform.OFFICE365: _microsoft,
}


def adapt_user(
    platform: Platform,
    payload: Payload,
    synced_at: datetime | None = None,
) -> PlatformUserRecord:
    """Normalize one vendor user payload.

    Args:
        platform: Platform the payload came from
        payload: User object as returned by the vendor API
        synced_at: When the payload was fetched

    Returns:
        Normalized platform user record

    Raises:
        InvalidRecord: If the payload has no usable email, id or creation time
    """
    raw_id = payload.get("id") if isinstance(payload, dict) else None
    external_id = str(raw_id) if raw_id is not None else None

    try:
        fields = PLATFORM_ADAPTERS[platform](payload)
    except (ValueError, AttributeError, TypeError) as e:
        raise InvalidRecord(platform.value, external_id, str(e)) from e

    if fields["external_id"] is not None:
        fields["external_id"] = str(fields["external_id"])
        external_id = fields["external_id"]
    else:
        raise InvalidRecord(platform.value, external_id, "missing user id")

    if not fields["email"]:
        raise InvalidRecord(platform.value, external_id, "missing email")
    try:
        fields["email"] = normalize_email(fields["email"])
    except ValueError as e:
        raise InvalidRecord(platform.value, external_id, str(e)) from e

    if fields["created_at"] is None:
        raise InvalidRecord(platform.value, external_id, "missing account creation time")

    try:
        return PlatformUserRecord(platform=platform, synced_at=synced_at, **fields)
    except ValidationError as e:
        raise InvalidRecord(platform.value, external_id, str(e.errors()[0]["msg"])) from e
