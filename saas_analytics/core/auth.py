"""Authentication for the analytics API.

Requests carry an internal JWT (HS256) issued by the dashboard backend.
Every analytics call is scoped to the ``company_id`` claim of that token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from saas_analytics.core.config import get_settings
from saas_analytics.core.exceptions import MissingCompanyContext

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


class User(BaseModel):
    """Authenticated dashboard user."""

    id: str
    email: str | None = None
    name: str | None = None
    company_id: str | None = None
    roles: list[str] = []
    is_active: bool = True


class JWTTokenManager:
    """Manager for internal JWT tokens."""

    def __init__(self) -> None:
        self.settings = get_settings()

    def create_access_token(
        self,
        user_id: str,
        company_id: str | None = None,
        email: str | None = None,
        name: str | None = None,
        roles: list[str] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a new JWT access token.

        Args:
            user_id: Unique user identifier
            company_id: Company the user belongs to
            email: User email
            name: User display name
            roles: User roles
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT token
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.jwt_access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": user_id,
            "company_id": company_id,
            "email": email,
            "name": name,
            "roles": roles or ["user"],
            "exp": now + expires_delta,
            "iat": now,
            "iss": self.settings.jwt_issuer,
            "aud": self.settings.jwt_audience,
            "type": "access",
        }

        return jwt.encode(
            to_encode,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm,
        )

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token.

        Raises:
            HTTPException: If token is invalid or expired
        """
        try:
            return jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                audience=self.settings.jwt_audience,
                issuer=self.settings.jwt_issuer,
            )
        except JWTError as e:
            logger.warning(f"Token decode failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: {e}",
                headers={"WWW-Authenticate": "Bearer"},
            )


jwt_manager = JWTTokenManager()


async def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> User:
    """Dependency to get the current authenticated user.

    Raises:
        HTTPException: If authentication fails
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header[7:]

    if not token:
        raise credentials_exception

    payload = jwt_manager.decode_token(token)

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return User(
        id=user_id,
        email=payload.get("email"),
        name=payload.get("name"),
        company_id=payload.get("company_id"),
        roles=payload.get("roles", ["user"]),
    )


async def get_company_id(current_user: User = Depends(get_current_user)) -> str:
    """Dependency resolving the company every analytics call is scoped to.

    Raises:
        MissingCompanyContext: If the token carries no company
    """
    if not current_user.company_id:
        logger.warning(f"User {current_user.id} has no company context")
        raise MissingCompanyContext()
    return current_user.company_id
