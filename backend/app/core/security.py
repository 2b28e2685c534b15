"""Supabase JWT verification and host authentication dependencies."""

from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import get_settings

security = HTTPBearer()

JWT_ALGORITHMS = ["HS256"]


class AuthenticatedUser:
    """Represents an authenticated user from a Supabase access token."""

    def __init__(
        self,
        uid: str,
        email: Optional[str] = None,
        role: Optional[str] = None,
        access_token: Optional[str] = None,
        claims: Optional[dict[str, Any]] = None,
    ):
        self.uid = uid
        self.email = email
        self.role = role or "authenticated"
        self.access_token = access_token
        self.claims = claims or {}


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify a Supabase access token and return its claims.

    This service never mints tokens; it only verifies tokens issued by Supabase Auth.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=JWT_ALGORITHMS,
            audience=settings.supabase_jwt_audience,
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def verify_supabase_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """Verify the bearer token and return the authenticated user."""
    token = credentials.credentials
    claims = decode_access_token(token)

    uid = claims.get("sub")
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthenticatedUser(
        uid=uid,
        email=claims.get("email"),
        role=claims.get("role"),
        access_token=token,
        claims=claims,
    )


def get_current_host(
    current_user: AuthenticatedUser = Depends(verify_supabase_token),
) -> AuthenticatedUser:
    """Require a signed-in user; rental data is always scoped to their host id."""
    if current_user.role == "anon":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sign-in required",
        )
    return current_user
