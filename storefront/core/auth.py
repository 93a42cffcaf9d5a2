# storefront/core/auth.py
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from supabase import AsyncClient

from storefront.core.config import get_settings
from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.core.supabase_client import supabase_for_token
from storefront.schemas.user import AuthUser

# auto_error=False => a missing Authorization header does not raise here,
# so guests resolve to None and each route decides.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (SUPABASE_JWT_SECRET / SUPABASE_JWT_ALG)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthUser | None:
    """
    Resolve the caller from a Supabase JWT.

    Returns:
        AuthUser if a bearer token is present, else None (guest).

    Raises:
        HTTPException(401): if the token is invalid or has no 'sub'.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )
    return AuthUser(id=sub, email=payload.get("email"))


def require_auth(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


@dataclass
class RequestContext:
    """Everything a route needs to drive the stores for its caller."""

    user: AuthUser
    client: AsyncClient
    session: AuthSession
    notifier: Notifier


async def get_request_context(
    user: AuthUser = Depends(require_auth),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    """
    Build a per-request context.

    The Supabase client carries the caller's own token, so RLS applies to
    every query exactly as it would for the user's browser.
    """
    client = await supabase_for_token(credentials.credentials)
    return RequestContext(
        user=user,
        client=client,
        session=AuthSession.for_user(client, user, credentials.credentials),
        notifier=Notifier(),
    )
