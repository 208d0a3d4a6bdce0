# deltacare/core/auth.py
import uuid
from typing import Any, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from supabase import Client

from deltacare.core.config import get_settings
from deltacare.core.errors import auth_required
from deltacare.core.roles import Role
from deltacare.core.supabase_client import supabase_for_session
from deltacare.schemas.auth import Session
from deltacare.services.auth_service import resolve_role

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)

ClientFactory = Callable[[Session | None], Client]


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Args:
        token: raw JWT from the Authorization header.

    Returns:
        Decoded JWT claims.

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
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


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Session | None:
    """
    Resolve the current session from a Supabase JWT.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Convert 'sub' to UUID.

    Returns:
        Session if authenticated, else None for guests.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")

    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    # Supabase provides sub as a string; enforce UUID
    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return Session(
        user_id=sub_uuid,
        email=payload.get("email"),
        full_name=(payload.get("user_metadata") or {}).get("full_name"),
        access_token=credentials.credentials,
    )


def require_auth(session: Session | None = Depends(get_current_session)) -> Session:
    """
    Enforce authentication.

    Guests are rejected with 401 so the frontend can route to sign-in.
    """
    if session is None:
        raise auth_required()
    return session


def get_client_factory() -> ClientFactory:
    """
    Dependency returning the function that builds a Supabase client for
    a session. Overridden in tests with an in-memory fake.
    """
    return supabase_for_session


def get_client(
    session: Session | None = Depends(get_current_session),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> Client:
    """Supabase client acting as the caller (public client for guests)."""
    return client_factory(session)


def require_role(*allowed: Role) -> Callable[..., Session]:
    """
    Build a dependency that admits only sessions whose role is in `allowed`.

    The role is read from `user_roles` on every request; lookup failures
    resolve to customer, so a broken lookup can only ever deny access.
    """

    def dependency(
        session: Session = Depends(require_auth),
        client: Client = Depends(get_client),
    ) -> Session:
        role, _notice = resolve_role(client, session.user_id)
        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{' or '.join(r.value for r in allowed).capitalize()} access required",
            )
        return session

    return dependency


require_admin = require_role(Role.ADMIN)
require_doctor = require_role(Role.DOCTOR)
require_wholesale = require_role(Role.WHOLESALE)
