# deltacare/core/errors.py
import httpx
from fastapi import HTTPException, status
from supabase import (
    AuthError,
    FunctionsError,
    PostgrestAPIError,
    StorageException,
)

# Every failure the Supabase client can surface for a single remote call.
REMOTE_ERRORS = (
    PostgrestAPIError,
    StorageException,
    FunctionsError,
    AuthError,
    httpx.HTTPError,
)

# PostgREST: `.single()` matched zero rows
NO_ROWS = "PGRST116"
# Postgres: unique_violation
UNIQUE_VIOLATION = "23505"


def error_code(exc: Exception) -> str | None:
    """PostgREST / Postgres error code of a remote failure, if it has one."""
    return getattr(exc, "code", None)


def auth_required(detail: str = "Authentication required") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
    )


def bad_request(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def remote_failure(detail: str) -> HTTPException:
    """
    Generic notification for a failed call to the hosted backend.

    The original exception is logged by the caller; clients only see
    `detail` and may retry the same action.
    """
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail,
    )
