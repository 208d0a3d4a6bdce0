# deltacare/core/supabase_client.py
from functools import lru_cache

from supabase import AsyncClient, Client, acreate_client, create_client
from supabase.lib.client_options import AsyncClientOptions, ClientOptions

from deltacare.core.config import get_settings
from deltacare.schemas.auth import Session

settings = get_settings()


def _bearer_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


@lru_cache
def supabase_public() -> Client:
    """
    Create a Supabase client with the anon/public key.

    Use cases:
      - catalog reads (medicines, doctors, lab tests, ...)
      - reading public buckets

    Note: This client still respects RLS and never signs in, so it is
    safe to share between requests.
    """
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=ClientOptions(postgrest_client_timeout=settings.POSTGREST_TIMEOUT),
    )


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - admin Auth operations (session revocation)
      - any operation that needs to bypass RLS

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def supabase_anon() -> Client:
    """
    Fresh anon client for Auth flows (sign-in / sign-up).

    Signing in stores the session on the client instance, so these
    clients must never be the shared `supabase_public()` one.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def supabase_for_token(access_token: str) -> Client:
    """
    Client acting as the user that owns `access_token`.

    Every PostgREST / Storage / Functions request carries the user's JWT,
    so Supabase row-level security applies exactly as it would for the
    browser.
    """
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=ClientOptions(
            headers=_bearer_headers(access_token),
            postgrest_client_timeout=settings.POSTGREST_TIMEOUT,
        ),
    )


def supabase_for_session(session: Session | None) -> Client:
    """Pick the right client for the current session (guest => public)."""
    if session is None:
        return supabase_public()
    return supabase_for_token(session.access_token)


async def supabase_realtime(access_token: str) -> AsyncClient:
    """
    Async client used for Realtime channels (change feeds).

    The user's token is forwarded to Realtime so RLS filters the change
    events the same way it filters reads.
    """
    client = await acreate_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=AsyncClientOptions(
            headers=_bearer_headers(access_token),
            auto_refresh_token=False,
            persist_session=False,
        ),
    )
    await client.realtime.set_auth(access_token)
    return client


async def close_realtime(client: AsyncClient) -> None:
    """Release the socket and HTTP session of a `supabase_realtime` client."""
    try:
        await client.realtime.close()
    finally:
        await client.auth.close()
