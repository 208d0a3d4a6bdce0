import os
import uuid

# settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from deltacare.core.auth import get_client_factory, get_current_session
from deltacare.main import app
from deltacare.routers.auth import get_admin_client, get_auth_client
from deltacare.schemas.auth import Session
from tests.fakes import FakeSupabase, make_session


@pytest.fixture
def fake():
    return FakeSupabase()


@pytest.fixture
async def ac_client(fake):
    app.dependency_overrides[get_client_factory] = lambda: fake.for_session
    app.dependency_overrides[get_auth_client] = lambda: fake
    app.dependency_overrides[get_admin_client] = lambda: fake
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login(fake):
    """
    Act as a signed-in user for the following requests.

    Returns the Session; `role` is stored in user_roles unless None.
    """

    def _login(role: str | None = "customer", user_id: uuid.UUID | None = None) -> Session:
        session = make_session(user_id)
        if role is not None:
            fake.seed("user_roles", {"user_id": str(session.user_id), "role": role})
        app.dependency_overrides[get_current_session] = lambda: session
        return session

    return _login
