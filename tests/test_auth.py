import time
import uuid

import pytest
from jose import jwt

from deltacare.core.roles import ROLE_ROUTES, Role
from deltacare.services.auth_service import ROLE_LOOKUP_FAILED

url_prefix = "/api/v1"

EMAIL = "asha@example.com"
PASSWORD = "secret123"


def test_every_role_has_a_route():
    assert set(ROLE_ROUTES) == set(Role)
    assert ROLE_ROUTES[Role.CUSTOMER] == "/dashboard"
    assert ROLE_ROUTES[Role.DOCTOR] == "/doctor/dashboard"
    assert ROLE_ROUTES[Role.WHOLESALE] == "/wholesale/dashboard"
    assert ROLE_ROUTES[Role.ADMIN] == "/admin"


@pytest.mark.parametrize("raw", [None, "", "superuser"])
def test_unknown_role_is_customer(raw):
    assert Role.parse(raw) is Role.CUSTOMER


async def test_sign_in_wholesale_routes_to_wholesale_dashboard(ac_client, fake):
    user_id = fake.auth.add_user(EMAIL, PASSWORD)
    fake.seed("user_roles", {"user_id": user_id, "role": "wholesale"})

    resp = await ac_client.post(
        f"{url_prefix}/auth/sign-in", json={"email": EMAIL, "password": PASSWORD}
    )

    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["role"] == "wholesale"
    assert data["redirect_to"] == "/wholesale/dashboard"
    assert data["access_token"] == f"access-{user_id}"
    assert data["message"] is None


async def test_sign_in_without_role_record_routes_to_customer_dashboard(ac_client, fake):
    fake.auth.add_user(EMAIL, PASSWORD)

    resp = await ac_client.post(
        f"{url_prefix}/auth/sign-in", json={"email": EMAIL, "password": PASSWORD}
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["redirect_to"] == "/dashboard"
    assert resp.json()["message"] is None


async def test_role_lookup_network_error_does_not_block_login(ac_client, fake):
    fake.auth.add_user(EMAIL, PASSWORD)
    fake.fail_network("user_roles", "select")

    resp = await ac_client.post(
        f"{url_prefix}/auth/sign-in", json={"email": EMAIL, "password": PASSWORD}
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["redirect_to"] == "/dashboard"
    assert resp.json()["message"] == ROLE_LOOKUP_FAILED


async def test_sign_in_bad_credentials(ac_client, fake):
    fake.auth.add_user(EMAIL, PASSWORD)

    resp = await ac_client.post(
        f"{url_prefix}/auth/sign-in", json={"email": EMAIL, "password": "wrong-pass"}
    )

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid login credentials"


async def test_sign_up_creates_customer_role(ac_client, fake):
    payload = {
        "full_name": "Asha Rao",
        "email": EMAIL,
        "phone": "9876543210",
        "password": PASSWORD,
    }

    resp = await ac_client.post(f"{url_prefix}/auth/sign-up", json=payload)

    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["message"] == "Account created! Please check your email to verify."
    # email confirmation pending => no session yet
    assert data["redirect_to"] == "/"
    [role_row] = fake.rows("user_roles")
    assert (role_row["user_id"], role_row["role"]) == (data["user_id"], "customer")
    assert fake.auth.users[EMAIL]["data"] == {"full_name": "Asha Rao", "phone": "9876543210"}


async def test_sign_up_with_immediate_session_routes_to_dashboard(ac_client, fake):
    fake.auth.confirm_email = False
    payload = {"full_name": "Asha", "email": EMAIL, "phone": "98765", "password": PASSWORD}

    resp = await ac_client.post(f"{url_prefix}/auth/sign-up", json=payload)

    assert resp.status_code == 201, resp.text
    assert resp.json()["redirect_to"] == "/dashboard"


async def test_sign_up_role_insert_failure(ac_client, fake):
    fake.fail("user_roles", "insert")
    payload = {"full_name": "Asha", "email": EMAIL, "phone": "98765", "password": PASSWORD}

    resp = await ac_client.post(f"{url_prefix}/auth/sign-up", json=payload)

    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to set user role."


async def test_sign_up_short_password_rejected(ac_client, fake):
    payload = {"full_name": "Asha", "email": EMAIL, "phone": "98765", "password": "123"}

    resp = await ac_client.post(f"{url_prefix}/auth/sign-up", json=payload)

    assert resp.status_code == 422
    assert fake.calls == []


async def test_sign_out_revokes_and_goes_home(ac_client, fake, login):
    session = login()

    resp = await ac_client.post(f"{url_prefix}/auth/sign-out")

    assert resp.status_code == 200
    assert resp.json() == {"redirect_to": "/"}
    assert fake.auth.admin.signed_out == [session.access_token]


async def test_session_from_bearer_token(ac_client):
    user_id = uuid.uuid4()
    token = jwt.encode(
        {
            "sub": str(user_id),
            "email": EMAIL,
            "exp": int(time.time()) + 3600,
            "user_metadata": {"full_name": "Asha"},
        },
        "test-jwt-secret",
        algorithm="HS256",
    )

    resp = await ac_client.get(
        f"{url_prefix}/auth/session", headers={"Authorization": f"Bearer {token}"}
    )

    assert resp.status_code == 200, resp.text
    assert resp.json() == {"user_id": str(user_id), "email": EMAIL}


async def test_guest_session_is_null(ac_client):
    resp = await ac_client.get(f"{url_prefix}/auth/session")
    assert resp.status_code == 200
    assert resp.json() is None


async def test_invalid_token_rejected(ac_client):
    resp = await ac_client.get(
        f"{url_prefix}/auth/session", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired token"
