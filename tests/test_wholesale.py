import json

import pytest

from deltacare.core.realtime import ChangeEvent, get_change_feed
from deltacare.main import app

url_prefix = "/api/v1"

PROFILE = {
    "business_name": "Sunrise Pharma",
    "business_type": "Retail pharmacy",
    "contact_person": "Ravi",
    "phone": "9876500000",
    "email": "ravi@sunrise.example.com",
    "business_address": "4 Market St",
    "business_city": "Pune",
    "business_state": "MH",
    "business_pincode": "411001",
    "gst_number": "27ABCDE1234F1Z5",
}


def seed_profile(fake, session, verified):
    [row] = fake.seed(
        "wholesale_profiles",
        {**PROFILE, "user_id": str(session.user_id), "is_verified": verified},
    )
    return row


async def test_non_wholesale_user_forbidden(ac_client, login):
    login(role="customer")
    resp = await ac_client.get(f"{url_prefix}/wholesale/dashboard")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Wholesale access required"


async def test_no_profile_needs_registration(ac_client, login):
    login(role="wholesale")
    resp = await ac_client.get(f"{url_prefix}/wholesale/dashboard")
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "needs_registration"


async def test_register_then_pending_verification(ac_client, fake, login):
    login(role="wholesale")

    created = await ac_client.post(f"{url_prefix}/wholesale/profile", json=PROFILE)
    assert created.status_code == 201, created.text
    assert created.json()["is_verified"] is False

    again = await ac_client.post(f"{url_prefix}/wholesale/profile", json=PROFILE)
    assert again.status_code == 409

    resp = await ac_client.get(f"{url_prefix}/wholesale/dashboard", params={"tab": "products"})
    data = resp.json()
    assert data["status"] == "pending_verification"
    assert data["notice"].startswith("Verification Pending")
    assert data["products"] is None


@pytest.mark.parametrize("tab, field", [("products", "products"), ("quotes", "quotes"), ("dashboard", "stats")])
async def test_verified_profile_gets_tab_data(ac_client, fake, login, tab, field):
    session = login(role="wholesale")
    seed_profile(fake, session, verified=True)
    fake.seed("products", {"name": "Amoxicillin 500mg", "price": 12, "stock_quantity": 900})

    resp = await ac_client.get(f"{url_prefix}/wholesale/dashboard", params={"tab": tab})

    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "verified"
    assert resp.json()[field] is not None


async def test_product_search(ac_client, fake, login):
    login(role="wholesale")
    fake.seed("products", {"name": "Amoxicillin 500mg"}, {"name": "Azithromycin"})

    resp = await ac_client.get(f"{url_prefix}/wholesale/products", params={"search": "amox"})

    assert [p["name"] for p in resp.json()] == ["Amoxicillin 500mg"]


async def test_submit_and_list_quotes(ac_client, fake, login):
    login(role="wholesale")
    payload = {"items": [{"product_name": "Paracetamol 650", "quantity": 500}], "notes": "monthly"}

    resp = await ac_client.post(f"{url_prefix}/wholesale/quotes", json=payload)

    assert resp.status_code == 201, resp.text
    assert resp.json()["message"] == "Quote request submitted successfully!"
    listed = await ac_client.get(f"{url_prefix}/wholesale/quotes")
    assert len(listed.json()) == 1
    assert listed.json()[0]["status"] == "pending"


@pytest.mark.parametrize(
    "items",
    [[], [{"product_name": "  ", "quantity": 1}], [{"product_name": "X", "quantity": 0}]],
)
async def test_invalid_quotes_rejected(ac_client, fake, login, items):
    login(role="wholesale")
    resp = await ac_client.post(f"{url_prefix}/wholesale/quotes", json={"items": items})
    assert resp.status_code == 422
    assert fake.rows("quote_requests") == []


class OneChangeFeed:
    """Delivers a single UPDATE after flipping the profile to verified."""

    def __init__(self, fake, profile):
        self.fake = fake
        self.profile = profile
        self.observed = []

    async def observe(self, table, filter=None, event="*", access_token=None):
        self.observed.append((table, filter, event, access_token))
        self.profile["is_verified"] = True
        yield ChangeEvent(table=table, event_type="UPDATE", record=dict(self.profile))


async def test_profile_events_refetch_on_change(ac_client, fake, login):
    session = login(role="wholesale")
    profile = seed_profile(fake, session, verified=False)
    feed = OneChangeFeed(fake, profile)
    app.dependency_overrides[get_change_feed] = lambda: feed

    resp = await ac_client.get(f"{url_prefix}/wholesale/profile/events")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    frames = [f for f in resp.text.split("\n\n") if f]
    payloads = [json.loads(f.split("data: ", 1)[1]) for f in frames]
    assert [p["is_verified"] for p in payloads] == [False, True]
    assert feed.observed == [
        ("wholesale_profiles", f"user_id=eq.{session.user_id}", "UPDATE", session.access_token)
    ]


async def test_stored_quotes_with_loose_items_still_list(ac_client, fake, login):
    session = login(role="wholesale")
    seed_profile(fake, session, verified=True)
    fake.seed(
        "quote_requests",
        {
            "user_id": str(session.user_id),
            "items": [{"product_name": "", "quantity": 0, "unit": "strips"}],
            "status": "pending",
        },
    )

    listed = await ac_client.get(f"{url_prefix}/wholesale/quotes")
    assert listed.status_code == 200, listed.text
    assert listed.json()[0]["items"][0]["product_name"] == ""

    tab = await ac_client.get(f"{url_prefix}/wholesale/dashboard", params={"tab": "quotes"})
    assert tab.status_code == 200, tab.text
    assert len(tab.json()["quotes"]) == 1
