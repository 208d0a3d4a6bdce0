import uuid

import pytest

from deltacare.services.catalog_service import clean_search, list_price

url_prefix = "/api/v1"


@pytest.mark.parametrize(
    "price, discount, expected",
    [(90, 10, 100), (100, 0, 100), (None, 20, 0), (50, 100, 50), (99, 33, 148)],
)
def test_list_price(price, discount, expected):
    assert list_price(price, discount) == expected


def test_clean_search_strips_filter_syntax():
    assert clean_search("para(cetamol),") == "para cetamol"
    assert clean_search(" (), ") is None
    assert clean_search(None) is None


@pytest.fixture
def catalog(fake):
    [pain, cold] = fake.seed(
        "categories",
        {"name": "Pain Relief", "slug": "pain-relief"},
        {"name": "Cold & Flu", "slug": "cold-flu"},
    )
    fake.seed(
        "medicines",
        {"name": "Crocin", "brand": "GSK", "generic_name": "Paracetamol", "price": 30,
         "is_active": True, "category_id": pain["id"]},
        {"name": "Vicks", "brand": "P&G", "generic_name": "Menthol", "price": 60,
         "is_active": True, "category_id": cold["id"]},
        {"name": "Old Syrup", "brand": "GSK", "generic_name": "Paracetamol", "price": 10,
         "is_active": False, "category_id": pain["id"]},
    )
    return fake


async def test_lists_active_medicines_with_category(ac_client, catalog):
    resp = await ac_client.get(f"{url_prefix}/medicines")

    assert resp.status_code == 200, resp.text
    names = sorted(m["name"] for m in resp.json())
    assert names == ["Crocin", "Vicks"]
    crocin = next(m for m in resp.json() if m["name"] == "Crocin")
    assert crocin["categories"]["slug"] == "pain-relief"


async def test_search_matches_generic_name(ac_client, catalog):
    resp = await ac_client.get(f"{url_prefix}/medicines", params={"search": "paracet"})
    assert [m["name"] for m in resp.json()] == ["Crocin"]


async def test_filter_by_category_slug(ac_client, catalog):
    resp = await ac_client.get(f"{url_prefix}/medicines", params={"category": "cold-flu"})
    assert [m["name"] for m in resp.json()] == ["Vicks"]


async def test_limit_is_bounded(ac_client, catalog):
    resp = await ac_client.get(f"{url_prefix}/medicines", params={"limit": 500})
    assert resp.status_code == 422


async def test_medicine_not_found(ac_client, catalog):
    resp = await ac_client.get(f"{url_prefix}/medicines/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Medicine not found"


async def test_read_failure_is_502(ac_client, fake):
    fake.fail_network("medicines", "select")
    resp = await ac_client.get(f"{url_prefix}/medicines")
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to load medicines"


async def test_doctors_available_best_rated_first(ac_client, fake):
    fake.seed(
        "doctors",
        {"name": "A", "specialty": "Dermatology", "rating": 4.1, "is_available": True},
        {"name": "B", "specialty": "Dermatology", "rating": 4.8, "is_available": True},
        {"name": "C", "specialty": "Dermatology", "rating": 5.0, "is_available": False},
        {"name": "D", "specialty": "Cardiology", "rating": 4.9, "is_available": True},
    )

    resp = await ac_client.get(f"{url_prefix}/doctors", params={"specialty": "Dermatology"})

    assert [d["name"] for d in resp.json()] == ["B", "A"]


async def test_scan_tests_by_type(ac_client, fake):
    fake.seed(
        "scan_tests",
        {"name": "Brain MRI", "type": "MRI", "price": 6000, "is_active": True},
        {"name": "Chest X-Ray", "type": "X-Ray", "price": 400, "is_active": True},
    )

    resp = await ac_client.get(f"{url_prefix}/scan-tests", params={"type": "MRI"})

    assert [s["name"] for s in resp.json()] == ["Brain MRI"]


async def test_health_packages_popular_first(ac_client, fake):
    fake.seed(
        "health_packages",
        {"name": "Basic", "price": 999, "is_popular": False, "is_active": True},
        {"name": "Full Body", "price": 2999, "is_popular": True, "is_active": True},
    )

    resp = await ac_client.get(f"{url_prefix}/health-packages")

    assert [p["name"] for p in resp.json()] == ["Full Body", "Basic"]


async def test_unknown_route_is_page_not_found(ac_client):
    resp = await ac_client.get(f"{url_prefix}/no-such-page")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Page not found"}
