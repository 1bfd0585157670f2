"""API tests for customer registration and the owner endpoints.

The stores run against a throwaway SQLite file; the owner routes need the
``X-API-KEY`` header.
"""

import asyncio
from datetime import timedelta

import pytest

from laundry.domain import OrderStatus, StructuredPhone, normalize_phone
from laundry.main import app
from laundry.models import Order, User, utc_now
from laundry.providers import get_identity_provider, get_order_store, get_service_catalogue
from laundry.services.store import SqlIdentityProvider, SqlOrderStore, SqlServiceCatalogue
from fakes import BrokenDirectory, FakeOrderStore, make_order

REGISTRATION = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "Ada@Example.com",
    "phone": "+2348012345678",
    "password": "Str0ngPass",
    "confirmPassword": "Str0ngPass",
}


@pytest.fixture
def api(client, session_factory):
    app.dependency_overrides[get_identity_provider] = lambda: SqlIdentityProvider(session_factory)
    app.dependency_overrides[get_order_store] = lambda: SqlOrderStore(session_factory)
    app.dependency_overrides[get_service_catalogue] = lambda: SqlServiceCatalogue(session_factory)
    return client


def test_register_customer(api):
    r = api.post("/api/auth/register", json=REGISTRATION)
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "ada@example.com"
    assert body["phone"] == "08012345678"
    assert "passwordHash" not in body and "password_hash" not in body


def test_register_duplicate_email(api):
    assert api.post("/api/auth/register", json=REGISTRATION).status_code == 201
    r = api.post("/api/auth/register", json=REGISTRATION)
    assert r.status_code == 409
    assert r.json()["detail"] == "A user with this email already exists"


@pytest.mark.parametrize("changes,message", [
    ({"confirmPassword": "Other0Pass"}, "Passwords do not match"),
    ({"password": "weakpass", "confirmPassword": "weakpass"}, "uppercase letter"),
    ({"phone": "+447911123456"}, "valid Nigerian phone number"),
])
def test_register_rejects_bad_forms(api, changes, message):
    r = api.post("/api/auth/register", json={**REGISTRATION, **changes})
    assert r.status_code == 422
    assert message in r.text


def test_owner_routes_need_api_key(api):
    assert api.get("/api/owner/dashboard").status_code == 401
    assert api.get("/api/owner/staff", headers={"X-API-KEY": "wrong"}).status_code == 401


def test_dashboard_overview(api, owner_headers, session_factory):
    now = utc_now()
    identity = SqlIdentityProvider(session_factory)
    orders = SqlOrderStore(session_factory)

    async def seed():
        await identity.register_customer(User(id="C1", email="a@b.com", first_name="Ada", last_name="Lovelace",
                                              password_hash="x"))
        await identity.register_customer(User(id="C2", email="c@d.com", first_name="Chidi", last_name="Okafor",
                                              password_hash="x"))
        await orders.create_order(Order(id="O1", customer_id="C1", final_amount=200000, status=OrderStatus.DELIVERED,
                                        created_at=now - timedelta(days=3)))
        await orders.create_order(Order(id="O2", customer_id="C1", final_amount=100000, status=OrderStatus.PENDING,
                                        created_at=now - timedelta(days=1)))

    asyncio.run(seed())

    r = api.get("/api/owner/dashboard", headers=owner_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["orders"]["totalOrders"] == 2
    assert body["orders"]["totalRevenue"] == 200000
    assert body["orders"]["averageOrderValue"] == 100000
    assert body["totalRevenueDisplay"] == "₦2,000.00"
    assert [o["id"] for o in body["recentOrders"]] == ["O2", "O1"]
    assert body["totalCustomers"] == 2
    assert body["activeCustomers"] == 1

    customers = {c["id"]: c for c in api.get("/api/owner/customers", headers=owner_headers).json()}
    assert customers["C1"]["totalSpent"] == 300000
    assert customers["C1"]["status"] == "active"
    assert customers["C2"]["totalOrders"] == 0


def test_staff_lifecycle(api, owner_headers):
    r = api.post("/api/owner/staff", headers=owner_headers, json={
        "email": "tunde@example.com",
        "password": "Str0ngPass",
        "firstName": "Tunde",
        "lastName": "Bello",
        "employeeId": "EMP-001",
        "assignedAreas": ["Yaba"],
        "workingDays": ["monday", "tuesday"],
    })
    assert r.status_code == 201
    member = r.json()
    assert member["status"] == "active"
    assert member["performance"] == 4.5

    assert [m["id"] for m in api.get("/api/owner/staff", headers=owner_headers).json()] == [member["id"]]
    assert api.delete(f"/api/owner/staff/{member['id']}", headers=owner_headers).status_code == 204
    assert api.delete(f"/api/owner/staff/{member['id']}", headers=owner_headers).status_code == 404


def test_service_prices_are_stored_in_kobo(api, owner_headers):
    r = api.post("/api/owner/services", headers=owner_headers, json={
        "name": "Wash & Fold",
        "type": "wash_and_fold",
        "basePrice": 1500.5,
        "pricePerKg": 800,
        "estimatedDuration": 24,
    })
    assert r.status_code == 201
    service = r.json()
    assert service["basePrice"] == 150050
    assert service["basePriceNaira"] == 1500.5
    assert service["pricePerKg"] == 80000
    assert service["pricePerItem"] is None
    assert service["maxOrderValue"] == 10_000_000

    r = api.patch(f"/api/owner/services/{service['id']}/active", headers=owner_headers, json={"isActive": False})
    assert r.json()["isActive"] is False
    assert api.get("/api/owner/services?active_only=true", headers=owner_headers).json() == []

    r = api.put(f"/api/owner/services/{service['id']}", headers=owner_headers, json={"name": "Wash & Fold", "basePrice": 2000})
    assert r.json()["basePrice"] == 200000
    assert api.put("/api/owner/services/nope", headers=owner_headers, json={"name": "X", "basePrice": 1}).status_code == 404


def test_well_known_key_is_rejected(api):
    assert api.get("/api/owner/staff", headers={"X-API-KEY": "change-me"}).status_code == 401


@pytest.mark.parametrize("path", ["/api/owner/staff", "/api/owner/customers", "/api/owner/dashboard"])
def test_listing_failures_are_500(client, owner_headers, path):
    app.dependency_overrides[get_identity_provider] = lambda: BrokenDirectory()
    app.dependency_overrides[get_order_store] = lambda: FakeOrderStore(make_order())
    r = client.get(path, headers=owner_headers)
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to load users"


def test_zero_price_is_kept(api, owner_headers):
    r = api.post("/api/owner/services", headers=owner_headers, json={
        "name": "Ironing", "basePrice": 500, "pricePerKg": 0, "pricePerItem": 0,
    })
    assert r.status_code == 201
    assert r.json()["pricePerKg"] == 0
    assert r.json()["pricePerItem"] == 0


def test_registered_country_code_gives_structured_phone(api, session_factory):
    r = api.post("/api/auth/register", json={**REGISTRATION, "phoneCountryCode": "+234"})
    assert r.status_code == 201

    profile = asyncio.run(SqlIdentityProvider(session_factory).get_user_profile(r.json()["id"])).data
    assert profile.phone == StructuredPhone("08012345678", "+234")
    assert normalize_phone(profile.phone) == "08012345678"
