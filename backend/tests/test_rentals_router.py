"""Test the rentals endpoints."""
import pytest
from httpx import AsyncClient, ASGITransport
from jose import jwt

from app.main import app
from app.services.rental_data import get_rental_data_source
from tests.factories import HOST_ID


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_list_units(client):
    resp = await client.get("/v1/rentals/units")
    assert resp.status_code == 200
    data = resp.json()

    assert len(data["units"]) == 4
    assert [p["id"] for p in data["properties"]] == ["all", "p-beach", "p-city"]
    assert data["stats"] == {
        "total": 4,
        "rented": 2,
        "vacant": 2,
        "monthlyIncome": 600000,
        "overdueCount": 1,
        "pendingCount": 1,
    }

    beach = data["units"][0]
    assert beach["propertyTitle"] == "Beach House"
    assert beach["isMultiUnit"] is False
    assert beach["tenant"]["paymentStatus"] == "pending"


@pytest.mark.asyncio
async def test_list_units_filters_keep_full_stats(client):
    resp = await client.get("/v1/rentals/units", params={"property_id": "p-city", "status": "vacant"})
    assert resp.status_code == 200
    data = resp.json()

    assert [u["id"] for u in data["units"]] == ["u-b", "u-c"]
    assert data["stats"]["total"] == 4


@pytest.mark.asyncio
async def test_list_units_rejects_unknown_status(client):
    resp = await client.get("/v1/rentals/units", params={"status": "occupied"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_fetch_failure_returns_502(client, fake_source):
    fake_source.fail_stage = "tenants"

    resp = await client.get("/v1/rentals/units")

    assert resp.status_code == 502
    assert resp.json()["detail"] == "tenants unavailable"


@pytest.mark.asyncio
async def test_get_unit(client):
    resp = await client.get("/v1/rentals/units/u-a")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Room A"
    assert data["status"] == "rented"
    assert data["tenant"]["name"] == "Juma Ali"


@pytest.mark.asyncio
async def test_get_unit_not_found(client):
    resp = await client.get("/v1/rentals/units/nope")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_properties(client):
    resp = await client.get("/v1/rentals/properties")
    assert resp.status_code == 200
    data = resp.json()

    assert [p["propertyId"] for p in data["properties"]] == ["p-beach", "p-city"]
    assert data["stats"]["totalProperties"] == 2
    assert data["stats"]["occupancyRate"] == 50.0


@pytest.mark.asyncio
@pytest.mark.parametrize("fmt,media_type", [
    ("csv", "text/csv"),
    ("xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    ("pdf", "application/pdf"),
])
async def test_export_units(client, fmt, media_type):
    resp = await client.get("/v1/rentals/units/export", params={"format": fmt})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(media_type)
    assert f".{fmt}" in resp.headers["content-disposition"]


@pytest.mark.asyncio
async def test_export_units_for_one_property(client):
    resp = await client.get("/v1/rentals/units/export", params={"format": "csv", "property_id": "p-city"})
    assert resp.status_code == 200
    body = resp.text
    assert "Room A" in body
    assert "Beach House" not in body

    lines = body.splitlines()
    assert "Total Units,3" in lines
    assert "Rented,1" in lines
    assert "Vacant,2" in lines
    assert 'Monthly Income,"TZS 100,000"' in lines


# ── Authentication ─────────────────────────────────────────────────────

@pytest.fixture
async def anonymous_client(fake_source):
    """Client with real token verification and the fake data source."""
    app.dependency_overrides[get_rental_data_source] = lambda: fake_source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _token(**claims) -> str:
    payload = {"sub": HOST_ID, "aud": "authenticated", "role": "authenticated"}
    payload.update(claims)
    return jwt.encode(payload, "test-jwt-secret", algorithm="HS256")


@pytest.mark.asyncio
async def test_valid_token_is_accepted(anonymous_client):
    resp = await anonymous_client.get(
        "/v1/rentals/units", headers={"Authorization": f"Bearer {_token()}"}
    )
    assert resp.status_code == 200
    assert resp.json()["stats"]["total"] == 4


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(anonymous_client):
    resp = await anonymous_client.get(
        "/v1/rentals/units", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_token_with_wrong_audience_is_rejected(anonymous_client):
    resp = await anonymous_client.get(
        "/v1/rentals/units", headers={"Authorization": f"Bearer {_token(aud='other')}"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_anon_role_is_forbidden(anonymous_client):
    resp = await anonymous_client.get(
        "/v1/rentals/units", headers={"Authorization": f"Bearer {_token(role='anon')}"}
    )
    assert resp.status_code == 403
