"""End-to-end API flow against a real Postgres.

Learn: Walks the way a new tenant actually uses the API: create the
company, register, log in, fill the catalog, then raise an RFQ and a
quote. Payloads and responses are camelCase on the wire.
"""

import jwt
import pytest
import pytest_asyncio

from conftest import TEST_SECRET

pytestmark = pytest.mark.postgres


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture()
async def tenant(db_client):
    """A company plus a registered (non-admin) user, with their token."""
    r = await db_client.post(
        "/api/v1/companies",
        json={"name": "Initech", "addressLine1": "1 Main St", "state": "TX"},
    )
    assert r.status_code == 201
    company = r.json()["company"]

    r = await db_client.post(
        "/api/v1/auth/register",
        json={
            "email": "peter@initech.com",
            "password": "tps-report",
            "fullName": "Peter Gibbons",
            "companyId": company["id"],
        },
    )
    assert r.status_code == 201
    token = r.json()["token"]
    return {"company": company, "token": token, "headers": _bearer(token)}


# ═══════════════════════════════════════════════════════════
# Companies, auth, users
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_company_response_is_camel_case(tenant):
    company = tenant["company"]
    assert company["name"] == "Initech"
    assert company["addressLine1"] == "1 Main St"
    assert company["country"] == "USA"


@pytest.mark.asyncio
async def test_register_token_payload(tenant):
    payload = jwt.decode(tenant["token"], TEST_SECRET, algorithms=["HS256"])
    assert payload["isAdmin"] is False
    assert payload["companyId"] == tenant["company"]["id"]


@pytest.mark.asyncio
async def test_login(db_client, tenant):
    r = await db_client.post(
        "/api/v1/auth/token",
        json={"email": "peter@initech.com", "password": "tps-report"},
    )
    assert r.status_code == 200
    assert "token" in r.json()


@pytest.mark.asyncio
async def test_login_bad_password(db_client, tenant):
    r = await db_client.post(
        "/api/v1/auth/token",
        json={"email": "peter@initech.com", "password": "wrong"},
    )
    assert r.status_code == 401
    assert r.json() == {"error": {"message": "Invalid email/password", "status": 401}}


@pytest.mark.asyncio
async def test_register_duplicate_email(db_client, tenant):
    r = await db_client.post(
        "/api/v1/auth/register",
        json={
            "email": "peter@initech.com",
            "password": "another",
            "fullName": "Other Peter",
            "companyId": tenant["company"]["id"],
        },
    )
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Duplicate email: peter@initech.com"


@pytest.mark.asyncio
async def test_get_own_user(db_client, tenant):
    user_id = jwt.decode(tenant["token"], TEST_SECRET, algorithms=["HS256"])["id"]
    r = await db_client.get(f"/api/v1/users/{user_id}", headers=tenant["headers"])
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["fullName"] == "Peter Gibbons"
    assert user["company"]["companyName"] == "Initech"


@pytest.mark.asyncio
async def test_patch_user_rejects_unknown_fields(db_client, tenant):
    user_id = jwt.decode(tenant["token"], TEST_SECRET, algorithms=["HS256"])["id"]
    r = await db_client.patch(
        f"/api/v1/users/{user_id}",
        json={"isAdmin": True},
        headers=tenant["headers"],
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_patch_user_empty_body(db_client, tenant):
    user_id = jwt.decode(tenant["token"], TEST_SECRET, algorithms=["HS256"])["id"]
    r = await db_client.patch(
        f"/api/v1/users/{user_id}", json={}, headers=tenant["headers"]
    )
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "No data"


@pytest.mark.asyncio
async def test_change_password(db_client, tenant):
    user_id = jwt.decode(tenant["token"], TEST_SECRET, algorithms=["HS256"])["id"]
    r = await db_client.patch(
        f"/api/v1/users/{user_id}/password",
        json={"currentPassword": "tps-report", "newPassword": "flair-15"},
        headers=tenant["headers"],
    )
    assert r.status_code == 200
    assert r.json()["message"] == "Password updated successfully"

    r = await db_client.post(
        "/api/v1/auth/token",
        json={"email": "peter@initech.com", "password": "flair-15"},
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_directory(db_client, tenant):
    company_id = tenant["company"]["id"]
    r = await db_client.get(
        f"/api/v1/companies/{company_id}/directory", headers=tenant["headers"]
    )
    assert r.status_code == 200
    assert [u["fullName"] for u in r.json()["users"]] == ["Peter Gibbons"]


# ═══════════════════════════════════════════════════════════
# Catalog, RFQs, quotes
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_rfq_and_quote_flow(db_client, tenant):
    h = tenant["headers"]

    r = await db_client.post(
        "/api/v1/customers",
        json={"customerName": "Initrode", "markupType": "percentage", "markup": 10},
        headers=h,
    )
    assert r.status_code == 201
    assert r.json()["customer"]["companyId"] == tenant["company"]["id"]

    r = await db_client.post(
        "/api/v1/items",
        json={"itemCode": "STAPLER", "description": "Red stapler", "uom": "EA", "cost": "12.50"},
        headers=h,
    )
    assert r.status_code == 201

    r = await db_client.get("/api/v1/items/count", headers=h)
    assert r.json() == {"count": 1}

    # RFQ with one line
    r = await db_client.post(
        "/api/v1/rfqs",
        json={"customerName": "Initrode", "rfqNumber": "R-1"},
        headers=h,
    )
    assert r.status_code == 201
    rfq = r.json()["rfq"]

    r = await db_client.post(
        "/api/v1/rfqs/rfq-items",
        json={"rfqId": rfq["id"], "itemCode": "STAPLER", "quantity": 2},
        headers=h,
    )
    assert r.status_code == 201
    line = r.json()["rfqItem"]

    r = await db_client.post(
        "/api/v1/rfqs/rfq-items",
        json={"rfqId": rfq["id"], "itemCode": "STAPLER", "quantity": 0},
        headers=h,
    )
    assert r.status_code == 400

    r = await db_client.get("/api/v1/rfqs", headers=h)
    [summary] = r.json()["rfqs"]
    assert summary["rfqTotal"] == "25.00"
    assert summary["userFullName"] == "Peter Gibbons"

    r = await db_client.get(f"/api/v1/rfqs/rfq/{rfq['id']}", headers=h)
    assert r.json()["rfq"]["rfqItems"][0]["itemDescription"] == "Red stapler"

    r = await db_client.patch(
        f"/api/v1/rfqs/rfq-items/{line['id']}", json={"quantity": 3}, headers=h
    )
    assert r.json()["rfqItem"]["quantity"] == 3

    r = await db_client.get("/api/v1/rfqs/count", headers=h)
    assert r.json() == {"count": 1}

    # Quote
    r = await db_client.post(
        "/api/v1/quotes",
        json={"customerName": "Initrode", "quoteNumber": "Q-1", "validUntil": "2025-12-31"},
        headers=h,
    )
    assert r.status_code == 201
    quote = r.json()["quote"]

    r = await db_client.post(
        "/api/v1/quotes/quote-items",
        json={"quoteId": quote["id"], "itemCode": "STAPLER", "quantity": 4, "itemPrice": "15.00"},
        headers=h,
    )
    assert r.status_code == 201

    r = await db_client.get("/api/v1/quotes", headers=h)
    assert r.json()["quotes"][0]["quoteTotal"] == "60.00"

    r = await db_client.delete(f"/api/v1/quotes/quote/{quote['id']}", headers=h)
    assert r.json() == {"deleted": str(quote["id"])}


@pytest.mark.asyncio
async def test_other_tenant_cannot_see_rfq(db_client, tenant):
    h = tenant["headers"]
    await db_client.post(
        "/api/v1/customers",
        json={"customerName": "Initrode", "markupType": "fixed", "markup": 3},
        headers=h,
    )
    r = await db_client.post(
        "/api/v1/rfqs", json={"customerName": "Initrode", "rfqNumber": "R-9"}, headers=h
    )
    rfq_id = r.json()["rfq"]["id"]

    # A second company with its own user
    r = await db_client.post("/api/v1/companies", json={"name": "Chotchkie's"})
    other_id = r.json()["company"]["id"]
    r = await db_client.post(
        "/api/v1/auth/register",
        json={
            "email": "joanna@chotchkies.com",
            "password": "flair-37",
            "fullName": "Joanna",
            "companyId": other_id,
        },
    )
    other = _bearer(r.json()["token"])

    r = await db_client.get(f"/api/v1/rfqs/rfq/{rfq_id}", headers=other)
    assert r.status_code == 404

    r = await db_client.get("/api/v1/rfqs", headers=other)
    assert r.json() == {"rfqs": []}

    r = await db_client.get(
        "/api/v1/customers", params={"companyId": tenant["company"]["id"]}, headers=other
    )
    assert r.status_code == 401
