"""Auth middleware + guard tests.

Learn: The middleware only annotates the request; it never rejects.
So the middleware tests mount it on a tiny probe app that echoes the
identity back, and the guard tests call the guard functions directly
with a hand-built Starlette Request. Nothing here touches a database.
"""

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from easyrfq.auth.dependencies import (
    company_filter,
    ensure_admin,
    ensure_company_member_or_admin,
    ensure_correct_user_or_admin,
    ensure_logged_in,
    get_identity,
    list_scope,
    resolve_company_id,
)
from easyrfq.auth.middleware import (
    JWTAuthMiddleware,
    authenticate_header,
    read_bearer_token,
)
from easyrfq.auth.tokens import Claim, TokenService
from easyrfq.errors import UnauthorizedError

from conftest import ISSUED_AT, TEST_SECRET

WRONG_SECRET = "this-is-not-the-secret-the-app-was-given"


def _claim(id=1, is_admin=False, company_id=1) -> Claim:
    return Claim(id=id, is_admin=is_admin, company_id=company_id, issued_at=ISSUED_AT)


def _request(path_params=None, query_string=b"") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [],
            "query_string": query_string,
            "path_params": path_params or {},
        }
    )


# ═══════════════════════════════════════════════════════════
# Header parsing
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc", "abc"),
        ("BEARER   abc  ", "abc"),
        ("Basic dXNlcjpwYXNz", None),
        ("Bearer", None),
        ("", None),
        (None, None),
    ],
)
def test_read_bearer_token(header, expected):
    assert read_bearer_token(header) == expected


def test_authenticate_header_valid(tokens):
    token = tokens.create_token({"id": 5, "company_id": 2}, now=ISSUED_AT)
    claim = authenticate_header(f"Bearer {token}", tokens)
    assert claim.id == 5
    assert claim.company_id == 2
    assert claim.is_admin is False


def test_authenticate_header_wrong_secret_is_anonymous(tokens):
    token = TokenService(WRONG_SECRET).create_token({"id": 1, "is_admin": True})
    assert authenticate_header(f"Bearer {token}", tokens) is None


# ═══════════════════════════════════════════════════════════
# Middleware on a probe app
# ═══════════════════════════════════════════════════════════


@pytest.fixture()
def probe_client(tokens):
    app = FastAPI()
    app.add_middleware(JWTAuthMiddleware, tokens=tokens)

    @app.get("/whoami")
    async def whoami(identity=Depends(get_identity)):
        if identity is None:
            return {"identity": None}
        return {
            "identity": {
                "id": identity.id,
                "isAdmin": identity.is_admin,
                "companyId": identity.company_id,
                "issuedAt": identity.issued_at.isoformat(),
            }
        }

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
async def test_middleware_sets_identity(probe_client, tokens):
    token = tokens.create_token(
        {"id": 1, "is_admin": False, "company_id": 3}, now=ISSUED_AT
    )
    async with probe_client as c:
        r = await c.get("/whoami", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json() == {
        "identity": {
            "id": 1,
            "isAdmin": False,
            "companyId": 3,
            "issuedAt": "2024-01-15T12:00:00+00:00",
        }
    }


@pytest.mark.asyncio
async def test_middleware_no_header(probe_client):
    async with probe_client as c:
        r = await c.get("/whoami")
    assert r.status_code == 200
    assert r.json() == {"identity": None}


@pytest.mark.asyncio
async def test_middleware_invalid_token_is_anonymous(probe_client):
    """A token signed with another secret is ignored, not rejected."""
    bad = TokenService(WRONG_SECRET).create_token({"id": 1, "is_admin": True})
    async with probe_client as c:
        r = await c.get("/whoami", headers={"Authorization": f"Bearer {bad}"})
    assert r.status_code == 200
    assert r.json() == {"identity": None}


@pytest.mark.asyncio
async def test_middleware_expired_token_is_anonymous(probe_client, tokens):
    expiring = TokenService(TEST_SECRET, expires_minutes=5)
    token = expiring.create_token({"id": 1}, now=ISSUED_AT)
    async with probe_client as c:
        r = await c.get("/whoami", headers={"Authorization": f"Bearer {token}"})
    assert r.json() == {"identity": None}


# ═══════════════════════════════════════════════════════════
# Guards
# ═══════════════════════════════════════════════════════════


def test_ensure_logged_in():
    claim = _claim()
    assert ensure_logged_in(identity=claim) is claim


def test_ensure_logged_in_anon():
    with pytest.raises(UnauthorizedError):
        ensure_logged_in(identity=None)


def test_ensure_admin():
    claim = _claim(is_admin=True)
    assert ensure_admin(identity=claim) is claim


@pytest.mark.parametrize("identity", [None, _claim(is_admin=False)])
def test_ensure_admin_rejects(identity):
    with pytest.raises(UnauthorizedError):
        ensure_admin(identity=identity)


def test_correct_user_same_id():
    claim = _claim(id=7)
    assert ensure_correct_user_or_admin(_request({"id": "7"}), identity=claim) is claim


def test_correct_user_admin_any_id():
    claim = _claim(id=1, is_admin=True)
    assert ensure_correct_user_or_admin(_request({"id": "99"}), identity=claim) is claim


def test_correct_user_other_id():
    with pytest.raises(UnauthorizedError):
        ensure_correct_user_or_admin(_request({"id": "8"}), identity=_claim(id=7))


def test_correct_user_anon():
    with pytest.raises(UnauthorizedError):
        ensure_correct_user_or_admin(_request({"id": "7"}), identity=None)


def test_company_member_path_param():
    claim = _claim(company_id=2)
    req = _request({"company_id": "2"})
    assert ensure_company_member_or_admin(req, identity=claim) is claim


def test_company_member_query_param():
    claim = _claim(company_id=2)
    req = _request(query_string=b"companyId=2")
    assert ensure_company_member_or_admin(req, identity=claim) is claim


def test_company_member_other_company():
    with pytest.raises(UnauthorizedError):
        ensure_company_member_or_admin(
            _request(query_string=b"companyId=3"), identity=_claim(company_id=2)
        )


def test_company_member_no_company_named():
    claim = _claim(company_id=2)
    assert ensure_company_member_or_admin(_request(), identity=claim) is claim


def test_company_member_admin_any_company():
    claim = _claim(is_admin=True, company_id=1)
    req = _request({"company_id": "42"})
    assert ensure_company_member_or_admin(req, identity=claim) is claim


def test_company_member_anon():
    with pytest.raises(UnauthorizedError):
        ensure_company_member_or_admin(_request(), identity=None)


# ═══════════════════════════════════════════════════════════
# Tenant scoping helpers
# ═══════════════════════════════════════════════════════════


def test_resolve_company_defaults_to_own():
    assert resolve_company_id(_claim(company_id=4), None) == 4


def test_resolve_company_other_company_rejected():
    with pytest.raises(UnauthorizedError):
        resolve_company_id(_claim(company_id=4), 5)


def test_resolve_company_admin_may_choose():
    assert resolve_company_id(_claim(is_admin=True, company_id=1), 5) == 5


def test_resolve_company_without_company_claim():
    with pytest.raises(UnauthorizedError):
        resolve_company_id(_claim(company_id=None), None)


def test_company_filter():
    assert company_filter(_claim(company_id=3)) == 3
    assert company_filter(_claim(is_admin=True, company_id=3)) is None


def test_list_scope():
    assert list_scope(_claim(is_admin=True), None) is None
    assert list_scope(_claim(is_admin=True), 8) == 8
    assert list_scope(_claim(company_id=3), None) == 3
