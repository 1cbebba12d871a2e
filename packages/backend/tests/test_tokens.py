"""Token tests — payload shape, verification outcomes.

Learn: verify() never raises; every failure is a TokenRejected with a
reason. These tests need no database.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from easyrfq.auth.tokens import Claim, TokenRejected, TokenService, TokenVerified

from conftest import ISSUED_AT, TEST_SECRET

OTHER_SECRET = "a-completely-different-secret-of-decent-length"


def _decode(token: str) -> dict:
    return jwt.decode(token, TEST_SECRET, algorithms=["HS256"])


# ═══════════════════════════════════════════════════════════
# create_token
# ═══════════════════════════════════════════════════════════


def test_create_token_not_admin(tokens):
    token = tokens.create_token({"id": 1, "isAdmin": False}, now=ISSUED_AT)
    assert _decode(token) == {
        "id": 1,
        "isAdmin": False,
        "iat": int(ISSUED_AT.timestamp()),
    }


def test_create_token_admin(tokens):
    token = tokens.create_token({"id": 1, "is_admin": True}, now=ISSUED_AT)
    assert _decode(token)["isAdmin"] is True


def test_create_token_defaults_to_not_admin(tokens):
    """A user with no admin flag at all must never sign as admin."""
    token = tokens.create_token({"id": 1})
    assert _decode(token)["isAdmin"] is False


def test_create_token_includes_company(tokens):
    token = tokens.create_token({"id": 4, "company_id": 2}, now=ISSUED_AT)
    payload = _decode(token)
    assert payload["companyId"] == 2
    assert set(payload) == {"id", "isAdmin", "companyId", "iat"}


def test_create_token_from_object(tokens):
    user = SimpleNamespace(id=3, is_admin=True, company_id=5)
    payload = _decode(tokens.create_token(user, now=ISSUED_AT))
    assert payload["id"] == 3
    assert payload["isAdmin"] is True
    assert payload["companyId"] == 5


def test_create_token_requires_id(tokens):
    with pytest.raises(ValueError):
        tokens.create_token({"is_admin": True})


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        TokenService("")


def test_no_exp_by_default(tokens):
    assert "exp" not in _decode(tokens.create_token({"id": 1}))


def test_tokens_at_different_times_differ(tokens):
    user = {"id": 2, "is_admin": False, "company_id": 1}
    first = tokens.create_token(user, now=ISSUED_AT)
    second = tokens.create_token(user, now=ISSUED_AT + timedelta(seconds=1))
    assert first != second
    assert isinstance(tokens.verify(first), TokenVerified)
    assert isinstance(tokens.verify(second), TokenVerified)


# ═══════════════════════════════════════════════════════════
# verify
# ═══════════════════════════════════════════════════════════


def test_verify_round_trip(tokens):
    token = tokens.create_token(
        {"id": 9, "is_admin": False, "company_id": 3}, now=ISSUED_AT
    )
    result = tokens.verify(token)
    assert result == TokenVerified(
        Claim(id=9, is_admin=False, company_id=3, issued_at=ISSUED_AT)
    )


def test_verify_wrong_secret(tokens):
    token = TokenService(OTHER_SECRET).create_token({"id": 1})
    result = tokens.verify(token)
    assert isinstance(result, TokenRejected)
    assert result.reason.startswith("Invalid token")


def test_verify_garbage(tokens):
    result = tokens.verify("not-a-jwt")
    assert isinstance(result, TokenRejected)


def test_verify_expired():
    short = TokenService(TEST_SECRET, expires_minutes=1)
    token = short.create_token({"id": 1}, now=ISSUED_AT)
    assert short.verify(token) == TokenRejected("Token has expired")


def test_verify_fresh_token_with_expiry():
    short = TokenService(TEST_SECRET, expires_minutes=30)
    result = short.verify(short.create_token({"id": 1}))
    assert isinstance(result, TokenVerified)


def test_verify_missing_iat(tokens):
    token = jwt.encode({"id": 1, "isAdmin": False}, TEST_SECRET, algorithm="HS256")
    assert isinstance(tokens.verify(token), TokenRejected)


def test_verify_missing_id(tokens):
    token = jwt.encode(
        {"isAdmin": True, "iat": int(ISSUED_AT.timestamp())},
        TEST_SECRET,
        algorithm="HS256",
    )
    assert isinstance(tokens.verify(token), TokenRejected)


def test_verify_unsigned_token(tokens):
    token = jwt.encode(
        {"id": 1, "isAdmin": True, "iat": int(ISSUED_AT.timestamp())},
        key=None,
        algorithm="none",
    )
    assert isinstance(tokens.verify(token), TokenRejected)


@pytest.mark.parametrize("flag", ["true", 1, "yes"])
def test_verify_non_boolean_admin_flag_is_not_admin(tokens, flag):
    token = jwt.encode(
        {"id": 1, "isAdmin": flag, "iat": int(ISSUED_AT.timestamp())},
        TEST_SECRET,
        algorithm="HS256",
    )
    result = tokens.verify(token)
    assert isinstance(result, TokenVerified)
    assert result.claim.is_admin is False


def test_verify_issued_at_is_utc(tokens):
    when = datetime(2023, 6, 1, 8, 30, tzinfo=timezone.utc)
    result = tokens.verify(tokens.create_token({"id": 1}, now=when))
    assert result.claim.issued_at == when
    assert result.claim.company_id is None
