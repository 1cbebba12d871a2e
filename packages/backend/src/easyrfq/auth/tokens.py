"""JWT token creation and verification.

Learn: The token payload is small and self-contained:

    {"id": 7, "isAdmin": false, "companyId": 2, "iat": 1717171717}

Keys stay camelCase so tokens issued here are interchangeable with the
ones existing clients already hold. There is no refresh or revocation;
tokens only expire if access_token_expire_minutes is configured.

Verification never raises. It returns a tagged result (TokenVerified or
TokenRejected) and the middleware decides what a rejection means.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import jwt


@dataclass(frozen=True)
class Claim:
    """The decoded identity carried by a verified token."""

    id: Any
    is_admin: bool
    company_id: Optional[int]
    issued_at: datetime


@dataclass(frozen=True)
class TokenVerified:
    claim: Claim


@dataclass(frozen=True)
class TokenRejected:
    reason: str


TokenResult = Union[TokenVerified, TokenRejected]


def _user_field(user: Any, *names: str) -> Any:
    """Read the first present attribute/key out of a user record."""
    for name in names:
        if isinstance(user, Mapping):
            if name in user:
                return user[name]
        elif hasattr(user, name):
            return getattr(user, name)
    return None


class TokenService:
    """Signs and verifies identity tokens with one shared secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: Optional[int] = None,
    ):
        if not secret:
            raise ValueError("TokenService requires a signing secret")
        self._secret = secret
        self._algorithm = algorithm
        self._expires_minutes = expires_minutes

    def create_token(self, user: Any, now: Optional[datetime] = None) -> str:
        """Return a signed JWT for a user record.

        `user` can be a dict (snake_case or camelCase keys) or any object
        with matching attributes. Only `id` is required; a missing or
        falsy admin flag always signs as isAdmin=false.
        """
        user_id = _user_field(user, "id")
        if user_id is None:
            raise ValueError("Cannot create a token for a user without an id")

        issued_at = now or datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "id": user_id,
            "isAdmin": bool(_user_field(user, "is_admin", "isAdmin")),
            "iat": int(issued_at.timestamp()),
        }

        company_id = _user_field(user, "company_id", "companyId")
        if company_id is not None:
            payload["companyId"] = company_id

        if self._expires_minutes:
            payload["exp"] = issued_at + timedelta(minutes=self._expires_minutes)

        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenResult:
        """Verify a token's signature and decode it into a Claim."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["id", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenRejected("Token has expired")
        except jwt.InvalidTokenError as e:
            return TokenRejected(f"Invalid token: {e}")

        claim = Claim(
            id=payload["id"],
            is_admin=payload.get("isAdmin") is True,
            company_id=payload.get("companyId"),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        )
        return TokenVerified(claim)
