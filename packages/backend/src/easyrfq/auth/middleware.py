"""JWT middleware — annotate each request with the caller's identity.

Learn: This middleware never rejects anything. It reads
`Authorization: Bearer <token>`, verifies the token and stores the
decoded Claim on request.state.identity. No header, a non-Bearer header
or a token that fails verification (wrong secret, garbage, expired) all
leave the identity as None and the request carries on anonymously.
Access control happens later, in the guards in auth/dependencies.py.

Note: Silently downgrading a bad token to anonymous (rather than
answering 401 right away) is what existing clients rely on; a client
with a stale token just sees 401s from guarded routes.
"""

from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from easyrfq.auth.tokens import Claim, TokenRejected, TokenService

logger = structlog.get_logger()


def read_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def authenticate_header(
    authorization: Optional[str], tokens: TokenService
) -> Optional[Claim]:
    """Resolve an Authorization header to a Claim, or None if anonymous."""
    token = read_bearer_token(authorization)
    if token is None:
        return None

    result = tokens.verify(token)
    if isinstance(result, TokenRejected):
        logger.debug("auth.token_rejected", reason=result.reason)
        return None
    return result.claim


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """Store the verified identity (or None) on request.state.identity."""

    def __init__(self, app, tokens: TokenService):
        super().__init__(app)
        self.tokens = tokens

    async def dispatch(self, request: Request, call_next) -> Response:
        identity = authenticate_header(
            request.headers.get("Authorization"), self.tokens
        )
        request.state.identity = identity

        if identity is not None:
            structlog.contextvars.bind_contextvars(
                user_id=identity.id, company_id=identity.company_id
            )

        return await call_next(request)
