"""FastAPI auth dependencies — the route guards.

Learn: These are used as Depends() in route handlers. Each guard reads
the identity the JWT middleware left on the request and either returns
it or raises UnauthorizedError. All guards fail the same way: the
caller never learns whether it was anonymous or just not allowed.

Guards:
1. ensure_logged_in — any valid token
2. ensure_admin — token with isAdmin
3. ensure_correct_user_or_admin — admin, or the user named by the {id}
   path parameter
4. ensure_company_member_or_admin — admin, or a member of the company
   named by the request ({company_id} path param or ?companyId=)
"""

from typing import Any, Optional

from fastapi import Depends, Request

from easyrfq.auth.tokens import Claim, TokenService
from easyrfq.errors import UnauthorizedError


def get_identity(request: Request) -> Optional[Claim]:
    """The request's identity, or None for anonymous requests."""
    return getattr(request.state, "identity", None)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def _same_id(left: Any, right: Any) -> bool:
    # Path and query params arrive as strings, claims as ints
    if left is None or right is None:
        return False
    return str(left) == str(right)


def ensure_logged_in(
    identity: Optional[Claim] = Depends(get_identity),
) -> Claim:
    if identity is None:
        raise UnauthorizedError()
    return identity


def ensure_admin(
    identity: Optional[Claim] = Depends(get_identity),
) -> Claim:
    if identity is None or not identity.is_admin:
        raise UnauthorizedError()
    return identity


def ensure_correct_user_or_admin(
    request: Request,
    identity: Optional[Claim] = Depends(get_identity),
) -> Claim:
    if identity is None:
        raise UnauthorizedError()
    if identity.is_admin:
        return identity
    if not _same_id(identity.id, request.path_params.get("id")):
        raise UnauthorizedError()
    return identity


def ensure_company_member_or_admin(
    request: Request,
    identity: Optional[Claim] = Depends(get_identity),
) -> Claim:
    """Admins pass; others only for the company the request names.

    A request that names no company is treated as being about the
    caller's own company.
    """
    if identity is None:
        raise UnauthorizedError()
    if identity.is_admin:
        return identity

    requested = request.path_params.get("company_id")
    if requested is None:
        requested = request.query_params.get("companyId")
    if requested is not None and not _same_id(identity.company_id, requested):
        raise UnauthorizedError()
    return identity


def resolve_company_id(identity: Claim, requested: Optional[int]) -> int:
    """Pick the company a tenant-scoped call operates on.

    Admins may name any company. Everyone else is pinned to their own
    company; naming a different one is an authorization failure.
    """
    if identity.is_admin:
        if requested is None and identity.company_id is None:
            raise UnauthorizedError()
        return requested if requested is not None else identity.company_id
    if identity.company_id is None:
        raise UnauthorizedError()
    if requested is not None and not _same_id(identity.company_id, requested):
        raise UnauthorizedError()
    return int(identity.company_id)


def company_filter(identity: Claim) -> Optional[int]:
    """Company to restrict by-id lookups to (None for admins)."""
    return None if identity.is_admin else identity.company_id


def list_scope(identity: Claim, requested: Optional[int]) -> Optional[int]:
    """Company filter for list/count queries.

    Admins get exactly what they asked for (None = every company);
    everyone else is pinned to their own company.
    """
    if identity.is_admin:
        return requested
    return resolve_company_id(identity, requested)
