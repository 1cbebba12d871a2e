"""Quote API routes, including quote line items.

Learn: Lists and counts are scoped with list_scope (admins see every
company unless they filter). By-id routes pass company_filter(identity)
down to the service, which adds it to the WHERE clause, so a quote from
another company answers 404 exactly like a missing one.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.dependencies import (
    company_filter,
    ensure_company_member_or_admin,
    list_scope,
    resolve_company_id,
)
from easyrfq.auth.tokens import Claim
from easyrfq.db.engine import get_db
from easyrfq.errors import BadRequestError, UnauthorizedError
from easyrfq.schemas.common import CountResponse, DeletedResponse
from easyrfq.schemas.quote import (
    QuoteCreate,
    QuoteDetailResponse,
    QuoteItemCreate,
    QuoteItemResponse,
    QuoteItemUpdate,
    QuoteList,
    QuoteResponse,
    QuoteUpdate,
)
from easyrfq.services.quote_service import QuoteService

router = APIRouter(prefix="/quotes")


def _svc(db: AsyncSession = Depends(get_db)) -> QuoteService:
    return QuoteService(db)


# ─── Quotes ────────────────────────────────────────────

@router.post("", response_model=QuoteResponse, status_code=201)
async def create_quote(
    body: QuoteCreate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    """Create a quote. Non-admins always file it under their own name."""
    data = body.model_dump()
    data["company_id"] = resolve_company_id(identity, body.company_id)
    if not identity.is_admin or body.user_id is None:
        data["user_id"] = identity.id
    return {"quote": await svc.create(data)}


@router.get("", response_model=QuoteList)
async def list_quotes(
    company_id: Optional[int] = Query(None, alias="companyId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    quote_number: Optional[str] = Query(None, alias="quoteNumber"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    quotes = await svc.find_all(
        company_id=list_scope(identity, company_id),
        user_id=user_id,
        quote_number=quote_number,
    )
    return {"quotes": quotes}


@router.get("/count", response_model=CountResponse)
async def count_quotes(
    company_id: Optional[int] = Query(None, alias="companyId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    if user_id is None and company_id is None and identity.is_admin:
        raise BadRequestError("Either userId or companyId is required")
    count = await svc.count(user_id=user_id, company_id=list_scope(identity, company_id))
    return {"count": count}


@router.get("/quote/{quote_id}", response_model=QuoteDetailResponse)
async def get_quote(
    quote_id: int,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    return {"quote": await svc.get(quote_id, company_id=company_filter(identity))}


@router.patch("/quote/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: int,
    body: QuoteUpdate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    """Update a quote. Only admins may hand it to another user."""
    changes = body.changes()
    if "userId" in changes and not identity.is_admin:
        raise UnauthorizedError()
    quote = await svc.update(quote_id, changes, company_id=company_filter(identity))
    return {"quote": quote}


@router.delete("/quote/{quote_id}", response_model=DeletedResponse)
async def delete_quote(
    quote_id: int,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    await svc.remove(quote_id, company_id=company_filter(identity))
    return {"deleted": str(quote_id)}


# ─── Line items ────────────────────────────────────────

@router.post("/quote-items", response_model=QuoteItemResponse, status_code=201)
async def create_quote_item(
    body: QuoteItemCreate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    line = await svc.create_item(body.model_dump(), company_id=company_filter(identity))
    return {"quote_item": line}


@router.patch("/quote-items/{item_id}", response_model=QuoteItemResponse)
async def update_quote_item(
    item_id: int,
    body: QuoteItemUpdate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    line = await svc.update_item(
        item_id, body.changes(), company_id=company_filter(identity)
    )
    return {"quote_item": line}


@router.delete("/quote-items/{item_id}", response_model=DeletedResponse)
async def delete_quote_item(
    item_id: int,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: QuoteService = Depends(_svc),
):
    await svc.remove_item(item_id, company_id=company_filter(identity))
    return {"deleted": str(item_id)}
