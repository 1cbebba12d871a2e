"""RFQ API routes, including RFQ line items.

Learn: Lists and counts are scoped with list_scope (admins see every
company unless they filter). By-id routes pass company_filter(identity)
down to the service, which adds it to the WHERE clause, so an RFQ from
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
from easyrfq.schemas.rfq import (
    RfqCreate,
    RfqDetailResponse,
    RfqItemCreate,
    RfqItemResponse,
    RfqItemUpdate,
    RfqList,
    RfqResponse,
    RfqUpdate,
)
from easyrfq.services.rfq_service import RfqService

router = APIRouter(prefix="/rfqs")


def _svc(db: AsyncSession = Depends(get_db)) -> RfqService:
    return RfqService(db)


# ─── RFQs ──────────────────────────────────────────────

@router.post("", response_model=RfqResponse, status_code=201)
async def create_rfq(
    body: RfqCreate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    """Create an RFQ. Non-admins always file it under their own name."""
    data = body.model_dump()
    data["company_id"] = resolve_company_id(identity, body.company_id)
    if not identity.is_admin or body.user_id is None:
        data["user_id"] = identity.id
    return {"rfq": await svc.create(data)}


@router.get("", response_model=RfqList)
async def list_rfqs(
    company_id: Optional[int] = Query(None, alias="companyId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    rfq_number: Optional[str] = Query(None, alias="rfqNumber"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    rfqs = await svc.find_all(
        company_id=list_scope(identity, company_id),
        user_id=user_id,
        rfq_number=rfq_number,
    )
    return {"rfqs": rfqs}


@router.get("/count", response_model=CountResponse)
async def count_rfqs(
    company_id: Optional[int] = Query(None, alias="companyId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    if user_id is None and company_id is None and identity.is_admin:
        raise BadRequestError("Either userId or companyId is required")
    count = await svc.count(user_id=user_id, company_id=list_scope(identity, company_id))
    return {"count": count}


@router.get("/rfq/{rfq_id}", response_model=RfqDetailResponse)
async def get_rfq(
    rfq_id: int,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    return {"rfq": await svc.get(rfq_id, company_id=company_filter(identity))}


@router.patch("/rfq/{rfq_id}", response_model=RfqResponse)
async def update_rfq(
    rfq_id: int,
    body: RfqUpdate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    """Update an RFQ. Only admins may hand it to another user."""
    changes = body.changes()
    if "userId" in changes and not identity.is_admin:
        raise UnauthorizedError()
    rfq = await svc.update(rfq_id, changes, company_id=company_filter(identity))
    return {"rfq": rfq}


@router.delete("/rfq/{rfq_id}", response_model=DeletedResponse)
async def delete_rfq(
    rfq_id: int,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    await svc.remove(rfq_id, company_id=company_filter(identity))
    return {"deleted": str(rfq_id)}


# ─── Line items ────────────────────────────────────────

@router.post("/rfq-items", response_model=RfqItemResponse, status_code=201)
async def create_rfq_item(
    body: RfqItemCreate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    line = await svc.create_item(body.model_dump(), company_id=company_filter(identity))
    return {"rfq_item": line}


@router.patch("/rfq-items/{item_id}", response_model=RfqItemResponse)
async def update_rfq_item(
    item_id: int,
    body: RfqItemUpdate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    line = await svc.update_item(
        item_id, body.changes(), company_id=company_filter(identity)
    )
    return {"rfq_item": line}


@router.delete("/rfq-items/{item_id}", response_model=DeletedResponse)
async def delete_rfq_item(
    item_id: int,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: RfqService = Depends(_svc),
):
    await svc.remove_item(item_id, company_id=company_filter(identity))
    return {"deleted": str(item_id)}
