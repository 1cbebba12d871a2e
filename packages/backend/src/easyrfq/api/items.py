"""Catalog item API routes.

Same tenant rules as the customer routes: ?companyId= names the company,
defaulting to the caller's own.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.dependencies import ensure_company_member_or_admin, resolve_company_id
from easyrfq.auth.tokens import Claim
from easyrfq.db.engine import get_db
from easyrfq.schemas.common import CountResponse, DeletedResponse
from easyrfq.schemas.item import ItemCreate, ItemList, ItemResponse, ItemUpdate
from easyrfq.services.item_service import ItemService

router = APIRouter(prefix="/items")


def _svc(db: AsyncSession = Depends(get_db)) -> ItemService:
    return ItemService(db)


@router.post("", response_model=ItemResponse, status_code=201)
async def create_item(
    body: ItemCreate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: ItemService = Depends(_svc),
):
    company_id = resolve_company_id(identity, body.company_id)
    item = await svc.create(company_id, body.model_dump(exclude={"company_id"}))
    return {"item": item}


@router.get("", response_model=ItemList)
async def list_items(
    company_id: Optional[int] = Query(None, alias="companyId"),
    item_code: Optional[str] = Query(None, alias="itemCode"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: ItemService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"items": await svc.find_all(company_id, item_code=item_code)}


@router.get("/count", response_model=CountResponse)
async def count_items(
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: ItemService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"count": await svc.count(company_id)}


@router.get("/item/{item_code}", response_model=ItemResponse)
async def get_item(
    item_code: str,
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: ItemService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"item": await svc.get(company_id, item_code)}


@router.patch("/item/{item_code}", response_model=ItemResponse)
async def update_item(
    item_code: str,
    body: ItemUpdate,
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: ItemService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"item": await svc.update(company_id, item_code, body.changes())}


@router.delete("/item/{item_code}", response_model=DeletedResponse)
async def delete_item(
    item_code: str,
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: ItemService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    await svc.remove(company_id, item_code)
    return {"deleted": item_code}
