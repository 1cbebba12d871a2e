"""Customer API routes.

Learn: Customers belong to a company and are addressed by name, so
every route takes ?companyId=. ensure_company_member_or_admin rejects a
companyId that isn't the caller's own (admins may name any), and
resolve_company_id fills it in from the token when it is left out.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.dependencies import ensure_company_member_or_admin, resolve_company_id
from easyrfq.auth.tokens import Claim
from easyrfq.db.engine import get_db
from easyrfq.schemas.common import CountResponse, DeletedResponse
from easyrfq.schemas.customer import (
    CustomerCreate,
    CustomerList,
    CustomerResponse,
    CustomerUpdate,
)
from easyrfq.services.customer_service import CustomerService

router = APIRouter(prefix="/customers")


def _svc(db: AsyncSession = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    body: CustomerCreate,
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: CustomerService = Depends(_svc),
):
    company_id = resolve_company_id(identity, body.company_id)
    customer = await svc.create(company_id, body.model_dump(exclude={"company_id"}))
    return {"customer": customer}


@router.get("", response_model=CustomerList)
async def list_customers(
    company_id: Optional[int] = Query(None, alias="companyId"),
    name: Optional[str] = Query(None),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: CustomerService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"customers": await svc.find_all(company_id, name=name)}


@router.get("/count", response_model=CountResponse)
async def count_customers(
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: CustomerService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"count": await svc.count(company_id)}


@router.get("/customer/{customer_name}", response_model=CustomerResponse)
async def get_customer(
    customer_name: str,
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: CustomerService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    return {"customer": await svc.get(company_id, customer_name)}


@router.patch("/customer/{customer_name}", response_model=CustomerResponse)
async def update_customer(
    customer_name: str,
    body: CustomerUpdate,
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: CustomerService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    customer = await svc.update(company_id, customer_name, body.changes())
    return {"customer": customer}


@router.delete("/customer/{customer_name}", response_model=DeletedResponse)
async def delete_customer(
    customer_name: str,
    company_id: Optional[int] = Query(None, alias="companyId"),
    identity: Claim = Depends(ensure_company_member_or_admin),
    svc: CustomerService = Depends(_svc),
):
    company_id = resolve_company_id(identity, company_id)
    await svc.remove(company_id, customer_name)
    return {"deleted": customer_name}
