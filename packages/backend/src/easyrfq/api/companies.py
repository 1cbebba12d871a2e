"""Company API routes.

Learn: Creating a company is open, since signing up starts by
registering the company and then a user inside it. Reading needs a
login, the staff directory needs membership, and changing or deleting a
company is admin-only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.dependencies import (
    ensure_admin,
    ensure_company_member_or_admin,
    ensure_logged_in,
)
from easyrfq.db.engine import get_db
from easyrfq.schemas.common import DeletedResponse
from easyrfq.schemas.company import (
    CompanyCreate,
    CompanyDirectory,
    CompanyList,
    CompanyResponse,
    CompanyUpdate,
)
from easyrfq.services.company_service import CompanyService

router = APIRouter(prefix="/companies")


def _svc(db: AsyncSession = Depends(get_db)) -> CompanyService:
    return CompanyService(db)


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(body: CompanyCreate, svc: CompanyService = Depends(_svc)):
    company = await svc.create(body.model_dump())
    return {"company": company}


@router.get("", response_model=CompanyList)
async def list_companies(
    name: Optional[str] = Query(None),
    svc: CompanyService = Depends(_svc),
):
    return {"companies": await svc.find_all(name=name)}


@router.get(
    "/by-name/{name}",
    response_model=CompanyResponse,
    dependencies=[Depends(ensure_logged_in)],
)
async def get_company_by_name(name: str, svc: CompanyService = Depends(_svc)):
    return {"company": await svc.get_by_name(name)}


@router.get(
    "/{company_id}",
    response_model=CompanyResponse,
    dependencies=[Depends(ensure_logged_in)],
)
async def get_company(company_id: int, svc: CompanyService = Depends(_svc)):
    return {"company": await svc.get(company_id)}


@router.get(
    "/{company_id}/directory",
    response_model=CompanyDirectory,
    dependencies=[Depends(ensure_company_member_or_admin)],
)
async def get_directory(company_id: int, svc: CompanyService = Depends(_svc)):
    return await svc.get_directory(company_id)


@router.patch(
    "/{company_id}",
    response_model=CompanyResponse,
    dependencies=[Depends(ensure_admin)],
)
async def update_company(
    company_id: int,
    body: CompanyUpdate,
    svc: CompanyService = Depends(_svc),
):
    return {"company": await svc.update(company_id, body.changes())}


@router.delete(
    "/{company_id}",
    response_model=DeletedResponse,
    dependencies=[Depends(ensure_admin)],
)
async def delete_company(company_id: int, svc: CompanyService = Depends(_svc)):
    await svc.remove(company_id)
    return {"deleted": str(company_id)}
