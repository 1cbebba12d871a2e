"""Pydantic schemas for a company's catalog items."""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel, UpdateModel


class ItemCreate(CamelModel):
    # Defaults to the caller's company when omitted
    company_id: Optional[int] = None
    item_code: str = Field(..., min_length=1, max_length=25)
    description: str = Field(..., min_length=1)
    uom: str = Field(..., min_length=1)
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ItemUpdate(UpdateModel):
    description: Optional[str] = Field(None, min_length=1)
    uom: Optional[str] = Field(None, min_length=1)
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ItemRead(CamelModel):
    company_id: int
    item_code: str
    description: str
    uom: str
    cost: Optional[Decimal] = None


class ItemResponse(CamelModel):
    item: ItemRead


class ItemList(CamelModel):
    items: list[ItemRead]
