"""Pydantic schemas for RFQs and their line items."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel, UpdateModel


class RfqCreate(CamelModel):
    # company and user default to the caller's own
    company_id: Optional[int] = None
    user_id: Optional[int] = None
    customer_name: str = Field(..., min_length=1)
    rfq_number: str = Field(..., min_length=1, max_length=50)


class RfqUpdate(UpdateModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    user_id: Optional[int] = None
    rfq_number: Optional[str] = Field(None, min_length=1, max_length=50)


class RfqRead(CamelModel):
    id: int
    company_id: int
    customer_name: str
    user_id: int
    rfq_number: str
    created_at: Optional[datetime] = None


class RfqSummary(RfqRead):
    """List row: the RFQ plus who entered it and its priced total."""
    rfq_total: Decimal = Decimal(0)
    user_full_name: Optional[str] = None
    company_name: Optional[str] = None


class RfqLine(CamelModel):
    id: int
    item_code: str
    quantity: Optional[int] = None
    item_cost: Optional[Decimal] = None
    item_uom: Optional[str] = None
    item_description: Optional[str] = None


class RfqDetail(RfqRead):
    user_full_name: Optional[str] = None
    rfq_items: list[RfqLine] = []


class RfqItemCreate(CamelModel):
    rfq_id: int
    item_code: str = Field(..., min_length=1, max_length=25)
    quantity: int
    item_description: Optional[str] = None
    item_cost: Optional[Decimal] = Field(None, ge=0)


class RfqItemUpdate(UpdateModel):
    quantity: Optional[int] = Field(None, gt=0)


class RfqItemRead(CamelModel):
    id: int
    rfq_id: int
    company_id: int
    item_code: str
    quantity: Optional[int] = None
    item_description: Optional[str] = None
    item_cost: Optional[Decimal] = None


class RfqResponse(CamelModel):
    rfq: RfqRead


class RfqDetailResponse(CamelModel):
    rfq: RfqDetail


class RfqList(CamelModel):
    rfqs: list[RfqSummary]


class RfqItemResponse(CamelModel):
    rfq_item: RfqItemRead
