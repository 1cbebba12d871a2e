"""Pydantic schemas for quotes and their line items."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel, UpdateModel


class QuoteCreate(CamelModel):
    # company and user default to the caller's own
    company_id: Optional[int] = None
    user_id: Optional[int] = None
    customer_name: str = Field(..., min_length=1)
    quote_number: str = Field(..., min_length=1, max_length=50)
    valid_until: str = Field(..., min_length=1)
    notes: Optional[str] = None


class QuoteUpdate(UpdateModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    user_id: Optional[int] = None
    quote_number: Optional[str] = Field(None, min_length=1, max_length=50)
    valid_until: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None


class QuoteRead(CamelModel):
    id: int
    company_id: int
    customer_name: str
    user_id: int
    quote_number: str
    valid_until: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class QuoteSummary(QuoteRead):
    quote_total: Decimal = Decimal(0)
    user_full_name: Optional[str] = None
    company_name: Optional[str] = None


class QuoteLine(CamelModel):
    id: int
    item_code: str
    quantity: Optional[int] = None
    item_description: Optional[str] = None
    item_price: Optional[Decimal] = None
    item_uom: Optional[str] = None


class QuoteDetail(QuoteRead):
    quote_items: list[QuoteLine] = []


class QuoteItemCreate(CamelModel):
    quote_id: int
    item_code: str = Field(..., min_length=1, max_length=25)
    quantity: int
    item_description: Optional[str] = None
    item_price: Optional[Decimal] = Field(None, ge=0)


class QuoteItemUpdate(UpdateModel):
    quantity: Optional[int] = Field(None, gt=0)
    item_price: Optional[Decimal] = Field(None, ge=0)


class QuoteItemRead(CamelModel):
    id: int
    quote_id: int
    company_id: int
    item_code: str
    quantity: Optional[int] = None
    item_description: Optional[str] = None
    item_price: Optional[Decimal] = None


class QuoteResponse(CamelModel):
    quote: QuoteRead


class QuoteDetailResponse(CamelModel):
    quote: QuoteDetail


class QuoteList(CamelModel):
    quotes: list[QuoteSummary]


class QuoteItemResponse(CamelModel):
    quote_item: QuoteItemRead
