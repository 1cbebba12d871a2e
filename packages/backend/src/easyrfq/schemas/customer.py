"""Pydantic schemas for a company's customers."""

from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel, UpdateModel

MARKUP_TYPES = r"^(percentage|fixed)$"


class CustomerCreate(CamelModel):
    # Defaults to the caller's company when omitted
    company_id: Optional[int] = None
    customer_name: str = Field(..., min_length=1)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = Field(None, max_length=25)
    state: Optional[str] = Field(None, max_length=2)
    country: str = "USA"
    phone_main: Optional[str] = None
    markup_type: str = Field(..., pattern=MARKUP_TYPES)
    markup: int = Field(..., gt=0)


class CustomerUpdate(UpdateModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = Field(None, max_length=25)
    state: Optional[str] = Field(None, max_length=2)
    country: Optional[str] = None
    phone_main: Optional[str] = None
    markup_type: Optional[str] = Field(None, pattern=MARKUP_TYPES)
    markup: Optional[int] = Field(None, gt=0)


class CustomerRead(CamelModel):
    company_id: int
    customer_name: str
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone_main: Optional[str] = None
    markup_type: str
    markup: int


class CustomerResponse(CamelModel):
    customer: CustomerRead


class CustomerList(CamelModel):
    customers: list[CustomerRead]
