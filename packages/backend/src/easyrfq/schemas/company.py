"""Pydantic schemas for companies.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
Responses are wrapped in a one-key envelope ({"company": ...}), the
shape existing clients expect.
"""

from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel, UpdateModel


class CompanyCreate(CamelModel):
    name: str = Field(..., min_length=1)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = Field(None, max_length=25)
    state: Optional[str] = Field(None, max_length=2)
    country: str = "USA"
    phone_main: Optional[str] = None


class CompanyUpdate(UpdateModel):
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = Field(None, max_length=25)
    state: Optional[str] = Field(None, max_length=2)
    country: Optional[str] = None
    phone_main: Optional[str] = None


class CompanyRead(CamelModel):
    id: int
    name: str
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone_main: Optional[str] = None


class CompanyResponse(CamelModel):
    company: CompanyRead


class CompanyList(CamelModel):
    companies: list[CompanyRead]


class DirectoryUser(CamelModel):
    id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    is_admin: bool


class CompanyDirectory(CamelModel):
    """Company info plus everyone who works there."""
    company: CompanyRead
    users: list[DirectoryUser]
