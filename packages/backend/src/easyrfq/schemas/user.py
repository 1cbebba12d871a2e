"""Pydantic schemas for users."""

from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel, UpdateModel


class UserCreate(CamelModel):
    """Admin-only user creation; the new user may be an admin."""
    email: str = Field(..., pattern=r"^[^@]+@[^@]+\.[^@]+$")
    password: str = Field(..., min_length=5)
    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    is_admin: bool = False
    company_id: int


class UserUpdate(UpdateModel):
    email: Optional[str] = Field(None, pattern=r"^[^@]+@[^@]+\.[^@]+$")
    full_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    password: Optional[str] = Field(None, min_length=5)


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=5)


class UserRead(CamelModel):
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    is_admin: bool
    company_id: int


class UserCompany(CamelModel):
    company_id: int
    company_name: str
    company_address_line1: Optional[str] = None
    company_address_line2: Optional[str] = None
    company_city: Optional[str] = None
    company_state: Optional[str] = None
    company_country: Optional[str] = None
    company_phone_main: Optional[str] = None


class UserDetail(CamelModel):
    """A user with their company and the ids of their RFQs and quotes."""
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    is_admin: bool
    company: UserCompany
    rfqs: list[int] = []
    quotes: list[int] = []


class UserResponse(CamelModel):
    user: UserRead


class UserDetailResponse(CamelModel):
    user: UserDetail


class UserList(CamelModel):
    users: list[UserRead]


class UserCreated(CamelModel):
    user: UserRead
    token: str


class PasswordChanged(CamelModel):
    message: str
    user: UserRead
