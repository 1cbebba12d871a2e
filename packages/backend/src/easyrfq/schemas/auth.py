"""Pydantic schemas for login and self-registration."""

from typing import Optional

from pydantic import Field

from easyrfq.schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str


class RegisterRequest(CamelModel):
    """Self-registration. Never creates an admin."""
    email: str = Field(..., pattern=r"^[^@]+@[^@]+\.[^@]+$")
    password: str = Field(..., min_length=5)
    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    company_id: int


class TokenResponse(CamelModel):
    token: str
