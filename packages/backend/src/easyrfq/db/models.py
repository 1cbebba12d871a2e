"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative mapping with SQLAlchemy 2.0 style (Mapped[] +
mapped_column). Each class = one table. Alembic migrations and the test
fixtures build the schema from this metadata; the services themselves
query with hand-written SQL (db/sql.py), so column names here are the
names used in those queries.

Key concepts:
- Integer serial ids for companies, users, RFQs, quotes and line items
- Customers and catalog items are keyed per company (composite PKs), so
  two companies can each have a customer called "NASA"
- CHECK constraints carry the few business rules the database enforces
  (markup > 0, cost >= 0, quantity > 0)
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ══════════════════════════════════════════════════════════════
# Tenants and people
# ══════════════════════════════════════════════════════════════


class Company(Base):
    """Tenant root. Users, customers, items, RFQs and quotes hang off it."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    address_line1: Mapped[Optional[str]] = mapped_column(Text)
    address_line2: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(String(25))
    state: Mapped[Optional[str]] = mapped_column(String(2))
    country: Mapped[Optional[str]] = mapped_column(Text, server_default="USA")
    phone_main: Mapped[Optional[str]] = mapped_column(Text)


class User(Base):
    """A person working for exactly one company."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(r"email ~ '^[^@]+@[^@]+\.[^@]+$'", name="ck_users_email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)  # bcrypt hash
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default="false"
    )
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id"), nullable=False
    )


# ══════════════════════════════════════════════════════════════
# Per-company catalog
# ══════════════════════════════════════════════════════════════


class CompanyCustomer(Base):
    """A customer of one company, with the markup quoted to them."""

    __tablename__ = "company_customers"
    __table_args__ = (
        CheckConstraint("markup > 0", name="ck_company_customers_markup"),
    )

    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True
    )
    customer_name: Mapped[str] = mapped_column(Text, primary_key=True)
    address_line1: Mapped[Optional[str]] = mapped_column(Text)
    address_line2: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(String(25))
    state: Mapped[Optional[str]] = mapped_column(String(2))
    country: Mapped[Optional[str]] = mapped_column(Text, server_default="USA")
    phone_main: Mapped[Optional[str]] = mapped_column(Text)
    markup_type: Mapped[str] = mapped_column(Text, nullable=False)  # percentage, fixed
    markup: Mapped[int] = mapped_column(Integer, nullable=False)


class CompanyItem(Base):
    """A catalog item of one company, identified by its item code."""

    __tablename__ = "company_items"
    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_company_items_cost"),
    )

    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True
    )
    item_code: Mapped[str] = mapped_column(String(25), primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    uom: Mapped[str] = mapped_column(Text, nullable=False)
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))


# ══════════════════════════════════════════════════════════════
# RFQs and quotes
# ══════════════════════════════════════════════════════════════


class Rfq(Base):
    """A customer's request for quote, entered by a user."""

    __tablename__ = "rfqs"
    __table_args__ = (
        ForeignKeyConstraint(
            ["company_id", "customer_name"],
            ["company_customers.company_id", "company_customers.customer_name"],
            ondelete="CASCADE",
        ),
        UniqueConstraint("company_id", "rfq_number", name="unique_rfq_per_company"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    rfq_number: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )


class RfqItem(Base):
    """One catalog item and quantity on an RFQ."""

    __tablename__ = "rfq_items"
    __table_args__ = (
        ForeignKeyConstraint(
            ["company_id", "item_code"],
            ["company_items.company_id", "company_items.item_code"],
            ondelete="CASCADE",
        ),
        CheckConstraint("quantity > 0", name="ck_rfq_items_quantity"),
        CheckConstraint("item_cost >= 0", name="ck_rfq_items_cost"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rfq_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rfqs.id", ondelete="CASCADE"), nullable=False
    )
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    item_code: Mapped[str] = mapped_column(String(25), nullable=False)
    quantity: Mapped[Optional[int]] = mapped_column(Integer)
    item_description: Mapped[Optional[str]] = mapped_column(Text)
    item_cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))


class Quote(Base):
    """A priced offer to a customer, valid until a given date."""

    __tablename__ = "quotes"
    __table_args__ = (
        ForeignKeyConstraint(
            ["company_id", "customer_name"],
            ["company_customers.company_id", "company_customers.customer_name"],
            ondelete="CASCADE",
        ),
        UniqueConstraint("company_id", "quote_number", name="unique_quote_per_company"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    valid_until: Mapped[str] = mapped_column(Text, nullable=False)
    quote_number: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)


class QuoteItem(Base):
    """One catalog item, quantity and sell price on a quote."""

    __tablename__ = "quote_items"
    __table_args__ = (
        ForeignKeyConstraint(
            ["company_id", "item_code"],
            ["company_items.company_id", "company_items.item_code"],
            ondelete="CASCADE",
        ),
        CheckConstraint("quantity > 0", name="ck_quote_items_quantity"),
        CheckConstraint("item_price >= 0", name="ck_quote_items_price"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quote_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False
    )
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    item_code: Mapped[str] = mapped_column(String(25), nullable=False)
    quantity: Mapped[Optional[int]] = mapped_column(Integer)
    item_description: Mapped[Optional[str]] = mapped_column(Text)
    item_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
