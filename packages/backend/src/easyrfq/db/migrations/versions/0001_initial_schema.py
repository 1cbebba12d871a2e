"""Initial schema: companies, users, customers, items, RFQs, quotes

Revision ID: 0001
Revises:
Create Date: 2024-11-02 10:14:05.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False, unique=True),
        sa.Column("address_line1", sa.Text()),
        sa.Column("address_line2", sa.Text()),
        sa.Column("city", sa.String(25)),
        sa.Column("state", sa.String(2)),
        sa.Column("country", sa.Text(), server_default="USA"),
        sa.Column("phone_main", sa.Text()),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False),
        sa.CheckConstraint(r"email ~ '^[^@]+@[^@]+\.[^@]+$'", name="ck_users_email"),
    )

    op.create_table(
        "company_customers",
        sa.Column(
            "company_id", sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("customer_name", sa.Text(), primary_key=True),
        sa.Column("address_line1", sa.Text()),
        sa.Column("address_line2", sa.Text()),
        sa.Column("city", sa.String(25)),
        sa.Column("state", sa.String(2)),
        sa.Column("country", sa.Text(), server_default="USA"),
        sa.Column("phone_main", sa.Text()),
        sa.Column("markup_type", sa.Text(), nullable=False),
        sa.Column("markup", sa.Integer(), nullable=False),
        sa.CheckConstraint("markup > 0", name="ck_company_customers_markup"),
    )

    op.create_table(
        "company_items",
        sa.Column(
            "company_id", sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("item_code", sa.String(25), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("uom", sa.Text(), nullable=False),
        sa.Column("cost", sa.Numeric(10, 2)),
        sa.CheckConstraint("cost >= 0", name="ck_company_items_cost"),
    )

    # ─── RFQs / quotes share one shape ───────────────────
    for table, number_col, unique_name in (
        ("rfqs", "rfq_number", "unique_rfq_per_company"),
        ("quotes", "quote_number", "unique_quote_per_company"),
    ):
        extra = []
        if table == "quotes":
            extra = [
                sa.Column("valid_until", sa.Text(), nullable=False),
                sa.Column("notes", sa.Text()),
            ]
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("company_id", sa.Integer(), nullable=False),
            sa.Column("customer_name", sa.Text(), nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column(number_col, sa.String(50), nullable=False),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
            *extra,
            sa.ForeignKeyConstraint(
                ["company_id", "customer_name"],
                ["company_customers.company_id", "company_customers.customer_name"],
                ondelete="CASCADE",
            ),
            sa.UniqueConstraint("company_id", number_col, name=unique_name),
        )

    for table, parent, amount_col in (
        ("rfq_items", "rfqs", "item_cost"),
        ("quote_items", "quotes", "item_price"),
    ):
        parent_col = "rfq_id" if parent == "rfqs" else "quote_id"
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                parent_col, sa.Integer(),
                sa.ForeignKey(f"{parent}.id", ondelete="CASCADE"), nullable=False,
            ),
            sa.Column("company_id", sa.Integer(), nullable=False),
            sa.Column("item_code", sa.String(25), nullable=False),
            sa.Column("quantity", sa.Integer()),
            sa.Column("item_description", sa.Text()),
            sa.Column(amount_col, sa.Numeric(10, 2)),
            sa.ForeignKeyConstraint(
                ["company_id", "item_code"],
                ["company_items.company_id", "company_items.item_code"],
                ondelete="CASCADE",
            ),
            sa.CheckConstraint("quantity > 0", name=f"ck_{table}_quantity"),
            sa.CheckConstraint(
                f"{amount_col} >= 0",
                name=f"ck_{table}_{'cost' if amount_col == 'item_cost' else 'price'}",
            ),
        )


def downgrade() -> None:
    for table in (
        "quote_items",
        "rfq_items",
        "quotes",
        "rfqs",
        "company_items",
        "company_customers",
        "users",
        "companies",
    ):
        op.drop_table(table)
