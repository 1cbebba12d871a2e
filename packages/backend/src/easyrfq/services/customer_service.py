"""Customer service — the companies a tenant quotes to.

Learn: Customers have no surrogate id. They are keyed by
(company_id, customer_name), so every lookup takes both, and the
company half always comes from the caller's resolved tenant.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.db.sql import Conditions, build_partial_update, fetch_all, fetch_one
from easyrfq.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()

CUSTOMER_FIELDS = (
    "company_id, customer_name, address_line1, address_line2, city, state, "
    "country, phone_main, markup_type, markup"
)

CUSTOMER_COLUMNS = {
    "customerName": "customer_name",
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "phoneMain": "phone_main",
    "markupType": "markup_type",
}


class CustomerService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, company_id: int, data: dict) -> dict:
        name = data["customer_name"]
        duplicate = await fetch_one(
            self.db,
            """SELECT customer_name FROM company_customers
               WHERE company_id = $1 AND customer_name = $2""",
            company_id,
            name,
        )
        if duplicate:
            raise BadRequestError(f"Duplicate customer: {name}")

        customer = await fetch_one(
            self.db,
            f"""INSERT INTO company_customers
                  (company_id, customer_name, address_line1, address_line2,
                   city, state, country, phone_main, markup_type, markup)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING {CUSTOMER_FIELDS}""",
            company_id,
            name,
            data.get("address_line1"),
            data.get("address_line2"),
            data.get("city"),
            data.get("state"),
            data.get("country") or "USA",
            data.get("phone_main"),
            data["markup_type"],
            data["markup"],
        )
        await self.db.commit()
        logger.info("customer.created", company_id=company_id, customer_name=name)
        return customer

    async def find_all(self, company_id: int, name: str | None = None) -> list[dict]:
        cond = (
            Conditions()
            .add("company_id", company_id)
            .add("customer_name", f"%{name}%" if name else None, op="ILIKE")
        )
        return await fetch_all(
            self.db,
            f"""SELECT {CUSTOMER_FIELDS} FROM company_customers{cond.where()}
                ORDER BY customer_name""",
            *cond.params,
        )

    async def get(self, company_id: int, customer_name: str) -> dict:
        customer = await fetch_one(
            self.db,
            f"""SELECT {CUSTOMER_FIELDS} FROM company_customers
                WHERE company_id = $1 AND customer_name = $2""",
            company_id,
            customer_name,
        )
        if not customer:
            raise NotFoundError(f"No customer: {customer_name}")
        return customer

    async def count(self, company_id: int) -> int:
        row = await fetch_one(
            self.db,
            "SELECT COUNT(*) AS count FROM company_customers WHERE company_id = $1",
            company_id,
        )
        return row["count"]

    async def update(self, company_id: int, customer_name: str, changes: dict) -> dict:
        update = build_partial_update(changes, CUSTOMER_COLUMNS)
        cond = (
            Conditions(*update.values)
            .add("company_id", company_id)
            .add("customer_name", customer_name)
        )
        customer = await fetch_one(
            self.db,
            f"""UPDATE company_customers
                SET {update.set_clause}{cond.where()}
                RETURNING {CUSTOMER_FIELDS}""",
            *cond.params,
        )
        if not customer:
            raise NotFoundError(f"No customer: {customer_name}")
        await self.db.commit()
        return customer

    async def remove(self, company_id: int, customer_name: str) -> None:
        deleted = await fetch_one(
            self.db,
            """DELETE FROM company_customers
               WHERE company_id = $1 AND customer_name = $2
               RETURNING customer_name""",
            company_id,
            customer_name,
        )
        if not deleted:
            raise NotFoundError(f"No customer: {customer_name}")
        await self.db.commit()
        logger.info(
            "customer.deleted", company_id=company_id, customer_name=customer_name
        )
