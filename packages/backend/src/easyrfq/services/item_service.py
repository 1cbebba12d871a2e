"""Item service — a company's catalog of things it sells."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.db.sql import Conditions, build_partial_update, fetch_all, fetch_one
from easyrfq.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()

ITEM_FIELDS = "company_id, item_code, description, uom, cost"

# description/uom/cost are already column names; item code is part of the key
ITEM_COLUMNS: dict[str, str] = {}


class ItemService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, company_id: int, data: dict) -> dict:
        code = data["item_code"]
        duplicate = await fetch_one(
            self.db,
            """SELECT item_code FROM company_items
               WHERE company_id = $1 AND item_code = $2""",
            company_id,
            code,
        )
        if duplicate:
            raise BadRequestError(f"Duplicate item: {code}")

        item = await fetch_one(
            self.db,
            f"""INSERT INTO company_items (company_id, item_code, description, uom, cost)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {ITEM_FIELDS}""",
            company_id,
            code,
            data["description"],
            data["uom"],
            data.get("cost"),
        )
        await self.db.commit()
        logger.info("item.created", company_id=company_id, item_code=code)
        return item

    async def find_all(self, company_id: int, item_code: str | None = None) -> list[dict]:
        """Catalog for one company; item_code is a case-insensitive substring."""
        cond = (
            Conditions()
            .add("company_id", company_id)
            .add("item_code", f"%{item_code}%" if item_code else None, op="ILIKE")
        )
        return await fetch_all(
            self.db,
            f"SELECT {ITEM_FIELDS} FROM company_items{cond.where()} ORDER BY item_code",
            *cond.params,
        )

    async def get(self, company_id: int, item_code: str) -> dict:
        item = await fetch_one(
            self.db,
            f"""SELECT {ITEM_FIELDS} FROM company_items
                WHERE company_id = $1 AND item_code = $2""",
            company_id,
            item_code,
        )
        if not item:
            raise NotFoundError(f"No item: {item_code} for company: {company_id}")
        return item

    async def count(self, company_id: int) -> int:
        row = await fetch_one(
            self.db,
            "SELECT COUNT(*) AS count FROM company_items WHERE company_id = $1",
            company_id,
        )
        return row["count"]

    async def update(self, company_id: int, item_code: str, changes: dict) -> dict:
        update = build_partial_update(changes, ITEM_COLUMNS)
        cond = (
            Conditions(*update.values)
            .add("company_id", company_id)
            .add("item_code", item_code)
        )
        item = await fetch_one(
            self.db,
            f"""UPDATE company_items
                SET {update.set_clause}{cond.where()}
                RETURNING {ITEM_FIELDS}""",
            *cond.params,
        )
        if not item:
            raise NotFoundError(f"No item: {item_code} for company: {company_id}")
        await self.db.commit()
        return item

    async def remove(self, company_id: int, item_code: str) -> None:
        deleted = await fetch_one(
            self.db,
            """DELETE FROM company_items
               WHERE company_id = $1 AND item_code = $2
               RETURNING item_code""",
            company_id,
            item_code,
        )
        if not deleted:
            raise NotFoundError(f"No item: {item_code} for company: {company_id}")
        await self.db.commit()
        logger.info("item.deleted", company_id=company_id, item_code=item_code)
