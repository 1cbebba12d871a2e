"""Quote service — priced offers sent back to customers.

Same shape as RfqService, with two differences: a quote line carries its
own price (item_price) instead of the catalog cost, and the quote total
is computed from those prices.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.db.sql import Conditions, build_partial_update, fetch_all, fetch_one
from easyrfq.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()

QUOTE_FIELDS = (
    "id, company_id, customer_name, user_id, quote_number, valid_until, notes, created_at"
)
QUOTE_ITEM_FIELDS = (
    "id, quote_id, company_id, item_code, quantity, item_description, item_price"
)

QUOTE_COLUMNS = {
    "customerName": "customer_name",
    "userId": "user_id",
    "quoteNumber": "quote_number",
    "validUntil": "valid_until",
}
QUOTE_ITEM_COLUMNS = {"itemPrice": "item_price"}


class QuoteService:
    """Business logic for quotes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Quotes ────────────────────────────────────────────

    async def create(self, data: dict) -> dict:
        duplicate = await fetch_one(
            self.db,
            "SELECT id FROM quotes WHERE company_id = $1 AND quote_number = $2",
            data["company_id"],
            data["quote_number"],
        )
        if duplicate:
            raise BadRequestError(f"Duplicate quote number: {data['quote_number']}")

        quote = await fetch_one(
            self.db,
            f"""INSERT INTO quotes
                  (company_id, customer_name, user_id, quote_number, valid_until, notes)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {QUOTE_FIELDS}""",
            data["company_id"],
            data["customer_name"],
            data["user_id"],
            data["quote_number"],
            data["valid_until"],
            data.get("notes"),
        )
        await self.db.commit()
        logger.info(
            "quote.created",
            quote_id=quote["id"],
            company_id=quote["company_id"],
            quote_number=quote["quote_number"],
        )
        return quote

    async def find_all(
        self,
        company_id: int | None = None,
        user_id: int | None = None,
        quote_number: str | None = None,
    ) -> list[dict]:
        cond = (
            Conditions()
            .add("q.company_id", company_id)
            .add("q.user_id", user_id)
            .add("q.quote_number", quote_number)
        )
        return await fetch_all(
            self.db,
            f"""SELECT q.id, q.company_id, q.customer_name, q.user_id,
                       q.quote_number, q.valid_until, q.notes, q.created_at,
                       COALESCE(SUM(qi.quantity * qi.item_price), 0) AS quote_total,
                       u.full_name AS user_full_name,
                       c.name AS company_name
                FROM quotes AS q
                LEFT JOIN quote_items AS qi ON qi.quote_id = q.id
                LEFT JOIN users AS u ON u.id = q.user_id
                LEFT JOIN companies AS c ON c.id = q.company_id
                {cond.where()}
                GROUP BY q.id, u.full_name, c.name
                ORDER BY q.id""",
            *cond.params,
        )

    async def count(self, user_id: int | None = None, company_id: int | None = None) -> int:
        cond = Conditions().add("user_id", user_id).add("company_id", company_id)
        row = await fetch_one(
            self.db,
            f"SELECT COUNT(*) AS count FROM quotes{cond.where()}",
            *cond.params,
        )
        return row["count"]

    async def get(self, quote_id: int, company_id: int | None = None) -> dict:
        """A quote with its lines. A line's own description wins over the catalog's."""
        cond = Conditions().add("id", quote_id).add("company_id", company_id)
        quote = await fetch_one(
            self.db,
            f"SELECT {QUOTE_FIELDS} FROM quotes{cond.where()}",
            *cond.params,
        )
        if not quote:
            raise NotFoundError(f"No quote: {quote_id}")

        quote["quote_items"] = await fetch_all(
            self.db,
            """SELECT qi.id, qi.item_code, qi.quantity,
                      COALESCE(qi.item_description, ci.description) AS item_description,
                      qi.item_price,
                      ci.uom AS item_uom
               FROM quote_items AS qi
               LEFT JOIN company_items AS ci
                      ON ci.company_id = qi.company_id AND ci.item_code = qi.item_code
               WHERE qi.quote_id = $1
               ORDER BY qi.id""",
            quote_id,
        )
        return quote

    async def update(
        self, quote_id: int, changes: dict, company_id: int | None = None
    ) -> dict:
        update = build_partial_update(changes, QUOTE_COLUMNS)
        cond = Conditions(*update.values).add("id", quote_id).add("company_id", company_id)
        quote = await fetch_one(
            self.db,
            f"""UPDATE quotes
                SET {update.set_clause}{cond.where()}
                RETURNING {QUOTE_FIELDS}""",
            *cond.params,
        )
        if not quote:
            raise NotFoundError(f"No quote: {quote_id}")
        await self.db.commit()
        return quote

    async def remove(self, quote_id: int, company_id: int | None = None) -> None:
        cond = Conditions().add("id", quote_id).add("company_id", company_id)
        deleted = await fetch_one(
            self.db,
            f"DELETE FROM quotes{cond.where()} RETURNING id",
            *cond.params,
        )
        if not deleted:
            raise NotFoundError(f"No quote: {quote_id}")
        await self.db.commit()
        logger.info("quote.deleted", quote_id=quote_id)

    # ─── Line items ────────────────────────────────────────

    async def create_item(self, data: dict, company_id: int | None = None) -> dict:
        if data["quantity"] <= 0:
            raise BadRequestError("Quantity must be greater than 0.")

        cond = Conditions().add("id", data["quote_id"]).add("company_id", company_id)
        quote = await fetch_one(
            self.db, f"SELECT id, company_id FROM quotes{cond.where()}", *cond.params
        )
        if not quote:
            raise NotFoundError(f"No quote: {data['quote_id']}")

        line = await fetch_one(
            self.db,
            f"""INSERT INTO quote_items
                  (quote_id, company_id, item_code, quantity, item_description, item_price)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {QUOTE_ITEM_FIELDS}""",
            quote["id"],
            quote["company_id"],
            data["item_code"],
            data["quantity"],
            data.get("item_description"),
            data.get("item_price"),
        )
        await self.db.commit()
        logger.info("quote.item_added", quote_id=quote["id"], item_code=data["item_code"])
        return line

    async def update_item(
        self, item_id: int, changes: dict, company_id: int | None = None
    ) -> dict:
        update = build_partial_update(changes, QUOTE_ITEM_COLUMNS)
        cond = Conditions(*update.values).add("id", item_id).add("company_id", company_id)
        line = await fetch_one(
            self.db,
            f"""UPDATE quote_items
                SET {update.set_clause}{cond.where()}
                RETURNING {QUOTE_ITEM_FIELDS}""",
            *cond.params,
        )
        if not line:
            raise NotFoundError(f"No quote item: {item_id}")
        await self.db.commit()
        return line

    async def remove_item(self, item_id: int, company_id: int | None = None) -> None:
        cond = Conditions().add("id", item_id).add("company_id", company_id)
        deleted = await fetch_one(
            self.db,
            f"DELETE FROM quote_items{cond.where()} RETURNING id",
            *cond.params,
        )
        if not deleted:
            raise NotFoundError(f"No quote item: {item_id}")
        await self.db.commit()
