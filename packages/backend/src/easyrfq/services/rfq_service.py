"""RFQ service — requests for quote and their line items.

Learn: Every by-id method takes an optional company_id. Routes pass the
caller's company for non-admins (None for admins), and the service adds
it to the WHERE clause, so another tenant's RFQ simply isn't found.

List rows carry a computed total: quantity x catalog cost over the
RFQ's lines, 0 for an RFQ with no lines (LEFT JOIN + COALESCE).
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.db.sql import Conditions, build_partial_update, fetch_all, fetch_one
from easyrfq.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()

RFQ_FIELDS = "id, company_id, customer_name, user_id, rfq_number, created_at"
RFQ_ITEM_FIELDS = (
    "id, rfq_id, company_id, item_code, quantity, item_description, item_cost"
)

RFQ_COLUMNS = {
    "customerName": "customer_name",
    "userId": "user_id",
    "rfqNumber": "rfq_number",
}
RFQ_ITEM_COLUMNS: dict[str, str] = {}


class RfqService:
    """Business logic for RFQs."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── RFQs ──────────────────────────────────────────────

    async def create(self, data: dict) -> dict:
        """Create an RFQ. The number is unique within its company."""
        duplicate = await fetch_one(
            self.db,
            "SELECT id FROM rfqs WHERE company_id = $1 AND rfq_number = $2",
            data["company_id"],
            data["rfq_number"],
        )
        if duplicate:
            raise BadRequestError(f"Duplicate RFQ number: {data['rfq_number']}")

        rfq = await fetch_one(
            self.db,
            f"""INSERT INTO rfqs (company_id, customer_name, user_id, rfq_number)
                VALUES ($1, $2, $3, $4)
                RETURNING {RFQ_FIELDS}""",
            data["company_id"],
            data["customer_name"],
            data["user_id"],
            data["rfq_number"],
        )
        await self.db.commit()
        logger.info(
            "rfq.created",
            rfq_id=rfq["id"],
            company_id=rfq["company_id"],
            rfq_number=rfq["rfq_number"],
        )
        return rfq

    async def find_all(
        self,
        company_id: int | None = None,
        user_id: int | None = None,
        rfq_number: str | None = None,
    ) -> list[dict]:
        cond = (
            Conditions()
            .add("r.company_id", company_id)
            .add("r.user_id", user_id)
            .add("r.rfq_number", rfq_number)
        )
        return await fetch_all(
            self.db,
            f"""SELECT r.id, r.company_id, r.customer_name, r.user_id,
                       r.rfq_number, r.created_at,
                       COALESCE(SUM(ri.quantity * ci.cost), 0) AS rfq_total,
                       u.full_name AS user_full_name,
                       c.name AS company_name
                FROM rfqs AS r
                LEFT JOIN rfq_items AS ri ON ri.rfq_id = r.id
                LEFT JOIN company_items AS ci
                       ON ci.company_id = ri.company_id AND ci.item_code = ri.item_code
                LEFT JOIN users AS u ON u.id = r.user_id
                LEFT JOIN companies AS c ON c.id = r.company_id
                {cond.where()}
                GROUP BY r.id, u.full_name, c.name
                ORDER BY r.id""",
            *cond.params,
        )

    async def count(self, user_id: int | None = None, company_id: int | None = None) -> int:
        cond = Conditions().add("user_id", user_id).add("company_id", company_id)
        row = await fetch_one(
            self.db,
            f"SELECT COUNT(*) AS count FROM rfqs{cond.where()}",
            *cond.params,
        )
        return row["count"]

    async def get(self, rfq_id: int, company_id: int | None = None) -> dict:
        """An RFQ with its lines, priced from the company catalog."""
        cond = Conditions().add("r.id", rfq_id).add("r.company_id", company_id)
        rfq = await fetch_one(
            self.db,
            f"""SELECT r.id, r.company_id, r.customer_name, r.user_id,
                       r.rfq_number, r.created_at,
                       u.full_name AS user_full_name
                FROM rfqs AS r
                LEFT JOIN users AS u ON u.id = r.user_id
                {cond.where()}""",
            *cond.params,
        )
        if not rfq:
            raise NotFoundError(f"No RFQ: {rfq_id}")

        rfq["rfq_items"] = await fetch_all(
            self.db,
            """SELECT ri.id, ri.item_code, ri.quantity,
                      ci.cost AS item_cost,
                      ci.uom AS item_uom,
                      ci.description AS item_description
               FROM rfq_items AS ri
               LEFT JOIN company_items AS ci
                      ON ci.company_id = ri.company_id AND ci.item_code = ri.item_code
               WHERE ri.rfq_id = $1
               ORDER BY ri.id""",
            rfq_id,
        )
        return rfq

    async def update(self, rfq_id: int, changes: dict, company_id: int | None = None) -> dict:
        update = build_partial_update(changes, RFQ_COLUMNS)
        cond = Conditions(*update.values).add("id", rfq_id).add("company_id", company_id)
        rfq = await fetch_one(
            self.db,
            f"""UPDATE rfqs
                SET {update.set_clause}{cond.where()}
                RETURNING {RFQ_FIELDS}""",
            *cond.params,
        )
        if not rfq:
            raise NotFoundError(f"No RFQ: {rfq_id}")
        await self.db.commit()
        return rfq

    async def remove(self, rfq_id: int, company_id: int | None = None) -> None:
        cond = Conditions().add("id", rfq_id).add("company_id", company_id)
        deleted = await fetch_one(
            self.db,
            f"DELETE FROM rfqs{cond.where()} RETURNING id",
            *cond.params,
        )
        if not deleted:
            raise NotFoundError(f"No RFQ: {rfq_id}")
        await self.db.commit()
        logger.info("rfq.deleted", rfq_id=rfq_id)

    # ─── Line items ────────────────────────────────────────

    async def create_item(self, data: dict, company_id: int | None = None) -> dict:
        """Add a line to an RFQ. The line belongs to the RFQ's company."""
        if data["quantity"] <= 0:
            raise BadRequestError("Quantity must be greater than 0.")

        cond = Conditions().add("id", data["rfq_id"]).add("company_id", company_id)
        rfq = await fetch_one(
            self.db, f"SELECT id, company_id FROM rfqs{cond.where()}", *cond.params
        )
        if not rfq:
            raise NotFoundError(f"No RFQ: {data['rfq_id']}")

        line = await fetch_one(
            self.db,
            f"""INSERT INTO rfq_items
                  (rfq_id, company_id, item_code, quantity, item_description, item_cost)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {RFQ_ITEM_FIELDS}""",
            rfq["id"],
            rfq["company_id"],
            data["item_code"],
            data["quantity"],
            data.get("item_description"),
            data.get("item_cost"),
        )
        await self.db.commit()
        logger.info("rfq.item_added", rfq_id=rfq["id"], item_code=data["item_code"])
        return line

    async def update_item(
        self, item_id: int, changes: dict, company_id: int | None = None
    ) -> dict:
        update = build_partial_update(changes, RFQ_ITEM_COLUMNS)
        cond = Conditions(*update.values).add("id", item_id).add("company_id", company_id)
        line = await fetch_one(
            self.db,
            f"""UPDATE rfq_items
                SET {update.set_clause}{cond.where()}
                RETURNING {RFQ_ITEM_FIELDS}""",
            *cond.params,
        )
        if not line:
            raise NotFoundError(f"No RFQ Item: {item_id}")
        await self.db.commit()
        return line

    async def remove_item(self, item_id: int, company_id: int | None = None) -> None:
        cond = Conditions().add("id", item_id).add("company_id", company_id)
        deleted = await fetch_one(
            self.db,
            f"DELETE FROM rfq_items{cond.where()} RETURNING id",
            *cond.params,
        )
        if not deleted:
            raise NotFoundError(f"No RFQ Item: {item_id}")
        await self.db.commit()
