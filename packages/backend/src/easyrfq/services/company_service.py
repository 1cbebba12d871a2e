"""Company service — tenants and their staff directory.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services run SQL against the session.
Errors are raised as AppError subclasses (NotFoundError, ...) and turned
into responses by the app's exception handler.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.db.sql import Conditions, build_partial_update, fetch_all, fetch_one
from easyrfq.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()

COMPANY_FIELDS = (
    "id, name, address_line1, address_line2, city, state, country, phone_main"
)

# camelCase request field -> column; city/state/country pass through as-is
COMPANY_COLUMNS = {
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "phoneMain": "phone_main",
}


class CompanyService:
    """Business logic for companies."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict) -> dict:
        """Create a company. Names are unique across the system."""
        duplicate = await fetch_one(
            self.db, "SELECT id FROM companies WHERE name = $1", data["name"]
        )
        if duplicate:
            raise BadRequestError(f"Duplicate company: {data['name']}")

        company = await fetch_one(
            self.db,
            f"""INSERT INTO companies
                  (name, address_line1, address_line2, city, state, country, phone_main)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                RETURNING {COMPANY_FIELDS}""",
            data["name"],
            data.get("address_line1"),
            data.get("address_line2"),
            data.get("city"),
            data.get("state"),
            data.get("country"),
            data.get("phone_main"),
        )
        await self.db.commit()
        logger.info("company.created", company_id=company["id"], name=company["name"])
        return company

    async def find_all(self, name: str | None = None) -> list[dict]:
        """All companies, optionally filtered by a case-insensitive name match."""
        cond = Conditions().add("name", f"%{name}%" if name else None, op="ILIKE")
        return await fetch_all(
            self.db,
            f"SELECT {COMPANY_FIELDS} FROM companies{cond.where()} ORDER BY name",
            *cond.params,
        )

    async def get(self, company_id: int) -> dict:
        company = await fetch_one(
            self.db,
            f"SELECT {COMPANY_FIELDS} FROM companies WHERE id = $1",
            company_id,
        )
        if not company:
            raise NotFoundError(f"No company with ID: {company_id}")
        return company

    async def get_by_name(self, name: str) -> dict:
        company = await fetch_one(
            self.db,
            f"SELECT {COMPANY_FIELDS} FROM companies WHERE name = $1",
            name,
        )
        if not company:
            raise NotFoundError(f"No company found with name: {name}")
        return company

    async def update(self, company_id: int, changes: dict) -> dict:
        """Partial update of address and phone fields."""
        update = build_partial_update(changes, COMPANY_COLUMNS)
        company = await fetch_one(
            self.db,
            f"""UPDATE companies
                SET {update.set_clause}
                WHERE id = ${update.next_param}
                RETURNING {COMPANY_FIELDS}""",
            *update.values,
            company_id,
        )
        if not company:
            raise NotFoundError(f"No company with ID: {company_id}")
        await self.db.commit()
        return company

    async def remove(self, company_id: int) -> None:
        deleted = await fetch_one(
            self.db,
            "DELETE FROM companies WHERE id = $1 RETURNING id",
            company_id,
        )
        if not deleted:
            raise NotFoundError(f"No company with ID: {company_id}")
        await self.db.commit()
        logger.info("company.deleted", company_id=company_id)

    async def get_directory(self, company_id: int) -> dict:
        """Company info plus everyone who works there."""
        company = await self.get(company_id)
        users = await fetch_all(
            self.db,
            """SELECT id, full_name, email, phone, is_admin
               FROM users
               WHERE company_id = $1
               ORDER BY full_name""",
            company_id,
        )
        return {"company": company, "users": users}
