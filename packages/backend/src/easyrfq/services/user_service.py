"""User service — login, registration and profile management.

Learn: Passwords are only ever stored as bcrypt hashes, and the hash
never leaves this module: every query that returns a user to a caller
selects USER_FIELDS, which leaves the password column out.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.password import hash_password, verify_password
from easyrfq.db.sql import Conditions, build_partial_update, fetch_all, fetch_one
from easyrfq.errors import BadRequestError, NotFoundError, UnauthorizedError

logger = structlog.get_logger()

USER_FIELDS = "id, email, full_name, phone, is_admin, company_id"

# camelCase request field -> column; email/phone/password pass through
USER_COLUMNS = {"fullName": "full_name"}


class UserService:
    """Business logic for users."""

    def __init__(self, db: AsyncSession, work_factor: int = 12):
        self.db = db
        self.work_factor = work_factor

    async def authenticate(self, email: str, password: str) -> dict:
        """Return the user for a matching email/password.

        Unknown email and wrong password fail identically.
        """
        user = await fetch_one(
            self.db,
            f"SELECT {USER_FIELDS}, password FROM users WHERE email = $1",
            email,
        )
        if user and verify_password(password, user.pop("password")):
            return user

        logger.info("auth.login_failed", email=email)
        raise UnauthorizedError("Invalid email/password")

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        company_id: int,
        phone: str | None = None,
        is_admin: bool = False,
    ) -> dict:
        duplicate = await fetch_one(
            self.db, "SELECT id FROM users WHERE email = $1", email
        )
        if duplicate:
            raise BadRequestError(f"Duplicate email: {email}")

        user = await fetch_one(
            self.db,
            f"""INSERT INTO users
                  (email, password, full_name, phone, is_admin, company_id)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {USER_FIELDS}""",
            email,
            hash_password(password, self.work_factor),
            full_name,
            phone,
            is_admin,
            company_id,
        )
        await self.db.commit()
        logger.info(
            "user.registered", user_id=user["id"], company_id=company_id, is_admin=is_admin
        )
        return user

    async def find_all(self, company_id: int | None = None) -> list[dict]:
        cond = Conditions().add("company_id", company_id)
        return await fetch_all(
            self.db,
            f"SELECT {USER_FIELDS} FROM users{cond.where()} ORDER BY id",
            *cond.params,
        )

    async def get(self, user_id: int) -> dict:
        """A user with their company and the ids of their RFQs and quotes."""
        user = await fetch_one(
            self.db,
            """SELECT u.id, u.email, u.full_name, u.phone, u.is_admin,
                      c.id AS company_id,
                      c.name AS company_name,
                      c.address_line1 AS company_address_line1,
                      c.address_line2 AS company_address_line2,
                      c.city AS company_city,
                      c.state AS company_state,
                      c.country AS company_country,
                      c.phone_main AS company_phone_main
               FROM users AS u
               JOIN companies AS c ON u.company_id = c.id
               WHERE u.id = $1""",
            user_id,
        )
        if not user:
            raise NotFoundError(f"No user with id of: {user_id}")

        company = {k: user.pop(k) for k in list(user) if k.startswith("company_")}
        rfqs = await fetch_all(
            self.db, "SELECT id FROM rfqs WHERE user_id = $1 ORDER BY id", user_id
        )
        quotes = await fetch_all(
            self.db, "SELECT id FROM quotes WHERE user_id = $1 ORDER BY id", user_id
        )
        return {
            **user,
            "company": company,
            "rfqs": [r["id"] for r in rfqs],
            "quotes": [q["id"] for q in quotes],
        }

    async def update(self, user_id: int, changes: dict) -> dict:
        """Partial update. A new password is hashed before it is stored."""
        changes = dict(changes)
        if changes.get("password"):
            changes["password"] = hash_password(changes["password"], self.work_factor)

        update = build_partial_update(changes, USER_COLUMNS)
        user = await fetch_one(
            self.db,
            f"""UPDATE users
                SET {update.set_clause}
                WHERE id = ${update.next_param}
                RETURNING {USER_FIELDS}""",
            *update.values,
            user_id,
        )
        if not user:
            raise NotFoundError(f"No user with id of: {user_id}")
        await self.db.commit()
        return user

    async def change_password(
        self, user_id: int, current_password: str, new_password: str
    ) -> dict:
        row = await fetch_one(
            self.db, "SELECT password FROM users WHERE id = $1", user_id
        )
        if not row:
            raise NotFoundError(f"No user with id of: {user_id}")
        if not verify_password(current_password, row["password"]):
            raise UnauthorizedError("Current password is incorrect")

        user = await self.update(user_id, {"password": new_password})
        logger.info("user.password_changed", user_id=user_id)
        return user

    async def remove(self, user_id: int) -> None:
        deleted = await fetch_one(
            self.db, "DELETE FROM users WHERE id = $1 RETURNING id", user_id
        )
        if not deleted:
            raise NotFoundError(f"No user with id of: {user_id}")
        await self.db.commit()
        logger.info("user.deleted", user_id=user_id)
