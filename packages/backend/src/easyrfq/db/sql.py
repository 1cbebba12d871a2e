"""Hand-built SQL helpers.

Learn: The services write their queries as plain SQL with asyncpg-style
positional parameters ($1, $2, ...) and run them on the session's
connection with exec_driver_sql, so the SQL reaches the driver
untouched. Three pieces live here:

1. build_partial_update() — turns a sparse {field: value} mapping into
   the SET clause of an UPDATE plus its ordered values.
2. Conditions — optional WHERE filters that keep numbering parameters.
3. fetch_one / fetch_all — run one statement and return rows
   as plain dicts.
"""

from collections.abc import Mapping
from typing import Any, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.errors import BadRequestError


class PartialUpdate(NamedTuple):
    set_clause: str
    values: list[Any]

    @property
    def next_param(self) -> int:
        """First free positional parameter number, for the WHERE clause."""
        return len(self.values) + 1


def build_partial_update(
    fields: Mapping[str, Any],
    name_map: Mapping[str, str],
) -> PartialUpdate:
    """Build the SET clause for updating only the supplied fields.

    Fields are walked in insertion order; field N becomes `"column"=$N`
    and its value lands at values[N-1]. Fields missing from name_map use
    their own name as the column.

        >>> build_partial_update({"firstName": "Aliya", "age": 32},
        ...                      {"firstName": "first_name"})
        PartialUpdate(set_clause='"first_name"=$1, "age"=$2', values=['Aliya', 32])

    Callers append their own WHERE values after `values`, starting at
    `$<next_param>`. Nothing is validated beyond non-emptiness.
    """
    if not fields:
        raise BadRequestError("No data")

    fragments = []
    values = []
    for idx, (field, value) in enumerate(fields.items(), start=1):
        column = name_map.get(field, field)
        fragments.append(f'"{column}"=${idx}')
        values.append(value)

    return PartialUpdate(set_clause=", ".join(fragments), values=values)


class Conditions:
    """Accumulates optional `column <op> $n` conditions for a WHERE clause.

    Starts from any positional values already in the statement (e.g. a
    PartialUpdate's values) so parameter numbers keep counting up.
    None values are skipped, which is how optional filters and
    admin-vs-tenant scoping stay a single query.
    """

    def __init__(self, *params: Any):
        self.params = list(params)
        self._clauses: list[str] = []

    def add(self, column: str, value: Any, op: str = "=") -> "Conditions":
        if value is None or value == "":
            return self
        self.params.append(value)
        self._clauses.append(f"{column} {op} ${len(self.params)}")
        return self

    def where(self) -> str:
        if not self._clauses:
            return ""
        return " WHERE " + " AND ".join(self._clauses)


async def fetch_all(db: AsyncSession, sql: str, *params: Any) -> list[dict]:
    conn = await db.connection()
    result = await conn.exec_driver_sql(sql, tuple(params))
    return [dict(row) for row in result.mappings()]


async def fetch_one(db: AsyncSession, sql: str, *params: Any) -> Optional[dict]:
    rows = await fetch_all(db, sql, *params)
    return rows[0] if rows else None
