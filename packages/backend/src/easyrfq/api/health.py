"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and
Postgres is reachable. A database outage reports "degraded" rather than
failing the request, so load balancers can tell the two apart.
"""

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from easyrfq import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["postgres"] = "ok"
    except (SQLAlchemyError, OSError) as e:
        checks["postgres"] = f"error: {e}"

    status = "healthy" if checks["postgres"] == "ok" else "degraded"
    return {"status": status, **checks}
