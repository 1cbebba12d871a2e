"""API route aggregation.

All routers registered here get mounted in main.py under /api/v1.

Learn: Authorization is declared per route with the guards from
auth/dependencies.py, not per router, because most resources mix access
levels (a company can be created anonymously but only an admin may
delete it). Health and auth routes are fully open.
"""

from fastapi import APIRouter

from easyrfq.api.auth import router as auth_router
from easyrfq.api.companies import router as companies_router
from easyrfq.api.customers import router as customers_router
from easyrfq.api.health import router as health_router
from easyrfq.api.items import router as items_router
from easyrfq.api.quotes import router as quotes_router
from easyrfq.api.rfqs import router as rfqs_router
from easyrfq.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(companies_router, tags=["companies"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(customers_router, tags=["customers"])
api_router.include_router(items_router, tags=["items"])
api_router.include_router(rfqs_router, tags=["rfqs"])
api_router.include_router(quotes_router, tags=["quotes"])
