"""Auth API — login and self-registration.

Learn: Both routes answer with a bare token ({"token": "..."}); clients
decode the payload themselves to learn their id, company and admin flag.
- POST /auth/token → email/password → token
- POST /auth/register → new (never admin) user → token
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.dependencies import get_token_service
from easyrfq.auth.tokens import TokenService
from easyrfq.db.engine import get_db
from easyrfq.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from easyrfq.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _svc(request: Request, db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, work_factor=request.app.state.settings.bcrypt_work_factor)


@router.post("/token", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_svc),
    tokens: TokenService = Depends(get_token_service),
):
    user = await svc.authenticate(body.email, body.password)
    return {"token": tokens.create_token(user)}


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    body: RegisterRequest,
    svc: UserService = Depends(_svc),
    tokens: TokenService = Depends(get_token_service),
):
    user = await svc.register(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        phone=body.phone,
        company_id=body.company_id,
        is_admin=False,
    )
    return {"token": tokens.create_token(user)}
