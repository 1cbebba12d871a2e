"""User API routes.

Learn: Creating and listing users is admin-only (self-service signup
goes through /auth/register). Everything under /users/{id} is open to
that user and to admins, via ensure_correct_user_or_admin, which
compares the {id} path parameter with the token's id.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from easyrfq.auth.dependencies import (
    ensure_admin,
    ensure_correct_user_or_admin,
    get_token_service,
)
from easyrfq.auth.tokens import TokenService
from easyrfq.db.engine import get_db
from easyrfq.schemas.common import DeletedResponse
from easyrfq.schemas.user import (
    PasswordChange,
    PasswordChanged,
    UserCreate,
    UserCreated,
    UserDetailResponse,
    UserList,
    UserResponse,
    UserUpdate,
)
from easyrfq.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(request: Request, db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, work_factor=request.app.state.settings.bcrypt_work_factor)


@router.post(
    "",
    response_model=UserCreated,
    status_code=201,
    dependencies=[Depends(ensure_admin)],
)
async def create_user(
    body: UserCreate,
    svc: UserService = Depends(_svc),
    tokens: TokenService = Depends(get_token_service),
):
    """Admin creates a user (possibly another admin) and gets their token."""
    user = await svc.register(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        phone=body.phone,
        company_id=body.company_id,
        is_admin=body.is_admin,
    )
    return {"user": user, "token": tokens.create_token(user)}


@router.get("", response_model=UserList, dependencies=[Depends(ensure_admin)])
async def list_users(svc: UserService = Depends(_svc)):
    return {"users": await svc.find_all()}


@router.get(
    "/{id}",
    response_model=UserDetailResponse,
    dependencies=[Depends(ensure_correct_user_or_admin)],
)
async def get_user(id: int, svc: UserService = Depends(_svc)):
    return {"user": await svc.get(id)}


@router.patch(
    "/{id}",
    response_model=UserResponse,
    dependencies=[Depends(ensure_correct_user_or_admin)],
)
async def update_user(id: int, body: UserUpdate, svc: UserService = Depends(_svc)):
    return {"user": await svc.update(id, body.changes())}


@router.patch(
    "/{id}/password",
    response_model=PasswordChanged,
    dependencies=[Depends(ensure_correct_user_or_admin)],
)
async def change_password(
    id: int, body: PasswordChange, svc: UserService = Depends(_svc)
):
    user = await svc.change_password(id, body.current_password, body.new_password)
    return {"message": "Password updated successfully", "user": user}


@router.delete(
    "/{id}",
    response_model=DeletedResponse,
    dependencies=[Depends(ensure_correct_user_or_admin)],
)
async def delete_user(id: int, svc: UserService = Depends(_svc)):
    await svc.remove(id)
    return {"deleted": str(id)}
