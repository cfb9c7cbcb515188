"""User Routes: accounts, role assignment and the caller's own profile.

Invariants:
    - /me is registered before /{user_id}
    - password_hash never leaves the service layer
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.common import Pagination
from hrms.schemas.user import (
    CurrentUserResponse, UserCreate, UserList, UserResponse, UserUpdate,
)
from hrms.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me", response_model=CurrentUserResponse)
async def current_user(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """The caller's account, employee profile id and effective permissions."""
    return await UserService(db, actor).me()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await UserService(db, actor).create(body)


@router.get("", response_model=UserList)
async def list_users(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    role: str | None = None,
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    users, total = await UserService(db, actor).list_users(
        limit, offset, role=role, status=status_filter, search=search,
    )
    return UserList(users=users, pagination=Pagination(limit=limit, offset=offset, total=total))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await UserService(db, actor).get(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await UserService(db, actor).update(user_id, body)


@router.delete("/{user_id}", response_model=UserResponse)
async def deactivate_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Soft delete: the account is kept with status inactive."""
    return await UserService(db, actor).deactivate(user_id)
