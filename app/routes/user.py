"""
User routes

    GET    /users               list accounts (view capability on ``users``)
    POST   /users               create an account with roles (top tier)
    GET    /users/me            the caller's own account
    GET    /users/{user_id}     one account (self or admin)
    PATCH  /users/{user_id}     name / email / password (self or admin)
    PATCH  /users/{user_id}/access  roles and collection capabilities (top tier)
    DELETE /users/{user_id}     delete an account (top tier)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_actor, get_current_user
from app.constants.collections import CollectionName
from app.database import get_db
from app.models.user import User
from app.permissions_config.permission_dependencies import require_collection_access, require_self_or_admin
from app.permissions_config.permissions import ActorSnapshot, Operation
from app.schemas import AdminUserCreate, UserAccessUpdate, UserResponse, UserUpdate
from app.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


def _role_values(roles):
    return None if roles is None else [getattr(r, "value", r) for r in roles]


@router.get("/users/me", response_model=UserResponse)
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    _actor: ActorSnapshot = Depends(require_collection_access(Operation.READ, CollectionName.USERS.value)),
):
    return await user_service.list_users(db, skip=skip, limit=limit)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
):
    return await user_service.create_user(
        email=user_in.email,
        password=user_in.password,
        db=db,
        name=user_in.name,
        roles=_role_values(user_in.roles),
        editable_collections=user_in.editable_collections,
        visible_collections=user_in.visible_collections,
        actor=actor,
    )


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _actor: ActorSnapshot = Depends(require_self_or_admin()),
):
    return await user_service.get_user(user_id, db)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
):
    updates = user_in.model_dump(exclude_unset=True)
    return await user_service.update_profile(actor, user_id, updates, db)


@router.patch("/users/{user_id}/access", response_model=UserResponse)
async def update_user_access(
    user_id: int,
    access_in: UserAccessUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
):
    return await user_service.update_user_access(
        actor,
        user_id,
        db,
        roles=_role_values(access_in.roles),
        editable_collections=access_in.editable_collections,
        visible_collections=access_in.visible_collections,
    )


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[ActorSnapshot] = Depends(get_current_actor),
):
    await user_service.delete_user(actor, user_id, db)
