"""
Users router — registration and self-service profile endpoints.

Endpoints:
  POST   /users          — Register (no authentication)
  GET    /users          — Get own profile, including owned accounts
  PUT    /users          — Update own profile
  DELETE /users          — Delete own profile (accounts are detached, not deleted)
  PUT    /users/password — Change own password
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.database import get_db
from dispobank.dependencies import get_current_user
from dispobank.exceptions import unwrap
from dispobank.models.user import User
from dispobank.schemas.common import ValueResponse
from dispobank.schemas.user import (
    PasswordChangeRequest,
    UserCreateRequest,
    UserUpdateRequest,
    UserView,
)
from dispobank.services import user_service

router = APIRouter()


@router.post(
    "",
    response_model=ValueResponse[uuid.UUID],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def create_user(request: UserCreateRequest, db: AsyncSession = Depends(get_db)):
    result = await user_service.create_user(
        db,
        first_name=request.first_name,
        last_name=request.last_name,
        birthdate=request.birthdate,
        password=request.password,
        user_id=request.user_id,
    )
    return ValueResponse(value=unwrap(result))


@router.get("", response_model=ValueResponse[UserView], summary="Get your profile")
async def get_user(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ValueResponse(value=unwrap(await user_service.find_user(db, user.id)))


@router.put("", response_model=ValueResponse[uuid.UUID], summary="Update your profile")
async def update_user(
    request: UserUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await user_service.update_user(
        db,
        user.id,
        first_name=request.first_name,
        last_name=request.last_name,
        birthdate=request.birthdate,
        password=request.password,
    )
    return ValueResponse(value=unwrap(result))


@router.delete("", response_model=ValueResponse[uuid.UUID], summary="Delete your profile")
async def delete_user(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ValueResponse(value=unwrap(await user_service.delete_user(db, user.id)))


@router.put(
    "/password",
    response_model=ValueResponse[uuid.UUID],
    summary="Change your password",
)
async def update_password(
    request: PasswordChangeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await user_service.update_password(
        db, user.id, request.existing_password, request.new_password
    )
    return ValueResponse(value=unwrap(result))
