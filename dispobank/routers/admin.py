"""
Admin router — endpoints for administrators only.

Endpoints:
  GET    /admin/transactions                    — List ALL transactions
  DELETE /admin/transactions/{transaction_id}   — Delete (reverse) a transfer
  GET    /admin/users                           — List ALL users
  PUT    /admin/users/{user_id}/password        — Reset a user's password

All endpoints require an administrator JWT (see dependencies.require_admin).
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.database import get_db
from dispobank.dependencies import require_admin
from dispobank.exceptions import unwrap
from dispobank.models.administrator import Administrator
from dispobank.schemas.common import ValueResponse
from dispobank.schemas.transaction import TransactionView
from dispobank.schemas.user import UserView
from dispobank.services import transaction_service, user_service

router = APIRouter()


@router.get(
    "/transactions",
    response_model=ValueResponse[list[TransactionView]],
    summary="[Admin] List all transactions",
)
async def list_all_transactions(
    admin: Administrator = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ValueResponse(value=unwrap(await transaction_service.list_all_transactions(db)))


@router.delete(
    "/transactions/{transaction_id}",
    response_model=ValueResponse[uuid.UUID],
    summary="[Admin] Delete a transaction",
)
async def delete_transaction(
    transaction_id: str,
    admin: Administrator = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a transfer. The origin account gets the amount back and the
    target account gives it up, atomically with the deletion.
    """
    return ValueResponse(value=unwrap(await transaction_service.delete_transfer(db, transaction_id)))


@router.get(
    "/users",
    response_model=ValueResponse[list[UserView]],
    summary="[Admin] List all users",
)
async def list_users(
    admin: Administrator = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ValueResponse(value=unwrap(await user_service.list_users(db)))


@router.put(
    "/users/{user_id}/password",
    response_model=ValueResponse[str],
    summary="[Admin] Reset a user's password",
)
async def reset_password(
    user_id: str,
    admin: Administrator = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Returns the generated password; the user should change it afterwards."""
    return ValueResponse(value=unwrap(await user_service.reset_password(db, user_id)))
