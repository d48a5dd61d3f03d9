"""
Transactions router — create and read transfers.

Endpoints (require a user JWT):
  POST /transactions                   — Transfer money from an own account
  GET  /transactions/{transaction_id}  — Get a transfer you are part of

Deleting a transfer is administrative (see the admin router).
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.database import get_db
from dispobank.dependencies import get_current_user
from dispobank.exceptions import unwrap
from dispobank.models.user import User
from dispobank.schemas.common import ValueResponse
from dispobank.schemas.transaction import TransactionView, TransferRequest
from dispobank.services import transaction_service

router = APIRouter()


@router.post(
    "",
    response_model=ValueResponse[uuid.UUID],
    status_code=status.HTTP_201_CREATED,
    summary="Transfer money between accounts",
)
async def create_transfer(
    request: TransferRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Transfer money from one account to another.

    - **origin_id**: Must belong to the authenticated user
    - **target_id**: Can belong to any user, but not be the origin
    - **amount_cents**: Positive, at most the origin's limit and at most
      its balance plus dispo
    """
    result = await transaction_service.create_transfer(
        db,
        user.id,
        origin_id=request.origin_id,
        target_id=request.target_id,
        amount_cents=request.amount_cents,
        transaction_id=request.transaction_id,
    )
    return ValueResponse(value=unwrap(result))


@router.get(
    "/{transaction_id}",
    response_model=ValueResponse[TransactionView],
    summary="Get a transaction",
)
async def get_transaction(
    transaction_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Returns 403 unless you own the origin or the target account."""
    result = await transaction_service.get_transaction(db, user.id, transaction_id)
    return ValueResponse(value=unwrap(result))
