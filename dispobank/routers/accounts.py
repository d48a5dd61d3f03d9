"""
Accounts router — account lifecycle endpoints.

Endpoints (require a user JWT, scoped to the authenticated user):
  POST   /accounts                             — Create an account
  GET    /accounts                             — List own accounts
  GET    /accounts/{account_id}                — Get own account
  PUT    /accounts/{account_id}                — Update name, dispo, limit
  DELETE /accounts/{account_id}                — Detach the account from its owner
  GET    /accounts/{account_id}/transactions   — Transfers in or out of the account

Path ids are taken as plain strings and parsed by the service, so a
malformed id yields MAPPING_ERROR (400) like every other invalid input.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.database import get_db
from dispobank.dependencies import get_current_user
from dispobank.exceptions import unwrap
from dispobank.models.user import User
from dispobank.schemas.account import AccountCreateRequest, AccountUpdateRequest, AccountView
from dispobank.schemas.common import ValueResponse
from dispobank.schemas.transaction import TransactionView
from dispobank.services import account_service, transaction_service

router = APIRouter()


@router.post(
    "",
    response_model=ValueResponse[uuid.UUID],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new account",
)
async def create_account(
    request: AccountCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an account owned by the authenticated user. The balance starts
    at zero; the name must be unique among the user's accounts and the
    limit must be positive.
    """
    result = await account_service.create_account(
        db,
        user.id,
        name=request.name,
        dispo_cents=request.dispo_cents,
        limit_cents=request.limit_cents,
        account_id=request.account_id,
    )
    return ValueResponse(value=unwrap(result))


@router.get("", response_model=ValueResponse[list[AccountView]], summary="List your accounts")
async def list_accounts(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ValueResponse(value=unwrap(await account_service.list_accounts_for_user(db, user.id)))


@router.get(
    "/{account_id}",
    response_model=ValueResponse[AccountView],
    summary="Get account details",
)
async def get_account(
    account_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Returns 403 if the account belongs to a different user, 404 if it doesn't exist."""
    return ValueResponse(value=unwrap(await account_service.get_account(db, user.id, account_id)))


@router.put(
    "/{account_id}",
    response_model=ValueResponse[uuid.UUID],
    summary="Update an account",
)
async def update_account(
    account_id: str,
    request: AccountUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await account_service.update_account(
        db,
        user.id,
        account_id,
        name=request.name,
        dispo_cents=request.dispo_cents,
        limit_cents=request.limit_cents,
    )
    return ValueResponse(value=unwrap(result))


@router.delete(
    "/{account_id}",
    response_model=ValueResponse[uuid.UUID],
    summary="Delete (detach) an account",
)
async def delete_account(
    account_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return ValueResponse(value=unwrap(await account_service.delete_account(db, user.id, account_id)))


@router.get(
    "/{account_id}/transactions",
    response_model=ValueResponse[list[TransactionView]],
    summary="List transactions of an account",
)
async def list_account_transactions(
    account_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Transfers where the account is origin or target, oldest first."""
    result = await transaction_service.list_transactions_for_user_account(db, user.id, account_id)
    return ValueResponse(value=unwrap(result))
