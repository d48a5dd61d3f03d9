"""
Account service — business logic for the account lifecycle.

This module handles:
  - Account creation (name unique per owner, limit must be positive)
  - Account update (name, dispo and limit; the balance is preserved)
  - Account deletion (detaches the account from its owner, keeps the row)
  - Account retrieval (single or list, scoped to the requesting user)

Ownership enforcement:
  Every function takes the requesting user's id, resolves the user, and
  checks ownership through dispobank.services.ownership. The router passes
  the authenticated user's id; there is no way to reach another user's
  account through this service.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    MappingError,
    UserNotFoundError,
)
from dispobank.identifiers import require_id
from dispobank.models.account import Account
from dispobank.models.user import User
from dispobank.repositories import account_repository, user_repository
from dispobank.schemas.account import AccountView
from dispobank.services.boundary import service_operation
from dispobank.services.ownership import ensure_owns_any

logger = logging.getLogger(__name__)


async def _resolve_user(db: AsyncSession, user_id) -> User:
    user_uuid = require_id(user_id, "userId")
    user = await user_repository.find(db, user_uuid)
    if user is None:
        raise UserNotFoundError(user_uuid)
    return user


async def _resolve_owned_account(db: AsyncSession, user: User, account_id) -> Account:
    account_uuid = require_id(account_id, "accountId")
    account = await account_repository.find(db, account_uuid)
    if account is None:
        raise AccountNotFoundError(account_uuid)
    await ensure_owns_any(db, user.id, account)
    return account


async def _ensure_name_free(
    db: AsyncSession,
    user: User,
    name: str,
    account_id: uuid.UUID | None = None,
) -> None:
    existing = await account_repository.find_by_user_and_name(db, user.id, name)
    if existing is not None and existing.id != account_id:
        raise AccountAlreadyExistsError(
            f"Account with name '{name}' already exist for user with userId '{user.id}'."
        )


@service_operation("create account")
async def create_account(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    name: str,
    dispo_cents: int,
    limit_cents: int,
    account_id: uuid.UUID | str | None = None,
) -> uuid.UUID:
    """
    Create a new account owned by the user. The balance starts at 0.

    Returns:
        Success(id of the new account), or a Failure:
          MAPPING_ERROR (bad id, limit <= 0), USER_NOT_FOUND,
          ACCOUNT_ALREADY_EXIST (id taken, or name taken for this user),
          DATABASE_ERROR.
    """
    logger.info("Start creation of account '%s' for user with userId '%s'.", name, user_id)
    user = await _resolve_user(db, user_id)
    explicit_id = require_id(account_id, "accountId") if account_id is not None else None

    try:
        account = Account(
            id=explicit_id or uuid.uuid4(),
            user_id=user.id,
            name=name,
            dispo_cents=dispo_cents,
            limit_cents=limit_cents,
            balance_cents=0,
        )
    except ValueError as e:
        raise MappingError(f"Given account '{name}' is not valid: {e}") from e

    if await account_repository.find(db, account.id) is not None:
        raise AccountAlreadyExistsError(
            f"Account with accountId '{account.id}' already exist in database."
        )
    await _ensure_name_free(db, user, name)

    await account_repository.save(db, account)
    logger.info("Successfully created account '%s' for user with userId '%s'.", account.id, user.id)
    return account.id


@service_operation("update account")
async def update_account(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    account_id: uuid.UUID | str | None,
    name: str,
    dispo_cents: int,
    limit_cents: int,
) -> uuid.UUID:
    """
    Overwrite the mutable fields of an account the user owns.

    The balance is never touched here; it only changes through transfers.
    """
    logger.info("Start update of account '%s' for user with userId '%s'.", account_id, user_id)
    user = await _resolve_user(db, user_id)
    account = await _resolve_owned_account(db, user, account_id)
    await _ensure_name_free(db, user, name, account_id=account.id)

    try:
        account.limit_cents = limit_cents
    except ValueError as e:
        raise MappingError(f"Given account '{name}' is not valid: {e}") from e
    account.name = name
    account.dispo_cents = dispo_cents

    await account_repository.update(db, account)
    logger.info("Successfully updated account '%s'.", account.id)
    return account.id


@service_operation("delete account")
async def delete_account(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    account_id: uuid.UUID | str | None,
) -> uuid.UUID:
    """
    Detach an account from its owner.

    The row is kept (transactions still reference it); it simply no longer
    belongs to anyone, so its owner can neither see nor use it afterwards.
    """
    logger.info("Start deleting of account '%s' for user with userId '%s'.", account_id, user_id)
    user = await _resolve_user(db, user_id)
    account = await _resolve_owned_account(db, user, account_id)

    account.user_id = None
    await account_repository.update(db, account)
    logger.info("Successfully deleted account with accountId '%s'.", account.id)
    return account.id


@service_operation("get account")
async def get_account(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    account_id: uuid.UUID | str | None,
) -> AccountView:
    """Get a single account the user owns."""
    user = await _resolve_user(db, user_id)
    account = await _resolve_owned_account(db, user, account_id)
    return AccountView.from_account(account)


@service_operation("list accounts")
async def list_accounts_for_user(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
) -> list[AccountView]:
    """List every account the user owns, oldest first."""
    user = await _resolve_user(db, user_id)
    accounts = await account_repository.find_all_for_user(db, user.id)
    return [AccountView.from_account(a) for a in accounts]
