"""
Transaction service — the transfer engine.

THIS IS THE MOST CRITICAL FILE IN THE PROJECT. It decides whether a
transfer may be created, how transfers affect balances, and how deleting a
transfer reverses that effect.

Creating a transfer (create_transfer), checks in order, first failure wins:
  1. user id parses and the user exists         MAPPING_ERROR / USER_NOT_FOUND
  2. origin account exists                      ACCOUNT_NOT_FOUND
  3. origin belongs to the user                 NOT_ALLOWED
  4. target account exists                      ACCOUNT_NOT_FOUND
  5. the Transaction can be built (amount > 0)  MAPPING_ERROR
  6. origin and target differ                   TRANSACTION_REQUEST_INVALID
  7. balance + dispo >= amount                  TRANSACTION_REQUEST_INVALID
  8. limit >= amount                            TRANSACTION_REQUEST_INVALID
  9. the id is not taken                        DATABASE_ERROR

Balance timing:
  Funds and limit are validated against the origin's current balance, but
  creating a transfer does NOT move any money. Balances change only when a
  transfer is deleted: the origin gets the amount back and the target gives
  it up. settings.APPLY_BALANCE_ON_CREATE switches to debiting the origin
  and crediting the target at creation time; with that switch on, deleting
  a transfer restores both balances to what they were before it.

Atomicity:
  Each public function runs as one unit of work (@service_operation): the
  account updates and the transaction insert/delete are committed together
  or rolled back together.

Concurrency:
  Both accounts of a transfer are loaded with SELECT ... FOR UPDATE, always
  in sorted-id order, and re-read even if the session already holds them.
  On PostgreSQL this serializes check-then-write on the same account (no
  lost updates) and the fixed order prevents A->B / B->A deadlocks. A
  delete also locks the transaction row, and only reverses balances when
  its DELETE actually removed the row. On SQLite every transaction starts
  with BEGIN IMMEDIATE (see database.create_engine), so the whole
  read-check-write sequence runs under the database write lock.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.config import settings
from dispobank.exceptions import (
    AccountNotFoundError,
    MappingError,
    TransactionNotFoundError,
    TransactionRequestInvalidError,
    UserNotFoundError,
)
from dispobank.identifiers import require_id
from dispobank.models.account import Account
from dispobank.models.transaction import Transaction
from dispobank.repositories import account_repository, transaction_repository, user_repository
from dispobank.schemas.transaction import TransactionView
from dispobank.services.boundary import service_operation
from dispobank.services.ownership import ensure_owns_any

logger = logging.getLogger(__name__)


async def _lock_accounts(
    db: AsyncSession,
    *account_ids: uuid.UUID,
) -> dict[uuid.UUID, Account | None]:
    """Load (and lock) accounts in sorted-id order to keep lock order consistent."""
    locked = {}
    for account_id in sorted(set(account_ids)):
        locked[account_id] = await account_repository.find(db, account_id, for_update=True)
    return locked


def _build_transaction(
    origin: Account,
    target: Account,
    amount_cents: int,
    transaction_id: uuid.UUID | None,
) -> Transaction:
    try:
        return Transaction(
            id=transaction_id or uuid.uuid4(),
            origin_id=origin.id,
            target_id=target.id,
            amount_cents=amount_cents,
        )
    except ValueError as e:
        raise MappingError(
            f"Given transaction of {amount_cents} cents from '{origin.id}' to '{target.id}' "
            f"is not valid: {e}"
        ) from e


@service_operation("create transfer")
async def create_transfer(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    origin_id: uuid.UUID | str | None,
    target_id: uuid.UUID | str | None,
    amount_cents: int,
    transaction_id: uuid.UUID | str | None = None,
) -> uuid.UUID:
    """
    Create a transfer of amount_cents from origin to target.

    Args:
        db: Database session.
        user_id: The requesting user; must own the origin account.
        origin_id: Account the money leaves.
        target_id: Account the money arrives at (any owner).
        amount_cents: Positive integer amount in cents.
        transaction_id: Optional explicit id for the new transaction.

    Returns:
        Success(id of the new transaction), or a Failure (see module docstring).
    """
    logger.info(
        "Start creation of transaction of %s cents from '%s' to '%s'.",
        amount_cents, origin_id, target_id,
    )
    user_uuid = require_id(user_id, "userId")
    origin_uuid = require_id(origin_id, "origin accountId")
    target_uuid = require_id(target_id, "target accountId")
    explicit_id = require_id(transaction_id, "transactionId") if transaction_id is not None else None

    if await user_repository.find(db, user_uuid) is None:
        raise UserNotFoundError(user_uuid)

    accounts = await _lock_accounts(db, origin_uuid, target_uuid)

    origin = accounts[origin_uuid]
    if origin is None:
        raise AccountNotFoundError(origin_uuid)

    await ensure_owns_any(
        db,
        user_uuid,
        origin,
        detail=(
            f"Account with accountId '{origin.id}' does not belong to user "
            f"with userId '{user_uuid}'"
        ),
    )

    target = accounts[target_uuid]
    if target is None:
        raise AccountNotFoundError(target_uuid)

    transaction = _build_transaction(origin, target, amount_cents, explicit_id)

    if origin.id == target.id:
        raise TransactionRequestInvalidError(
            "Origin and target of a transaction must be different accounts.",
            account_id=origin.id,
            requested_cents=amount_cents,
        )

    if origin.balance_cents + origin.dispo_cents < amount_cents:
        logger.error(
            "Origin account with accountId '%s' has not enough balance for transaction.",
            origin.id,
        )
        raise TransactionRequestInvalidError(
            "Not enough balance for transaction.",
            account_id=origin.id,
            requested_cents=amount_cents,
        )

    if origin.limit_cents < amount_cents:
        logger.error(
            "Amount %s exceeds the limit %s of origin account with accountId '%s'.",
            amount_cents, origin.limit_cents, origin.id,
        )
        raise TransactionRequestInvalidError(
            "Not enough balance for transaction.",
            account_id=origin.id,
            requested_cents=amount_cents,
        )

    persisted = await transaction_repository.save(db, transaction)

    if settings.APPLY_BALANCE_ON_CREATE:
        origin.balance_cents -= amount_cents
        target.balance_cents += amount_cents
        await account_repository.update(db, origin)
        await account_repository.update(db, target)

    logger.info("Successfully created transaction '%s'.", persisted.id)
    return persisted.id


@service_operation("delete transfer")
async def delete_transfer(
    db: AsyncSession,
    transaction_id: uuid.UUID | str | None,
) -> uuid.UUID:
    """
    Delete a transfer and reverse its balance effect.

    The origin account gets amount_cents back, the target account gives
    amount_cents up, and the transaction record is removed, all in one
    unit of work.

    Returns:
        Success(id of the deleted transaction), or
        Failure(MAPPING_ERROR / TRANSACTION_NOT_FOUND / DATABASE_ERROR).
    """
    logger.info("Start deletion of transaction with transactionId '%s'.", transaction_id)
    transaction_uuid = require_id(transaction_id, "transactionId")

    # Lock order: transaction row first, then its accounts. A concurrent
    # delete of the same transfer waits here and then finds nothing.
    transaction = await transaction_repository.find(db, transaction_uuid, for_update=True)
    if transaction is None:
        raise TransactionNotFoundError(transaction_uuid)

    amount_cents = transaction.amount_cents
    accounts = await _lock_accounts(db, transaction.origin_id, transaction.target_id)
    origin = accounts[transaction.origin_id]
    target = accounts[transaction.target_id]
    if origin is None:
        raise AccountNotFoundError(transaction.origin_id)
    if target is None:
        raise AccountNotFoundError(transaction.target_id)

    if not await transaction_repository.delete(db, transaction):
        raise TransactionNotFoundError(transaction_uuid)

    origin.balance_cents += amount_cents
    target.balance_cents -= amount_cents
    await account_repository.update(db, origin)
    await account_repository.update(db, target)

    logger.info("Successfully deleted transaction with transactionId '%s'.", transaction_uuid)
    return transaction_uuid


@service_operation("get transaction")
async def get_transaction(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    transaction_id: uuid.UUID | str | None,
) -> TransactionView:
    """
    Get a single transaction, visible to the owner of its origin or target.

    Raises (as Failure):
        MAPPING_ERROR: malformed user or transaction id.
        USER_NOT_FOUND / TRANSACTION_NOT_FOUND: entity absent.
        NOT_ALLOWED: the user owns neither side of the transfer.
    """
    logger.info(
        "Start finding of transaction with transactionId '%s' for user with userId '%s'.",
        transaction_id, user_id,
    )
    user_uuid = require_id(user_id, "userId")
    transaction_uuid = require_id(transaction_id, "transactionId")

    if await user_repository.find(db, user_uuid) is None:
        raise UserNotFoundError(user_uuid)

    transaction = await transaction_repository.find(db, transaction_uuid)
    if transaction is None:
        raise TransactionNotFoundError(transaction_uuid)

    origin = await account_repository.find(db, transaction.origin_id)
    target = await account_repository.find(db, transaction.target_id)
    await ensure_owns_any(
        db,
        user_uuid,
        *(account for account in (origin, target) if account is not None),
        detail=(
            f"Transaction with transactionId '{transaction_uuid}' does not belong to user "
            f"with userId '{user_uuid}'"
        ),
    )

    return TransactionView.from_transaction(transaction)


@service_operation("list all transactions")
async def list_all_transactions(db: AsyncSession) -> list[TransactionView]:
    """
    [ADMIN ONLY] List every transaction in the system, oldest first.

    No ownership scoping happens here; the router enforces the admin role.
    """
    transactions = await transaction_repository.find_all(db)
    return [TransactionView.from_transaction(t) for t in transactions]


@service_operation("list transactions for account")
async def list_transactions_for_account(
    db: AsyncSession,
    account_id: uuid.UUID | str | None,
) -> list[TransactionView]:
    """
    List all transactions where the account is origin or target, in
    creation order. No ownership check.
    """
    account_uuid = require_id(account_id, "accountId")
    if await account_repository.find(db, account_uuid) is None:
        raise AccountNotFoundError(account_uuid)

    transactions = await transaction_repository.find_all_by_account(db, account_uuid)
    return [TransactionView.from_transaction(t) for t in transactions]


@service_operation("list transactions for user account")
async def list_transactions_for_user_account(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    account_id: uuid.UUID | str | None,
) -> list[TransactionView]:
    """
    Like list_transactions_for_account, but only for an account the
    requesting user owns (NOT_ALLOWED otherwise).
    """
    user_uuid = require_id(user_id, "userId")
    account_uuid = require_id(account_id, "accountId")

    if await user_repository.find(db, user_uuid) is None:
        raise UserNotFoundError(user_uuid)

    account = await account_repository.find(db, account_uuid)
    if account is None:
        raise AccountNotFoundError(account_uuid)
    await ensure_owns_any(db, user_uuid, account)

    transactions = await transaction_repository.find_all_by_account(db, account_uuid)
    return [TransactionView.from_transaction(t) for t in transactions]
