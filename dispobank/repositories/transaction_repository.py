"""
Transaction store — persistence for Transaction rows.

Transactions are immutable: save() only inserts, and refuses an id that is
already taken. The only other write is delete().
"""

import uuid

from sqlalchemy import delete as sql_delete, select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import PersistenceError
from dispobank.models.transaction import Transaction


async def find(
    db: AsyncSession,
    transaction_id: uuid.UUID,
    for_update: bool = False,
) -> Transaction | None:
    """
    Load one transaction by id. With for_update=True the row is locked and
    re-read even if the session already holds it (see account_repository.find).
    """
    query = select(Transaction).where(Transaction.id == transaction_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def find_all_by_account(db: AsyncSession, account_id: uuid.UUID) -> list[Transaction]:
    """
    List every transaction where the account is either origin or target,
    oldest first.
    """
    result = await db.execute(
        select(Transaction)
        .where(
            or_(
                Transaction.origin_id == account_id,
                Transaction.target_id == account_id,
            )
        )
        .order_by(Transaction.created_at)
    )
    return list(result.scalars().all())


async def find_all(db: AsyncSession) -> list[Transaction]:
    result = await db.execute(select(Transaction).order_by(Transaction.created_at))
    return list(result.scalars().all())


async def save(db: AsyncSession, transaction: Transaction) -> Transaction:
    """
    Insert a new transaction.

    Raises:
        PersistenceError: If a transaction with this id already exists.
            Transactions cannot be updated.
    """
    if transaction.id is not None and await find(db, transaction.id) is not None:
        raise PersistenceError(
            f"Transaction '{transaction.id}' already exists. Transactions cannot be updated!"
        )
    db.add(transaction)
    await db.flush()
    return transaction


async def delete(db: AsyncSession, transaction: Transaction) -> bool:
    """
    Delete a transaction row.

    Returns:
        True if a row was deleted, False if it was already gone.
    """
    result = await db.execute(
        sql_delete(Transaction)
        .where(Transaction.id == transaction.id)
        .execution_options(synchronize_session=False)
    )
    if transaction in db:
        db.expunge(transaction)
    return result.rowcount == 1
