"""
Account store — persistence for Account rows, keyed by account id.

The store never commits. It adds and flushes inside whatever transaction
the calling service operation has open, so a failure later in the same
operation rolls these writes back too.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import PersistenceError
from dispobank.models.account import Account


async def find(
    db: AsyncSession,
    account_id: uuid.UUID,
    for_update: bool = False,
) -> Account | None:
    """
    Load one account by id.

    With for_update=True the row is locked until the surrounding transaction
    ends (SELECT ... FOR UPDATE on PostgreSQL; on SQLite the transaction
    already holds the database write lock, see database.create_engine), and
    an instance already in the session is overwritten with the row as read
    under that lock.
    """
    query = select(Account).where(Account.id == account_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def find_all_for_user(db: AsyncSession, user_id: uuid.UUID) -> list[Account]:
    result = await db.execute(
        select(Account)
        .where(Account.user_id == user_id)
        .order_by(Account.created_at)
    )
    return list(result.scalars().all())


async def find_by_user_and_name(
    db: AsyncSession,
    user_id: uuid.UUID,
    name: str,
) -> Account | None:
    result = await db.execute(
        select(Account)
        .where(Account.user_id == user_id)
        .where(Account.name == name)
    )
    return result.scalar_one_or_none()


async def save(db: AsyncSession, account: Account) -> Account:
    """
    Insert a new account.

    Raises:
        PersistenceError: If an account with the same id already exists.
    """
    if account.id is not None and await find(db, account.id) is not None:
        raise PersistenceError(f"Account '{account.id}' already exists!")
    db.add(account)
    await db.flush()
    return account


async def update(db: AsyncSession, account: Account) -> Account:
    """
    Flush pending changes of an account that is already persisted.

    Raises:
        PersistenceError: If the account was never saved.
    """
    if account not in db:
        raise PersistenceError(f"Account '{account.id}' does not exist!")
    await db.flush()
    return account
