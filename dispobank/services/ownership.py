"""
Ownership check shared by the account and transaction services.

Accounts store their owner's id; a user never carries a list of accounts.
The set of accounts a user owns is therefore always fetched from the store
(owned_account_ids) and tested with a pure predicate (not_contains_account).
Comparison is by account id, never by object identity.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import NotAllowedError
from dispobank.models.account import Account


def not_contains_account(owned_ids: Iterable[uuid.UUID], *accounts: Account) -> bool:
    """
    Return True when none of the given accounts is among owned_ids.

    Used as a guard: "does not contain" means the caller must be rejected.
    """
    owned = set(owned_ids)
    return not any(account.id in owned for account in accounts)


async def owned_account_ids(db: AsyncSession, user_id: uuid.UUID) -> set[uuid.UUID]:
    """Ids of every account currently owned by the user."""
    result = await db.execute(select(Account.id).where(Account.user_id == user_id))
    return set(result.scalars().all())


async def ensure_owns_any(
    db: AsyncSession,
    user_id: uuid.UUID,
    *accounts: Account,
    detail: str | None = None,
) -> None:
    """
    Raise NotAllowedError unless the user owns at least one of the accounts.
    """
    if not_contains_account(await owned_account_ids(db, user_id), *accounts):
        ids = ", ".join(f"'{account.id}'" for account in accounts)
        raise NotAllowedError(
            detail or f"Account with accountId {ids} does not belong to user with userId '{user_id}'"
        )
