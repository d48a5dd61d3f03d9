"""
User and Administrator stores.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import PersistenceError
from dispobank.models.administrator import Administrator
from dispobank.models.user import User


async def find(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_all(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.created_at))
    return list(result.scalars().all())


async def save(db: AsyncSession, user: User) -> User:
    if user.id is not None and await find(db, user.id) is not None:
        raise PersistenceError(f"User '{user.id}' already exists!")
    db.add(user)
    await db.flush()
    return user


async def delete(db: AsyncSession, user: User) -> None:
    await db.delete(user)
    await db.flush()


async def find_administrator(
    db: AsyncSession,
    administrator_id: uuid.UUID,
) -> Administrator | None:
    result = await db.execute(
        select(Administrator).where(Administrator.id == administrator_id)
    )
    return result.scalar_one_or_none()


async def save_administrator(db: AsyncSession, administrator: Administrator) -> Administrator:
    db.add(administrator)
    await db.flush()
    return administrator
