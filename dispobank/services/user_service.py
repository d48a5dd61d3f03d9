"""
User service — registration and profile management.

Registration rules:
  - birthdate is given as dd.mm.yyyy and must be more than
    MINIMUM_AGE_YEARS years in the past
  - the password must satisfy dispobank.security.validate_password
Both are checked before anything is written; a violation is reported as
MAPPING_ERROR.

Deleting a user never deletes accounts. The user's accounts are detached
(user_id = NULL) in the same unit of work, and their transactions survive.
"""

import logging
import uuid
from datetime import date, datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.config import settings
from dispobank.exceptions import (
    MappingError,
    PasswordError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from dispobank.identifiers import require_id
from dispobank.models.account import Account
from dispobank.models.user import User
from dispobank.repositories import account_repository, user_repository
from dispobank.schemas.account import AccountView
from dispobank.schemas.common import BIRTH_DATE_FORMAT, TIME_STAMP_FORMAT
from dispobank.schemas.user import UserView
from dispobank.security import generate_password, hash_password, validate_password, verify_password
from dispobank.services.boundary import service_operation

logger = logging.getLogger(__name__)


def _parse_birthdate(birthdate: str) -> date:
    try:
        parsed = datetime.strptime(birthdate, BIRTH_DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise MappingError(
            f"Birthdate '{birthdate}' is not parsable using pattern 'dd.mm.yyyy'."
        ) from e

    today = date.today()
    try:
        required = today.replace(year=today.year - settings.MINIMUM_AGE_YEARS)
    except ValueError:
        # 29 February in a non-leap target year
        required = today.replace(year=today.year - settings.MINIMUM_AGE_YEARS, day=28)
    if not parsed < required:
        raise MappingError(f"Birthdate must be before '{required.isoformat()}'.")
    return parsed


def _check_password(password: str) -> None:
    valid, reason = validate_password(password)
    if not valid:
        raise MappingError(reason)


async def _resolve_user(db: AsyncSession, user_id) -> User:
    user_uuid = require_id(user_id, "userId")
    user = await user_repository.find(db, user_uuid)
    if user is None:
        raise UserNotFoundError(user_uuid)
    return user


async def _to_view(db: AsyncSession, user: User) -> UserView:
    accounts = await account_repository.find_all_for_user(db, user.id)
    return UserView(
        user_id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        birthdate=user.birthdate.strftime(BIRTH_DATE_FORMAT),
        created=user.created_at.strftime(TIME_STAMP_FORMAT),
        last_updated=user.updated_at.strftime(TIME_STAMP_FORMAT),
        accounts=[AccountView.from_account(a) for a in accounts],
    )


@service_operation("create user")
async def create_user(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    birthdate: str,
    password: str,
    user_id: uuid.UUID | str | None = None,
) -> uuid.UUID:
    """
    Register a new user.

    Returns:
        Success(id of the new user), or Failure(MAPPING_ERROR /
        USER_ALREADY_EXIST / DATABASE_ERROR).
    """
    logger.info("Start creation of user '%s %s'.", first_name, last_name)
    explicit_id = require_id(user_id, "userId") if user_id is not None else None
    parsed_birthdate = _parse_birthdate(birthdate)
    _check_password(password)

    user = User(
        id=explicit_id or uuid.uuid4(),
        first_name=first_name,
        last_name=last_name,
        birthdate=parsed_birthdate,
        hashed_password=hash_password(password),
    )
    if await user_repository.find(db, user.id) is not None:
        raise UserAlreadyExistsError(user.id)

    await user_repository.save(db, user)
    logger.info("Successfully created user with userId '%s'.", user.id)
    return user.id


@service_operation("find user")
async def find_user(db: AsyncSession, user_id: uuid.UUID | str | None) -> UserView:
    """Get a user together with the accounts they own."""
    user = await _resolve_user(db, user_id)
    return await _to_view(db, user)


@service_operation("update user")
async def update_user(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    first_name: str,
    last_name: str,
    birthdate: str,
    password: str,
) -> uuid.UUID:
    """Overwrite a user's names, birthdate and password."""
    logger.info("Start update of user with userId '%s'.", user_id)
    user = await _resolve_user(db, user_id)
    parsed_birthdate = _parse_birthdate(birthdate)
    _check_password(password)

    user.first_name = first_name
    user.last_name = last_name
    user.birthdate = parsed_birthdate
    user.hashed_password = hash_password(password)
    await db.flush()

    logger.info("Successfully updated user with userId '%s'.", user.id)
    return user.id


@service_operation("delete user")
async def delete_user(db: AsyncSession, user_id: uuid.UUID | str | None) -> uuid.UUID:
    """Delete a user. Their accounts are detached, not deleted."""
    logger.info("Start deletion of user with userId '%s'.", user_id)
    user = await _resolve_user(db, user_id)
    user_uuid = user.id

    await db.execute(
        update(Account)
        .where(Account.user_id == user_uuid)
        .values(user_id=None)
        .execution_options(synchronize_session="fetch")
    )
    await user_repository.delete(db, user)

    logger.info("Successfully deleted user with userId '%s'.", user_uuid)
    return user_uuid


@service_operation("update password")
async def update_password(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    existing_password: str,
    new_password: str,
) -> uuid.UUID:
    """
    Change a user's password.

    Fails with PASSWORD_ERROR if the existing password is wrong or equal to
    the new one, and with MAPPING_ERROR if the new one breaks the rules.
    """
    logger.info("Start updating password of user with userId '%s'.", user_id)
    user = await _resolve_user(db, user_id)

    if not verify_password(existing_password, user.hashed_password):
        raise PasswordError(f"Existing password of user with userId '{user.id}' is not valid.")
    if existing_password == new_password:
        raise PasswordError("New password must be different from the existing password.")
    _check_password(new_password)

    user.hashed_password = hash_password(new_password)
    await db.flush()
    logger.info("Successfully updated password of user with userId '%s'.", user.id)
    return user.id


@service_operation("reset password")
async def reset_password(db: AsyncSession, user_id: uuid.UUID | str | None) -> str:
    """
    [ADMIN ONLY] Replace a user's password with a generated one.

    Returns:
        Success(the new plaintext password). It is not stored anywhere in
        plaintext; the caller is expected to hand it to the user.
    """
    logger.info("Start resetting password of user with userId '%s'.", user_id)
    user = await _resolve_user(db, user_id)

    new_password = generate_password()
    user.hashed_password = hash_password(new_password)
    await db.flush()
    logger.info("Successfully reset password of user with userId '%s'.", user.id)
    return new_password


@service_operation("list users")
async def list_users(db: AsyncSession) -> list[UserView]:
    """[ADMIN ONLY] List every user with their accounts."""
    users = await user_repository.find_all(db)
    return [await _to_view(db, user) for user in users]


@service_operation("check user credentials")
async def is_valid_user(
    db: AsyncSession,
    user_id: uuid.UUID | str | None,
    password: str,
) -> bool:
    """
    Check a user's credentials.

    Returns:
        Success(True) when they match; Failure(MAPPING_ERROR /
        USER_NOT_FOUND / PASSWORD_ERROR) otherwise.
    """
    user = await _resolve_user(db, user_id)
    if not verify_password(password, user.hashed_password):
        raise PasswordError(f"Password for user with userId '{user.id}' is not valid.")
    return True
