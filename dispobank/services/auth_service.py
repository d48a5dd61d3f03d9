"""
Authentication service — login for users and administrators.

Login flow:
  1. Check the credentials (user_service.is_valid_user or
     is_valid_administrator below)
  2. Return a JWT whose "sub" is the id and whose "role" says which kind of
     principal it is

Credential failures are returned as-is (USER_NOT_FOUND, PASSWORD_ERROR,
...) and the router collapses them into a single 401 so that callers cannot
tell "unknown id" from "wrong password".
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import AdministratorNotFoundError, NotAllowedError
from dispobank.identifiers import require_id
from dispobank.models.administrator import Administrator
from dispobank.repositories import user_repository
from dispobank.results import ApiResult, Failure, Success
from dispobank.security import (
    ROLE_ADMIN,
    ROLE_USER,
    create_access_token,
    hash_password,
    verify_password,
)
from dispobank.services import user_service
from dispobank.services.boundary import service_operation

logger = logging.getLogger(__name__)


@service_operation("check administrator credentials")
async def is_valid_administrator(
    db: AsyncSession,
    administrator_id: uuid.UUID | str | None,
    password: str,
) -> bool:
    """
    Check an administrator's credentials.

    Returns:
        Success(True), or Failure(MAPPING_ERROR / ADMINISTRATOR_NOT_FOUND /
        NOT_ALLOWED).
    """
    logger.info("Start checking for valid administrator with administratorId '%s'.", administrator_id)
    administrator_uuid = require_id(administrator_id, "administratorId")
    administrator = await user_repository.find_administrator(db, administrator_uuid)
    if administrator is None:
        raise AdministratorNotFoundError(administrator_uuid)
    if not verify_password(password, administrator.hashed_password):
        raise NotAllowedError(
            f"Password for administrator with administratorId '{administrator_uuid}' is not valid."
        )
    logger.info("Successfully checked administrator with administratorId '%s'.", administrator_uuid)
    return True


@service_operation("create administrator")
async def create_administrator(
    db: AsyncSession,
    name: str,
    password: str,
    administrator_id: uuid.UUID | str | None = None,
) -> uuid.UUID:
    """Provision an administrator. Not exposed over HTTP."""
    explicit_id = require_id(administrator_id, "administratorId") if administrator_id is not None else None
    administrator = Administrator(
        id=explicit_id or uuid.uuid4(),
        name=name,
        hashed_password=hash_password(password),
    )
    await user_repository.save_administrator(db, administrator)
    return administrator.id


async def login_user(db: AsyncSession, user_id: str, password: str) -> ApiResult[str]:
    """Return Success(JWT) for valid user credentials."""
    result = await user_service.is_valid_user(db, user_id, password)
    if isinstance(result, Failure):
        return result
    return Success(create_access_token(data={"sub": str(uuid.UUID(str(user_id))), "role": ROLE_USER}))


async def login_administrator(
    db: AsyncSession,
    administrator_id: str,
    password: str,
) -> ApiResult[str]:
    """Return Success(JWT) for valid administrator credentials."""
    result = await is_valid_administrator(db, administrator_id, password)
    if isinstance(result, Failure):
        return result
    return Success(
        create_access_token(
            data={"sub": str(uuid.UUID(str(administrator_id))), "role": ROLE_ADMIN}
        )
    )
