"""
FastAPI dependencies for authentication and authorization.

Dependencies are reusable functions that FastAPI injects into route handlers.
They resolve the bearer token into a principal:

  get_current_user (JWT role "user" -> User)
  require_admin    (JWT role "admin" -> Administrator)

Users and administrators are separate principals. A user token is rejected
on administrative endpoints and an administrator token on user endpoints,
both with 403.
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.database import get_db
from dispobank.models.administrator import Administrator
from dispobank.models.user import User
from dispobank.repositories import user_repository
from dispobank.security import ROLE_ADMIN, ROLE_USER, decode_access_token


# The "Authorization: Bearer <token>" header. tokenUrl is what Swagger UI's
# "Authorize" button posts to.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def _decode(token: str) -> tuple[uuid.UUID, str | None]:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        subject: str | None = payload.get("sub")
        if subject is None:
            raise credentials_exception
        return uuid.UUID(subject), payload.get("role")
    except (JWTError, ValueError):
        raise credentials_exception


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the JWT token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is invalid or the user doesn't exist.
        HTTPException 403: If the token belongs to an administrator.
    """
    subject, role = _decode(token)
    if role != ROLE_USER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrators cannot access customer endpoints.",
        )

    user = await user_repository.find(db, subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Administrator:
    """
    Require the bearer to be an existing administrator.

    Raises:
        HTTPException 401: If the token is invalid or the administrator is gone.
        HTTPException 403: If the token belongs to a user.
    """
    subject, role = _decode(token)
    if role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    administrator = await user_repository.find_administrator(db, subject)
    if administrator is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return administrator
