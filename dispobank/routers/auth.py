"""
Auth router — login endpoints.

Endpoints:
  POST /auth/login       — Log in as a user (user id + password)
  POST /auth/admin/login — Log in as an administrator

Both return a bearer JWT. Any credential failure (unknown id, malformed
id, wrong password) is answered with the same 401 to prevent enumeration.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.database import get_db
from dispobank.exceptions import unwrap, ServiceFailure
from dispobank.schemas.auth import AdministratorLoginRequest, TokenResponse, UserLoginRequest
from dispobank.services import auth_service

router = APIRouter()


def _token_or_401(result) -> TokenResponse:
    try:
        return TokenResponse(token=unwrap(result))
    except ServiceFailure:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid id or password",
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in as a user",
)
async def login(request: UserLoginRequest, db: AsyncSession = Depends(get_db)):
    result = await auth_service.login_user(db, request.user_id, request.password)
    return _token_or_401(result)


@router.post(
    "/admin/login",
    response_model=TokenResponse,
    summary="Log in as an administrator",
)
async def admin_login(request: AdministratorLoginRequest, db: AsyncSession = Depends(get_db)):
    result = await auth_service.login_administrator(
        db, request.administrator_id, request.password
    )
    return _token_or_401(result)
