"""
Pydantic schemas for authentication endpoints.

Users log in with their user id, administrators with their administrator
id. Both receive a bearer JWT.
"""

from pydantic import BaseModel


class UserLoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    user_id: str
    password: str


class AdministratorLoginRequest(BaseModel):
    """Request body for POST /auth/admin/login."""
    administrator_id: str
    password: str


class TokenResponse(BaseModel):
    """Response body for a successful login — contains the JWT."""
    token: str
    token_type: str = "bearer"
