"""
Pydantic schemas for User endpoints.

Passwords only ever travel inbound; no response schema includes the
password or its hash.
"""

import uuid

from pydantic import BaseModel, Field

from dispobank.schemas.account import AccountView


class UserCreateRequest(BaseModel):
    """Request body for POST /users. birthdate uses the dd.mm.yyyy format."""
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    birthdate: str
    password: str
    user_id: uuid.UUID | None = None


class UserUpdateRequest(BaseModel):
    """Request body for PUT /users."""
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    birthdate: str
    password: str


class PasswordChangeRequest(BaseModel):
    """Request body for PUT /users/password."""
    existing_password: str
    new_password: str


class UserView(BaseModel):
    """Read projection of a user, including the accounts they own."""
    user_id: uuid.UUID
    first_name: str
    last_name: str
    birthdate: str
    created: str
    last_updated: str
    accounts: list[AccountView]
