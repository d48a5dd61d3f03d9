"""
Pydantic schemas for Account endpoints.

All monetary amounts are expressed in integer cents. The limit is not
range-checked here on purpose: a non-positive limit is rejected when the
Account is constructed, and reported as a MAPPING_ERROR like every other
invalid input.
"""

import uuid

from pydantic import BaseModel, Field

from dispobank.models.account import Account
from dispobank.schemas.common import TIME_STAMP_FORMAT


class AccountCreateRequest(BaseModel):
    """Request body for POST /accounts."""
    name: str = Field(min_length=1, max_length=255)
    dispo_cents: int = 0
    limit_cents: int
    account_id: uuid.UUID | None = Field(
        None, description="Optional client-chosen id; generated when omitted"
    )


class AccountUpdateRequest(BaseModel):
    """Request body for PUT /accounts/{account_id}. The balance is not writable."""
    name: str = Field(min_length=1, max_length=255)
    dispo_cents: int = 0
    limit_cents: int


class AccountView(BaseModel):
    """Read projection of an account."""
    account_id: uuid.UUID
    name: str
    balance_cents: int
    dispo_cents: int
    limit_cents: int
    created: str
    last_updated: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountView":
        return cls(
            account_id=account.id,
            name=account.name,
            balance_cents=account.balance_cents,
            dispo_cents=account.dispo_cents,
            limit_cents=account.limit_cents,
            created=account.created_at.strftime(TIME_STAMP_FORMAT),
            last_updated=account.updated_at.strftime(TIME_STAMP_FORMAT),
        )
