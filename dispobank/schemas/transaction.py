"""
Pydantic schemas for Transaction (transfer) endpoints.

All monetary amounts are in integer cents (e.g., 10.50 = 1050).
"""

import uuid

from pydantic import BaseModel, Field

from dispobank.models.transaction import Transaction
from dispobank.schemas.common import TIME_STAMP_FORMAT


class TransferRequest(BaseModel):
    """Request body for POST /transactions."""
    origin_id: uuid.UUID
    target_id: uuid.UUID
    # Positivity is a construction rule of Transaction (MAPPING_ERROR)
    amount_cents: int
    transaction_id: uuid.UUID | None = Field(
        None, description="Optional client-chosen id; generated when omitted"
    )


class TransactionView(BaseModel):
    """Read projection of a transaction."""
    transaction_id: uuid.UUID
    origin_id: uuid.UUID
    target_id: uuid.UUID
    amount_cents: int
    created: str

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionView":
        return cls(
            transaction_id=transaction.id,
            origin_id=transaction.origin_id,
            target_id=transaction.target_id,
            amount_cents=transaction.amount_cents,
            created=transaction.created_at.strftime(TIME_STAMP_FORMAT),
        )
