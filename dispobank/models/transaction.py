"""
Transaction model — a transfer of money from one account to another.

Key fields:
  - origin_id: The account the money leaves
  - target_id: The account the money arrives at
  - amount_cents: Always positive

Transactions are immutable. There is no update path in the store: saving a
transaction whose id already exists is rejected. A transaction can only be
deleted, and deleting it reverses its effect on both account balances (see
dispobank/services/transaction_service.py).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from dispobank.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="ck_transactions_positive_amount"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    origin_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )

    target_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )

    amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Indexed: listings are ordered by creation time
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    @validates("amount_cents")
    def _validate_amount(self, key, value):
        if value is None or value <= 0:
            raise ValueError("Amount must be positive.")
        return value

    def __repr__(self) -> str:
        return (
            f"Transaction(id={self.id}, origin_id={self.origin_id}, "
            f"target_id={self.target_id}, amount_cents={self.amount_cents})"
        )
