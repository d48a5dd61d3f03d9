"""
Account model — a bank account, optionally owned by a User.

Each account has:
  - A display name, unique among the accounts of one owner
  - A balance in integer cents
  - A dispo (overdraft allowance) in integer cents; the money available
    to outgoing transfers is balance + dispo
  - A limit in integer cents: the largest amount a single outgoing transfer
    may move. Must be strictly positive.

Ownership:
  user_id is nullable. "Deleting" an account only detaches it from its user
  (user_id = NULL); the row itself stays because transactions reference it.
  Deleting the user has the same effect through ON DELETE SET NULL.

Invariants:
  limit_cents > 0 is checked when the attribute is set (so construction
  fails before anything reaches the database) and again by a CHECK
  constraint as the final safety net.

Why integer cents?
  Floating-point numbers introduce rounding errors in financial arithmetic
  (0.1 + 0.2 != 0.3). Integers have no representation error, so balance
  checks and reversals are exact.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from dispobank.database import Base


class Account(Base):
    __tablename__ = "accounts"

    __table_args__ = (
        CheckConstraint("limit_cents > 0", name="ck_accounts_positive_limit"),
        UniqueConstraint("user_id", "name", name="uq_accounts_user_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Owner of this account (NULL once detached)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    balance_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    dispo_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    limit_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @validates("limit_cents")
    def _validate_limit(self, key, value):
        if value is None or value <= 0:
            raise ValueError("Limit must be positive.")
        return value

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id}, name={self.name!r}, balance_cents={self.balance_cents}, "
            f"dispo_cents={self.dispo_cents}, limit_cents={self.limit_cents})"
        )
