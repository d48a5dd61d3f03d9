"""
User model — the customer identity.

A User owns zero or more Accounts. Ownership is stored on the account side
(accounts.user_id), so a User row never holds a list of accounts; "which
accounts belong to this user" is always a store query.

Deleting a User does not delete their accounts. The foreign key on
accounts.user_id is declared ON DELETE SET NULL, leaving the accounts
orphaned but intact (their transactions still reference them).

The password is stored as an Argon2id hash — never in plaintext.
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from dispobank.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    first_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    last_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    birthdate: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    # Argon2id hash of the password (never store plaintext!)
    hashed_password: Mapped[str] = mapped_column(
        String(255),
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
