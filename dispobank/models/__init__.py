"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. Other modules can import from dispobank.models directly
"""

from dispobank.models.user import User  # noqa: F401
from dispobank.models.account import Account  # noqa: F401
from dispobank.models.transaction import Transaction  # noqa: F401
from dispobank.models.administrator import Administrator  # noqa: F401
