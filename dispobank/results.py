"""
Typed results returned by every service operation.

Service functions never let an exception escape to their caller. They return
either ``Success(value)`` or ``Failure(error_code, error_message)`` and the
caller decides what to do with it (the HTTP layer maps error codes to status
codes, tests assert on them directly).

    result = await transaction_service.create_transfer(db, user_id, origin_id, target_id, 500)
    if isinstance(result, Failure):
        ...
"""

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    """Failure kinds a service operation can report."""
    DATABASE_ERROR = "DATABASE_ERROR"
    MAPPING_ERROR = "MAPPING_ERROR"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_ALREADY_EXIST = "USER_ALREADY_EXIST"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    ACCOUNT_ALREADY_EXIST = "ACCOUNT_ALREADY_EXIST"
    ADMINISTRATOR_NOT_FOUND = "ADMINISTRATOR_NOT_FOUND"
    PASSWORD_ERROR = "PASSWORD_ERROR"
    NOT_ALLOWED = "NOT_ALLOWED"
    TRANSACTION_REQUEST_INVALID = "TRANSACTION_REQUEST_INVALID"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error_code: ErrorCode
    error_message: str


ApiResult = Union[Success[T], Failure]
