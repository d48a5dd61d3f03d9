"""
Response envelope shared by all endpoints.

Successful responses wrap their payload as {"value": ...}; failures are
rendered by the exception handler as {"error_code": ..., "error_message": ...}.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

# Timestamps are rendered in a fixed, human-readable format
TIME_STAMP_FORMAT = "%d.%m.%Y %H:%M:%S"
BIRTH_DATE_FORMAT = "%d.%m.%Y"


class ValueResponse(BaseModel, Generic[T]):
    value: T
