"""
Custom exception classes and FastAPI exception handlers.

Why custom exceptions?
  The service layer raises domain-specific errors (like
  TransactionRequestInvalidError) without importing HTTP concepts. Each error
  carries an ErrorCode. At the service boundary these exceptions are turned
  into Failure results (see dispobank/services/boundary.py), and the HTTP layer
  turns Failure results back into JSON error responses.

  This separation means:
    - Service code is testable without HTTP
    - Error responses are consistent across all endpoints
    - Adding new error types is straightforward

Exception hierarchy:
    BankAPIError (base)
    ├── UserNotFoundError / AccountNotFoundError / TransactionNotFoundError
    │   / AdministratorNotFoundError      — entity absent
    ├── MappingError                      — malformed id, invalid amount/limit/input
    ├── NotAllowedError                   — ownership or authorization violation
    ├── UserAlreadyExistsError / AccountAlreadyExistsError — duplicate on create
    ├── TransactionRequestInvalidError    — insufficient funds or limit
    ├── PasswordError                     — wrong existing password on change
    └── PersistenceError                  — store-layer failure
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dispobank.results import ErrorCode, Failure, Success


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class BankAPIError(Exception):
    """Base exception for all domain errors."""

    error_code: ErrorCode = ErrorCode.DATABASE_ERROR

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class UserNotFoundError(BankAPIError):
    error_code = ErrorCode.USER_NOT_FOUND

    def __init__(self, user_id: uuid.UUID):
        self.user_id = user_id
        super().__init__(f"User with userId '{user_id}' does not exist in database.")


class AccountNotFoundError(BankAPIError):
    error_code = ErrorCode.ACCOUNT_NOT_FOUND

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__(f"Account with accountId '{account_id}' does not exist in database.")


class TransactionNotFoundError(BankAPIError):
    error_code = ErrorCode.TRANSACTION_NOT_FOUND

    def __init__(self, transaction_id: uuid.UUID):
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction with transactionId '{transaction_id}' does not exist in database."
        )


class AdministratorNotFoundError(BankAPIError):
    error_code = ErrorCode.ADMINISTRATOR_NOT_FOUND

    def __init__(self, administrator_id: uuid.UUID):
        self.administrator_id = administrator_id
        super().__init__(
            f"Administrator with administratorId '{administrator_id}' does not exist in database."
        )


class MappingError(BankAPIError):
    """Raised when input cannot be turned into a valid domain object."""
    error_code = ErrorCode.MAPPING_ERROR


class NotAllowedError(BankAPIError):
    """Raised when a user acts on a resource they don't own."""
    error_code = ErrorCode.NOT_ALLOWED

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


class UserAlreadyExistsError(BankAPIError):
    error_code = ErrorCode.USER_ALREADY_EXIST

    def __init__(self, user_id: uuid.UUID):
        self.user_id = user_id
        super().__init__(f"User with userId '{user_id}' already exist in database.")


class AccountAlreadyExistsError(BankAPIError):
    error_code = ErrorCode.ACCOUNT_ALREADY_EXIST


class TransactionRequestInvalidError(BankAPIError):
    """
    Raised when a transfer is rejected by a business rule.

    Attributes:
        account_id: The origin account of the rejected transfer.
        requested_cents: The amount the user tried to move.
    """
    error_code = ErrorCode.TRANSACTION_REQUEST_INVALID

    def __init__(
        self,
        detail: str,
        account_id: uuid.UUID | None = None,
        requested_cents: int | None = None,
    ):
        self.account_id = account_id
        self.requested_cents = requested_cents
        super().__init__(detail)


class PasswordError(BankAPIError):
    error_code = ErrorCode.PASSWORD_ERROR


class PersistenceError(BankAPIError):
    """Raised by the stores when a write violates their rules."""
    error_code = ErrorCode.DATABASE_ERROR


# ---------------------------------------------------------------------------
# Result -> HTTP translation
# ---------------------------------------------------------------------------

STATUS_BY_ERROR_CODE: dict[ErrorCode, int] = {
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.ACCOUNT_NOT_FOUND: 404,
    ErrorCode.TRANSACTION_NOT_FOUND: 404,
    ErrorCode.ADMINISTRATOR_NOT_FOUND: 404,
    ErrorCode.MAPPING_ERROR: 400,
    ErrorCode.PASSWORD_ERROR: 400,
    ErrorCode.TRANSACTION_REQUEST_INVALID: 400,
    ErrorCode.NOT_ALLOWED: 403,
    ErrorCode.USER_ALREADY_EXIST: 409,
    ErrorCode.ACCOUNT_ALREADY_EXIST: 409,
    ErrorCode.DATABASE_ERROR: 500,
}


class ServiceFailure(Exception):
    """Carries a Failure result from a router to the exception handler."""

    def __init__(self, failure: Failure):
        self.failure = failure
        super().__init__(failure.error_message)


def unwrap(result):
    """
    Return the value of a Success, or raise ServiceFailure for a Failure.

    Routers call this on every service result so that the handler below
    renders all failures the same way.
    """
    if isinstance(result, Success):
        return result.value
    raise ServiceFailure(result)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Every failure is rendered as {"error_code": ..., "error_message": ...}
    with the status code looked up in STATUS_BY_ERROR_CODE.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(ServiceFailure)
    async def service_failure_handler(
        request: Request, exc: ServiceFailure
    ) -> JSONResponse:
        failure = exc.failure
        return JSONResponse(
            status_code=STATUS_BY_ERROR_CODE.get(failure.error_code, 500),
            content={
                "error_code": failure.error_code.value,
                "error_message": failure.error_message,
            },
        )
