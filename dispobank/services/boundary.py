"""
The service boundary — where exceptions become results.

Every public service function is decorated with @service_operation. Inside,
the function is written the straightforward way: load, check, raise a
BankAPIError subclass when a rule is violated, return the value on success.
The decorator then makes the call a single unit of work:

  - success:        commit, return Success(value)
  - BankAPIError:   roll back, return Failure(error.error_code, error.detail)
  - anything else:  roll back, log the traceback,
                    return Failure(DATABASE_ERROR, fixed message)

Because the rollback covers everything the operation flushed, a failure in
the last step (e.g. reversing balances after the transaction row was
deleted) leaves no partial state behind.
"""

import functools
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from dispobank.exceptions import BankAPIError
from dispobank.results import ErrorCode, Failure, Success

# Returned for unexpected exceptions. Their own text can contain SQL and bound
# parameters, so it only goes to the log.
PERSISTENCE_ERROR_MESSAGE = "Undefined error during persistence occurred."


def service_operation(description: str):
    """
    Decorate an async service function whose first argument is the session.

    Args:
        description: Short name of the operation, used in log lines.
    """

    def decorator(func):
        logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        async def wrapper(db: AsyncSession, *args, **kwargs):
            try:
                value = await func(db, *args, **kwargs)
                await db.commit()
            except BankAPIError as exc:
                await db.rollback()
                logger.error("%s failed (%s): %s", description, exc.error_code.value, exc.detail)
                return Failure(exc.error_code, exc.detail)
            except Exception as exc:
                await db.rollback()
                logger.exception("%s failed unexpectedly: %s", description, type(exc).__name__)
                return Failure(ErrorCode.DATABASE_ERROR, PERSISTENCE_ERROR_MESSAGE)
            return Success(value)

        return wrapper

    return decorator
