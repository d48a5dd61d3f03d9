"""
Parsing of raw identifiers at the edge of every service operation.

Callers hand services whatever they received (a path parameter, a JWT "sub"
claim, a UUID already parsed by Pydantic). Parsing happens once, here, and a
malformed value becomes a MAPPING_ERROR instead of a stray ValueError.
"""

import uuid

from dispobank.exceptions import MappingError
from dispobank.results import ApiResult, ErrorCode, Failure, Success


def parse_id(raw: uuid.UUID | str | None, label: str = "id") -> ApiResult[uuid.UUID]:
    """
    Parse a raw identifier.

    Args:
        raw: A UUID instance or its string form.
        label: Name used in the error message (e.g. "userId").

    Returns:
        Success(UUID) or Failure(MAPPING_ERROR).
    """
    if isinstance(raw, uuid.UUID):
        return Success(raw)
    try:
        return Success(uuid.UUID(str(raw)))
    except (TypeError, ValueError, AttributeError):
        return Failure(ErrorCode.MAPPING_ERROR, f"Given {label} '{raw}' is not valid.")


def require_id(raw: uuid.UUID | str | None, label: str = "id") -> uuid.UUID:
    """Like parse_id, but raises MappingError so service bodies stay linear."""
    result = parse_id(raw, label)
    if isinstance(result, Failure):
        raise MappingError(result.error_message)
    return result.value
