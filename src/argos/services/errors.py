"""Error taxonomy shared by services and the HTTP layer.

Every error maps onto one problem response: status, title, detail.
Storage failures are wrapped into InternalError so driver messages never
reach a caller.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ArgosError(Exception):
    status_code: int = 500
    title: str = "Internal Server Error"
    default_detail: str = "An unexpected error occurred."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ArgosError):
    status_code = 400
    title = "Bad Request"
    default_detail = "Invalid request"


class AuthError(ArgosError):
    status_code = 401
    title = "Unauthorized"
    default_detail = "API key is missing or invalid"


class NotFoundError(ArgosError):
    status_code = 404
    title = "Not Found"
    default_detail = "Resource not found"


class ConflictError(ArgosError):
    status_code = 409
    title = "Conflict"
    default_detail = "Conflict"


class InternalError(ArgosError):
    status_code = 500
    title = "Internal Server Error"
    default_detail = "Database error"


@contextmanager
def storage_boundary(operation: str) -> Iterator[None]:
    """Turn any SQLAlchemy failure inside the block into InternalError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"storage failure during {operation}: {type(e).__name__}", exc_info=True)
        raise InternalError() from e
