"""Problem responses: every error leaves as application/problem+json.

Three layers: domain (ArgosError), validation (pydantic), catch-all (Exception).
The catch-all never leaks internal details.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from argos.services.errors import ArgosError

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"
_LOCATIONS = {"body", "query", "path", "header"}


def problem_response(
    status: int,
    title: str,
    detail: str,
    *,
    type_: str = "about:blank",
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=int(status),
        content={"type": type_, "title": title, "status": int(status), "detail": detail},
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


def _field_path(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


def format_validation_errors(errors: list[dict]) -> str:
    """`path: message` per error, joined by `; `."""
    if any(e.get("type") == "json_invalid" for e in errors):
        return "Request body contains invalid JSON"
    return "; ".join(f"{_field_path(tuple(e.get('loc', ())))}: {e.get('msg', 'invalid')}" for e in errors)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ArgosError)
    async def argos_error_handler(request: Request, exc: ArgosError):
        return problem_response(exc.status_code, exc.title, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        detail = format_validation_errors(list(exc.errors()))
        logger.warning(f"validation failed: {detail}", extra={"path": request.url.path})
        return problem_response(400, "Bad Request", detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        try:
            title = HTTPStatus(exc.status_code).phrase
        except ValueError:
            title = "Error"
        detail = "Resource not found" if exc.status_code == 404 else str(exc.detail)
        return problem_response(exc.status_code, title, detail, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"unhandled exception: {type(exc).__name__}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return problem_response(500, "Internal Server Error", "An unexpected error occurred.")
