"""Application errors and the handlers that turn them into the JSON envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status and a user-facing message."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: list[str] | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Access denied"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Uniqueness violation. Reported as 400 like other client errors."""

    status_code = 400
    default_message = "Resource already exists"


class PartialWriteError(AppError):
    """Some rows of a multi-row write failed after the parent row was written."""

    status_code = 500
    default_message = "Write failed"


class UpstreamError(AppError):
    status_code = 500
    default_message = "Database error"


def error_body(message: str, details: list[str] | None = None) -> dict:
    body: dict = {"success": False, "message": message}
    if details:
        body["details"] = details
    return body


def _format_validation_error(err: dict) -> str:
    # Drop the "body"/"query"/"path" prefix from the location
    loc = [str(part) for part in err.get("loc", ())[1:]]
    field = ".".join(loc)
    return f"{field}: {err['msg']}" if field else err["msg"]


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [_format_validation_error(err) for err in exc.errors()]
    return JSONResponse(status_code=400, content=error_body("Validation error", details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(UpstreamError.default_message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
