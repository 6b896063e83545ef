"""Exception handlers translating domain failures into the API error envelope.

Every failure response has the shape ``{"success": false, "message": ...}``
plus ``errors`` for field-level detail and ``stack`` outside production.
"""

import traceback

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.exceptions import AuthorizationError
from storefront.shared.settings import is_production

logger = structlog.get_logger(__name__)


def first_message(messages, default: str) -> str:
    """Pick the first human-readable message out of a Protean error payload."""
    if isinstance(messages, str):
        return messages
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, (list, tuple)) and value:
                return str(value[0])
            if value:
                return str(value)
    if isinstance(messages, (list, tuple)) and messages:
        return str(messages[0])
    return default


def error_response(status_code: int, message: str, exc: Exception | None = None, errors=None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    if exc is not None and not is_production():
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status_code, content=content)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages
    return error_response(
        400,
        first_message(messages, "Validation failed"),
        exc,
        errors=messages if isinstance(messages, dict) else None,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return error_response(400, "Validation failed", errors=errors)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, str(exc.args[0]) if exc.args else "Resource not found")


async def authorization_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return error_response(403, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
    return error_response(500, "Internal server error", exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(AuthorizationError, authorization_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
