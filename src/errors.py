"""Application errors and the handlers that turn them into JSON envelopes."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when a required request field is missing or malformed."""

    status_code = 400


class NotFoundError(AppError):
    """Raised when an operation references an id with no matching row."""

    status_code = 404


class GuestNotFoundError(NotFoundError):
    def __init__(self, guest_id: int | None = None) -> None:
        self.guest_id = guest_id
        super().__init__("Guest not found")


class InvitationNotFoundError(NotFoundError):
    def __init__(self, invitation_id: int | None = None) -> None:
        self.invitation_id = invitation_id
        super().__init__("Invitation not found")


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse({"success": False, "message": message, **extra}, status_code=status_code)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
    return error_response(400, message, errors=jsonable_errors(errors))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while processing %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


def jsonable_errors(errors) -> list[dict]:
    # pydantic error contexts may hold exception instances
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
