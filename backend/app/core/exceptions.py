"""
Error taxonomy for Taskboard and its mapping onto HTTP responses.

Every failure leaves the API as ``{"error": str, "details"?: {field: [messages]}}``
so clients can tell "you must log in" (401) from "you are not allowed" (403)
from "this does not exist" (404).
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger
from app.core.settings import settings

logger = get_logger(__name__)

GENERIC_STORE_ERROR = "Internal server error. Please try again or contact support."


class TaskboardException(Exception):
    """Base exception for Taskboard application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidInput(TaskboardException):
    """Raised when input validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationRequired(TaskboardException):
    """Raised when the request carries no valid session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(TaskboardException):
    """Raised when user doesn't have permission to perform action."""

    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFound(TaskboardException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(TaskboardException):
    """Raised on uniqueness violations (duplicate email, existing membership)."""

    status_code = status.HTTP_409_CONFLICT


class StoreFailure(TaskboardException):
    """Raised when the database rejects an operation for reasons the caller can't fix."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    @classmethod
    def wrap(cls, operation: str, error: Exception) -> "StoreFailure":
        """
        Build a StoreFailure for a failed write and log the underlying error.

        The caller-facing message stays generic; the database error text is only
        attached to ``details`` in debug mode.

        Args:
            operation: What operation failed (e.g., "create project")
            error: The underlying exception
        """
        logger.error(
            "store_failure",
            operation=operation,
            error_type=type(error).__name__,
            error=str(error),
        )
        details = {"exception": [str(error)]} if settings.app_debug else None
        return cls(f"Failed to {operation}. Please try again or contact support.", details)


def raise_not_found(resource_type: str, identifier: Any = None, message: str = None) -> None:
    """
    Raise ResourceNotFound with descriptive message.

    Args:
        resource_type: Type of resource (e.g., "Project", "Task", "User")
        identifier: The ID/identifier that was not found
        message: Custom message (overrides default)
    """
    if message:
        detail = message
    elif identifier is not None:
        detail = f"{resource_type} with id '{identifier}' not found"
    else:
        detail = f"{resource_type} not found"

    raise ResourceNotFound(detail)


def raise_permission_denied(message: str = None, action: str = None) -> None:
    """
    Raise PermissionDenied with descriptive message.

    Args:
        message: Custom message
        action: The action that was denied (e.g., "delete project", "remove member")
    """
    if message:
        detail = message
    elif action:
        detail = f"You don't have permission to {action}"
    else:
        detail = "Permission denied"

    raise PermissionDenied(detail)


def error_body(message: str, details: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return body


def _validation_details(exc: RequestValidationError) -> dict[str, list[str]]:
    details: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        details.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return details


async def taskboard_exception_handler(request: Request, exc: TaskboardException) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationRequired):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", _validation_details(exc)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body(f"Rate limit exceeded. {exc.detail}"),
    )


async def store_failure_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("store_failure", error_type=type(exc).__name__)
    details = {"exception": [str(exc)]} if settings.app_debug else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(GENERIC_STORE_ERROR, details),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskboardException, taskboard_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(SQLAlchemyError, store_failure_handler)
