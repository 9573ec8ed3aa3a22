"""Error taxonomy for the migration service and FastAPI handlers that render it."""

from typing import Optional

import pydantic
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

from msp_migrate.enums import ErrorKind
from msp_migrate.monitoring.logger import log_response_info

# Explicit exports
__all__ = [
    "MigrationToolError",
    "InvalidRegionError",
    "CredentialsError",
    "ValidationError",
    "AccountNotFoundError",
    "ApiError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "TransportError",
    "handle_broad_exceptions",
    "handle_migration_errors",
    "handle_pydantic_validation_errors",
]


class MigrationToolError(Exception):
    """Base class for every error the service raises on purpose."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidRegionError(MigrationToolError):
    """Region outside the fixed enumeration. Raised before any I/O."""

    kind = ErrorKind.INVALID_REGION


class CredentialsError(MigrationToolError):
    """Token exchange failed. Deliberately not subdivided."""

    kind = ErrorKind.CREDENTIALS

    def __init__(self, message: str = "Failed to fetch token. Please check your credentials."):
        super().__init__(message)


class ValidationError(MigrationToolError):
    """Malformed input caught locally, before any network call."""

    kind = ErrorKind.VALIDATION


class AccountNotFoundError(MigrationToolError):
    """No saved account with the requested id."""

    kind = ErrorKind.ACCOUNT_NOT_FOUND

    def __init__(self, account_id: str):
        super().__init__(f"MSP account '{account_id}' not found")
        self.account_id = account_id


class ApiError(MigrationToolError):
    """
    Non-2xx response from the platform.

    The status code and raw body are kept for diagnostics; callers branch on the
    subclass or ``kind``, never on the message text.
    """

    kind = ErrorKind.HTTP

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "", operation: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.operation = operation


class UnauthorizedError(ApiError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(ApiError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(ApiError):
    kind = ErrorKind.NOT_FOUND


class ServerError(ApiError):
    kind = ErrorKind.SERVER


class TransportError(MigrationToolError):
    """The request never completed (DNS, timeout, connection reset)."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.operation = operation


# Local HTTP status for each error kind
_HTTP_STATUS_BY_KIND = {
    ErrorKind.INVALID_REGION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.SERVER: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.HTTP: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TRANSPORT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# fastapi docs on middlewares: https://fastapi.tiangolo.com/tutorial/middleware/
async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        error_response = {"detail": "Internal server error", "error_type": type(err).__name__}

        logger.opt(exception=err).error(
            "Unhandled exception",
            http_status=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(err).__name__,
            error_message=str(err),
        )

        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response,
        )
        log_response_info(response)
        return response


# fastapi docs on error handlers: https://fastapi.tiangolo.com/tutorial/handling-errors/
async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors."""
    errors = exc.errors()
    error_response = {
        "detail": [
            {
                "msg": error["msg"],
                "input": error["input"],
            }
            for error in errors
        ]
    }

    logger.warning(
        "Validation error",
        error_count=len(errors),
        http_status=422,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type="ValidationError",
        validation_errors=errors,
    )

    response = JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=jsonable_errors(error_response),
    )
    log_response_info(response)

    return response


async def handle_migration_errors(request: Request, exc: MigrationToolError) -> JSONResponse:
    """
    Convert MigrationToolError subclasses to HTTP responses.

    Maps error kinds to HTTP status codes:
    - InvalidRegionError, ValidationError -> 400 Bad Request
    - CredentialsError, UnauthorizedError -> 401 Unauthorized
    - ForbiddenError -> 403 Forbidden
    - AccountNotFoundError, NotFoundError -> 404 Not Found
    - ServerError, other ApiError -> 502 Bad Gateway (upstream failure)
    - TransportError -> 503 Service Unavailable
    """
    http_status = _HTTP_STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    error_response = {
        "detail": exc.message,
        "error_type": exc.kind.value,
        "upstream_status": getattr(exc, "status_code", None),
    }

    log = logger.error if http_status >= 500 else logger.warning
    log(
        "Migration service error",
        exception_type=type(exc).__name__,
        error_message=exc.message,
        http_status=http_status,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=exc.kind.value,
        upstream_status=error_response["upstream_status"],
    )

    response = JSONResponse(
        status_code=http_status,
        content=error_response,
    )
    log_response_info(response)
    return response


def jsonable_errors(error_response: dict) -> dict:
    """Make pydantic error inputs JSON serializable (they can be arbitrary objects)."""
    for item in error_response["detail"]:
        if not isinstance(item["input"], (str, int, float, bool, list, dict, type(None))):
            item["input"] = str(item["input"])
    return error_response
