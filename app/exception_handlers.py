"""
Exception handlers

Every error leaves the API in one envelope:

{
    "error": {
        "status_code": 403,
        "error_code": "AUTH_PERMISSION_DENIED",
        "message": "You do not have permission to perform this action",
        "type": "Forbidden",
        "details": {"operation": "update", "collection": "media"},
        "path": "/api/v1/collections/media/12"
    }
}

Access denials and translation failures come through ``CMSException``;
framework errors (unknown routes, missing bearer token, bad request bodies)
are mapped onto the same codes.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.exceptions import CMSException, ErrorCode, TranslationError

logger = logging.getLogger(__name__)

ERROR_TYPES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Validation Error",
    500: "Internal Server Error",
    502: "Bad Gateway",
}

# Codes for errors raised by FastAPI/Starlette rather than by our own code
FRAMEWORK_ERROR_CODES = {
    401: ErrorCode.AUTH_FAILED,
    403: ErrorCode.AUTH_PERMISSION_DENIED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    422: ErrorCode.VALIDATION_FAILED,
}


def get_error_type(status_code: int) -> str:
    return ERROR_TYPES.get(status_code, "Error")


def get_http_error_code(status_code: int) -> ErrorCode:
    return FRAMEWORK_ERROR_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR)


def create_error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: ErrorCode,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    error: dict[str, Any] = {
        "status_code": status_code,
        "error_code": error_code.value,
        "message": message,
        "type": get_error_type(status_code),
    }
    if details:
        error["details"] = details
    error["path"] = request.url.path
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


async def cms_exception_handler(request: Request, exc: CMSException) -> JSONResponse:
    """Render access, lookup, validation and translation errors."""
    if isinstance(exc, TranslationError) or exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message, extra={"details": exc.details})
    else:
        logger.warning(
            "%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.error_code.value
        )

    return create_error_response(
        request,
        exc.status_code,
        exc.message,
        exc.error_code,
        details=exc.details,
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
    return create_error_response(
        request,
        exc.status_code,
        str(exc.detail),
        get_http_error_code(exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Validation error on %s", request.url.path, extra={"errors": errors})
    return create_error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Internal details never reach the client."""
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorCode.INTERNAL_ERROR,
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(CMSException, cms_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
