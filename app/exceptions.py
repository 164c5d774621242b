"""
Custom Exception Classes for CMS Project

This module defines custom exceptions for consistent error responses across
the application, plus the error family raised inside the locale fan-out
translation pipeline.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes surfaced in the JSON error envelope."""

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_USER_NOT_FOUND = "RESOURCE_USER_NOT_FOUND"
    RESOURCE_DOCUMENT_NOT_FOUND = "RESOURCE_DOCUMENT_NOT_FOUND"
    RESOURCE_COLLECTION_NOT_FOUND = "RESOURCE_COLLECTION_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_DUPLICATE_RESOURCE = "VALIDATION_DUPLICATE_RESOURCE"
    TRANSLATION_SOURCE_UNAVAILABLE = "TRANSLATION_SOURCE_UNAVAILABLE"
    TRANSLATION_FAILED = "TRANSLATION_FAILED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CMSException(Exception):
    """Base exception class for all CMS-related exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    # Extra response headers, e.g. WWW-Authenticate on 401
    headers: dict[str, str] | None = None

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(CMSException):
    """Raised when authentication fails"""

    error_code = ErrorCode.AUTH_FAILED
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Authentication failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid"""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message)


class InvalidTokenError(AuthenticationError):
    """Raised when JWT token is invalid or expired"""

    error_code = ErrorCode.AUTH_INVALID_TOKEN

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message=message)


class AuthorizationError(CMSException):
    """Raised when the access evaluator denies an operation (AccessDenied)"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        operation: str | None = None,
        collection: str | None = None,
    ):
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if collection:
            details["collection"] = collection
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CMSException):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a user is not found"""

    error_code = ErrorCode.RESOURCE_USER_NOT_FOUND

    def __init__(self, user_id: Any | None = None):
        super().__init__(resource_type="User", resource_id=user_id)


class DocumentNotFoundError(ResourceNotFoundError):
    """Raised when a document is not found in a collection"""

    error_code = ErrorCode.RESOURCE_DOCUMENT_NOT_FOUND

    def __init__(self, collection: str, document_id: Any | None = None):
        super().__init__(resource_type=f"Document in '{collection}'", resource_id=document_id)
        self.details["collection"] = collection


class CollectionNotFoundError(ResourceNotFoundError):
    """Raised when a collection slug is not one of the known collections"""

    error_code = ErrorCode.RESOURCE_COLLECTION_NOT_FOUND

    def __init__(self, collection: str):
        super().__init__(resource_type="Collection", resource_id=collection)


# ============================================================================
# Validation & Business Logic Exceptions
# ============================================================================


class ValidationError(CMSException):
    """Raised when input validation fails"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class UnsupportedLocaleError(ValidationError):
    """Raised when a request names a locale outside the configured set"""

    def __init__(self, locale: str, supported: list[str]):
        super().__init__(f"Unsupported locale: {locale}", field="locale", details={"supported": list(supported)})


class DuplicateResourceError(CMSException):
    """Raised when attempting to create a duplicate resource"""

    error_code = ErrorCode.VALIDATION_DUPLICATE_RESOURCE

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            message=f"{resource_type} with {field} '{value}' already exists",
            status_code=status.HTTP_409_CONFLICT,
            details={"resource_type": resource_type, "field": field, "value": value},
        )


# ============================================================================
# Service Exceptions
# ============================================================================


class ServiceError(CMSException):
    """Raised when a service layer operation fails"""

    error_code = ErrorCode.SERVICE_UNAVAILABLE

    def __init__(self, message: str, service: str | None = None):
        details = {"service": service} if service else {}
        super().__init__(message=message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


class TranslationServiceError(ServiceError):
    """Raised when a single call to the external translation API fails"""

    def __init__(self, message: str, target_locale: str | None = None):
        super().__init__(message=message, service="translation")
        if target_locale:
            self.details["target_locale"] = target_locale


# ============================================================================
# Translation Fan-out Exceptions
# ============================================================================


class TranslationError(CMSException):
    """Base class for errors raised while fanning a document out to locales"""

    error_code = ErrorCode.TRANSLATION_FAILED

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)


class DocumentNotFoundOrUnpublishedError(TranslationError):
    """The canonical document is missing or not published; the whole fan-out is skipped"""

    error_code = ErrorCode.TRANSLATION_SOURCE_UNAVAILABLE

    def __init__(self, collection: str, document_id: Any):
        super().__init__(
            message=f"Document {document_id} in '{collection}' not found or not published",
            details={"collection": collection, "document_id": document_id},
        )
        self.status_code = status.HTTP_404_NOT_FOUND


class FieldTranslationError(TranslationError):
    """A single field failed to translate for one locale; the field is omitted"""

    def __init__(self, field: str, locale: str, cause: Exception | None = None):
        super().__init__(
            message=f"Field '{field}' could not be translated to '{locale}'",
            details={"field": field, "locale": locale, "cause": str(cause) if cause else None},
        )
        self.field = field
        self.locale = locale


class LocaleWriteError(TranslationError):
    """Persisting the translated payload for one locale failed"""

    def __init__(self, collection: str, document_id: Any, locale: str, cause: Exception | None = None):
        super().__init__(
            message=f"Could not write '{locale}' draft of document {document_id} in '{collection}'",
            details={
                "collection": collection,
                "document_id": document_id,
                "locale": locale,
                "cause": str(cause) if cause else None,
            },
        )
        self.locale = locale
