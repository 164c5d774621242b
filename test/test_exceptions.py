"""
Tests for custom exception classes and the JSON error envelope

Tests exception initialization, messages, status codes, and details.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException, status

from app.exception_handlers import (
    cms_exception_handler,
    get_error_type,
    get_http_error_code,
    http_exception_handler,
)
from app.exceptions import (
    AuthorizationError,
    CMSException,
    CollectionNotFoundError,
    DocumentNotFoundError,
    DocumentNotFoundOrUnpublishedError,
    DuplicateResourceError,
    ErrorCode,
    FieldTranslationError,
    InvalidCredentialsError,
    InvalidTokenError,
    LocaleWriteError,
    TranslationError,
    TranslationServiceError,
    UnsupportedLocaleError,
    UserNotFoundError,
    ValidationError,
)


def _request(path="/api/v1/collections/posts/1"):
    request = MagicMock()
    request.url.path = path
    return request


class TestCMSException:
    """Test base CMSException class"""

    def test_cms_exception_default(self):
        exc = CMSException("Test error")
        assert str(exc) == "Test error"
        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc.details == {}
        assert exc.error_code is ErrorCode.INTERNAL_ERROR

    def test_cms_exception_custom_code(self):
        exc = CMSException("Test error", status_code=400, error_code=ErrorCode.VALIDATION_FAILED)
        assert exc.status_code == 400
        assert exc.error_code is ErrorCode.VALIDATION_FAILED


class TestAccessExceptions:
    def test_invalid_credentials(self):
        exc = InvalidCredentialsError()
        assert exc.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc.error_code is ErrorCode.AUTH_FAILED
        assert exc.headers == {"WWW-Authenticate": "Bearer"}

    def test_invalid_token(self):
        exc = InvalidTokenError("Token has expired")
        assert exc.message == "Token has expired"
        assert exc.error_code is ErrorCode.AUTH_INVALID_TOKEN

    def test_unsupported_locale(self):
        exc = UnsupportedLocaleError("fr", ["en", "bg"])
        assert exc.status_code == 400
        assert exc.details == {"supported": ["en", "bg"], "field": "locale"}

    def test_authorization_error(self):
        exc = AuthorizationError(operation="update", collection="media")
        assert exc.status_code == status.HTTP_403_FORBIDDEN
        assert exc.details == {"operation": "update", "collection": "media"}
        assert exc.error_code is ErrorCode.AUTH_PERMISSION_DENIED

    def test_not_found_family(self):
        assert UserNotFoundError(3).status_code == 404
        exc = DocumentNotFoundError("posts", 7)
        assert exc.details["collection"] == "posts"
        assert "'7'" in exc.message
        assert CollectionNotFoundError("widgets").details["resource_id"] == "widgets"

    def test_validation_error_field(self):
        exc = ValidationError("bad", field="roles")
        assert exc.status_code == 400
        assert exc.details == {"field": "roles"}

    def test_duplicate(self):
        exc = DuplicateResourceError("User", "email", "a@b.c")
        assert exc.status_code == 409
        assert exc.message == "User with email 'a@b.c' already exists"


class TestTranslationExceptions:
    def test_source_unavailable(self):
        exc = DocumentNotFoundOrUnpublishedError("posts", 5)
        assert isinstance(exc, TranslationError)
        assert exc.status_code == 404
        assert exc.message == "Document 5 in 'posts' not found or not published"

    def test_field_error(self):
        exc = FieldTranslationError("meta.title", "bg", RuntimeError("boom"))
        assert exc.field == "meta.title"
        assert exc.details["cause"] == "boom"

    def test_locale_write_error(self):
        exc = LocaleWriteError("posts", 5, "tr")
        assert exc.locale == "tr"
        assert exc.details["cause"] is None

    def test_translation_service_error(self):
        exc = TranslationServiceError("timeout", target_locale="bg")
        assert exc.status_code == status.HTTP_502_BAD_GATEWAY
        assert exc.details == {"service": "translation", "target_locale": "bg"}


class TestErrorEnvelope:
    @pytest.mark.asyncio
    async def test_cms_exception_rendered(self):
        response = await cms_exception_handler(_request(), AuthorizationError(collection="posts"))
        assert response.status_code == 403
        body = response.body.decode()
        assert '"error_code":"AUTH_PERMISSION_DENIED"' in body
        assert '"path":"/api/v1/collections/posts/1"' in body

    @pytest.mark.asyncio
    async def test_http_exception_keeps_headers(self):
        exc = HTTPException(status_code=401, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"})
        response = await http_exception_handler(_request(), exc)
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_authentication_error_carries_bearer_challenge(self):
        response = await cms_exception_handler(_request("/auth/token"), InvalidCredentialsError())
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert '"error_code":"AUTH_FAILED"' in response.body.decode()

    def test_error_types(self):
        assert get_error_type(403) == "Forbidden"
        assert get_http_error_code(404) is ErrorCode.RESOURCE_NOT_FOUND
        assert get_http_error_code(405) is ErrorCode.UNKNOWN_ERROR
