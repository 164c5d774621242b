"""
Language Detection Middleware

Sets request.state.locale from:
  1. ``locale`` query parameter (exact match against supported list)
  2. X-Language request header (exact match against supported list)
  3. Accept-Language header (quality-weighted, best-match)
  4. settings.default_language (fallback)

No DB lookups, only header and query parsing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings
from app.i18n.locale import parse_accept_language

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request
    from starlette.responses import Response


class LanguageMiddleware(BaseHTTPMiddleware):
    """Detect the request locale and attach it to request.state.locale."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        locale = request.query_params.get("locale", "").strip()
        if locale not in settings.supported_languages:
            locale = request.headers.get("X-Language", "").strip()
        if locale not in settings.supported_languages:
            locale = (
                parse_accept_language(
                    request.headers.get("Accept-Language", ""),
                    settings.supported_languages,
                )
                or settings.default_language
            )
        request.state.locale = locale
        return await call_next(request)
