"""
Internationalization Tests

All tests avoid a live database: pure unit tests plus a throwaway FastAPI
app for the middleware.

Test classes:
    TestLocaleHelpers      — pure i18n helper functions
    TestI18nConfig         — settings defaults
    TestLanguageMiddleware — locale resolution order
"""

from __future__ import annotations

import inspect

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

# ══════════════════════════════════════════════════════════════════════════════
# 1. TestLocaleHelpers
# ══════════════════════════════════════════════════════════════════════════════


class TestLocaleHelpers:
    def test_is_rtl_arabic(self):
        from app.i18n.locale import is_rtl_locale

        assert is_rtl_locale("ar") is True

    def test_is_rtl_with_region_tag(self):
        """ar-SA should also detect as RTL (strips the region part)."""
        from app.i18n.locale import is_rtl_locale

        assert is_rtl_locale("ar-SA") is True

    def test_is_ltr_bulgarian(self):
        from app.i18n.locale import is_rtl_locale

        assert is_rtl_locale("bg") is False

    def test_canonical_locale(self):
        from app.i18n.locale import is_canonical_locale

        assert is_canonical_locale("en", "en") is True
        assert is_canonical_locale(None, "en") is True
        assert is_canonical_locale("bg", "en") is False

    def test_target_locales_keep_order(self):
        from app.i18n.locale import target_locales

        assert target_locales(["en", "bg", "tr"], "en") == ["bg", "tr"]
        assert target_locales(["tr", "en", "bg"], "en") == ["tr", "bg"]

    def test_target_locales_single_locale(self):
        from app.i18n.locale import target_locales

        assert target_locales(["en"], "en") == []

    def test_supported_locale(self):
        from app.i18n.locale import is_supported_locale

        assert is_supported_locale("bg", ["en", "bg", "tr"]) is True
        assert is_supported_locale("fr", ["en", "bg", "tr"]) is False
        assert is_supported_locale(None, ["en"]) is False

    def test_parse_accept_language_quality(self):
        from app.i18n.locale import parse_accept_language

        assert parse_accept_language("en;q=0.5,bg;q=0.9", ["en", "bg", "tr"]) == "bg"

    def test_parse_accept_language_base_match(self):
        from app.i18n.locale import parse_accept_language

        assert parse_accept_language("tr-TR", ["en", "bg", "tr"]) == "tr"

    def test_parse_accept_language_no_match(self):
        from app.i18n.locale import parse_accept_language

        assert parse_accept_language("ja,zh;q=0.8", ["en", "bg", "tr"]) is None
        assert parse_accept_language("", ["en"]) is None

    def test_language_names_cover_translation_targets(self):
        from app.i18n.locale import LANGUAGE_NAMES

        for code in ["en", "bg", "tr", "fr", "es", "de", "it", "nl", "pl", "sv", "ja", "zh", "ar"]:
            assert code in LANGUAGE_NAMES

    def test_get_language_info(self):
        from app.i18n.locale import get_language_info

        assert get_language_info("bg") == {"code": "bg", "name": "Български", "is_rtl": False}
        assert get_language_info("xx")["name"] == "xx"


# ══════════════════════════════════════════════════════════════════════════════
# 2. TestI18nConfig
# ══════════════════════════════════════════════════════════════════════════════


class TestI18nConfig:
    def test_default_language(self):
        from app.config import Settings

        assert Settings().default_language == "en"

    def test_supported_languages(self):
        from app.config import Settings

        assert Settings().supported_languages == ["en", "bg", "tr"]

    def test_translation_defaults(self):
        from app.config import Settings

        s = Settings()
        assert s.translation_model == "gpt-3.5-turbo"
        assert s.translation_max_tokens == 2048
        assert s.translation_queue_delay_seconds == 10


# ══════════════════════════════════════════════════════════════════════════════
# 3. TestLanguageMiddleware
# ══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def echo_client():
    from app.middleware.language import LanguageMiddleware

    app = FastAPI()
    app.add_middleware(LanguageMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return {"locale": request.state.locale}

    return TestClient(app)


class TestLanguageMiddleware:
    def test_dispatch_is_coroutine(self):
        from app.middleware.language import LanguageMiddleware

        assert inspect.iscoroutinefunction(LanguageMiddleware.dispatch)

    def test_default(self, echo_client):
        assert echo_client.get("/echo").json() == {"locale": "en"}

    def test_query_param_wins(self, echo_client):
        response = echo_client.get("/echo", params={"locale": "tr"}, headers={"X-Language": "bg"})
        assert response.json() == {"locale": "tr"}

    def test_x_language_header(self, echo_client):
        response = echo_client.get("/echo", headers={"X-Language": "bg", "Accept-Language": "tr"})
        assert response.json() == {"locale": "bg"}

    def test_accept_language(self, echo_client):
        assert echo_client.get("/echo", headers={"Accept-Language": "tr-TR"}).json() == {"locale": "tr"}

    def test_unsupported_values_ignored(self, echo_client):
        response = echo_client.get("/echo", params={"locale": "xx"}, headers={"X-Language": "fr"})
        assert response.json() == {"locale": "en"}
