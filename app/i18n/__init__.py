"""
i18n (Internationalization) package

Locale helpers, language metadata, RTL detection, and Accept-Language
parsing for the multi-locale content system.
"""

from .locale import (
    DEFAULT_LOCALE,
    LANGUAGE_NAMES,
    RTL_LOCALES,
    get_language_info,
    is_canonical_locale,
    is_rtl_locale,
    is_supported_locale,
    parse_accept_language,
    target_locales,
)

__all__ = [
    "DEFAULT_LOCALE",
    "LANGUAGE_NAMES",
    "RTL_LOCALES",
    "get_language_info",
    "is_canonical_locale",
    "is_rtl_locale",
    "is_supported_locale",
    "parse_accept_language",
    "target_locales",
]
