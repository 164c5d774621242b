"""
Locale helpers

Pure functions for locale handling:
- the canonical locale and the fan-out target list
- RTL (right-to-left) language detection
- Accept-Language header parsing with quality-value (q=) support
- Language metadata lookup
"""

from __future__ import annotations

from collections.abc import Sequence

# ── Constants ─────────────────────────────────────────────────────────────────

DEFAULT_LOCALE = "en"

# Base language codes whose scripts read right-to-left
RTL_LOCALES: frozenset[str] = frozenset({"ar", "he", "fa", "ur", "yi", "ku"})

# Human-readable names for locales the translator knows how to target
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "bg": "Български",
    "tr": "Türkçe",
    "fr": "Français",
    "es": "Español",
    "de": "Deutsch",
    "it": "Italiano",
    "nl": "Nederlands",
    "pl": "Polski",
    "sv": "Svenska",
    "ja": "日本語",
    "zh": "中文",
    "ar": "العربية",
}


# ── Public helpers ────────────────────────────────────────────────────────────


def is_canonical_locale(locale: str | None, canonical: str = DEFAULT_LOCALE) -> bool:
    """True when ``locale`` is the canonical locale. ``None`` (no locale on the request) counts as canonical."""
    return locale is None or locale == canonical


def target_locales(supported: Sequence[str], canonical: str = DEFAULT_LOCALE) -> list[str]:
    """Return the supported locales in their configured order, minus the canonical one."""
    return [code for code in supported if code != canonical]


def is_supported_locale(locale: str | None, supported: Sequence[str]) -> bool:
    return locale is not None and locale in supported


def is_rtl_locale(locale: str) -> bool:
    """Return True when the given BCP 47 locale is right-to-left.

    Compares only the base language tag (before the first hyphen), so
    both "ar" and "ar-SA" are correctly identified as RTL.
    """
    base = locale.split("-")[0].lower()
    return base in RTL_LOCALES


def parse_accept_language(header: str, supported: Sequence[str]) -> str | None:
    """Parse an Accept-Language header and return the best matching locale.

    Algorithm:
    1. Split header into tags with optional q-values (default q=1.0).
    2. Sort by q-value descending.
    3. For each tag, try exact match in `supported`, then base-language match.
    4. Return the first match or None if nothing matches.

    Args:
        header:    Value of the Accept-Language HTTP header, e.g.
                   "bg-BG,bg;q=0.9,en-US;q=0.8,en;q=0.7".
        supported: Ordered list of locale codes the server supports.

    Returns:
        The best matching locale from `supported`, or None.
    """
    if not header:
        return None

    weighted: list[tuple[float, str]] = []
    for part in header.split(","):
        part = part.strip()
        if not part:
            continue
        if ";q=" in part:
            tag, q_str = part.split(";q=", 1)
            try:
                q = float(q_str.strip())
            except ValueError:
                q = 1.0
        else:
            tag = part
            q = 1.0
        weighted.append((q, tag.strip()))

    # Stable sort keeps header order for equal q-values
    weighted.sort(key=lambda x: x[0], reverse=True)

    supported_lower = [s.lower() for s in supported]

    for _, tag in weighted:
        tag_lower = tag.lower()
        if tag_lower in supported_lower:
            return supported[supported_lower.index(tag_lower)]
        base = tag_lower.split("-")[0]
        if base in supported_lower:
            return supported[supported_lower.index(base)]

    return None


def get_language_info(locale: str) -> dict[str, str | bool]:
    """Return a metadata dict with keys ``code``, ``name`` and ``is_rtl``."""
    return {
        "code": locale,
        "name": LANGUAGE_NAMES.get(locale, locale),
        "is_rtl": is_rtl_locale(locale),
    }
