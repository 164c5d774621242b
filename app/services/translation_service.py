"""
Translation Service — locale fan-out

Takes a published document in the canonical locale and writes a translated
copy of its localized fields into every other supported locale.

Functions:
    should_trigger_fanout       — the write-hook gate (operation, locale, status)
    extract_translatable        — source values worth sending to the translator
    translate_fields            — translate one locale's payload, field by field
    LocaleFanoutTranslator.run  — load source, loop target locales, persist drafts
    get_document_in_locale      — read with locale-fallback logic
    list_languages_for_document — locale codes with a stored representation

Per (document, locale) the run moves ELIGIBLE → IN_PROGRESS → SUCCEEDED or
FAILED. Locales are independent: a failed field is left out of its locale's
payload, a failed write marks only that locale FAILED, and the loop always
carries on. Only a missing or unpublished source fails the whole run.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from app.config import settings
from app.constants.collections import CollectionName
from app.exceptions import DocumentNotFoundOrUnpublishedError, FieldTranslationError, LocaleWriteError
from app.i18n.locale import is_canonical_locale, target_locales
from app.models.document import DocumentStatus
from app.services.document_service import DocumentStore  # noqa: TC001
from app.services.rich_text import has_translatable_text, is_rich_text, parse_rich_text, translate_rich_text
from app.services.translator_client import TextTranslator  # noqa: TC001

logger = logging.getLogger(__name__)

# Context flag attached to fan-out writes so after-change hooks stay quiet
DISABLE_REVALIDATE = "disable_revalidate"

TRIGGER_OPERATIONS = frozenset({"create", "update"})


# ── Collection field maps ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class CollectionTranslationConfig:
    """Which fields of a collection are localized."""

    collection: str
    text_fields: tuple[str, ...] = ()
    group_fields: tuple[tuple[str, tuple[str, ...]], ...] = ()
    rich_text_fields: tuple[str, ...] = ()


META_GROUP = ("meta", ("title", "description"))

TRANSLATABLE_COLLECTIONS: dict[str, CollectionTranslationConfig] = {
    config.collection: config
    for config in (
        CollectionTranslationConfig(
            CollectionName.DICTIONARY.value,
            text_fields=("word", "definitions", "pronunciation", "example", "etymology"),
            group_fields=(META_GROUP,),
        ),
        CollectionTranslationConfig(
            CollectionName.POSTS.value,
            text_fields=("title",),
            group_fields=(META_GROUP,),
            rich_text_fields=("content",),
        ),
        CollectionTranslationConfig(CollectionName.PAGES.value, text_fields=("title",)),
        CollectionTranslationConfig(
            CollectionName.PART_OF_SPEECH.value,
            text_fields=("name",),
            rich_text_fields=("description",),
        ),
        CollectionTranslationConfig(
            CollectionName.MEDIA.value,
            text_fields=("alt",),
            rich_text_fields=("caption",),
        ),
        CollectionTranslationConfig(CollectionName.CATEGORIES.value, text_fields=("title",)),
    )
}


def get_translation_config(collection: str) -> CollectionTranslationConfig | None:
    return TRANSLATABLE_COLLECTIONS.get(collection)


# ── Result types ──────────────────────────────────────────────────────────────


class LocaleState(str, enum.Enum):
    ELIGIBLE = "eligible"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class LocaleOutcome:
    locale: str
    state: LocaleState = LocaleState.ELIGIBLE
    translated_fields: list[str] = field(default_factory=list)
    failed_fields: list[str] = field(default_factory=list)
    written: bool = False
    error: str | None = None


@dataclass
class FanoutResult:
    success: bool
    message: str
    collection: str
    document_id: Any
    locales: dict[str, LocaleOutcome] = field(default_factory=dict)
    # Set when the source could not be loaded for a reason worth retrying
    retryable: bool = False

    @property
    def succeeded_locales(self) -> list[str]:
        return [code for code, o in self.locales.items() if o.state is LocaleState.SUCCEEDED]

    @property
    def failed_locales(self) -> list[str]:
        return [code for code, o in self.locales.items() if o.state is LocaleState.FAILED]

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "collection": self.collection,
            "document_id": self.document_id,
            "locales": {
                code: {
                    "locale": code,
                    "state": o.state.value,
                    "translated_fields": o.translated_fields,
                    "failed_fields": o.failed_fields,
                    "written": o.written,
                    "error": o.error,
                }
                for code, o in self.locales.items()
            },
            "retryable": self.retryable,
        }


# ── Gate ──────────────────────────────────────────────────────────────────────


def is_published_source(doc: dict[str, Any]) -> bool:
    return doc.get("_status") == DocumentStatus.published.value


def should_trigger_fanout(
    collection: str,
    doc: dict[str, Any] | None,
    operation: str,
    request_locale: str | None = None,
    canonical: str | None = None,
) -> bool:
    """
    Decide whether a document write starts a translation fan-out.

    Only create/update of a published document written in the canonical
    locale qualifies; derived locales never feed back into translation.
    """
    canonical = canonical or settings.default_language
    config = get_translation_config(collection)
    if config is None or doc is None:
        return False
    if operation not in TRIGGER_OPERATIONS:
        return False
    if not is_canonical_locale(request_locale, canonical):
        return False
    if not is_canonical_locale(doc.get("locale"), canonical):
        return False
    return is_published_source(doc)


# ── Field extraction and translation ─────────────────────────────────────────


def _present(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def extract_translatable(config: CollectionTranslationConfig, doc: dict[str, Any]) -> dict[str, Any]:
    """
    Return ``{field_path: source_value}`` for every localized value that is
    present and non-empty. Group members use dotted paths (``meta.title``).
    """
    values: dict[str, Any] = {}

    for name in config.text_fields:
        if _present(doc.get(name)):
            values[name] = doc[name]

    for group, members in config.group_fields:
        group_value = doc.get(group)
        if not isinstance(group_value, dict):
            continue
        for member in members:
            if _present(group_value.get(member)):
                values[f"{group}.{member}"] = group_value[member]

    for name in config.rich_text_fields:
        value = doc.get(name)
        if is_rich_text(value) and has_translatable_text(parse_rich_text(value).root):
            values[name] = value

    return values


async def _translate_one(
    path: str,
    value: Any,
    locale: str,
    translator: TextTranslator,
) -> tuple[str, Any, Exception | None]:
    async def translate(text: str) -> str:
        return await translator.translate(text, locale)

    try:
        if isinstance(value, str):
            return path, await translate(value), None
        return path, await translate_rich_text(value, translate), None
    except Exception as e:
        return path, None, e


def _is_empty_result(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


async def translate_fields(
    config: CollectionTranslationConfig,
    doc: dict[str, Any],
    sources: dict[str, Any],
    locale: str,
    translator: TextTranslator,
) -> tuple[dict[str, Any], list[str], list[str]]:
    """
    Translate every source value concurrently for one locale.

    Returns ``(payload, translated_paths, failed_paths)``. The payload only
    holds fields that came back non-empty; group members are written into a
    copy of the source group so its other members are preserved.
    """
    results = await asyncio.gather(
        *(_translate_one(path, value, locale, translator) for path, value in sources.items())
    )

    payload: dict[str, Any] = {}
    translated: list[str] = []
    failed: list[str] = []

    for path, value, error in results:
        if error is not None:
            failure = FieldTranslationError(path, locale, error)
            logger.error(
                "%s (%s %s): %s",
                failure.message,
                config.collection,
                doc.get("id"),
                error,
            )
            failed.append(path)
            continue
        if _is_empty_result(value):
            logger.warning("Empty translation for field '%s' to '%s', skipping", path, locale)
            continue

        if "." in path:
            group, member = path.split(".", 1)
            if group not in payload:
                # non-localized members ride along, untranslated localized ones stay out
                localized = dict(config.group_fields).get(group, ())
                payload[group] = {k: v for k, v in (doc.get(group) or {}).items() if k not in localized}
            payload[group][member] = value
        else:
            payload[path] = value
        translated.append(path)

    return payload, translated, failed


# ── Orchestrator ──────────────────────────────────────────────────────────────


class LocaleFanoutTranslator:
    """Write translated drafts of one canonical document into every target locale."""

    def __init__(
        self,
        store: DocumentStore,
        translator: TextTranslator,
        locales: Sequence[str] | None = None,
        canonical: str | None = None,
    ):
        self.store = store
        self.translator = translator
        self.locales = list(locales if locales is not None else settings.supported_languages)
        self.canonical = canonical or settings.default_language

    @property
    def target_locales(self) -> list[str]:
        return target_locales(self.locales, self.canonical)

    async def run(self, collection: str, document_id: Any) -> FanoutResult:
        config = get_translation_config(collection)
        if config is None:
            message = f"Collection '{collection}' has no translatable fields"
            logger.error(message)
            return FanoutResult(success=False, message=message, collection=collection, document_id=document_id)

        logger.info("Starting translation fan-out for %s %s", collection, document_id)

        try:
            source = await self.store.find_by_id(collection, document_id, locale=self.canonical, depth=1)
        except Exception as e:
            logger.exception("Could not load %s %s for translation", collection, document_id)
            return FanoutResult(
                success=False,
                message=f"Error: {e}",
                collection=collection,
                document_id=document_id,
                retryable=True,
            )

        if source is None or not is_published_source(source):
            error = DocumentNotFoundOrUnpublishedError(collection, document_id)
            logger.error(error.message)
            return FanoutResult(success=False, message=error.message, collection=collection, document_id=document_id)

        sources = extract_translatable(config, source)
        if not sources:
            logger.info("%s %s has no translatable content, skipping translation", collection, document_id)
            return FanoutResult(
                success=True,
                message="Document has no translatable content",
                collection=collection,
                document_id=document_id,
            )

        result = FanoutResult(
            success=True,
            message="Created draft translations in all supported locales",
            collection=collection,
            document_id=document_id,
            locales={code: LocaleOutcome(locale=code) for code in self.target_locales},
        )

        for locale in self.target_locales:
            await self._translate_locale(config, source, sources, result.locales[locale])

        if result.failed_locales:
            logger.warning(
                "Translation fan-out for %s %s finished with failed locales: %s",
                collection,
                document_id,
                ", ".join(result.failed_locales),
            )
        return result

    async def _translate_locale(
        self,
        config: CollectionTranslationConfig,
        source: dict[str, Any],
        sources: dict[str, Any],
        outcome: LocaleOutcome,
    ) -> None:
        locale = outcome.locale
        document_id = source.get("id")
        outcome.state = LocaleState.IN_PROGRESS

        try:
            payload, outcome.translated_fields, outcome.failed_fields = await translate_fields(
                config, source, sources, locale, self.translator
            )
        except Exception as e:
            logger.exception("Error translating %s %s to %s", config.collection, document_id, locale)
            outcome.state = LocaleState.FAILED
            outcome.error = str(e)
            return

        if not payload:
            if outcome.failed_fields:
                outcome.state = LocaleState.FAILED
                outcome.error = "No field could be translated"
                logger.error("No field of %s %s could be translated to %s", config.collection, document_id, locale)
            else:
                outcome.state = LocaleState.SUCCEEDED
            return

        try:
            await self.store.update(
                config.collection,
                document_id,
                data=payload,
                locale=locale,
                draft=True,
                context={DISABLE_REVALIDATE: True},
            )
        except Exception as e:
            failure = LocaleWriteError(config.collection, document_id, locale, e)
            logger.error(failure.message, exc_info=True)
            outcome.state = LocaleState.FAILED
            outcome.error = failure.message
            return

        outcome.written = True
        outcome.state = LocaleState.SUCCEEDED
        logger.info(
            "Created draft translation for locale %s of %s %s",
            locale,
            config.collection,
            document_id,
        )


# ── Read helpers ──────────────────────────────────────────────────────────────


async def list_languages_for_document(store: Any, collection: str, document_id: Any) -> list[str]:
    """Return locale codes that have a stored representation of the document."""
    return await store.list_locales(collection, document_id)


async def get_document_in_locale(
    store: Any,
    collection: str,
    document_id: Any,
    locale: str,
    fallback_locale: str | None = None,
    draft: bool = False,
) -> dict[str, Any] | None:
    """Fetch a document with locale-fallback logic.

    Tries in order:
    1. Exact locale match (e.g. "bg")
    2. Base language match (e.g. "bg" when "bg-BG" is asked for)
    3. Fallback locale (the canonical locale by default)
    4. Returns None if nothing is found.

    A locale holding only a draft counts as missing unless ``draft`` is set.

    Raises:
        DocumentNotFoundError: if the document does not exist.
    """
    fallback_locale = fallback_locale or settings.default_language
    available = set(await store.list_locales(collection, document_id))

    base = locale.split("-")[0]
    for candidate in dict.fromkeys((locale, base, fallback_locale)):
        if candidate not in available:
            continue
        doc = await store.find_by_id(collection, document_id, locale=candidate, draft=draft)
        if doc is not None:
            return doc
    return None
