"""
In-memory stand-ins for the document store and the translation API.

Provides:
- InMemoryDocumentStore: dict-backed store with per-locale live/draft slots
- FakeTranslator: deterministic translator that records every call
- make_mock_db: AsyncSession double for service functions
"""

import copy
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from app.exceptions import DocumentNotFoundError, TranslationServiceError
from app.services.document_service import merge_locale_data


class InMemoryDocumentStore:
    """Dict-backed document store that records every write"""

    def __init__(self, hooks=(), canonical: str = "en"):
        self.hooks = list(hooks)
        self.canonical = canonical
        self.documents: dict[int, dict[str, Any]] = {}
        self.update_calls: list[dict[str, Any]] = []
        self.fail_on_load: Exception | None = None
        self.fail_on_update_locales: set[str] = set()
        self._next_id = 1

    def add(self, collection: str, data: dict[str, Any], locale: str = "en", status: str = "published") -> int:
        """Seed a document without running hooks"""
        document_id = self._next_id
        self._next_id += 1
        self.documents[document_id] = {
            "collection": collection,
            "status": status,
            "versions": {(locale, False): copy.deepcopy(data)},
        }
        return document_id

    def stored(self, document_id: int, locale: str, draft: bool = False) -> dict[str, Any] | None:
        return self.documents[document_id]["versions"].get((locale, draft))

    def _view(self, document_id: int, locale: str, draft_slot: bool) -> dict[str, Any]:
        document = self.documents[document_id]
        view = copy.deepcopy(document["versions"][(locale, draft_slot)])
        view["id"] = document_id
        view["collection"] = document["collection"]
        view["locale"] = locale
        view["_status"] = "draft" if draft_slot else document["status"]
        return view

    def _get(self, collection: str, document_id: int) -> dict[str, Any] | None:
        document = self.documents.get(document_id)
        if document is None or document["collection"] != collection:
            return None
        return document

    async def _run_hooks(self, collection, view, operation, locale, context):
        for hook in self.hooks:
            await hook(collection, view, operation, locale, dict(context or {}))

    async def find_by_id(self, collection, document_id, locale, depth=1, draft=False):
        if self.fail_on_load is not None:
            raise self.fail_on_load
        document = self._get(collection, document_id)
        if document is None:
            return None
        if draft and (locale, True) in document["versions"]:
            return self._view(document_id, locale, True)
        if (locale, False) not in document["versions"]:
            return None
        return self._view(document_id, locale, False)

    async def update(self, collection, document_id, data, locale, draft=False, context=None):
        self.update_calls.append(
            {
                "collection": collection,
                "document_id": document_id,
                "data": copy.deepcopy(data),
                "locale": locale,
                "draft": draft,
                "context": dict(context or {}),
            }
        )
        if locale in self.fail_on_update_locales:
            raise RuntimeError(f"write to {locale} rejected")
        document = self._get(collection, document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)

        versions = document["versions"]
        if (locale, draft) not in versions:
            seed = versions.get((locale, False)) if draft else None
            versions[(locale, draft)] = copy.deepcopy(seed) if seed else {}
        versions[(locale, draft)] = merge_locale_data(versions[(locale, draft)], data)

        view = self._view(document_id, locale, draft)
        await self._run_hooks(collection, view, "update", locale, context)
        return view

    async def create(self, collection, data, locale=None, status="draft", context=None):
        locale = locale or self.canonical
        document_id = self.add(collection, data, locale=locale, status=getattr(status, "value", status))
        view = self._view(document_id, locale, False)
        await self._run_hooks(collection, view, "create", locale, context)
        return view

    async def publish(self, collection, document_id, locale=None, context=None):
        locale = locale or self.canonical
        document = self._get(collection, document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)
        if (locale, True) not in document["versions"] and (locale, False) not in document["versions"]:
            raise DocumentNotFoundError(collection, document_id)
        draft = document["versions"].pop((locale, True), None)
        if draft is not None:
            document["versions"][(locale, False)] = draft
        if locale == self.canonical:
            document["status"] = "published"
        view = self._view(document_id, locale, False)
        await self._run_hooks(collection, view, "update", locale, context)
        return view

    async def delete(self, collection, document_id):
        if self._get(collection, document_id) is None:
            return False
        del self.documents[document_id]
        return True

    async def list_locales(self, collection, document_id):
        document = self._get(collection, document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)
        return sorted({locale for locale, _ in document["versions"]})


class FakeTranslator:
    """Prefixes text with the target locale, e.g. ``[bg] Hello``"""

    def __init__(self, fail_locales=(), fail_texts=(), empty_texts=()):
        self.calls: list[tuple[str, str]] = []
        self.fail_locales = set(fail_locales)
        self.fail_texts = set(fail_texts)
        self.empty_texts = set(empty_texts)

    async def translate(self, text: str, target_locale: str) -> str:
        self.calls.append((text, target_locale))
        if target_locale in self.fail_locales or text in self.fail_texts:
            raise TranslationServiceError("Translation API returned HTTP 500", target_locale)
        if text in self.empty_texts:
            return ""
        return f"[{target_locale}] {text}"

    def calls_for(self, locale: str) -> list[str]:
        return [text for text, code in self.calls if code == locale]


def make_mock_db(scalars_all=None, scalars_first=None):
    """AsyncSession double whose ``execute().scalars()`` returns the given rows"""
    db = AsyncMock()
    db.add = MagicMock()
    scalars = MagicMock()
    scalars.first.return_value = scalars_first
    scalars.all.return_value = list(scalars_all or [])
    execute_result = MagicMock()
    execute_result.scalars.return_value = scalars
    db.execute.return_value = execute_result
    return db
