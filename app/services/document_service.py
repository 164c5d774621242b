"""
Document store

Locale-scoped reads and writes of collection documents, with a draft slot per
locale that is independent of the live copy.

Functions / methods:
    find_by_id    — read one locale's view of a document (live or draft)
    update        — partial update of one locale, live or draft
    create        — insert a new document with its first locale
    publish       — promote a locale's draft to live (canonical publish sets status)
    delete        — hard-delete a document and every locale version
    list_locales  — locale codes with a stored representation

After-change hooks registered on the store run after ``create``/``update``/
``publish`` with the caller's ``context`` dict, so a writer can tag its
writes (``{"disable_revalidate": True}``) and keep hooks from firing again.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from app.config import settings
from app.exceptions import DocumentNotFoundError
from app.models.document import Document, DocumentLocaleVersion, DocumentStatus

logger = logging.getLogger(__name__)

AfterChangeHook = Callable[[str, dict, str, str, dict], Awaitable[None]]

# Keys that describe the document rather than its locale data
RESERVED_KEYS = frozenset({"id", "locale", "_status", "collection"})


class DocumentStore(Protocol):
    async def find_by_id(
        self,
        collection: str,
        document_id: int,
        locale: str,
        depth: int = 1,
        draft: bool = False,
    ) -> dict[str, Any] | None: ...

    async def update(
        self,
        collection: str,
        document_id: int,
        data: dict[str, Any],
        locale: str,
        draft: bool = False,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]: ...


def _clean(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in RESERVED_KEYS}


def merge_locale_data(current: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """
    Partial update of one locale's values.

    Top-level keys in ``data`` replace the current ones, except field groups
    (plain objects such as ``meta``) which are merged member by member.
    Rich-text values (objects with a ``root``) are always replaced whole.
    """
    merged = dict(current)
    for key, value in _clean(data).items():
        existing = merged.get(key)
        if isinstance(value, dict) and isinstance(existing, dict) and "root" not in value:
            merged[key] = {**existing, **value}
        else:
            merged[key] = value
    return merged


def build_view(document: Document, version: DocumentLocaleVersion, locale: str) -> dict[str, Any]:
    """Flatten a document + one locale version into the dict shape callers consume."""
    view: dict[str, Any] = dict(version.data or {})
    view["id"] = document.id
    view["collection"] = document.collection
    view["locale"] = locale
    view["_status"] = DocumentStatus.draft.value if version.is_draft else document.status
    return view


class SQLAlchemyDocumentStore:
    """``DocumentStore`` backed by the ``documents`` / ``document_locale_versions`` tables."""

    def __init__(self, db: AsyncSession, hooks: Sequence[AfterChangeHook] = ()):
        self.db = db
        self.hooks = list(hooks)

    # ── Reads ────────────────────────────────────────────────────────────────

    async def _get_document(self, collection: str, document_id: int) -> Document | None:
        result = await self.db.execute(
            select(Document).where(Document.id == document_id, Document.collection == collection)
        )
        return result.scalars().first()

    @staticmethod
    def _version(document: Document, locale: str, draft: bool) -> DocumentLocaleVersion | None:
        for version in document.versions:
            if version.locale == locale and version.is_draft == draft:
                return version
        return None

    async def find_by_id(
        self,
        collection: str,
        document_id: int,
        locale: str,
        depth: int = 1,
        draft: bool = False,
    ) -> dict[str, Any] | None:
        """
        Return the ``locale`` view of a document, or None when the document
        does not exist or has nothing stored in that locale.

        ``draft=True`` prefers the locale's draft and falls back to its live
        copy. ``depth`` is part of the store contract; relationships are
        stored as ids and returned as-is.
        """
        document = await self._get_document(collection, document_id)
        if document is None:
            return None

        version = None
        if draft:
            version = self._version(document, locale, draft=True)
        if version is None:
            version = self._version(document, locale, draft=False)
        if version is None:
            return None
        return build_view(document, version, locale)

    async def list_locales(self, collection: str, document_id: int) -> list[str]:
        document = await self._get_document(collection, document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)
        return sorted({v.locale for v in document.versions})

    # ── Writes ───────────────────────────────────────────────────────────────

    async def _run_hooks(
        self,
        collection: str,
        view: dict[str, Any],
        operation: str,
        locale: str,
        context: dict[str, Any] | None,
    ) -> None:
        for hook in self.hooks:
            await hook(collection, view, operation, locale, dict(context or {}))

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        locale: str | None = None,
        status: DocumentStatus = DocumentStatus.draft,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        locale = locale or settings.default_language
        now = datetime.now(timezone.utc)
        document = Document(
            collection=collection,
            status=DocumentStatus(status).value,
            published_at=now if DocumentStatus(status) is DocumentStatus.published else None,
        )
        version = DocumentLocaleVersion(locale=locale, is_draft=False, data=_clean(data))
        document.versions.append(version)
        self.db.add(document)
        await self.db.commit()
        await self.db.refresh(document)

        logger.info("Document created: collection=%s id=%s locale=%s", collection, document.id, locale)
        view = build_view(document, version, locale)
        await self._run_hooks(collection, view, "create", locale, context)
        return view

    async def update(
        self,
        collection: str,
        document_id: int,
        data: dict[str, Any],
        locale: str,
        draft: bool = False,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Shallow-merge ``data`` into one locale of a document.

        ``draft=True`` writes only the locale's draft slot (seeded from its live
        copy on first write); the live copy is left alone.

        Raises:
            DocumentNotFoundError: if the document does not exist in ``collection``.
        """
        document = await self._get_document(collection, document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)

        target = self._version(document, locale, draft=draft)
        if target is None:
            live = self._version(document, locale, draft=False)
            seed = dict(live.data or {}) if (draft and live is not None) else {}
            target = DocumentLocaleVersion(locale=locale, is_draft=draft, data=seed)
            document.versions.append(target)

        target.data = merge_locale_data(target.data or {}, data)
        target.updated_at = datetime.now(timezone.utc)
        document.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(document)

        logger.info(
            "Document updated: collection=%s id=%s locale=%s draft=%s",
            collection,
            document_id,
            locale,
            draft,
        )
        view = build_view(document, target, locale)
        await self._run_hooks(collection, view, "update", locale, context)
        return view

    async def publish(
        self,
        collection: str,
        document_id: int,
        locale: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Promote ``locale``'s draft (if any) to its live copy.

        Publishing the canonical locale also marks the whole document published.

        Raises:
            DocumentNotFoundError: if the document does not exist or has
                nothing stored in ``locale``.
        """
        locale = locale or settings.default_language
        document = await self._get_document(collection, document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)

        draft_version = self._version(document, locale, draft=True)
        live = self._version(document, locale, draft=False)
        if draft_version is None and live is None:
            raise DocumentNotFoundError(collection, document_id)
        if draft_version is not None:
            if live is None:
                live = DocumentLocaleVersion(locale=locale, is_draft=False, data={})
                document.versions.append(live)
            live.data = dict(draft_version.data or {})
            # delete-orphan cascade removes the draft row
            document.versions.remove(draft_version)

        if locale == settings.default_language:
            document.status = DocumentStatus.published.value
            document.published_at = document.published_at or datetime.now(timezone.utc)
        document.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(document)

        logger.info("Document published: collection=%s id=%s locale=%s", collection, document_id, locale)
        view = build_view(document, live, locale)
        await self._run_hooks(collection, view, "update", locale, context)
        return view

    async def delete(self, collection: str, document_id: int) -> bool:
        """Hard-delete a document. Returns False if it did not exist."""
        document = await self._get_document(collection, document_id)
        if document is None:
            return False
        await self.db.delete(document)
        await self.db.commit()
        logger.info("Document deleted: collection=%s id=%s", collection, document_id)
        return True
