"""
Tests for the SQLAlchemy document store

ORM objects are built in memory and handed back by a mocked session, so
the locale/draft slot logic runs without a database.
"""

from unittest.mock import AsyncMock

import pytest
from utils.mocks import make_mock_db

from app.exceptions import DocumentNotFoundError
from app.models.document import Document, DocumentLocaleVersion, DocumentStatus
from app.services.document_service import SQLAlchemyDocumentStore, build_view, merge_locale_data


def _document(status="published", versions=()):
    document = Document(id=1, collection="posts", status=status)
    for locale, is_draft, data in versions:
        document.versions.append(DocumentLocaleVersion(locale=locale, is_draft=is_draft, data=data))
    return document


def _store(document, hooks=()):
    return SQLAlchemyDocumentStore(make_mock_db(scalars_first=document), hooks=hooks)


class TestMergeLocaleData:
    def test_top_level_replaced(self):
        assert merge_locale_data({"title": "a", "slug": "s"}, {"title": "b"}) == {"title": "b", "slug": "s"}

    def test_groups_merged(self):
        current = {"meta": {"title": "a", "image": 3}}
        assert merge_locale_data(current, {"meta": {"title": "b"}}) == {"meta": {"title": "b", "image": 3}}

    def test_rich_text_replaced_whole(self):
        current = {"content": {"root": {"children": []}, "version": 1}}
        new = {"content": {"root": {"children": [{"text": "x"}]}}}
        assert merge_locale_data(current, new) == new

    def test_reserved_keys_dropped(self):
        merged = merge_locale_data({}, {"id": 5, "locale": "bg", "_status": "draft", "collection": "x", "title": "t"})
        assert merged == {"title": "t"}

    def test_current_not_mutated(self):
        current = {"meta": {"title": "a"}}
        merge_locale_data(current, {"meta": {"title": "b"}})
        assert current == {"meta": {"title": "a"}}


class TestBuildView:
    def test_live_view(self):
        document = _document(versions=[("en", False, {"title": "Hi"})])
        view = build_view(document, document.versions[0], "en")
        assert view == {"title": "Hi", "id": 1, "collection": "posts", "locale": "en", "_status": "published"}

    def test_draft_view_reports_draft(self):
        document = _document(versions=[("bg", True, {"title": "Здрасти"})])
        assert build_view(document, document.versions[0], "bg")["_status"] == DocumentStatus.draft.value


class TestFindById:
    @pytest.mark.asyncio
    async def test_missing_document(self):
        assert await _store(None).find_by_id("posts", 1, locale="en") is None

    @pytest.mark.asyncio
    async def test_live_copy_by_default(self):
        document = _document(versions=[("bg", False, {"title": "live"}), ("bg", True, {"title": "draft"})])
        doc = await _store(document).find_by_id("posts", 1, locale="bg")
        assert doc["title"] == "live"

    @pytest.mark.asyncio
    async def test_draft_preferred(self):
        document = _document(versions=[("bg", False, {"title": "live"}), ("bg", True, {"title": "draft"})])
        doc = await _store(document).find_by_id("posts", 1, locale="bg", draft=True)
        assert doc["title"] == "draft"
        assert doc["_status"] == "draft"

    @pytest.mark.asyncio
    async def test_draft_falls_back_to_live(self):
        document = _document(versions=[("bg", False, {"title": "live"})])
        doc = await _store(document).find_by_id("posts", 1, locale="bg", draft=True)
        assert doc["title"] == "live"

    @pytest.mark.asyncio
    async def test_locale_without_copy(self):
        document = _document(versions=[("en", False, {"title": "Hi"})])
        assert await _store(document).find_by_id("posts", 1, locale="tr") is None

    @pytest.mark.asyncio
    async def test_draft_only_locale_hidden_from_live_reads(self):
        document = _document(versions=[("en", False, {"title": "Hi"}), ("bg", True, {"title": "Здрасти"})])
        assert await _store(document).find_by_id("posts", 1, locale="bg") is None


class TestUpdate:
    @pytest.mark.asyncio
    async def test_missing_document(self):
        with pytest.raises(DocumentNotFoundError):
            await _store(None).update("posts", 1, {"title": "x"}, locale="en")

    @pytest.mark.asyncio
    async def test_draft_seeded_from_live(self):
        document = _document(versions=[("bg", False, {"title": "old", "slug": "s"})])
        view = await _store(document).update("posts", 1, {"title": "new"}, locale="bg", draft=True)

        assert view["title"] == "new"
        assert view["slug"] == "s"
        assert view["_status"] == "draft"
        live = next(v for v in document.versions if not v.is_draft)
        assert live.data == {"title": "old", "slug": "s"}

    @pytest.mark.asyncio
    async def test_new_locale_created(self):
        document = _document(versions=[("en", False, {"title": "Hi"})])
        await _store(document).update("posts", 1, {"title": "Merhaba"}, locale="tr", draft=True)
        assert {(v.locale, v.is_draft) for v in document.versions} == {("en", False), ("tr", True)}

    @pytest.mark.asyncio
    async def test_hooks_receive_context(self):
        document = _document(versions=[("en", False, {"title": "Hi"})])
        hook = AsyncMock()
        store = _store(document, hooks=[hook])
        await store.update("posts", 1, {"title": "Hey"}, locale="en", context={"disable_revalidate": True})

        collection, view, operation, locale, context = hook.await_args.args
        assert (collection, operation, locale) == ("posts", "update", "en")
        assert view["title"] == "Hey"
        assert context == {"disable_revalidate": True}


class TestPublish:
    @pytest.mark.asyncio
    async def test_draft_promoted(self):
        document = _document(status="draft", versions=[("en", False, {"title": "v1"}), ("en", True, {"title": "v2"})])
        view = await _store(document).publish("posts", 1, locale="en")

        assert view["title"] == "v2"
        assert view["_status"] == "published"
        assert document.status == "published"
        assert document.published_at is not None
        assert [(v.locale, v.is_draft) for v in document.versions] == [("en", False)]

    @pytest.mark.asyncio
    async def test_non_canonical_publish_keeps_status(self):
        document = _document(status="draft", versions=[("bg", True, {"title": "x"})])
        await _store(document).publish("posts", 1, locale="bg")
        assert document.status == "draft"

    @pytest.mark.asyncio
    async def test_locale_without_copy_rejected(self):
        document = _document(versions=[("en", False, {"title": "Hi"})])
        with pytest.raises(DocumentNotFoundError):
            await _store(document).publish("posts", 1, locale="tr")
        assert [(v.locale, v.is_draft) for v in document.versions] == [("en", False)]

    @pytest.mark.asyncio
    async def test_hook_operation_is_update(self):
        document = _document(versions=[("en", False, {"title": "v1"})])
        hook = AsyncMock()
        await _store(document, hooks=[hook]).publish("posts", 1, locale="en")
        assert hook.await_args.args[2] == "update"


class TestListLocales:
    @pytest.mark.asyncio
    async def test_sorted_unique(self):
        document = _document(versions=[("tr", True, {}), ("en", False, {}), ("bg", False, {}), ("bg", True, {})])
        assert await _store(document).list_locales("posts", 1) == ["bg", "en", "tr"]

    @pytest.mark.asyncio
    async def test_missing(self):
        with pytest.raises(DocumentNotFoundError):
            await _store(None).list_locales("posts", 1)
