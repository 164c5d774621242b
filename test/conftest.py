"""
Pytest configuration and fixtures for the CMS tests

Nothing here needs a live database: services run against the in-memory
store in ``test/utils/mocks.py`` or a mocked ``AsyncSession``, and routes are
exercised through ``TestClient`` with dependency overrides.
"""

import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from app.auth import get_current_actor  # noqa: E402
from app.permissions_config.permissions import ActorSnapshot  # noqa: E402
from app.routes.documents import get_document_store  # noqa: E402
from main import app  # noqa: E402
from utils.mocks import FakeTranslator, InMemoryDocumentStore  # noqa: E402


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def admin_actor():
    return ActorSnapshot.build(id=1, roles=["admin"])


@pytest.fixture
def editor_actor():
    return ActorSnapshot.build(id=2, roles=["editor"], editable_collections=["posts"], visible_collections=["pages"])


@pytest.fixture
def viewer_actor():
    return ActorSnapshot.build(id=3, roles=["viewer"], visible_collections=["posts"])


@pytest.fixture
def api(store):
    """
    TestClient wired to the in-memory store.

    Returns ``(client, set_actor)``; ``set_actor(None)`` makes requests anonymous.
    """
    state = {"actor": None}

    async def override_actor():
        return state["actor"]

    async def override_store():
        return store

    app.dependency_overrides[get_current_actor] = override_actor
    app.dependency_overrides[get_document_store] = override_store

    def set_actor(actor):
        state["actor"] = actor

    yield TestClient(app), set_actor

    app.dependency_overrides.clear()
