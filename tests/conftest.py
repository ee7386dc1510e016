"""Shared test fixtures.

Provides an in-memory editor session and a global override of the
session dependency so router tests never touch real storage.
"""

from collections.abc import Iterator

import pytest

from backend.dependencies import get_editor_session
from backend.main import app
from backend.schemas.newsletter import Newsletter
from backend.services.defaults import create_default_newsletter
from backend.services.persistence import NewsletterStorage
from backend.services.session import EditorSession
from backend.services.storage import InMemoryKeyValueStore


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def storage(store: InMemoryKeyValueStore) -> NewsletterStorage:
    return NewsletterStorage(store, key_prefix="test-pulse", max_versions=20, recent_limit=5)


@pytest.fixture
def newsletter() -> Newsletter:
    return create_default_newsletter()


@pytest.fixture
def editor_session(storage: NewsletterStorage) -> EditorSession:
    session = EditorSession(storage)
    session.is_active = True
    return session


@pytest.fixture(autouse=True)
def override_editor_session(editor_session: EditorSession) -> Iterator[None]:
    """Route every request to the test's in-memory editor session."""

    async def _get_test_session() -> EditorSession:
        return editor_session

    app.dependency_overrides[get_editor_session] = _get_test_session
    yield
    app.dependency_overrides.pop(get_editor_session, None)
