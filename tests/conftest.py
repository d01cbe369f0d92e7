"""
Pytest configuration for the bookstore query runner.

Provides fixtures for:
- Settings isolation (no leaking env vars, fresh cached settings)
- In-memory collections backed by mongomock
- A session factory that records open/close calls for lifecycle tests
- Live-server access for integration tests
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generator, Iterator, Optional

import mongomock
import pytest
from pymongo.collection import Collection

from bookstore_queries.config import get_settings
from bookstore_queries.domain.samples import SAMPLE_BOOKS

_SETTINGS_ENV_VARS = (
    "MONGO_URI",
    "MONGO_DB_NAME",
    "MONGO_COLLECTION",
    "MONGO_SERVER_SELECTION_TIMEOUT_MS",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PAGE",
    "PAGE_SIZE",
    "FAILURE_POLICY",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path) -> Iterator[None]:
    """
    Run every test with default settings: no env overrides and no `.env`.
    """
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo `configure_logging` calls made by CLI tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def make_book(**overrides: Any) -> Dict[str, Any]:
    """Build a valid book document; keyword arguments override fields."""
    book: Dict[str, Any] = {
        "title": "Untitled",
        "author": "Anonymous",
        "genre": "Fiction",
        "published_year": 2000,
        "price": 10.0,
        "in_stock": True,
    }
    book.update(overrides)
    return book


@pytest.fixture
def book_factory() -> Callable[..., Dict[str, Any]]:
    return make_book


@pytest.fixture
def mongo_client() -> Iterator[mongomock.MongoClient]:
    client = mongomock.MongoClient()
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def empty_collection(mongo_client: mongomock.MongoClient) -> Collection:
    return mongo_client["plp_bookstore"]["books"]


@pytest.fixture
def books_collection(empty_collection: Collection) -> Collection:
    """Collection seeded with the bundled sample books."""
    empty_collection.insert_many([dict(book) for book in SAMPLE_BOOKS])
    return empty_collection


@dataclass
class SessionProbe:
    opened: int = 0
    closed: int = 0
    db_name: Optional[str] = None
    collection_name: Optional[str] = None


@pytest.fixture
def session_probe() -> SessionProbe:
    return SessionProbe()


@pytest.fixture
def session_factory(books_collection: Collection, session_probe: SessionProbe):
    """
    Stand-in for `mongo_session` yielding the seeded mongomock collection and
    counting how often it is opened and closed.
    """

    @contextmanager
    def factory(db_name: Optional[str], collection_name: Optional[str]) -> Generator[Collection, None, None]:
        session_probe.opened += 1
        session_probe.db_name = db_name
        session_probe.collection_name = collection_name
        try:
            yield books_collection
        finally:
            session_probe.closed += 1

    return factory


@pytest.fixture(scope="session")
def live_mongo_uri() -> str:
    return os.getenv("MONGO_URI", "mongodb://localhost:27017/")
