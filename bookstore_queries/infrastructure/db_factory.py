"""
MongoDB connection factory utilities for the bookstore query runner.

Provides client construction from settings, an eager connectivity check, and
the `mongo_session` context manager that scopes one client to one run and
guarantees it is closed on every exit path.

Connection failures are not retried: an unreachable server or rejected
credentials abort the run with `DatabaseConnectionError`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, OperationFailure

from bookstore_queries.config import Settings, get_settings
from bookstore_queries.errors import DatabaseConnectionError
from bookstore_queries.utils.logging import get_logger

log = get_logger(__name__)

ClientFactory = Callable[[], MongoClient]


def build_client(
    uri_override: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> MongoClient:
    """
    Construct a MongoClient from settings without contacting the server.

    pymongo connects lazily, so failures only surface on the first command;
    see `connect` for the eager check.
    """
    settings = settings or get_settings()
    return MongoClient(
        uri_override or settings.mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
    )


def connect(client_factory: Optional[ClientFactory] = None) -> MongoClient:
    """
    Create a client and verify the server is reachable with a `ping`.

    Parameters
    ----------
    client_factory : callable, optional
        Zero-argument callable returning a client. Defaults to `build_client`.

    Returns
    -------
    MongoClient
        A client that has answered `ping` at least once.

    Raises
    ------
    DatabaseConnectionError
        If the server cannot be selected or rejects authentication.
    """
    client = (client_factory or build_client)()
    try:
        client.admin.command("ping")
    except (ConnectionFailure, OperationFailure) as exc:
        client.close()
        log.error("[CONNECTION FAILED] MongoDB is unreachable", extra={"error": str(exc)})
        raise DatabaseConnectionError(f"Could not connect to MongoDB: {exc}") from exc
    log.info("Connected to MongoDB server")
    return client


def get_collection(
    client: MongoClient,
    db_name: Optional[str] = None,
    collection_name: Optional[str] = None,
) -> Collection:
    """Resolve the target collection, defaulting to the configured names."""
    settings = get_settings()
    database = client[db_name or settings.mongo_db_name]
    return database[collection_name or settings.mongo_collection]


@contextmanager
def mongo_session(
    db_name: Optional[str] = None,
    collection_name: Optional[str] = None,
    client_factory: Optional[ClientFactory] = None,
) -> Generator[Collection, None, None]:
    """
    Context manager yielding the target collection for the lifetime of a run.

    Example
    -------
        with mongo_session() as books:
            books.count_documents({})
    """
    client = connect(client_factory)
    try:
        yield get_collection(client, db_name, collection_name)
    finally:
        client.close()
        log.info("Connection closed")


def seed_collection(
    collection: Collection,
    documents: Iterable[Dict[str, Any]],
    drop: bool = False,
) -> int:
    """
    Insert sample documents into `collection`, optionally dropping it first.

    Documents are copied before insertion because pymongo adds `_id` to the
    mappings it is given.

    Returns
    -------
    int
        Number of inserted documents.
    """
    if drop:
        collection.drop()
        log.info("Collection dropped", extra={"collection": collection.name})
    payload: List[Dict[str, Any]] = [dict(doc) for doc in documents]
    if not payload:
        return 0
    result = collection.insert_many(payload)
    inserted = len(result.inserted_ids)
    log.info(f"Inserted {inserted} document(s)", extra={"collection": collection.name})
    return inserted


__all__ = [
    "build_client",
    "connect",
    "get_collection",
    "mongo_session",
    "seed_collection",
]
