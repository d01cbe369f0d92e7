"""
Infrastructure package for the bookstore query runner.

Centralizes MongoDB connectivity concerns (client factory, connectivity check,
scoped sessions, seeding). Keep this layer focused on I/O and resource
management, decoupled from operation/orchestrator logic.
"""

from bookstore_queries.infrastructure.db_factory import (
    build_client,
    connect,
    get_collection,
    mongo_session,
    seed_collection,
)

__all__ = [
    "build_client",
    "connect",
    "get_collection",
    "mongo_session",
    "seed_collection",
]
