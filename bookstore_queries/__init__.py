"""
Bookstore Queries - a catalog of MongoDB queries over a `books` collection.

This package connects to MongoDB and runs a fixed, ordered catalog of
operations against one collection, printing each result:

- Basic CRUD (finds by field, a price update, a delete by title)
- Advanced queries (compound filters, projection, sorting, pagination)
- Aggregation pipelines (average price per genre, top author, decades)
- Index creation and query-plan inspection

Every operation is isolated, so one failing query does not hide the results
of the ones after it, and the client connection is always closed.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from bookstore_queries.config import Settings, get_settings
from bookstore_queries.errors import (
    DatabaseConnectionError,
    OperationFailedError,
    QueryRunnerError,
)
from bookstore_queries.operations.abstract import (
    AbstractQueryOperation,
    OperationResult,
    QueryOperation,
)
from bookstore_queries.orchestrator import RunConfig, available_operations, run_operations
from bookstore_queries.utils.logging import configure_logging, get_logger
from bookstore_queries.utils.profiler import ProfileStats, profile_block, profile_function

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "QueryRunnerError",
    "DatabaseConnectionError",
    "OperationFailedError",
    # Orchestration
    "RunConfig",
    "available_operations",
    "run_operations",
    # Operation abstractions
    "QueryOperation",
    "AbstractQueryOperation",
    "OperationResult",
    # Logging
    "configure_logging",
    "get_logger",
    # Profiling
    "ProfileStats",
    "profile_block",
    "profile_function",
]
