"""
Utilities package for the bookstore query runner.

Exports shared helpers for logging, timing, and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from bookstore_queries.utils.logging import configure_logging, get_logger
from bookstore_queries.utils.profiler import ProfileStats, profile_block, profile_function

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
    "profile_function",
]
