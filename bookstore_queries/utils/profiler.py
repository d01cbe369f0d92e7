"""
Timing utilities for the bookstore query runner.

Every catalog operation is wrapped in `profile_block` so the console summary
and persisted results can show how long each round trip to the server took.

Usage example:
    from bookstore_queries.utils.profiler import profile_block

    with profile_block("find_by_genre") as stats:
        operation.execute(collection)

    print(stats.duration_seconds)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generator, Optional


@dataclass
class ProfileStats:
    """
    Container for timing measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    extra: dict[str, Any] = field(default_factory=dict)


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager measuring wall-clock duration (perf_counter) of a block.

    The stats are filled in even when the block raises, so failed operations
    still report how long they ran before failing.
    """
    stats = ProfileStats(label=label)
    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts


def profile_function(
    label: Optional[str] = None,
) -> Callable[[Callable[..., Any]], Callable[..., ProfileStats]]:
    """
    Decorator to time a function call and return ProfileStats.

    The wrapped function's return value is stored on `stats.extra["result"]`.

    Example
    -------
        @profile_function("seed")
        def seed():
            ...

        stats = seed()
        print(f"Seeding took {stats.duration_seconds:.3f}s")
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., ProfileStats]:
        def wrapper(*args: Any, **kwargs: Any) -> ProfileStats:
            tag = label or func.__name__
            with profile_block(tag) as stats:
                stats.extra["result"] = func(*args, **kwargs)
            return stats

        return wrapper

    return decorator


__all__ = ["ProfileStats", "profile_block", "profile_function"]
