"""
Exception hierarchy for the bookstore query runner.
"""

from __future__ import annotations


class QueryRunnerError(Exception):
    """Base class for all runner errors."""


class DatabaseConnectionError(QueryRunnerError):
    """The MongoDB server is unreachable or rejected the credentials."""


class OperationFailedError(QueryRunnerError):
    """
    A catalog operation failed while running under the strict failure policy.

    The original exception is kept on `cause` and chained via `__cause__`.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Operation '{operation}' failed: {cause}")


__all__ = ["QueryRunnerError", "DatabaseConnectionError", "OperationFailedError"]
