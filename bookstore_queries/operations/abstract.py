"""
Abstract operation interfaces and result contracts for the bookstore query runner.

Concrete catalog operations (finds, updates, aggregations, index management)
implement the QueryOperation protocol. The orchestrator wraps whatever an
operation returns into an OperationResult TypedDict so reporting and
persistence see one shape.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Literal, Optional, Protocol, TypedDict, runtime_checkable

from pymongo.collection import Collection

ResultKind = Literal["books", "records", "count", "index", "plan"]


class OperationResult(TypedDict, total=False):
    """
    Outcome of one catalog operation.

    `value` holds JSON-friendly data: a list of dicts for `books`/`records`,
    an int for `count`, an index name for `index`, a dict for `plan`.
    """

    operation: str
    description: str
    kind: ResultKind
    value: Any
    rows: int
    duration_seconds: float
    error: Optional[str]
    notes: Optional[str]
    extra: Dict[str, Any]


@runtime_checkable
class QueryOperation(Protocol):
    """
    Common interface all catalog operations implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier, unique within the catalog.
    description : str
        A human-friendly summary, used as the console heading.
    kind : ResultKind
        How the reporter should render the returned value.
    """

    name: str
    description: str
    kind: ResultKind

    def execute(self, collection: Collection) -> Any:
        """
        Run the operation against `collection` and return its typed result.
        """
        ...


class AbstractQueryOperation(abc.ABC):
    """
    ABC helper for class-based operations.

    Subclasses set `name`, `description` and `kind` and implement `execute`.
    """

    name: str
    description: str
    kind: ResultKind

    @abc.abstractmethod
    def execute(self, collection: Collection) -> Any:  # pragma: no cover - interface only
        """Run the operation and return its result."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class AbstractPipelineOperation(AbstractQueryOperation):
    """
    Base for operations expressed as a single aggregation pipeline.
    """

    @abc.abstractmethod
    def pipeline(self) -> List[Dict[str, Any]]:  # pragma: no cover - interface only
        """Return the aggregation stages, in order."""
        raise NotImplementedError

    def run_pipeline(self, collection: Collection) -> List[Dict[str, Any]]:
        return list(collection.aggregate(self.pipeline()))


__all__ = [
    "ResultKind",
    "OperationResult",
    "QueryOperation",
    "AbstractQueryOperation",
    "AbstractPipelineOperation",
]
