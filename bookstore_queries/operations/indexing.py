"""
Index management and query-plan inspection.

`create_index` is idempotent on the server: asking for an index that already
exists with the same key pattern returns its name without building a second
one. Explains run the `explain` command at `executionStats` verbosity and are
reduced to a flat summary for display; the raw stats block is kept alongside.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pymongo
from pymongo.collection import Collection

from bookstore_queries.operations.abstract import AbstractQueryOperation
from bookstore_queries.utils.logging import get_logger

log = get_logger(__name__)

IndexKeys = Sequence[Tuple[str, int]]

EXPLAIN_VERBOSITY = "executionStats"


class CreateIndexOperation(AbstractQueryOperation):
    """Create a single-field or compound index and return its name."""

    kind = "index"

    def __init__(self, name: str, keys: IndexKeys, description: Optional[str] = None) -> None:
        if not keys:
            raise ValueError("index keys must not be empty")
        self.name = name
        self.keys: List[Tuple[str, int]] = list(keys)
        fields = ", ".join(field for field, _ in self.keys)
        self.description = description or f"Index on ({fields})"

    def execute(self, collection: Collection) -> str:
        index_name = collection.create_index(self.keys)
        log.info(f"Index {index_name!r} ready", extra={"keys": self.keys})
        return index_name


def title_index() -> CreateIndexOperation:
    return CreateIndexOperation(
        "create_title_index",
        [("title", pymongo.ASCENDING)],
        "Index on title",
    )


def author_year_index() -> CreateIndexOperation:
    return CreateIndexOperation(
        "create_author_year_index",
        [("author", pymongo.ASCENDING), ("published_year", pymongo.ASCENDING)],
        "Compound index on author and published_year",
    )


def _iter_plan_stages(plan: Optional[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    """Walk a winning plan depth-first through its input stages."""
    stack = [plan] if plan else []
    while stack:
        stage = stack.pop()
        yield stage
        # Slot-based-engine plans nest the classic tree under `queryPlan`.
        for key in ("queryPlan", "inputStage"):
            child = stage.get(key)
            if isinstance(child, dict):
                stack.append(child)
        stack.extend(s for s in reversed(stage.get("inputStages", [])) if isinstance(s, dict))


def summarize_explain(explain: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten an explain document into the fields worth printing.

    Returns
    -------
    dict
        `stage`, `index_name`, `docs_examined`, `keys_examined`, `n_returned`,
        `execution_time_ms`, and the untouched `raw` executionStats block.
    """
    winning_plan = explain.get("queryPlanner", {}).get("winningPlan")
    stages = list(_iter_plan_stages(winning_plan))
    root_stage = stages[0] if stages else {}
    if "queryPlan" in root_stage and isinstance(root_stage["queryPlan"], dict):
        root_stage = root_stage["queryPlan"]
    index_name = next((s["indexName"] for s in stages if s.get("indexName")), None)
    stats = explain.get("executionStats", {})
    return {
        "stage": root_stage.get("stage"),
        "index_name": index_name,
        "docs_examined": stats.get("totalDocsExamined"),
        "keys_examined": stats.get("totalKeysExamined"),
        "n_returned": stats.get("nReturned"),
        "execution_time_ms": stats.get("executionTimeMillis"),
        "raw": stats,
    }


class ExplainQueryOperation(AbstractQueryOperation):
    """Report how the server satisfies a `find` with the given filter."""

    kind = "plan"

    def __init__(self, name: str, query: Dict[str, Any], description: Optional[str] = None) -> None:
        self.name = name
        self.query = dict(query)
        self.description = description or f"Query execution plan for {self.query}"

    def command(self, collection: Collection) -> Dict[str, Any]:
        return {"find": collection.name, "filter": self.query}

    def execute(self, collection: Collection) -> Dict[str, Any]:
        explain = collection.database.command(
            "explain", self.command(collection), verbosity=EXPLAIN_VERBOSITY
        )
        summary = summarize_explain(explain)
        log.debug("Explain summary", extra={"operation": self.name, "stage": summary["stage"]})
        return summary


def explain_title_lookup(title: str = "1984") -> ExplainQueryOperation:
    return ExplainQueryOperation(
        "explain_title_lookup",
        {"title": title},
        f'Query execution plan for title "{title}"',
    )


def explain_author_year_lookup(
    author: str = "George Orwell", year: int = 1949
) -> ExplainQueryOperation:
    return ExplainQueryOperation(
        "explain_author_year_lookup",
        {"author": author, "published_year": year},
        f"Query execution plan for books by {author} published in {year}",
    )


__all__ = [
    "EXPLAIN_VERBOSITY",
    "CreateIndexOperation",
    "ExplainQueryOperation",
    "summarize_explain",
    "title_index",
    "author_year_index",
    "explain_title_lookup",
    "explain_author_year_lookup",
]
