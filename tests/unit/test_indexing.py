from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from bookstore_queries.operations.indexing import (
    EXPLAIN_VERBOSITY,
    CreateIndexOperation,
    author_year_index,
    explain_author_year_lookup,
    explain_title_lookup,
    summarize_explain,
    title_index,
)

CLASSIC_EXPLAIN: Dict[str, Any] = {
    "queryPlanner": {
        "winningPlan": {
            "stage": "FETCH",
            "inputStage": {
                "stage": "IXSCAN",
                "keyPattern": {"title": 1},
                "indexName": "title_1",
            },
        }
    },
    "executionStats": {
        "nReturned": 1,
        "executionTimeMillis": 0,
        "totalKeysExamined": 1,
        "totalDocsExamined": 1,
    },
}

SBE_EXPLAIN: Dict[str, Any] = {
    "queryPlanner": {
        "winningPlan": {
            "queryPlan": {
                "stage": "FETCH",
                "inputStage": {"stage": "IXSCAN", "indexName": "author_1_published_year_1"},
            },
            "slotBasedPlan": {"slots": "..."},
        }
    },
    "executionStats": {
        "nReturned": 1,
        "executionTimeMillis": 2,
        "totalKeysExamined": 1,
        "totalDocsExamined": 1,
    },
}

COLLSCAN_EXPLAIN: Dict[str, Any] = {
    "queryPlanner": {"winningPlan": {"stage": "COLLSCAN", "direction": "forward"}},
    "executionStats": {
        "nReturned": 1,
        "executionTimeMillis": 1,
        "totalKeysExamined": 0,
        "totalDocsExamined": 14,
    },
}


def test_title_index_is_created_once(empty_collection):
    operation = title_index()

    first = operation.execute(empty_collection)
    second = operation.execute(empty_collection)

    info = empty_collection.index_information()
    assert first == second == "title_1"
    assert set(info) == {"_id_", "title_1"}


def test_compound_index_keeps_key_order(empty_collection):
    name = author_year_index().execute(empty_collection)
    author_year_index().execute(empty_collection)

    info = empty_collection.index_information()
    assert name == "author_1_published_year_1"
    assert info[name]["key"] == [("author", 1), ("published_year", 1)]
    assert len(info) == 2


def test_create_index_rejects_empty_keys():
    with pytest.raises(ValueError):
        CreateIndexOperation("empty", [])


def test_summarize_explain_finds_index_scan():
    summary = summarize_explain(CLASSIC_EXPLAIN)

    assert summary["stage"] == "FETCH"
    assert summary["index_name"] == "title_1"
    assert summary["docs_examined"] == 1
    assert summary["keys_examined"] == 1
    assert summary["n_returned"] == 1
    assert summary["execution_time_ms"] == 0
    assert summary["raw"] is CLASSIC_EXPLAIN["executionStats"]


def test_summarize_explain_handles_slot_based_plans():
    summary = summarize_explain(SBE_EXPLAIN)

    assert summary["stage"] == "FETCH"
    assert summary["index_name"] == "author_1_published_year_1"


def test_summarize_explain_reports_collection_scan_without_index():
    summary = summarize_explain(COLLSCAN_EXPLAIN)

    assert summary["stage"] == "COLLSCAN"
    assert summary["index_name"] is None
    assert summary["docs_examined"] == 14


def test_summarize_explain_tolerates_missing_sections():
    summary = summarize_explain({})
    assert summary["stage"] is None
    assert summary["index_name"] is None
    assert summary["raw"] == {}


class _FakeDatabase:
    def __init__(self, reply: Dict[str, Any]) -> None:
        self.reply = reply
        self.calls: List[Dict[str, Any]] = []

    def command(self, name: str, value: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        self.calls.append({"name": name, "value": value, **kwargs})
        return self.reply


def test_explain_issues_execution_stats_command():
    database = _FakeDatabase(SBE_EXPLAIN)
    collection = SimpleNamespace(name="books", database=database)

    summary = explain_author_year_lookup().execute(collection)

    assert database.calls == [
        {
            "name": "explain",
            "value": {
                "find": "books",
                "filter": {"author": "George Orwell", "published_year": 1949},
            },
            "verbosity": EXPLAIN_VERBOSITY,
        }
    ]
    assert summary["index_name"] == "author_1_published_year_1"


def test_explain_title_lookup_defaults():
    operation = explain_title_lookup()
    assert operation.name == "explain_title_lookup"
    assert operation.query == {"title": "1984"}
    assert operation.kind == "plan"
