import json
from pathlib import Path
from time import sleep

import pytest
from typer.testing import CliRunner

from bookstore_queries import config
from bookstore_queries.domain.samples import SAMPLE_BOOKS
from bookstore_queries.orchestrator import _operation_factories, available_operations
from bookstore_queries.utils import profiler
from scripts import seed_books

CATALOG_SIZE = 17


def test_get_settings_defaults():
    settings = config.get_settings()
    assert settings.mongo_uri == "mongodb://localhost:27017/"
    assert settings.mongo_db_name == "plp_bookstore"
    assert settings.mongo_collection == "books"
    assert settings.page == 1
    assert settings.page_size == 5
    assert settings.failure_policy == "tolerant"
    assert settings.mongo_server_selection_timeout_ms > 0


def test_get_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db.internal:27018/")
    monkeypatch.setenv("PAGE_SIZE", "10")
    monkeypatch.setenv("FAILURE_POLICY", "strict")

    settings = config.get_settings()

    assert settings.mongo_uri == "mongodb://db.internal:27018/"
    assert settings.page_size == 10
    assert settings.failure_policy == "strict"


def test_get_settings_rejects_invalid_page_size(monkeypatch):
    monkeypatch.setenv("PAGE_SIZE", "0")
    with pytest.raises(ValueError):
        config.Settings()


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.end_ts > stats.start_ts


def test_profile_block_records_duration_when_block_raises():
    with pytest.raises(RuntimeError):
        with profiler.profile_block("boom") as stats:
            raise RuntimeError("boom")
    assert stats.end_ts > 0.0
    assert stats.duration_seconds == stats.end_ts - stats.start_ts


def test_profile_function_keeps_return_value():
    @profiler.profile_function("answer")
    def answer() -> int:
        return 42

    stats = answer()
    assert stats.label == "answer"
    assert stats.extra["result"] == 42


def test_available_operations_follow_catalog_order():
    names = available_operations()
    assert len(names) == CATALOG_SIZE
    assert names[0] == "find_by_genre"
    assert names.index("update_price") < names.index("sort_by_price_asc")
    assert names.index("create_title_index") < names.index("explain_title_lookup")
    assert names[-1] == "explain_author_year_lookup"


def test_registry_keys_match_operation_names():
    for key, factory in _operation_factories().items():
        operation = factory()
        assert operation.name == key
        assert operation.description
        assert operation.kind in ("books", "records", "count", "index", "plan")


def test_seed_script_loads_bundled_samples_by_default():
    books = seed_books._load_books(None)
    assert books == SAMPLE_BOOKS
    assert books[0] is not SAMPLE_BOOKS[0]


def test_seed_script_reads_and_validates_json_file(tmp_path: Path, book_factory):
    source = tmp_path / "books.json"
    source.write_text(json.dumps([book_factory(title="Dune")]), encoding="utf-8")

    books = seed_books._validate_books(seed_books._load_books(source))

    assert [book["title"] for book in books] == ["Dune"]


def test_seed_script_rejects_text_prices(tmp_path: Path, book_factory):
    source = tmp_path / "books.json"
    source.write_text(json.dumps([book_factory(price="12.99")]), encoding="utf-8")

    with pytest.raises(ValueError, match="Book #1 is invalid"):
        seed_books._validate_books(seed_books._load_books(source))


def test_seed_script_rejects_non_array_file(tmp_path: Path):
    source = tmp_path / "books.json"
    source.write_text(json.dumps({"title": "Dune"}), encoding="utf-8")

    with pytest.raises(ValueError, match="JSON array"):
        seed_books._load_books(source)


def test_seed_script_exits_cleanly_on_invalid_source(tmp_path: Path, book_factory):
    source = tmp_path / "books.json"
    source.write_text(json.dumps([book_factory(price="12.99")]), encoding="utf-8")

    result = CliRunner().invoke(seed_books.app, ["--source", str(source), "--dry-run"])

    assert result.exit_code == 2
    assert "Book #1 is invalid" in result.output
    assert not isinstance(result.exception, ValueError)
