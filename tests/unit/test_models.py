from __future__ import annotations

import logging

import pytest
from bson import ObjectId
from pydantic import ValidationError

from bookstore_queries.domain.models import (
    AuthorBookCount,
    Book,
    DecadeGroup,
    GenreAveragePrice,
    parse_books,
)
from bookstore_queries.domain.samples import SAMPLE_BOOKS


def test_book_accepts_mongo_document_with_object_id(book_factory):
    oid = ObjectId()
    book = Book.model_validate({"_id": oid, **book_factory(pages=120, publisher="Tor")})

    assert book.id == str(oid)
    assert book.pages == 120
    assert book.publisher == "Tor"


def test_book_optional_fields_default_to_none(book_factory):
    book = Book.model_validate(book_factory())

    assert book.id is None
    assert book.pages is None
    assert book.publisher is None


def test_book_accepts_integer_price(book_factory):
    book = Book.model_validate(book_factory(price=12))
    assert book.price == 12.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"published_year": "1949"},
        {"price": "10.99"},
        {"in_stock": "yes"},
    ],
)
def test_book_rejects_text_where_numbers_or_flags_are_required(book_factory, overrides):
    with pytest.raises(ValidationError):
        Book.model_validate(book_factory(**overrides))


def test_book_accepts_whole_number_year_stored_as_double(book_factory):
    book = Book.model_validate(book_factory(published_year=1949.0))

    assert book.published_year == 1949
    assert isinstance(book.published_year, int)


def test_book_rejects_fractional_year(book_factory):
    with pytest.raises(ValidationError):
        Book.model_validate(book_factory(published_year=1949.5))


def test_book_is_frozen(book_factory):
    book = Book.model_validate(book_factory())
    with pytest.raises(ValidationError):
        book.price = 1.0


def test_parse_books_skips_invalid_documents(book_factory, caplog):
    documents = [
        book_factory(title="Good"),
        {"title": "No author"},
        book_factory(title="Also good"),
    ]

    with caplog.at_level(logging.WARNING):
        books = parse_books(documents)

    assert [b.title for b in books] == ["Good", "Also good"]
    assert "Skipping document" in caplog.text


def test_sample_books_are_all_valid():
    assert len(parse_books(SAMPLE_BOOKS)) == len(SAMPLE_BOOKS)


def test_aggregate_models_read_pipeline_field_names():
    avg = GenreAveragePrice.model_validate({"_id": "Fiction", "avgPrice": 20.0})
    top = AuthorBookCount.model_validate({"_id": "A", "totalBooks": 3})
    decade = DecadeGroup.model_validate({"_id": 1940, "count": 2, "titles": ["x", "y"]})

    assert (avg.genre, avg.average_price) == ("Fiction", 20.0)
    assert (top.author, top.total_books) == ("A", 3)
    assert (decade.decade, decade.count, decade.titles) == (1940, 2, ["x", "y"])
