"""
Basic CRUD operations: finds by field, a year-range match, a price update and
a delete by title.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pymongo.collection import Collection

from bookstore_queries.domain.models import Book, parse_books
from bookstore_queries.operations.abstract import (
    AbstractPipelineOperation,
    AbstractQueryOperation,
)
from bookstore_queries.utils.logging import get_logger

log = get_logger(__name__)


class FindByFieldOperation(AbstractQueryOperation):
    """
    Fetch every book whose `field` equals `value`. Order is whatever the
    server returns.
    """

    kind = "books"

    def __init__(self, name: str, field: str, value: Any, description: str | None = None) -> None:
        self.name = name
        self.field = field
        self.value = value
        self.description = description or f"Books where {field} = {value!r}"

    def query(self) -> Dict[str, Any]:
        return {self.field: self.value}

    def execute(self, collection: Collection) -> List[Book]:
        return parse_books(collection.find(self.query()))


class FindByGenreOperation(FindByFieldOperation):
    def __init__(self, genre: str = "Fantasy") -> None:
        super().__init__("find_by_genre", "genre", genre, f"{genre} books in the collection")


class FindByAuthorOperation(FindByFieldOperation):
    def __init__(self, author: str = "George Orwell") -> None:
        super().__init__("find_by_author", "author", author, f"Books by {author}")


class FindPublishedAfterOperation(AbstractPipelineOperation):
    """Books published strictly after `year`, expressed as a `$match` stage."""

    name = "find_after_year"
    kind = "books"

    def __init__(self, year: int = 1945) -> None:
        self.year = year
        self.description = f"Books published after {year}"

    def pipeline(self) -> List[Dict[str, Any]]:
        return [{"$match": {"published_year": {"$gt": self.year}}}]

    def execute(self, collection: Collection) -> List[Book]:
        return parse_books(self.run_pipeline(collection))


class UpdatePriceOperation(AbstractQueryOperation):
    """
    Set the price of the first book matching `title`.

    Returns the modified count: 0 when nothing matched or the price already
    had the target value, 1 otherwise.
    """

    name = "update_price"
    kind = "count"

    def __init__(self, title: str = "The Hobbit", price: float = 17.99) -> None:
        self.title = title
        self.price = price
        self.description = f'Update price of "{title}" to {price}'

    def execute(self, collection: Collection) -> int:
        result = collection.update_one({"title": self.title}, {"$set": {"price": self.price}})
        log.info(
            f"Updated {result.modified_count} document(s)",
            extra={"title": self.title, "matched": result.matched_count},
        )
        return result.modified_count


class DeleteByTitleOperation(AbstractQueryOperation):
    """Delete the first book matching `title`; a missing title deletes nothing."""

    name = "delete_by_title"
    kind = "count"

    def __init__(self, title: str = "The Alchemist") -> None:
        self.title = title
        self.description = f'Delete "{title}"'

    def execute(self, collection: Collection) -> int:
        result = collection.delete_one({"title": self.title})
        log.info(f"Deleted {result.deleted_count} document(s)", extra={"title": self.title})
        return result.deleted_count


__all__ = [
    "FindByFieldOperation",
    "FindByGenreOperation",
    "FindByAuthorOperation",
    "FindPublishedAfterOperation",
    "UpdatePriceOperation",
    "DeleteByTitleOperation",
]
