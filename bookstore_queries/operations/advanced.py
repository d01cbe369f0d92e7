"""
Advanced queries: compound filters, projections, sorting and pagination.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal

import pymongo
from pymongo.collection import Collection

from bookstore_queries.domain.models import Book, BookSummary, parse_books, parse_documents
from bookstore_queries.operations.abstract import AbstractPipelineOperation, AbstractQueryOperation

SortDirection = Literal["asc", "desc"]


class InStockPublishedAfterOperation(AbstractPipelineOperation):
    """Books that are in stock AND published after `year`."""

    name = "in_stock_after_year"
    kind = "books"

    def __init__(self, year: int = 2010) -> None:
        self.year = year
        self.description = f"Books in stock and published after {year}"

    def pipeline(self) -> List[Dict[str, Any]]:
        return [{"$match": {"in_stock": True, "published_year": {"$gt": self.year}}}]

    def execute(self, collection: Collection) -> List[Book]:
        return parse_books(self.run_pipeline(collection))


class ProjectFieldsOperation(AbstractPipelineOperation):
    """All books reduced to title, author and price; `_id` is suppressed."""

    name = "project_fields"
    kind = "records"
    description = "Books with only title, author, and price fields"

    def pipeline(self) -> List[Dict[str, Any]]:
        return [{"$project": {"title": 1, "author": 1, "price": 1, "_id": 0}}]

    def execute(self, collection: Collection) -> List[BookSummary]:
        return parse_documents(self.run_pipeline(collection), BookSummary)


class SortByPriceOperation(AbstractPipelineOperation):
    kind = "books"

    def __init__(self, direction: SortDirection = "asc") -> None:
        if direction not in ("asc", "desc"):
            raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}")
        self.direction = direction
        self.name = f"sort_by_price_{direction}"
        label = "ascending" if direction == "asc" else "descending"
        self.description = f"Books sorted by price ({label})"

    def pipeline(self) -> List[Dict[str, Any]]:
        order = 1 if self.direction == "asc" else -1
        return [{"$sort": {"price": order}}]

    def execute(self, collection: Collection) -> List[Book]:
        return parse_books(self.run_pipeline(collection))


class PaginateByTitleOperation(AbstractQueryOperation):
    """
    One page of books ordered by title.

    Page N holds the documents at positions (N-1)*page_size+1 .. N*page_size
    of the title-sorted sequence; pages past the end are empty. `_id` is the
    secondary sort key so equal titles keep a stable position across pages.
    """

    name = "paginate_by_title"
    kind = "books"

    def __init__(self, page: int = 1, page_size: int = 5) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page = page
        self.page_size = page_size
        self.description = f"Books on page {page} ({page_size} per page, by title)"

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    def execute(self, collection: Collection) -> List[Book]:
        cursor = (
            collection.find()
            .sort([("title", pymongo.ASCENDING), ("_id", pymongo.ASCENDING)])
            .skip(self.skip)
            .limit(self.page_size)
        )
        return parse_books(cursor)


__all__ = [
    "SortDirection",
    "InStockPublishedAfterOperation",
    "ProjectFieldsOperation",
    "SortByPriceOperation",
    "PaginateByTitleOperation",
]
