"""
Domain package for the bookstore query runner.

Exports the document and aggregate-record models used by operations and the
reporter. Keep this package focused on data definitions and validation.
"""

from bookstore_queries.domain.models import (
    AuthorBookCount,
    Book,
    BookSummary,
    DecadeGroup,
    GenreAveragePrice,
    parse_books,
    parse_documents,
)
from bookstore_queries.domain.samples import SAMPLE_BOOKS

__all__ = [
    "AuthorBookCount",
    "Book",
    "BookSummary",
    "DecadeGroup",
    "GenreAveragePrice",
    "parse_books",
    "parse_documents",
    "SAMPLE_BOOKS",
]
