"""
Aggregation pipeline operations: average price per genre, the most prolific
author, and books grouped by publication decade.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pymongo.collection import Collection

from bookstore_queries.domain.models import (
    AuthorBookCount,
    DecadeGroup,
    GenreAveragePrice,
    parse_documents,
)
from bookstore_queries.operations.abstract import AbstractPipelineOperation


class AveragePriceByGenreOperation(AbstractPipelineOperation):
    """
    Mean price of the books in `genre`.

    Yields a single record, or an empty list when the genre has no books.
    """

    name = "average_price_by_genre"
    kind = "records"

    def __init__(self, genre: str = "Fiction") -> None:
        self.genre = genre
        self.description = f"Average book price for genre {genre!r}"

    def pipeline(self) -> List[Dict[str, Any]]:
        return [
            {"$match": {"genre": self.genre}},
            {"$group": {"_id": "$genre", "avgPrice": {"$avg": "$price"}}},
        ]

    def execute(self, collection: Collection) -> List[GenreAveragePrice]:
        return parse_documents(self.run_pipeline(collection), GenreAveragePrice)


class AuthorWithMostBooksOperation(AbstractPipelineOperation):
    """
    The author with the highest document count.

    Equal counts are broken by author name, ascending.
    """

    name = "author_with_most_books"
    kind = "records"
    description = "Author with the most books"

    def pipeline(self) -> List[Dict[str, Any]]:
        return [
            {"$group": {"_id": "$author", "totalBooks": {"$sum": 1}}},
            {"$sort": {"totalBooks": -1, "_id": 1}},
            {"$limit": 1},
        ]

    def execute(self, collection: Collection) -> List[AuthorBookCount]:
        return parse_documents(self.run_pipeline(collection), AuthorBookCount)


class GroupByDecadeOperation(AbstractPipelineOperation):
    """
    Count and list titles per publication decade, oldest decade first.

    decade = published_year - (published_year mod 10), so 1949 -> 1940 and
    1950 -> 1950.
    """

    name = "group_by_decade"
    kind = "records"
    description = "Books grouped by publication decade"

    def pipeline(self) -> List[Dict[str, Any]]:
        return [
            {
                "$project": {
                    "title": 1,
                    "decade": {
                        "$subtract": [
                            "$published_year",
                            {"$mod": ["$published_year", 10]},
                        ]
                    },
                }
            },
            {"$group": {"_id": "$decade", "count": {"$sum": 1}, "titles": {"$push": "$title"}}},
            {"$sort": {"_id": 1}},
        ]

    def execute(self, collection: Collection) -> List[DecadeGroup]:
        return parse_documents(self.run_pipeline(collection), DecadeGroup)


__all__ = [
    "AveragePriceByGenreOperation",
    "AuthorWithMostBooksOperation",
    "GroupByDecadeOperation",
]
