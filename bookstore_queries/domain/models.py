"""
Domain models for the bookstore query runner.

Documents in the `books` collection are schema-flexible, so every document
read from the server is validated here before it reaches the reporter.
Aggregation results get their own models, keyed by the pipeline's output
field names through aliases (e.g. `_id` -> `genre`).
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from bookstore_queries.utils.logging import get_logger

log = get_logger(__name__)

_MODEL_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
    "extra": "ignore",
}


class Book(BaseModel):
    """
    Representation of a single document in the `books` collection.
    """

    id: Optional[str] = Field(None, alias="_id", description="Document identity, stringified.")
    title: str = Field(..., description="Book title.")
    author: str = Field(..., description="Author name.")
    genre: str = Field(..., description="Genre label, e.g. 'Fiction'.")
    published_year: int = Field(..., strict=True, description="Year of first publication.")
    price: float = Field(..., strict=True, description="Price in store currency.")
    in_stock: bool = Field(..., strict=True, description="Whether copies are available.")
    pages: Optional[int] = Field(None, description="Page count.")
    publisher: Optional[str] = Field(None, description="Publisher name.")

    model_config = _MODEL_CONFIG

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    @field_validator("published_year", mode="before")
    @classmethod
    def _whole_float_year(cls, value: Any) -> Any:
        # 1949.0 counts as a year; 1949.5 and "1949" still fail strict int.
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class BookSummary(BaseModel):
    """Projection of a book limited to title, author, and price."""

    title: Optional[str] = None
    author: Optional[str] = None
    price: Optional[float] = None

    model_config = _MODEL_CONFIG


class GenreAveragePrice(BaseModel):
    genre: Optional[str] = Field(None, alias="_id")
    average_price: Optional[float] = Field(None, alias="avgPrice")

    model_config = _MODEL_CONFIG


class AuthorBookCount(BaseModel):
    author: Optional[str] = Field(None, alias="_id")
    total_books: int = Field(..., alias="totalBooks")

    model_config = _MODEL_CONFIG


class DecadeGroup(BaseModel):
    """One bucket of the publication-decade grouping."""

    decade: Optional[int] = Field(None, alias="_id")
    count: int
    titles: List[str] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_documents(documents: Iterable[Dict[str, Any]], model: Type[ModelT]) -> List[ModelT]:
    """
    Validate raw documents against `model`, skipping the ones that do not fit.

    A malformed document (e.g. a price stored as text) is logged and dropped
    so one bad record cannot hide the rest of a result set.
    """
    parsed: List[ModelT] = []
    for document in documents:
        try:
            parsed.append(model.model_validate(document))
        except ValidationError as exc:
            log.warning(
                f"Skipping document that does not match {model.__name__}",
                extra={
                    "model": model.__name__,
                    "document_id": str(document.get("_id")),
                    "errors": exc.error_count(),
                },
            )
    return parsed


def parse_books(documents: Iterable[Dict[str, Any]]) -> List[Book]:
    """Validate raw `books` documents."""
    return parse_documents(documents, Book)


__all__ = [
    "Book",
    "BookSummary",
    "GenreAveragePrice",
    "AuthorBookCount",
    "DecadeGroup",
    "parse_documents",
    "parse_books",
]
