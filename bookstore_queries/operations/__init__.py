"""
Operations package for the bookstore query runner.

Re-exports the abstract interfaces and the concrete catalog operations so
downstream code can import from `bookstore_queries.operations` directly.
"""

from bookstore_queries.operations.abstract import (
    AbstractPipelineOperation,
    AbstractQueryOperation,
    OperationResult,
    QueryOperation,
    ResultKind,
)
from bookstore_queries.operations.advanced import (
    InStockPublishedAfterOperation,
    PaginateByTitleOperation,
    ProjectFieldsOperation,
    SortByPriceOperation,
)
from bookstore_queries.operations.aggregation import (
    AuthorWithMostBooksOperation,
    AveragePriceByGenreOperation,
    GroupByDecadeOperation,
)
from bookstore_queries.operations.crud import (
    DeleteByTitleOperation,
    FindByAuthorOperation,
    FindByFieldOperation,
    FindByGenreOperation,
    FindPublishedAfterOperation,
    UpdatePriceOperation,
)
from bookstore_queries.operations.indexing import (
    CreateIndexOperation,
    ExplainQueryOperation,
    summarize_explain,
)

__all__ = [
    # Abstracts
    "AbstractPipelineOperation",
    "AbstractQueryOperation",
    "OperationResult",
    "QueryOperation",
    "ResultKind",
    # CRUD
    "DeleteByTitleOperation",
    "FindByAuthorOperation",
    "FindByFieldOperation",
    "FindByGenreOperation",
    "FindPublishedAfterOperation",
    "UpdatePriceOperation",
    # Advanced queries
    "InStockPublishedAfterOperation",
    "PaginateByTitleOperation",
    "ProjectFieldsOperation",
    "SortByPriceOperation",
    # Aggregations
    "AuthorWithMostBooksOperation",
    "AveragePriceByGenreOperation",
    "GroupByDecadeOperation",
    # Indexing
    "CreateIndexOperation",
    "ExplainQueryOperation",
    "summarize_explain",
]
