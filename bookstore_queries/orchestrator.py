"""
Orchestrator for running the bookstore query catalog against one collection.

The catalog is a fixed, ordered list of operations. They share a single
MongoDB client opened by `mongo_session` and are executed strictly one after
another. Each operation is timed and isolated: under the default `tolerant`
failure policy a failing operation is recorded and the run moves on; under
`strict` the first failure aborts the run. The client is closed either way.

Usage (example from CLI):
    from bookstore_queries.orchestrator import RunConfig, run_operations

    results = run_operations(RunConfig(operation_names=["find_by_genre"]))

With `persist=True` outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, ContextManager, Dict, List, Optional, Sequence

from pydantic import BaseModel
from pymongo.collection import Collection

from bookstore_queries.config import FailurePolicy, get_settings
from bookstore_queries.errors import OperationFailedError
from bookstore_queries.infrastructure.db_factory import mongo_session
from bookstore_queries.operations.abstract import OperationResult, QueryOperation
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
    FindByGenreOperation,
    FindPublishedAfterOperation,
    UpdatePriceOperation,
)
from bookstore_queries.operations.indexing import (
    author_year_index,
    explain_author_year_lookup,
    explain_title_lookup,
    title_index,
)
from bookstore_queries.utils.logging import get_logger
from bookstore_queries.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

SessionFactory = Callable[[Optional[str], Optional[str]], ContextManager[Collection]]
ResultCallback = Callable[[OperationResult], None]


@dataclass(frozen=True)
class RunConfig:
    """
    Parameters of one catalog run. `None` fields fall back to settings.

    operation_names : names to execute, in the given order. None or ["all"]
        runs the whole catalog in catalog order.
    """

    operation_names: Optional[Sequence[str]] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    db_name: Optional[str] = None
    collection_name: Optional[str] = None
    failure_policy: Optional[FailurePolicy] = None
    persist: bool = False
    results_dir: Path | str = "results"


def _round_float(value: float, decimals: int = 4) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _operation_factories(page: int = 1, page_size: int = 5) -> Dict[str, Callable[[], QueryOperation]]:
    """Registry of catalog operations, in execution order."""
    return {
        "find_by_genre": lambda: FindByGenreOperation(),
        "find_by_author": lambda: FindByAuthorOperation(),
        "find_after_year": lambda: FindPublishedAfterOperation(),
        "update_price": lambda: UpdatePriceOperation(),
        "delete_by_title": lambda: DeleteByTitleOperation(),
        "in_stock_after_year": lambda: InStockPublishedAfterOperation(),
        "project_fields": lambda: ProjectFieldsOperation(),
        "sort_by_price_asc": lambda: SortByPriceOperation("asc"),
        "sort_by_price_desc": lambda: SortByPriceOperation("desc"),
        "paginate_by_title": lambda: PaginateByTitleOperation(page=page, page_size=page_size),
        "average_price_by_genre": lambda: AveragePriceByGenreOperation(),
        "author_with_most_books": lambda: AuthorWithMostBooksOperation(),
        "group_by_decade": lambda: GroupByDecadeOperation(),
        "create_title_index": title_index,
        "create_author_year_index": author_year_index,
        "explain_title_lookup": lambda: explain_title_lookup(),
        "explain_author_year_lookup": lambda: explain_author_year_lookup(),
    }


def available_operations() -> List[str]:
    """List catalog operation names in execution order."""
    return list(_operation_factories().keys())


def _resolve_operations(
    names: Optional[Sequence[str]], page: int, page_size: int
) -> List[QueryOperation]:
    factories = _operation_factories(page=page, page_size=page_size)
    selected = list(names) if names else ["all"]
    if selected == ["all"]:
        selected = list(factories)
    unknown = [name for name in selected if name not in factories]
    if unknown:
        raise ValueError(
            f"Unknown operation(s) {', '.join(unknown)}. Available: {', '.join(factories)}"
        )
    return [factories[name]() for name in selected]


def _to_jsonable(value: Any) -> Any:
    """Convert models and containers of models into plain data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    return value


def _result_rows(operation: QueryOperation, value: Any) -> int:
    if isinstance(value, list):
        return len(value)
    if operation.kind == "count":
        return int(value)
    return 1


def _base_result(operation: QueryOperation, stats: ProfileStats) -> OperationResult:
    return OperationResult(
        operation=operation.name,
        description=operation.description,
        kind=operation.kind,
        duration_seconds=_round_float(stats.duration_seconds),
    )


def _profiled_execute(
    operation: QueryOperation, collection: Collection, failure_policy: FailurePolicy
) -> OperationResult:
    log.info(f"[OPERATION START] {operation.name}", extra={"operation": operation.name})
    value: Any = None
    failure: Optional[Exception] = None
    with profile_block(operation.name) as stats:
        try:
            value = operation.execute(collection)
        except Exception as exc:  # noqa: BLE001 - intentional broad catch to record failures
            failure = exc

    result = _base_result(operation, stats)
    if failure is not None:
        log.error(
            f"[OPERATION FAILED] {operation.name}",
            exc_info=failure,
            extra={"operation": operation.name, "failure_policy": failure_policy},
        )
        if failure_policy == "strict":
            raise OperationFailedError(operation.name, failure) from failure
        result.update(
            value=None,
            rows=0,
            error=str(failure),
            notes="Operation failed in tolerant mode; run continued.",
            extra={
                "failed": True,
                "error_type": type(failure).__name__,
                "failure_policy": failure_policy,
            },
        )
        return result

    result.update(value=_to_jsonable(value), rows=_result_rows(operation, value), error=None)
    log.info(
        f"[OPERATION SUCCESS] {operation.name}",
        extra={
            "operation": operation.name,
            "rows": result["rows"],
            "duration": result["duration_seconds"],
        },
    )
    return result


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True, default=str)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def run_operations(
    config: Optional[RunConfig] = None,
    session_factory: Optional[SessionFactory] = None,
    on_result: Optional[ResultCallback] = None,
) -> List[OperationResult]:
    """
    Run the selected catalog operations over one connection.

    Parameters
    ----------
    config : RunConfig | None
        Run parameters; defaults to the whole catalog with settings values.
    session_factory : callable | None
        `(db_name, collection_name) -> context manager yielding a Collection`.
        Defaults to `mongo_session`.
    on_result : callable | None
        Invoked with each OperationResult as soon as it is available, so the
        console can show results while the run progresses.

    Returns
    -------
    List[OperationResult]
        One result per executed operation, in execution order.

    Raises
    ------
    ValueError
        Unknown operation name or invalid pagination, before connecting.
    DatabaseConnectionError
        The server was unreachable; no operation ran.
    OperationFailedError
        An operation failed under the strict policy.
    """
    settings = get_settings()
    config = config or RunConfig()
    page = config.page if config.page is not None else settings.page
    page_size = config.page_size if config.page_size is not None else settings.page_size
    failure_policy = config.failure_policy or settings.failure_policy
    db_name = config.db_name or settings.mongo_db_name
    collection_name = config.collection_name or settings.mongo_collection

    operations = _resolve_operations(config.operation_names, page, page_size)
    session = session_factory or mongo_session

    results: List[OperationResult] = []
    with session(db_name, collection_name) as collection:
        for index, operation in enumerate(operations, start=1):
            log.info(
                f"[{index}/{len(operations)}] {operation.description}",
                extra={"operation": operation.name},
            )
            result = _profiled_execute(operation, collection, failure_policy)
            results.append(result)
            if on_result is not None:
                on_result(result)

    failed = [r["operation"] for r in results if r.get("error")]
    if config.persist:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": db_name,
            "collection": collection_name,
            "failure_policy": failure_policy,
            "operations": [op.name for op in operations],
            "failed": failed,
            "results": results,
        }
        _persist_results(payload, Path(config.results_dir))

    log.info(
        f"[RUN COMPLETE] {len(results) - len(failed)}/{len(results)} operation(s) succeeded",
        extra={"failed": failed, "total_operations": len(results)},
    )
    return results


__all__ = [
    "RunConfig",
    "available_operations",
    "run_operations",
]
