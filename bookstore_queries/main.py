from __future__ import annotations

import sys
from typing import List, Optional

import typer
from rich.console import Console

from bookstore_queries.config import get_settings
from bookstore_queries.domain.samples import SAMPLE_BOOKS
from bookstore_queries.errors import DatabaseConnectionError, OperationFailedError
from bookstore_queries.infrastructure.db_factory import mongo_session, seed_collection
from bookstore_queries.orchestrator import RunConfig, available_operations, run_operations
from bookstore_queries.reporter import print_operation_result, print_summary
from bookstore_queries.utils.logging import configure_logging
from bookstore_queries.utils.profiler import profile_function

app = typer.Typer(help="Run the bookstore query catalog against MongoDB.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"URI={settings.mongo_uri} | db={settings.mongo_db_name} "
        f"collection={settings.mongo_collection} | page={settings.page} "
        f"page_size={settings.page_size} policy={settings.failure_policy}"
    )


@app.command("list")
def list_operations() -> None:
    """
    List catalog operations in execution order.
    """
    for position, name in enumerate(available_operations(), start=1):
        typer.echo(f"{position:>2}. {name}")


@app.command()
def run(
    operations: Optional[List[str]] = typer.Option(
        None,
        "--operation",
        "-o",
        help="Operation to run; repeat for several. Defaults to the whole catalog.",
    ),
    page: Optional[int] = typer.Option(
        None, "--page", "-p", min=1, help="Page number for title pagination."
    ),
    page_size: Optional[int] = typer.Option(
        None, "--page-size", min=1, help="Books per page for title pagination."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Abort on the first failing operation."
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON."),
    save: bool = typer.Option(False, "--save", help="Persist results under results/."),
) -> None:
    """
    Run the query catalog and print each result as it completes.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=json_logs or settings.log_json)
    console = Console()

    config = RunConfig(
        operation_names=operations or None,
        page=page,
        page_size=page_size,
        failure_policy="strict" if strict else None,
        persist=save,
    )
    try:
        results = run_operations(
            config, on_result=lambda result: print_operation_result(result, console)
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    except (DatabaseConnectionError, OperationFailedError) as exc:
        typer.echo(f"Error occurred: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    print_summary(results, console)


@app.command()
def seed(
    drop: bool = typer.Option(
        False, "--drop", help="Drop the collection before inserting the sample books."
    ),
) -> None:
    """
    Insert the bundled sample books into the configured collection.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    @profile_function("seed")
    def _seed() -> int:
        with mongo_session() as collection:
            return seed_collection(collection, SAMPLE_BOOKS, drop=drop)

    try:
        stats = _seed()
    except DatabaseConnectionError as exc:
        typer.echo(f"Error occurred: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(
        f"Inserted {stats.extra['result']} book(s) into "
        f"{settings.mongo_db_name}.{settings.mongo_collection} in {stats.duration_seconds:.2f}s"
    )


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
