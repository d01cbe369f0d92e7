"""
Sample data loader for the bookstore query runner.

Inserts the bundled sample books, or books read from a JSON array file, into
the configured `books` collection so the query catalog has something to work
on. Every book is validated against the `Book` model before insertion.
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

import typer
from pydantic import ValidationError

from bookstore_queries.config import get_settings
from bookstore_queries.domain.models import Book
from bookstore_queries.domain.samples import SAMPLE_BOOKS
from bookstore_queries.errors import DatabaseConnectionError
from bookstore_queries.infrastructure.db_factory import build_client, mongo_session, seed_collection

app = typer.Typer(help="Load sample books into MongoDB.")


def _load_books(source: Path | None) -> List[Dict[str, Any]]:
    if source is None:
        return [dict(book) for book in SAMPLE_BOOKS]
    with source.open("r", encoding="utf-8") as f:
        books = json.load(f)
    if not isinstance(books, list):
        raise ValueError(f"{source} must contain a JSON array of book documents")
    return books


def _validate_books(books: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the books unchanged, or raise on the first invalid one."""
    for position, book in enumerate(books, start=1):
        try:
            Book.model_validate(book)
        except ValidationError as exc:
            raise ValueError(f"Book #{position} is invalid: {exc}") from exc
    return books


@app.command()
def main(
    source: Path | None = typer.Option(
        None,
        "--source",
        "-s",
        exists=True,
        dir_okay=False,
        help="JSON file holding an array of books (defaults to the bundled samples).",
    ),
    uri: str | None = typer.Option(
        None,
        "--uri",
        help="Optional MongoDB URI override.",
    ),
    drop: bool = typer.Option(
        False,
        "--drop",
        help="Drop the collection before inserting.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only validate the books; skip loading into MongoDB.",
    ),
) -> None:
    """
    Validate books and optionally load them into MongoDB.
    """
    start = time.perf_counter()
    try:
        books = _validate_books(_load_books(source))
    except ValueError as exc:
        typer.echo(f"Error occurred: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(f"Validated {len(books)} book(s) from {source or 'bundled samples'}")

    if dry_run:
        typer.echo("Skipping load (dry-run flag set).")
        return

    settings = get_settings()
    try:
        with mongo_session(client_factory=lambda: build_client(uri_override=uri)) as collection:
            inserted = seed_collection(collection, books, drop=drop)
    except DatabaseConnectionError as exc:
        typer.echo(f"Error occurred: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    duration = time.perf_counter() - start
    typer.echo(
        f"Inserted {inserted} book(s) into {settings.mongo_db_name}."
        f"{settings.mongo_collection} in {duration:.2f}s"
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
