from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from bookstore_queries.operations.abstract import OperationResult

_BOOK_COLUMNS = (
    ("title", "Title"),
    ("author", "Author"),
    ("genre", "Genre"),
    ("published_year", "Year"),
    ("price", "Price"),
    ("in_stock", "In stock"),
)

_PLAN_FIELDS = (
    ("stage", "Winning stage"),
    ("index_name", "Index used"),
    ("keys_examined", "Keys examined"),
    ("docs_examined", "Docs examined"),
    ("n_returned", "Returned"),
    ("execution_time_ms", "Time (ms)"),
)


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


def _books_table(title: str, books: Sequence[Dict[str, Any]]) -> Table:
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    for key, label in _BOOK_COLUMNS:
        justify = "right" if key in ("published_year", "price") else "left"
        table.add_column(label, justify=justify, style="cyan" if key == "title" else None)
    for position, book in enumerate(books, start=1):
        table.add_row(str(position), *(_cell(book.get(key)) for key, _ in _BOOK_COLUMNS))
    return table


def _records_table(title: str, records: Sequence[Dict[str, Any]]) -> Table:
    """Generic table whose columns are the union of record keys, first-seen order."""
    columns: List[str] = []
    for record in records:
        columns.extend(key for key in record if key not in columns)
    table = Table(title=title, box=box.ROUNDED)
    for column in columns:
        table.add_column(column.replace("_", " ").capitalize())
    for record in records:
        table.add_row(*(_cell(record.get(column)) for column in columns))
    return table


def _plan_table(title: str, plan: Dict[str, Any]) -> Table:
    table = Table(title=title, box=box.SIMPLE, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for key, label in _PLAN_FIELDS:
        table.add_row(label, _cell(plan.get(key)))
    return table


def print_operation_result(result: OperationResult, console: Optional[Console] = None) -> None:
    """
    Render a single operation result.

    Failed operations print their error in red instead of a result body.
    """
    console = console or Console()
    title = result.get("description") or result.get("operation", "Unknown")

    if result.get("error"):
        console.print(f"[bold red]✗ {title}[/bold red]: {result['error']}")
        return

    kind = result.get("kind")
    value = result.get("value")

    if kind in ("books", "records") and not value:
        console.print(f"[bold]{title}[/bold]: [yellow]no matching documents[/yellow]")
    elif kind == "books":
        console.print(_books_table(title, value))
    elif kind == "records":
        console.print(_records_table(title, value))
    elif kind == "count":
        verb = "Deleted" if result.get("operation", "").startswith("delete") else "Updated"
        console.print(f"[bold]{title}[/bold]: {verb} {value} document(s)")
    elif kind == "index":
        console.print(f"[bold]{title}[/bold]: index [green]{value}[/green] ready")
    elif kind == "plan":
        console.print(_plan_table(title, value or {}))
    else:
        console.print(f"[bold]{title}[/bold]: {value}")


def print_summary(results: List[OperationResult], console: Optional[Console] = None) -> None:
    """
    Render a one-line-per-operation summary table in execution order.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    failures = sum(1 for r in results if r.get("error"))
    table = Table(
        title="Bookstore Query Run",
        box=box.ROUNDED,
        caption=f"{len(results) - failures} succeeded, {failures} failed",
    )
    table.add_column("Operation", style="cyan", no_wrap=True)
    table.add_column("Kind", style="blue")
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Duration (ms)", justify="right", style="green")
    table.add_column("Status")

    for res in results:
        duration_ms = (res.get("duration_seconds") or 0.0) * 1000
        status = "[red]failed[/red]" if res.get("error") else "[green]ok[/green]"
        table.add_row(
            res.get("operation", "Unknown"),
            res.get("kind", "-"),
            f"{res.get('rows', 0):,}",
            f"{duration_ms:.1f}",
            status,
        )

    console.print(table)


__all__ = ["print_operation_result", "print_summary"]
