import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table

from config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.default_output).lower()

def _print_collection(items: List[Any], empty_message: str, title: str, columns: List[str], row) -> None:
    mode = get_output_mode()

    if not items:
        print(empty_message)
        return

    if mode == "json":
        payload = [dict(zip(columns, row(item))) for item in items]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title=title, show_lines=True, header_style="bold cyan")
        for column in columns:
            table.add_column(column)
        for item in items:
            table.add_row(*["" if value is None else str(value) for value in row(item)])
        _console.print(table)
    else:
        for item in items:
            print(str(item))

def print_books(books: List[Any]) -> None:
    """Print books in the current output mode.
    - plain: one rendered book per line, or 'No books registered.'
    - json: JSON array with isbn, title, author, year, available
    - rich: Rich table
    """
    _print_collection(
        books, "No books registered.", "📚 Books",
        ["isbn", "title", "author", "publication_year", "available"],
        lambda b: (b.isbn, b.title, b.author, b.publication_year, b.available),
    )

def print_members(members: List[Any]) -> None:
    _print_collection(
        members, "No members registered.", "👥 Members",
        ["enrollment_number", "name", "address", "phone"],
        lambda m: (m.enrollment_number, m.name, m.address, m.phone),
    )

def print_loans(loans: List[Any], empty_message: str = "No loans found.") -> None:
    _print_collection(
        loans, empty_message, "📖 Loans",
        ["isbn", "title", "enrollment_number", "member", "loaned_at", "returned_at", "status"],
        lambda l: (
            l.book.isbn, l.book.title, l.member.enrollment_number, l.member.name,
            l.loaned_at.isoformat(), l.returned_at.isoformat() if l.returned_at else None, l.status,
        ),
    )
