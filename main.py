import logging
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.markup import escape
from rich import box
import typer

from library import Library, LoanResult
from book import Book
from member import Member
import database
from config import settings
from validators import parse_year
from ui_helpers import set_output_mode, print_books, print_members, print_loans

APP_NAME = settings.app_name

console = Console()


class LibraryManager:
    """Holds the Library instance shared by the CLI commands."""

    _instance: Optional[Library] = None
    _data_dir_snapshot: Optional[str] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Return the Library, rebuilding it if the data directory changed."""
        current_dir = database.DATA_DIR
        if cls._instance is None or current_dir != cls._data_dir_snapshot:
            cls._instance = Library()
            cls._data_dir_snapshot = current_dir
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None
        cls._data_dir_snapshot = None


def configure_logging() -> None:
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print_result(result: LoanResult) -> None:
    print(result.message)


# --- Typer CLI Application ---
app = typer.Typer(help="Library catalog CLI")
book_app = typer.Typer(help="Manage books")
member_app = typer.Typer(help="Manage members")
loan_app = typer.Typer(help="Manage loans")
app.add_typer(book_app, name="book")
app.add_typer(member_app, name="member")
app.add_typer(loan_app, name="loan")

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding the books, members and loans files",
    ),
):
    """Global CLI options (output mode, data directory)."""
    configure_logging()
    if output:
        set_output_mode(output)
    if data_dir:
        database.DATA_DIR = data_dir

# ------------------------- Books ------------------------- #
@book_app.command("add")
def cli_book_add(title: str, author: str, isbn: str, year: str):
    """Add a book to the catalog."""
    publication_year = parse_year(year)
    if publication_year is None:
        print("Invalid year!")
        return
    LibraryManager.get_instance().add_book(Book(title, author, isbn, publication_year))
    print("Book added successfully!")

@book_app.command("list")
def cli_book_list():
    """List all books."""
    print_books(LibraryManager.get_instance().list_books())

@book_app.command("find")
def cli_book_find(isbn: str):
    """Show a book by ISBN."""
    book = LibraryManager.get_instance().find_book(isbn)
    if book:
        print(str(book))
    else:
        print("Book not found!")

@book_app.command("update")
def cli_book_update(
    isbn: str,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
    year: Optional[str] = typer.Option(None, "--year", "-y", help="New publication year"),
):
    """Update a book. Fields left out keep their current value."""
    lib = LibraryManager.get_instance()
    if lib.update_book(isbn, title=title, author=author, publication_year=parse_year(year)):
        print("Book updated successfully!")
    else:
        print("Book not found!")

@book_app.command("remove")
def cli_book_remove(isbn: str, yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")):
    """Remove a book by ISBN."""
    _remove_book(LibraryManager.get_instance(), isbn, confirmed=yes)

# ------------------------- Members ------------------------- #
@member_app.command("add")
def cli_member_add(name: str, address: str, phone: str, enrollment_number: str):
    """Register a member."""
    LibraryManager.get_instance().add_member(Member(name, address, phone, enrollment_number))
    print("Member added successfully!")

@member_app.command("list")
def cli_member_list():
    """List all members."""
    print_members(LibraryManager.get_instance().list_members())

@member_app.command("find")
def cli_member_find(enrollment_number: str):
    """Show a member by enrollment number."""
    member = LibraryManager.get_instance().find_member(enrollment_number)
    if member:
        print(str(member))
    else:
        print("Member not found!")

@member_app.command("update")
def cli_member_update(
    enrollment_number: str,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    address: Optional[str] = typer.Option(None, "--address", "-a", help="New address"),
    phone: Optional[str] = typer.Option(None, "--phone", "-p", help="New phone"),
):
    """Update a member. Fields left out keep their current value."""
    lib = LibraryManager.get_instance()
    if lib.update_member(enrollment_number, name=name, address=address, phone=phone):
        print("Member updated successfully!")
    else:
        print("Member not found!")

@member_app.command("remove")
def cli_member_remove(enrollment_number: str, yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")):
    """Remove a member by enrollment number."""
    _remove_member(LibraryManager.get_instance(), enrollment_number, confirmed=yes)

# ------------------------- Loans ------------------------- #
@loan_app.command("request")
def cli_loan_request(isbn: str, enrollment_number: str):
    """Lend a book to a member."""
    _print_result(LibraryManager.get_instance().request_loan(isbn, enrollment_number))

@loan_app.command("active")
def cli_loan_active():
    """List loans that have not been returned."""
    print_loans(LibraryManager.get_instance().list_active_loans(), "No active loans.")

@loan_app.command("return")
def cli_loan_return(isbn: str):
    """Record the return of a book."""
    _print_result(LibraryManager.get_instance().record_return(isbn))

@loan_app.command("history")
def cli_loan_history():
    """List every loan, returned or not."""
    print_loans(LibraryManager.get_instance().list_loan_history(), "No loans in history.")

@app.command("menu")
def cli_menu():
    """Start the interactive menu."""
    run_menu()

# ------------------------- Shared actions ------------------------- #
def _remove_book(lib: Library, isbn: str, confirmed: bool = False) -> None:
    book = lib.find_book(isbn)
    if not book:
        print("Book not found!")
        return
    console.print(Panel.fit(escape(str(book)), title="📚 Book to remove", border_style="yellow"))
    if confirmed or Confirm.ask("Confirm removal?", default=False):
        lib.remove_book(isbn)
        print("Book removed successfully!")
    else:
        print("Removal cancelled.")

def _remove_member(lib: Library, enrollment_number: str, confirmed: bool = False) -> None:
    member = lib.find_member(enrollment_number)
    if not member:
        print("Member not found!")
        return
    console.print(Panel.fit(escape(str(member)), title="👤 Member to remove", border_style="yellow"))
    if confirmed or Confirm.ask("Confirm removal?", default=False):
        lib.remove_member(enrollment_number)
        print("Member removed successfully!")
    else:
        print("Removal cancelled.")

# ------------------------- Interactive menu ------------------------- #
def _render_menu(title: str, items) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label in items:
        table.add_row(f"[reverse]{key}[/]", label)
    console.print(Panel(table, title=title, border_style="cyan", box=box.HEAVY, padding=(0, 2)))

def _ask(prompt: str) -> str:
    return Prompt.ask(prompt, default="", show_default=False)

def _menu_add_book(lib: Library) -> None:
    title = _ask("Title")
    author = _ask("Author")
    isbn = _ask("ISBN")
    publication_year = parse_year(_ask("Publication year"))
    if publication_year is None:
        print("Invalid year!")
        return
    lib.add_book(Book(title, author, isbn, publication_year))
    print("Book added successfully!")

def _menu_update_book(lib: Library) -> None:
    isbn = _ask("ISBN of the book to update")
    book = lib.find_book(isbn)
    if not book:
        print("Book not found!")
        return
    console.print(f"Book found: {escape(str(book))}")
    title = _ask("New title (leave blank to keep)")
    author = _ask("New author (leave blank to keep)")
    year = _ask("New year (leave blank to keep)")
    lib.update_book(isbn, title=title, author=author, publication_year=parse_year(year))
    print("Book updated successfully!")

def _menu_add_member(lib: Library) -> None:
    name = _ask("Name")
    address = _ask("Address")
    phone = _ask("Phone")
    enrollment_number = _ask("Enrollment number")
    lib.add_member(Member(name, address, phone, enrollment_number))
    print("Member added successfully!")

def _menu_update_member(lib: Library) -> None:
    enrollment_number = _ask("Enrollment number of the member to update")
    member = lib.find_member(enrollment_number)
    if not member:
        print("Member not found!")
        return
    console.print(f"Member found: {escape(str(member))}")
    name = _ask("New name (leave blank to keep)")
    address = _ask("New address (leave blank to keep)")
    phone = _ask("New phone (leave blank to keep)")
    lib.update_member(enrollment_number, name=name, address=address, phone=phone)
    print("Member updated successfully!")

def _books_menu(lib: Library) -> None:
    while True:
        _render_menu("Manage books", [
            ("1", "Add book"), ("2", "List books"), ("3", "Update book"),
            ("4", "Remove book"), ("5", "Back"),
        ])
        choice = _ask("Choose an option").strip()
        if choice == "1":
            _menu_add_book(lib)
        elif choice == "2":
            print_books(lib.list_books())
        elif choice == "3":
            _menu_update_book(lib)
        elif choice == "4":
            _remove_book(lib, _ask("ISBN of the book to remove"))
        elif choice == "5":
            return
        else:
            print("Invalid option!")

def _members_menu(lib: Library) -> None:
    while True:
        _render_menu("Manage members", [
            ("1", "Add member"), ("2", "List members"), ("3", "Update member"),
            ("4", "Remove member"), ("5", "Back"),
        ])
        choice = _ask("Choose an option").strip()
        if choice == "1":
            _menu_add_member(lib)
        elif choice == "2":
            print_members(lib.list_members())
        elif choice == "3":
            _menu_update_member(lib)
        elif choice == "4":
            _remove_member(lib, _ask("Enrollment number of the member to remove"))
        elif choice == "5":
            return
        else:
            print("Invalid option!")

def _loans_menu(lib: Library) -> None:
    while True:
        _render_menu("Manage loans", [
            ("1", "Request loan"), ("2", "List active loans"), ("3", "Record return"),
            ("4", "Loan history"), ("5", "Back"),
        ])
        choice = _ask("Choose an option").strip()
        if choice == "1":
            isbn = _ask("Book ISBN")
            enrollment_number = _ask("Member enrollment number")
            _print_result(lib.request_loan(isbn, enrollment_number))
        elif choice == "2":
            print_loans(lib.list_active_loans(), "No active loans.")
        elif choice == "3":
            _print_result(lib.record_return(_ask("ISBN of the book being returned")))
        elif choice == "4":
            print_loans(lib.list_loan_history(), "No loans in history.")
        elif choice == "5":
            return
        else:
            print("Invalid option!")

def run_menu():
    """Interactive menu for the library catalog."""
    lib = LibraryManager.get_instance()
    try:
        while True:
            _render_menu(APP_NAME, [
                ("1", "Manage books"), ("2", "Manage members"),
                ("3", "Manage loans"), ("4", "Exit"),
            ])
            choice = _ask("Choose an option").strip()
            if choice == "1":
                _books_menu(lib)
            elif choice == "2":
                _members_menu(lib)
            elif choice == "3":
                _loans_menu(lib)
            elif choice == "4":
                break
            else:
                print("Invalid option!")
    except (EOFError, KeyboardInterrupt):
        print()
    print("Exiting...")

if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        configure_logging()
        run_menu()
