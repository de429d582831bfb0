import json

import pytest
from typer.testing import CliRunner

from main import app, LibraryManager
from library import Library, MSG_LOAN_LIMIT, MSG_NO_ACTIVE_LOAN
from database import RecordStore
from ui_helpers import OUTPUT_MODE_ENV

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(data_dir, monkeypatch):
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    LibraryManager.reset()
    yield
    LibraryManager.reset()


def _invoke(*args, input=None):
    result = runner.invoke(app, list(args), input=input)
    assert result.exit_code == 0, result.output
    return result


def test_list_no_books():
    result = _invoke("book", "list")
    assert "No books registered." in result.stdout

def test_add_and_list_book(data_dir):
    result = _invoke("book", "add", "1984", "George Orwell", "123", "1949")
    assert "Book added successfully!" in result.stdout

    result = _invoke("book", "list")
    assert '"1984" by George Orwell (1949) - ISBN: 123 - Available' in result.stdout
    assert Library(RecordStore(data_dir)).find_book("123").title == "1984"

def test_add_book_invalid_year():
    result = _invoke("book", "add", "1984", "George Orwell", "123", "nineteen")
    assert "Invalid year!" in result.stdout
    assert "No books registered." in _invoke("book", "list").stdout

def test_list_books_as_json():
    _invoke("book", "add", "1984", "George Orwell", "123", "1949")
    result = _invoke("--output", "json", "book", "list")
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert payload == [{"isbn": "123", "title": "1984", "author": "George Orwell",
                        "publication_year": 1949, "available": True}]

def test_find_book_not_found():
    assert "Book not found!" in _invoke("book", "find", "nope").stdout

def test_update_book_keeps_unspecified_fields():
    _invoke("book", "add", "1984", "George Orwell", "123", "1949")
    result = _invoke("book", "update", "123", "--title", "Animal Farm")
    assert "Book updated successfully!" in result.stdout

    result = _invoke("book", "find", "123")
    assert '"Animal Farm" by George Orwell (1949)' in result.stdout

def test_update_book_not_found():
    assert "Book not found!" in _invoke("book", "update", "nope", "--title", "X").stdout

def test_remove_book_with_confirmation():
    _invoke("book", "add", "1984", "George Orwell", "123", "1949")
    result = _invoke("book", "remove", "123", input="y\n")
    assert "Book removed successfully!" in result.stdout
    assert "No books registered." in _invoke("book", "list").stdout

def test_remove_book_cancelled():
    _invoke("book", "add", "1984", "George Orwell", "123", "1949")
    result = _invoke("book", "remove", "123", input="n\n")
    assert "Removal cancelled." in result.stdout
    assert "1984" in _invoke("book", "list").stdout

def test_member_lifecycle():
    assert "Member added successfully!" in _invoke("member", "add", "Alice", "Rua A", "111", "M1").stdout
    assert "Member updated successfully!" in _invoke("member", "update", "M1", "--phone", "222").stdout
    assert "Name: Alice, Address: Rua A, Phone: 222, Enrollment: M1" in _invoke("member", "find", "M1").stdout
    assert "Member removed successfully!" in _invoke("member", "remove", "M1", "--yes").stdout
    assert "No members registered." in _invoke("member", "list").stdout

def test_loan_flow():
    for isbn in ["1", "2", "3", "4"]:
        _invoke("book", "add", f"Book {isbn}", "Author", isbn, "2000")
    _invoke("member", "add", "Alice", "Rua A", "111", "M1")

    for isbn in ["1", "2", "3"]:
        assert "Loan completed successfully." in _invoke("loan", "request", isbn, "M1").stdout
    assert MSG_LOAN_LIMIT in _invoke("loan", "request", "4", "M1").stdout

    active = _invoke("loan", "active").stdout
    assert active.count("Active loan:") == 3

    assert "Return recorded successfully." in _invoke("loan", "return", "1").stdout
    assert MSG_NO_ACTIVE_LOAN in _invoke("loan", "return", "1").stdout

    history = _invoke("loan", "history").stdout
    assert history.count("Returned loan:") == 1
    assert history.count("Active loan:") == 2

def test_no_active_loans_message():
    assert "No active loans." in _invoke("loan", "active").stdout

def test_data_dir_option(tmp_path):
    other = str(tmp_path / "other")
    _invoke("--data-dir", other, "book", "add", "Dune", "Frank Herbert", "42", "1965")
    assert Library(RecordStore(other)).find_book("42").title == "Dune"

def test_menu_add_and_list_book(data_dir):
    answers = "\n".join([
        "1",                                   # books
        "1", "Dune", "Frank Herbert", "42", "1965",
        "2",                                   # list
        "5",                                   # back
        "4",                                   # exit
    ]) + "\n"
    result = _invoke("menu", input=answers)

    assert "Book added successfully!" in result.stdout
    assert '"Dune" by Frank Herbert (1965)' in result.stdout
    assert "Exiting..." in result.stdout
    assert Library(RecordStore(data_dir)).find_book("42") is not None

def test_menu_update_with_blank_answers_keeps_values(data_dir):
    _invoke("book", "add", "Dune", "Frank Herbert", "42", "1965")
    answers = "\n".join(["1", "3", "42", "", "Someone Else", "", "5", "4"]) + "\n"
    result = _invoke("menu", input=answers)

    assert "Book updated successfully!" in result.stdout
    book = Library(RecordStore(data_dir)).find_book("42")
    assert book.title == "Dune"
    assert book.author == "Someone Else"
    assert book.publication_year == 1965

def test_menu_loans():
    _invoke("book", "add", "Dune", "Frank Herbert", "42", "1965")
    _invoke("member", "add", "Alice", "Rua A", "111", "M1")
    answers = "\n".join(["3", "1", "42", "M1", "3", "42", "3", "42", "5", "4"]) + "\n"
    result = _invoke("menu", input=answers)

    assert "Loan completed successfully." in result.stdout
    assert "Return recorded successfully." in result.stdout
    assert MSG_NO_ACTIVE_LOAN in result.stdout

def test_menu_invalid_option_and_end_of_input():
    result = _invoke("menu", input="9\n")
    assert "Invalid option!" in result.stdout
    assert "Exiting..." in result.stdout
