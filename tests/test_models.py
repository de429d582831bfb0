from datetime import datetime

from book import Book
from loan import Loan
from member import Member, Person


def test_book_defaults_to_available():
    book = Book("1984", "George Orwell", "978-85-359-0091-6", 1949)
    assert book.available is True
    assert str(book) == '"1984" by George Orwell (1949) - ISBN: 978-85-359-0091-6 - Available'

def test_book_renders_on_loan_status():
    book = Book("1984", "George Orwell", "1", 1949)
    book.available = False
    assert str(book).endswith("- On loan")

def test_book_dict_round_trip():
    book = Book("Title", "Author", "42", 2001, available=False)
    copy = Book.from_dict(book.to_dict())
    assert copy.to_dict() == book.to_dict()

def test_member_composes_person():
    member = Member("Alice Silva", "Rua A", "12345678", "M001")
    assert isinstance(member.person, Person)
    assert str(member) == "Name: Alice Silva, Address: Rua A, Phone: 12345678, Enrollment: M001"

def test_member_fields_write_through_to_person():
    member = Member("Alice", "Rua A", "111", "M001")
    member.phone = "999"
    assert member.person.phone == "999"
    assert Member.from_dict(member.to_dict()).phone == "999"

def test_loan_starts_active():
    loan = Loan(Book("1984", "Orwell", "1", 1949), Member("Alice", "Rua A", "1", "M1"),
                datetime(2024, 3, 5, 10, 0))
    assert loan.returned is False
    assert loan.returned_at is None
    assert str(loan) == "Active loan: 1984 to Alice (Loaned: 05/03/2024)"

def test_loan_renders_return_date_only_when_returned():
    loan = Loan(Book("1984", "Orwell", "1", 1949), Member("Alice", "Rua A", "1", "M1"),
                datetime(2024, 3, 5))
    loan.returned = True
    loan.returned_at = datetime(2024, 3, 20)
    assert str(loan) == "Returned loan: 1984 to Alice (Loaned: 05/03/2024, Returned: 20/03/2024)"

def test_loan_observes_live_book():
    book = Book("1984", "Orwell", "1", 1949)
    loan = Loan(book, Member("Alice", "Rua A", "1", "M1"))
    book.title = "Nineteen Eighty-Four"
    assert loan.book is book
    assert "Nineteen Eighty-Four" in str(loan)

def test_loan_record_holds_identities():
    loaned_at = datetime(2024, 1, 2, 3, 4, 5)
    loan = Loan(Book("1984", "Orwell", "1", 1949), Member("Alice", "Rua A", "1", "M1"), loaned_at)
    assert loan.to_record() == {
        "book_isbn": "1",
        "member_enrollment": "M1",
        "loaned_at": loaned_at.isoformat(),
        "returned_at": None,
        "returned": False,
    }
