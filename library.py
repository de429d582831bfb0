import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import database
from book import Book
from database import RecordStore
from loan import Loan
from member import Member

logger = logging.getLogger(__name__)

MAX_ACTIVE_LOANS = 3

MSG_BOOK_NOT_FOUND = "Book not found."
MSG_MEMBER_NOT_FOUND = "Member not found."
MSG_BOOK_ON_LOAN = "Book is already on loan."
MSG_LOAN_LIMIT = f"Member has reached the limit of {MAX_ACTIVE_LOANS} simultaneous loans."
MSG_LOAN_OK = "Loan completed successfully."
MSG_NO_ACTIVE_LOAN = "No active loan found for this book."
MSG_RETURN_OK = "Return recorded successfully."


@dataclass(frozen=True)
class LoanResult:
    success: bool
    message: str


class Library:
    """Manages books, members and loans and keeps them persisted.

    All state lives in three in-memory lists owned by this object. Every
    successful mutation rewrites the three collections to the record store.
    """

    def __init__(self, store: Optional[RecordStore] = None) -> None:
        self.store = store if store is not None else RecordStore()
        self.books: List[Book] = []
        self.members: List[Member] = []
        self.loans: List[Loan] = []
        self._load()

    # ------------------------- Persistence ------------------------- #
    def _load(self) -> None:
        """Rebuild the catalog from the store and reconnect loans to live entities."""
        self.books = self._build_all(database.BOOKS, Book.from_dict)
        self.members = self._build_all(database.MEMBERS, Member.from_dict)

        self.loans = []
        for record in self.store.load(database.LOANS):
            loan = self._loan_from_record(record)
            if loan is not None:
                self.loans.append(loan)

    def _build_all(self, name: str, factory: Callable[[Dict[str, Any]], Any]) -> list:
        items = []
        for record in self.store.load(name):
            try:
                items.append(factory(record))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed {name} record {record!r}: {e}")
        return items

    def _loan_from_record(self, record: Dict[str, Any]) -> Optional[Loan]:
        try:
            isbn = record["book_isbn"]
            enrollment_number = record["member_enrollment"]
            loaned_at = datetime.fromisoformat(record["loaned_at"])
            returned_at = record.get("returned_at")
            returned_at = datetime.fromisoformat(returned_at) if returned_at else None
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping malformed loan record {record!r}: {e}")
            return None

        book = self.find_book(isbn)
        member = self.find_member(enrollment_number)
        # Loans whose book or member no longer exists are dropped
        if book is None or member is None:
            logger.debug(f"Dropping orphaned loan of {isbn} to {enrollment_number}")
            return None

        loan = Loan(book, member, loaned_at)
        if record.get("returned") is True:
            loan.returned = True
            loan.returned_at = returned_at
        return loan

    def _save(self) -> None:
        self.store.save(database.BOOKS, [b.to_dict() for b in self.books])
        self.store.save(database.MEMBERS, [m.to_dict() for m in self.members])
        self.store.save(database.LOANS, [loan.to_record() for loan in self.loans])

    # ------------------------- Books ------------------------- #
    def add_book(self, book: Book) -> None:
        """Add a book. Duplicate ISBNs are not rejected; lookups return the first match."""
        self.books.append(book)
        self._save()

    def list_books(self) -> List[Book]:
        return self.books

    def find_book(self, isbn: str) -> Optional[Book]:
        for book in self.books:
            if book.isbn == isbn:
                return book
        return None

    def update_book(self, isbn: str, *, title: Optional[str] = None, author: Optional[str] = None,
                    publication_year: Optional[int] = None) -> bool:
        """Update the given fields of a book. Blank values leave the field unchanged."""
        book = self.find_book(isbn)
        if not book:
            return False

        if title:
            book.title = title
        if author:
            book.author = author
        if publication_year:
            book.publication_year = publication_year
        self._save()
        return True

    def remove_book(self, isbn: str) -> bool:
        book = self.find_book(isbn)
        if not book:
            return False
        # Active loans are not checked; they get pruned on the next load
        self.books.remove(book)
        self._save()
        return True

    # ------------------------- Members ------------------------- #
    def add_member(self, member: Member) -> None:
        self.members.append(member)
        self._save()

    def list_members(self) -> List[Member]:
        return self.members

    def find_member(self, enrollment_number: str) -> Optional[Member]:
        for member in self.members:
            if member.enrollment_number == enrollment_number:
                return member
        return None

    def update_member(self, enrollment_number: str, *, name: Optional[str] = None,
                      address: Optional[str] = None, phone: Optional[str] = None) -> bool:
        member = self.find_member(enrollment_number)
        if not member:
            return False

        if name:
            member.name = name
        if address:
            member.address = address
        if phone:
            member.phone = phone
        self._save()
        return True

    def remove_member(self, enrollment_number: str) -> bool:
        member = self.find_member(enrollment_number)
        if not member:
            return False
        self.members.remove(member)
        self._save()
        return True

    # ------------------------- Loans ------------------------- #
    def active_loans_for(self, enrollment_number: str) -> List[Loan]:
        return [loan for loan in self.loans
                if not loan.returned and loan.member.enrollment_number == enrollment_number]

    def request_loan(self, isbn: str, enrollment_number: str) -> LoanResult:
        """Lend a book to a member.

        Checks run in order and the first failure wins: the book exists, the
        member exists, the book is available, the member is under the loan
        limit. Nothing is changed or saved when a check fails.
        """
        book = self.find_book(isbn)
        if not book:
            return LoanResult(False, MSG_BOOK_NOT_FOUND)
        member = self.find_member(enrollment_number)
        if not member:
            return LoanResult(False, MSG_MEMBER_NOT_FOUND)
        if not book.available:
            return LoanResult(False, MSG_BOOK_ON_LOAN)
        if len(self.active_loans_for(enrollment_number)) >= MAX_ACTIVE_LOANS:
            return LoanResult(False, MSG_LOAN_LIMIT)

        book.available = False
        self.loans.append(Loan(book, member))
        self._save()
        logger.info(f"Book {isbn} lent to member {enrollment_number}")
        return LoanResult(True, MSG_LOAN_OK)

    def list_active_loans(self) -> List[Loan]:
        return [loan for loan in self.loans if not loan.returned]

    def record_return(self, isbn: str) -> LoanResult:
        loan = next((l for l in self.loans if l.book.isbn == isbn and not l.returned), None)
        if loan is None:
            return LoanResult(False, MSG_NO_ACTIVE_LOAN)

        loan.returned = True
        loan.returned_at = datetime.now()
        loan.book.available = True
        self._save()
        logger.info(f"Book {isbn} returned by member {loan.member.enrollment_number}")
        return LoanResult(True, MSG_RETURN_OK)

    def list_loan_history(self) -> List[Loan]:
        return self.loans
