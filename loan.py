from __future__ import annotations

from datetime import datetime

from book import Book
from member import Member

DATE_FORMAT = "%d/%m/%Y"


class Loan:
    """A book lent to a member.

    The loan keeps references to the live Book and Member objects owned by the
    Library, so changes made elsewhere (e.g. availability) are visible here.
    Those references cannot be reassigned once the loan exists.
    """

    def __init__(self, book: Book, member: Member, loaned_at: datetime | None = None) -> None:
        self._book = book
        self._member = member
        self.loaned_at = loaned_at or datetime.now()
        self.returned = False
        self.returned_at: datetime | None = None

    @property
    def book(self) -> Book:
        return self._book

    @property
    def member(self) -> Member:
        return self._member

    @property
    def status(self) -> str:
        return "Returned" if self.returned else "Active"

    def __str__(self) -> str:
        returned = ""
        if self.returned and self.returned_at:
            returned = f", Returned: {self.returned_at.strftime(DATE_FORMAT)}"
        return (f"{self.status} loan: {self.book.title} to {self.member.name} "
                f"(Loaned: {self.loaned_at.strftime(DATE_FORMAT)}{returned})")

    def to_record(self) -> dict:
        """Flatten to the stored form, which holds identities instead of entities."""
        return {
            "book_isbn": self.book.isbn,
            "member_enrollment": self.member.enrollment_number,
            "loaned_at": self.loaned_at.isoformat(),
            "returned_at": self.returned_at.isoformat() if self.returned_at else None,
            "returned": self.returned,
        }
