from __future__ import annotations


class Book:
    """Represents a single book in the catalog."""

    def __init__(self, title: str, author: str, isbn: str, publication_year: int,
                 available: bool = True) -> None:
        self.title = title
        self.author = author
        self.isbn = isbn
        self.publication_year = publication_year
        self.available = available

    @property
    def status(self) -> str:
        return "Available" if self.available else "On loan"

    def __str__(self) -> str:
        return f'"{self.title}" by {self.author} ({self.publication_year}) - ISBN: {self.isbn} - {self.status}'

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "publication_year": self.publication_year,
            "available": self.available,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Availability is restored as stored, it is not derived from loans
        return Book(
            title=data["title"],
            author=data["author"],
            isbn=data["isbn"],
            publication_year=data.get("publication_year"),
            available=data.get("available", True),
        )
