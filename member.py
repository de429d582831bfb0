from __future__ import annotations


class Person:
    """Contact details shared by anyone the library deals with."""

    def __init__(self, name: str, address: str, phone: str) -> None:
        self.name = name
        self.address = address
        self.phone = phone

    def __str__(self) -> str:
        return f"Name: {self.name}, Address: {self.address}, Phone: {self.phone}"


class Member:
    """A registered borrower, identified by enrollment number.

    The contact fields live in an embedded Person; ``name``, ``address`` and
    ``phone`` read and write through to it.
    """

    def __init__(self, name: str, address: str, phone: str, enrollment_number: str) -> None:
        self.person = Person(name, address, phone)
        self.enrollment_number = enrollment_number

    @property
    def name(self) -> str:
        return self.person.name

    @name.setter
    def name(self, value: str) -> None:
        self.person.name = value

    @property
    def address(self) -> str:
        return self.person.address

    @address.setter
    def address(self, value: str) -> None:
        self.person.address = value

    @property
    def phone(self) -> str:
        return self.person.phone

    @phone.setter
    def phone(self, value: str) -> None:
        self.person.phone = value

    def __str__(self) -> str:
        return f"{self.person}, Enrollment: {self.enrollment_number}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "enrollment_number": self.enrollment_number,
        }

    @staticmethod
    def from_dict(data: dict) -> "Member":
        return Member(
            name=data["name"],
            address=data.get("address"),
            phone=data.get("phone"),
            enrollment_number=data["enrollment_number"],
        )
