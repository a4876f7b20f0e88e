from __future__ import annotations

from typing import List, Mapping

from library_catalog.items import LibraryItem
from utils.validators import EmailValidator, TextValidator


class Member:
    """A registered borrower and the items they currently hold."""

    def __init__(self, member_id: str, name: str, email: str) -> None:
        self._member_id = member_id.strip()
        self._borrowed_items: List[LibraryItem] = []
        self.name = name
        self.email = email

    @property
    def member_id(self) -> str:
        return self._member_id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if not TextValidator.validate_name(value):
            raise ValueError("Name cannot be blank.")
        self._name = value.strip()

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        if not EmailValidator.is_valid_email(value):
            raise ValueError(f"Invalid email address: {value!r}")
        self._email = value

    @property
    def borrowed_items(self) -> List[LibraryItem]:
        return list(self._borrowed_items)

    # Only Library calls these; it owns the availability flag.
    def borrow(self, item: LibraryItem) -> None:
        self._borrowed_items.append(item)

    def return_item(self, item: LibraryItem) -> bool:
        for i, held in enumerate(self._borrowed_items):
            if held.item_id == item.item_id:
                del self._borrowed_items[i]
                return True
        return False

    def total_late_fees(self, days_late_by_item: Mapping[str, int]) -> float:
        """Sum of linear late fees for held items; missing ids count as zero days."""
        return sum(item.calculate_late_fee(days_late_by_item.get(item.item_id, 0))
                   for item in self._borrowed_items)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} <{self.email}> ({self.member_id})"
