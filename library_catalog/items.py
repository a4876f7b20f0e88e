from __future__ import annotations

import time

from library_catalog.fees import late_fee
from library_catalog.models import ItemType


class LibraryItem:
    """Base for every lendable item in the catalog."""

    item_type: ItemType

    def __init__(self, item_id: str, title: str, is_available: bool = True) -> None:
        self.item_id = item_id.strip()
        self.title = title.strip()
        self.is_available = is_available

    def calculate_late_fee(self, days_late: int) -> float:
        return late_fee(self.item_type, days_late)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} ({self.item_type.value} {self.item_id})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(item_id={self.item_id!r}, title={self.title!r})"

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "item_type": self.item_type.value,
            "title": self.title,
            "is_available": self.is_available,
        }

    @staticmethod
    def from_dict(data: dict) -> "LibraryItem":
        fields = dict(data)
        item_type = ItemType(fields.pop("item_type"))
        is_available = fields.pop("is_available", True)
        item = create_item(item_type, **fields)
        item.is_available = is_available
        return item


class Book(LibraryItem):
    item_type = ItemType.BOOK

    def __init__(self, item_id: str, title: str, author: str, isbn: str, pages: int,
                 is_available: bool = True) -> None:
        super().__init__(item_id, title, is_available)
        self.author = author.strip()
        self.isbn = isbn.strip()
        self.pages = pages

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"author": self.author, "isbn": self.isbn, "pages": self.pages})
        return data


class DVD(LibraryItem):
    item_type = ItemType.DVD

    def __init__(self, item_id: str, title: str, director: str, duration: int, genre: str,
                 is_available: bool = True) -> None:
        super().__init__(item_id, title, is_available)
        self.director = director.strip()
        # minutes
        self.duration = duration
        self.genre = genre.strip()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"director": self.director, "duration": self.duration, "genre": self.genre})
        return data


class Magazine(LibraryItem):
    item_type = ItemType.MAGAZINE

    def __init__(self, item_id: str, title: str, issue_number: int, publisher: str,
                 is_available: bool = True) -> None:
        super().__init__(item_id, title, is_available)
        self.issue_number = issue_number
        self.publisher = publisher.strip()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"issue_number": self.issue_number, "publisher": self.publisher})
        return data


ITEM_CLASSES = {
    ItemType.BOOK: Book,
    ItemType.DVD: DVD,
    ItemType.MAGAZINE: Magazine,
}


def create_item(item_type: ItemType | str, item_id: str, title: str, **fields) -> LibraryItem:
    """Build the item variant named by ``item_type`` ("Book", "DVD", "Magazine" or an ItemType)."""
    if not isinstance(item_type, ItemType):
        try:
            item_type = ItemType(item_type)
        except ValueError:
            raise ValueError(f"Unknown item type: {item_type}") from None
    return ITEM_CLASSES[item_type](item_id, title, **fields)


def generate_item_id(item_type: ItemType | str) -> str:
    """Type initial plus the last six digits of the current epoch milliseconds."""
    tag = item_type.value if isinstance(item_type, ItemType) else str(item_type)
    millis = str(int(time.time() * 1000))
    return tag[:1].upper() + millis[-6:]
