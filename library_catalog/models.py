from __future__ import annotations

from dataclasses import dataclass, field
import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple


class ItemType(Enum):
    """Catalog item variants; the value is the display tag."""
    BOOK = "Book"
    DVD = "DVD"
    MAGAZINE = "Magazine"


class TransactionType(Enum):
    """Lending events recorded in the audit log"""
    BORROW = "Borrow"
    RETURN = "Return"
    RENEW = "Renew"


class LendingError(Enum):
    """Why a borrow, return or renew was refused."""
    MEMBER_NOT_FOUND = "member not found"
    ITEM_NOT_FOUND = "item not found"
    ITEM_UNAVAILABLE = "item is already on loan"
    BORROW_LIMIT_REACHED = "member has reached the borrow limit"
    NOT_BORROWED_BY_MEMBER = "item is not borrowed by this member"
    ITEM_NOT_BORROWED = "item is not on loan"
    RENEWAL_LIMIT_REACHED = "renewal limit reached"


@dataclass
class Transaction:
    """One entry of the lending audit log.

    For RENEW entries ``due_date`` is the new due date.
    """
    member_id: str
    item_id: str
    type: TransactionType
    date: datetime.date = field(default_factory=datetime.date.today)
    due_date: Optional[datetime.date] = None


@dataclass
class SearchResult:
    items: List[Any]
    total_found: int
    search_criteria: str


@dataclass
class LendingResult:
    """Outcome of a borrow, return or renew.

    Truthy exactly when the operation succeeded.
    """
    success: bool
    error: Optional[LendingError] = None
    fee: float = 0.0
    days_late: int = 0
    due_date: Optional[datetime.date] = None

    def __bool__(self) -> bool:
        return self.success

    def as_tuple(self) -> Tuple[bool, float]:
        return self.success, self.fee

    @classmethod
    def failed(cls, error: LendingError) -> "LendingResult":
        return cls(success=False, error=error)
