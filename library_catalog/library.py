import logging
from collections import Counter
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

from config import Settings, settings as default_settings
from library_catalog.fees import capped_fee
from library_catalog.items import Book, DVD, LibraryItem
from library_catalog.member import Member
from library_catalog.models import (
    ItemType,
    LendingError,
    LendingResult,
    SearchResult,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

OverdueCallback = Callable[[LibraryItem, Member, int], None]


class Library:
    """Owns the item catalog, the member registry and the lending ledger."""

    def __init__(self, config: Optional[Settings] = None, clock: Optional[Callable[[], date]] = None) -> None:
        self.config = config or default_settings
        # Callers (and tests) may pin "today" by supplying a clock.
        self.clock = clock or date.today

        self._items_by_id: Dict[str, LibraryItem] = {}
        self._items_by_category: Dict[str, List[LibraryItem]] = {}
        self._members: Dict[str, Member] = {}
        self._borrowed_ids: Dict[str, List[str]] = {}  # member_id -> item_ids

        self._due_dates: Dict[str, date] = {}  # item_id -> due date
        self._renewals: Dict[str, int] = {}  # item_id -> times renewed
        self._transactions: List[Transaction] = []

    # ------------------------- Catalog ------------------------- #
    def add_item(self, item: LibraryItem, category: str) -> None:
        """Add ``item`` under ``category``. A reused id replaces the earlier item.

        Replacing an item that is on loan keeps the loan: the new object is
        stored as unavailable.
        """
        if item.item_id in self._items_by_id:
            logger.warning(f"Replacing catalog item {item.item_id}")
        if item.item_id in self._due_dates:
            item.is_available = False
        self._items_by_id[item.item_id] = item
        self._items_by_category.setdefault(category, []).append(item)
        logger.info(f"Added {item.item_type.value} {item.item_id} to {category}")

    def get_item(self, item_id: str) -> Optional[LibraryItem]:
        return self._items_by_id.get(item_id)

    def list_items(self) -> List[LibraryItem]:
        return list(self._items_by_id.values())

    def items_in_category(self, category: str) -> List[LibraryItem]:
        return list(self._items_by_category.get(category, []))

    # ------------------------- Members ------------------------- #
    def register_member(self, member: Member) -> None:
        self._members[member.member_id] = member
        logger.info(f"Registered member {member.member_id}")

    def get_member(self, member_id: str) -> Optional[Member]:
        return self._members.get(member_id)

    def list_members(self) -> List[Member]:
        return list(self._members.values())

    def member_borrowed_ids(self, member_id: str) -> List[str]:
        return list(self._borrowed_ids.get(member_id, []))

    # ------------------------- Lending ------------------------- #
    def borrow_item(self, member_id: str, item_id: str) -> LendingResult:
        member = self._members.get(member_id)
        if member is None:
            return self._refuse("borrow", member_id, item_id, LendingError.MEMBER_NOT_FOUND)
        item = self._items_by_id.get(item_id)
        if item is None:
            return self._refuse("borrow", member_id, item_id, LendingError.ITEM_NOT_FOUND)
        if not item.is_available:
            return self._refuse("borrow", member_id, item_id, LendingError.ITEM_UNAVAILABLE)
        held = self._borrowed_ids.setdefault(member_id, [])
        if len(held) >= self.config.max_borrow_limit:
            return self._refuse("borrow", member_id, item_id, LendingError.BORROW_LIMIT_REACHED)

        today = self.clock()
        due = today + timedelta(days=self.config.default_borrow_days)
        item.is_available = False
        held.append(item_id)
        member.borrow(item)
        self._due_dates[item_id] = due
        self._renewals[item_id] = 0
        self._transactions.append(Transaction(member_id, item_id, TransactionType.BORROW, today, due))
        logger.info(f"{member_id} borrowed {item_id}, due {due.isoformat()}")
        return LendingResult(success=True, due_date=due)

    def return_item(self, member_id: str, item_id: str) -> LendingResult:
        """Check ``item_id`` back in and charge the linear late fee, capped."""
        member = self._members.get(member_id)
        if member is None:
            return self._refuse("return", member_id, item_id, LendingError.MEMBER_NOT_FOUND)
        item = self._items_by_id.get(item_id)
        if item is None:
            return self._refuse("return", member_id, item_id, LendingError.ITEM_NOT_FOUND)
        held = self._borrowed_ids.get(member_id, [])
        if item_id not in held:
            return self._refuse("return", member_id, item_id, LendingError.NOT_BORROWED_BY_MEMBER)

        today = self.clock()
        held.remove(item_id)
        item.is_available = True
        member.return_item(item)

        due = self._due_dates.pop(item_id, None)
        self._renewals.pop(item_id, None)
        days_late = self._days_late(due, today) if due is not None else 0
        fee = capped_fee(item.calculate_late_fee(days_late), self.config.late_fee_cap)

        self._transactions.append(Transaction(member_id, item_id, TransactionType.RETURN, today))
        logger.info(f"{member_id} returned {item_id}, {days_late} day(s) late, fee {fee:.2f}")
        return LendingResult(success=True, fee=fee, days_late=days_late)

    def renew_item(self, member_id: str, item_id: str) -> LendingResult:
        if member_id not in self._members:
            return self._refuse("renew", member_id, item_id, LendingError.MEMBER_NOT_FOUND)
        item = self._items_by_id.get(item_id)
        if item is None:
            return self._refuse("renew", member_id, item_id, LendingError.ITEM_NOT_FOUND)
        if item.is_available:
            return self._refuse("renew", member_id, item_id, LendingError.ITEM_NOT_BORROWED)
        if item_id not in self._borrowed_ids.get(member_id, []):
            return self._refuse("renew", member_id, item_id, LendingError.NOT_BORROWED_BY_MEMBER)
        count = self._renewals.get(item_id, 0)
        if count >= self.config.max_renewal_times:
            return self._refuse("renew", member_id, item_id, LendingError.RENEWAL_LIMIT_REACHED)

        today = self.clock()
        new_due = self._due_dates.get(item_id, today) + timedelta(days=self.config.default_borrow_days)
        self._due_dates[item_id] = new_due
        self._renewals[item_id] = count + 1
        self._transactions.append(Transaction(member_id, item_id, TransactionType.RENEW, today, new_due))
        logger.info(f"{member_id} renewed {item_id} ({count + 1}/{self.config.max_renewal_times}), due {new_due.isoformat()}")
        return LendingResult(success=True, due_date=new_due)

    def due_date_for(self, item_id: str) -> Optional[date]:
        return self._due_dates.get(item_id)

    def renewal_count(self, item_id: str) -> int:
        return self._renewals.get(item_id, 0)

    def all_transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def process_overdue_items(self, action: OverdueCallback) -> int:
        """Call ``action(item, member, days_late)`` for every loan past its due date.

        Read-only; returns how many loans were reported.
        """
        today = self.clock()
        reported = 0
        for item_id, due in list(self._due_dates.items()):
            if not due < today:
                continue
            item = self._items_by_id.get(item_id)
            if item is None:
                continue
            holder_id = next(
                (mid for mid, ids in self._borrowed_ids.items() if item_id in ids),
                None,
            )
            member = self._members.get(holder_id) if holder_id is not None else None
            if member is None:
                continue
            action(item, member, self._days_late(due, today))
            reported += 1
        return reported

    # ------------------------- Queries ------------------------- #
    def search_by_title(self, query: str) -> SearchResult:
        q = query.strip().lower()
        items = [item for item in self._items_by_id.values() if q in item.title.lower()]
        return SearchResult(items=items, total_found=len(items), search_criteria=f"title contains '{query}'")

    def find_books_by_author(self, author: str) -> List[Book]:
        wanted = author.strip().lower()
        return [item for item in self._items_by_id.values()
                if isinstance(item, Book) and item.author.lower() == wanted]

    def find_items_by(self, item_type: Union[ItemType, str],
                      predicate: Optional[Callable[[Any], bool]] = None) -> List[LibraryItem]:
        """Items of ``item_type`` for which ``predicate`` holds (all of them when it is None).

        ``item_type`` may be an ItemType or its tag ("Book", "DVD", "Magazine");
        an unknown tag raises ValueError.
        """
        item_type = ItemType(item_type)
        matches = [item for item in self._items_by_id.values() if item.item_type is item_type]
        if predicate is None:
            return matches
        return [item for item in matches if predicate(item)]

    def get_library_statistics(self) -> Dict[str, Any]:
        items = list(self._items_by_id.values())

        total_by_type: Dict[str, int] = {}
        for item in items:
            tag = item.item_type.value
            total_by_type[tag] = total_by_type.get(tag, 0) + 1

        pages = [item.pages for item in items if isinstance(item, Book)]
        avg_pages = sum(pages) / len(pages) if pages else 0.0

        genre_borrows = Counter()
        for tr in self._transactions:
            if tr.type is not TransactionType.BORROW:
                continue
            borrowed = self._items_by_id.get(tr.item_id)
            if isinstance(borrowed, DVD):
                genre_borrows[borrowed.genre] += 1
        # most_common keeps first-seen order among ties
        most_popular = genre_borrows.most_common(1)[0][0] if genre_borrows else "N/A"

        available_pct = (sum(1 for item in items if item.is_available) / len(items) * 100.0) if items else 0.0

        return {
            "total_by_type": total_by_type,
            "average_pages_for_books": avg_pages,
            "most_popular_genre_for_dvds": most_popular,
            "percentage_available": available_pct,
        }

    # ------------------------- Utilities ------------------------- #
    @staticmethod
    def _days_late(due: date, today: date) -> int:
        return max((today - due).days, 0)

    @staticmethod
    def _refuse(action: str, member_id: str, item_id: str, error: LendingError) -> LendingResult:
        logger.info(f"Refused {action} of {item_id} by {member_id}: {error.value}")
        return LendingResult.failed(error)
