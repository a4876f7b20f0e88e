import pytest
from datetime import date, timedelta

from library_catalog.items import Book, DVD, Magazine
from library_catalog.member import Member
from library_catalog.models import LendingError, TransactionType

# Fixture with a small catalog and two members
@pytest.fixture
def stocked(lib):
    lib.add_item(Book("B1", "The Kotlin Guide", "Kashif", "9781234567890", 300), "Non-Fiction")
    lib.add_item(DVD("D1", "Kotlin Tutorial", "Ahmed Ali", 120, "Educational"), "Reference")
    lib.add_item(Magazine("MG1", "Tech Monthly", 42, "TechPress"), "Periodicals")
    lib.register_member(Member("M1", "Alice Johnson", "alice@email.com"))
    lib.register_member(Member("M2", "Bob Lee", "bob.lee@email.com"))
    return lib

def _add_books(lib, count):
    for i in range(count):
        lib.add_item(Book(f"X{i}", f"Extra {i}", "Someone", "1234567890", 100), "Fiction")

def test_add_and_get_item(lib):
    book = Book("B1", "Ulysses", "James Joyce", "9780199535675", 730)
    lib.add_item(book, "Fiction")

    assert lib.get_item("B1") is book
    assert lib.get_item("nope") is None
    assert lib.items_in_category("Fiction") == [book]
    assert lib.items_in_category("Unknown") == []

def test_add_item_reused_id_overwrites(lib):
    lib.add_item(Book("B1", "First", "A", "1234567890", 10), "Fiction")
    second = Book("B1", "Second", "B", "1234567890", 20)
    lib.add_item(second, "Reference")

    assert lib.get_item("B1") is second
    assert len(lib.list_items()) == 1

def test_register_and_get_member(lib):
    alice = Member("M1", "Alice", "alice@email.com")
    lib.register_member(alice)
    assert lib.get_member("M1") is alice
    assert lib.get_member("M9") is None

def test_borrow_marks_item_unavailable(stocked, clock):
    result = stocked.borrow_item("M1", "B1")

    assert result
    assert result.success is True
    assert stocked.get_item("B1").is_available is False
    assert stocked.member_borrowed_ids("M1") == ["B1"]
    assert [item.item_id for item in stocked.get_member("M1").borrowed_items] == ["B1"]
    assert stocked.due_date_for("B1") == clock.today + timedelta(days=14)
    assert result.due_date == stocked.due_date_for("B1")
    assert stocked.renewal_count("B1") == 0

def test_borrow_unknown_member_or_item(stocked):
    result = stocked.borrow_item("nobody", "B1")
    assert not result
    assert result.error is LendingError.MEMBER_NOT_FOUND

    result = stocked.borrow_item("M1", "missing")
    assert not result
    assert result.error is LendingError.ITEM_NOT_FOUND

def test_borrow_unavailable_item(stocked):
    assert stocked.borrow_item("M1", "B1")
    result = stocked.borrow_item("M2", "B1")

    assert not result
    assert result.error is LendingError.ITEM_UNAVAILABLE
    assert stocked.member_borrowed_ids("M2") == []

def test_borrow_limit(stocked):
    _add_books(stocked, 6)
    for i in range(5):
        assert stocked.borrow_item("M1", f"X{i}")

    result = stocked.borrow_item("M1", "X5")
    assert not result
    assert result.error is LendingError.BORROW_LIMIT_REACHED
    assert stocked.get_item("X5").is_available is True
    assert len(stocked.member_borrowed_ids("M1")) == 5

def test_return_restores_availability(stocked, clock):
    stocked.borrow_item("M1", "B1")
    clock.advance(14)
    result = stocked.return_item("M1", "B1")

    assert result.as_tuple() == (True, 0.0)
    assert result.days_late == 0
    assert stocked.get_item("B1").is_available is True
    assert stocked.member_borrowed_ids("M1") == []
    assert stocked.get_member("M1").borrowed_items == []
    assert stocked.due_date_for("B1") is None
    assert stocked.renewal_count("B1") == 0

def test_return_three_days_late_book(stocked, clock):
    assert stocked.borrow_item("M1", "B1")
    assert stocked.get_item("B1").is_available is False

    clock.advance(14 + 3)
    result = stocked.return_item("M1", "B1")

    assert result.success is True
    assert result.days_late == 3
    assert result.fee == pytest.approx(1.50)

@pytest.mark.parametrize("item_id, days, expected", [
    ("D1", 10, 10.0),
    ("MG1", 8, 2.0),
    ("D1", 80, 50.0),
])
def test_return_fee_per_type_is_capped(stocked, clock, item_id, days, expected):
    stocked.borrow_item("M1", item_id)
    clock.advance(14 + days)
    ok, fee = stocked.return_item("M1", item_id).as_tuple()
    assert ok is True
    assert fee == pytest.approx(expected)

def test_return_early_has_no_fee(stocked, clock):
    stocked.borrow_item("M1", "D1")
    clock.advance(3)
    assert stocked.return_item("M1", "D1").as_tuple() == (True, 0.0)

def test_return_failures(stocked):
    stocked.borrow_item("M1", "B1")

    assert stocked.return_item("nobody", "B1").error is LendingError.MEMBER_NOT_FOUND
    assert stocked.return_item("M1", "missing").error is LendingError.ITEM_NOT_FOUND
    result = stocked.return_item("M2", "B1")
    assert result.as_tuple() == (False, 0.0)
    assert result.error is LendingError.NOT_BORROWED_BY_MEMBER
    # still on loan to M1
    assert stocked.get_item("B1").is_available is False

def test_returned_item_can_be_borrowed_again(stocked):
    stocked.borrow_item("M1", "B1")
    stocked.return_item("M1", "B1")
    assert stocked.borrow_item("M2", "B1")
    assert stocked.member_borrowed_ids("M2") == ["B1"]

def test_renew_extends_due_date(stocked):
    stocked.borrow_item("M1", "B1")
    first_due = stocked.due_date_for("B1")

    result = stocked.renew_item("M1", "B1")
    assert result
    assert stocked.due_date_for("B1") == first_due + timedelta(days=14)
    assert result.due_date == stocked.due_date_for("B1")
    assert stocked.renewal_count("B1") == 1

def test_renew_limit_leaves_state_unchanged(stocked):
    stocked.borrow_item("M1", "B1")
    assert stocked.renew_item("M1", "B1")
    assert stocked.renew_item("M1", "B1")
    due = stocked.due_date_for("B1")

    result = stocked.renew_item("M1", "B1")
    assert not result
    assert result.error is LendingError.RENEWAL_LIMIT_REACHED
    assert stocked.due_date_for("B1") == due
    assert stocked.renewal_count("B1") == 2

def test_renew_failures(stocked):
    result = stocked.renew_item("M1", "B1")
    assert result.error is LendingError.ITEM_NOT_BORROWED

    stocked.borrow_item("M1", "B1")
    assert stocked.renew_item("M2", "B1").error is LendingError.NOT_BORROWED_BY_MEMBER
    assert stocked.renew_item("nobody", "B1").error is LendingError.MEMBER_NOT_FOUND
    assert stocked.renew_item("M1", "missing").error is LendingError.ITEM_NOT_FOUND
    assert stocked.renewal_count("B1") == 0

def test_renewal_count_resets_after_return(stocked):
    stocked.borrow_item("M1", "B1")
    stocked.renew_item("M1", "B1")
    stocked.renew_item("M1", "B1")
    stocked.return_item("M1", "B1")

    stocked.borrow_item("M2", "B1")
    assert stocked.renewal_count("B1") == 0
    assert stocked.renew_item("M2", "B1")

def test_late_fee_after_renewal_uses_new_due_date(stocked, clock):
    stocked.borrow_item("M1", "B1")
    stocked.renew_item("M1", "B1")
    clock.advance(28 + 2)
    assert stocked.return_item("M1", "B1").as_tuple() == (True, 1.0)

def test_availability_matches_holdings(stocked):
    stocked.borrow_item("M1", "B1")
    stocked.borrow_item("M2", "D1")
    stocked.return_item("M2", "D1")
    stocked.borrow_item("M2", "MG1")

    held = set(stocked.member_borrowed_ids("M1")) | set(stocked.member_borrowed_ids("M2"))
    for item in stocked.list_items():
        assert item.is_available == (item.item_id not in held)

def test_transactions_are_logged(stocked, clock):
    stocked.borrow_item("M1", "B1")
    stocked.renew_item("M1", "B1")
    stocked.return_item("M1", "B1")
    stocked.borrow_item("M2", "missing")

    log = stocked.all_transactions()
    assert [tr.type for tr in log] == [TransactionType.BORROW, TransactionType.RENEW, TransactionType.RETURN]
    assert log[0].due_date == clock.today + timedelta(days=14)
    assert log[1].due_date == clock.today + timedelta(days=28)
    assert log[2].due_date is None
    assert all(tr.date == clock.today for tr in log)

def test_process_overdue_items(stocked, clock):
    stocked.borrow_item("M1", "B1")
    clock.advance(5)
    stocked.borrow_item("M2", "D1")
    clock.advance(14)  # B1 is 5 days late, D1 is due today

    seen = []
    count = stocked.process_overdue_items(lambda item, member, days: seen.append((item.item_id, member.member_id, days)))

    assert count == 1
    assert seen == [("B1", "M1", 5)]
    # scan does not mutate the ledger
    assert stocked.get_item("B1").is_available is False
    assert stocked.due_date_for("B1") == date(2024, 3, 15)

def test_process_overdue_items_nothing_due(stocked):
    stocked.borrow_item("M1", "B1")
    calls = []
    assert stocked.process_overdue_items(lambda *args: calls.append(args)) == 0
    assert calls == []

def test_custom_config_limits(clock):
    from config import Settings
    from library_catalog.library import Library

    lib = Library(config=Settings(max_borrow_limit=1, default_borrow_days=7, max_renewal_times=0), clock=clock)
    lib.add_item(Book("B1", "One", "A", "1234567890", 10), "Fiction")
    lib.add_item(Book("B2", "Two", "A", "1234567890", 10), "Fiction")
    lib.register_member(Member("M1", "Alice", "alice@email.com"))

    assert lib.borrow_item("M1", "B1").due_date == clock.today + timedelta(days=7)
    assert lib.borrow_item("M1", "B2").error is LendingError.BORROW_LIMIT_REACHED
    assert lib.renew_item("M1", "B1").error is LendingError.RENEWAL_LIMIT_REACHED

def test_replacing_item_on_loan_keeps_it_unavailable(stocked):
    stocked.borrow_item("M1", "B1")
    stocked.add_item(Book("B1", "The Kotlin Guide, 2nd ed.", "Kashif", "9781234567890", 320), "Non-Fiction")

    assert stocked.get_item("B1").is_available is False
    result = stocked.borrow_item("M2", "B1")
    assert result.error is LendingError.ITEM_UNAVAILABLE
    assert stocked.member_borrowed_ids("M2") == []

    assert stocked.return_item("M1", "B1")
    assert stocked.get_item("B1").is_available is True
    assert stocked.get_member("M1").borrowed_items == []

def test_replacing_item_not_on_loan_stays_available(stocked):
    stocked.borrow_item("M1", "B1")
    stocked.return_item("M1", "B1")
    stocked.add_item(Book("B1", "Reprint", "Kashif", "9781234567890", 300), "Non-Fiction")
    assert stocked.get_item("B1").is_available is True
