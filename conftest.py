from datetime import date, timedelta

import pytest

from config import Settings
from library_catalog.library import Library


class FakeClock:
    """Callable clock whose 'today' the test moves forward by hand."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def config():
    # explicit rules, independent of any local .env
    return Settings(
        max_borrow_limit=5,
        default_borrow_days=14,
        max_renewal_times=2,
        late_fee_cap=50.0,
        compound_rate=1.05,
    )


@pytest.fixture
def lib(config, clock):
    return Library(config=config, clock=clock)
