from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

from config import settings
from library_catalog.models import ItemType

# Daily late fee per item type.
LATE_FEE_RATES: Dict[ItemType, float] = {
    ItemType.BOOK: 0.50,
    ItemType.DVD: 1.00,
    ItemType.MAGAZINE: 0.25,
}


@dataclass
class FeeAssessment:
    """Late fee breakdown for one overdue item."""
    days_late: int
    base: float
    compounded: float
    charged: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days_late": self.days_late,
            "base": self.base,
            "compounded": self.compounded,
            "charged": self.charged,
        }


def late_fee(item_type: ItemType, days_late: int) -> float:
    """Linear late fee for an item type; negative days count as zero."""
    return LATE_FEE_RATES[item_type] * max(days_late, 0)


def compound_late_fee(base: float, days: int, rate: float | None = None) -> float:
    """Grow ``base`` by ``rate`` once per day late.

    ``days <= 0`` returns ``base`` unchanged. A result too large for a float
    comes back as infinity, which any fee cap clamps.
    """
    rate = settings.compound_rate if rate is None else rate
    if days <= 0 or base == 0:
        return base
    try:
        return base * rate ** days
    except OverflowError:
        return math.copysign(math.inf, base)


def capped_fee(amount: float, cap: float | None = None) -> float:
    cap = settings.late_fee_cap if cap is None else cap
    return min(amount, cap)


def assess_late_fee(item, days_late: int, cap: float | None = None, rate: float | None = None) -> FeeAssessment:
    """Base, compounded and charged fee for ``item`` held ``days_late`` days past due."""
    base = item.calculate_late_fee(days_late)
    compounded = compound_late_fee(base, days_late, rate)
    return FeeAssessment(
        days_late=days_late,
        base=base,
        compounded=compounded,
        charged=capped_fee(compounded, cap),
    )
