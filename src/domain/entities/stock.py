"""
Domain entity for a tradable stock and its weekly activity record.
Zero external dependencies: pure Python dataclass and helpers only.

Weekday keys follow the UTC calendar, Sunday first, so the index of a key in
DAY_KEYS matches ``datetime.isoweekday() % 7``.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

DAY_KEYS: tuple[str, ...] = ("SUN", "MON", "TUES", "WED", "THURS", "FRI", "SAT")

DEFAULT_PRICE: float = 100.0
MIN_PRICE: float = 0.01
MIN_RECORD: float = 0.0


def is_number(value: Any) -> bool:
    """True for finite ints/floats. bool is an int subclass and is excluded."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def day_key(moment: datetime) -> str:
    """Map an aware UTC datetime to its weekday key."""
    return DAY_KEYS[moment.isoweekday() % 7]


def empty_record() -> dict[str, float]:
    return {key: 0 for key in DAY_KEYS}


@dataclass
class Stock:
    name: str
    price: float = DEFAULT_PRICE
    record: dict[str, float] = field(default_factory=empty_record)

    def repair(self) -> bool:
        """Restore the price and record invariants in place.

        Non-numeric fields reset to their defaults; numbers below the floors
        are raised to MIN_PRICE and MIN_RECORD.

        Returns:
            True if any field had to be reset.
        """
        changed = False
        if not is_number(self.price):
            self.price = DEFAULT_PRICE
            changed = True
        elif self.price < MIN_PRICE:
            self.price = MIN_PRICE
            changed = True

        record = self.record if isinstance(self.record, dict) else {}
        repaired = {
            key: max(MIN_RECORD, record[key]) if is_number(record.get(key)) else 0
            for key in DAY_KEYS
        }
        if repaired != record:
            changed = True
        self.record = repaired
        return changed

    def to_dict(self) -> dict:
        return {"name": self.name, "price": self.price, "record": dict(self.record)}
