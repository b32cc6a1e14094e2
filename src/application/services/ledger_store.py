"""
Application service: the in-memory ledger of stocks and its trade rules.

Business decisions owned here:
  - Default price for a new stock and the floors applied on every trade.
  - Which weekday bucket a trade lands in (UTC, from the injected clock).
  - Migration of older persisted shapes into the canonical array schema.

No persistence or transport concerns appear here; the store only tracks whether
it has unsaved changes through ``dirty``.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from src.domain.entities.stock import (
    MIN_PRICE,
    MIN_RECORD,
    Stock,
    day_key,
    empty_record,
)
from src.domain.exceptions import InvalidActionError, InvalidAmountError

logger = logging.getLogger(__name__)

GET = "get"
BUY = "buy"
SELL = "sell"
ACTIONS = frozenset({GET, BUY, SELL})

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_valid_name(name: Any) -> bool:
    return isinstance(name, str) and name != ""


def is_valid_action(action: Any) -> bool:
    # JSON bodies can carry lists or objects here, which are unhashable
    return isinstance(action, str) and action in ACTIONS


class LedgerStore:
    def __init__(
        self,
        stocks: Iterable[Stock] = (),
        clock: Optional[Clock] = None,
    ) -> None:
        self._stocks: dict[str, Stock] = {}
        self._clock = clock or utc_now
        self.dirty = False
        for stock in stocks:
            self._stocks.setdefault(stock.name, stock)

    @classmethod
    def from_document(cls, document: Any, clock: Optional[Clock] = None) -> "LedgerStore":
        """Build a store from a persisted document.

        Accepts the canonical array of ``{name, price, record}`` objects or the
        legacy ``{name: price}`` mapping. Entries without a non-empty string name are
        dropped; the first entry wins on duplicate names. Anything else yields
        an empty ledger.
        """
        stocks: list[Stock] = []
        if isinstance(document, list):
            for entry in document:
                if not isinstance(entry, dict) or not _is_valid_name(entry.get("name")):
                    logger.warning("[LEDGER] Dropping malformed entry: %r", entry)
                    continue
                stock = Stock(
                    name=entry["name"],
                    price=entry.get("price"),
                    record=entry.get("record"),
                )
                stock.repair()
                stocks.append(stock)
        elif isinstance(document, dict):
            logger.info("[LEDGER] Migrating legacy name->price ledger (%d stocks)", len(document))
            for name, price in document.items():
                if not _is_valid_name(name):
                    logger.warning("[LEDGER] Dropping legacy entry with empty name")
                    continue
                stock = Stock(name=name, price=price, record=empty_record())
                stock.repair()
                stocks.append(stock)
        elif document is not None:
            logger.warning("[LEDGER] Unsupported ledger shape %s; starting empty", type(document).__name__)
        return cls(stocks, clock=clock)

    def today(self) -> str:
        return day_key(self._clock())

    def get_or_create(self, name: str) -> Stock:
        """Return the stock called *name*, creating it with defaults if absent.

        Existing stocks are repaired on every access.
        """
        stock = self._stocks.get(name)
        if stock is None:
            stock = Stock(name=name)
            self._stocks[name] = stock
            self.dirty = True
            logger.debug("[LEDGER] Created %r", name)
        elif stock.repair():
            self.dirty = True
            logger.warning("[LEDGER] Repaired malformed fields on %r", name)
        return stock

    def apply_trade(self, name: str, action: str, amount: float) -> Stock:
        """Apply *action* to the stock called *name* and return it.

        Every write goes through the floors, so a negative buy can lower the
        price no further than MIN_PRICE and the day's record no further than
        MIN_RECORD.

        Raises:
            InvalidActionError: if *action* is not get, buy or sell.
            InvalidAmountError: if the result would not be a finite number;
                                the stock is left unchanged.
        """
        if not is_valid_action(action):
            raise InvalidActionError()

        stock = self.get_or_create(name)
        if action == GET:
            return stock

        today = self.today()
        delta = amount if action == BUY else -amount
        price = max(MIN_PRICE, stock.price + delta)
        recorded = max(MIN_RECORD, stock.record[today] + delta)
        if not (math.isfinite(price) and math.isfinite(recorded)):
            logger.warning("[LEDGER] Rejected %s %r amount=%s: result out of range", action, name, amount)
            raise InvalidAmountError()

        stock.price = price
        stock.record[today] = recorded
        self.dirty = True
        return stock

    def snapshot(self) -> list[dict]:
        """Full ledger in insertion order, detached from the live entities."""
        return [stock.to_dict() for stock in self._stocks.values()]

    def mark_clean(self) -> None:
        self.dirty = False

    def __len__(self) -> int:
        return len(self._stocks)

    def __contains__(self, name: object) -> bool:
        return name in self._stocks
