"""
Use-case: apply a get/buy/sell action to a stock and persist the ledger.
Depends only on Domain ports and entities plus the LedgerStore service.

Mirroring is not triggered here. The result reports whether the ledger was
written so the entry point can schedule replication after responding.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from src.application.services.ledger_store import GET, LedgerStore, is_valid_action
from src.domain.entities.stock import Stock, is_number
from src.domain.exceptions import InvalidActionError, InvalidStockNameError
from src.domain.ports.ledger_repository_port import ILedgerRepository

logger = logging.getLogger(__name__)

# Longest leading decimal literal, the way lenient float parsers read "25abc".
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> float:
    """Coerce a caller-supplied amount to a float, falling back to 0."""
    if is_number(value):
        return float(value)
    if not isinstance(value, str):
        return 0.0
    match = _LEADING_FLOAT.match(value.strip())
    if not match:
        return 0.0
    amount = float(match.group(0))
    return amount if math.isfinite(amount) else 0.0


@dataclass(frozen=True)
class TradeResult:
    stock: dict
    persisted: bool


class ExecuteTradeUseCase:
    def __init__(self, store: LedgerStore, repository: ILedgerRepository) -> None:
        self._store = store
        self._repository = repository

    def execute(self, action: Any, name: Any, raw_amount: Any = None) -> TradeResult:
        """Run one trade request.

        Args:
            action:     "get", "buy" or "sell".
            name:       Stock name; must be a non-empty string (case-sensitive).
            raw_amount: Amount as sent by the caller; unparseable values count as 0.

        Raises:
            InvalidStockNameError: if *name* is missing or not a string.
            InvalidActionError:    if *action* is not recognised.
            LedgerPersistenceError: propagated from the repository on write failure.
        """
        if not name or not isinstance(name, str):
            raise InvalidStockNameError()
        if not is_valid_action(action):
            raise InvalidActionError()

        amount = parse_amount(raw_amount)
        stock: Stock = self._store.apply_trade(name, action, amount)

        persisted = False
        if action != GET or self._store.dirty:
            self._repository.save(self._store.snapshot())
            self._store.mark_clean()
            persisted = True
            logger.info(
                "[LEDGER] %s %s amount=%s -> price=%s", action, name, amount, stock.price
            )
        return TradeResult(stock=stock.to_dict(), persisted=persisted)
