"""
Use-case: read-only snapshot of the full ledger for the public listing.
"""

from src.application.services.ledger_store import LedgerStore


class ListStocksUseCase:
    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def execute(self) -> list[dict]:
        return self._store.snapshot()
