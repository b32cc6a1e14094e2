"""
Port (interface) for ledger persistence.
Infrastructure adapters (e.g. JsonFileLedgerRepository) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any


class ILedgerRepository(ABC):
    @abstractmethod
    def load(self) -> Any:
        """Return the raw persisted document, or an empty list if none is usable."""
        ...

    @abstractmethod
    def save(self, document: list[dict]) -> None:
        """Overwrite the persisted document synchronously.

        Raises:
            LedgerPersistenceError: if the write fails.
        """
        ...
