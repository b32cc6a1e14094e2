"""
Port (interface) for best-effort replication of the persisted ledger.
Infrastructure adapters (e.g. GitBranchMirror) must implement this interface.
Implementations never raise: failures are logged and dropped.
"""

from abc import ABC, abstractmethod


class ILedgerMirror(ABC):
    @abstractmethod
    def prepare(self) -> None:
        """One-time setup at process start (e.g. check out the mirror branch)."""
        ...

    @abstractmethod
    def sync(self) -> None:
        """Replicate the current ledger file to the remote."""
        ...
