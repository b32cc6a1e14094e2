"""
Infrastructure adapter: single JSON file on local disk → ILedgerRepository.

Reads never fail the process: a missing, unreadable or malformed file is
reported as an empty ledger. Writes go through a temp file in the same
directory followed by os.replace, so readers never observe a partial document.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from src.domain.exceptions import LedgerPersistenceError
from src.domain.ports.ledger_repository_port import ILedgerRepository

logger = logging.getLogger(__name__)


class JsonFileLedgerRepository(ILedgerRepository):
    """Stores the whole ledger as one compact JSON document."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Any:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("[LEDGER] No ledger at %s; starting empty", self._path)
            return []
        except OSError as exc:
            logger.warning("[LEDGER] Could not read %s: %s; starting empty", self._path, exc)
            return []

        try:
            document = json.loads(raw)
        except ValueError as exc:
            logger.warning("[LEDGER] Malformed JSON in %s: %s; starting empty", self._path, exc)
            return []

        if not isinstance(document, (list, dict)):
            logger.warning(
                "[LEDGER] Unexpected top-level %s in %s; starting empty",
                type(document).__name__,
                self._path,
            )
            return []
        return document

    def save(self, document: list[dict]) -> None:
        try:
            payload = json.dumps(document, separators=(",", ":"), allow_nan=False)
        except ValueError as exc:
            logger.error("[LEDGER] Refusing to write non-finite values to %s: %s", self._path, exc)
            raise LedgerPersistenceError() from exc

        directory = self._path.parent
        tmp = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=directory, prefix=f"{self._path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self._path)
        except OSError as exc:
            logger.error("[LEDGER] Failed to write %s: %s", self._path, exc)
            if tmp and os.path.exists(tmp):
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
            raise LedgerPersistenceError() from exc
