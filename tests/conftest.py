"""Shared fixtures: fixed UTC clock, recording mirror, app factory."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.domain.ports.mirror_port import ILedgerMirror

# 2026-10-14 is a Wednesday
WEDNESDAY = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)
DEALER_KEY = "s3cret"


class RecordingMirror(ILedgerMirror):
    def __init__(self) -> None:
        self.prepared = 0
        self.synced = 0

    def prepare(self) -> None:
        self.prepared += 1

    def sync(self) -> None:
        self.synced += 1


@pytest.fixture
def clock():
    return lambda: WEDNESDAY


@pytest.fixture
def mirror() -> RecordingMirror:
    return RecordingMirror()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def make_app(data_file, mirror, clock):
    """Build an app against a temp ledger file; keyword overrides go to create_app."""
    from src.infrastructure.config.settings import Settings
    from src.infrastructure.entrypoints.fastapi_app import create_app

    def _make(**overrides):
        settings = overrides.pop(
            "settings", Settings(dealer_key=DEALER_KEY, data_file=data_file)
        )
        overrides.setdefault("mirror", mirror)
        overrides.setdefault("clock", clock)
        return create_app(settings, **overrides)

    return _make
