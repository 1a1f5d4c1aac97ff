"""
Root pytest configuration.

Points the configuration at a throw-away directory BEFORE any project module
is imported, so the config service, the logger singleton and the default
repositories never touch the real databases.
"""
from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="transflow-tests-"))
os.environ["TRANSFLOW_DATABASE__MAIN"] = str(_TMP_ROOT / "translation.db")
os.environ["TRANSFLOW_DATABASE__LOGGING"] = str(_TMP_ROOT / "logs.db")


class FakeClock:
    """Settable UTC wall clock for lock age and handover timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "lifecycle.db"


@pytest.fixture
def lifecycle(db_path: Path, clock: FakeClock):
    from translationlifecycle.factory import build_lifecycle
    from translationlifecycle.logic.adapters.identity_provider import StaticIdentityProvider
    from translationlifecycle.tests.support import NAMES

    app = build_lifecycle(
        db_path,
        identity=StaticIdentityProvider(NAMES),
        clock=clock,
    )
    yield app
    app.close()
