"""Shared fixtures: every test gets its own data and log directories."""

from datetime import datetime, timezone

import pytest

from budget_tracker.events import EntryAddedNotifier
from budget_tracker.services.ledger import LedgerService
from budget_tracker.services.storage import JsonDayPartitionStore


FIXED_NOW = datetime(2025, 1, 1, 9, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    return JsonDayPartitionStore(data_dir)


@pytest.fixture
def notifier():
    return EntryAddedNotifier()


@pytest.fixture
def ledger(store, notifier):
    return LedgerService(store, notifier=notifier, clock=lambda: FIXED_NOW)


@pytest.fixture
def snapshot():
    """Returns a function mapping file name -> bytes for every file in a directory."""
    return _snapshot


def _snapshot(directory):
    if not directory.exists():
        return {}
    return {path.name: path.read_bytes() for path in directory.iterdir() if path.is_file()}
