"""Services package."""

from budget_tracker.services.storage import (
    AuditStorageInterface,
    CorruptPartitionError,
    DuplicateError,
    EntryStorageInterface,
    FileAuditStorage,
    JsonDayPartitionStore,
    StorageError,
)
from budget_tracker.services.ledger import LedgerService

__all__ = [
    # Ledger
    "LedgerService",
    # Storage services
    "AuditStorageInterface",
    "CorruptPartitionError",
    "DuplicateError",
    "EntryStorageInterface",
    "FileAuditStorage",
    "JsonDayPartitionStore",
    "StorageError",
]
