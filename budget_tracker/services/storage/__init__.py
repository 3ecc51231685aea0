"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements day-partitioned JSON files as the backend, but designed
to be swappable.
"""

from budget_tracker.services.storage.interface import (
    AuditStorageInterface,
    CorruptPartitionError,
    DuplicateError,
    EntryStorageInterface,
    StorageError,
)
from budget_tracker.services.storage.audit_file import FileAuditStorage
from budget_tracker.services.storage.json_files import (
    JsonDayPartitionStore,
    parse_partition_day,
    partition_filename,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "EntryStorageInterface",
    # Exceptions
    "CorruptPartitionError",
    "DuplicateError",
    "StorageError",
    # File implementations
    "FileAuditStorage",
    "JsonDayPartitionStore",
    "parse_partition_day",
    "partition_filename",
]
