"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON files for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally small - the ledger only ever needs
whole-day reads and writes plus a range scan over days.
"""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from budget_tracker.models.audit import AuditEvent
from budget_tracker.models.entry import Entry, PartitionHandle


class EntryStorageInterface(ABC):
    """
    Abstract interface for day-partitioned entry storage.

    Each calendar day is one partition holding an ordered list of
    entries. A day with no partition simply has no entries.
    """

    @abstractmethod
    def read_day(self, day: date) -> list[Entry]:
        """
        Load all entries for one day.

        Returns:
            Entries in storage order; empty if the day has no partition

        Raises:
            StorageError: If the partition cannot be read or is corrupt
        """
        pass

    @abstractmethod
    def write_day(self, day: date, entries: list[Entry]) -> None:
        """
        Replace the whole partition for one day.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def append_entry(self, entry: Entry) -> None:
        """
        Add one entry to the end of its day's partition.

        Raises:
            DuplicateError: If any day already holds an entry with this id
            StorageError: If the read or write fails
        """
        pass

    @abstractmethod
    def delete_entry(self, entry_id: UUID, day: date) -> bool:
        """
        Remove an entry from a day's partition.

        Returns:
            True if an entry was removed, False if none matched
        """
        pass

    @abstractmethod
    def list_partitions_in_range(
        self,
        start: date,
        end: date,
    ) -> list[PartitionHandle]:
        """
        Find the partitions whose day lies in [start, end], inclusive.

        Returns:
            Handles sorted by day
        """
        pass

    @abstractmethod
    def read_partition(self, handle: PartitionHandle) -> list[Entry]:
        """
        Resolve a handle from list_partitions_in_range() into entries.

        Raises:
            StorageError: If the partition cannot be read or is corrupt
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> None:
        """
        Append an audit event to the log.

        Raises:
            StorageError: If the log cannot be written
        """
        pass

    @abstractmethod
    def read_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            Events in the order they were logged (oldest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptPartitionError(StorageError):
    """A partition file exists but does not hold a valid entry list."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert an entry whose id is already stored."""
    pass
