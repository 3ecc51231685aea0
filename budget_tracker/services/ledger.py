"""
Ledger Service

The business-logic layer between the frontend and the day-partitioned
store. It never touches files itself.

Order of operations for an addition:
1. Validate - fail fast, before any I/O
2. Persist - storage errors propagate unmodified
3. Notify - synchronous, but observer failures are swallowed

Range queries are lazy: partitions are read one at a time as the
caller iterates, and the result can only be consumed once.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterator, Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from budget_tracker.events import EntryAddedNotifier
from budget_tracker.models.entry import Entry, EntryKind, LedgerReport, ValidationIssue
from budget_tracker.reports import build_report
from budget_tracker.services.storage import EntryStorageInterface
from budget_tracker.validation import EntryValidationError, EntryValidator


def _local_now() -> datetime:
    return datetime.now().astimezone()


class LedgerService:
    """
    Adds, removes and queries ledger entries.

    Not safe for use by several processes at once: the store's
    locking only covers threads within one process.
    """

    def __init__(
        self,
        storage: EntryStorageInterface,
        notifier: Optional[EntryAddedNotifier] = None,
        validator: Optional[EntryValidator] = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        self._storage = storage
        self._notifier = notifier or EntryAddedNotifier()
        self._validator = validator or EntryValidator()
        self._clock = clock
        self._logger = structlog.get_logger(__name__)

    @property
    def notifier(self) -> EntryAddedNotifier:
        return self._notifier

    def add(self, entry: Entry) -> Entry:
        """
        Validate and store an entry, then notify observers.

        Raises:
            EntryValidationError: If the entry breaks an invariant.
                Nothing is written in that case.
            StorageError: If the partition cannot be read or written.
        """
        self._validator.ensure_valid(entry)

        self._storage.append_entry(entry)
        self._logger.info(
            "entry_added",
            entry_id=str(entry.id),
            day=entry.entry_date.isoformat(),
            kind=EntryKind(entry.kind).value,
        )

        self._notifier.notify(entry)
        return entry

    def record(
        self,
        kind: Union[EntryKind, str],
        description: str,
        amount: Decimal,
        entry_date: Optional[date] = None,
    ) -> Entry:
        """
        Create a new entry stamped with the current time and add it.

        The entry goes into today's partition unless entry_date is given.
        """
        if not isinstance(kind, EntryKind):
            try:
                kind = EntryKind.parse(kind)
            except ValueError as e:
                raise EntryValidationError([ValidationIssue(
                    field="kind",
                    issue_type="unknown_value",
                    message=str(e),
                )]) from e

        now = self._clock()
        try:
            entry = Entry(
                timestamp=now,
                entry_date=entry_date or now.date(),
                kind=kind,
                description=description,
                amount=amount,
            )
        except ValidationError as e:
            raise EntryValidationError([
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]),
                    issue_type="invalid_value",
                    message=f"Invalid {error['loc'][0]}: {error['msg']}",
                )
                for error in e.errors()
            ]) from e
        return self.add(entry)

    def remove(self, entry_id: UUID, day: date) -> bool:
        """
        Remove an entry by id from the given day.

        Returns False when no such entry exists; that is not an error.
        """
        removed = self._storage.delete_entry(entry_id, day)
        self._logger.info(
            "entry_removed" if removed else "entry_not_found",
            entry_id=str(entry_id),
            day=day.isoformat(),
        )
        return removed

    def get_by_date_range(self, start: date, end: date) -> Iterator[Entry]:
        """
        Yield every entry dated within [start, end].

        The caller is responsible for start <= end; an inverted range
        simply yields nothing. Nothing is read until iteration starts.
        """
        for handle in self._storage.list_partitions_in_range(start, end):
            yield from self._storage.read_partition(handle)

    def summarize(self, start: date, end: date) -> LedgerReport:
        """Run one range query and aggregate it into a report."""
        report = build_report(self.get_by_date_range(start, end), start, end)
        self._logger.info(
            "report_generated",
            start=start.isoformat(),
            end=end.isoformat(),
            entry_count=report.entry_count,
        )
        return report
