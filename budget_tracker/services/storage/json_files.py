"""
Day-Partitioned JSON Storage Implementation

DESIGN DECISION: Entries are stored as one JSON file per calendar day
(e.g. data/2025-01-01.json) because:
1. Per-operation I/O stays bounded by the size of one day
2. Range queries become a directory scan instead of a full-log scan
3. Users can open and read a day's file directly
4. No database setup required

TRADEOFFS:
- Every append/delete rewrites the whole day (fine for personal use)
- No transactions across files
- No persisted index beyond the file name; ids are indexed in memory only
- Locking is in-process only; two processes writing the same day will race

The implementation follows the abstract interface, so we can swap
to SQLite later without changing business logic.
"""

import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator, Optional
from uuid import UUID

import structlog
from pydantic import TypeAdapter, ValidationError

from budget_tracker.models.entry import Entry, PartitionHandle
from budget_tracker.services.storage.interface import (
    CorruptPartitionError,
    DuplicateError,
    EntryStorageInterface,
    StorageError,
)


PARTITION_SUFFIX = ".json"

_ENTRY_LIST = TypeAdapter(list[Entry])

logger = structlog.get_logger(__name__)


def partition_filename(day: date) -> str:
    """File name for a day's partition, e.g. 2025-01-01.json."""
    return f"{day.isoformat()}{PARTITION_SUFFIX}"


def parse_partition_day(path: Path) -> Optional[date]:
    """
    Recover the day from a partition file name.

    Only the exact YYYY-MM-DD.json form is accepted; anything else
    returns None.
    """
    if path.suffix != PARTITION_SUFFIX:
        return None
    try:
        day = date.fromisoformat(path.stem)
    except ValueError:
        return None
    # fromisoformat also takes compact forms like 20250101
    if day.isoformat() != path.stem:
        return None
    return day


class JsonDayPartitionStore(EntryStorageInterface):
    """
    Stores each day's entries as a JSON array in its own file.

    Amounts are written as JSON strings so Decimal values survive
    the round trip exactly; timestamps keep microseconds and offset.
    """

    def __init__(self, data_dir: Path, json_indent: int = 2):
        self._data_dir = Path(data_dir)
        self._indent = json_indent or None
        self._locks: dict[date, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        # id -> day, built from disk on first use
        self._id_index: Optional[dict[UUID, date]] = None
        self._index_lock = threading.RLock()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, day: date) -> Path:
        return self._data_dir / partition_filename(day)

    @contextmanager
    def _partition_lock(self, day: date) -> Iterator[None]:
        """Serialize read-modify-write cycles on one day within this process."""
        with self._locks_guard:
            lock = self._locks.setdefault(day, threading.Lock())
        with lock:
            yield

    def _load(self, path: Path) -> list[Entry]:
        """Read and parse one partition file."""
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Failed to read partition {path.name}: {e}") from e

        if not raw.strip():
            return []

        try:
            return _ENTRY_LIST.validate_json(raw)
        except ValidationError as e:
            raise CorruptPartitionError(
                f"Partition {path.name} is malformed: {e.error_count()} error(s), "
                f"first: {e.errors()[0]['msg']}"
            ) from e

    def _index(self) -> dict[UUID, date]:
        """
        Map of every stored id to its day.

        Built by scanning all partitions the first time an id has to be
        checked, then kept current by this store's own writes. Files
        changed behind the store's back are not picked up.
        """
        with self._index_lock:
            if self._id_index is None:
                index = {}
                for handle in self._scan_partitions(date.min, date.max):
                    for entry in self._load(handle.path):
                        index[entry.id] = handle.day
                self._id_index = index
                logger.debug("id_index_built", size=len(index))
            return self._id_index

    def _reindex_day(self, day: date, entries: list[Entry]) -> None:
        with self._index_lock:
            if self._id_index is None:
                return
            stale = [entry_id for entry_id, d in self._id_index.items() if d == day]
            for entry_id in stale:
                del self._id_index[entry_id]
            for entry in entries:
                self._id_index[entry.id] = day

    def read_day(self, day: date) -> list[Entry]:
        return self._load(self._path_for(day))

    def write_day(self, day: date, entries: list[Entry]) -> None:
        path = self._path_for(day)
        payload = _ENTRY_LIST.dump_json(
            list(entries),
            indent=self._indent,
            by_alias=True,
        )

        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            # Write next to the target, then move into place
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.stem}-",
                suffix=".tmp",
                dir=self._data_dir,
            )
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write partition {path.name}: {e}") from e

        self._reindex_day(day, entries)

    def append_entry(self, entry: Entry) -> None:
        day = entry.entry_date
        with self._partition_lock(day), self._index_lock:
            entries = self.read_day(day)
            stored_on = self._index().get(entry.id)
            if stored_on is None and any(existing.id == entry.id for existing in entries):
                stored_on = day
            if stored_on is not None:
                raise DuplicateError(f"Entry {entry.id} is already stored for {stored_on}")
            entries.append(entry)
            self.write_day(day, entries)

        logger.debug(
            "entry_appended",
            entry_id=str(entry.id),
            day=day.isoformat(),
            partition_size=len(entries),
        )

    def delete_entry(self, entry_id: UUID, day: date) -> bool:
        with self._partition_lock(day):
            entries = self.read_day(day)
            remaining = [entry for entry in entries if entry.id != entry_id]

            if len(remaining) == len(entries):
                return False

            if remaining:
                self.write_day(day, remaining)
            else:
                # Last entry gone: the day no longer exists
                self._remove_partition(day)

        logger.debug(
            "entry_deleted",
            entry_id=str(entry_id),
            day=day.isoformat(),
            partition_size=len(remaining),
        )
        return True

    def _remove_partition(self, day: date) -> None:
        path = self._path_for(day)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove partition {path.name}: {e}") from e
        self._reindex_day(day, [])

    def list_partitions_in_range(
        self,
        start: date,
        end: date,
    ) -> list[PartitionHandle]:
        return self._scan_partitions(start, end)

    def _scan_partitions(self, start: date, end: date) -> list[PartitionHandle]:
        if not self._data_dir.is_dir():
            return []

        handles = []
        for path in self._data_dir.glob(f"*{PARTITION_SUFFIX}"):
            day = parse_partition_day(path)
            if day is None:
                logger.debug("partition_skipped", file=path.name)
                continue
            if start <= day <= end and path.is_file():
                handles.append(PartitionHandle(day=day, path=path))

        handles.sort(key=lambda handle: handle.day)
        return handles

    def read_partition(self, handle: PartitionHandle) -> list[Entry]:
        return self._load(handle.path)
