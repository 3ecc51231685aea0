"""Tests for the day-partitioned JSON store and the audit file storage."""

import json
import threading
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest
from pydantic import ValidationError

from budget_tracker.models.audit import AuditEventBuilder
from budget_tracker.models.entry import Entry, EntryKind, PartitionHandle
from budget_tracker.services.storage import (
    CorruptPartitionError,
    DuplicateError,
    FileAuditStorage,
    JsonDayPartitionStore,
    StorageError,
    parse_partition_day,
    partition_filename,
)


DAY = date(2025, 1, 1)


def make_entry(day=DAY, kind=EntryKind.EXPENSE, description="coffee", amount="30"):
    return Entry(
        entry_date=day,
        kind=kind,
        description=description,
        amount=Decimal(amount),
    )


class TestPartitionNames:
    """Tests for mapping days to file names and back."""

    def test_partition_filename(self):
        assert partition_filename(date(2025, 3, 7)) == "2025-03-07.json"

    def test_parse_partition_day(self):
        assert parse_partition_day(Path("2025-03-07.json")) == date(2025, 3, 7)

    @pytest.mark.parametrize("name", [
        "notes.json",
        "2025-13-01.json",
        "20250101.json",
        "2025-01-01.txt",
        "2025-01-01.json.tmp",
        ".2025-01-01-abc.tmp",
    ])
    def test_parse_partition_day_rejects(self, name):
        assert parse_partition_day(Path(name)) is None


class TestReadWriteDay:
    """Tests for whole-partition reads and writes."""

    def test_missing_partition_reads_empty(self, store):
        assert store.read_day(DAY) == []

    def test_empty_file_reads_empty(self, store, data_dir):
        data_dir.mkdir()
        (data_dir / "2025-01-01.json").write_text("  \n")
        assert store.read_day(DAY) == []

    def test_round_trip_preserves_entries(self, store):
        """Writing then reading yields the same entries in the same order."""
        entries = [
            Entry(
                timestamp=datetime(2025, 1, 1, 8, 0, 0, 654321, tzinfo=timezone.utc),
                entry_date=DAY,
                kind=EntryKind.INCOME,
                description="salary",
                amount=Decimal("1234.5678"),
            ),
            make_entry(description="coffee", amount="0.01"),
            make_entry(description="lunch", amount="12.50"),
        ]
        store.write_day(DAY, entries)

        loaded = store.read_day(DAY)
        assert loaded == entries
        assert [e.description for e in loaded] == ["salary", "coffee", "lunch"]
        assert loaded[0].amount == Decimal("1234.5678")
        assert loaded[0].timestamp.microsecond == 654321

    def test_write_creates_data_dir(self, store, data_dir):
        store.write_day(DAY, [make_entry()])
        assert (data_dir / "2025-01-01.json").is_file()

    def test_written_file_layout(self, store, data_dir):
        entry = Entry(
            timestamp=datetime(2025, 1, 1, 9, 30, 15, 123456, tzinfo=timezone.utc),
            entry_date=DAY,
            kind=EntryKind.INCOME,
            description="salary",
            amount=Decimal("30.00"),
        )
        store.write_day(DAY, [entry])

        (stored,) = json.loads((data_dir / "2025-01-01.json").read_text())
        assert set(stored) == {"id", "timestamp", "date", "kind", "description", "amount"}
        assert stored["id"] == str(entry.id)
        assert stored["date"] == "2025-01-01"
        assert stored["kind"] == "Income"
        assert stored["amount"] == "30.00"
        assert stored["timestamp"].startswith("2025-01-01T09:30:15.123456")

    def test_write_replaces_whole_partition(self, store):
        store.write_day(DAY, [make_entry(description="a"), make_entry(description="b")])
        replacement = [make_entry(description="c")]
        store.write_day(DAY, replacement)
        assert store.read_day(DAY) == replacement

    def test_no_temp_files_left_behind(self, store, data_dir):
        store.write_day(DAY, [make_entry()])
        assert [p.name for p in data_dir.iterdir()] == ["2025-01-01.json"]

    def test_corrupt_json_raises(self, store, data_dir):
        data_dir.mkdir()
        (data_dir / "2025-01-01.json").write_text("{not json")
        with pytest.raises(CorruptPartitionError):
            store.read_day(DAY)

    def test_wrong_shape_raises(self, store, data_dir):
        data_dir.mkdir()
        (data_dir / "2025-01-01.json").write_text(json.dumps([{"id": "nope"}]))
        with pytest.raises(CorruptPartitionError) as exc_info:
            store.read_day(DAY)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_corrupt_partition_is_a_storage_error(self):
        assert issubclass(CorruptPartitionError, StorageError)

    def test_unreadable_partition_raises(self, store, data_dir):
        # A directory where the file should be cannot be read
        (data_dir / "2025-01-01.json").mkdir(parents=True)
        with pytest.raises(StorageError) as exc_info:
            store.read_day(DAY)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonDayPartitionStore(blocker / "data")
        with pytest.raises(StorageError) as exc_info:
            store.write_day(DAY, [make_entry()])
        assert isinstance(exc_info.value.__cause__, OSError)


class TestAppendAndDelete:
    """Tests for read-modify-write operations."""

    def test_append_keeps_order(self, store):
        first = make_entry(description="first")
        second = make_entry(description="second")
        store.append_entry(first)
        store.append_entry(second)
        assert store.read_day(DAY) == [first, second]

    def test_append_uses_entry_date(self, store):
        entry = make_entry(day=date(2025, 2, 1))
        store.append_entry(entry)
        assert store.read_day(date(2025, 2, 1)) == [entry]
        assert store.read_day(DAY) == []

    def test_append_duplicate_id_raises(self, store):
        entry = make_entry()
        store.append_entry(entry)
        with pytest.raises(DuplicateError):
            store.append_entry(entry)
        assert store.read_day(DAY) == [entry]

    def test_append_id_stored_on_another_day_raises(self, store):
        entry = make_entry()
        store.append_entry(entry)
        moved = entry.model_copy(update={"entry_date": date(2025, 1, 2)})

        with pytest.raises(DuplicateError, match="2025-01-01"):
            store.append_entry(moved)
        assert store.read_day(date(2025, 1, 2)) == []

    def test_duplicate_check_covers_existing_files(self, store, data_dir):
        """Ids already on disk are known to a freshly opened store."""
        entry = make_entry()
        store.write_day(DAY, [entry])
        reopened = JsonDayPartitionStore(data_dir)

        with pytest.raises(DuplicateError):
            reopened.append_entry(entry.model_copy(update={"entry_date": date(2025, 3, 1)}))

    def test_removed_id_can_be_stored_again(self, store):
        entry = make_entry()
        store.append_entry(entry)
        assert store.delete_entry(entry.id, DAY) is True

        moved = entry.model_copy(update={"entry_date": date(2025, 1, 2)})
        store.append_entry(moved)
        assert store.read_day(date(2025, 1, 2)) == [moved]

    def test_rewritten_day_releases_ids(self, store):
        dropped = make_entry(description="dropped")
        store.append_entry(dropped)
        store.append_entry(make_entry(day=date(2025, 1, 2)))
        store.write_day(DAY, [make_entry(description="replacement")])

        moved = dropped.model_copy(update={"entry_date": date(2025, 1, 3)})
        store.append_entry(moved)
        assert store.read_day(date(2025, 1, 3)) == [moved]

    def test_delete_existing(self, store):
        keep = make_entry(description="keep")
        drop = make_entry(description="drop")
        store.append_entry(keep)
        store.append_entry(drop)

        assert store.delete_entry(drop.id, DAY) is True
        assert store.read_day(DAY) == [keep]

    def test_delete_unknown_returns_false(self, store, data_dir):
        store.append_entry(make_entry())
        before = (data_dir / "2025-01-01.json").read_bytes()

        assert store.delete_entry(uuid4(), DAY) is False
        assert (data_dir / "2025-01-01.json").read_bytes() == before

    def test_delete_wrong_day_returns_false(self, store):
        entry = make_entry()
        store.append_entry(entry)
        assert store.delete_entry(entry.id, date(2025, 1, 2)) is False
        assert store.read_day(DAY) == [entry]

    def test_delete_last_entry_removes_partition(self, store, data_dir):
        entry = make_entry()
        store.append_entry(entry)
        assert store.delete_entry(entry.id, DAY) is True
        assert not (data_dir / "2025-01-01.json").exists()
        assert store.read_day(DAY) == []

    def test_concurrent_appends_lose_nothing(self, store):
        """Threads appending to the same day are serialized by the partition lock."""
        workers, per_worker = 8, 10
        errors = []

        def worker():
            try:
                for _ in range(per_worker):
                    store.append_entry(make_entry())
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(store.read_day(DAY)) == workers * per_worker


class TestRangeScan:
    """Tests for listing partitions in a date range."""

    def _seed(self, store, days):
        for day in days:
            store.append_entry(make_entry(day=day))

    def test_missing_data_dir_lists_nothing(self, store):
        assert store.list_partitions_in_range(date(2000, 1, 1), date(2100, 1, 1)) == []

    def test_range_is_inclusive_and_sorted(self, store):
        self._seed(store, [date(2025, 1, 3), date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 4)])

        handles = store.list_partitions_in_range(date(2025, 1, 1), date(2025, 1, 3))
        assert [h.day for h in handles] == [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
        assert all(isinstance(h, PartitionHandle) for h in handles)

    def test_single_day_range(self, store):
        self._seed(store, [date(2025, 1, 1), date(2025, 1, 2)])
        handles = store.list_partitions_in_range(date(2025, 1, 2), date(2025, 1, 2))
        assert [h.day for h in handles] == [date(2025, 1, 2)]

    def test_inverted_range_is_empty(self, store):
        self._seed(store, [date(2025, 1, 1)])
        assert store.list_partitions_in_range(date(2025, 1, 2), date(2025, 1, 1)) == []

    def test_unparseable_names_are_skipped(self, store, data_dir):
        self._seed(store, [DAY])
        (data_dir / "notes.json").write_text("[]")
        (data_dir / "2025-1-1.json").write_text("garbage")
        (data_dir / "readme.txt").write_text("hello")

        handles = store.list_partitions_in_range(date(2000, 1, 1), date(2100, 1, 1))
        assert [h.path.name for h in handles] == ["2025-01-01.json"]

    def test_read_partition_resolves_handle(self, store):
        entry = make_entry()
        store.append_entry(entry)
        (handle,) = store.list_partitions_in_range(DAY, DAY)
        assert store.read_partition(handle) == [entry]


class TestFileAuditStorage:
    """Tests for the append-only audit log file."""

    def _event(self, description="salary"):
        entry = Entry(
            entry_date=DAY,
            kind=EntryKind.INCOME,
            description=description,
            amount=Decimal("100"),
        )
        return AuditEventBuilder.entry_added(entry)

    def test_append_creates_directory_and_file(self, tmp_path):
        storage = FileAuditStorage(tmp_path / "logs" / "transactions.log")
        storage.append_event(self._event())
        assert storage.log_path.is_file()

    def test_one_json_line_per_event(self, tmp_path):
        storage = FileAuditStorage(tmp_path / "transactions.log")
        storage.append_event(self._event("a"))
        storage.append_event(self._event("b"))

        lines = storage.log_path.read_text().splitlines()
        assert [json.loads(line)["description"] for line in lines] == ["a", "b"]

    def test_records_carry_readable_line(self, tmp_path):
        storage = FileAuditStorage(tmp_path / "transactions.log")
        event = self._event("salary")
        storage.append_event(event)

        record = json.loads(storage.log_path.read_text())
        assert record["line"] == event.to_log_line()
        assert record["line"].endswith("] Income | +100.00 | salary")

    def test_read_events_round_trip(self, tmp_path):
        storage = FileAuditStorage(tmp_path / "transactions.log")
        first, second = self._event("a"), self._event("b")
        storage.append_event(first)
        storage.append_event(second)
        assert storage.read_events() == [first, second]

    def test_read_events_limit_keeps_newest(self, tmp_path):
        storage = FileAuditStorage(tmp_path / "transactions.log")
        for name in "abc":
            storage.append_event(self._event(name))
        assert [e.description for e in storage.read_events(limit=2)] == ["b", "c"]

    def test_read_events_missing_log(self, tmp_path):
        assert FileAuditStorage(tmp_path / "none.log").read_events() == []

    def test_read_events_skips_malformed_lines(self, tmp_path):
        storage = FileAuditStorage(tmp_path / "transactions.log")
        storage.append_event(self._event("a"))
        with storage.log_path.open("a") as fh:
            fh.write("not json\n")
        assert [e.description for e in storage.read_events()] == ["a"]

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        storage = FileAuditStorage(blocker / "transactions.log")
        with pytest.raises(StorageError) as exc_info:
            storage.append_event(self._event())
        assert isinstance(exc_info.value.__cause__, OSError)
