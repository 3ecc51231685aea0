"""
File-backed audit log storage.

One JSON object per line, appended. Nothing is ever rewritten.
The log directory is created on the first write, so a missing or
unwritable location only surfaces when an event is actually logged.
"""

import json
from collections import deque
from pathlib import Path

from pydantic import ValidationError

from budget_tracker.models.audit import AuditEvent
from budget_tracker.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)


class FileAuditStorage(AuditStorageInterface):
    """Append-only JSON-lines audit log."""

    def __init__(self, log_path: Path):
        self._log_path = Path(log_path)

    @property
    def log_path(self) -> Path:
        return self._log_path

    def append_event(self, event: AuditEvent) -> None:
        line = json.dumps(event.to_log_dict(), ensure_ascii=False)
        try:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as e:
            raise StorageError(f"Failed to write audit event to {self._log_path}: {e}") from e

    def read_events(self, limit: int = 100) -> list[AuditEvent]:
        try:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = deque((line for line in fh if line.strip()), maxlen=limit)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Failed to read audit log {self._log_path}: {e}") from e

        events = []
        for line in lines:
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError:
                continue  # Skip malformed lines
        return events
