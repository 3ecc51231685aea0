"""
Audit Logger

DESIGN DECISION: Every entry added to the ledger is logged.
This provides:
1. Complete traceability of what was recorded
2. Debugging capability when a day's file looks wrong
3. History that survives removal of the entry itself

The audit logger is an observer of the ledger service. It runs after
the entry is already on disk, and whatever goes wrong in here is
caught by the notifier - a broken log never breaks an addition.
"""

import logging
import sys
from typing import Optional

import structlog

from budget_tracker.models.audit import AuditEvent, AuditEventBuilder
from budget_tracker.models.entry import Entry
from budget_tracker.services.storage import AuditStorageInterface


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure structlog for local JSON logging on stderr.

    Call once at application start-up.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit log file (for persistence)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> None:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.
        Storage errors propagate to the caller.
        """
        self._logger.info("audit_event", **event.to_log_dict())

        if self._storage:
            self._storage.append_event(event)

    def on_entry_added(self, entry: Entry) -> None:
        """Observer hook for the ledger's entry-added notifier."""
        self.log(AuditEventBuilder.entry_added(entry))
