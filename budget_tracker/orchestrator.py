"""
Application wiring for Budget Tracker

This module ties the components together:
settings -> store -> ledger service -> notifier -> audit logger

DESIGN DECISION: Settings are read ONCE, here. Every component
receives explicit paths at construction time instead of looking up
the current directory or the environment on its own.
"""

from typing import Optional

from budget_tracker.audit import AuditLogger
from budget_tracker.config import Settings
from budget_tracker.events import EntryAddedNotifier
from budget_tracker.services.ledger import LedgerService
from budget_tracker.services.storage import FileAuditStorage, JsonDayPartitionStore


def create_app_components(
    settings: Settings,
) -> tuple[LedgerService, Optional[AuditLogger]]:
    """
    Factory function to create all application components.

    Args:
        settings: Loaded settings; see budget_tracker.config.get_settings()

    Returns:
        (ledger_service, audit_logger) - audit_logger is None when
        auditing is disabled
    """
    storage_settings = settings.storage
    audit_settings = settings.audit

    store = JsonDayPartitionStore(
        data_dir=storage_settings.data_dir,
        json_indent=storage_settings.json_indent,
    )

    notifier = EntryAddedNotifier()
    audit_logger = None
    if audit_settings.enabled:
        audit_logger = AuditLogger(FileAuditStorage(audit_settings.log_path))
        notifier.subscribe(audit_logger.on_entry_added)

    ledger = LedgerService(store, notifier=notifier)

    return ledger, audit_logger
