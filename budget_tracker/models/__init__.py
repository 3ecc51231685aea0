"""
Data Models Package

This package contains all Pydantic models used in the Budget Tracker system.
All data flowing through the system must conform to these schemas.
"""

from budget_tracker.models.entry import (
    Entry,
    EntryKind,
    LedgerReport,
    PartitionHandle,
    ValidationIssue,
    ValidationResult,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
)

__all__ = [
    # Entry models
    "Entry",
    "EntryKind",
    "LedgerReport",
    "PartitionHandle",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
]
