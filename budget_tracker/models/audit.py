"""
Audit Models for Budget Tracker

Every entry added to the ledger produces one audit event.
This provides:
1. A chronological trail of what was recorded and when
2. Debugging information when a day's file looks wrong
3. A way to reconstruct history even after entries are removed

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from budget_tracker.models.entry import Entry, EntryKind


class AuditEventType(str, Enum):
    """Types of events we audit."""
    ENTRY_ADDED = "entry_added"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every successful addition creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event was logged (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )

    # The entry this event is about
    entry_id: UUID
    entry_date: date
    kind: EntryKind
    signed_amount: str = Field(
        ...,
        description="Amount with sign and two decimals, e.g. '+100.00'"
    )
    description: str = Field(
        ...,
        description="Entry description"
    )

    def to_log_dict(self) -> dict[str, Any]:
        """
        Convert to a dictionary suitable for structured logging
        and for the JSON-lines audit file.

        "line" carries the human-readable form from to_log_line().
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "entry_id": str(self.entry_id),
            "entry_date": self.entry_date.isoformat(),
            "kind": self.kind.value,
            "signed_amount": self.signed_amount,
            "description": self.description,
            "line": self.to_log_line(),
        }

    def to_log_line(self) -> str:
        """
        Human-readable one-liner.

        Format: [2025-01-01 09:30:00] Income | +100.00 | salary
        """
        return (
            f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] "
            f"{self.kind.value} | {self.signed_amount} | {self.description}"
        )


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added(entry)
    """

    @staticmethod
    def entry_added(entry: Entry) -> AuditEvent:
        sign = "+" if entry.kind == EntryKind.INCOME else "-"
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entry_id=entry.id,
            entry_date=entry.entry_date,
            kind=entry.kind,
            signed_amount=f"{sign}{entry.amount:.2f}",
            description=entry.description,
        )
