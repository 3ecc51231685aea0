"""
Core Data Models for Budget Tracker

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Round-trip losslessly through the JSON partition files
3. Be serializable for storage and logging

DESIGN DECISION: The Entry model only enforces TYPES. The business
invariants (positive amount, non-empty description, known kind) are
checked once, by the ledger's validator, so a rejected entry can be
reported with every violated constraint instead of the first one.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """
    The two kinds of ledger entry.

    Amounts are always positive; the kind decides whether an entry
    adds to or subtracts from the balance.
    """
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value: str) -> "EntryKind":
        """Case-insensitive lookup, e.g. "income" -> EntryKind.INCOME."""
        normalized = value.strip().lower()
        for kind in cls:
            if kind.value.lower() == normalized:
                return kind
        raise ValueError(f"Unknown entry kind: {value!r}")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class Entry(BaseModel):
    """
    One income or expense record.

    Entries are immutable once created. Removal is the only way
    to change what the ledger holds.

    The calendar date is the partition key. It is stored under the
    JSON key "date" and exposed as ``entry_date`` in Python.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique entry identifier"
    )

    # Timestamps
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="When the entry was created (audit only)"
    )
    entry_date: date = Field(
        default_factory=date.today,
        alias="date",
        description="Calendar day the entry belongs to"
    )

    kind: EntryKind = Field(
        ...,
        description="Income or Expense"
    )
    description: str = Field(
        ...,
        description="What the entry is for"
    )
    amount: Decimal = Field(
        ...,
        description="Positive amount; the sign comes from the kind"
    )

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign applied: negative for expenses."""
        if self.kind == EntryKind.EXPENSE:
            return -self.amount
        return self.amount


# =============================================================================
# STORAGE MODELS
# =============================================================================

class PartitionHandle(BaseModel):
    """
    Reference to one day's partition file.

    Returned by range scans and resolved back into entries
    by the store's read_partition().
    """
    model_config = ConfigDict(frozen=True)

    day: date
    path: Path


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single violated constraint."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'non_positive', 'unknown_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Result of validating one entry."""

    entry_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entry being validated"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All violated constraints"
    )

    @property
    def is_valid(self) -> bool:
        return not self.issues


# =============================================================================
# REPORT MODELS
# =============================================================================

class LedgerReport(BaseModel):
    """
    Summary of all entries in a date range.

    Totals are exact Decimal sums; nothing is rounded here.
    Rounding for display is the frontend's job.
    """

    start: date
    end: date
    generated_at: datetime = Field(
        default_factory=_utc_now
    )

    entries: list[Entry] = Field(
        default_factory=list,
        description="Entries in the range, partition by partition"
    )
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    daily_net: dict[date, Decimal] = Field(
        default_factory=dict,
        description="Net amount per day, in date order"
    )

    @property
    def net_balance(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries
