"""
Entry Validation

DESIGN DECISION: Validation happens exactly once, in the ledger service,
before any disk I/O. The storage layer trusts what it is given.

Every violated constraint is reported, not just the first one, so the
caller can show the user everything that needs fixing in one go.

IMPORTANT: Validation NEVER silently fixes issues.
"""

from decimal import Decimal

from budget_tracker.models.entry import (
    Entry,
    EntryKind,
    ValidationIssue,
    ValidationResult,
)


class EntryValidationError(Exception):
    """An entry violates one or more ledger invariants."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))


class EntryValidator:
    """
    Checks the invariants every stored entry must satisfy:
    - amount is a finite number greater than zero
    - description is not empty
    - kind is Income or Expense
    """

    def validate(self, entry: Entry) -> ValidationResult:
        issues = []

        amount = entry.amount
        if not isinstance(amount, Decimal) or not amount.is_finite():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a finite decimal number",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="non_positive",
                message="Amount must be greater than zero",
            ))

        description = entry.description
        if not isinstance(description, str) or not description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description cannot be empty",
            ))

        try:
            EntryKind(entry.kind)
        except ValueError:
            issues.append(ValidationIssue(
                field="kind",
                issue_type="unknown_value",
                message=f"Invalid entry kind: {entry.kind!r} (expected Income or Expense)",
            ))

        return ValidationResult(entry_id=entry.id, issues=issues)

    def ensure_valid(self, entry: Entry) -> None:
        """Raise EntryValidationError if the entry breaks any invariant."""
        result = self.validate(entry)
        if not result.is_valid:
            raise EntryValidationError(result.issues)
