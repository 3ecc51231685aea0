"""Entry validation package."""

from budget_tracker.validation.validator import EntryValidationError, EntryValidator

__all__ = ["EntryValidationError", "EntryValidator"]
