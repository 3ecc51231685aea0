"""Entry change notification package."""

from budget_tracker.events.notifier import (
    EntryAddedNotifier,
    EntryObserver,
    NotificationError,
)

__all__ = ["EntryAddedNotifier", "EntryObserver", "NotificationError"]
