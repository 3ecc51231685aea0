"""
Change notification for added entries.

Observers are plain callables that receive the stored entry. They run
synchronously, in subscription order, after the entry is on disk.

DESIGN DECISION: An observer can never break an addition. Any exception
it raises is wrapped in NotificationError, logged, and dropped right here.
Failed notifications are not retried.
"""

from typing import Callable, Iterable, Optional

import structlog

from budget_tracker.models.entry import Entry


EntryObserver = Callable[[Entry], None]

logger = structlog.get_logger(__name__)


class NotificationError(Exception):
    """An observer failed while handling an added entry."""

    def __init__(self, observer: EntryObserver, entry: Entry, cause: Exception):
        self.observer = observer
        self.entry = entry
        self.cause = cause
        name = getattr(observer, "__qualname__", repr(observer))
        super().__init__(f"Observer {name} failed for entry {entry.id}: {cause}")


class EntryAddedNotifier:
    """Holds zero or more observers and fans added entries out to them."""

    def __init__(self, observers: Optional[Iterable[EntryObserver]] = None):
        self._observers: list[EntryObserver] = list(observers or [])

    def subscribe(self, observer: EntryObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: EntryObserver) -> None:
        """Remove an observer. Unknown observers are ignored."""
        try:
            self._observers.remove(observer)
        except ValueError:
            pass

    @property
    def observers(self) -> tuple[EntryObserver, ...]:
        return tuple(self._observers)

    def __len__(self) -> int:
        return len(self._observers)

    def notify(self, entry: Entry) -> list[NotificationError]:
        """
        Call every observer with the entry.

        Returns the failures, if any. Callers are free to ignore them;
        they have already been logged.
        """
        failures = []
        for observer in list(self._observers):
            try:
                observer(entry)
            except Exception as e:
                failure = NotificationError(observer, entry, e)
                logger.warning(
                    "entry_observer_failed",
                    entry_id=str(entry.id),
                    error=str(failure),
                )
                failures.append(failure)
        return failures
