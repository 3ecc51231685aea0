"""
Report building.

DESIGN DECISION: Reports are computed DETERMINISTICALLY from the entries
a range query returns. Nothing is estimated or cached: every report is a
fresh pass over the stored data.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable

from budget_tracker.models.entry import Entry, EntryKind, LedgerReport


def build_report(entries: Iterable[Entry], start: date, end: date) -> LedgerReport:
    """
    Aggregate entries into income, expense and net totals.

    Consumes the iterable exactly once, so it can be fed straight
    from LedgerService.get_by_date_range().
    """
    collected = []
    total_income = Decimal("0")
    total_expense = Decimal("0")
    daily_net: dict[date, Decimal] = defaultdict(lambda: Decimal("0"))

    for entry in entries:
        collected.append(entry)
        if entry.kind == EntryKind.INCOME:
            total_income += entry.amount
        else:
            total_expense += entry.amount
        daily_net[entry.entry_date] += entry.signed_amount

    return LedgerReport(
        start=start,
        end=end,
        entries=collected,
        total_income=total_income,
        total_expense=total_expense,
        daily_net=dict(sorted(daily_net.items())),
    )


def format_date_range(start: date, end: date) -> str:
    """Format a report range for headings."""
    if start == end:
        return f"on {start.strftime('%d %b %Y')}"
    elif start.month == end.month and start.year == end.year:
        return f"from {start.strftime('%d')} to {end.strftime('%d %b %Y')}"
    elif start.year == end.year:
        return f"from {start.strftime('%d %b')} to {end.strftime('%d %b %Y')}"
    return f"from {start.strftime('%d %b %Y')} to {end.strftime('%d %b %Y')}"
