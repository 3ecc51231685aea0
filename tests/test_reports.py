"""Tests for report aggregation and range headings."""

from datetime import date
from decimal import Decimal

from budget_tracker.models.entry import Entry, EntryKind
from budget_tracker.reports import build_report, format_date_range


START = date(2025, 1, 1)
END = date(2025, 1, 31)


def entry(kind, amount, day=START):
    return Entry(entry_date=day, kind=kind, description="item", amount=Decimal(amount))


class TestBuildReport:
    """Tests for build_report."""

    def test_empty(self):
        report = build_report([], START, END)
        assert report.is_empty
        assert report.total_income == Decimal("0")
        assert report.total_expense == Decimal("0")
        assert report.daily_net == {}
        assert (report.start, report.end) == (START, END)

    def test_totals(self):
        entries = [
            entry(EntryKind.INCOME, "100"),
            entry(EntryKind.EXPENSE, "30"),
            entry(EntryKind.EXPENSE, "20", day=date(2025, 1, 2)),
        ]
        report = build_report(entries, START, END)

        assert report.total_income == Decimal("100")
        assert report.total_expense == Decimal("50")
        assert report.net_balance == Decimal("50")
        assert report.entries == entries

    def test_decimal_sums_are_exact(self):
        entries = [entry(EntryKind.EXPENSE, "0.1") for _ in range(3)]
        report = build_report(entries, START, END)
        assert report.total_expense == Decimal("0.3")

    def test_daily_net_is_in_date_order(self):
        entries = [
            entry(EntryKind.EXPENSE, "5", day=date(2025, 1, 3)),
            entry(EntryKind.INCOME, "10", day=date(2025, 1, 1)),
            entry(EntryKind.EXPENSE, "4", day=date(2025, 1, 1)),
        ]
        report = build_report(entries, START, END)
        assert list(report.daily_net.items()) == [
            (date(2025, 1, 1), Decimal("6")),
            (date(2025, 1, 3), Decimal("-5")),
        ]

    def test_consumes_a_generator(self):
        report = build_report(
            (entry(EntryKind.INCOME, str(n)) for n in range(1, 4)), START, END
        )
        assert report.entry_count == 3
        assert report.total_income == Decimal("6")


class TestFormatDateRange:
    """Tests for format_date_range."""

    def test_single_day(self):
        assert format_date_range(START, START) == "on 01 Jan 2025"

    def test_same_month(self):
        assert format_date_range(START, date(2025, 1, 2)) == "from 01 to 02 Jan 2025"

    def test_same_year(self):
        assert format_date_range(START, date(2025, 3, 5)) == "from 01 Jan to 05 Mar 2025"

    def test_across_years(self):
        assert (
            format_date_range(date(2024, 12, 30), START)
            == "from 30 Dec 2024 to 01 Jan 2025"
        )
