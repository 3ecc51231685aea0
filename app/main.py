"""
Console Frontend for Budget Tracker

This is the interactive menu users work with day to day.

DESIGN PRINCIPLES:
1. Simple numbered menu
2. Every input is parsed here; the ledger only ever sees typed values
3. Malformed input is rejected with a message and changes nothing
4. Explicit confirmation before removing an entry and before exiting

The frontend holds no business logic. Validation of entries, storage
and auditing all happen behind LedgerService.
"""

import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import IO, Optional
from uuid import UUID

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from budget_tracker.audit import configure_logging
from budget_tracker.config import get_settings
from budget_tracker.models.entry import EntryKind, LedgerReport
from budget_tracker.orchestrator import create_app_components
from budget_tracker.reports import format_date_range
from budget_tracker.services.ledger import LedgerService
from budget_tracker.services.storage import StorageError
from budget_tracker.validation import EntryValidationError


MENU_OPTIONS = [
    ("1", "Add Entry"),
    ("2", "Remove Entry"),
    ("3", "Generate Report"),
    ("4", "Exit"),
]


def parse_amount(text: str) -> Optional[Decimal]:
    """Parse a strictly positive, finite decimal amount."""
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def parse_day(text: str) -> Optional[date]:
    """Parse a YYYY-MM-DD date."""
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


def parse_entry_id(text: str) -> Optional[UUID]:
    try:
        return UUID(text.strip())
    except ValueError:
        return None


def format_money(value: Decimal, symbol: str = "$") -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


class LedgerConsole:
    """
    Interactive menu loop over a LedgerService.

    Reads from ``stream`` when given (used by tests), otherwise from
    standard input. End of input leaves the menu cleanly.
    """

    def __init__(
        self,
        ledger: LedgerService,
        console: Optional[Console] = None,
        stream: Optional[IO[str]] = None,
        currency_symbol: str = "$",
    ):
        self._ledger = ledger
        self._console = console or Console()
        self._stream = stream
        self._symbol = currency_symbol

    # ------------------------------------------------------------------
    # Input helpers
    # ------------------------------------------------------------------

    def _read(self, prompt: str) -> str:
        value = self._console.input(prompt, stream=self._stream)
        # input() raises EOFError itself; a stream just returns ""
        if self._stream is not None and value == "":
            raise EOFError
        return value.strip()

    def _confirm(self, prompt: str) -> bool:
        return Confirm.ask(
            prompt,
            console=self._console,
            default=False,
            stream=self._stream,
        )

    def _say(self, message: str) -> None:
        self._console.print(message)

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Show the menu until the user confirms exit or input ends."""
        actions = {
            "1": self.add_entry,
            "2": self.remove_entry,
            "3": self.generate_report,
        }

        while True:
            self._print_menu()
            try:
                choice = self._read("Select an option: ")
                if choice == "4":
                    if self._confirm("Are you sure you want to exit?"):
                        break
                    continue

                action = actions.get(choice)
                if action is None:
                    self._say("[red]Invalid selection.[/red]")
                    continue
                action()
            except (EOFError, KeyboardInterrupt):
                break

        self._say("Exiting application...")

    def _print_menu(self) -> None:
        self._say("\n[bold]=== BUDGET TRACKER ===[/bold]")
        for key, label in MENU_OPTIONS:
            self._say(f"{key}. {label}")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_entry(self) -> None:
        """Prompt for an entry and record it for today."""
        try:
            kind = EntryKind.parse(self._read("Enter type (Income/Expense): "))
        except ValueError:
            self._say("[red]Invalid type.[/red]")
            return

        description = self._read("Enter description: ")
        if not description:
            self._say("[red]Description is required.[/red]")
            return

        amount = parse_amount(self._read("Enter amount: "))
        if amount is None:
            self._say("[red]Invalid amount.[/red]")
            return

        try:
            entry = self._ledger.record(kind, description, amount)
        except (EntryValidationError, StorageError) as e:
            self._say(f"[red]Error: {escape(str(e))}[/red]")
            return

        self._say(
            f"[green]Entry added.[/green] ID: {entry.id} "
            f"(date {entry.entry_date.isoformat()})"
        )

    def remove_entry(self) -> None:
        """Prompt for an id and date, confirm, then remove."""
        entry_id = parse_entry_id(self._read("Enter entry ID: "))
        if entry_id is None:
            self._say("[red]Invalid ID format.[/red]")
            return

        day = parse_day(self._read("Enter entry date (YYYY-MM-DD): "))
        if day is None:
            self._say("[red]Invalid date.[/red]")
            return

        if not self._confirm(f"Remove entry {entry_id} from {day.isoformat()}?"):
            self._say("Removal cancelled.")
            return

        try:
            removed = self._ledger.remove(entry_id, day)
        except StorageError as e:
            self._say(f"[red]Error: {escape(str(e))}[/red]")
            return

        if removed:
            self._say("[green]Entry removed.[/green]")
        else:
            self._say("[yellow]Entry not found.[/yellow]")

    def generate_report(self) -> None:
        """Prompt for a date range and print the summary."""
        start = parse_day(self._read("Enter start date (YYYY-MM-DD): "))
        if start is None:
            self._say("[red]Invalid start date.[/red]")
            return

        end = parse_day(self._read("Enter end date (YYYY-MM-DD): "))
        if end is None:
            self._say("[red]Invalid end date.[/red]")
            return

        if start > end:
            self._say("[red]Start date must be on or before the end date.[/red]")
            return

        try:
            report = self._ledger.summarize(start, end)
        except StorageError as e:
            self._say(f"[red]Error: {escape(str(e))}[/red]")
            return

        if report.is_empty:
            self._say("No entries found.")
            return

        self._print_report(report)

    def _print_report(self, report: LedgerReport) -> None:
        table = Table(title=f"Entries {format_date_range(report.start, report.end)}")
        table.add_column("Date")
        table.add_column("Type")
        table.add_column("Description")
        table.add_column("Amount", justify="right")
        table.add_column("ID", overflow="fold")

        for entry in report.entries:
            table.add_row(
                entry.entry_date.isoformat(),
                entry.kind.value,
                escape(entry.description),
                format_money(entry.signed_amount, self._symbol),
                str(entry.id),
            )
        self._console.print(table)

        self._say("\n[bold]=== REPORT ===[/bold]")
        self._say(f"Total Income:   {format_money(report.total_income, self._symbol)}")
        self._say(f"Total Expenses: {format_money(report.total_expense, self._symbol)}")
        self._say(f"Net Balance:    {format_money(report.net_balance, self._symbol)}")


def main() -> int:
    """Main application entry point."""
    settings = get_settings()
    configure_logging(settings.app.log_level)

    ledger, _ = create_app_components(settings)
    LedgerConsole(ledger, currency_symbol=settings.app.currency_symbol).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
