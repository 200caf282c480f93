"""Tests for spendwise.domain.export pure functions."""

import csv
import io
from datetime import date, datetime
from decimal import Decimal

from spendwise.domain.export import (
    CSV_HEADERS,
    csv_rows,
    export_filename,
    format_date,
    format_datetime,
    render_report_html,
    write_csv,
)
from spendwise.domain.models import Category, Expense, Fund, Money, TaggedTransaction

CREATED = datetime(2024, 3, 5, 9, 30)


def transactions() -> list[TaggedTransaction]:
    return [
        TaggedTransaction.tag(
            Expense(
                id=2,
                amount=Money(Decimal("12.50")),
                date=date(2024, 3, 5),
                created_at=CREATED,
                category=Category.FOOD,
                note='Lunch with "Bob" <b>',
            )
        ),
        TaggedTransaction.tag(
            Fund(id=1, amount=Money(Decimal("2000.00")), date=date(2024, 3, 1), created_at=CREATED, source="Salary")
        ),
    ]


class TestFormatting:
    """Tests for the display helpers."""

    def test_format_date(self) -> None:
        """Should not zero-pad the day."""
        assert format_date(date(2024, 1, 5)) == "Jan 5, 2024"

    def test_format_datetime(self) -> None:
        """Should use a 12-hour clock."""
        assert format_datetime(datetime(2024, 1, 5, 14, 7)) == "Jan 5, 2024, 02:07 PM"

    def test_export_filename(self) -> None:
        """Should stamp the file with the date."""
        assert export_filename(date(2024, 3, 15), "csv") == "spendwise-2024-03-15.csv"


class TestCsv:
    """Tests for csv_rows and write_csv."""

    def test_rows(self) -> None:
        """Should fill type-specific columns and blank the others."""
        expense_row, fund_row = csv_rows(transactions())

        assert expense_row["Type"] == "Expense"
        assert expense_row["Amount"] == "12.50"
        assert expense_row["Category"] == "Food"
        assert expense_row["Source"] == ""
        assert fund_row["Type"] == "Fund"
        assert fund_row["Full Date"] == "2024-03-01"
        assert fund_row["Source"] == "Salary"
        assert fund_row["Category"] == ""
        assert fund_row["Created At"] == "Mar 5, 2024, 09:30 AM"

    def test_write_csv_quotes_everything(self) -> None:
        """Should quote every cell and round-trip through a CSV reader."""
        buffer = io.StringIO()

        count = write_csv(transactions(), buffer)

        lines = buffer.getvalue().splitlines()
        assert count == 2
        assert lines[0] == ",".join(f'"{h}"' for h in CSV_HEADERS)
        parsed = list(csv.DictReader(io.StringIO(buffer.getvalue())))
        assert parsed[0]["Note"] == 'Lunch with "Bob" <b>'

    def test_empty(self) -> None:
        """Should write only the header."""
        buffer = io.StringIO()
        assert write_csv([], buffer) == 0
        assert buffer.getvalue().count("\n") == 1


class TestHtmlReport:
    """Tests for render_report_html."""

    def test_contains_cards_and_rows(self) -> None:
        """Should include summary cards and a row per transaction."""
        html = render_report_html(
            transactions(),
            [("Total Balance", Money(Decimal("1987.50")))],
            datetime(2024, 3, 15, 8, 0),
        )

        assert "Total Balance" in html
        assert "$1,987.50" in html
        assert "+$2,000.00" in html
        assert "-$12.50" in html
        assert "Total Transactions: 2" in html
        assert "Generated on Mar 15, 2024, 08:00 AM" in html

    def test_escapes_user_text(self) -> None:
        """Should escape notes."""
        html = render_report_html(transactions(), [], datetime(2024, 3, 15))

        assert "<b>" not in html
        assert "&lt;b&gt;" in html

    def test_currency_symbol(self) -> None:
        """Should use the configured currency."""
        html = render_report_html(transactions(), [], datetime(2024, 3, 15), currency="£")
        assert "+£2,000.00" in html
