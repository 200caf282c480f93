"""Pure functions for CSV and printable report exports.

Both exports take the full, newest-first transaction list. Nothing here
reads the clock or touches the filesystem beyond the file object passed in.
"""

import csv
import html
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import TextIO

from spendwise.domain.models import Money, TaggedTransaction, TransactionType

CSV_HEADERS = ["Type", "Date", "Full Date", "Amount", "Source", "Category", "Note", "Created At"]


def format_date(day: date) -> str:
    """Display date, e.g. "Jan 5, 2024"."""
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def format_datetime(moment: datetime) -> str:
    """Display timestamp, e.g. "Jan 5, 2024, 09:30 AM"."""
    return f"{format_date(moment.date())}, {moment.strftime('%I:%M %p')}"


def format_money(amount: Money, currency: str = "$", sign: str = "") -> str:
    return f"{sign}{currency}{amount:,.2f}"


def export_filename(today: date, extension: str) -> str:
    return f"spendwise-{today.isoformat()}.{extension}"


def csv_rows(transactions: Iterable[TaggedTransaction]) -> list[dict[str, str]]:
    """One dict per transaction keyed by CSV_HEADERS."""
    rows = []
    for txn in transactions:
        is_fund = txn.type is TransactionType.FUND
        rows.append(
            {
                "Type": "Fund" if is_fund else "Expense",
                "Date": format_date(txn.date),
                "Full Date": txn.date.isoformat(),
                "Amount": f"{txn.amount:.2f}",
                "Source": txn.source or "",
                "Category": txn.category.value if txn.category is not None else "",
                "Note": txn.note or "",
                "Created At": format_datetime(txn.created_at),
            }
        )
    return rows


def write_csv(transactions: Iterable[TaggedTransaction], fp: TextIO) -> int:
    """Write transactions as CSV with every cell quoted.

    Returns:
        Number of data rows written.
    """
    rows = csv_rows(transactions)
    writer = csv.DictWriter(fp, fieldnames=CSV_HEADERS, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return len(rows)


_REPORT_STYLE = """
    body { font-family: Arial, sans-serif; margin: 40px; color: #333; }
    .header { text-align: center; margin-bottom: 30px; border-bottom: 3px solid #00d4ff; padding-bottom: 20px; }
    .summary { display: grid; grid-template-columns: repeat(2, 1fr); gap: 20px; margin-bottom: 30px; }
    .summary-card { border: 2px solid #e0e0e0; border-radius: 8px; padding: 15px; background: #f9f9f9; }
    .summary-card .value { font-size: 24px; font-weight: bold; color: #00d4ff; }
    table { width: 100%; border-collapse: collapse; margin-top: 20px; }
    th { background: #00d4ff; color: white; padding: 12px; text-align: left; }
    td { padding: 10px 12px; border-bottom: 1px solid #e0e0e0; }
    .fund { color: #00aa55; font-weight: 600; }
    .expense { color: #ff3366; font-weight: 600; }
    .footer { margin-top: 40px; text-align: center; color: #999; font-size: 12px; }
"""


def render_report_html(
    transactions: Sequence[TaggedTransaction],
    cards: Sequence[tuple[str, Money]],
    generated_at: datetime,
    currency: str = "$",
) -> str:
    """Render a printable HTML report.

    Args:
        transactions: Transactions to list, already sorted.
        cards: (title, amount) summary cards, e.g. ("Total Balance", balance).
        generated_at: Timestamp shown in the header.
        currency: Currency symbol.

    Returns:
        A complete HTML document.
    """
    esc = html.escape
    card_html = "\n".join(
        f'    <div class="summary-card"><h3>{esc(title)}</h3>'
        f'<div class="value">{esc(format_money(amount, currency))}</div></div>'
        for title, amount in cards
    )

    row_html = []
    for txn in transactions:
        is_fund = txn.type is TransactionType.FUND
        description = txn.source if is_fund else (txn.note or "-")
        category = "-" if is_fund else txn.category.value
        amount = format_money(txn.amount, currency, "+" if is_fund else "-")
        row_html.append(
            "      <tr>"
            f"<td>{'Fund' if is_fund else 'Expense'}</td>"
            f"<td>{esc(format_date(txn.date))}</td>"
            f"<td>{esc(description or '-')}</td>"
            f"<td>{esc(category)}</td>"
            f'<td class="{txn.type.value}">{esc(amount)}</td>'
            f"<td>{esc(format_datetime(txn.created_at))}</td>"
            "</tr>"
        )
    rows = "\n".join(row_html)

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Spendwise Report</title>
  <style>{_REPORT_STYLE}</style>
</head>
<body>
  <div class="header">
    <h1>Spendwise Report</h1>
    <p>Generated on {esc(format_datetime(generated_at))}</p>
  </div>
  <div class="summary">
{card_html}
  </div>
  <h2>Transaction History</h2>
  <table>
    <thead>
      <tr><th>Type</th><th>Date</th><th>Description</th><th>Category</th><th>Amount</th><th>Created At</th></tr>
    </thead>
    <tbody>
{rows}
    </tbody>
  </table>
  <div class="footer">
    <p>Spendwise &bull; Total Transactions: {len(transactions)}</p>
  </div>
</body>
</html>
"""
