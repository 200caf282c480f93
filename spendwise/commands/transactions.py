"""Transaction management commands (add, edit, delete, list)."""

import sys
from datetime import date
from typing import Any

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from spendwise.commands.admin import currency, require_session, warn_if_degraded
from spendwise.domain.commands import AddExpense, AddFund, DeleteTransaction, SetFilter, UpdateTransaction
from spendwise.domain.export import format_date, format_money
from spendwise.domain.models import TaggedTransaction, TransactionType
from spendwise.domain.validation import parse_date
from spendwise.errors import TransactionNotFoundError, ValidationError

console = Console()


def normalize_date(value: str | None) -> date:
    """Parse a user-supplied date, defaulting to today.

    Accepts YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY and the other formats pandas
    understands. Exits with a message on failure.
    """
    if not value:
        return date.today()
    try:
        return parse_date(value)
    except ValidationError:
        pass

    # Not ISO, so read it day first
    try:
        parsed = pd.to_datetime(value, dayfirst=True)
        if pd.isna(parsed):
            raise ValueError(f"not a date: {value!r}")
        return parsed.date()
    except (ValueError, OverflowError) as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)


def add_fund_command(amount: str, source: str, date_str: str | None = None) -> None:
    """Record income."""
    session = require_session()
    shown = len(session.store.warnings)
    txn_date = normalize_date(date_str)

    try:
        fund = session.handle(AddFund(amount=amount, date=txn_date, source=source))
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    symbol = currency()
    console.print("[green]✓[/green] Funds added:")
    console.print(f"  ID: {fund.id}")
    console.print(f"  Date: {fund.date.isoformat()}")
    console.print(f"  Source: {fund.source}")
    console.print(f"  Amount: [green]{format_money(fund.amount, symbol, '+')}[/green]")
    warn_if_degraded(session, shown)


def add_expense_command(amount: str, category: str, note: str = "", date_str: str | None = None) -> None:
    """Record spending."""
    session = require_session()
    shown = len(session.store.warnings)
    txn_date = normalize_date(date_str)

    try:
        expense = session.handle(AddExpense(amount=amount, date=txn_date, category=category, note=note))
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    symbol = currency()
    console.print("[green]✓[/green] Expense added:")
    console.print(f"  ID: {expense.id}")
    console.print(f"  Date: {expense.date.isoformat()}")
    console.print(f"  Category: {expense.category.value}")
    if expense.note:
        console.print(f"  Note: {expense.note}")
    console.print(f"  Amount: [red]{format_money(expense.amount, symbol, '-')}[/red]")

    if session.store.budget_alert():
        used = session.store.budget_used()
        console.print(
            f"[yellow]Budget alert: {used:.0%} of your monthly budget "
            f"({format_money(session.store.budget, symbol)}) is spent[/yellow]"
        )
    warn_if_degraded(session, shown)


def edit_command(
    transaction_id: int,
    txn_type: str,
    amount: str | None = None,
    date_str: str | None = None,
    source: str | None = None,
    category: str | None = None,
    note: str | None = None,
) -> None:
    """Edit fields of a fund or expense."""
    session = require_session()
    shown = len(session.store.warnings)

    changes: dict[str, Any] = {}
    if amount is not None:
        changes["amount"] = amount
    if date_str is not None:
        changes["date"] = normalize_date(date_str)
    if source is not None:
        changes["source"] = source
    if category is not None:
        changes["category"] = category
    if note is not None:
        changes["note"] = note

    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    try:
        session.handle(UpdateTransaction(id=transaction_id, type=txn_type, changes=changes))
    except TransactionNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Updated {txn_type} {transaction_id}: {', '.join(sorted(changes))}")
    warn_if_degraded(session, shown)


def delete_command(transaction_id: int, txn_type: str, yes: bool = False) -> None:
    """Delete a fund or expense."""
    session = require_session()
    shown = len(session.store.warnings)

    try:
        record = session.store.get(transaction_id, txn_type)
    except (TransactionNotFoundError, ValidationError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not yes:
        label = format_money(record.amount, currency())
        confirmed = typer.confirm(f"Delete {record.type.value} of {label} on {record.date.isoformat()}?")
        if not confirmed:
            console.print("[dim]Cancelled[/dim]")
            return

    session.handle(DeleteTransaction(id=transaction_id, type=record.type))
    console.print(f"[green]✓[/green] Deleted {record.type.value} {transaction_id}")
    warn_if_degraded(session, shown)


def render_transactions(transactions: list[TaggedTransaction], title: str) -> None:
    """Print transactions as a rich table."""
    symbol = currency()
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Type")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for txn in transactions:
        if txn.type is TransactionType.FUND:
            kind = "Fund"
            description = txn.source or "[dim]-[/dim]"
            category = "[dim]-[/dim]"
            amount_display = f"[green]{format_money(txn.amount, symbol, '+')}[/green]"
        else:
            kind = "Expense"
            description = txn.note or "[dim]-[/dim]"
            category = txn.category.value
            amount_display = f"[red]{format_money(txn.amount, symbol, '-')}[/red]"

        table.add_row(str(txn.id), format_date(txn.date), kind, description, category, amount_display)

    console.print(table)


def list_command(
    tab: str = "all",
    period: str = "all",
    category: str = "all",
    search: str = "",
    from_date: str | None = None,
    to_date: str | None = None,
    limit: int | None = 50,
) -> None:
    """List transactions, newest first, with filters."""
    session = require_session()

    if (from_date or to_date) and period == "all":
        period = "custom"

    try:
        transactions = session.handle(
            SetFilter(
                tab=tab,
                period=period,
                category=category,
                search=search,
                from_date=normalize_date(from_date) if from_date else None,
                to_date=normalize_date(to_date) if to_date else None,
            )
        )
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    total = len(transactions)
    if limit is not None:
        transactions = transactions[:limit]

    title = f"Transactions (showing {len(transactions)} of {total})"
    render_transactions(transactions, title)
