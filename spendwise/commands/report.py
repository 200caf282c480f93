"""Report commands: summary, breakdown, trend, budget and export."""

import sys
from datetime import date, datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from spendwise.commands.admin import currency, require_session, warn_if_degraded
from spendwise.domain.aggregates import sum_by_type
from spendwise.domain.export import export_filename, format_money, render_report_html, write_csv
from spendwise.domain.models import Money
from spendwise.errors import ValidationError
from spendwise.store.schema import get_exports_dir

console = Console()

BAR_WIDTH = 30


def bar_length(amount: Money, max_amount: Money, width: int = BAR_WIDTH) -> int:
    """Histogram bar length in characters."""
    if max_amount <= 0:
        return 0
    return int(amount / max_amount * width)


def summary_command() -> None:
    """Show balance, totals and this month's spending."""
    session = require_session()
    symbol = currency()
    summary = session.summary()

    balance_style = "green" if summary.balance >= 0 else "red"
    console.print(f"\n[bold]Spendwise[/bold] [dim]- {session.user.name}[/dim]\n")
    console.print(f"  Balance:         [{balance_style}]{format_money(summary.balance, symbol)}[/{balance_style}]")
    console.print(f"  Total funds:     [green]{format_money(summary.total_funds, symbol)}[/green]")
    console.print(f"  Total expenses:  [red]{format_money(summary.total_expenses, symbol)}[/red]")
    console.print(f"  Today:           {format_money(summary.today_expenses, symbol)}")
    console.print(f"  This month:      {format_money(summary.monthly_expenses, symbol)}")
    console.print(f"  Monthly budget:  {format_money(summary.budget, symbol)}")

    if summary.budget_alert:
        console.print("\n[yellow]Budget alert: you have spent at least 80% of this month's budget[/yellow]")


def breakdown_command(histogram: bool = True) -> None:
    """Show total spending per category."""
    session = require_session()
    symbol = currency()
    breakdown = session.store.get_category_breakdown()

    if not breakdown:
        console.print("[yellow]No expenses recorded yet[/yellow]")
        return

    ordered = sorted(breakdown.items(), key=lambda item: item[1], reverse=True)
    max_amount = ordered[0][1]
    total = session.store.get_total_expenses()

    console.print("\n[bold]Spending by category[/bold]\n")
    for category, amount in ordered:
        share = float(amount / total) if total else 0.0
        line = f"  {category.value:10} {format_money(amount, symbol):>14} {share:>6.1%}"
        if histogram:
            line += " " + "█" * bar_length(amount, max_amount)
        console.print(line)
    console.print(f"\n  {'Total':10} {format_money(total, symbol):>14}")


def trend_command() -> None:
    """Show spending for each of the last six months."""
    session = require_session()
    symbol = currency()
    trend = session.store.get_monthly_trend()
    max_amount = max(trend.values())

    table = Table(title="Monthly spending (last 6 months)")
    table.add_column("Month", style="cyan")
    table.add_column("Spent", justify="right")
    table.add_column("")

    for label, amount in trend.items():
        table.add_row(label, format_money(amount, symbol), "█" * bar_length(amount, max_amount))

    console.print(table)


def budget_command(amount: str | None = None) -> None:
    """Show or set the monthly budget."""
    session = require_session()
    shown = len(session.store.warnings)
    symbol = currency()

    if amount is not None:
        try:
            budget = session.store.set_budget(amount)
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)
        console.print(f"[green]✓[/green] Monthly budget set to {format_money(budget, symbol)}")
        warn_if_degraded(session, shown)

    spent = session.store.get_monthly_expenses()
    used = session.store.budget_used()
    style = "red" if used >= 1 else "yellow" if session.store.budget_alert() else "green"
    console.print(
        f"This month: {format_money(spent, symbol)} of {format_money(session.store.budget, symbol)} "
        f"[{style}]({used:.0%})[/{style}]"
    )


def export_command(fmt: str = "csv", output: str | None = None) -> None:
    """Export every transaction as CSV or a printable HTML report."""
    session = require_session()
    fmt = fmt.lower()
    if fmt not in ("csv", "html"):
        console.print(f"[red]Unknown format: {fmt} (choose csv or html)[/red]")
        sys.exit(1)

    transactions = session.engine.all_transactions()
    if output:
        path = Path(output).expanduser()
    else:
        path = get_exports_dir() / export_filename(date.today(), fmt)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            if fmt == "csv":
                count = write_csv(transactions, f)
            else:
                total_funds, total_expenses, balance = sum_by_type(session.store.funds, session.store.expenses)
                cards = [
                    ("Total Balance", balance),
                    ("Total Funds", total_funds),
                    ("Total Expenses", total_expenses),
                    ("This Month's Expenses", session.store.get_monthly_expenses()),
                ]
                f.write(render_report_html(transactions, cards, datetime.now(), currency()))
                count = len(transactions)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {count} transactions to {path}")
    if fmt == "html":
        console.print("[dim]Open it in a browser and print to save as PDF.[/dim]")
