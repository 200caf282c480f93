"""CLI entry point for spendwise."""

import typer

from spendwise.commands.admin import init_command, login_command, logout_command, signup_command, whoami_command
from spendwise.commands.report import (
    breakdown_command,
    budget_command,
    export_command,
    summary_command,
    trend_command,
)
from spendwise.commands.transactions import (
    add_expense_command,
    add_fund_command,
    delete_command,
    edit_command,
    list_command,
)
from spendwise.config import load_config
from spendwise.logs import configure_logging

app = typer.Typer(
    name="spendwise",
    help="Spendwise - track your funds and expenses",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Spendwise - track your funds and expenses."""
    configure_logging("DEBUG" if verbose else load_config().get("log_level", "WARNING"))


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Update the database schema only"),
) -> None:
    """Initialize spendwise database and configuration."""
    init_command(force, migrate)


@app.command()
def signup(
    name: str = typer.Option(..., "--name", help="Your name"),
    email: str = typer.Option(..., "--email", help="Your email address"),
    password: str = typer.Option(None, "--password", help="Password (prompted if omitted)"),
) -> None:
    """Create an account and log in."""
    signup_command(name, email, password)


@app.command()
def login(
    email: str = typer.Option(..., "--email", help="Your email address"),
    password: str = typer.Option(None, "--password", help="Password (prompted if omitted)"),
) -> None:
    """Log in to your account."""
    login_command(email, password)


@app.command()
def logout() -> None:
    """Log out."""
    logout_command()


@app.command()
def whoami() -> None:
    """Show who is logged in."""
    whoami_command()


@app.command(name="add-fund")
def add_fund(
    amount: str,
    source: str = typer.Option(..., "--source", "-s", help="Where the money came from (e.g. Salary)"),
    date: str = typer.Option(None, "--date", "-d", help="Date (default: today)"),
) -> None:
    """Record income."""
    add_fund_command(amount, source, date)


@app.command(name="add-expense")
def add_expense(
    amount: str,
    category: str = typer.Option(..., "--category", "-c", help="Food, Travel, Shopping, Bills or Other"),
    note: str = typer.Option("", "--note", "-n", help="Optional description"),
    date: str = typer.Option(None, "--date", "-d", help="Date (default: today)"),
) -> None:
    """Record an expense."""
    add_expense_command(amount, category, note, date)


@app.command()
def edit(
    transaction_id: int,
    txn_type: str = typer.Option(..., "--type", "-t", help="'fund' or 'expense'"),
    amount: str = typer.Option(None, "--amount", help="New amount"),
    date: str = typer.Option(None, "--date", help="New date"),
    source: str = typer.Option(None, "--source", help="New source (funds only)"),
    category: str = typer.Option(None, "--category", help="New category (expenses only)"),
    note: str = typer.Option(None, "--note", help="New note (expenses only)"),
) -> None:
    """Edit a fund or expense."""
    edit_command(transaction_id, txn_type, amount, date, source, category, note)


@app.command()
def delete(
    transaction_id: int,
    txn_type: str = typer.Option(..., "--type", "-t", help="'fund' or 'expense'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete a fund or expense."""
    delete_command(transaction_id, txn_type, yes)


@app.command(name="list")
def list_transactions(
    tab: str = typer.Option("all", "--tab", help="all, funds or expenses"),
    period: str = typer.Option("all", "--period", "-p", help="all, today, week, month or custom"),
    category: str = typer.Option("all", "--category", "-c", help="Expense category or 'all'"),
    search: str = typer.Option("", "--search", "-s", help="Search source, category, note and amount"),
    from_date: str = typer.Option(None, "--from", help="Custom period start (inclusive)"),
    to_date: str = typer.Option(None, "--to", help="Custom period end (inclusive)"),
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show every matching transaction"),
) -> None:
    """List your transactions, newest first."""
    list_command(tab, period, category, search, from_date, to_date, None if all else limit)


@app.command()
def summary() -> None:
    """Show your balance and spending totals."""
    summary_command()


@app.command()
def breakdown(
    histogram: bool = typer.Option(True, help="Show histogram of your spending"),
) -> None:
    """Show your spending by category."""
    breakdown_command(histogram)


@app.command()
def trend() -> None:
    """Show your spending over the last six months."""
    trend_command()


@app.command()
def budget(
    set_amount: str = typer.Option(None, "--set", help="Set your monthly budget"),
) -> None:
    """Show or set your monthly budget."""
    budget_command(set_amount)


@app.command()
def export(
    fmt: str = typer.Option("csv", "--format", "-f", help="csv or html"),
    output: str = typer.Option(None, "--output", "-o", help="Output file"),
) -> None:
    """Export all your transactions."""
    export_command(fmt, output)


if __name__ == "__main__":
    app()
