"""Admin commands for init and account management."""

import sqlite3
import sys
from pathlib import Path

import typer
from rich.console import Console

from spendwise import auth
from spendwise.config import create_default_config, get_config_path, load_config
from spendwise.errors import AuthError, ValidationError
from spendwise.session import Session
from spendwise.store.schema import database_exists, get_db_path, init_database

console = Console()


def warn_if_degraded(session: Session, start: int = 0) -> None:
    """Print storage warnings collected by the record store.

    Args:
        session: Open session.
        start: Number of warnings already shown to the user.
    """
    for warning in session.store.warnings[start:]:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


def require_session() -> Session:
    """Open a session for the logged-in user, or exit with a message."""
    db_path = get_db_path()

    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'spendwise init' first.[/red]", style="bold")
        sys.exit(1)

    try:
        user = auth.current_user(db_path)
        session = Session.open(user, db_path=db_path)
    except AuthError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    warn_if_degraded(session)
    return session


def currency() -> str:
    return str(load_config().get("currency", "$"))


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Initialize spendwise database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Migration path: update existing database only
        if migrate:
            if not db_exists:
                console.print("[red]No database found to migrate[/red]", style="bold")
                console.print(f"[dim]Expected location: {db_path}[/dim]")
                sys.exit(1)
            console.print(f"[cyan]Running migrations on {db_path}...[/cyan]")
            init_database(db_path)
            console.print("[green]✓[/green] Migrations complete")
            return

        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'spendwise init --force' to overwrite[/yellow]")
            console.print("[yellow]Or 'spendwise init --migrate' to update database schema only[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def signup_command(name: str, email: str, password: str | None = None) -> None:
    """Create an account and log in."""
    db_path = get_db_path()
    if not database_exists(db_path):
        init_database(db_path)

    if password is None:
        password = typer.prompt("Password", hide_input=True, confirmation_prompt=True)

    try:
        user = auth.signup(name, email, password, db_path)
    except (AuthError, ValidationError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Welcome, {user.name}! You are logged in.")


def login_command(email: str, password: str | None = None) -> None:
    """Log in to an existing account."""
    db_path = get_db_path()
    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'spendwise init' first.[/red]", style="bold")
        sys.exit(1)

    if password is None:
        password = typer.prompt("Password", hide_input=True)

    try:
        user = auth.login(email, password, db_path)
    except AuthError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Logged in as {user.name} ({user.email})")


def logout_command() -> None:
    """Log out the current user."""
    auth.logout()
    console.print("[green]✓[/green] Logged out")


def whoami_command() -> None:
    """Show the logged-in user."""
    session = require_session()
    console.print(f"{session.user.name} [dim]<{session.user.email}>[/dim]")
