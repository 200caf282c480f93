"""Logged-in session context.

A Session is created at login and dropped at logout. It owns the user's
record store and query engine and dispatches commands to them.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import singledispatchmethod
from pathlib import Path
from typing import Any

from spendwise.domain.commands import AddExpense, AddFund, DeleteTransaction, SetFilter, UpdateTransaction
from spendwise.domain.models import Money, Record, TaggedTransaction
from spendwise.domain.query import QueryEngine, TransactionQuery
from spendwise.store.queries import SqliteKeyValueStore
from spendwise.store.records import KeyValueStore, RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """Authenticated user, without credentials."""

    id: int
    name: str
    email: str


@dataclass(frozen=True)
class Summary:
    """Dashboard statistics."""

    balance: Money
    total_funds: Money
    total_expenses: Money
    today_expenses: Money
    monthly_expenses: Money
    budget: Money
    budget_alert: bool


class Session:
    """Per-user context passed to everything that reads or writes records."""

    def __init__(self, user: User, store: RecordStore, engine: QueryEngine | None = None) -> None:
        self.user = user
        self.store = store
        self.engine = engine if engine is not None else QueryEngine(store)
        self.filters = TransactionQuery()

    @classmethod
    def open(cls, user: User, kv: KeyValueStore | None = None, db_path: Path | None = None) -> "Session":
        """Load the user's records and build a session around them."""
        if kv is None:
            kv = SqliteKeyValueStore(db_path)
        logger.debug("Opening session for user %s", user.id)
        return cls(user, RecordStore(user.id, kv))

    @singledispatchmethod
    def handle(self, command: Any) -> Any:
        """Apply a command and return its result."""
        raise TypeError(f"Unsupported command: {type(command).__name__}")

    @handle.register
    def _(self, command: AddFund) -> Record:
        return self.store.add_fund(command.amount, command.date, command.source)

    @handle.register
    def _(self, command: AddExpense) -> Record:
        return self.store.add_expense(command.amount, command.date, command.category, command.note)

    @handle.register
    def _(self, command: UpdateTransaction) -> Record:
        return self.store.update_transaction(command.id, command.type, **command.changes)

    @handle.register
    def _(self, command: DeleteTransaction) -> Record:
        return self.store.delete_transaction(command.id, command.type)

    @handle.register
    def _(self, command: SetFilter) -> list[TaggedTransaction]:
        self.filters = self.filters.with_changes(**command.changes())
        return self.transactions()

    def transactions(self, now: datetime | None = None) -> list[TaggedTransaction]:
        """History under the current filters, newest first."""
        return self.engine.run(self.filters, now)

    def summary(self, now: datetime | None = None) -> Summary:
        today = (now or datetime.now()).date()
        return Summary(
            balance=self.store.get_balance(),
            total_funds=self.store.get_total_funds(),
            total_expenses=self.store.get_total_expenses(),
            today_expenses=self.store.get_today_expenses(today),
            monthly_expenses=self.store.get_monthly_expenses(today),
            budget=self.store.budget,
            budget_alert=self.store.budget_alert(today),
        )
