"""Explicit commands accepted by a session.

Front ends build one of these and hand it to ``Session.handle`` instead of
calling into the store directly.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from spendwise.domain.models import TransactionType


@dataclass(frozen=True)
class AddFund:
    amount: Any
    date: date | str
    source: str


@dataclass(frozen=True)
class AddExpense:
    amount: Any
    date: date | str
    category: str
    note: str = ""


@dataclass(frozen=True)
class UpdateTransaction:
    """Change some fields of an existing fund or expense."""

    id: int
    type: TransactionType | str
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteTransaction:
    id: int
    type: TransactionType | str


@dataclass(frozen=True)
class SetFilter:
    """Change the history filters. Fields left as None keep their value."""

    tab: str | None = None
    period: str | None = None
    category: str | None = None
    search: str | None = None
    from_date: date | str | None = None
    to_date: date | str | None = None

    def changes(self) -> dict[str, Any]:
        return {name: value for name, value in self.__dict__.items() if value is not None}

