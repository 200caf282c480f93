"""Domain type definitions for spendwise.

- Money: exact decimal amount (two places)
- Category: fixed set of expense categories
- TransactionType: fund (income) or expense (spending)
- Fund / Expense: the stored records
- TaggedTransaction: a record tagged with its type, as returned by queries
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, NewType

# Amounts are exact decimals to avoid floating point errors
Money = NewType("Money", Decimal)

ZERO = Money(Decimal("0"))


class Category(str, Enum):
    """Expense categories."""

    FOOD = "Food"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHER = "Other"

    def __str__(self) -> str:
        return self.value


class TransactionType(str, Enum):
    """Kind of record. Part of a transaction's identity."""

    FUND = "fund"
    EXPENSE = "expense"

    def __str__(self) -> str:
        return self.value


@dataclass
class Fund:
    """Income record."""

    id: int
    amount: Money
    date: date
    created_at: datetime
    source: str

    type = TransactionType.FUND

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fund":
        return cls(
            id=int(data["id"]),
            amount=Money(Decimal(str(data["amount"]))),
            date=date.fromisoformat(data["date"]),
            created_at=_parse_created_at(data.get("createdAt"), data["date"]),
            source=data.get("source") or "",
        )


@dataclass
class Expense:
    """Spending record."""

    id: int
    amount: Money
    date: date
    created_at: datetime
    category: Category
    note: str = ""

    type = TransactionType.EXPENSE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "category": self.category.value,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Expense":
        return cls(
            id=int(data["id"]),
            amount=Money(Decimal(str(data["amount"]))),
            date=date.fromisoformat(data["date"]),
            created_at=_parse_created_at(data.get("createdAt"), data["date"]),
            category=Category(data["category"]),
            note=data.get("note") or "",
        )


def _parse_created_at(value: str | None, fallback_date: str) -> datetime:
    # Older blobs may carry a trailing "Z" or no createdAt at all
    if not value:
        return datetime.fromisoformat(fallback_date)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


Record = Fund | Expense


@dataclass(frozen=True)
class TaggedTransaction:
    """A fund or expense tagged with its type."""

    type: TransactionType
    record: Record

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def amount(self) -> Money:
        return self.record.amount

    @property
    def date(self) -> date:
        return self.record.date

    @property
    def created_at(self) -> datetime:
        return self.record.created_at

    @property
    def source(self) -> str | None:
        return getattr(self.record, "source", None)

    @property
    def category(self) -> Category | None:
        return getattr(self.record, "category", None)

    @property
    def note(self) -> str | None:
        return getattr(self.record, "note", None)

    @classmethod
    def tag(cls, record: Record) -> "TaggedTransaction":
        return cls(type=record.type, record=record)
