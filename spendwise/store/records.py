"""Record store: one user's funds and expenses.

The store is the only owner of the two collections. Every mutation is
validated, applied in memory and then persisted as a whole collection.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime
from decimal import InvalidOperation
from typing import Any, Protocol

from spendwise.domain import aggregates
from spendwise.domain.models import Category, Expense, Fund, Money, Record, TransactionType
from spendwise.domain.validation import parse_amount, parse_category, parse_date, parse_text, parse_transaction_type
from spendwise.errors import PersistenceWarning, StorageError, TransactionNotFoundError, ValidationError

logger = logging.getLogger(__name__)

FUND_FIELDS = frozenset({"amount", "date", "source"})
EXPENSE_FIELDS = frozenset({"amount", "date", "category", "note"})


class KeyValueStore(Protocol):
    """Persistence collaborator keyed per user."""

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, blob: str) -> bool: ...


def next_id(existing: list[Record], now: datetime) -> int:
    """Creation-time id in milliseconds, kept unique and increasing.

    Args:
        existing: Records already in the collection.
        now: Creation time.

    Returns:
        An id larger than every id in ``existing``.
    """
    candidate = int(now.timestamp() * 1000)
    if existing:
        highest = max(r.id for r in existing)
        if candidate <= highest:
            candidate = highest + 1
    return candidate


class RecordStore:
    """Funds and expenses for one logged-in user."""

    def __init__(
        self,
        user_id: int,
        kv: KeyValueStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.user_id = user_id
        self._kv = kv
        self._clock = clock
        self.version = 0
        self.warnings: list[PersistenceWarning] = []
        self._funds: list[Fund] = self._load_records("funds", Fund.from_dict)
        self._expenses: list[Expense] = self._load_records("expenses", Expense.from_dict)
        self._budget: Money = self._load_budget()

    # -- persistence -------------------------------------------------------

    def storage_key(self, name: str) -> str:
        return f"{self.user_id}_{name}"

    @property
    def degraded(self) -> bool:
        """True once any load or save has failed; state is then memory-only."""
        return bool(self.warnings)

    def _warn(self, message: str) -> None:
        # Surfaced to the user through `warnings`
        logger.debug(message)
        self.warnings.append(PersistenceWarning(message))

    def _load_blob(self, name: str) -> Any:
        key = self.storage_key(name)
        try:
            blob = self._kv.load(key)
        except StorageError as e:
            self._warn(str(e))
            return None
        if blob is None:
            return None
        try:
            return json.loads(blob)
        except json.JSONDecodeError as e:
            self._warn(f"Stored {name} for user {self.user_id} is not valid JSON: {e}")
            return None

    def _load_records(self, name: str, parse: Callable[[dict[str, Any]], Any]) -> list[Any]:
        data = self._load_blob(name)
        if data is None:
            return []
        if not isinstance(data, list):
            self._warn(f"Stored {name} for user {self.user_id} is not a list")
            return []

        records = []
        for item in data:
            # Skip unreadable records one at a time so the rest still load
            try:
                record = parse(item)
                parse_amount(record.amount)
            except (KeyError, TypeError, ValueError, InvalidOperation) as e:
                self._warn(f"Skipping unreadable {name} entry for user {self.user_id}: {e!r}")
                continue
            records.append(record)
        return records

    def _load_budget(self) -> Money:
        data = self._load_blob("budget")
        if data is None:
            return aggregates.DEFAULT_BUDGET
        try:
            return parse_amount(data)
        except ValidationError as e:
            self._warn(f"Stored budget for user {self.user_id} is invalid: {e}")
            return aggregates.DEFAULT_BUDGET

    def _persist(self, name: str, payload: Any) -> None:
        if not self._kv.save(self.storage_key(name), json.dumps(payload)):
            self._warn(f"Could not save {name}; changes are kept in memory only")

    def _persist_funds(self) -> None:
        self._persist("funds", [f.to_dict() for f in self._funds])

    def _persist_expenses(self) -> None:
        self._persist("expenses", [e.to_dict() for e in self._expenses])

    def _changed(self) -> None:
        self.version += 1

    # -- read access -------------------------------------------------------

    @property
    def funds(self) -> tuple[Fund, ...]:
        return tuple(self._funds)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._expenses)

    @property
    def budget(self) -> Money:
        return self._budget

    def get(self, txn_id: int, txn_type: TransactionType | str) -> Record:
        """Find a record by id and type.

        Raises:
            TransactionNotFoundError: If no such record exists.
        """
        txn_type = parse_transaction_type(txn_type)
        collection = self._collection(txn_type)
        return collection[self._index_of(collection, txn_id, txn_type)]

    def _collection(self, txn_type: TransactionType) -> list[Any]:
        return self._funds if txn_type is TransactionType.FUND else self._expenses

    @staticmethod
    def _index_of(collection: list[Record], txn_id: int, txn_type: TransactionType) -> int:
        for index, record in enumerate(collection):
            if record.id == txn_id:
                return index
        raise TransactionNotFoundError(txn_id, txn_type.value)

    # -- mutations ---------------------------------------------------------

    def add_fund(self, amount: Any, date: Any, source: Any, now: datetime | None = None) -> Fund:
        """Record income.

        Args:
            amount: Non-negative amount.
            date: Date the fund is attributed to.
            source: Where the money came from (e.g. "Salary").
            now: Creation time. Defaults to the store's clock.

        Returns:
            The stored fund with its new id and creation time.

        Raises:
            ValidationError: If amount, date or source are malformed.
        """
        created_at = now or self._clock()
        fund = Fund(
            id=next_id(self._funds, created_at),
            amount=parse_amount(amount),
            date=parse_date(date),
            created_at=created_at,
            source=parse_text(source, "source"),
        )
        self._funds.append(fund)
        self._changed()
        self._persist_funds()
        logger.debug("Added fund %s for user %s", fund.id, self.user_id)
        return fund

    def add_expense(
        self, amount: Any, date: Any, category: Any, note: Any = "", now: datetime | None = None
    ) -> Expense:
        """Record spending.

        Raises:
            ValidationError: If amount, date, category or note are malformed.
        """
        created_at = now or self._clock()
        expense = Expense(
            id=next_id(self._expenses, created_at),
            amount=parse_amount(amount),
            date=parse_date(date),
            created_at=created_at,
            category=parse_category(category),
            note=parse_text(note, "note"),
        )
        self._expenses.append(expense)
        self._changed()
        self._persist_expenses()
        logger.debug("Added expense %s for user %s", expense.id, self.user_id)
        return expense

    def update_transaction(self, txn_id: int, txn_type: TransactionType | str, **changes: Any) -> Record:
        """Merge new field values over an existing record.

        Only amount, date and source (funds) or amount, date, category and
        note (expenses) may change.

        Raises:
            TransactionNotFoundError: If no record has this id and type.
            ValidationError: If a field is not editable or a value is malformed.
        """
        txn_type = parse_transaction_type(txn_type)
        collection = self._collection(txn_type)
        index = self._index_of(collection, txn_id, txn_type)

        allowed = FUND_FIELDS if txn_type is TransactionType.FUND else EXPENSE_FIELDS
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot update {', '.join(sorted(unknown))} on a {txn_type.value}")

        updated = replace(collection[index], **self._validated(changes))
        collection[index] = updated
        self._changed()
        self._persist(txn_type.value + "s", [r.to_dict() for r in collection])
        logger.debug("Updated %s %s for user %s", txn_type.value, txn_id, self.user_id)
        return updated

    @staticmethod
    def _validated(changes: dict[str, Any]) -> dict[str, Any]:
        parsers: dict[str, Callable[[Any], Any]] = {
            "amount": parse_amount,
            "date": parse_date,
            "category": parse_category,
            "source": lambda v: parse_text(v, "source"),
            "note": lambda v: parse_text(v, "note"),
        }
        return {name: parsers[name](value) for name, value in changes.items()}

    def delete_transaction(self, txn_id: int, txn_type: TransactionType | str) -> Record:
        """Remove a record permanently.

        Raises:
            TransactionNotFoundError: If no record has this id and type.
        """
        txn_type = parse_transaction_type(txn_type)
        collection = self._collection(txn_type)
        index = self._index_of(collection, txn_id, txn_type)

        removed = collection.pop(index)
        self._changed()
        self._persist(txn_type.value + "s", [r.to_dict() for r in collection])
        logger.debug("Deleted %s %s for user %s", txn_type.value, txn_id, self.user_id)
        return removed

    def set_budget(self, amount: Any) -> Money:
        """Set the monthly spending budget.

        Raises:
            ValidationError: If the amount is malformed.
        """
        self._budget = parse_amount(amount)
        self._changed()
        self._persist("budget", str(self._budget))
        return self._budget

    # -- aggregates --------------------------------------------------------

    def _today(self, today: date | None) -> date:
        return today if today is not None else self._clock().date()

    def get_total_funds(self) -> Money:
        return aggregates.total(self._funds)

    def get_total_expenses(self) -> Money:
        return aggregates.total(self._expenses)

    def get_balance(self) -> Money:
        return aggregates.balance(self._funds, self._expenses)

    def get_today_expenses(self, today: date | None = None) -> Money:
        return aggregates.today_total(self._expenses, self._today(today))

    def get_monthly_expenses(self, today: date | None = None) -> Money:
        return aggregates.month_total(self._expenses, self._today(today))

    def get_category_breakdown(self) -> dict[Category, Money]:
        return aggregates.category_breakdown(self._expenses)

    def get_monthly_trend(self, today: date | None = None) -> dict[str, Money]:
        return aggregates.monthly_trend(self._expenses, self._today(today))

    def budget_alert(self, today: date | None = None) -> bool:
        """True once this month's spending reaches 80% of the budget."""
        return aggregates.budget_alert(self.get_monthly_expenses(today), self._budget)

    def budget_used(self, today: date | None = None) -> float:
        return aggregates.budget_used(self.get_monthly_expenses(today), self._budget)
