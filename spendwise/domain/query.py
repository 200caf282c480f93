"""Transaction filtering and sorting.

``query_transactions`` is the pure pipeline; ``QueryEngine`` binds it to a
record store and memoises results until the store changes.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Protocol

from spendwise.dates import end_of_day, same_day, same_month, start_of_day, week_ago
from spendwise.domain.models import Expense, Fund, TaggedTransaction
from spendwise.domain.validation import parse_category, parse_date
from spendwise.errors import ValidationError

logger = logging.getLogger(__name__)

TABS = ("all", "funds", "expenses")
PERIODS = ("all", "today", "week", "month", "custom")
ALL = "all"


@dataclass(frozen=True)
class TransactionQuery:
    """Filter settings for the transaction history view."""

    tab: str = ALL
    period: str = ALL
    category: str = ALL
    search: str = ""
    from_date: date | None = None
    to_date: date | None = None

    def __post_init__(self) -> None:
        if self.tab not in TABS:
            raise ValidationError(f"Unknown tab: {self.tab!r} (choose from {', '.join(TABS)})")
        if self.period not in PERIODS:
            raise ValidationError(f"Unknown period: {self.period!r} (choose from {', '.join(PERIODS)})")
        if self.category != ALL:
            object.__setattr__(self, "category", parse_category(self.category).value)
        if self.from_date is not None:
            object.__setattr__(self, "from_date", parse_date(self.from_date))
        if self.to_date is not None:
            object.__setattr__(self, "to_date", parse_date(self.to_date))

    def with_changes(self, **changes: Any) -> "TransactionQuery":
        """Copy with some fields replaced.

        Leaving the custom period drops the custom date range.
        """
        updated = replace(self, **changes)
        if updated.period != "custom" and (updated.from_date or updated.to_date):
            updated = replace(updated, from_date=None, to_date=None)
        return updated


def select_by_tab(funds: Iterable[Fund], expenses: Iterable[Expense], tab: str) -> list[TaggedTransaction]:
    """Pick the source collection(s), tagging each record with its type."""
    selected: list[TaggedTransaction] = []
    if tab in (ALL, "funds"):
        selected.extend(TaggedTransaction.tag(f) for f in funds)
    if tab in (ALL, "expenses"):
        selected.extend(TaggedTransaction.tag(e) for e in expenses)
    return selected


def in_period(txn_date: date, query: TransactionQuery, now: datetime) -> bool:
    """Check whether a transaction date passes the period filter.

    Args:
        txn_date: Date the transaction is attributed to.
        query: Active filters.
        now: Current local time.

    Returns:
        True if the date is inside the selected period.
    """
    period = query.period
    if period == "today":
        return same_day(txn_date, now.date())
    if period == "week":
        # Dates are taken at midnight, so the lower bound is exactly 7*24h back
        return start_of_day(txn_date) >= week_ago(now)
    if period == "month":
        return same_month(txn_date, now.date())
    if period == "custom":
        moment = start_of_day(txn_date)
        if query.from_date is not None and moment < start_of_day(query.from_date):
            return False
        if query.to_date is not None and moment > end_of_day(query.to_date):
            return False
    return True


def search_text(txn: TaggedTransaction) -> str:
    """Lower-cased text a search query is matched against."""
    category = txn.category.value if txn.category is not None else ""
    return f"{txn.source or ''} {category} {txn.note or ''} {txn.amount}".lower()


def query_transactions(
    funds: Sequence[Fund],
    expenses: Sequence[Expense],
    query: TransactionQuery,
    now: datetime,
) -> list[TaggedTransaction]:
    """Filter and sort the combined transaction history.

    Stages run in a fixed order: type selection, period, category, free-text
    search, then a stable sort by date with the newest first.

    Args:
        funds: Fund records in insertion order.
        expenses: Expense records in insertion order.
        query: Filters to apply.
        now: Current local time.

    Returns:
        Tagged transactions, newest date first.
    """
    transactions = select_by_tab(funds, expenses, query.tab)

    if query.period != ALL:
        transactions = [t for t in transactions if in_period(t.date, query, now)]

    if query.category != ALL:
        # Funds have no category and never match
        transactions = [t for t in transactions if t.category is not None and t.category.value == query.category]

    needle = query.search.lower()
    if needle:
        transactions = [t for t in transactions if needle in search_text(t)]

    return sorted(transactions, key=lambda t: t.date, reverse=True)


class RecordSource(Protocol):
    """What the engine needs from a record store."""

    @property
    def funds(self) -> Sequence[Fund]: ...

    @property
    def expenses(self) -> Sequence[Expense]: ...

    @property
    def version(self) -> int: ...


class QueryEngine:
    """Answers filtered queries over a record store, memoising per filter."""

    def __init__(self, store: RecordSource, max_cached: int = 32) -> None:
        self._store = store
        self._max_cached = max_cached
        self._cache: dict[tuple[TransactionQuery, date], list[TaggedTransaction]] = {}
        self._cache_version = store.version

    def query_transactions(
        self,
        tab: str = ALL,
        period: str = ALL,
        category: str = ALL,
        search_query: str = "",
        custom_range: tuple[date | str | None, date | str | None] | None = None,
        now: datetime | None = None,
    ) -> list[TaggedTransaction]:
        """Filtered, newest-first transactions.

        Raises:
            ValidationError: If a filter value is not recognised.
        """
        from_date, to_date = custom_range or (None, None)
        query = TransactionQuery(
            tab=tab,
            period=period,
            category=category,
            search=search_query,
            from_date=from_date,
            to_date=to_date,
        )
        return self.run(query, now)

    def run(self, query: TransactionQuery, now: datetime | None = None) -> list[TaggedTransaction]:
        """Execute a prepared query."""
        if now is None:
            now = datetime.now()

        if self._store.version != self._cache_version:
            self._cache.clear()
            self._cache_version = self._store.version

        # "week" depends on the time of day, so it is never cached
        key = (query, now.date())
        if query.period != "week" and key in self._cache:
            return list(self._cache[key])

        result = query_transactions(self._store.funds, self._store.expenses, query, now)
        logger.debug("Query %s matched %d transactions", query, len(result))

        if query.period != "week":
            if len(self._cache) >= self._max_cached:
                self._cache.pop(next(iter(self._cache)))
            self._cache[key] = result
        return list(result)

    def all_transactions(self, now: datetime | None = None) -> list[TaggedTransaction]:
        """Every transaction, newest first (used for exports)."""
        return self.run(TransactionQuery(), now)
