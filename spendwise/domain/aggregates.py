"""Pure functions for balance and expense aggregations.

This module contains the functional core for statistics:
- No I/O operations (no database, no console, no files)
- No side effects
- "Today" is always passed in, never read from the clock

Amounts are validated at write time, so these are plain summations.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from spendwise.dates import month_label, same_day, same_month, trailing_months
from spendwise.domain.models import ZERO, Category, Expense, Fund, Money

BUDGET_ALERT_THRESHOLD = Decimal("0.8")
DEFAULT_BUDGET = Money(Decimal("1000"))
TREND_MONTHS = 6


def total(records: Iterable[Fund | Expense]) -> Money:
    """Sum of amounts; zero for an empty collection."""
    return Money(sum((r.amount for r in records), ZERO))


def balance(funds: Iterable[Fund], expenses: Iterable[Expense]) -> Money:
    """Total funds minus total expenses."""
    return Money(total(funds) - total(expenses))


def today_total(expenses: Iterable[Expense], today: date) -> Money:
    """Sum of expenses dated on ``today``."""
    return total(e for e in expenses if same_day(e.date, today))


def month_total(expenses: Iterable[Expense], today: date) -> Money:
    """Sum of expenses dated in the calendar month of ``today``."""
    return total(e for e in expenses if same_month(e.date, today))


def category_breakdown(expenses: Iterable[Expense]) -> dict[Category, Money]:
    """Total spent per category.

    Categories without expenses are absent, not zero-filled. Keys appear in
    order of first occurrence.
    """
    breakdown: dict[Category, Money] = {}
    for expense in expenses:
        breakdown[expense.category] = Money(breakdown.get(expense.category, ZERO) + expense.amount)
    return breakdown


def monthly_trend(expenses: Iterable[Expense], today: date, months: int = TREND_MONTHS) -> dict[str, Money]:
    """Expenses per month over a trailing window.

    Args:
        expenses: Expenses to fold in.
        today: Any date in the last month of the window.
        months: Window length, current month included.

    Returns:
        Dictionary of exactly ``months`` labels ("Jan 2024"), oldest first,
        each starting at zero. Expenses outside the window are ignored.
    """
    window = trailing_months(today, months)
    trend: dict[str, Money] = {month_label(m): ZERO for m in window}
    by_month = {(m.year, m.month): month_label(m) for m in window}

    for expense in expenses:
        label = by_month.get((expense.date.year, expense.date.month))
        if label is not None:
            trend[label] = Money(trend[label] + expense.amount)

    return trend


def budget_used(month_spent: Money, budget: Money) -> float:
    """Fraction of the monthly budget already spent (0.0 for no budget)."""
    if budget <= 0:
        return 0.0
    return float(month_spent / budget)


def budget_alert(month_spent: Money, budget: Money, threshold: Decimal = BUDGET_ALERT_THRESHOLD) -> bool:
    """True once spending this month reaches ``threshold`` of the budget."""
    return month_spent >= budget * threshold


def sum_by_type(funds: Sequence[Fund], expenses: Sequence[Expense]) -> tuple[Money, Money, Money]:
    """Return (total_funds, total_expenses, balance) in one pass per collection."""
    funds_total = total(funds)
    expenses_total = total(expenses)
    return funds_total, expenses_total, Money(funds_total - expenses_total)
