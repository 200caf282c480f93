"""Write-boundary validation.

Everything that reaches the record store has gone through these functions,
so aggregation can treat stored values as trusted.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from spendwise.domain.models import Category, Money, TransactionType
from spendwise.errors import ValidationError

CENT = Decimal("0.01")


def parse_amount(value: Any) -> Money:
    """Parse a monetary amount.

    Args:
        value: Amount as str, int, float or Decimal (e.g. "12.50", 12.5).

    Returns:
        Non-negative Money rounded to two decimal places.

    Raises:
        ValidationError: If the value is not numeric, not finite, negative or too
            large to hold to the cent.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid amount: {value!r}")

    try:
        if isinstance(value, float):
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {value!r}") from None

    if not amount.is_finite():
        raise ValidationError(f"Amount must be finite: {value!r}")
    if amount < 0:
        raise ValidationError(f"Amount must not be negative: {value!r}")

    try:
        return Money(amount.quantize(CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError(f"Amount is too large: {value!r}") from None


def parse_date(value: Any) -> date:
    """Parse a calendar date.

    Args:
        value: date, datetime (time is dropped) or ISO string (YYYY-MM-DD).

    Returns:
        The calendar date.

    Raises:
        ValidationError: If the value is not a recognisable date.
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        # Rebuild so date-likes without real fields (pandas NaT) are refused
        try:
            return date(value.year, value.month, value.day)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid date: {value!r}") from None
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_category(value: Any) -> Category:
    """Parse an expense category, case-insensitively.

    Raises:
        ValidationError: If the value is not one of the known categories.
    """
    if isinstance(value, Category):
        return value
    if isinstance(value, str):
        for category in Category:
            if category.value.lower() == value.strip().lower():
                return category
    choices = ", ".join(c.value for c in Category)
    raise ValidationError(f"Unknown category: {value!r} (choose from {choices})")


def parse_transaction_type(value: Any) -> TransactionType:
    """Parse a transaction type ('fund' or 'expense')."""
    if isinstance(value, TransactionType):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("fund", "funds", "income"):
            return TransactionType.FUND
        if normalized in ("expense", "expenses"):
            return TransactionType.EXPENSE
    raise ValidationError(f"Unknown transaction type: {value!r}")


def parse_text(value: Any, field_name: str) -> str:
    """Normalise an optional free-text field to a stripped string."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text, got {type(value).__name__}")
    return value.strip()
