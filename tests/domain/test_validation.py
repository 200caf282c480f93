"""Tests for spendwise.domain.validation."""

from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest

from spendwise.domain.models import Category, TransactionType
from spendwise.domain.validation import parse_amount, parse_category, parse_date, parse_text, parse_transaction_type
from spendwise.errors import ValidationError


class TestParseAmount:
    """Tests for parse_amount."""

    def test_parses_string(self) -> None:
        """Should parse decimal strings exactly."""
        assert parse_amount("12.50") == Decimal("12.50")

    def test_parses_float_without_binary_noise(self) -> None:
        """Should not carry float representation error."""
        assert parse_amount(0.1) == Decimal("0.10")

    def test_rounds_to_cents(self) -> None:
        """Should round half up to two places."""
        assert parse_amount("1.005") == Decimal("1.01")

    def test_strips_thousands_separator(self) -> None:
        """Should accept 1,234.56."""
        assert parse_amount("1,234.56") == Decimal("1234.56")

    def test_zero_is_allowed(self) -> None:
        """Should accept zero."""
        assert parse_amount(0) == Decimal("0.00")

    @pytest.mark.parametrize("value", ["abc", "", None, True, "-5", -0.01, "nan", "inf", float("inf")])
    def test_rejects_invalid(self, value: object) -> None:
        """Should reject non-numeric, non-finite and negative input."""
        with pytest.raises(ValidationError):
            parse_amount(value)

    @pytest.mark.parametrize("value", ["1e30", "9" * 29])
    def test_rejects_amounts_too_large_for_cents(self, value: str) -> None:
        """Should refuse amounts that cannot be held to the cent."""
        with pytest.raises(ValidationError, match="too large"):
            parse_amount(value)

    def test_validation_error_is_value_error(self) -> None:
        """Should be catchable as ValueError."""
        with pytest.raises(ValueError):
            parse_amount("twelve")


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_string(self) -> None:
        """Should parse YYYY-MM-DD."""
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_datetime_drops_time(self) -> None:
        """Should keep only the calendar date."""
        assert parse_date(datetime(2024, 1, 15, 23, 30)) == date(2024, 1, 15)

    def test_iso_timestamp_string(self) -> None:
        """Should truncate ISO timestamps to the date."""
        assert parse_date("2024-01-15T10:30:00Z") == date(2024, 1, 15)

    def test_pandas_timestamp(self) -> None:
        """Should accept a pandas Timestamp like any datetime."""
        assert parse_date(pd.Timestamp("2024-01-05 08:00")) == date(2024, 1, 5)

    def test_rejects_nat(self) -> None:
        """Should refuse pandas NaT even though it passes as a datetime."""
        with pytest.raises(ValidationError):
            parse_date(pd.NaT)

    def test_rejects_garbage(self) -> None:
        """Should reject non-dates."""
        with pytest.raises(ValidationError):
            parse_date("15th of January")


class TestParseCategory:
    """Tests for parse_category."""

    def test_case_insensitive(self) -> None:
        """Should match regardless of case."""
        assert parse_category("food") is Category.FOOD
        assert parse_category(" BILLS ") is Category.BILLS

    def test_rejects_unknown(self) -> None:
        """Should list the valid choices."""
        with pytest.raises(ValidationError, match="Food, Travel, Shopping, Bills, Other"):
            parse_category("Rent")


class TestParseTransactionType:
    """Tests for parse_transaction_type."""

    def test_accepts_plural_tab_names(self) -> None:
        """Should accept 'funds' and 'expenses'."""
        assert parse_transaction_type("funds") is TransactionType.FUND
        assert parse_transaction_type("Expense") is TransactionType.EXPENSE

    def test_rejects_unknown(self) -> None:
        """Should reject anything else."""
        with pytest.raises(ValidationError):
            parse_transaction_type("transfer")


class TestParseText:
    """Tests for parse_text."""

    def test_none_becomes_empty(self) -> None:
        """Should treat missing text as empty."""
        assert parse_text(None, "note") == ""

    def test_rejects_non_text(self) -> None:
        """Should reject numbers."""
        with pytest.raises(ValidationError, match="note must be text"):
            parse_text(12, "note")
