"""Tests for spendwise.domain.aggregates pure functions."""

from datetime import date, datetime
from decimal import Decimal

from spendwise.domain.aggregates import (
    balance,
    budget_alert,
    budget_used,
    category_breakdown,
    month_total,
    monthly_trend,
    sum_by_type,
    today_total,
    total,
)
from spendwise.domain.models import Category, Expense, Fund, Money

CREATED = datetime(2024, 1, 1, 9, 0)


def fund(txn_id: int, amount: str, day: date, source: str = "Salary") -> Fund:
    return Fund(id=txn_id, amount=Money(Decimal(amount)), date=day, created_at=CREATED, source=source)


def expense(txn_id: int, amount: str, day: date, category: Category = Category.FOOD, note: str = "") -> Expense:
    return Expense(
        id=txn_id, amount=Money(Decimal(amount)), date=day, created_at=CREATED, category=category, note=note
    )


class TestTotals:
    """Tests for total and balance."""

    def test_empty_total_is_zero(self) -> None:
        """Should return 0 for an empty collection."""
        assert total([]) == Decimal("0")

    def test_sums_exactly(self) -> None:
        """Should sum decimals without float error."""
        records = [expense(1, "0.10", date(2024, 1, 1)), expense(2, "0.20", date(2024, 1, 1))]
        assert total(records) == Decimal("0.30")

    def test_balance_is_funds_minus_expenses(self) -> None:
        """Should subtract expenses from funds."""
        funds = [fund(1, "1000.00", date(2024, 1, 1)), fund(2, "250.50", date(2024, 1, 2))]
        expenses = [expense(1, "300.25", date(2024, 1, 3))]

        assert balance(funds, expenses) == Decimal("950.25")

    def test_equal_fund_and_expense_leave_zero(self) -> None:
        """Should be zero when a fund and an expense cancel out."""
        assert balance([fund(1, "42.00", date(2024, 1, 1))], [expense(1, "42.00", date(2024, 1, 1))]) == 0

    def test_balance_can_go_negative(self) -> None:
        """Should allow overspending."""
        assert balance([], [expense(1, "5.00", date(2024, 1, 1))]) == Decimal("-5.00")

    def test_sum_by_type(self) -> None:
        """Should return funds, expenses and balance together."""
        result = sum_by_type([fund(1, "10.00", date(2024, 1, 1))], [expense(1, "4.00", date(2024, 1, 1))])
        assert result == (Decimal("10.00"), Decimal("4.00"), Decimal("6.00"))


class TestPeriodTotals:
    """Tests for today_total and month_total."""

    def test_today_total_only_counts_today(self) -> None:
        """Should ignore other days."""
        expenses = [
            expense(1, "5.00", date(2024, 3, 15)),
            expense(2, "7.00", date(2024, 3, 15)),
            expense(3, "100.00", date(2024, 3, 14)),
        ]
        assert today_total(expenses, date(2024, 3, 15)) == Decimal("12.00")

    def test_month_total_matches_month_and_year(self) -> None:
        """Should ignore the same month in a different year."""
        expenses = [
            expense(1, "5.00", date(2024, 3, 1)),
            expense(2, "6.00", date(2024, 3, 31)),
            expense(3, "50.00", date(2023, 3, 15)),
            expense(4, "70.00", date(2024, 2, 29)),
        ]
        assert month_total(expenses, date(2024, 3, 15)) == Decimal("11.00")


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_sums_per_category(self) -> None:
        """Should sum each category exactly once."""
        expenses = [
            expense(1, "10.00", date(2024, 1, 1), Category.FOOD),
            expense(2, "2.50", date(2024, 1, 2), Category.FOOD),
            expense(3, "80.00", date(2024, 1, 3), Category.BILLS),
        ]
        result = category_breakdown(expenses)

        assert result == {Category.FOOD: Decimal("12.50"), Category.BILLS: Decimal("80.00")}

    def test_omits_categories_without_expenses(self) -> None:
        """Should not zero-fill missing categories."""
        result = category_breakdown([expense(1, "1.00", date(2024, 1, 1), Category.TRAVEL)])

        assert list(result) == [Category.TRAVEL]
        assert Category.FOOD not in result

    def test_total_matches_total_expenses(self) -> None:
        """Should not double count."""
        expenses = [
            expense(i, f"{i}.25", date(2024, 1, i), category)
            for i, category in enumerate(Category, start=1)
        ]
        assert sum(category_breakdown(expenses).values()) == total(expenses)

    def test_empty(self) -> None:
        """Should return an empty mapping with no expenses."""
        assert category_breakdown([]) == {}


class TestMonthlyTrend:
    """Tests for monthly_trend."""

    def test_always_six_keys(self) -> None:
        """Should include every month in the window even without expenses."""
        result = monthly_trend([], date(2024, 3, 15))

        assert list(result) == ["Oct 2023", "Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024", "Mar 2024"]
        assert all(amount == 0 for amount in result.values())

    def test_folds_expenses_into_months(self) -> None:
        """Should sum expenses per month."""
        expenses = [
            expense(1, "10.00", date(2024, 3, 1)),
            expense(2, "5.00", date(2024, 3, 20)),
            expense(3, "7.50", date(2023, 10, 31)),
        ]
        result = monthly_trend(expenses, date(2024, 3, 15))

        assert result["Mar 2024"] == Decimal("15.00")
        assert result["Oct 2023"] == Decimal("7.50")
        assert result["Feb 2024"] == 0

    def test_excludes_expenses_outside_window(self) -> None:
        """Should ignore older and future expenses."""
        expenses = [
            expense(1, "99.00", date(2023, 9, 30)),
            expense(2, "99.00", date(2024, 4, 1)),
            expense(3, "99.00", date(2023, 3, 10)),
        ]
        result = monthly_trend(expenses, date(2024, 3, 15))

        assert len(result) == 6
        assert sum(result.values()) == 0


class TestBudget:
    """Tests for budget_alert and budget_used."""

    def test_alert_at_eighty_percent(self) -> None:
        """Should alert once 80% is reached."""
        assert budget_alert(Money(Decimal("800")), Money(Decimal("1000")))
        assert not budget_alert(Money(Decimal("799.99")), Money(Decimal("1000")))

    def test_budget_used_fraction(self) -> None:
        """Should return the spent fraction."""
        assert budget_used(Money(Decimal("250")), Money(Decimal("1000"))) == 0.25

    def test_budget_used_without_budget(self) -> None:
        """Should return 0 when no budget is set."""
        assert budget_used(Money(Decimal("250")), Money(Decimal("0"))) == 0.0
