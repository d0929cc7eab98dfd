"""Tests for the analytics engine."""

import random

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from moneynote.analytics import AnalyticsEngine, TREND_MONTHS
from moneynote.config import AnalyticsSettings
from moneynote.models.analytics import BudgetLevel, Period
from moneynote.models.finance import Category, Transaction


NOW = datetime(2024, 5, 20, 12, 0)

_counter = iter(range(1_000_000))


def make_tx(kind, amount, category, when=NOW - timedelta(days=1)):
    return Transaction(
        id=f"t{next(_counter)}",
        kind=kind,
        amount=Decimal(str(amount)),
        category=category,
        date=when,
        created_at=when,
        updated_at=when,
    )


def make_category(name, color="#123456", kind="expense", budget_limit=0):
    return Category(
        id=f"c-{name}-{kind}",
        name=name,
        kind=kind,
        color=color,
        icon="circle",
        budget_limit=Decimal(str(budget_limit)),
    )


@pytest.fixture
def engine():
    return AnalyticsEngine(AnalyticsSettings())


class TestScenario:
    """Two food expenses and a salary, all within the current month."""

    @pytest.fixture
    def transactions(self):
        return [
            make_tx("expense", 50, "Food", NOW - timedelta(days=3)),
            make_tx("expense", 30, "Food", NOW - timedelta(days=2)),
            make_tx("income", 1000, "Salary", NOW - timedelta(days=1)),
        ]

    def test_balance(self, engine, transactions):
        assert engine.compute_balance(transactions) == Decimal("920")

    def test_breakdown(self, engine, transactions):
        categories = [make_category("Food", color="#C1C1C1")]

        breakdown = engine.compute_category_breakdown(
            transactions, categories, Period.MONTH, NOW
        )

        assert len(breakdown) == 1
        assert breakdown[0].name == "Food"
        assert breakdown[0].amount == Decimal("80")
        assert breakdown[0].color == "#C1C1C1"
        assert breakdown[0].percentage == 100.0

    def test_period_totals(self, engine, transactions):
        totals = engine.compute_period_totals(transactions, Period.MONTH, NOW)
        assert totals.income == Decimal("1000")
        assert totals.expense == Decimal("80")
        assert totals.net == Decimal("920")


class TestBalance:
    def test_empty(self, engine):
        assert engine.compute_balance([]) == Decimal("0")

    def test_independent_of_order(self, engine):
        """Test balance equals income sum minus expense sum in any order."""
        transactions = [
            make_tx("income" if i % 3 == 0 else "expense", Decimal(i) + Decimal("0.25"), "X")
            for i in range(30)
        ]
        income = sum(t.amount for t in transactions if t.kind == "income")
        expense = sum(t.amount for t in transactions if t.kind == "expense")

        shuffled = list(transactions)
        random.Random(7).shuffle(shuffled)

        assert engine.compute_balance(transactions) == income - expense
        assert engine.compute_balance(shuffled) == income - expense

    def test_not_period_scoped(self, engine):
        old = make_tx("income", 100, "Salary", datetime(2019, 1, 1))
        assert engine.compute_balance([old]) == Decimal("100")


class TestPeriodWindows:
    """Tests for week/month/year windows."""

    def test_week(self, engine):
        window = engine.period_window(Period.WEEK, NOW)
        assert window.start == NOW - timedelta(days=7)
        assert window.end == NOW

    def test_month(self, engine):
        window = engine.period_window(Period.MONTH, NOW)
        assert window.start == datetime(2024, 5, 1)
        assert window.end == NOW

    def test_year(self, engine):
        window = engine.period_window("year", NOW)
        assert window.start == datetime(2024, 1, 1)

    def test_window_bounds_are_inclusive(self, engine):
        start = NOW - timedelta(days=7)
        transactions = [
            make_tx("expense", 1, "A", start),
            make_tx("expense", 2, "A", NOW),
            make_tx("expense", 4, "A", start - timedelta(microseconds=1)),
            make_tx("expense", 8, "A", NOW + timedelta(seconds=1)),
        ]
        totals = engine.compute_period_totals(transactions, Period.WEEK, NOW)
        assert totals.expense == Decimal("3")

    def test_aware_now_is_normalized(self, engine):
        aware = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)
        window = engine.period_window(Period.MONTH, aware)
        assert window.end.tzinfo is None

    def test_previous_month_excluded_from_month(self, engine):
        transactions = [
            make_tx("income", 500, "Salary", datetime(2024, 4, 30, 23, 59)),
            make_tx("income", 700, "Salary", datetime(2024, 5, 1, 0, 0)),
        ]
        totals = engine.compute_period_totals(transactions, Period.MONTH, NOW)
        assert totals.income == Decimal("700")

        year = engine.compute_period_totals(transactions, Period.YEAR, NOW)
        assert year.income == Decimal("1200")


class TestCategoryBreakdown:
    """Tests for grouping, ordering, colors and percentages."""

    def test_sorted_by_amount_descending(self, engine):
        transactions = [
            make_tx("expense", 10, "Small"),
            make_tx("expense", 90, "Big"),
            make_tx("expense", 40, "Medium"),
        ]
        breakdown = engine.compute_category_breakdown(transactions, [], Period.MONTH, NOW)
        assert [item.name for item in breakdown] == ["Big", "Medium", "Small"]

    def test_ties_keep_first_seen_order(self, engine):
        transactions = [
            make_tx("expense", 25, "Beta"),
            make_tx("expense", 25, "Alpha"),
            make_tx("expense", 25, "Gamma"),
        ]
        breakdown = engine.compute_category_breakdown(transactions, [], Period.MONTH, NOW)
        assert [item.name for item in breakdown] == ["Beta", "Alpha", "Gamma"]

    def test_income_is_ignored(self, engine):
        transactions = [make_tx("income", 1000, "Salary"), make_tx("expense", 5, "Food")]
        breakdown = engine.compute_category_breakdown(transactions, [], Period.MONTH, NOW)
        assert [item.name for item in breakdown] == ["Food"]

    def test_fallback_color_on_missing_category(self):
        engine = AnalyticsEngine(AnalyticsSettings(fallback_color="#abcdef"))
        breakdown = engine.compute_category_breakdown(
            [make_tx("expense", 5, "Renamed")],
            [make_category("Original", color="#111111")],
            Period.MONTH,
            NOW,
        )
        assert breakdown[0].color == "#abcdef"

    def test_name_collision_uses_first_category(self, engine):
        categories = [
            make_category("Other", color="#0284c7", kind="income"),
            make_category("Other", color="#7c3aed", kind="expense"),
        ]
        breakdown = engine.compute_category_breakdown(
            [make_tx("expense", 5, "Other")], categories, Period.MONTH, NOW
        )
        assert breakdown[0].color == "#0284c7"

    def test_sums_and_percentages(self, engine):
        """Amounts add up to the period expense total and shares to 100."""
        transactions = [
            make_tx("expense", amount, name)
            for amount, name in [(33.3, "A"), (12.1, "B"), (7, "A"), (19.95, "C"), (1, "D")]
        ]
        breakdown = engine.compute_category_breakdown(transactions, [], Period.MONTH, NOW)
        totals = engine.compute_period_totals(transactions, Period.MONTH, NOW)

        assert sum(item.amount for item in breakdown) == totals.expense
        assert sum(item.percentage for item in breakdown) == pytest.approx(100.0)

    def test_empty_period(self, engine):
        old = make_tx("expense", 5, "Food", datetime(2023, 1, 1))
        assert engine.compute_category_breakdown([old], [], Period.MONTH, NOW) == []

    def test_zero_total_gives_zero_percentages(self, engine):
        transactions = [make_tx("expense", 0, "Free"), make_tx("expense", 0, "Gift")]
        breakdown = engine.compute_category_breakdown(transactions, [], Period.MONTH, NOW)
        assert [item.percentage for item in breakdown] == [0.0, 0.0]

    def test_top_categories_limited_to_five(self, engine):
        transactions = [make_tx("expense", i + 1, f"Cat{i}") for i in range(8)]
        top = engine.top_categories(transactions, [], Period.MONTH, NOW)
        assert [item.name for item in top] == ["Cat7", "Cat6", "Cat5", "Cat4", "Cat3"]

    def test_repeated_calls_are_identical(self, engine):
        transactions = [make_tx("expense", 3, "A"), make_tx("expense", 4, "B")]
        first = engine.compute_category_breakdown(transactions, [], Period.WEEK, NOW)
        second = engine.compute_category_breakdown(transactions, [], Period.WEEK, NOW)
        assert first == second


class TestMonthlyTrend:
    """Tests for the six-month trend."""

    def test_empty_input_gives_six_zero_points(self, engine):
        trend = engine.compute_monthly_trend([], NOW)
        assert len(trend) == TREND_MONTHS == 6
        assert all(p.income == 0 and p.expense == 0 for p in trend)

    def test_months_oldest_first_across_year_boundary(self, engine):
        trend = engine.compute_monthly_trend([], datetime(2024, 2, 15))
        assert [(p.year, p.month) for p in trend] == [
            (2023, 9), (2023, 10), (2023, 11), (2023, 12), (2024, 1), (2024, 2),
        ]
        assert [p.label for p in trend] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]

    def test_bucketing_uses_calendar_months(self, engine):
        transactions = [
            make_tx("income", 1000, "Salary", datetime(2024, 1, 31, 23, 59)),
            make_tx("expense", 40, "Food", datetime(2024, 2, 1, 0, 0)),
            make_tx("expense", 10, "Food", datetime(2024, 2, 10)),
            make_tx("expense", 99, "Food", datetime(2023, 8, 31)),
            make_tx("expense", 77, "Food", datetime(2024, 3, 1)),
        ]
        trend = engine.compute_monthly_trend(transactions, datetime(2024, 2, 15))

        by_month = {(p.year, p.month): p for p in trend}
        assert by_month[(2024, 1)].income == Decimal("1000")
        assert by_month[(2024, 2)].expense == Decimal("50")
        assert sum(p.expense for p in trend) == Decimal("50")

    def test_last_day_counts_until_midnight(self, engine):
        """A transaction late on a month's last day belongs to that month."""
        transactions = [make_tx("expense", 25, "Food", datetime(2024, 4, 30, 23, 59))]

        trend = engine.compute_monthly_trend(transactions, NOW)

        by_month = {(p.year, p.month): p for p in trend}
        assert by_month[(2024, 4)].expense == Decimal("25")
        assert by_month[(2024, 5)].expense == 0

    def test_ignores_period_selector_history_limits(self, engine):
        """The trend covers months before the current month's window."""
        transactions = [make_tx("expense", 15, "Food", datetime(2024, 1, 5))]
        trend = engine.compute_monthly_trend(transactions, NOW)
        assert trend[0].month == 12
        assert trend[1].expense == Decimal("15")


class TestSpendingQueries:
    def test_monthly_spending(self, engine):
        transactions = [
            make_tx("expense", 20, "Food", datetime(2024, 5, 2)),
            make_tx("expense", 5, "Food", datetime(2024, 4, 2)),
            make_tx("income", 500, "Salary", datetime(2024, 5, 2)),
        ]
        assert engine.monthly_spending(transactions, 2024, 5) == Decimal("20")

    def test_category_spending(self, engine):
        transactions = [
            make_tx("expense", 20, "Food", datetime(2024, 5, 2)),
            make_tx("expense", 7, "Travel", datetime(2024, 5, 3)),
            make_tx("expense", 5, "Food", datetime(2024, 6, 2)),
        ]
        spent = engine.category_spending(
            transactions, "Food", datetime(2024, 5, 1), datetime(2024, 5, 31)
        )
        assert spent == Decimal("20")


class TestBudgetCheck:
    """Tests for budget warning and exceeded levels."""

    @pytest.fixture
    def categories(self):
        return [
            make_category("Food", budget_limit=100),
            make_category("Travel", budget_limit=100),
            make_category("Fun", budget_limit=100),
            make_category("Unbudgeted", budget_limit=0),
        ]

    def test_levels(self, engine, categories):
        transactions = [
            make_tx("expense", 80, "Food"),
            make_tx("expense", 100, "Travel"),
            make_tx("expense", 79.99, "Fun"),
            make_tx("expense", 500, "Unbudgeted"),
        ]
        statuses = {s.category_name: s for s in engine.check_budgets(transactions, categories, NOW)}

        assert set(statuses) == {"Food", "Travel", "Fun"}
        assert statuses["Food"].level == BudgetLevel.WARNING
        assert statuses["Food"].percentage == pytest.approx(80.0)
        assert statuses["Travel"].level == BudgetLevel.EXCEEDED
        assert statuses["Fun"].level == BudgetLevel.OK

    def test_only_current_month_counts(self, engine, categories):
        transactions = [
            make_tx("expense", 90, "Food", datetime(2024, 4, 30)),
            make_tx("expense", 10, "Food", datetime(2024, 5, 1)),
        ]
        food = next(
            s for s in engine.check_budgets(transactions, categories, NOW)
            if s.category_name == "Food"
        )
        assert food.spent == Decimal("10")
        assert food.level == BudgetLevel.OK

    def test_income_does_not_count(self, engine, categories):
        transactions = [make_tx("income", 500, "Food")]
        assert not engine.budget_alerts(transactions, categories, NOW)

    def test_alerts_filter(self, engine, categories):
        transactions = [make_tx("expense", 150, "Travel"), make_tx("expense", 10, "Food")]
        alerts = engine.budget_alerts(transactions, categories, NOW)
        assert [a.category_name for a in alerts] == ["Travel"]
        assert alerts[0].overage == Decimal("50")

    def test_custom_warning_ratio(self, categories):
        engine = AnalyticsEngine(AnalyticsSettings(budget_warning_ratio=0.5))
        statuses = engine.check_budgets([make_tx("expense", 50, "Food")], categories, NOW)
        assert statuses[0].level == BudgetLevel.WARNING


class TestReport:
    def test_build_report(self, engine):
        transactions = [
            make_tx("expense", 50, "Food"),
            make_tx("income", 1000, "Salary"),
            make_tx("expense", 25, "Travel", datetime(2024, 1, 10)),
        ]
        report = engine.build_report(transactions, [], Period.MONTH, NOW)

        assert report.balance == Decimal("925")
        assert report.totals.expense == Decimal("50")
        assert [item.name for item in report.top_categories] == ["Food"]
        assert len(report.monthly_trend) == 6
        assert report.monthly_trend[1].expense == Decimal("25")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
