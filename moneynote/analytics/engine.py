"""
Analytics Engine

DESIGN DECISION: Analytics are DETERMINISTIC and side-effect free.
The engine never touches the document store. Callers load transactions
and categories through the repositories and pass them in, together with
the reference instant "now", so identical input always gives identical
output.

Transactions are joined to categories by NAME (Transaction.category ==
Category.name). A transaction whose category was renamed or deleted
falls back to a neutral color; it is not re-linked.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from moneynote.config import AnalyticsSettings
from moneynote.models.analytics import (
    BudgetLevel,
    BudgetStatus,
    CategoryBreakdownItem,
    DateWindow,
    FinancialReport,
    Period,
    PeriodTotals,
    TrendPoint,
)
from moneynote.models.finance import Category, Transaction, TransactionKind, as_local_naive


TREND_MONTHS = 6
TOP_CATEGORY_COUNT = 5

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

ZERO = Decimal("0")


def _total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """(year, month) moved by offset months; offset may be negative."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


class AnalyticsEngine:
    """
    Computes balances, period totals, category breakdowns, monthly
    trends and budget status from already-loaded records.

    Holds only configuration; every method is reentrant.
    """

    def __init__(self, settings: Optional[AnalyticsSettings] = None):
        self._settings = settings or AnalyticsSettings()

    # -------------------------------------------------------------------------
    # Balance and period totals
    # -------------------------------------------------------------------------

    def compute_balance(self, transactions: Iterable[Transaction]) -> Decimal:
        """All-time income minus all-time expense."""
        balance = ZERO
        for t in transactions:
            if t.kind == TransactionKind.INCOME:
                balance += t.amount
            else:
                balance -= t.amount
        return balance

    def period_window(self, period: Period, now: datetime) -> DateWindow:
        """
        The date window of a period selector, ending at now.

        week:  [now - 7 days, now]
        month: [first day of now's month 00:00, now]
        year:  [January 1st of now's year 00:00, now]
        """
        period = Period(period)
        now = as_local_naive(now)
        if period == Period.WEEK:
            start = now - timedelta(days=7)
        elif period == Period.MONTH:
            start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        else:
            start = now.replace(
                month=1, day=1, hour=0, minute=0, second=0, microsecond=0
            )
        return DateWindow(start=start, end=now)

    def filter_period(
        self,
        transactions: Iterable[Transaction],
        period: Period,
        now: datetime,
    ) -> list[Transaction]:
        window = self.period_window(period, now)
        return [t for t in transactions if window.contains(t.date)]

    def compute_period_totals(
        self,
        transactions: Iterable[Transaction],
        period: Period,
        now: datetime,
    ) -> PeriodTotals:
        """Income and expense sums of the transactions inside the period."""
        window = self.period_window(period, now)
        in_period = [t for t in transactions if window.contains(t.date)]

        return PeriodTotals(
            period=period,
            window=window,
            income=_total(t for t in in_period if t.kind == TransactionKind.INCOME),
            expense=_total(t for t in in_period if t.kind == TransactionKind.EXPENSE),
        )

    # -------------------------------------------------------------------------
    # Category breakdown
    # -------------------------------------------------------------------------

    @staticmethod
    def lookup_category(
        categories: Iterable[Category],
        name: str,
    ) -> Optional[Category]:
        """
        Find the category a transaction refers to by name.

        First match wins when names collide; None on a miss.
        """
        for category in categories:
            if category.name == name:
                return category
        return None

    def category_color(self, categories: Iterable[Category], name: str) -> str:
        category = self.lookup_category(categories, name)
        return category.color if category else self._settings.fallback_color

    def compute_category_breakdown(
        self,
        transactions: Iterable[Transaction],
        categories: Sequence[Category],
        period: Period,
        now: datetime,
    ) -> list[CategoryBreakdownItem]:
        """
        Expenses in the period grouped by category name.

        Sorted by amount, largest first; equal amounts keep the order in
        which their category was first seen. Percentages are shares of
        the period's expense total, or 0 when that total is 0.
        """
        groups: dict[str, Decimal] = {}
        for t in self.filter_period(transactions, period, now):
            if t.kind != TransactionKind.EXPENSE:
                continue
            groups[t.category] = groups.get(t.category, ZERO) + t.amount

        expense_total = sum(groups.values(), ZERO)
        ranked = sorted(groups.items(), key=lambda item: item[1], reverse=True)

        return [
            CategoryBreakdownItem(
                name=name,
                amount=amount,
                color=self.category_color(categories, name),
                percentage=(
                    float(amount / expense_total * 100) if expense_total > 0 else 0.0
                ),
            )
            for name, amount in ranked
        ]

    def top_categories(
        self,
        transactions: Iterable[Transaction],
        categories: Sequence[Category],
        period: Period,
        now: datetime,
    ) -> list[CategoryBreakdownItem]:
        """The five largest expense categories of the period."""
        breakdown = self.compute_category_breakdown(transactions, categories, period, now)
        return breakdown[:TOP_CATEGORY_COUNT]

    # -------------------------------------------------------------------------
    # Monthly trend
    # -------------------------------------------------------------------------

    def compute_monthly_trend(
        self,
        transactions: Iterable[Transaction],
        now: datetime,
    ) -> list[TrendPoint]:
        """
        Income and expense of the six calendar months ending with now's
        month, oldest first. Months without transactions are zero points.
        """
        now = as_local_naive(now)
        months = [
            _shift_month(now.year, now.month, -offset)
            for offset in range(TREND_MONTHS - 1, -1, -1)
        ]
        points = {
            (year, month): TrendPoint(year=year, month=month, label=MONTH_LABELS[month - 1])
            for year, month in months
        }

        for t in transactions:
            point = points.get((t.date.year, t.date.month))
            if point is None:
                continue
            if t.kind == TransactionKind.INCOME:
                point.income += t.amount
            else:
                point.expense += t.amount

        return [points[key] for key in months]

    # -------------------------------------------------------------------------
    # Spending queries
    # -------------------------------------------------------------------------

    def monthly_spending(
        self,
        transactions: Iterable[Transaction],
        year: int,
        month: int,
    ) -> Decimal:
        """Total expense of one calendar month."""
        return _total(
            t for t in transactions
            if t.kind == TransactionKind.EXPENSE
            and t.date.year == year
            and t.date.month == month
        )

    def category_spending(
        self,
        transactions: Iterable[Transaction],
        category_name: str,
        start: datetime,
        end: datetime,
    ) -> Decimal:
        """Total expense of one category name within [start, end]."""
        return _total(
            t for t in transactions
            if t.kind == TransactionKind.EXPENSE
            and t.category == category_name
            and start <= t.date <= end
        )

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def check_budgets(
        self,
        transactions: Sequence[Transaction],
        categories: Iterable[Category],
        now: Optional[datetime] = None,
    ) -> list[BudgetStatus]:
        """
        Current-month spending of every category that has a budget limit.

        A category is at WARNING once spending reaches the warning ratio
        (80% by default) of its limit and EXCEEDED at 100%.
        """
        now = as_local_naive(now or datetime.now())
        warning_ratio = Decimal(str(self._settings.budget_warning_ratio))

        statuses = []
        for category in categories:
            if category.budget_limit <= 0:
                continue

            spent = _total(
                t for t in transactions
                if t.kind == TransactionKind.EXPENSE
                and t.category == category.name
                and t.date.year == now.year
                and t.date.month == now.month
            )
            limit = category.budget_limit

            if spent >= limit:
                level = BudgetLevel.EXCEEDED
            elif spent >= limit * warning_ratio:
                level = BudgetLevel.WARNING
            else:
                level = BudgetLevel.OK

            statuses.append(BudgetStatus(
                category_id=category.id,
                category_name=category.name,
                spent=spent,
                limit=limit,
                percentage=float(spent / limit * 100),
                level=level,
            ))

        return statuses

    def budget_alerts(
        self,
        transactions: Sequence[Transaction],
        categories: Iterable[Category],
        now: Optional[datetime] = None,
    ) -> list[BudgetStatus]:
        """Only the budgets at WARNING or EXCEEDED."""
        return [
            status
            for status in self.check_budgets(transactions, categories, now)
            if status.needs_alert
        ]

    # -------------------------------------------------------------------------
    # Report
    # -------------------------------------------------------------------------

    def build_report(
        self,
        transactions: Sequence[Transaction],
        categories: Sequence[Category],
        period: Period,
        now: datetime,
    ) -> FinancialReport:
        """Everything the reports dashboard shows for one period."""
        breakdown = self.compute_category_breakdown(transactions, categories, period, now)
        return FinancialReport(
            generated_at=now,
            balance=self.compute_balance(transactions),
            totals=self.compute_period_totals(transactions, period, now),
            breakdown=breakdown,
            top_categories=breakdown[:TOP_CATEGORY_COUNT],
            monthly_trend=self.compute_monthly_trend(transactions, now),
        )
