"""
Analytics Result Models

Outputs of the AnalyticsEngine. These are derived views, never persisted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class Period(str, Enum):
    """The user-chosen aggregation window."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class BudgetLevel(str, Enum):
    OK = "ok"
    WARNING = "warning"      # spent >= warning ratio of the limit
    EXCEEDED = "exceeded"    # spent >= the limit


class DateWindow(BaseModel):
    """A date range, inclusive on both ends."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


class PeriodTotals(BaseModel):
    period: Period
    window: DateWindow
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class CategoryBreakdownItem(BaseModel):
    """Summed expenses of one category name within a period."""

    name: str
    amount: Decimal
    color: str
    percentage: float = Field(
        ...,
        description="Share of the period's expense total, 0-100"
    )


class TrendPoint(BaseModel):
    """One calendar month of the rolling trend."""

    year: int
    month: int = Field(..., ge=1, le=12)
    label: str = Field(
        ...,
        description="Short month name, e.g. 'Jan'"
    )
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")


class BudgetStatus(BaseModel):
    """Current-month spending of a category against its budget limit."""

    category_id: str
    category_name: str
    spent: Decimal
    limit: Decimal
    percentage: float
    level: BudgetLevel

    @property
    def overage(self) -> Decimal:
        """Amount spent beyond the limit (0 when within it)."""
        return max(self.spent - self.limit, Decimal("0"))

    @property
    def needs_alert(self) -> bool:
        return self.level != BudgetLevel.OK


class FinancialReport(BaseModel):
    """Everything the reports dashboard renders for one period."""

    generated_at: datetime
    balance: Decimal
    totals: PeriodTotals
    breakdown: list[CategoryBreakdownItem] = Field(default_factory=list)
    top_categories: list[CategoryBreakdownItem] = Field(default_factory=list)
    monthly_trend: list[TrendPoint] = Field(default_factory=list)
